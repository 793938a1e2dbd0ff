"""
CLI interface for userdic-merge.

Usage:
    userdic-merge input.txt output.csv
    userdic-merge input.txt output.csv user_dictionary.csv
    userdic-merge input.txt output.csv user_dictionary.csv --matches matched.csv
"""

import argparse
import logging
import sys
from typing import List, Optional

from userdic_merge import __version__
from userdic_merge.constants import TEXT_ENCODING
from userdic_merge.dictionary import load_vocabulary, stage_vocabulary
from userdic_merge.exceptions import InputError, UserDicMergeError
from userdic_merge.merge import merge_tokens
from userdic_merge.tokenizer import tokenize
from userdic_merge.writer import commit_all, stage_tokens_csv

logger = logging.getLogger(__name__)


# ============================================================================
# Input
# ============================================================================

def read_text_file(path: str) -> str:
    """Read a UTF-8 text file, raising InputError with the path on failure."""
    try:
        with open(path, "r", encoding=TEXT_ENCODING) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise InputError(
            f"Input file '{path}' is not valid UTF-8: {e.reason}", path=path
        ) from e
    except OSError as e:
        raise InputError(
            f"Could not read input file '{path}': {e.strerror or e}", path=path
        ) from e


# ============================================================================
# Pipeline
# ============================================================================

def run(
    input_path: str,
    output_path: str,
    user_dictionary_path: Optional[str] = None,
    matches_path: Optional[str] = None,
) -> int:
    """
    Tokenize a file, merge against the user dictionary and write the CSV.

    The user dictionary is loaded before any output is produced, and the
    token CSV and matches file are both fully written before either one
    replaces its target.

    Returns:
        Number of tokens written
    """
    text = read_text_file(input_path)
    tokens = tokenize(text)

    vocabulary = None
    if user_dictionary_path is not None:
        vocabulary = load_vocabulary(user_dictionary_path)

    result = merge_tokens(tokens, vocabulary)

    staged = [stage_tokens_csv(output_path, result.tokens)]
    if matches_path is not None:
        try:
            staged.append(stage_vocabulary(matches_path, result.matches))
        except UserDicMergeError:
            staged[0].discard()
            raise

    commit_all(staged)
    logger.info("Wrote %d tokens to %s", staged[0].count, output_path)
    return staged[0].count


# ============================================================================
# Main
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="userdic-merge",
        description="Tokenize Japanese text and rejoin user dictionary words",
    )
    parser.add_argument(
        "input",
        help="Input text file (UTF-8)",
    )
    parser.add_argument(
        "output",
        help="Output token CSV file",
    )
    parser.add_argument(
        "user_dictionary",
        nargs="?",
        help="User dictionary CSV with a 'UserDictionary' column",
    )
    parser.add_argument(
        "--matches", "-m",
        metavar="PATH",
        help="Also write the user dictionary entries that matched",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress to stderr",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"userdic-merge {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    if args.matches and args.user_dictionary is None:
        parser.error("--matches requires a user dictionary")

    try:
        run(args.input, args.output, args.user_dictionary, args.matches)
    except UserDicMergeError as e:
        logger.debug("Aborted", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Tokenization complete; output written to {args.output}")


if __name__ == "__main__":
    main()
