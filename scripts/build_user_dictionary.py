#!/usr/bin/env python3
"""
User Dictionary Builder for userdic-merge.

Compiles plain-text word lists (one entry per line, '#' comments allowed)
into a deduplicated user dictionary CSV with a single 'UserDictionary'
column, ready for the userdic-merge command.

Usage:
    python scripts/build_user_dictionary.py words.txt [more.txt ...] --output user_dictionary.csv
    python scripts/build_user_dictionary.py words.txt --merge existing.csv --output user_dictionary.csv
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from userdic_merge.dictionary import load_vocabulary, read_word_list, write_vocabulary
from userdic_merge.exceptions import UserDicMergeError

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


# ============================================================================
# Paths
# ============================================================================

DEFAULT_OUTPUT = Path("user_dictionary.csv")


# ============================================================================
# Main
# ============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Build a userdic-merge user dictionary CSV from word lists"
    )
    parser.add_argument(
        'word_lists',
        type=Path,
        nargs='+',
        help="Plain-text word lists, one entry per line"
    )
    parser.add_argument(
        '--merge', '-m',
        type=Path,
        action='append',
        default=[],
        help="Existing user dictionary CSV to include (repeatable)"
    )
    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"Output user dictionary path (default: {DEFAULT_OUTPUT})"
    )

    args = parser.parse_args()

    start_time = time.time()
    words = []

    try:
        for path in args.word_lists:
            entries = read_word_list(path)
            logger.info(f"Read {len(entries):,} words from {path}")
            words.extend(entries)

        for path in args.merge:
            vocabulary = load_vocabulary(path)
            logger.info(f"Merged {len(vocabulary):,} entries from {path}")
            words.extend(vocabulary)

        count = write_vocabulary(args.output, words)
    except UserDicMergeError as e:
        logger.error(str(e))
        sys.exit(1)

    elapsed = time.time() - start_time
    logger.info(f"Wrote {count:,} unique entries ({len(words) - count:,} duplicates dropped) "
                f"to {args.output} in {elapsed:.2f} seconds")


if __name__ == '__main__':
    main()
