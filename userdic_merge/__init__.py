"""
userdic-merge: Rejoin tokenizer output using a user dictionary

A first-pass morphological tokenizer (MeCab + IPADIC) splits text into
tokens. Words the user knows as a single unit, such as 東京都, can come out
split (東京 | 都). userdic-merge collapses every such run back into one
token while keeping byte offsets and positions intact.

Basic Usage:
    import userdic_merge

    vocab = userdic_merge.build_vocabulary(["東京都"])
    result = userdic_merge.process_text("東京都に行く", vocab)
    for token in result.tokens:
        print(token.text, token.byte_start, token.byte_end)
"""

from typing import Optional

from userdic_merge.dictionary import (
    VocabularySet,
    build_vocabulary,
    load_vocabulary,
    write_vocabulary,
)
from userdic_merge.exceptions import (
    InputError,
    OutputError,
    SerializationError,
    TokenizationError,
    UserDicMergeError,
    VocabularyLoadError,
)
from userdic_merge.merge import merge_tokens, merge_user_dictionary_words, passthrough
from userdic_merge.raw_types import MergedToken, MergeResult, Token
from userdic_merge.tokenizer import MecabTokenSource, TokenSource, tokenize
from userdic_merge.writer import write_tokens_csv

__version__ = "0.1.0"


# =============================================================================
# Main API
# =============================================================================

def process_text(
    text: str,
    vocabulary: Optional[VocabularySet] = None,
    token_source: Optional[TokenSource] = None,
) -> MergeResult:
    """
    Tokenize text and merge the tokens against a user dictionary.

    Args:
        text: Text to analyze (may be empty)
        vocabulary: User dictionary; without one tokens pass through
        token_source: First-pass tokenizer; defaults to MeCab + IPADIC

    Returns:
        MergeResult of merged tokens and matched entries

    Raises:
        TokenizationError: If the token source fails
    """
    if token_source is None:
        tokens = tokenize(text)
    else:
        tokens = token_source.tokenize(text)
    return merge_tokens(tokens, vocabulary)


def get_version() -> str:
    """Get the library version."""
    return __version__


# =============================================================================
# Module-level exports
# =============================================================================

__all__ = [
    # Data classes
    "Token",
    "MergedToken",
    "MergeResult",
    "VocabularySet",
    # Token source
    "TokenSource",
    "MecabTokenSource",
    "tokenize",
    # Merging
    "merge_user_dictionary_words",
    "merge_tokens",
    "passthrough",
    "process_text",
    # Vocabulary I/O
    "build_vocabulary",
    "load_vocabulary",
    "write_vocabulary",
    # Output
    "write_tokens_csv",
    "get_version",
    # Exceptions
    "UserDicMergeError",
    "InputError",
    "OutputError",
    "TokenizationError",
    "VocabularyLoadError",
    "SerializationError",
    # Version
    "__version__",
]
