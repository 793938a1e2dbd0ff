"""
User dictionary merging for userdic-merge.

The first-pass tokenizer knows nothing about the user dictionary, so a
single user entry such as 東京都 comes out split as 東京 | 都. This module
rejoins such runs: it scans the token stream left to right and, at each
position, collapses the longest run of consecutive tokens whose
concatenated text is a user dictionary entry.

The scan is greedy and never backtracks. Downstream consumers depend on
that exact output, so do not replace it with an optimal segmentation.
"""

import logging
from typing import AbstractSet, List, Optional, Sequence, Union

from userdic_merge.dictionary import VocabularySet
from userdic_merge.raw_types import MergedToken, MergeResult, Token

logger = logging.getLogger(__name__)


# =============================================================================
# Candidate Construction
# =============================================================================

def collect_candidates(
    tokens: Sequence[Token],
    start: int,
    limit: int,
    vocabulary: VocabularySet,
) -> List[str]:
    """
    Build the candidate strings for windows starting at ``start``.

    ``candidates[w - 1]`` is the concatenated text of ``tokens[start:start + w]``.
    Growth stops as soon as the text is no longer a prefix of any entry,
    because no longer window can match after that.

    Args:
        tokens: First-pass tokens
        start: Index of the first token of every window
        limit: Largest window size to consider
        vocabulary: The user dictionary

    Returns:
        Candidate strings, shortest window first
    """
    candidates = []
    text = ""
    for token in tokens[start:start + limit]:
        text += token.text
        if not vocabulary.has_prefix(text):
            break
        candidates.append(text)
    return candidates


# =============================================================================
# Merge Engine
# =============================================================================

def passthrough(tokens: Sequence[Token]) -> List[MergedToken]:
    """Convert first-pass tokens to merged tokens one-to-one."""
    return [MergedToken.from_token(token) for token in tokens]


def merge_user_dictionary_words(
    tokens: Sequence[Token],
    vocabulary: Union[VocabularySet, AbstractSet[str]],
    max_length: Optional[int] = None,
) -> MergeResult:
    """
    Merge runs of consecutive tokens that spell a user dictionary entry.

    At each position, windows are tried from ``min(max_length, remaining)``
    tokens down to one; the first (longest) window whose text is in the
    vocabulary becomes a single MergedToken. Tokens with no match pass
    through unchanged.

    Note that ``max_length`` is measured in characters of the longest
    entry but caps the window size in tokens.

    Args:
        tokens: First-pass tokens, in order
        vocabulary: The user dictionary
        max_length: Largest window size; defaults to the longest entry's
            character count (1 for an empty vocabulary)

    Returns:
        MergeResult of the merged tokens and the entries that were matched

    Example:
        >>> vocab = build_vocabulary(["東京都"])
        >>> result = merge_user_dictionary_words(tokens, vocab)
        >>> [t.text for t in result.tokens]
        ['東京都', 'に']
    """
    if not isinstance(vocabulary, VocabularySet):
        vocabulary = VocabularySet(vocabulary)
    if max_length is None:
        max_length = vocabulary.max_entry_length

    merged_tokens = []
    matches = set()
    i = 0
    n = len(tokens)

    while i < n:
        limit = min(max_length, n - i)
        candidates = collect_candidates(tokens, i, limit, vocabulary) if limit > 0 else []

        matched = False

        # Longest window first
        for window_size in range(len(candidates), 0, -1):
            candidate = candidates[window_size - 1]
            if candidate in vocabulary:
                run = tokens[i:i + window_size]
                merged_tokens.append(MergedToken.from_run(run, candidate))
                matches.add(candidate)
                if window_size > 1:
                    logger.debug(
                        "Merged %d tokens at position %d into %r",
                        window_size, run[0].position, candidate,
                    )
                i += window_size
                matched = True
                break

        if not matched:
            merged_tokens.append(MergedToken.from_token(tokens[i]))
            i += 1

    logger.info(
        "Merged %d tokens into %d (%d user dictionary entries matched)",
        n, len(merged_tokens), len(matches),
    )
    return MergeResult(tokens=merged_tokens, matches=frozenset(matches))


def merge_tokens(
    tokens: Sequence[Token],
    vocabulary: Optional[Union[VocabularySet, AbstractSet[str]]] = None,
) -> MergeResult:
    """
    Merge tokens against an optional user dictionary.

    Without a vocabulary every token passes through and no entries match.
    """
    if vocabulary is None:
        return MergeResult(tokens=passthrough(tokens), matches=frozenset())
    return merge_user_dictionary_words(tokens, vocabulary)
