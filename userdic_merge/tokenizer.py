"""
First-pass tokenizer for userdic-merge.

Wraps MeCab with the IPADIC dictionary. MeCab reports only surface forms,
so each surface is aligned back against the input text to recover UTF-8
byte offsets. Text MeCab skips (spaces, line breaks) becomes tokens of its
own, so the token stream covers every byte of the input.

Any object with a ``tokenize(text) -> List[Token]`` method can stand in
for the MeCab source (see TokenSource).
"""

import logging
from typing import Iterable, List, Optional, Protocol

from userdic_merge.exceptions import TokenizationError
from userdic_merge.raw_types import Token

logger = logging.getLogger(__name__)

# MeCab node status values for sentence boundaries
MECAB_BOS_NODE = 2
MECAB_EOS_NODE = 3

LINE_TERMINATOR = "\n"


# =============================================================================
# Token Source Interface
# =============================================================================

class TokenSource(Protocol):
    """Anything that turns text into an ordered list of first-pass tokens."""

    def tokenize(self, text: str) -> List[Token]:
        ...


# =============================================================================
# Offset Alignment
# =============================================================================

def _append_token(tokens: List[Token], text: str, byte_start: int) -> int:
    """Append a token at the next position and return its byte_end."""
    byte_end = byte_start + len(text.encode("utf-8"))
    tokens.append(Token(
        text=text,
        byte_start=byte_start,
        byte_end=byte_end,
        position=len(tokens),
        position_length=1,
    ))
    return byte_end


def tokens_from_surfaces(text: str, surfaces: Iterable[str]) -> List[Token]:
    """
    Align surface forms against the text they were produced from.

    Each surface must occur in ``text`` at or after the end of the previous
    one. Any span the surfaces do not cover (typically whitespace dropped by
    the analyzer) is emitted as its own token, so consecutive tokens always
    meet and their texts join back into ``text``.

    Args:
        text: The analyzed text
        surfaces: Surface forms in order

    Returns:
        Contiguous tokens with UTF-8 byte offsets, positions 0..n-1,
        position_length 1

    Raises:
        TokenizationError: If a surface cannot be found in the remaining text
    """
    tokens = []
    char_pos = 0
    byte_pos = 0

    for surface in surfaces:
        start = text.find(surface, char_pos)
        if start < 0:
            raise TokenizationError(
                f"Analyzer output {surface!r} does not match the input text",
                position=char_pos,
            )
        if start > char_pos:
            byte_pos = _append_token(tokens, text[char_pos:start], byte_pos)
        byte_pos = _append_token(tokens, surface, byte_pos)
        char_pos = start + len(surface)

    if char_pos < len(text):
        _append_token(tokens, text[char_pos:], byte_pos)

    return tokens


# =============================================================================
# MeCab Source
# =============================================================================

class MecabTokenSource:
    """
    MeCab + IPADIC token source.

    The tagger is created on first use.
    """

    def __init__(self, mecab_args: Optional[str] = None):
        self._mecab_args = mecab_args
        self._tagger = None

    @property
    def tagger(self):
        """Get the MeCab tagger, creating it if necessary."""
        if self._tagger is None:
            self._tagger = self._create_tagger()
        return self._tagger

    def _create_tagger(self):
        try:
            import MeCab

            args = self._mecab_args
            if args is None:
                import ipadic
                args = ipadic.MECAB_ARGS
            tagger = MeCab.Tagger(args)
        except (ImportError, RuntimeError) as e:
            raise TokenizationError(f"Failed to create the MeCab tokenizer: {e}") from e

        logger.info("Created MeCab tagger (%s)", args)
        return tagger

    def surfaces(self, text: str) -> List[str]:
        """Get MeCab surface forms for text, in order."""
        try:
            node = self.tagger.parseToNode(text)
        except (RuntimeError, UnicodeError) as e:
            raise TokenizationError(f"MeCab failed to analyze the text: {e}") from e

        result = []
        while node:
            if node.stat not in (MECAB_BOS_NODE, MECAB_EOS_NODE) and node.surface:
                result.append(node.surface)
            node = node.next
        return result

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize text into first-pass tokens."""
        tokens = []
        byte_offset = 0

        # MeCab treats its input as one sentence; analyze line by line and
        # emit each "\n" as a token. A "\r" before it stays in the line and
        # comes back as an uncovered span.
        lines = text.split(LINE_TERMINATOR)
        for index, line in enumerate(lines):
            for token in tokens_from_surfaces(line, self.surfaces(line) if line else []):
                byte_offset = _append_token(tokens, token.text, byte_offset)
            if index < len(lines) - 1:
                byte_offset = _append_token(tokens, LINE_TERMINATOR, byte_offset)

        logger.info("Tokenized %d characters into %d tokens", len(text), len(tokens))
        return tokens


# =============================================================================
# Module-level API
# =============================================================================

# Module-level singleton
_SOURCE: Optional[MecabTokenSource] = None


def get_token_source() -> MecabTokenSource:
    """Get the default MeCab token source, creating it if necessary."""
    global _SOURCE

    if _SOURCE is None:
        _SOURCE = MecabTokenSource()

    return _SOURCE


def tokenize(text: str) -> List[Token]:
    """
    Tokenize text with the default MeCab + IPADIC source.

    Raises:
        TokenizationError: If MeCab cannot be loaded or fails on the text
    """
    return get_token_source().tokenize(text)


def unload_tagger():
    """Drop the default source so its tagger can be freed."""
    global _SOURCE
    _SOURCE = None
