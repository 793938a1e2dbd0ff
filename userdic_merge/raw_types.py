"""
Lightweight data structures shared by the token source, merge engine and sink.

Tokens are immutable once produced. Offsets are UTF-8 byte offsets into the
analyzed text; positions are logical token indices.
"""

from dataclasses import dataclass
from typing import List, NamedTuple


@dataclass(frozen=True, slots=True)
class Token:
    """
    A first-pass token from morphological analysis.

    Attributes:
        text: The surface form (as it appears in text)
        byte_start: UTF-8 byte offset where the token starts
        byte_end: UTF-8 byte offset one past the token's last byte
        position: Logical position index of the token
        position_length: Number of positions the token spans
    """
    text: str
    byte_start: int
    byte_end: int
    position: int
    position_length: int = 1

    def __repr__(self) -> str:
        return (
            f"Token({self.text!r}, {self.byte_start}-{self.byte_end}, "
            f"pos={self.position}/{self.position_length})"
        )


@dataclass(frozen=True, slots=True)
class MergedToken:
    """
    A token in the merged output stream.

    Either a verbatim copy of one first-pass token or the concatenation of a
    run of consecutive tokens that spells a user dictionary entry.

    Attributes:
        text: Surface text (concatenation of the covered tokens' text)
        byte_start: byte_start of the first covered token
        byte_end: byte_end of the last covered token
        position: position of the first covered token
        position_length: position_length of the last covered token
        merged_count: Number of first-pass tokens covered (1 = pass-through)
    """
    text: str
    byte_start: int
    byte_end: int
    position: int
    position_length: int
    merged_count: int = 1

    @classmethod
    def from_token(cls, token: Token) -> "MergedToken":
        """Copy a first-pass token unchanged."""
        return cls(
            text=token.text,
            byte_start=token.byte_start,
            byte_end=token.byte_end,
            position=token.position,
            position_length=token.position_length,
        )

    @classmethod
    def from_run(cls, tokens: List[Token], text: str) -> "MergedToken":
        """Collapse a non-empty run of consecutive tokens into one."""
        first_token = tokens[0]
        last_token = tokens[-1]
        return cls(
            text=text,
            byte_start=first_token.byte_start,
            byte_end=last_token.byte_end,
            position=first_token.position,
            position_length=last_token.position_length,
            merged_count=len(tokens),
        )

    @property
    def is_merged(self) -> bool:
        """True if this token covers more than one first-pass token."""
        return self.merged_count > 1

    def as_row(self) -> tuple:
        """Fields in token CSV column order."""
        return (self.text, self.byte_start, self.byte_end, self.position, self.position_length)

    def __repr__(self) -> str:
        return (
            f"MergedToken({self.text!r}, {self.byte_start}-{self.byte_end}, "
            f"pos={self.position}/{self.position_length}, n={self.merged_count})"
        )


class MergeResult(NamedTuple):
    """Output of one merge pass."""
    tokens: List[MergedToken]
    matches: frozenset
