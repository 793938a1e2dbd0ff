"""Shared fixtures for userdic-merge tests."""

import pytest

from userdic_merge import Token


def make_tokens(*surfaces):
    """Build contiguous tokens from surfaces, UTF-8 offsets, positions 0..n-1."""
    tokens = []
    offset = 0
    for position, surface in enumerate(surfaces):
        end = offset + len(surface.encode("utf-8"))
        tokens.append(Token(surface, offset, end, position, 1))
        offset = end
    return tokens


class FakeTokenSource:
    """Token source that splits on '|' instead of running MeCab."""

    def __init__(self):
        self.calls = []

    def tokenize(self, text):
        self.calls.append(text)
        if not text:
            return []
        return make_tokens(*text.split("|"))


@pytest.fixture
def tokyo_tokens():
    """東京 | 都 | に"""
    return [
        Token("東京", 0, 6, 0, 1),
        Token("都", 6, 9, 1, 1),
        Token("に", 9, 12, 2, 1),
    ]


@pytest.fixture
def fake_source():
    return FakeTokenSource()


def write_csv(path, text):
    """Write text as UTF-8 with a BOM, like the files downstream tools produce."""
    path.write_bytes(b"\xef\xbb\xbf" + text.encode("utf-8"))
    return path
