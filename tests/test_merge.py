"""Unit tests for the user dictionary merge engine."""

import logging

import pytest

from userdic_merge import (
    MergedToken,
    Token,
    build_vocabulary,
    merge_tokens,
    merge_user_dictionary_words,
    passthrough,
)
from userdic_merge.merge import collect_candidates

from conftest import make_tokens


def texts(result):
    return [t.text for t in result.tokens]


def rows(result):
    return [t.as_row() for t in result.tokens]


# Scenarios
# ---------------------------------------------------------------------------


def test_tokyo_to_is_merged(tokyo_tokens):
    """東京 + 都 collapses into 東京都; に passes through."""
    result = merge_user_dictionary_words(tokyo_tokens, build_vocabulary(["東京都"]))
    assert rows(result) == [("東京都", 0, 9, 0, 1), ("に", 9, 12, 2, 1)]
    assert result.matches == frozenset({"東京都"})
    assert result.tokens[0].merged_count == 2
    assert result.tokens[0].is_merged
    assert not result.tokens[1].is_merged


def test_empty_vocabulary_passes_tokens_through():
    tokens = [Token("猫", 0, 3, 0, 1), Token("が", 3, 6, 1, 1)]
    result = merge_user_dictionary_words(tokens, build_vocabulary([]))
    assert result.tokens == [MergedToken.from_token(t) for t in tokens]
    assert result.matches == frozenset()


def test_entry_longer_than_remaining_tokens():
    tokens = [Token("犬", 0, 3, 0, 1)]
    result = merge_user_dictionary_words(tokens, build_vocabulary(["犬猫"]))
    assert rows(result) == [("犬", 0, 3, 0, 1)]
    assert result.matches == frozenset()


def test_empty_token_sequence():
    result = merge_user_dictionary_words([], build_vocabulary(["東京都"]))
    assert result.tokens == []
    assert result.matches == frozenset()


# Matching rules
# ---------------------------------------------------------------------------


def test_longest_match_wins():
    tokens = make_tokens("A", "B", "C", "D")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["AB", "ABC"]))
    assert texts(result) == ["ABC", "D"]
    assert result.matches == frozenset({"ABC"})


def test_shorter_entry_used_when_longer_does_not_fit():
    tokens = make_tokens("A", "B", "X")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["AB", "ABC"]))
    assert texts(result) == ["AB", "X"]
    assert result.matches == frozenset({"AB"})


def test_greedy_does_not_backtrack():
    """A-B is taken first even though B-C-D would cover more tokens."""
    tokens = make_tokens("A", "B", "C", "D")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["AB", "BCD"]))
    assert texts(result) == ["AB", "C", "D"]
    assert result.matches == frozenset({"AB"})


def test_substring_of_single_token_never_merges():
    tokens = make_tokens("東京都庁", "に")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["東京"]))
    assert texts(result) == ["東京都庁", "に"]
    assert result.matches == frozenset()


def test_match_must_align_with_token_boundaries():
    tokens = make_tokens("東", "京都", "に")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["東京"]))
    assert texts(result) == ["東", "京都", "に"]


def test_matching_is_case_sensitive():
    tokens = make_tokens("Py", "thon")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["python"]))
    assert texts(result) == ["Py", "thon"]


def test_matching_is_whitespace_sensitive():
    tokens = make_tokens("New", "York")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["New York"]))
    assert texts(result) == ["New", "York"]


def test_single_token_entry_is_recorded_as_match():
    tokens = make_tokens("猫", "が")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["猫"]))
    assert rows(result) == [t.as_row() for t in passthrough(tokens)]
    assert result.matches == frozenset({"猫"})


def test_repeated_entry_merges_every_occurrence():
    tokens = make_tokens("東京", "都", "と", "東京", "都")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["東京都"]))
    assert texts(result) == ["東京都", "と", "東京都"]
    assert result.matches == frozenset({"東京都"})


def test_plain_set_is_accepted():
    tokens = make_tokens("東京", "都")
    result = merge_user_dictionary_words(tokens, {"東京都"})
    assert texts(result) == ["東京都"]


# Window bound
# ---------------------------------------------------------------------------


def test_window_bound_uses_character_count():
    """Two one-character tokens fit under a bound of 2 characters."""
    tokens = make_tokens("東", "京")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["東京"]))
    assert texts(result) == ["東京"]


def test_explicit_max_length_caps_window():
    tokens = make_tokens("A", "B", "C")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["ABC"]), max_length=2)
    assert texts(result) == ["A", "B", "C"]


def test_blank_only_vocabulary_never_merges():
    tokens = make_tokens("A", "B")
    vocab = build_vocabulary([""])
    assert vocab.max_entry_length == 0
    result = merge_user_dictionary_words(tokens, vocab)
    assert texts(result) == ["A", "B"]
    assert result.matches == frozenset()


# Bookkeeping
# ---------------------------------------------------------------------------


def test_merged_offsets_come_from_run_ends():
    tokens = [
        Token("国立", 10, 16, 4, 1),
        Token("国会", 16, 22, 5, 1),
        Token("図書館", 22, 31, 6, 2),
        Token("へ", 31, 34, 8, 1),
    ]
    result = merge_user_dictionary_words(tokens, build_vocabulary(["国立国会図書館"]))
    merged = result.tokens[0]
    assert merged.text == "国立国会図書館"
    assert merged.byte_start == 10
    assert merged.byte_end == 31
    assert merged.position == 4
    assert merged.position_length == 2
    assert merged.merged_count == 3
    assert result.tokens[1].as_row() == ("へ", 31, 34, 8, 1)


@pytest.mark.parametrize("vocab", [
    [],
    ["東京都"],
    ["AB", "ABC", "BCD", "東京"],
    ["東京都に", "に", "都に"],
])
def test_content_is_preserved(vocab):
    tokens = make_tokens("A", "B", "C", "D", "東京", "都", "に", "A", "B")
    result = merge_user_dictionary_words(tokens, build_vocabulary(vocab))
    assert "".join(texts(result)) == "".join(t.text for t in tokens)
    assert result.tokens[0].byte_start == 0
    assert result.tokens[-1].byte_end == tokens[-1].byte_end
    for token in result.tokens:
        assert token.text in result.matches or token.merged_count == 1
    assert result.matches <= set(vocab)


def test_disjoint_vocabulary_is_identity():
    tokens = make_tokens("今日", "は", "晴れ")
    result = merge_user_dictionary_words(tokens, build_vocabulary(["明日", "雨"]))
    assert result.tokens == passthrough(tokens)
    assert result.matches == frozenset()


def test_merge_is_logged(caplog, tokyo_tokens):
    with caplog.at_level(logging.DEBUG, logger="userdic_merge.merge"):
        merge_user_dictionary_words(tokyo_tokens, build_vocabulary(["東京都"]))
    assert "'東京都'" in caplog.text
    assert "Merged 3 tokens into 2" in caplog.text


# Helpers
# ---------------------------------------------------------------------------


def test_collect_candidates_stops_at_dead_prefix():
    tokens = make_tokens("A", "B", "C", "D")
    vocab = build_vocabulary(["ABX", "AB"])
    assert collect_candidates(tokens, 0, 4, vocab) == ["A", "AB"]


def test_collect_candidates_respects_limit():
    tokens = make_tokens("A", "B", "C")
    vocab = build_vocabulary(["ABC"])
    assert collect_candidates(tokens, 0, 2, vocab) == ["A", "AB"]


def test_merge_tokens_without_vocabulary(tokyo_tokens):
    result = merge_tokens(tokyo_tokens)
    assert result.tokens == passthrough(tokyo_tokens)
    assert result.matches == frozenset()


def test_merge_tokens_with_vocabulary(tokyo_tokens):
    result = merge_tokens(tokyo_tokens, build_vocabulary(["東京都"]))
    assert texts(result) == ["東京都", "に"]
