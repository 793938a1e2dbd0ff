"""
User dictionary (vocabulary) for userdic-merge.

A user dictionary is a set of known spellings that the first-pass
tokenizer splits into several tokens. It is read from a CSV file with a
single recognized column, ``UserDictionary``:

    UserDictionary
    東京都
    国立国会図書館

Entries are stored in a marisa_trie.Trie so the merge engine can ask
whether a partial run of tokens is still the prefix of some entry.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Union

import marisa_trie

from userdic_merge.constants import CSV_ENCODING, CSV_LINE_TERMINATOR, USER_DICTIONARY_COLUMN
from userdic_merge.exceptions import (
    InputError,
    SerializationError,
    VocabularyLoadError,
)
from userdic_merge.writer import StagedFile, stage_rows

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# ============================================================================
# Vocabulary Set
# ============================================================================

class VocabularySet:
    """
    Read-only set of user dictionary entries.

    Membership is exact (case- and whitespace-sensitive). Duplicate entries
    collapse silently.
    """

    __slots__ = ("_entries", "_trie", "_max_entry_length")

    def __init__(self, entries: Iterable[str] = ()):
        self._entries = frozenset(entries)
        # blank entries stay out of the trie; has_prefix handles them
        self._trie = marisa_trie.Trie([entry for entry in self._entries if entry])
        # Character count, not byte count. Used as a cap on token windows.
        self._max_entry_length = max(
            (len(entry) for entry in self._entries), default=1
        )

    @property
    def max_entry_length(self) -> int:
        """Longest entry in characters, or 1 for an empty vocabulary."""
        return self._max_entry_length

    def __contains__(self, word: object) -> bool:
        return word in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"VocabularySet({len(self)} entries, max_entry_length={self._max_entry_length})"

    def has_prefix(self, prefix: str) -> bool:
        """Check if any entry starts with the given prefix."""
        if not self._entries:
            return False
        if not prefix:
            return True
        try:
            next(iter(self._trie.iterkeys(prefix)))
            return True
        except StopIteration:
            return False

    def entries(self) -> frozenset:
        """Get all entries."""
        return self._entries


def build_vocabulary(entries: Iterable[str]) -> VocabularySet:
    """
    Build a vocabulary from raw strings.

    Duplicates and blank strings are accepted. Blank entries are members but
    can never match a run of non-empty tokens.
    """
    return VocabularySet(entries)


# ============================================================================
# CSV Loading
# ============================================================================

def _iter_entries(reader, path: str) -> Iterator[str]:
    """Yield entries from a csv.reader positioned at the header row."""
    try:
        header = next(reader, None)
    except csv.Error as e:
        raise VocabularyLoadError(
            f"Malformed CSV header: {e}", path=path, line=reader.line_num
        ) from e

    if header is None:
        raise VocabularyLoadError(
            f"Missing header row; expected a '{USER_DICTIONARY_COLUMN}' column",
            path=path,
        )
    if USER_DICTIONARY_COLUMN not in header:
        raise VocabularyLoadError(
            f"Column '{USER_DICTIONARY_COLUMN}' not found in header {header!r}",
            path=path,
            line=reader.line_num,
        )

    column = header.index(USER_DICTIONARY_COLUMN)
    width = len(header)

    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise VocabularyLoadError(
                f"Malformed CSV record: {e}", path=path, line=reader.line_num
            ) from e

        # csv yields [] for blank lines
        if not row:
            continue
        if len(row) != width:
            raise VocabularyLoadError(
                f"Expected {width} field(s) but found {len(row)}",
                path=path,
                line=reader.line_num,
            )
        yield row[column]


def load_vocabulary(path: PathLike) -> VocabularySet:
    """
    Load a user dictionary from a CSV file.

    The whole file is read before the vocabulary is built, so a bad record
    anywhere aborts loading without producing a partial vocabulary.

    Args:
        path: Path to the CSV file

    Returns:
        The loaded VocabularySet

    Raises:
        InputError: If the file cannot be opened or read
        VocabularyLoadError: If the file is not valid UTF-8 or a record
            does not match the single-column schema
    """
    path = str(path)

    try:
        f = open(path, "r", encoding=CSV_ENCODING, newline="")
    except OSError as e:
        raise InputError(
            f"Could not open user dictionary '{path}': {e.strerror or e}", path=path
        ) from e

    with f:
        reader = csv.reader(f)
        try:
            entries = list(_iter_entries(reader, path))
        except UnicodeDecodeError as e:
            raise VocabularyLoadError(
                f"User dictionary is not valid UTF-8: {e.reason}",
                path=path,
            ) from e
        except OSError as e:
            raise InputError(
                f"Failed to read user dictionary '{path}': {e.strerror or e}", path=path
            ) from e

    vocabulary = build_vocabulary(entries)
    logger.info(
        "Loaded user dictionary %s: %d rows, %d unique entries (max length %d)",
        path, len(entries), len(vocabulary), vocabulary.max_entry_length,
    )
    return vocabulary


# ============================================================================
# CSV Writing
# ============================================================================

def _write_entries(f, entries: List[str], path: str) -> int:
    writer = csv.writer(f, lineterminator=CSV_LINE_TERMINATOR)
    writer.writerow([USER_DICTIONARY_COLUMN])
    for line, entry in enumerate(entries, start=2):
        try:
            writer.writerow([entry])
        except UnicodeEncodeError as e:
            raise SerializationError(
                f"Cannot encode user dictionary entry {entry!r} as UTF-8: {e.reason}",
                path=path,
                row=line,
            ) from e
    return len(entries)


def stage_vocabulary(path: PathLike, entries: Iterable[str]) -> StagedFile:
    """
    Write entries in user dictionary format to a staged file without
    committing it.

    Entries are deduplicated and sorted so output is stable across runs.
    """
    path = str(path)
    unique = sorted(set(entries))
    return stage_rows(path, lambda f: _write_entries(f, unique, path))


def write_vocabulary(path: PathLike, entries: Iterable[str]) -> int:
    """
    Write entries in user dictionary format (BOM-prefixed UTF-8 CSV).

    Entries are deduplicated and sorted so output is stable across runs.
    The file replaces ``path`` only once every entry is written.

    Returns:
        Number of entries written
    """
    staged = stage_vocabulary(path, entries)
    staged.commit()
    logger.info("Wrote %d user dictionary entries to %s", staged.count, staged.path)
    return staged.count


# ============================================================================
# Plain Word Lists
# ============================================================================

def read_word_list(path: PathLike) -> List[str]:
    """
    Read a plain-text word list, one entry per line.

    Surrounding whitespace is stripped and blank lines and ``#`` comments
    are skipped. Unlike the CSV format, entries here cannot contain
    leading or trailing whitespace.
    """
    path = str(path)
    words = []

    try:
        with open(path, "r", encoding=CSV_ENCODING) as f:
            for line in f:
                word = line.strip()
                if word and not word.startswith("#"):
                    words.append(word)
    except UnicodeDecodeError as e:
        raise VocabularyLoadError(f"Word list is not valid UTF-8: {e.reason}", path=path) from e
    except OSError as e:
        raise InputError(f"Could not read word list '{path}': {e.strerror or e}", path=path) from e

    return words
