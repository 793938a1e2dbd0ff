"""
Token CSV output for userdic-merge.

Output format (UTF-8 with BOM, ``\\n`` line endings):

    Token,byte_start,byte_end,position,position_length
    東京都,0,9,0,1
    に,9,12,2,1

Downstream tools read this file by column name, so the header and the BOM
must not change.
"""

import csv
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Union

from userdic_merge.constants import CSV_ENCODING, CSV_LINE_TERMINATOR, TOKEN_CSV_HEADER
from userdic_merge.exceptions import OutputError, SerializationError
from userdic_merge.raw_types import MergedToken

logger = logging.getLogger(__name__)


def write_rows(f, tokens: Iterable[MergedToken], path: str) -> int:
    """Write the header and one row per token to an open text file."""
    writer = csv.writer(f, lineterminator=CSV_LINE_TERMINATOR)
    writer.writerow(TOKEN_CSV_HEADER)

    count = 0
    for count, token in enumerate(tokens, start=1):
        try:
            writer.writerow(token.as_row())
        except UnicodeEncodeError as e:
            raise SerializationError(
                f"Cannot encode token {token.text!r} as UTF-8: {e.reason}",
                path=path,
                row=count,
            ) from e
        except csv.Error as e:
            raise SerializationError(
                f"Cannot write token {token.text!r}: {e}", path=path, row=count
            ) from e
    return count


# =============================================================================
# Staged Output
# =============================================================================

def _target_mode(path: str) -> int:
    """Mode for a committed file: the existing file's, else 0o666 minus umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class StagedFile:
    """
    A temporary file next to ``path`` that replaces ``path`` on commit.

    Nothing at ``path`` changes until commit(), so a failed run never
    leaves a truncated file behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        self.count = 0
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            self.file = tempfile.NamedTemporaryFile(
                "w",
                encoding=CSV_ENCODING,
                newline="",
                dir=directory,
                prefix=".userdic-merge-",
                suffix=".tmp",
                delete=False,
            )
        except OSError as e:
            raise OutputError(
                f"Could not create file '{self.path}': {e.strerror or e}", path=self.path
            ) from e

    def close(self):
        try:
            self.file.close()
        except OSError as e:
            self.discard()
            raise OutputError(
                f"Failed to write file '{self.path}': {e.strerror or e}", path=self.path
            ) from e

    def commit(self):
        """Move the staged file into place with regular file permissions."""
        self.close()
        try:
            os.chmod(self.file.name, _target_mode(self.path))
            os.replace(self.file.name, self.path)
        except OSError as e:
            self.discard()
            raise OutputError(
                f"Failed to write file '{self.path}': {e.strerror or e}", path=self.path
            ) from e

    def discard(self):
        self.file.close()
        try:
            os.unlink(self.file.name)
        except FileNotFoundError:
            pass


def commit_all(staged: List[StagedFile]):
    """Commit staged files in order; on failure discard the uncommitted rest."""
    for index, staged_file in enumerate(staged):
        try:
            staged_file.commit()
        except OutputError:
            for rest in staged[index + 1:]:
                rest.discard()
            raise


def stage_rows(path: Union[str, Path], write) -> StagedFile:
    """
    Stage a file whose contents ``write(f)`` produces; ``write`` returns a row count.

    The staged file is discarded if ``write`` raises.
    """
    staged = StagedFile(path)
    try:
        staged.count = write(staged.file)
    except OSError as e:
        staged.discard()
        raise OutputError(
            f"Failed to write file '{staged.path}': {e.strerror or e}", path=staged.path
        ) from e
    except BaseException:
        staged.discard()
        raise
    staged.close()
    return staged


# =============================================================================
# Token CSV
# =============================================================================

def stage_tokens_csv(path: Union[str, Path], tokens: Iterable[MergedToken]) -> StagedFile:
    """Write merged tokens to a staged file without committing it."""
    path = str(path)
    return stage_rows(path, lambda f: write_rows(f, tokens, path))


def write_tokens_csv(path: Union[str, Path], tokens: Iterable[MergedToken]) -> int:
    """
    Write merged tokens to a CSV file.

    Rows go to a temporary file next to ``path`` which replaces ``path``
    only after every row has been written.

    Args:
        path: Output CSV path
        tokens: Merged tokens, in order

    Returns:
        Number of token rows written

    Raises:
        OutputError: If the file cannot be created or written
        SerializationError: If a token cannot be encoded
    """
    staged = stage_tokens_csv(path, tokens)
    staged.commit()
    logger.info("Wrote %d tokens to %s", staged.count, staged.path)
    return staged.count
