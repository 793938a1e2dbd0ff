"""Exception hierarchy for userdic-merge."""

from typing import Optional


class UserDicMergeError(Exception):
    """Base exception for all userdic-merge errors."""


class InputError(UserDicMergeError, OSError):
    """Raised when an input file cannot be opened, read, or decoded."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class OutputError(UserDicMergeError, OSError):
    """Raised when an output file cannot be created or written."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class TokenizationError(UserDicMergeError):
    """Raised when the token source cannot analyze the given text."""

    def __init__(self, message: str, *, position: Optional[int] = None) -> None:
        # position: character offset where alignment failed, if known
        if position is not None:
            message = f"{message} (at character {position})"
        super().__init__(message)
        self.position = position


class VocabularyLoadError(UserDicMergeError):
    """Raised when a user dictionary file violates the expected schema."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        extra = ""
        if path:
            extra += f" (file: {path}"
            if line is not None:
                extra += f", line {line}"
            extra += ")"
        super().__init__(message + extra)
        self.path = path
        self.line = line


class SerializationError(UserDicMergeError):
    """Raised when a token record cannot be encoded for output."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        row: Optional[int] = None,
    ) -> None:
        extra = ""
        if path:
            extra += f" (file: {path}"
            if row is not None:
                extra += f", row {row}"
            extra += ")"
        super().__init__(message + extra)
        self.path = path
        self.row = row
