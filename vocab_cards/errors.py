from __future__ import annotations


class VocabError(Exception):
    """Base class for every failure raised by vocab_cards."""


class FileAccessError(VocabError):
    code = "FileAccessError"

    def __init__(self, name: str | None, message: str) -> None:
        super().__init__(message)
        self.name = name
        self.message = message

    def to_detail(self) -> dict:
        return {"error": self.code, "message": self.message}


class InvalidName(FileAccessError):
    code = "InvalidName"


class NotFound(FileAccessError):
    code = "NotFound"


class Corrupt(FileAccessError):
    code = "Corrupt"


class StorageUnavailable(FileAccessError):
    code = "StorageUnavailable"


FILE_ACCESS_ERRORS = {cls.code: cls for cls in (InvalidName, NotFound, Corrupt, StorageUnavailable)}


class SessionError(VocabError):
    """Raised by session transitions; the controller turns these into notices."""


class ValidationError(SessionError):
    pass


class DuplicateError(SessionError):
    pass


class NotFoundError(SessionError):
    pass
