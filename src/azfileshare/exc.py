class FileShareError(Exception):
    """Super-type of all errors raised by azfileshare code"""

    def __init__(self, msg: str, code_space: str = "GEN", code_number: int = None, is_recoverable: bool = False):
        self.internal_code = "" if code_number is None else f"{code_space}-{code_number}"
        super().__init__(f"{msg} [{self.internal_code}]")
        self.is_recoverable = is_recoverable


class StorageError(FileShareError):
    """Error class specifically for errors raised by the underlying storage."""

    def __init__(self, msg, code, is_recoverable: bool = False):
        super().__init__(msg, "STORAGE", code, is_recoverable=is_recoverable)


class PathOutsideMappingError(FileShareError):
    """Raised when a path is not below the anchor of a path mapping."""

    def __init__(self, msg, code: int = 1000):
        super().__init__(msg, "PATH", code)


class LocalPathNotFoundError(FileShareError):

    def __init__(self, msg, code: int = 1000):
        super().__init__(msg, "LOCAL", code)


class RemotePathNotFoundError(FileShareError):

    def __init__(self, msg, code: int = 1000):
        super().__init__(msg, "REMOTE", code)


class DirectoryCreateError(FileShareError):
    """Raised when a remote directory could not be created."""

    def __init__(self, msg, code: int = 1001, is_recoverable: bool = False):
        super().__init__(msg, "REMOTE", code, is_recoverable=is_recoverable)


class ObjectNotFoundError(FileShareError):
    """Raised when a metadata operation targets something that is not an existing file or directory."""

    def __init__(self, msg, code: int = 1000):
        super().__init__(msg, "META", code)


class DuplicateKeyError(FileShareError):

    def __init__(self, msg, code: int = 1001):
        super().__init__(msg, "META", code)


class OverwriteNotAllowedError(FileShareError):

    def __init__(self, msg, code: int = 1000):
        super().__init__(msg, "TRANSFER", code, is_recoverable=True)


class SizeLimitExceededError(FileShareError):
    """Raised before a directory transfer starts if its total size is above the limit."""

    def __init__(self, msg, code: int = 1001):
        super().__init__(msg, "TRANSFER", code)


class TransferError(FileShareError):

    def __init__(self, msg, code: int = 1002):
        super().__init__(msg, "TRANSFER", code)
