from __future__ import annotations
import enum
import functools
import typing as t
from azfileshare.exc import StorageError, FileShareError
from azfileshare.paths import RemotePath, split_remote_path


class HandleKind(enum.Enum):
    """The two kinds of object that live in a share."""

    FILE = "file"
    DIRECTORY = "directory"


def local_file_error_wrap(cb):
    """Converts typical local file-system errors into appropriate StorageErrors with recoverable set properly."""

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except FileNotFoundError as ex:
            raise StorageError(f"Local file not found: {ex.filename}", 1002) from ex
        except PermissionError as ex:
            raise StorageError(f"Access to local file denied: {ex.filename}", 1003, True) from ex
        except IsADirectoryError as ex:
            raise StorageError(f"Local file is a directory: {ex.filename}", 1004) from ex
        except NotADirectoryError as ex:
            raise StorageError(f"Local directory is not a directory: {ex.filename}", 1005) from ex
        except OSError as ex:
            raise StorageError(f"Exception processing local file: {ex.__class__.__name__}: {str(ex)}", 1006) from ex

    return _inner


class RemoteStore:
    """Capability interface for the physical operations on a share.

        Implementations do the network (or in-memory) work; everything that
        decides *what* to read, write or create lives above this layer. Paths
        are always RemotePath objects relative to the share root.
    """

    def name(self) -> str:
        """A display name for the share."""
        raise NotImplementedError

    def file_exists(self, path: RemotePath) -> bool:
        raise NotImplementedError

    def directory_exists(self, path: RemotePath) -> bool:
        raise NotImplementedError

    def create_directory(self, path: RemotePath) -> bool:
        """Create a single directory whose parent already exists.

            Returns False if the directory already existed (including when
            someone else created it first), True if it was created.
        """
        raise NotImplementedError

    def create_file(self, path: RemotePath, length: int):
        """Create or replace a file with the given final length in bytes."""
        raise NotImplementedError

    def write_range(self, path: RemotePath, offset: int, data: bytes):
        """Write data into the byte range [offset, offset + len(data)) of an existing file."""
        raise NotImplementedError

    def read_chunks(self, path: RemotePath) -> t.Iterable[bytes]:
        raise NotImplementedError

    def list_children(self, path: RemotePath) -> t.Iterable[tuple[str, bool]]:
        """List the (name, is_directory) pairs directly under a directory."""
        raise NotImplementedError

    def file_length(self, path: RemotePath) -> int:
        raise NotImplementedError

    def get_metadata(self, kind: HandleKind, path: RemotePath) -> dict[str, str]:
        raise NotImplementedError

    def set_metadata(self, kind: HandleKind, path: RemotePath, metadata: dict[str, str]):
        """Replace the whole metadata mapping of a file or directory."""
        raise NotImplementedError


class ShareHandle:
    """Lightweight reference to a location in a share.

        Building a handle never touches the store; use exists() to find out
        whether the object is physically there.
    """

    kind: HandleKind = None

    def __init__(self, store: RemoteStore, path: t.Union[str, RemotePath, None]):
        self._store = store
        self._path = RemotePath.parse(path)

    @property
    def store(self) -> RemoteStore:
        return self._store

    @property
    def remote_path(self) -> RemotePath:
        return self._path

    def path(self) -> str:
        """Get a string representation of this path relative to the share root."""
        return str(self._path)

    def name(self) -> str:
        return self._path.name()

    def parent(self) -> DirectoryHandle:
        return DirectoryHandle(self._store, self._path.parent())

    def is_dir(self) -> bool:
        return self.kind is HandleKind.DIRECTORY

    def exists(self) -> bool:
        raise NotImplementedError

    def __eq__(self, other):
        if not isinstance(other, ShareHandle):
            return NotImplemented
        return self.kind is other.kind and self._path == other._path and self._store is other._store

    def __hash__(self):
        return hash((self.kind, self._path))

    def __str__(self):
        return self.path()

    def __repr__(self):
        return f"{self.__class__.__name__}({self.path()!r})"


class FileHandle(ShareHandle):

    kind = HandleKind.FILE

    def exists(self) -> bool:
        return self._store.file_exists(self._path)

    def size(self) -> int:
        return self._store.file_length(self._path)


class DirectoryHandle(ShareHandle):

    kind = HandleKind.DIRECTORY

    def exists(self) -> bool:
        if self._path.is_root():
            return True
        return self._store.directory_exists(self._path)

    def child(self, sub_path: t.Union[str, RemotePath], as_dir: bool = False) -> ShareHandle:
        """Create a handle below the current directory."""
        if as_dir:
            return DirectoryHandle(self._store, self._path.joinpath(sub_path))
        return FileHandle(self._store, self._path.joinpath(sub_path))

    def file(self, sub_path: t.Union[str, RemotePath]) -> FileHandle:
        return self.child(sub_path, False)

    def subdir(self, sub_path: t.Union[str, RemotePath]) -> DirectoryHandle:
        return self.child(sub_path, True)


def file_handle(store: RemoteStore, file_path: t.Union[str, RemotePath]) -> FileHandle:
    """Build a file handle from a combined path; the path must include the file name."""
    directory, filename = split_remote_path(file_path)
    if not filename:
        raise FileShareError(f"File path [{file_path}] does not include a file name", "PATH", 1002)
    return DirectoryHandle(store, directory).file(filename)


def directory_handle(store: RemoteStore, directory_path: t.Union[str, RemotePath, None]) -> DirectoryHandle:
    """Build a directory handle; None or an empty path is the share root."""
    return DirectoryHandle(store, directory_path)
