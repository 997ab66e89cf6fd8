"""In-memory share, for tests and dry runs."""
import typing as t
from azfileshare.exc import StorageError
from azfileshare.paths import RemotePath
from .base import RemoteStore, HandleKind


class MemoryShareStore(RemoteStore):
    """A RemoteStore that keeps the whole share in memory.

        It enforces the same structural rules as a real share: a directory or
        file can only be created in an existing directory, files have a fixed
        length declared on creation and ranges can only be written inside that
        length.
    """

    def __init__(self, share_name: str = "memory", read_chunk_size: int = 4194304):
        self._share_name = share_name
        self._read_chunk_size = read_chunk_size
        self._directories: set[RemotePath] = {RemotePath()}
        self._files: dict[RemotePath, bytearray] = {}
        self._metadata: dict[tuple[HandleKind, RemotePath], dict[str, str]] = {}

    def name(self) -> str:
        return self._share_name

    def file_exists(self, path: RemotePath) -> bool:
        return path in self._files

    def directory_exists(self, path: RemotePath) -> bool:
        return path in self._directories

    def create_directory(self, path: RemotePath) -> bool:
        if path in self._directories:
            return False
        if path in self._files:
            raise StorageError(f"Memory: a file already exists at [{path}]", 2005)
        if path.parent() not in self._directories:
            raise StorageError(f"Memory: parent directory of [{path}] not found", 2004)
        self._directories.add(path)
        return True

    def create_file(self, path: RemotePath, length: int):
        if path in self._directories:
            raise StorageError(f"Memory: a directory already exists at [{path}]", 2005)
        if path.parent() not in self._directories:
            raise StorageError(f"Memory: parent directory of [{path}] not found", 2004)
        self._files[path] = bytearray(length)

    def write_range(self, path: RemotePath, offset: int, data: bytes):
        content = self._file(path)
        end = offset + len(data)
        if offset < 0 or end > len(content):
            raise StorageError(f"Memory: range [{offset}, {end}) is outside of [{path}] (length {len(content)})", 2006)
        content[offset:end] = data

    def read_chunks(self, path: RemotePath) -> t.Iterable[bytes]:
        content = bytes(self._file(path))
        for start in range(0, len(content), self._read_chunk_size):
            yield content[start:start + self._read_chunk_size]

    def list_children(self, path: RemotePath) -> t.Iterable[tuple[str, bool]]:
        if path not in self._directories:
            raise StorageError(f"Memory: directory [{path}] not found", 2004)
        children = [(d.name(), True) for d in self._directories if not d.is_root() and d.parent() == path]
        children.extend((f.name(), False) for f in self._files if f.parent() == path)
        children.sort()
        return iter(children)

    def file_length(self, path: RemotePath) -> int:
        return len(self._file(path))

    def get_metadata(self, kind: HandleKind, path: RemotePath) -> dict[str, str]:
        self._check_object(kind, path)
        return dict(self._metadata.get((kind, path), {}))

    def set_metadata(self, kind: HandleKind, path: RemotePath, metadata: dict[str, str]):
        self._check_object(kind, path)
        self._metadata[(kind, path)] = dict(metadata)

    def file_content(self, path) -> bytes:
        """Get a copy of a file's content."""
        return bytes(self._file(RemotePath.parse(path)))

    def _file(self, path: RemotePath) -> bytearray:
        if path not in self._files:
            raise StorageError(f"Memory: file [{path}] not found", 2004)
        return self._files[path]

    def _check_object(self, kind: HandleKind, path: RemotePath):
        if kind is HandleKind.FILE:
            self._file(path)
        elif path not in self._directories:
            raise StorageError(f"Memory: directory [{path}] not found", 2004)
