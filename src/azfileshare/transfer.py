"""Uploads and downloads of single files and whole directory trees.

    Single files are written to the share in range requests. A share accepts at
    most 4 MiB (4194304 bytes) per range write, so content at or above
    CHUNK_THRESHOLD (a round number just under that) is split into sequential
    chunks at contiguous offsets. Only one chunk is held in memory at a time
    when the content comes from a stream or a local file.

    Directory transfers first add up the size of every file they are about to
    copy and refuse to start if the total is above the limit. Once a
    transfer has started, a failure part-way through leaves the files already
    copied in place.
"""
import io
import pathlib
import secrets
import typing as t
import zrlog
from azfileshare.directories import DirectoryEnsurer
from azfileshare.exc import (
    LocalPathNotFoundError,
    RemotePathNotFoundError,
    OverwriteNotAllowedError,
    PathOutsideMappingError,
    SizeLimitExceededError,
    StorageError,
    TransferError,
)
from azfileshare.paths import RemotePath
from azfileshare.storage.base import FileHandle, DirectoryHandle
from azfileshare.storage.local import LocalFileSystem
from azfileshare.walker import walk_local, walk_remote, Want, LocalEntry


CHUNK_THRESHOLD = 4000000
DEFAULT_MAX_BYTES = 10 * 1024 * 1024

UploadContent = t.Union[bytes, bytearray, memoryview, str, pathlib.PurePath, t.BinaryIO]


def _read_exact(readable, size: int) -> bytes:
    """Read up to size bytes, stopping early only at the end of the stream."""
    parts = []
    remaining = size
    while remaining > 0:
        data = readable.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


class TransferEngine:

    def __init__(self, local_fs: t.Optional[LocalFileSystem] = None, chunk_threshold: int = CHUNK_THRESHOLD):
        if chunk_threshold <= 0:
            raise ValueError("chunk_threshold must be positive")
        self._local = local_fs or LocalFileSystem()
        self._chunk_threshold = chunk_threshold
        self._log = zrlog.get_logger("azfileshare.transfer")

    @property
    def chunk_threshold(self) -> int:
        return self._chunk_threshold

    def upload_file(self,
                    remote_file: FileHandle,
                    content: UploadContent,
                    allow_overwrite: bool = False,
                    create_dirs: bool = True,
                    length: t.Optional[int] = None):
        """Upload bytes, a local file or a binary stream to a file in the share.

            For streams, the length is taken from the length argument or, if
            omitted, by seeking to the end of the stream. The upload starts at
            the current position of the stream.
        """
        self._upload_file(remote_file, content, allow_overwrite, create_dirs, length)

    def _upload_file(self, remote_file: FileHandle, content, allow_overwrite: bool, create_dirs: bool, length: t.Optional[int] = None, known: t.Optional[set] = None):
        if (not allow_overwrite) and remote_file.exists():
            raise OverwriteNotAllowedError(f"Path [{remote_file}] already exists, cannot overwrite")
        readable, length, close_after = self._open_content(content, length)
        try:
            if create_dirs:
                DirectoryEnsurer(remote_file.store).ensure(remote_file.parent(), known)
            self._write_content(remote_file, readable, length)
        finally:
            if close_after:
                readable.close()
        self._log.debug(f"Uploaded {length} bytes to [{remote_file}]")

    def _open_content(self, content, length: t.Optional[int]) -> tuple[t.BinaryIO, int, bool]:
        if isinstance(content, (bytes, bytearray, memoryview)):
            return io.BytesIO(content), len(content) if length is None else length, True
        if isinstance(content, (str, pathlib.PurePath)):
            if not self._local.is_file(content):
                raise LocalPathNotFoundError(f"Local file [{content}] does not exist", 1001)
            size = self._local.file_size(content)
            return self._local.open_read(content), size if length is None else length, True
        if hasattr(content, "read"):
            if length is None:
                if not (hasattr(content, "seekable") and content.seekable()):
                    raise TransferError(f"Length is required when uploading from a stream that cannot seek", 1003)
                position = content.tell()
                length = content.seek(0, io.SEEK_END) - position
                content.seek(position)
            return content, length, False
        raise TransferError(f"Unsupported upload content [{content.__class__.__name__}]", 1004)

    def _write_content(self, remote_file: FileHandle, readable: t.BinaryIO, length: int):
        store = remote_file.store
        path = remote_file.remote_path
        store.create_file(path, length)
        offset = 0
        if 0 < length < self._chunk_threshold:
            data = _read_exact(readable, length)
            store.write_range(path, 0, data)
            offset = len(data)
        else:
            while offset < length:
                chunk = _read_exact(readable, min(self._chunk_threshold, length - offset))
                if not chunk:
                    break
                store.write_range(path, offset, chunk)
                offset += len(chunk)
        if offset != length or readable.read(1):
            raise TransferError(f"Content for [{remote_file}] does not match the declared length of {length} bytes", 1002)

    def download_file(self,
                      remote_file: FileHandle,
                      local_path: t.Union[str, pathlib.Path],
                      allow_overwrite: bool = False,
                      create_dirs: bool = True):
        """Download a file from the share to a local path.

            The content is written to a temporary file next to the target,
            which then replaces the target in one step.
        """
        local_path = pathlib.Path(local_path).expanduser()
        if (not allow_overwrite) and self._local.exists(local_path):
            raise OverwriteNotAllowedError(f"Path [{local_path}] already exists, cannot download from [{remote_file}]", 1001)
        if not remote_file.exists():
            raise RemotePathNotFoundError(f"Remote file [{remote_file}] does not exist", 1002)
        self._download_file(remote_file, local_path, create_dirs)

    def _download_file(self, remote_file: FileHandle, local_path: pathlib.Path, create_dirs: bool):
        parent = local_path.parent
        if create_dirs:
            self._local.create_directories(parent)
        elif not self._local.is_dir(parent):
            raise LocalPathNotFoundError(f"Local directory [{parent}] does not exist", 1002)
        temp_path = parent / f".{local_path.name}.{secrets.token_hex(4)}.part"
        try:
            with self._local.open_write(temp_path) as dest:
                for chunk in remote_file.store.read_chunks(remote_file.remote_path):
                    dest.write(chunk)
            self._local.replace(temp_path, local_path)
        except Exception:
            try:
                self._local.remove(temp_path)
            except StorageError as cleanup_ex:
                self._log.warning(f"Could not remove temporary file [{temp_path}]: {str(cleanup_ex)}")
            raise
        self._log.debug(f"Downloaded [{remote_file}] to [{local_path}]")

    def download_bytes(self, remote_file: FileHandle) -> bytearray:
        """Download a file from the share into memory.

            The buffer is allocated up front with the length of the remote file,
            so this needs as much memory as the file is large. Use
            download_file() for anything that may not fit.
        """
        if not remote_file.exists():
            raise RemotePathNotFoundError(f"Remote file [{remote_file}] does not exist", 1002)
        length = remote_file.size()
        buffer = bytearray(length)
        offset = 0
        for chunk in remote_file.store.read_chunks(remote_file.remote_path):
            end = offset + len(chunk)
            if end > length:
                raise TransferError(f"Remote file [{remote_file}] is longer than its reported length of {length} bytes", 1005)
            buffer[offset:end] = chunk
            offset = end
        if offset != length:
            raise TransferError(f"Remote file [{remote_file}] is shorter than its reported length of {length} bytes", 1006)
        return buffer

    def directory_size_local(self, local_dir: t.Union[str, pathlib.Path], recursive: bool = True) -> int:
        """Total size of the files in a local directory, in bytes."""
        return sum(
            self._local.file_size(entry.path)
            for entry in walk_local(local_dir, recursive, Want.FILES, self._local)
        )

    def directory_size_remote(self, remote_dir: DirectoryHandle, recursive: bool = True) -> int:
        """Total size of the files in a remote directory, in bytes."""
        return sum(remote_file.size() for remote_file in walk_remote(remote_dir, recursive, Want.FILES))

    def _check_size(self, total: int, max_bytes: t.Optional[int], description: str):
        if max_bytes is not None and max_bytes < 0:
            raise ValueError("max_bytes must be zero or more, or None for no limit")
        if max_bytes is not None and total > max_bytes:
            self._log.warning(f"Refusing to transfer {description}: {total} bytes exceeds the limit of {max_bytes} bytes")
            raise SizeLimitExceededError(
                f"The directory size is {total} bytes; this exceeds {max_bytes} bytes. The max_bytes parameter can be set to a higher value."
            )

    @staticmethod
    def _remote_relative(local_dir: pathlib.Path, entry: LocalEntry) -> RemotePath:
        try:
            return RemotePath.from_segments(entry.path.relative_to(local_dir).parts)
        except PathOutsideMappingError as ex:
            raise TransferError(f"Local path [{entry.path}] cannot be uploaded to a share: {str(ex)}", 1007) from ex

    def upload_directory(self,
                         local_dir: t.Union[str, pathlib.Path],
                         remote_dir: DirectoryHandle,
                         recursive: bool = True,
                         max_bytes: t.Optional[int] = DEFAULT_MAX_BYTES):
        """Upload the content of a local directory into a directory in the share.

            Existing remote files are overwritten. Nothing is uploaded if the
            total size of the files is greater than max_bytes (None for no limit)
            or if any local name cannot be used in the share.
        """
        local_dir = pathlib.Path(local_dir).expanduser()
        if not self._local.is_dir(local_dir):
            raise LocalPathNotFoundError(f"Local directory [{local_dir}] does not exist", 1000)
        total = self.directory_size_local(local_dir, recursive)
        self._check_size(total, max_bytes, f"[{local_dir}] to [{remote_dir}]")
        work = [
            (entry, self._remote_relative(local_dir, entry))
            for entry in walk_local(local_dir, recursive, Want.BOTH if recursive else Want.FILES, self._local)
        ]
        self._log.info(f"Uploading [{local_dir}] to [{remote_dir}] ({total} bytes)")
        known = set()
        ensurer = DirectoryEnsurer(remote_dir.store)
        ensurer.ensure(remote_dir, known)
        file_count = 0
        for entry, relative in work:
            if entry.is_dir:
                ensurer.ensure(remote_dir.subdir(relative), known)
            else:
                self._upload_file(remote_dir.file(relative), entry.path, True, True, known=known)
                file_count += 1
        self._log.info(f"Uploaded {file_count} files to [{remote_dir}]")

    def download_directory(self,
                           remote_dir: DirectoryHandle,
                           local_dir: t.Union[str, pathlib.Path],
                           recursive: bool = True,
                           max_bytes: t.Optional[int] = DEFAULT_MAX_BYTES):
        """Download the content of a directory in the share into a local directory.

            Existing local files are overwritten. Nothing is downloaded if the
            total size of the files is greater than max_bytes (None for no limit).
        """
        local_dir = pathlib.Path(local_dir).expanduser()
        if not remote_dir.exists():
            raise RemotePathNotFoundError(f"Remote directory [{remote_dir}] does not exist", 1000)
        total = self.directory_size_remote(remote_dir, recursive)
        self._check_size(total, max_bytes, f"[{remote_dir}] to [{local_dir}]")
        self._log.info(f"Downloading [{remote_dir}] to [{local_dir}] ({total} bytes)")
        self._local.create_directories(local_dir)
        file_count = 0
        for entry in walk_remote(remote_dir, recursive, Want.BOTH if recursive else Want.FILES):
            relative = entry.remote_path.relative_to(remote_dir.remote_path)
            local_path = local_dir.joinpath(*relative.segments)
            if entry.is_dir():
                self._local.create_directories(local_path)
            else:
                self._download_file(entry, local_path, True)
                file_count += 1
        self._log.info(f"Downloaded {file_count} files to [{local_dir}]")
