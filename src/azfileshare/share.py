import pathlib
import typing as t
import zirconium as zr
import zrlog
from autoinject import injector
from azfileshare.directories import DirectoryEnsurer
from azfileshare.exc import FileShareError
from azfileshare.mapping import PathMapping
from azfileshare.metadata import MetadataEditor
from azfileshare.paths import RemotePath
from azfileshare.storage.base import RemoteStore, ShareHandle, FileHandle, DirectoryHandle, file_handle, directory_handle
from azfileshare.storage.azure_files import AzureFileShareStore
from azfileshare.storage.local import LocalFileSystem
from azfileshare.transfer import TransferEngine, CHUNK_THRESHOLD, DEFAULT_MAX_BYTES
from azfileshare.walker import walk_remote, list_remote_files, list_remote_directories, Want


_SHARE_LIMIT = object()


@zr.configure
def register_config(config: zr.ApplicationConfig):
    config.register_file("./azfileshare.toml")


class FileShare:
    """Path-oriented helpers for one share.

        Handles built here are bound to the share's store. The size limit given
        on construction is the default for directory transfers; each call can
        override it.
    """

    def __init__(self,
                 store: RemoteStore,
                 local_fs: t.Optional[LocalFileSystem] = None,
                 chunk_threshold: int = CHUNK_THRESHOLD,
                 max_bytes: t.Optional[int] = DEFAULT_MAX_BYTES):
        self._store = store
        self._local = local_fs or LocalFileSystem()
        self._transfer = TransferEngine(self._local, chunk_threshold)
        self._ensurer = DirectoryEnsurer(store)
        self._metadata = MetadataEditor()
        self._max_bytes = max_bytes

    @property
    def store(self) -> RemoteStore:
        return self._store

    def name(self) -> str:
        return self._store.name()

    def root(self) -> DirectoryHandle:
        return directory_handle(self._store, None)

    def file(self, file_path: t.Union[str, RemotePath]) -> FileHandle:
        """Get a handle to a file; the path must include the file name and not the share name."""
        return file_handle(self._store, file_path)

    def directory(self, directory_path: t.Union[str, RemotePath, None] = None) -> DirectoryHandle:
        """Get a handle to a directory; None is the root of the share."""
        return directory_handle(self._store, directory_path)

    def mapping(self, remote_top: t.Union[DirectoryHandle, str, RemotePath, None], local_top: t.Union[str, pathlib.PurePath]) -> PathMapping:
        if not isinstance(remote_top, DirectoryHandle):
            remote_top = self.directory(remote_top)
        return PathMapping(remote_top, local_top)

    def create_directories(self, directory_path: t.Union[DirectoryHandle, str, RemotePath]) -> DirectoryHandle:
        """Physically create a directory and any missing parents. Existing directories are fine."""
        directory = directory_path if isinstance(directory_path, DirectoryHandle) else self.directory(directory_path)
        self._ensurer.ensure(directory)
        return directory

    def create_subdirectories(self, top: DirectoryHandle, sub_path: t.Union[str, RemotePath]) -> DirectoryHandle:
        """Physically create sub-directories below an existing top-level directory."""
        return self._ensurer.ensure_subdirectories(top, sub_path)

    def walk(self, directory: DirectoryHandle, recursive: bool = True, want: Want = Want.FILES) -> t.Iterable[ShareHandle]:
        return walk_remote(directory, recursive, want)

    def list_files(self, directory: DirectoryHandle, recursive: bool = True) -> list[FileHandle]:
        return list_remote_files(directory, recursive)

    def list_directories(self, directory: DirectoryHandle, recursive: bool = True) -> list[DirectoryHandle]:
        return list_remote_directories(directory, recursive)

    def directory_size(self, directory: DirectoryHandle, recursive: bool = True) -> int:
        return self._transfer.directory_size_remote(directory, recursive)

    def upload_file(self, remote_file: FileHandle, content, allow_overwrite: bool = False, create_dirs: bool = True, length: t.Optional[int] = None):
        self._transfer.upload_file(remote_file, content, allow_overwrite, create_dirs, length)

    def download_file(self, remote_file: FileHandle, local_path, allow_overwrite: bool = False, create_dirs: bool = True):
        self._transfer.download_file(remote_file, local_path, allow_overwrite, create_dirs)

    def download_bytes(self, remote_file: FileHandle) -> bytearray:
        return self._transfer.download_bytes(remote_file)

    def upload_directory(self, local_dir, remote_dir: DirectoryHandle, recursive: bool = True, max_bytes=_SHARE_LIMIT):
        """Upload a local directory; max_bytes defaults to the share's limit and None disables it."""
        self._transfer.upload_directory(local_dir, remote_dir, recursive, self._limit(max_bytes))

    def download_directory(self, remote_dir: DirectoryHandle, local_dir, recursive: bool = True, max_bytes=_SHARE_LIMIT):
        """Download a remote directory; max_bytes defaults to the share's limit and None disables it."""
        self._transfer.download_directory(remote_dir, local_dir, recursive, self._limit(max_bytes))

    def _limit(self, max_bytes) -> t.Optional[int]:
        return self._max_bytes if max_bytes is _SHARE_LIMIT else max_bytes

    def get_metadata(self, handle: ShareHandle) -> dict[str, str]:
        return self._metadata.get(handle)

    def add_metadata(self, handle: ShareHandle, key: str, value: str, replace_if_exists: bool = False):
        self._metadata.add(handle, key, value, replace_if_exists)

    def remove_metadata(self, handle: ShareHandle, key: str):
        self._metadata.remove(handle, key)

    def clear_metadata(self, handle: ShareHandle):
        self._metadata.clear(handle)


@injector.injectable_global
class ShareController:
    """Builds Azure-backed FileShare objects from the application configuration.

        [azfileshare]
        connection_string = "..."     # or account_url with the default Azure credential
        account_url = "https://ACCOUNT.file.core.windows.net"
        share_name = "myshare"
        create_if_missing = false
        chunk_threshold = 4000000
        max_bytes = 10485760
    """

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self):
        self._log = zrlog.get_logger("azfileshare.controller")

    def get_share(self,
                  share_name: t.Optional[str] = None,
                  connection_string: t.Optional[str] = None,
                  account_url: t.Optional[str] = None,
                  create_if_missing: t.Optional[bool] = None) -> FileShare:
        """Connect to a share. Arguments that are not given come from the configuration."""
        if share_name is None:
            share_name = self.config.as_str(("azfileshare", "share_name"), default=None)
        if not share_name:
            raise FileShareError(f"No share name provided", "CONFIG", 1000)
        if connection_string is None and account_url is None:
            connection_string = self.config.as_str(("azfileshare", "connection_string"), default=None)
            account_url = self.config.as_str(("azfileshare", "account_url"), default=None)
        if create_if_missing is None:
            create_if_missing = self.config.as_bool(("azfileshare", "create_if_missing"), default=False)
        store = AzureFileShareStore.connect(share_name, connection_string, account_url, create_if_missing)
        self._log.info(f"Connected to share [{share_name}]")
        return FileShare(
            store,
            chunk_threshold=self.config.as_int(("azfileshare", "chunk_threshold"), default=CHUNK_THRESHOLD),
            max_bytes=self.config.as_int(("azfileshare", "max_bytes"), default=DEFAULT_MAX_BYTES),
        )
