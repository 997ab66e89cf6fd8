"""Creation of remote directory chains."""
import typing as t
import zrlog
from azfileshare.exc import DirectoryCreateError, RemotePathNotFoundError, StorageError
from azfileshare.paths import RemotePath
from azfileshare.storage.base import RemoteStore, DirectoryHandle


class DirectoryEnsurer:
    """Makes sure a remote directory and all of its ancestors exist."""

    def __init__(self, store: RemoteStore):
        self._store = store
        self._log = zrlog.get_logger("azfileshare.directories")

    def ensure(self, directory: t.Union[DirectoryHandle, RemotePath, str], known: t.Optional[set[RemotePath]] = None):
        """Create the directory and any missing parent directories.

            Existing directories are left alone, so calling this repeatedly is
            harmless. If another client creates one of the directories first,
            that counts as success. The optional known set holds paths already
            confirmed to exist; it is used to skip existence checks and is
            updated with every directory confirmed or created here.
        """
        target = directory.remote_path if isinstance(directory, DirectoryHandle) else RemotePath.parse(directory)
        if known is None:
            known = set()
        missing = []
        current = target
        while not current.is_root() and current not in known:
            if self._store.directory_exists(current):
                known.add(current)
                break
            missing.append(current)
            current = current.parent()
        while missing:
            path = missing.pop()
            try:
                if self._store.create_directory(path):
                    self._log.debug(f"Created remote directory [{path}]")
            except StorageError as ex:
                raise DirectoryCreateError(f"Could not create remote directory [{path}]: {str(ex)}", is_recoverable=ex.is_recoverable) from ex
            known.add(path)

    def ensure_subdirectories(self, top: DirectoryHandle, sub_path: t.Union[RemotePath, str], known: t.Optional[set[RemotePath]] = None) -> DirectoryHandle:
        """Create the sub-directories below an existing top-level directory."""
        if not top.exists():
            raise RemotePathNotFoundError(f"Top level directory [{top}] does not exist", 1001)
        target = top.subdir(sub_path)
        self.ensure(target, known)
        return target
