"""Key-value metadata on files and directories in a share.

    The share stores metadata as one mapping per object and only supports
    replacing the whole mapping, so every change here is a read of the current
    mapping followed by a write of the modified copy. Nothing is cached.
"""
import typing as t
import zrlog
from azfileshare.exc import ObjectNotFoundError, DuplicateKeyError
from azfileshare.storage.base import ShareHandle, HandleKind


class MetadataEditor:

    def __init__(self):
        self._log = zrlog.get_logger("azfileshare.metadata")

    @staticmethod
    def _require_existing(handle: ShareHandle) -> HandleKind:
        kind = getattr(handle, "kind", None)
        if kind is HandleKind.FILE:
            if not handle.exists():
                raise ObjectNotFoundError(f"File [{handle}] does not exist", 1001)
        elif kind is HandleKind.DIRECTORY:
            if not handle.exists():
                raise ObjectNotFoundError(f"Directory [{handle}] does not exist", 1002)
        else:
            raise ObjectNotFoundError(f"Object [{handle!r}] is neither a file nor a directory", 1000)
        return kind

    def get(self, handle: ShareHandle) -> dict[str, str]:
        """Get the metadata of an existing file or directory."""
        kind = self._require_existing(handle)
        return handle.store.get_metadata(kind, handle.remote_path)

    def add(self, handle: ShareHandle, key: str, value: str, replace_if_exists: bool = False):
        """Add an item to the metadata.

            Raises a DuplicateKeyError if the key is already present and
            replace_if_exists is not set; the stored value is left unchanged.
        """
        kind = self._require_existing(handle)
        metadata = handle.store.get_metadata(kind, handle.remote_path)
        if key in metadata and not replace_if_exists:
            raise DuplicateKeyError(f"Metadata key [{key}] already exists on [{handle}]")
        metadata[key] = value
        handle.store.set_metadata(kind, handle.remote_path, metadata)
        self._log.debug(f"Set metadata [{key}] on [{handle}]")

    def remove(self, handle: ShareHandle, key: str):
        kind = self._require_existing(handle)
        metadata = handle.store.get_metadata(kind, handle.remote_path)
        if key not in metadata:
            return
        del metadata[key]
        handle.store.set_metadata(kind, handle.remote_path, metadata)
        self._log.debug(f"Removed metadata [{key}] from [{handle}]")

    def clear(self, handle: ShareHandle):
        kind = self._require_existing(handle)
        handle.store.set_metadata(kind, handle.remote_path, {})
