"""
    Path-oriented helpers for Azure file shares.

    Get a FileShare (from the ShareController, or by wrapping any RemoteStore)
    and use it to build handles to files and directories in the share. Handles
    are only references: building one never touches the share. The FileShare
    then uploads, downloads, lists and maps files and whole directory trees
    between the share and the local disk.

    Remote paths are always relative to the root of the share, never include
    the share name and may use either forward or back slashes.
"""
from .exc import (
    FileShareError,
    StorageError,
    PathOutsideMappingError,
    LocalPathNotFoundError,
    RemotePathNotFoundError,
    ObjectNotFoundError,
    OverwriteNotAllowedError,
    DuplicateKeyError,
    DirectoryCreateError,
    SizeLimitExceededError,
    TransferError,
)
from .paths import RemotePath, split_remote_path
from .mapping import PathMapping
from .storage import RemoteStore, HandleKind, ShareHandle, FileHandle, DirectoryHandle, LocalFileSystem, MemoryShareStore
from .walker import Want, LocalEntry, walk_remote, walk_local
from .transfer import TransferEngine, CHUNK_THRESHOLD, DEFAULT_MAX_BYTES
from .metadata import MetadataEditor
from .share import FileShare, ShareController
