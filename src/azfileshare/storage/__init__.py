"""
    Storage collaborators.

    A RemoteStore performs the physical operations on a share (existence checks,
    creating directories and files, range writes, listings and metadata) and
    a LocalFileSystem does the same for the local disk. Nothing in this package
    decides what to transfer; that is left to the transfer engine.

    Handles (FileHandle and DirectoryHandle) are lightweight references to a
    location in a share. Creating one never calls the store.
"""
from .base import RemoteStore, HandleKind, ShareHandle, FileHandle, DirectoryHandle, file_handle, directory_handle
from .local import LocalFileSystem
from .memory import MemoryShareStore
