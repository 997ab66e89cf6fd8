"""Tree traversal for remote and local directories.

    Both walkers produce a lazy, pre-order sequence: when a subdirectory is
    reached, its own entry (if directories are wanted) comes first and its
    contents follow immediately, before the remaining siblings. Every call
    lists the tree again, nothing is cached between calls.
"""
import enum
import pathlib
import typing as t
from azfileshare.storage.base import DirectoryHandle, ShareHandle
from azfileshare.storage.local import LocalFileSystem


class Want(enum.Enum):
    """Which entries a walk should produce."""

    FILES = "files"
    DIRECTORIES = "directories"
    BOTH = "both"

    def files(self) -> bool:
        return self is not Want.DIRECTORIES

    def directories(self) -> bool:
        return self is not Want.FILES


class LocalEntry:
    """An entry found while walking a local directory."""

    def __init__(self, path: pathlib.Path, is_dir: bool):
        self.path = path
        self.is_dir = is_dir

    def __eq__(self, other):
        if not isinstance(other, LocalEntry):
            return NotImplemented
        return self.path == other.path and self.is_dir == other.is_dir

    def __hash__(self):
        return hash((self.path, self.is_dir))

    def __repr__(self):
        return f"LocalEntry({str(self.path)!r}, is_dir={self.is_dir})"


def walk_remote(directory: DirectoryHandle, recursive: bool = True, want: Want = Want.FILES) -> t.Iterable[ShareHandle]:
    """Find the files and/or directories below a remote directory."""
    work = [(directory, iter(directory.store.list_children(directory.remote_path)))]
    while work:
        parent, children = work[-1]
        child = next(children, None)
        if child is None:
            work.pop()
            continue
        name, is_dir = child
        if is_dir:
            sub_dir = parent.subdir(name)
            if want.directories():
                yield sub_dir
            if recursive:
                work.append((sub_dir, iter(sub_dir.store.list_children(sub_dir.remote_path))))
        elif want.files():
            yield parent.file(name)


def walk_local(path, recursive: bool = True, want: Want = Want.FILES, local_fs: LocalFileSystem = None) -> t.Iterable[LocalEntry]:
    """Find the files and/or directories below a local directory.

        Symbolic links to directories are reported but never followed.
    """
    local_fs = local_fs or LocalFileSystem()
    work = [iter(local_fs.list_children(path))]
    while work:
        child = next(work[-1], None)
        if child is None:
            work.pop()
            continue
        if local_fs.is_dir(child):
            if want.directories():
                yield LocalEntry(child, True)
            if recursive and not local_fs.is_symlink(child):
                work.append(iter(local_fs.list_children(child)))
        elif want.files() and local_fs.is_file(child):
            yield LocalEntry(child, False)


def list_remote_files(directory: DirectoryHandle, recursive: bool = True) -> list[ShareHandle]:
    return list(walk_remote(directory, recursive, Want.FILES))


def list_remote_directories(directory: DirectoryHandle, recursive: bool = True) -> list[ShareHandle]:
    return list(walk_remote(directory, recursive, Want.DIRECTORIES))
