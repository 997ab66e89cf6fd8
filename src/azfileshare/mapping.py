"""Mapping between a remote directory tree and a local directory tree.

    A mapping pairs a top-level directory in the share with a top-level
    directory on the local side. Everything below the two anchors corresponds
    one to one; only the separator changes. For example, with the remote
    anchor `projects/alpha` and the local anchor `C:\\work\\alpha`, the remote
    file `projects/alpha/data/1.csv` maps to `C:\\work\\alpha\\data\\1.csv`.

    The local anchor may be a drive path, a UNC path or a POSIX path. Passing a
    pathlib.PureWindowsPath (or PurePosixPath) anchor fixes the flavour used
    for every local path, regardless of the host OS.
"""
import pathlib
import typing as t
from azfileshare.exc import PathOutsideMappingError
from azfileshare.paths import RemotePath
from azfileshare.storage.base import DirectoryHandle, FileHandle


class PathMapping:

    def __init__(self, remote_top: DirectoryHandle, local_top: t.Union[str, pathlib.PurePath]):
        self.remote_top = remote_top
        self.local_top = local_top if isinstance(local_top, pathlib.PurePath) else pathlib.Path(local_top)

    def _local(self, local_path) -> pathlib.PurePath:
        return self.local_top.__class__(local_path)

    def to_local_path(self, remote_path: t.Union[RemotePath, str]) -> pathlib.PurePath:
        """Translate a path in the share into the corresponding local path."""
        remote_path = RemotePath.parse(remote_path)
        if not remote_path.is_relative_to(self.remote_top.remote_path):
            raise PathOutsideMappingError(f"Remote path [{remote_path}] is not below [{self.remote_top}]", 1001)
        relative = remote_path.relative_to(self.remote_top.remote_path)
        if ".." in relative.segments:
            raise PathOutsideMappingError(f"Remote path [{remote_path}] leaves [{self.remote_top}]", 1002)
        return self.local_top.joinpath(*relative.segments)

    def to_remote_path(self, local_path: t.Union[str, pathlib.PurePath]) -> RemotePath:
        """Translate a local path into the corresponding path in the share.

            Local names that cannot exist in a share (such as a POSIX file name
            holding a back slash) raise PathOutsideMappingError.
        """
        local_path = self._local(local_path)
        try:
            relative = local_path.relative_to(self.local_top)
        except ValueError as ex:
            raise PathOutsideMappingError(f"Local path [{local_path}] is not below [{self.local_top}]", 1003) from ex
        if ".." in relative.parts:
            raise PathOutsideMappingError(f"Local path [{local_path}] leaves [{self.local_top}]", 1004)
        return self.remote_top.remote_path.joinpath(RemotePath.from_segments(relative.parts))

    def remote_file_to_local(self, remote_file: FileHandle) -> pathlib.PurePath:
        return self.to_local_path(remote_file.remote_path)

    def remote_directory_to_local(self, remote_directory: DirectoryHandle) -> pathlib.PurePath:
        return self.to_local_path(remote_directory.remote_path)

    def local_file_to_remote(self, local_path: t.Union[str, pathlib.PurePath]) -> FileHandle:
        return FileHandle(self.remote_top.store, self.to_remote_path(local_path))

    def local_directory_to_remote(self, local_path: t.Union[str, pathlib.PurePath]) -> DirectoryHandle:
        return DirectoryHandle(self.remote_top.store, self.to_remote_path(local_path))
