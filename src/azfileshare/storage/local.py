"""Local file system access"""
import os
import pathlib
import typing as t
from .base import local_file_error_wrap


class LocalFileSystem:
    """Thin wrapper over pathlib.Path for the local side of a transfer.

        Every call that touches the disk converts OS errors into StorageErrors.
    """

    @staticmethod
    def _path(path) -> pathlib.Path:
        return pathlib.Path(path).expanduser()

    def exists(self, path) -> bool:
        return self._path(path).exists()

    def is_dir(self, path) -> bool:
        return self._path(path).is_dir()

    def is_file(self, path) -> bool:
        return self._path(path).is_file()

    def is_symlink(self, path) -> bool:
        return self._path(path).is_symlink()

    @local_file_error_wrap
    def list_children(self, path) -> t.Iterable[pathlib.Path]:
        return sorted(self._path(path).iterdir())

    @local_file_error_wrap
    def file_size(self, path) -> int:
        return self._path(path).stat().st_size

    @local_file_error_wrap
    def create_directories(self, path):
        self._path(path).mkdir(parents=True, exist_ok=True)

    @local_file_error_wrap
    def open_read(self, path) -> t.BinaryIO:
        return open(self._path(path), "rb")

    @local_file_error_wrap
    def open_write(self, path) -> t.BinaryIO:
        return open(self._path(path), "wb")

    @local_file_error_wrap
    def replace(self, source, target):
        os.replace(self._path(source), self._path(target))

    @local_file_error_wrap
    def remove(self, path):
        self._path(path).unlink(True)
