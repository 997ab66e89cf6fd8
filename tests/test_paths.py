import pathlib
import unittest as ut
from azfileshare.exc import PathOutsideMappingError, FileShareError
from azfileshare.mapping import PathMapping
from azfileshare.paths import RemotePath, split_remote_path
from azfileshare.storage import MemoryShareStore, DirectoryHandle, FileHandle, file_handle


class TestRemotePath(ut.TestCase):

    def test_separator_style_does_not_matter(self):
        self.assertEqual(RemotePath.parse("a/b/c.txt"), RemotePath.parse("a\\b\\c.txt"))
        self.assertEqual(RemotePath.parse("a/b\\c.txt"), RemotePath.parse("a/b/c.txt"))

    def test_leading_separator_ignored(self):
        self.assertEqual(RemotePath.parse("/a/b"), RemotePath.parse("a/b"))
        self.assertEqual(RemotePath.parse("\\a\\b\\"), RemotePath.parse("a/b"))
        self.assertEqual(str(RemotePath.parse("//a//b/")), "a/b")

    def test_root(self):
        self.assertTrue(RemotePath.parse(None).is_root())
        self.assertTrue(RemotePath.parse("").is_root())
        self.assertTrue(RemotePath.parse("/").is_root())
        self.assertEqual(RemotePath().parent(), RemotePath())

    def test_parent_and_name(self):
        p = RemotePath.parse("a/b/c.txt")
        self.assertEqual(p.name(), "c.txt")
        self.assertEqual(p.parent(), RemotePath.parse("a/b"))
        self.assertEqual(p.segments, ("a", "b", "c.txt"))

    def test_joinpath(self):
        self.assertEqual(RemotePath.parse("a") / "b\\c", RemotePath.parse("a/b/c"))
        self.assertEqual(RemotePath().joinpath("a", RemotePath.parse("b")), RemotePath.parse("a/b"))

    def test_relative_to(self):
        p = RemotePath.parse("top/sub/file.txt")
        self.assertTrue(p.is_relative_to("top"))
        self.assertTrue(p.is_relative_to(""))
        self.assertFalse(p.is_relative_to("to"))
        self.assertEqual(p.relative_to("top"), RemotePath.parse("sub/file.txt"))
        self.assertRaises(PathOutsideMappingError, p.relative_to, "other")

    def test_equality_and_hash(self):
        self.assertEqual(hash(RemotePath.parse("a/b")), hash(RemotePath.parse("/a\\b")))
        self.assertIn(RemotePath.parse("a\\b"), {RemotePath.parse("a/b")})
        self.assertNotEqual(RemotePath.parse("a/b"), "a/b")
        self.assertNotIn("a/b", {RemotePath.parse("a/b")})

    def test_from_segments(self):
        self.assertEqual(RemotePath.from_segments(("a", "b.txt")), RemotePath.parse("a/b.txt"))
        self.assertTrue(RemotePath.from_segments(()).is_root())

    def test_from_segments_refuses_separators(self):
        for segments in (("a\\b.txt",), ("x", "a/b"), ("",), (".",), ("..", "x")):
            with self.subTest(segments=segments):
                self.assertRaises(PathOutsideMappingError, RemotePath.from_segments, segments)


class TestSplitRemotePath(ut.TestCase):

    def test_split_with_directory(self):
        directory, leaf = split_remote_path("sub1/sub2/myfile.ext")
        self.assertEqual(directory, RemotePath.parse("sub1/sub2"))
        self.assertEqual(leaf, "myfile.ext")

    def test_split_without_separator(self):
        directory, leaf = split_remote_path("myfile.ext")
        self.assertTrue(directory.is_root())
        self.assertEqual(leaf, "myfile.ext")

    def test_split_back_slashes(self):
        directory, leaf = split_remote_path("sub1\\myfile.ext")
        self.assertEqual(directory, RemotePath.parse("sub1"))
        self.assertEqual(leaf, "myfile.ext")

    def test_file_handle_needs_name(self):
        store = MemoryShareStore()
        self.assertRaises(FileShareError, file_handle, store, "")
        handle = file_handle(store, "a/b.txt")
        self.assertEqual(handle.path(), "a/b.txt")
        self.assertEqual(handle.parent().path(), "a")


class TestPathMapping(ut.TestCase):

    def setUp(self):
        self.store = MemoryShareStore()

    def test_windows_drive_mapping(self):
        mapping = PathMapping(DirectoryHandle(self.store, "CloudDir1"), pathlib.PureWindowsPath("C:\\MyProject\\LocalDir1"))
        self.assertEqual(
            mapping.to_local_path("CloudDir1/data/1.csv"),
            pathlib.PureWindowsPath("C:\\MyProject\\LocalDir1\\data\\1.csv")
        )
        self.assertEqual(
            mapping.to_remote_path("C:\\MyProject\\LocalDir1\\data\\1.csv"),
            RemotePath.parse("CloudDir1/data/1.csv")
        )

    def test_windows_unc_mapping(self):
        mapping = PathMapping(DirectoryHandle(self.store, None), pathlib.PureWindowsPath("\\\\MyServer2\\LocalDir1"))
        self.assertEqual(
            mapping.to_local_path("a/b.txt"),
            pathlib.PureWindowsPath("\\\\MyServer2\\LocalDir1\\a\\b.txt")
        )
        self.assertEqual(
            mapping.to_remote_path("\\\\MyServer2\\LocalDir1\\a\\b.txt"),
            RemotePath.parse("a/b.txt")
        )

    def test_windows_mapping_accepts_forward_slashes(self):
        mapping = PathMapping(DirectoryHandle(self.store, "top"), pathlib.PureWindowsPath("C:\\work"))
        self.assertEqual(mapping.to_remote_path("C:/work/x/y.txt"), RemotePath.parse("top/x/y.txt"))

    def test_posix_mapping(self):
        mapping = PathMapping(DirectoryHandle(self.store, "/projects/alpha"), pathlib.PurePosixPath("/home/user/alpha"))
        self.assertEqual(mapping.to_local_path("projects\\alpha\\x.txt"), pathlib.PurePosixPath("/home/user/alpha/x.txt"))
        self.assertEqual(mapping.to_remote_path("/home/user/alpha/x.txt"), RemotePath.parse("projects/alpha/x.txt"))

    def test_anchor_maps_to_anchor(self):
        mapping = PathMapping(DirectoryHandle(self.store, "top"), pathlib.PurePosixPath("/data"))
        self.assertEqual(mapping.to_local_path("top"), pathlib.PurePosixPath("/data"))
        self.assertEqual(mapping.to_remote_path("/data"), RemotePath.parse("top"))

    def test_round_trip(self):
        mapping = PathMapping(DirectoryHandle(self.store, "top/level"), pathlib.PureWindowsPath("D:\\mirror"))
        for remote in ("top/level/a.txt", "top\\level\\b\\c.txt", "/top/level/d/e/f", "top/level"):
            with self.subTest(remote=remote):
                self.assertEqual(mapping.to_remote_path(mapping.to_local_path(remote)), RemotePath.parse(remote))

    def test_remote_outside_mapping(self):
        mapping = PathMapping(DirectoryHandle(self.store, "top/level"), pathlib.PurePosixPath("/data"))
        self.assertRaises(PathOutsideMappingError, mapping.to_local_path, "top/other/a.txt")
        self.assertRaises(PathOutsideMappingError, mapping.to_local_path, "top/levels/a.txt")
        self.assertRaises(PathOutsideMappingError, mapping.to_local_path, "top")
        self.assertRaises(PathOutsideMappingError, mapping.to_local_path, "top/level/../x")

    def test_local_outside_mapping(self):
        mapping = PathMapping(DirectoryHandle(self.store, "top"), pathlib.PurePosixPath("/data/set"))
        self.assertRaises(PathOutsideMappingError, mapping.to_remote_path, "/data/other/a.txt")
        self.assertRaises(PathOutsideMappingError, mapping.to_remote_path, "/data/settings/a.txt")
        self.assertRaises(PathOutsideMappingError, mapping.to_remote_path, "/data/set/../x")

    def test_posix_name_with_back_slash(self):
        mapping = PathMapping(DirectoryHandle(self.store, "top"), pathlib.PurePosixPath("/data"))
        self.assertRaises(PathOutsideMappingError, mapping.to_remote_path, "/data/a\\b.txt")
        self.assertRaises(PathOutsideMappingError, mapping.local_file_to_remote, "/data/sub/a\\b.txt")

    def test_handle_helpers(self):
        top = DirectoryHandle(self.store, "top")
        mapping = PathMapping(top, pathlib.PurePosixPath("/data"))
        remote_file = mapping.local_file_to_remote("/data/sub/file.txt")
        self.assertIsInstance(remote_file, FileHandle)
        self.assertEqual(remote_file, top.subdir("sub").file("file.txt"))
        remote_dir = mapping.local_directory_to_remote("/data/sub")
        self.assertIsInstance(remote_dir, DirectoryHandle)
        self.assertEqual(remote_dir.path(), "top/sub")
        self.assertEqual(mapping.remote_file_to_local(remote_file), pathlib.PurePosixPath("/data/sub/file.txt"))
        self.assertEqual(mapping.remote_directory_to_local(remote_dir), pathlib.PurePosixPath("/data/sub"))

    def test_handles_do_not_touch_store(self):
        mapping = PathMapping(DirectoryHandle(self.store, "top"), pathlib.PurePosixPath("/data"))
        handle = mapping.local_file_to_remote("/data/a/b/c.txt")
        self.assertFalse(handle.exists())
        self.assertFalse(self.store.directory_exists(RemotePath.parse("top")))
