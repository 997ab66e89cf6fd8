import unittest as ut
import azure.core.exceptions as ace
from azure.storage.fileshare import FileProperties, DirectoryProperties
from azfileshare.exc import StorageError, FileShareError
from azfileshare.paths import RemotePath
from azfileshare.storage import HandleKind
from azfileshare.storage.azure_files import AzureFileShareStore


def _item(cls, name):
    item = cls()
    item.name = name
    return item


class FakeProperties:

    def __init__(self, size=0, metadata=None):
        self.size = size
        self.metadata = metadata or {}


class FakeDownload:

    def __init__(self, chunks):
        self._chunks = chunks

    def chunks(self):
        return iter(self._chunks)


class FakeFileClient:

    def __init__(self, share, path):
        self._share = share
        self.file_path = path

    def get_file_properties(self):
        if self.file_path not in self._share.files:
            raise ace.ResourceNotFoundError("The specified resource does not exist.")
        return FakeProperties(len(self._share.files[self.file_path]), self._share.metadata.get(self.file_path))

    def create_file(self, size):
        self._share.calls.append(("create_file", self.file_path, size))
        self._share.files[self.file_path] = bytearray(size)

    def upload_range(self, data, offset, length):
        self._share.calls.append(("upload_range", self.file_path, offset, length))
        self._share.files[self.file_path][offset:offset + length] = data

    def download_file(self):
        return FakeDownload([bytes(self._share.files[self.file_path])])

    def set_file_metadata(self, metadata):
        self._share.metadata[self.file_path] = dict(metadata)


class FakeDirectoryClient:

    def __init__(self, share, path):
        self._share = share
        self.directory_path = path

    def exists(self):
        return self.directory_path in self._share.directories

    def create_directory(self):
        if self.directory_path in self._share.directories:
            raise ace.ResourceExistsError("The specified resource already exists.")
        if self._share.fail_creates:
            raise ace.ClientAuthenticationError("Server failed to authenticate the request.")
        self._share.directories.add(self.directory_path)

    def list_directories_and_files(self):
        return iter(self._share.listings.get(self.directory_path, []))

    def get_directory_properties(self):
        return FakeProperties(metadata=self._share.metadata.get(self.directory_path))

    def set_directory_metadata(self, metadata):
        self._share.metadata[self.directory_path] = dict(metadata)


class FakeShareClient:

    def __init__(self, exists: bool = True):
        self.share_name = "testshare"
        self.exists = exists
        self.directories = {""}
        self.files = {}
        self.metadata = {}
        self.listings = {}
        self.calls = []
        self.fail_creates = False

    def create_share(self):
        if self.exists:
            raise ace.ResourceExistsError("The specified share already exists.")
        self.exists = True

    def get_directory_client(self, directory_path=None):
        return FakeDirectoryClient(self, directory_path)

    def get_file_client(self, file_path):
        return FakeFileClient(self, file_path)


class TestAzureFileShareStore(ut.TestCase):

    def setUp(self):
        self.client = FakeShareClient()
        self.store = AzureFileShareStore(self.client)

    def test_name(self):
        self.assertEqual(self.store.name(), "testshare")

    def test_create_share(self):
        self.assertFalse(self.store.create_share_if_missing())
        store = AzureFileShareStore(FakeShareClient(False))
        self.assertTrue(store.create_share_if_missing())

    def test_file_exists(self):
        self.client.files["a/b.txt"] = bytearray(b"x")
        self.assertTrue(self.store.file_exists(RemotePath.parse("a/b.txt")))
        self.assertFalse(self.store.file_exists(RemotePath.parse("a/c.txt")))

    def test_create_directory_race(self):
        path = RemotePath.parse("a")
        self.assertTrue(self.store.create_directory(path))
        self.assertFalse(self.store.create_directory(path))
        self.assertTrue(self.store.directory_exists(path))

    def test_create_directory_failure(self):
        self.client.fail_creates = True
        with self.assertRaises(StorageError) as cm:
            self.store.create_directory(RemotePath.parse("a"))
        self.assertTrue(cm.exception.is_recoverable)
        self.assertIn("STORAGE-2003", str(cm.exception))

    def test_write_and_read(self):
        path = RemotePath.parse("a\\b.txt")
        self.store.create_file(path, 6)
        self.store.write_range(path, 0, b"abc")
        self.store.write_range(path, 3, b"def")
        self.assertEqual(b"".join(self.store.read_chunks(path)), b"abcdef")
        self.assertEqual(self.store.file_length(path), 6)
        self.assertEqual(self.client.calls, [
            ("create_file", "a/b.txt", 6),
            ("upload_range", "a/b.txt", 0, 3),
            ("upload_range", "a/b.txt", 3, 3),
        ])

    def test_missing_file_length(self):
        with self.assertRaises(StorageError) as cm:
            self.store.file_length(RemotePath.parse("nope"))
        self.assertIn("STORAGE-2004", str(cm.exception))

    def test_root_is_not_a_file(self):
        self.assertRaises(FileShareError, self.store.file_client, RemotePath())

    def test_list_children(self):
        self.client.listings["top"] = [
            _item(FileProperties, "a.txt"),
            _item(DirectoryProperties, "sub"),
        ]
        self.assertEqual(list(self.store.list_children(RemotePath.parse("top"))), [("a.txt", False), ("sub", True)])

    def test_list_children_unknown_type(self):
        self.client.listings[""] = [object()]
        self.assertRaises(FileShareError, list, self.store.list_children(RemotePath()))

    def test_metadata(self):
        self.client.files["f"] = bytearray()
        self.store.set_metadata(HandleKind.FILE, RemotePath.parse("f"), {"a": "1"})
        self.store.set_metadata(HandleKind.DIRECTORY, RemotePath(), {"b": "2"})
        self.assertEqual(self.store.get_metadata(HandleKind.FILE, RemotePath.parse("f")), {"a": "1"})
        self.assertEqual(self.store.get_metadata(HandleKind.DIRECTORY, RemotePath()), {"b": "2"})

    def test_connect_needs_credentials(self):
        self.assertRaises(FileShareError, AzureFileShareStore.connect, "share")
