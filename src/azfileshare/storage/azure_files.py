import contextlib
import functools
import typing as t
import requests
import urllib3.exceptions
import zrlog
import azure.core.exceptions as ace
from azure.identity import DefaultAzureCredential
from azure.storage.fileshare import ShareClient, ShareFileClient, ShareDirectoryClient, FileProperties, DirectoryProperties
from azfileshare.exc import StorageError, FileShareError
from azfileshare.paths import RemotePath
from .base import RemoteStore, HandleKind


@contextlib.contextmanager
def azure_errors():
    """Translate errors from the Azure SDK into StorageErrors with recoverable set properly."""
    try:
        yield
    except ace.ClientAuthenticationError as ex:
        raise StorageError(f"Azure: client authentication error: {ex.__class__.__name__}: {str(ex)}", 2003, True) from ex
    except ace.ResourceNotFoundError as ex:
        raise StorageError(f"Azure: resource not found error: {ex.__class__.__name__}: {str(ex)}", 2004) from ex
    except ace.ResourceExistsError as ex:
        raise StorageError(f"Azure: resource already exists error: {ex.__class__.__name__}: {str(ex)}", 2005) from ex
    except ace.AzureError as ex:
        if ex.inner_exception is not None:
            if isinstance(ex.inner_exception, urllib3.exceptions.ConnectTimeoutError):
                raise StorageError(f"Azure: connection timeout error: {ex.__class__.__name__}: {str(ex)}", 2001, True) from ex
            elif isinstance(ex.inner_exception, requests.ConnectionError):
                raise StorageError(f"Azure: connection error: {ex.__class__.__name__}: {str(ex)}", 2002, True) from ex
        raise StorageError(f"Azure: {ex.__class__.__name__}: {str(ex)}", 2000) from ex


def wrap_azure_errors(cb):

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        with azure_errors():
            return cb(*args, **kwargs)

    return _inner


class AzureFileShareStore(RemoteStore):
    """RemoteStore backed by an Azure Storage file share."""

    def __init__(self, share_client: ShareClient):
        self._share = share_client
        self._log = zrlog.get_logger("azfileshare.azure")

    @staticmethod
    @wrap_azure_errors
    def connect(share_name: str,
                connection_string: t.Optional[str] = None,
                account_url: t.Optional[str] = None,
                create_if_missing: bool = False):
        """Build a store for the given share, optionally creating the share."""
        try:
            if connection_string:
                client = ShareClient.from_connection_string(conn_str=connection_string, share_name=share_name)
            elif account_url:
                client = ShareClient(
                    account_url=account_url,
                    share_name=share_name,
                    credential=DefaultAzureCredential(),
                    token_intent="backup"
                )
            else:
                raise FileShareError(f"Either a connection string or an account URL is required", "AZFILE", 1001)
        except ValueError as ex:
            raise FileShareError(f"Could not create share client", "AZFILE", 1000) from ex
        store = AzureFileShareStore(client)
        if create_if_missing:
            store.create_share_if_missing()
        return store

    def create_share_if_missing(self) -> bool:
        with azure_errors():
            try:
                self._share.create_share()
                self._log.info(f"Created file share [{self.name()}]")
                return True
            except ace.ResourceExistsError:
                return False

    def name(self) -> str:
        return self._share.share_name

    def directory_client(self, path: RemotePath) -> ShareDirectoryClient:
        return self._share.get_directory_client(str(path))

    def file_client(self, path: RemotePath) -> ShareFileClient:
        if path.is_root():
            raise FileShareError(f"Cannot make file client on the share root", "AZFILE", 1002)
        return self._share.get_file_client(str(path))

    @wrap_azure_errors
    def file_exists(self, path: RemotePath) -> bool:
        try:
            self.file_client(path).get_file_properties()
            return True
        except ace.ResourceNotFoundError:
            return False

    @wrap_azure_errors
    def directory_exists(self, path: RemotePath) -> bool:
        return self.directory_client(path).exists()

    @wrap_azure_errors
    def create_directory(self, path: RemotePath) -> bool:
        try:
            self.directory_client(path).create_directory()
            return True
        except ace.ResourceExistsError:
            return False

    @wrap_azure_errors
    def create_file(self, path: RemotePath, length: int):
        self.file_client(path).create_file(size=length)

    @wrap_azure_errors
    def write_range(self, path: RemotePath, offset: int, data: bytes):
        self.file_client(path).upload_range(data, offset=offset, length=len(data))

    def read_chunks(self, path: RemotePath) -> t.Iterable[bytes]:
        with azure_errors():
            stream = self.file_client(path).download_file()
            for chunk in stream.chunks():
                yield chunk

    def list_children(self, path: RemotePath) -> t.Iterable[tuple[str, bool]]:
        with azure_errors():
            for item in self.directory_client(path).list_directories_and_files():
                if isinstance(item, FileProperties):
                    yield item.name, False
                elif isinstance(item, DirectoryProperties):
                    yield item.name, True
                else:
                    raise FileShareError(f"Unknown type of file listing results [{item.__class__.__name__}]", "AZFILE", 1003)

    @wrap_azure_errors
    def file_length(self, path: RemotePath) -> int:
        return self.file_client(path).get_file_properties().size

    @wrap_azure_errors
    def get_metadata(self, kind: HandleKind, path: RemotePath) -> dict[str, str]:
        if kind is HandleKind.FILE:
            properties = self.file_client(path).get_file_properties()
        else:
            properties = self.directory_client(path).get_directory_properties()
        return dict(properties.metadata or {})

    @wrap_azure_errors
    def set_metadata(self, kind: HandleKind, path: RemotePath, metadata: dict[str, str]):
        if kind is HandleKind.FILE:
            self.file_client(path).set_file_metadata(metadata)
        else:
            self.directory_client(path).set_directory_metadata(metadata)
