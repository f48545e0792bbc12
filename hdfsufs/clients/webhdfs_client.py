"""
WebHDFS implementation of the FileSystemClient interface.

This client talks to the WebHDFS REST API of an HDFS cluster
(``<address>/webhdfs/v1/<path>?op=...``) with `requests`.

Identity handling:
    - Without Kerberos login, requests carry ``user.name=<user>`` of the
      identity the client is bound to.
    - Under a Kerberos login of the process, requests authenticate with
      SPNEGO (`requests-kerberos`) as the login principal and carry
      ``doas=<user>`` when the bound identity is another user (proxy user).

Error mapping:
    - HTTP 404 and remote ``FileNotFoundException`` raise :class:`FileNotFoundError`.
    - Every other remote exception, connection error or timeout raises :class:`OSError`.

Note:
    WebHDFS does not expose the disk status of the cluster, this client does
    not implement :class:`hdfsufs.clients.client.ClusterStatisticsProvider`.

.. seealso::

   The schema of the WebHDFS under storage is :class:`hdfsufs.schemas.filelayer.webhdfs_ufs.WebHdfsUfsConfig`.
"""

import errno
import io
import posixpath
from typing import IO, Any, Dict, List, Optional, Tuple
from urllib.parse import quote
import requests
from requests_kerberos import HTTPKerberosAuth, OPTIONAL
from hdfsufs.clients.client import FileSystemClient, FileStatus, BlockLocation
from hdfsufs.logger import logger
from hdfsufs.schemas.filelayer.webhdfs_ufs import WebHdfsUfsConfig
from hdfsufs.security.identity import Identity
from hdfsufs.security.login import LoginManager, login_manager

WEBHDFS_PATH_PREFIX = "/webhdfs/v1"


class WebHdfsWriter(io.BytesIO):
    """
    Writable stream buffering the content of a WebHDFS file.

    The content is uploaded when the stream is closed.
    """

    def __init__(self, client: "WebHdfsClient", path: str, permission: int) -> None:
        super().__init__()
        self._client = client
        self._path = path
        self._permission = permission

    def close(self) -> None:
        if self.closed:
            return
        data = self.getvalue()
        super().close()
        if data:
            self._client._put_file(self._path, data, self._permission)


class WebHdfsClient(FileSystemClient):
    """
    FileSystemClient implementation for the WebHDFS REST API.
    """

    def __init__(self,
                 config: WebHdfsUfsConfig,
                 options: Optional[Dict[str, Any]] = None,
                 identity: Optional[Identity] = None,
                 session: Optional[requests.Session] = None,
                 manager: Optional[LoginManager] = None):
        """
        Initialize the WebHdfsClient.

        Args:
            config (WebHdfsUfsConfig): Configuration object for the WebHDFS under storage.
            options (Optional[Dict[str, Any]]): Extra client options, sent with every request as query parameters.
            identity (Optional[Identity]): Identity the requests are issued for.
            session (Optional[requests.Session]): HTTP session, shared between bound clients.
            manager (Optional[LoginManager]): Login manager holding the process login identity.
        """
        self.config = config
        self.options = dict(options or {})
        self.identity = identity
        self.session = session if session is not None else requests.Session()
        self.session.verify = config.verify
        self._login_manager = manager if manager is not None else login_manager

    def as_identity(self, identity: Identity) -> "WebHdfsClient":
        return WebHdfsClient(self.config, self.options, identity=identity,
                             session=self.session, manager=self._login_manager)

    def get_conf(self) -> Dict[str, Any]:
        return {"address": self.config.address, "timeout": self.config.timeout, **self.options}

    def set_conf(self, conf: Dict[str, Any]) -> None:
        self.options.update(conf)

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.config.address}{WEBHDFS_PATH_PREFIX}{quote(path)}"

    def _auth(self) -> Tuple[Optional[HTTPKerberosAuth], Dict[str, str]]:
        """
        Compute the authentication and identity query parameters of a request.

        Returns:
            Tuple[Optional[HTTPKerberosAuth], Dict[str, str]]: SPNEGO authentication (or None) and query parameters.
        """
        if self._login_manager.authentication == "kerberos":
            login = self._login_manager.login_identity
            params = {}
            if self.identity is not None and self.identity.user != login.user:
                params["doas"] = self.identity.user
            return HTTPKerberosAuth(mutual_authentication=OPTIONAL), params

        user = self.identity.user if self.identity is not None else self.config.user
        return None, ({"user.name": user} if user else {})

    def _request(self, method: str, path: str, op: str, allow_redirects: bool = True,
                 data: Optional[bytes] = None, **params: Any) -> requests.Response:
        """
        Issue a WebHDFS request.

        Raises:
            FileNotFoundError: If the path does not exist.
            OSError: On any other failure.
        """
        auth, query = self._auth()
        query.update(self.options)
        query.update(params)
        query["op"] = op
        logger.debug("WebHDFS %s %s op=%s", method, path, op)
        try:
            response = self.session.request(method, self._url(path), params=query, auth=auth, data=data,
                                            timeout=self.config.timeout, allow_redirects=allow_redirects)
        except requests.RequestException as e:
            raise OSError(f"WebHDFS {op} on {path} failed: {e}") from e
        if response.status_code >= 400:
            self._raise_remote_exception(response, op, path)
        return response

    @staticmethod
    def _raise_remote_exception(response: requests.Response, op: str, path: str) -> None:
        """
        Convert an error response into an exception.

        Raises:
            FileNotFoundError: For HTTP 404 or a remote FileNotFoundException.
            OSError: For any other error.
        """
        exception, message = None, response.text
        try:
            remote = response.json().get("RemoteException", {})
            exception = remote.get("exception")
            message = remote.get("message", message)
        except ValueError:
            pass
        if response.status_code == 404 or exception == "FileNotFoundException":
            raise FileNotFoundError(errno.ENOENT, message, path)
        raise OSError(f"WebHDFS {op} on {path} failed with HTTP {response.status_code}: {exception or ''} {message}".strip())

    def _put_file(self, path: str, data: bytes, permission: int) -> None:
        """
        Create (or overwrite) a file with `data`, following the DataNode redirect.
        """
        response = self._request("PUT", path, "CREATE", allow_redirects=False,
                                 overwrite="true", permission=format(permission, "o"))
        if response.status_code != 307:
            return
        location = response.headers["Location"]
        auth, _ = self._auth()
        try:
            response = self.session.put(location, data=data, auth=auth, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise OSError(f"WebHDFS CREATE on {path} failed: {e}") from e
        if response.status_code >= 400:
            self._raise_remote_exception(response, "CREATE", path)

    @staticmethod
    def _to_status(path: str, fs: Dict[str, Any]) -> FileStatus:
        return FileStatus(
            path=path,
            length=int(fs.get("length", 0)),
            is_dir=fs.get("type") == "DIRECTORY",
            block_size=int(fs.get("blockSize", 0)),
            modification_time=int(fs.get("modificationTime", 0)),
            permission=int(fs.get("permission", "0"), 8)
        )

    def create(self, path: str, permission: int) -> IO[bytes]:
        self._put_file(path, b"", permission)
        return WebHdfsWriter(self, path, permission)

    def open(self, path: str) -> IO[bytes]:
        response = self._request("GET", path, "OPEN")
        return io.BytesIO(response.content)

    def delete(self, path: str, recursive: bool) -> bool:
        response = self._request("DELETE", path, "DELETE", recursive=str(recursive).lower())
        return bool(response.json()["boolean"])

    def rename(self, src: str, dst: str) -> bool:
        response = self._request("PUT", src, "RENAME", destination=dst)
        return bool(response.json()["boolean"])

    def mkdir(self, path: str, permission: int) -> bool:
        response = self._request("PUT", path, "MKDIRS", permission=format(permission, "o"))
        return bool(response.json()["boolean"])

    def exists(self, path: str) -> bool:
        try:
            self.get_file_status(path)
        except FileNotFoundError:
            return False
        return True

    def get_file_status(self, path: str) -> FileStatus:
        response = self._request("GET", path, "GETFILESTATUS")
        return self._to_status(path, response.json()["FileStatus"])

    def list_status(self, path: str) -> List[FileStatus]:
        response = self._request("GET", path, "LISTSTATUS")
        statuses = []
        for fs in response.json()["FileStatuses"]["FileStatus"]:
            suffix = fs.get("pathSuffix", "")
            statuses.append(self._to_status(posixpath.join(path, suffix) if suffix else path, fs))
        return statuses

    def get_file_block_locations(self, path: str, offset: int, length: int) -> List[BlockLocation]:
        response = self._request("GET", path, "GETFILEBLOCKLOCATIONS", offset=offset, length=length)
        locations = response.json().get("BlockLocations", {}).get("BlockLocation", [])
        return [
            BlockLocation(
                names=list(location.get("names", [])),
                hosts=list(location.get("hosts", [])),
                offset=int(location.get("offset", 0)),
                length=int(location.get("length", 0))
            )
            for location in locations
        ]

    def set_permission(self, path: str, permission: int) -> None:
        self._request("PUT", path, "SETPERMISSION", permission=format(permission, "o"))
