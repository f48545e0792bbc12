"""
HDFS implementation of the UnderFileSystem interface.

:class:`HdfsUnderFileSystem` turns an unreliable, identity-sensitive
filesystem client into a uniformly-behaving under filesystem:

- every operation runs under the identity of its caller
  (:class:`hdfsufs.security.secure_context.SecureExecutionContext`),
- the operations marked below retry transient client failures
  (:class:`OSError`) back-to-back up to ``UFS_MAX_RETRIES`` attempts, then
  raise :class:`hdfsufs.exceptions.RetriesExhaustedError`,
- not-found conditions are never retried,
- guard failures (renaming a missing file, creating an existing directory)
  return ``False``.

======================== ======= =============================================
Operation                Retried On failure
======================== ======= =============================================
create, open             yes     RetriesExhaustedError
delete, exists           yes     RetriesExhaustedError
get_file_size            yes     RetriesExhaustedError
mkdirs, rename           yes     RetriesExhaustedError (guards return False)
get_block_size_byte      no      FileNotFoundError when absent
get_modification_time_ms no      FileNotFoundError when absent
get_file_locations       no      empty list
get_space                no      -1 when cluster statistics are unavailable
is_file, list            no      client error / ListingStatus sentinels
set_permission           no      client error (logged)
======================== ======= =============================================

Note:
    - The client is a long-lived handle shared by every caller and thread;
      :meth:`HdfsUnderFileSystem.close` leaves it open.
    - Existence guards of :meth:`HdfsUnderFileSystem.rename` and
      :meth:`HdfsUnderFileSystem.mkdirs` are separate, non-atomic probes.
      A concurrent modification of the namespace between the probe and the
      change is not detected.
    - :meth:`HdfsUnderFileSystem.get_space` reports the whole cluster, whatever
      the path it is given.
"""

import errno
from typing import IO, Any, Callable, Dict, List, Optional, TypeVar, Union
import hdfsufs.config as config
from hdfsufs.clients.client import FileSystemClient, ClusterStatisticsProvider
from hdfsufs.filelayer.backend import UnderFileSystem, SpaceType, ListingStatus, FULL_PERMISSION
from hdfsufs.filelayer.mkdirs import plan_directory_creation, create_directories
from hdfsufs.logger import logger
from hdfsufs.retry import CountingRetry, retry_call
from hdfsufs.schemas.filelayer.storage import UnderStorageSchema
from hdfsufs.schemas.security import SecurityConfig
from hdfsufs.security.login import LoginManager, login_manager, login_role
from hdfsufs.security.secure_context import SecureExecutionContext

T = TypeVar("T")

UNDER_FS_TYPE = "hdfs"


class HdfsUnderFileSystem(UnderFileSystem):
    """
    UnderFileSystem implementation delegating to a HDFS-like filesystem client.
    """

    def __init__(self,
                 client: FileSystemClient,
                 ufs_prefix: str = "",
                 manager: Optional[LoginManager] = None,
                 max_attempts: Optional[int] = None,
                 mkdirs_max_depth: Optional[int] = None):
        """
        Initialize the HdfsUnderFileSystem.

        Args:
            client (FileSystemClient): Shared filesystem client.
            ufs_prefix (str): Address of the backing store.
            manager (Optional[LoginManager]): Login manager holding the process login identity.
                Defaults to the process-wide one.
            max_attempts (Optional[int]): Attempts of retried operations. Defaults to ``UFS_MAX_RETRIES``.
            mkdirs_max_depth (Optional[int]): Maximum ancestors walked by mkdirs. Defaults to ``UFS_MKDIRS_MAX_DEPTH``.
        """
        self.client = client
        self.ufs_prefix = ufs_prefix
        self._login_manager = manager if manager is not None else login_manager
        self._context = SecureExecutionContext(client, self._login_manager)
        self.max_attempts = max_attempts if max_attempts is not None else int(config.UFS_MAX_RETRIES)
        self.mkdirs_max_depth = mkdirs_max_depth if mkdirs_max_depth is not None else int(config.UFS_MKDIRS_MAX_DEPTH)

    @staticmethod
    def from_config(config: dict) -> "HdfsUnderFileSystem":
        """
        Create an HdfsUnderFileSystem from an under storage configuration dictionary.

        Args:
            config (dict): Under storage configuration (see :class:`hdfsufs.schemas.filelayer.types.UnderStorage`).

        Returns:
            HdfsUnderFileSystem: Configured under filesystem.

        Raises:
            pydantic.ValidationError: If the configuration is invalid.
        """
        storage = UnderStorageSchema(storage=config).storage
        return HdfsUnderFileSystem(storage.create_client_instance(), storage.ufs_prefix())

    def _run(self, work: Callable[[FileSystemClient], T]) -> T:
        return self._context.run_as_current_user(work)

    def _retry(self, operation: Callable[[], T], description: str) -> T:
        return retry_call(operation, description, CountingRetry(self.max_attempts))

    def close(self) -> None:
        """ Leave the shared client open, other users may still rely on it. """

    def get_under_fs_type(self) -> str:
        return UNDER_FS_TYPE

    def get_conf(self) -> Dict[str, Any]:
        return self.client.get_conf()

    def set_conf(self, conf: Dict[str, Any]) -> None:
        self.client.set_conf(conf)

    def connect_from_master(self, conf: Union[SecurityConfig, dict], host: Optional[str]) -> None:
        if isinstance(conf, dict):
            conf = SecurityConfig(**conf)
        login_role(conf, "master", host, self._login_manager)

    def connect_from_worker(self, conf: Union[SecurityConfig, dict], host: Optional[str]) -> None:
        if isinstance(conf, dict):
            conf = SecurityConfig(**conf)
        login_role(conf, "worker", host, self._login_manager)

    def create(self, path: str, block_size_byte: Optional[int] = None, replication: Optional[int] = None) -> IO[bytes]:
        """
        Create a file with the full permission and open it for writing.

        Note:
            `block_size_byte` and `replication` are accepted but not applied yet:
            the file gets the defaults of the client.
        """
        if block_size_byte is not None or replication is not None:
            logger.debug("Ignoring block size %s and replication %s of %s", block_size_byte, replication, path)

        def work(client: FileSystemClient) -> IO[bytes]:
            def attempt() -> IO[bytes]:
                logger.debug("Creating HDFS file at %s", path)
                return client.create(path, FULL_PERMISSION)
            return self._retry(attempt, f"create {path}")
        return self._run(work)

    def delete(self, path: str, recursive: bool) -> bool:
        def work(client: FileSystemClient) -> bool:
            logger.debug("Deleting %s (recursive=%s)", path, recursive)
            return self._retry(lambda: client.delete(path, recursive), f"delete {path}")
        return self._run(work)

    def exists(self, path: str) -> bool:
        return self._run(lambda client: self._retry(lambda: client.exists(path), f"check if {path} exists"))

    def get_block_size_byte(self, path: str) -> int:
        def work(client: FileSystemClient) -> int:
            if not client.exists(path):
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
            return client.get_file_status(path).block_size
        return self._run(work)

    def get_file_locations(self, path: str, offset: int = 0) -> List[str]:
        """
        Hosts holding the block of a file containing `offset`.

        Only the first block found is considered. Lookup failures are logged
        and reported as an empty list.
        """
        def work(client: FileSystemClient) -> List[str]:
            try:
                locations = client.get_file_block_locations(path, offset, 1)
            except OSError:
                logger.error("Unable to get file location for %s", path, exc_info=True)
                return []
            if not locations:
                return []
            return list(locations[0].names)
        return self._run(work)

    def get_file_size(self, path: str) -> int:
        def work(client: FileSystemClient) -> int:
            return self._retry(lambda: client.get_file_status(path).length, f"get file size for {path}")
        return self._run(work)

    def get_modification_time_ms(self, path: str) -> int:
        def work(client: FileSystemClient) -> int:
            if not client.exists(path):
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
            return client.get_file_status(path).modification_time
        return self._run(work)

    def get_space(self, path: str, space_type: SpaceType) -> int:
        """
        Capacity figure of the whole cluster in bytes.

        The path is not used to scope the figure: the caching layer may load and
        store data anywhere in the cluster.

        Returns:
            int: The figure, or -1 if the client does not report cluster statistics.

        Raises:
            ValueError: If `space_type` is not a :class:`SpaceType`.
        """
        space_type = SpaceType(space_type)

        def work(client: FileSystemClient) -> int:
            if not isinstance(client, ClusterStatisticsProvider):
                return -1
            status = client.get_disk_status()
            if space_type is SpaceType.TOTAL:
                return status.capacity
            if space_type is SpaceType.USED:
                return status.used
            return status.remaining
        return self._run(work)

    def is_file(self, path: str) -> bool:
        return self._run(lambda client: client.is_file(path))

    def list(self, path: str) -> Union[List[str], ListingStatus]:
        """
        Names of the immediate children of a directory.

        Like a local directory listing, only the names are returned (not full
        paths) and listing a file does not list the file itself.

        Returns:
            Union[List[str], ListingStatus]: Child names, ``ListingStatus.NOT_FOUND``
            if `path` does not exist, or ``ListingStatus.NOT_A_DIRECTORY`` if it is a file.
        """
        def work(client: FileSystemClient) -> Union[List[str], ListingStatus]:
            try:
                statuses = client.list_status(path)
            except FileNotFoundError:
                return ListingStatus.NOT_FOUND
            if client.is_file(path):
                return ListingStatus.NOT_A_DIRECTORY
            return [status.name for status in statuses]
        return self._run(work)

    def mkdirs(self, path: str, create_parent: bool = True) -> bool:
        """
        Create a directory and its missing ancestors with the full permission.

        Missing ancestors are always created, whatever `create_parent` says.
        Each directory is created on its own with an explicit permission, so
        that no umask applies to intermediate directories.

        Returns:
            bool: False if `path` already exists or a creation failed, True otherwise.

        Raises:
            DirectoryDepthExceededError: If no existing ancestor is found within ``mkdirs_max_depth`` levels.
            RetriesExhaustedError: If the client kept failing.
        """
        def work(client: FileSystemClient) -> bool:
            def attempt() -> bool:
                plan = plan_directory_creation(path, client.exists, self.mkdirs_max_depth)
                if not plan:
                    logger.debug("Trying to create existing directory at %s", path)
                    return False
                return create_directories(plan, client.mkdir, FULL_PERMISSION)
            return self._retry(attempt, f"make directory {path}")
        return self._run(work)

    def open(self, path: str) -> IO[bytes]:
        def work(client: FileSystemClient) -> IO[bytes]:
            return self._retry(lambda: client.open(path), f"open {path}")
        return self._run(work)

    def rename(self, src: str, dst: str) -> bool:
        """
        Rename `src` to `dst`.

        Returns:
            bool: False without renaming if `src` does not exist or `dst` already exists,
            else the result of the client.
        """
        def work(client: FileSystemClient) -> bool:
            logger.debug("Renaming from %s to %s", src, dst)
            if not self.exists(src):
                logger.error("File %s does not exist. Therefore rename to %s failed.", src, dst)
                return False
            if self.exists(dst):
                logger.error("File %s does exist. Therefore rename from %s failed.", dst, src)
                return False
            return self._retry(lambda: client.rename(src, dst), f"rename {src} to {dst}")
        return self._run(work)

    def set_permission(self, path: str, posix_mode: str) -> None:
        """
        Set the permission of a path.

        Args:
            path (str): Path to change.
            posix_mode (str): Octal permission string (e.g. ``"755"``).

        Raises:
            ValueError: If `posix_mode` is not an octal permission.
            OSError: If the client fails.
        """
        try:
            mode = int(posix_mode, 8)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid permission '{posix_mode}', expected an octal string such as '755'")
        if not 0 <= mode <= 0o7777:
            raise ValueError(f"Invalid permission '{posix_mode}', must be between 0 and 7777")

        def work(client: FileSystemClient) -> None:
            try:
                status = client.get_file_status(path)
                logger.info("Changing file '%s' permissions from: %s to %s",
                            status.path, format(status.permission, "o"), posix_mode)
                client.set_permission(status.path, mode)
            except OSError:
                logger.error("Fail to set permission for %s with perm %s", path, posix_mode, exc_info=True)
                raise
        self._run(work)
