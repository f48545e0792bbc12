"""
Abstract interface of the filesystem clients used by the hdfsufs adapter.

The adapter never performs storage itself: every path operation ends up as
one of the calls declared by :class:`FileSystemClient`. Concrete clients
(e.g. local directory, WebHDFS) implement this interface. Every call may fail
with :class:`OSError`; a missing path must be reported as
:class:`FileNotFoundError`.

Cluster-wide capacity figures are an optional capability, declared by the
separate :class:`ClusterStatisticsProvider` interface. Clients able to report
them inherit from both classes.

Warning:
   The `FileSystemClient` class is an abstract class not intented to be used.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import IO, Any, Dict, List
from hdfsufs.security.identity import Identity


@dataclass(frozen=True)
class FileStatus:
    """
    Snapshot of the metadata of a path, as returned by the client.

    Attributes:
        path (str): Full path of the entry.
        length (int): Length in bytes (0 for directories).
        is_dir (bool): True if the entry is a directory.
        block_size (int): Block size in bytes.
        modification_time (int): Modification time in milliseconds since the epoch.
        permission (int): POSIX permission bits.
    """
    path: str
    length: int
    is_dir: bool
    block_size: int
    modification_time: int
    permission: int = 0

    @property
    def name(self) -> str:
        """ Last component of the path. """
        return self.path.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class BlockLocation:
    """
    Location of one block of a file.

    Attributes:
        names (List[str]): ``host:port`` of the nodes holding the block.
        hosts (List[str]): Hostnames of the nodes holding the block.
        offset (int): Offset of the block in the file.
        length (int): Length of the block.
    """
    names: List[str] = field(default_factory=list)
    hosts: List[str] = field(default_factory=list)
    offset: int = 0
    length: int = 0


@dataclass(frozen=True)
class DiskStatus:
    """ Capacity figures of the whole backing cluster, in bytes. """
    capacity: int
    used: int
    remaining: int


class ClusterStatisticsProvider(ABC):
    """
    Capability of clients able to report cluster-wide capacity figures.
    """

    @abstractmethod
    def get_disk_status(self) -> DiskStatus:
        """
        Report the capacity of the whole backing cluster.

        Returns:
            DiskStatus: Total, used and remaining bytes.
        """
        raise NotImplementedError("get_disk_status() must be implemented in a subclass")


class FileSystemClient(ABC):
    """
    Abstract base class defining the calls the adapter needs from a filesystem client.
    """

    def as_identity(self, identity: Identity) -> "FileSystemClient":
        """
        Return a view of this client issuing its calls on behalf of `identity`.

        By default clients ignore the identity and return themselves. Override
        in clients whose remote side checks the caller identity.

        Args:
            identity (Identity): Identity to run the calls under.

        Returns:
            FileSystemClient: Client bound to `identity`.
        """
        return self

    def get_conf(self) -> Dict[str, Any]:
        """
        Return the effective options of this client.

        Returns:
            Dict[str, Any]: Client options.
        """
        return {}

    def set_conf(self, conf: Dict[str, Any]) -> None:
        """
        Merge `conf` into the options of this client.

        By default clients take no options and ignore it.

        Args:
            conf (Dict[str, Any]): Options to set.
        """

    @abstractmethod
    def create(self, path: str, permission: int) -> IO[bytes]:
        """
        Create (or overwrite) a file and open it for writing.

        Args:
            path (str): Path of the file.
            permission (int): POSIX permission bits applied to the new file.

        Returns:
            IO[bytes]: Writable binary stream. Data is persisted on close.
        """
        raise NotImplementedError("create() must be implemented in a subclass")

    @abstractmethod
    def open(self, path: str) -> IO[bytes]:
        """
        Open a file for reading.

        Args:
            path (str): Path of the file.

        Returns:
            IO[bytes]: Readable binary stream.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        raise NotImplementedError("open() must be implemented in a subclass")

    @abstractmethod
    def delete(self, path: str, recursive: bool) -> bool:
        """
        Delete a file or a directory.

        Args:
            path (str): Path to delete.
            recursive (bool): Whether non-empty directories are deleted with their content.

        Returns:
            bool: True if something was deleted, False otherwise.
        """
        raise NotImplementedError("delete() must be implemented in a subclass")

    @abstractmethod
    def rename(self, src: str, dst: str) -> bool:
        """
        Rename `src` to `dst`.

        Returns:
            bool: True on success, False otherwise.
        """
        raise NotImplementedError("rename() must be implemented in a subclass")

    @abstractmethod
    def mkdir(self, path: str, permission: int) -> bool:
        """
        Create a single directory whose parent already exists.

        Args:
            path (str): Path of the directory.
            permission (int): POSIX permission bits applied to the directory, without umask.

        Returns:
            bool: True on success, False otherwise.
        """
        raise NotImplementedError("mkdir() must be implemented in a subclass")

    @abstractmethod
    def exists(self, path: str) -> bool:
        """ Check whether `path` exists. """
        raise NotImplementedError("exists() must be implemented in a subclass")

    @abstractmethod
    def get_file_status(self, path: str) -> FileStatus:
        """
        Fetch the metadata of `path`.

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        raise NotImplementedError("get_file_status() must be implemented in a subclass")

    @abstractmethod
    def list_status(self, path: str) -> List[FileStatus]:
        """
        List the entries of a directory.

        When `path` is a file, clients return a single-entry list holding its status.

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        raise NotImplementedError("list_status() must be implemented in a subclass")

    @abstractmethod
    def get_file_block_locations(self, path: str, offset: int, length: int) -> List[BlockLocation]:
        """
        Locate the blocks of a file overlapping ``[offset, offset + length)``.

        Returns:
            List[BlockLocation]: Locations ordered by offset.
        """
        raise NotImplementedError("get_file_block_locations() must be implemented in a subclass")

    @abstractmethod
    def set_permission(self, path: str, permission: int) -> None:
        """ Set the POSIX permission bits of `path`. """
        raise NotImplementedError("set_permission() must be implemented in a subclass")

    def is_file(self, path: str) -> bool:
        """
        Check whether `path` is an existing regular file.

        Returns:
            bool: False if the path is a directory or does not exist.
        """
        try:
            return not self.get_file_status(path).is_dir
        except FileNotFoundError:
            return False
