"""
Abstract base class for the under filesystems of hdfsufs.

This module defines the UnderFileSystem interface, which provides a uniform,
path-oriented API (create, open, delete, rename, list, mkdirs, stat,
permission, capacity) to the caching layer sitting on top of it. Specific
under filesystems implement this abstract class.

Storage paths are hierarchical strings (``/a/b/c``). Expected negative
outcomes (renaming a missing file, creating an existing directory) are
reported as ``False``, not as errors.

Warning:
   The `UnderFileSystem` class is an abstract class not intented to be used.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import IO, Any, Dict, List, Optional, Union
from hdfsufs.schemas.security import SecurityConfig

# Permission of every file and directory created by the adapter (0777, empty umask)
FULL_PERMISSION = 0o777 & ~0o000


class SpaceType(str, Enum):
    """ Capacity figure reported by :meth:`UnderFileSystem.get_space`. """
    TOTAL = "TOTAL"
    USED = "USED"
    FREE = "FREE"


class ListingStatus(str, Enum):
    """ Sentinels returned by :meth:`UnderFileSystem.list` instead of child names. """
    NOT_FOUND = "NOT_FOUND"
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"


class UnderFileSystem(ABC):
    """
    Abstract base class defining the interface of all under filesystems.
    """

    def close(self) -> None:
        """
        Release the resources of this under filesystem.

        By default nothing is released. Override in subclasses owning resources
        that no other user shares.
        """

    @abstractmethod
    def get_under_fs_type(self) -> str:
        """ Type of the under filesystem (e.g. ``hdfs``). """
        raise NotImplementedError("get_under_fs_type() must be implemented in a subclass")

    @abstractmethod
    def get_conf(self) -> Dict[str, Any]:
        """ Effective configuration of the underlying client. """
        raise NotImplementedError("get_conf() must be implemented in a subclass")

    @abstractmethod
    def set_conf(self, conf: Dict[str, Any]) -> None:
        """
        Set options of the underlying client.

        Args:
            conf (Dict[str, Any]): Options merged into the client options.
        """
        raise NotImplementedError("set_conf() must be implemented in a subclass")

    @abstractmethod
    def connect_from_master(self, conf: SecurityConfig, host: Optional[str]) -> None:
        """
        Log in the master role before it uses the under filesystem.

        Args:
            conf (SecurityConfig): Security configuration.
            host (Optional[str]): Host the master runs on.
        """
        raise NotImplementedError("connect_from_master() must be implemented in a subclass")

    @abstractmethod
    def connect_from_worker(self, conf: SecurityConfig, host: Optional[str]) -> None:
        """
        Log in the worker role before it uses the under filesystem.

        Args:
            conf (SecurityConfig): Security configuration.
            host (Optional[str]): Host the worker runs on.
        """
        raise NotImplementedError("connect_from_worker() must be implemented in a subclass")

    @abstractmethod
    def create(self, path: str, block_size_byte: Optional[int] = None, replication: Optional[int] = None) -> IO[bytes]:
        """
        Create a file and open it for writing.

        Args:
            path (str): Path of the file.
            block_size_byte (Optional[int]): Requested block size in bytes.
            replication (Optional[int]): Requested replication factor.

        Returns:
            IO[bytes]: Writable binary stream.
        """
        raise NotImplementedError("create() must be implemented in a subclass")

    @abstractmethod
    def delete(self, path: str, recursive: bool) -> bool:
        """
        Delete a file or a directory.

        Returns:
            bool: True on success, False otherwise.
        """
        raise NotImplementedError("delete() must be implemented in a subclass")

    @abstractmethod
    def exists(self, path: str) -> bool:
        """ Check whether `path` exists. """
        raise NotImplementedError("exists() must be implemented in a subclass")

    @abstractmethod
    def get_block_size_byte(self, path: str) -> int:
        """
        Block size of a file in bytes.

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        raise NotImplementedError("get_block_size_byte() must be implemented in a subclass")

    @abstractmethod
    def get_file_locations(self, path: str, offset: int = 0) -> List[str]:
        """
        Hosts holding the block of a file containing `offset`.

        Returns:
            List[str]: Host identifiers, empty if they cannot be determined.
        """
        raise NotImplementedError("get_file_locations() must be implemented in a subclass")

    @abstractmethod
    def get_file_size(self, path: str) -> int:
        """ Length of a file in bytes. """
        raise NotImplementedError("get_file_size() must be implemented in a subclass")

    @abstractmethod
    def get_modification_time_ms(self, path: str) -> int:
        """
        Modification time of a path in milliseconds since the epoch.

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        raise NotImplementedError("get_modification_time_ms() must be implemented in a subclass")

    @abstractmethod
    def get_space(self, path: str, space_type: SpaceType) -> int:
        """
        Capacity figure of the under filesystem in bytes.

        Returns:
            int: The figure, or -1 if it is unknown.
        """
        raise NotImplementedError("get_space() must be implemented in a subclass")

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """ Check whether `path` is an existing file. """
        raise NotImplementedError("is_file() must be implemented in a subclass")

    @abstractmethod
    def list(self, path: str) -> Union[List[str], ListingStatus]:
        """
        Names of the immediate children of a directory.

        Returns:
            Union[List[str], ListingStatus]: Child names (relative, not full paths),
            or a :class:`ListingStatus` sentinel when `path` is missing or is a file.
        """
        raise NotImplementedError("list() must be implemented in a subclass")

    @abstractmethod
    def mkdirs(self, path: str, create_parent: bool = True) -> bool:
        """
        Create a directory and its missing ancestors.

        Returns:
            bool: True on success, False if the directory exists or a creation failed.
        """
        raise NotImplementedError("mkdirs() must be implemented in a subclass")

    @abstractmethod
    def open(self, path: str) -> IO[bytes]:
        """ Open a file for reading. """
        raise NotImplementedError("open() must be implemented in a subclass")

    @abstractmethod
    def rename(self, src: str, dst: str) -> bool:
        """
        Rename `src` to `dst`.

        Returns:
            bool: True on success, False otherwise.
        """
        raise NotImplementedError("rename() must be implemented in a subclass")

    @abstractmethod
    def set_permission(self, path: str, posix_mode: str) -> None:
        """
        Set the permission of a path.

        Args:
            path (str): Path to change.
            posix_mode (str): Octal permission string (e.g. ``"755"``).
        """
        raise NotImplementedError("set_permission() must be implemented in a subclass")
