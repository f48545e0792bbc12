"""
Local host directory implementation of the FileSystemClient interface.

Storage paths (``/a/b``) are resolved below the configured root directory.
This client is intended for development and testing purposes, and to run
the adapter against a POSIX filesystem mounted on every host.

Note:
    - Permissions are applied with ``chmod`` after creation, so that the
      process umask never narrows them.
    - Cluster statistics are the capacity figures of the filesystem holding
      the root directory.
    - Block locations always designate the local host.

.. seealso::

   The schema of the local under storage is :class:`hdfsufs.schemas.filelayer.local_ufs.LocalUfsConfig`.
"""

import os
import posixpath
import shutil
import stat
from pathlib import Path, PurePosixPath
from typing import IO, Any, Dict, List, Optional
from hdfsufs.clients.client import FileSystemClient, ClusterStatisticsProvider, FileStatus, BlockLocation, DiskStatus
from hdfsufs.schemas.filelayer.local_ufs import LocalUfsConfig

# Block size reported for local files (same default as Hadoop's local filesystem)
DEFAULT_BLOCK_SIZE = 32 * 1024 * 1024
LOCAL_HOST = "localhost"


class LocalFileSystemClient(FileSystemClient, ClusterStatisticsProvider):
    """
    FileSystemClient implementation for a local host directory.
    """

    def __init__(self, config: LocalUfsConfig, options: Optional[Dict[str, Any]] = None):
        """
        Initialize the LocalFileSystemClient.

        Args:
            config (LocalUfsConfig): Configuration object for the local under storage.
            options (Optional[Dict[str, Any]]): Extra client options (``block_size``).
        """
        self.config = config
        self.root = Path(config.root_path)
        self.options = dict(options or {})
        self.block_size = int(self.options.get("block_size", DEFAULT_BLOCK_SIZE))

    def _full_path(self, path: str) -> Path:
        """
        Compute the host path of a storage path.

        Args:
            path (str): Storage path, absolute (``/a/b``) or relative to the root.

        Returns:
            Path: Path on the host.

        Raises:
            ValueError: If the path escapes the root directory.
        """
        p = PurePosixPath(path)
        if ".." in p.parts:
            raise ValueError(f"Path {path} must not contain '..'")
        if p.is_absolute():
            p = p.relative_to("/")
        return self.root / p

    def _status(self, path: str, full_path: Path) -> FileStatus:
        st = full_path.stat()
        is_dir = stat.S_ISDIR(st.st_mode)
        return FileStatus(
            path=path,
            length=0 if is_dir else st.st_size,
            is_dir=is_dir,
            block_size=self.block_size,
            modification_time=int(st.st_mtime * 1000),
            permission=stat.S_IMODE(st.st_mode)
        )

    def get_conf(self) -> Dict[str, Any]:
        return {"root_path": str(self.root), "block_size": self.block_size, **self.options}

    def set_conf(self, conf: Dict[str, Any]) -> None:
        self.options.update(conf)
        self.block_size = int(self.options.get("block_size", DEFAULT_BLOCK_SIZE))

    def create(self, path: str, permission: int) -> IO[bytes]:
        full_path = self._full_path(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        stream = full_path.open("wb")
        os.chmod(full_path, permission)
        return stream

    def open(self, path: str) -> IO[bytes]:
        return self._full_path(path).open("rb")

    def delete(self, path: str, recursive: bool) -> bool:
        full_path = self._full_path(path)
        if not full_path.exists():
            return False
        if full_path.is_dir():
            if recursive:
                shutil.rmtree(full_path)
            else:
                full_path.rmdir()
        else:
            full_path.unlink()
        return True

    def rename(self, src: str, dst: str) -> bool:
        src_path = self._full_path(src)
        dst_path = self._full_path(dst)
        if not src_path.exists() or dst_path.exists() or not dst_path.parent.is_dir():
            return False
        os.rename(src_path, dst_path)
        return True

    def mkdir(self, path: str, permission: int) -> bool:
        full_path = self._full_path(path)
        if full_path.is_dir():
            return True
        full_path.mkdir()
        os.chmod(full_path, permission)
        return True

    def exists(self, path: str) -> bool:
        return self._full_path(path).exists()

    def get_file_status(self, path: str) -> FileStatus:
        return self._status(path, self._full_path(path))

    def list_status(self, path: str) -> List[FileStatus]:
        full_path = self._full_path(path)
        if not full_path.is_dir():
            return [self._status(path, full_path)]
        return [self._status(posixpath.join(path, child.name), child) for child in sorted(full_path.iterdir())]

    def get_file_block_locations(self, path: str, offset: int, length: int) -> List[BlockLocation]:
        status = self.get_file_status(path)
        if status.is_dir or offset >= max(status.length, 1):
            return []
        return [BlockLocation(names=[f"{LOCAL_HOST}:0"], hosts=[LOCAL_HOST], offset=0, length=status.length)]

    def set_permission(self, path: str, permission: int) -> None:
        os.chmod(self._full_path(path), permission)

    def get_disk_status(self) -> DiskStatus:
        usage = shutil.disk_usage(self.root)
        return DiskStatus(capacity=usage.total, used=usage.used, remaining=usage.free)
