import io
import posixpath
import unittest
from collections import defaultdict
from typing import List
from unittest.mock import patch, MagicMock
from hdfsufs.clients.client import FileSystemClient, ClusterStatisticsProvider, FileStatus, BlockLocation, DiskStatus
from hdfsufs.exceptions import RetriesExhaustedError, DirectoryDepthExceededError, LoginError
from hdfsufs.filelayer.backend import UnderFileSystem, SpaceType, ListingStatus, FULL_PERMISSION
from hdfsufs.filelayer.hdfs_backend import HdfsUnderFileSystem
from hdfsufs.schemas.security import SecurityConfig
from hdfsufs.security.identity import Identity, caller_identity
from hdfsufs.security.login import LoginManager


class InMemoryClient(FileSystemClient):
    """
    In-memory filesystem client recording its calls.

    ``failures[method] = n`` makes the next n calls of `method` raise OSError.
    """

    def __init__(self):
        self.dirs = {"/"}
        self.files = {}
        self.permissions = {}
        self.calls = []
        self.failures = defaultdict(int)
        self.identities = []

    def _call(self, method, *args):
        self.calls.append((method,) + args)
        if self.failures[method] > 0:
            self.failures[method] -= 1
            raise OSError(f"transient failure of {method}")

    def as_identity(self, identity):
        self.identities.append(identity)
        return self

    def get_conf(self):
        return {"impl": "memory"}

    def create(self, path, permission):
        self._call("create", path, permission)
        self.files[path] = b""
        self.permissions[path] = permission
        return io.BytesIO()

    def open(self, path):
        self._call("open", path)
        if path not in self.files:
            raise FileNotFoundError(path)
        return io.BytesIO(self.files[path])

    def delete(self, path, recursive):
        self._call("delete", path, recursive)
        if path in self.files:
            del self.files[path]
            return True
        if path in self.dirs:
            self.dirs.discard(path)
            return True
        return False

    def rename(self, src, dst):
        self._call("rename", src, dst)
        self.files[dst] = self.files.pop(src)
        return True

    def mkdir(self, path, permission):
        self._call("mkdir", path, permission)
        self.dirs.add(path)
        self.permissions[path] = permission
        return True

    def exists(self, path):
        self._call("exists", path)
        return path in self.dirs or path in self.files

    def get_file_status(self, path):
        self._call("get_file_status", path)
        if path in self.files:
            return FileStatus(path=path, length=len(self.files[path]), is_dir=False,
                              block_size=128, modification_time=1000, permission=self.permissions.get(path, 0o644))
        if path in self.dirs:
            return FileStatus(path=path, length=0, is_dir=True, block_size=0, modification_time=2000,
                              permission=self.permissions.get(path, 0o755))
        raise FileNotFoundError(path)

    def list_status(self, path):
        self._call("list_status", path)
        status = self.get_file_status(path)
        if not status.is_dir:
            return [status]
        children = [p for p in self.dirs | set(self.files) if p != path and posixpath.dirname(p) == path]
        return [self.get_file_status(p) for p in sorted(children)]

    def get_file_block_locations(self, path, offset, length) -> List[BlockLocation]:
        self._call("get_file_block_locations", path, offset, length)
        self.get_file_status(path)
        return [BlockLocation(names=["dn1:9866", "dn2:9866"], hosts=["dn1", "dn2"]),
                BlockLocation(names=["dn3:9866"], hosts=["dn3"])]

    def set_permission(self, path, permission):
        self._call("set_permission", path, permission)
        self.permissions[path] = permission


class InMemoryStatsClient(InMemoryClient, ClusterStatisticsProvider):
    """ In-memory client able to report cluster statistics. """

    def get_disk_status(self):
        return DiskStatus(capacity=1000, used=300, remaining=700)


class TestHdfsUnderFileSystem(unittest.TestCase):
    """
    Unit tests for class HdfsUnderFileSystem
    """

    def setUp(self):
        self.client = InMemoryClient()
        self.manager = LoginManager()
        self.ufs = HdfsUnderFileSystem(self.client, "hdfs://namenode:8020", manager=self.manager)

    def calls_of(self, method):
        return [call for call in self.client.calls if call[0] == method]

    def test_inheritance(self):
        """ Test that HdfsUnderFileSystem implements UnderFileSystem """
        self.assertIsInstance(self.ufs, UnderFileSystem)
        self.assertEqual(self.ufs.get_under_fs_type(), "hdfs")
        self.assertEqual(self.ufs.ufs_prefix, "hdfs://namenode:8020")
        self.assertEqual(self.ufs.get_conf(), {"impl": "memory"})

    def test_set_conf_forwards_to_client(self):
        """ Test that set_conf() hands the options over to the client """
        client = MagicMock()
        ufs = HdfsUnderFileSystem(client, manager=self.manager)
        ufs.set_conf({"block_size": 1024})
        client.set_conf.assert_called_once_with({"block_size": 1024})

    def test_close_keeps_client_open(self):
        """ Test that close() does not touch the shared client """
        client = MagicMock()
        HdfsUnderFileSystem(client, manager=self.manager).close()
        client.close.assert_not_called()

    # --- create / open ---

    def test_create_applies_full_permission(self):
        """ Test that create() creates the file with the full permission """
        stream = self.ufs.create("/a.txt")
        self.assertIsInstance(stream, io.BytesIO)
        self.assertEqual(self.calls_of("create"), [("create", "/a.txt", 0o777)])

    def test_create_ignores_tuning_parameters(self):
        """ Test that block size and replication are accepted and ignored """
        self.ufs.create("/a.txt", block_size_byte=512, replication=3)
        self.ufs.create("/b.txt", 1024)
        self.assertEqual(self.calls_of("create"), [("create", "/a.txt", FULL_PERMISSION),
                                                   ("create", "/b.txt", FULL_PERMISSION)])

    def test_create_retries_transient_failures(self):
        """ Test that create() succeeds after transient failures within the bound """
        self.client.failures["create"] = 4
        self.ufs.create("/a.txt")
        self.assertEqual(len(self.calls_of("create")), 5)

    def test_create_exhaustion(self):
        """ Test that create() raises RetriesExhaustedError after max attempts """
        self.client.failures["create"] = 6
        with self.assertRaises(RetriesExhaustedError) as ctx:
            self.ufs.create("/a.txt")
        self.assertEqual(len(self.calls_of("create")), 5)
        self.assertIsInstance(ctx.exception.last_error, OSError)

    def test_open(self):
        """ Test that open() returns the content of the file """
        self.client.files["/a.txt"] = b"hello"
        self.assertEqual(self.ufs.open("/a.txt").read(), b"hello")

    def test_open_missing_not_retried(self):
        """ Test that opening a missing file raises FileNotFoundError after a single call """
        with self.assertRaises(FileNotFoundError) as ctx:
            self.ufs.open("/missing")
        self.assertNotIsInstance(ctx.exception, RetriesExhaustedError)
        self.assertEqual(len(self.calls_of("open")), 1)

    def test_open_exhaustion(self):
        """ Test that open() propagates exhaustion """
        self.client.files["/a.txt"] = b"hello"
        self.client.failures["open"] = 5
        with self.assertRaises(RetriesExhaustedError):
            self.ufs.open("/a.txt")

    # --- delete / exists ---

    def test_delete_forwards_recursive_flag(self):
        """ Test that delete() forwards the recursive flag as-is """
        self.client.dirs.add("/d")
        self.assertTrue(self.ufs.delete("/d", True))
        self.assertFalse(self.ufs.delete("/missing", False))
        self.assertEqual(self.calls_of("delete"), [("delete", "/d", True), ("delete", "/missing", False)])

    def test_delete_retries(self):
        """ Test that delete() retries transient failures """
        self.client.files["/a"] = b""
        self.client.failures["delete"] = 2
        self.assertTrue(self.ufs.delete("/a", False))
        self.assertEqual(len(self.calls_of("delete")), 3)

    def test_exists(self):
        """ Test exists() for present and missing paths """
        self.client.files["/a"] = b""
        self.assertTrue(self.ufs.exists("/a"))
        self.assertFalse(self.ufs.exists("/b"))

    def test_exists_exhaustion(self):
        """ Test that exists() propagates exhaustion """
        self.client.failures["exists"] = 10
        with self.assertRaises(RetriesExhaustedError):
            self.ufs.exists("/a")
        self.assertEqual(len(self.calls_of("exists")), 5)

    # --- metadata ---

    def test_get_block_size_byte(self):
        """ Test that get_block_size_byte() returns the block size of the file """
        self.client.files["/a"] = b"x"
        self.assertEqual(self.ufs.get_block_size_byte("/a"), 128)

    def test_get_block_size_byte_not_found(self):
        """ Test that get_block_size_byte() raises FileNotFoundError without retrying """
        with self.assertRaises(FileNotFoundError):
            self.ufs.get_block_size_byte("/missing")
        self.assertEqual(len(self.calls_of("exists")), 1)

    def test_get_block_size_byte_not_retried(self):
        """ Test that transient failures of get_block_size_byte() are not retried """
        self.client.files["/a"] = b"x"
        self.client.failures["get_file_status"] = 1
        with self.assertRaises(OSError) as ctx:
            self.ufs.get_block_size_byte("/a")
        self.assertNotIsInstance(ctx.exception, RetriesExhaustedError)

    def test_get_modification_time_ms(self):
        """ Test that get_modification_time_ms() returns the modification time """
        self.client.files["/a"] = b"x"
        self.assertEqual(self.ufs.get_modification_time_ms("/a"), 1000)

    def test_get_modification_time_ms_not_found(self):
        """ Test that get_modification_time_ms() raises FileNotFoundError """
        with self.assertRaises(FileNotFoundError):
            self.ufs.get_modification_time_ms("/missing")

    def test_get_file_size(self):
        """ Test that get_file_size() returns the length after transient failures """
        self.client.files["/a"] = b"hello"
        self.client.failures["get_file_status"] = 4
        self.assertEqual(self.ufs.get_file_size("/a"), 5)

    def test_get_file_size_missing_not_retried(self):
        """ Test that the size of a missing file raises FileNotFoundError after a single call """
        with self.assertRaises(FileNotFoundError) as ctx:
            self.ufs.get_file_size("/missing")
        self.assertNotIsInstance(ctx.exception, RetriesExhaustedError)
        self.assertEqual(len(self.calls_of("get_file_status")), 1)

    def test_get_file_size_exhaustion(self):
        """ Test that get_file_size() raises RetriesExhaustedError like the other retried operations """
        self.client.files["/a"] = b"hello"
        self.client.failures["get_file_status"] = 5
        with self.assertRaises(RetriesExhaustedError):
            self.ufs.get_file_size("/a")

    def test_get_file_locations_first_block_only(self):
        """ Test that only the names of the first located block are returned """
        self.client.files["/a"] = b"x"
        self.assertEqual(self.ufs.get_file_locations("/a"), ["dn1:9866", "dn2:9866"])
        self.assertEqual(self.calls_of("get_file_block_locations"), [("get_file_block_locations", "/a", 0, 1)])

    def test_get_file_locations_offset(self):
        """ Test that the offset is forwarded to the client """
        self.client.files["/a"] = b"x"
        self.ufs.get_file_locations("/a", 4096)
        self.assertEqual(self.calls_of("get_file_block_locations"), [("get_file_block_locations", "/a", 4096, 1)])

    def test_get_file_locations_failure(self):
        """ Test that lookup failures yield an empty list without retry """
        self.assertEqual(self.ufs.get_file_locations("/missing"), [])
        self.client.files["/a"] = b"x"
        self.client.failures["get_file_block_locations"] = 1
        self.assertEqual(self.ufs.get_file_locations("/a"), [])
        self.assertEqual(len(self.calls_of("get_file_block_locations")), 2)

    def test_get_file_locations_no_block(self):
        """ Test that a file without block yields an empty list """
        client = MagicMock()
        client.as_identity.return_value = client
        client.get_file_block_locations.return_value = []
        ufs = HdfsUnderFileSystem(client, manager=self.manager)
        self.assertEqual(ufs.get_file_locations("/empty"), [])

    def test_is_file(self):
        """ Test is_file() for files, directories and missing paths """
        self.client.files["/a"] = b""
        self.client.dirs.add("/d")
        self.assertTrue(self.ufs.is_file("/a"))
        self.assertFalse(self.ufs.is_file("/d"))
        self.assertFalse(self.ufs.is_file("/missing"))

    # --- space ---

    def test_get_space_without_cluster_statistics(self):
        """ Test that get_space() returns -1 when the client lacks cluster statistics, whatever the path """
        for path in ("/", "/a", "/does/not/matter"):
            for space_type in SpaceType:
                self.assertEqual(self.ufs.get_space(path, space_type), -1)

    def test_get_space_with_cluster_statistics(self):
        """ Test that get_space() reports cluster-wide figures """
        ufs = HdfsUnderFileSystem(InMemoryStatsClient(), manager=self.manager)
        self.assertEqual(ufs.get_space("/a", SpaceType.TOTAL), 1000)
        self.assertEqual(ufs.get_space("/b", SpaceType.USED), 300)
        self.assertEqual(ufs.get_space("/c", SpaceType.FREE), 700)
        self.assertEqual(ufs.get_space("/c", "FREE"), 700)

    def test_get_space_unknown_type(self):
        """ Test that an unknown space type raises ValueError """
        with self.assertRaises(ValueError):
            self.ufs.get_space("/", "AVAILABLE")

    # --- list ---

    def test_list_children_names(self):
        """ Test that list() returns relative child names """
        self.client.dirs.update({"/d", "/d/sub"})
        self.client.files["/d/a.txt"] = b""
        self.assertCountEqual(self.ufs.list("/d"), ["a.txt", "sub"])

    def test_list_empty_directory(self):
        """ Test that an empty directory lists as an empty list """
        self.client.dirs.add("/d")
        self.assertEqual(self.ufs.list("/d"), [])

    def test_list_not_found(self):
        """ Test that listing a missing path returns the not-found sentinel """
        self.assertIs(self.ufs.list("/missing"), ListingStatus.NOT_FOUND)

    def test_list_file(self):
        """ Test that listing a file returns the not-a-directory sentinel """
        self.client.files["/a.txt"] = b""
        self.assertIs(self.ufs.list("/a.txt"), ListingStatus.NOT_A_DIRECTORY)

    # --- mkdirs ---

    def test_mkdirs_existing(self):
        """ Test that mkdirs() on an existing path returns False without creating anything """
        self.client.dirs.add("/a")
        self.assertFalse(self.ufs.mkdirs("/a", True))
        self.assertEqual(self.calls_of("mkdir"), [])

    def test_mkdirs_creates_ancestors_top_down(self):
        """ Test that missing ancestors are created before the target, all with the full permission """
        self.client.dirs.add("/a")
        self.assertTrue(self.ufs.mkdirs("/a/b/c", False))
        self.assertEqual(self.calls_of("mkdir"), [("mkdir", "/a/b", 0o777), ("mkdir", "/a/b/c", 0o777)])

    def test_mkdirs_stops_at_first_failure(self):
        """ Test that mkdirs() returns False when a creation fails """
        client = MagicMock()
        client.as_identity.return_value = client
        client.exists.side_effect = lambda p: p == "/"
        client.mkdir.side_effect = [True, False]
        ufs = HdfsUnderFileSystem(client, manager=self.manager)

        self.assertFalse(ufs.mkdirs("/a/b/c"))
        self.assertEqual(client.mkdir.call_count, 2)

    def test_mkdirs_retries_whole_algorithm(self):
        """ Test that a transient failure restarts the algorithm """
        self.client.failures["mkdir"] = 1
        self.assertTrue(self.ufs.mkdirs("/a/b"))
        self.assertIn("/a/b", self.client.dirs)
        self.assertEqual([call[1] for call in self.calls_of("mkdir")], ["/a", "/a", "/a/b"])

    def test_mkdirs_exhaustion(self):
        """ Test that mkdirs() propagates exhaustion """
        self.client.failures["mkdir"] = 5
        with self.assertRaises(RetriesExhaustedError):
            self.ufs.mkdirs("/a")

    def test_mkdirs_depth_bound(self):
        """ Test that exceeding the depth bound raises DirectoryDepthExceededError without retry """
        ufs = HdfsUnderFileSystem(self.client, manager=self.manager, mkdirs_max_depth=1)
        with self.assertRaises(DirectoryDepthExceededError):
            ufs.mkdirs("/a/b/c")
        self.assertEqual(self.calls_of("mkdir"), [])
        self.assertEqual(len([c for c in self.calls_of("exists") if c[1] == "/a/b/c"]), 1)

    # --- rename ---

    def test_rename(self):
        """ Test that rename() renames an existing source to a free destination """
        self.client.files["/src"] = b"x"
        self.assertTrue(self.ufs.rename("/src", "/dst"))
        self.assertIn("/dst", self.client.files)

    def test_rename_missing_source(self):
        """ Test that rename() returns False without renaming when the source is missing """
        self.assertFalse(self.ufs.rename("/src", "/dst"))
        self.assertEqual(self.calls_of("rename"), [])

    def test_rename_existing_destination(self):
        """ Test that rename() returns False without renaming when the destination exists """
        self.client.files["/src"] = b"x"
        self.client.files["/dst"] = b"y"
        self.assertFalse(self.ufs.rename("/src", "/dst"))
        self.assertEqual(self.calls_of("rename"), [])

    def test_rename_retries(self):
        """ Test that the rename itself is retried """
        self.client.files["/src"] = b"x"
        self.client.failures["rename"] = 2
        self.assertTrue(self.ufs.rename("/src", "/dst"))
        self.assertEqual(len(self.calls_of("rename")), 3)

    # --- set_permission ---

    def test_set_permission(self):
        """ Test that set_permission() parses the octal mode """
        self.client.files["/a"] = b""
        self.ufs.set_permission("/a", "755")
        self.assertEqual(self.calls_of("set_permission"), [("set_permission", "/a", 0o755)])

    def test_set_permission_invalid_mode(self):
        """ Test that non-octal modes raise ValueError before any call """
        for mode in ("abc", "789", "77777", ""):
            with self.subTest(mode=mode):
                with self.assertRaises(ValueError):
                    self.ufs.set_permission("/a", mode)
        self.assertEqual(self.client.calls, [])

    def test_set_permission_missing_path(self):
        """ Test that set_permission() propagates the client failure """
        with self.assertRaises(FileNotFoundError):
            self.ufs.set_permission("/missing", "644")

    # --- identity ---

    def test_operations_run_as_caller_identity(self):
        """ Test that the client is bound to the identity attached by the caller """
        alice = Identity(user="alice")
        with caller_identity(alice):
            self.ufs.exists("/a")
        self.assertEqual(self.client.identities, [alice])

    def test_operations_run_as_login_identity(self):
        """ Test that the login identity is used when the caller attached none """
        login = Identity.from_principal("alluxio/host@EXAMPLE.COM")
        self.manager._login_identity = login
        self.ufs.exists("/a")
        self.assertEqual(self.client.identities, [login])

    # --- connect ---

    def test_connect_from_master_without_keys(self):
        """ Test that connecting without keytab/principal performs no login """
        manager = MagicMock()
        ufs = HdfsUnderFileSystem(self.client, manager=manager)
        ufs.connect_from_master(SecurityConfig(), "master-1")
        ufs.connect_from_master({"master_keytab_file": "/etc/alluxio.keytab"}, "master-1")
        ufs.connect_from_worker({"worker_principal": "alluxio/_HOST@EXAMPLE.COM"}, "worker-1")
        manager.login_from_keytab.assert_not_called()

    def test_connect_from_master_logs_in(self):
        """ Test that connect_from_master() logs in with the master keytab and principal """
        manager = MagicMock()
        ufs = HdfsUnderFileSystem(self.client, manager=manager)
        ufs.connect_from_master({"master_keytab_file": "/etc/m.keytab", "master_principal": "m/_HOST@R",
                                 "worker_keytab_file": "/etc/w.keytab", "worker_principal": "w/_HOST@R"}, "master-1")
        manager.login_from_keytab.assert_called_once_with("/etc/m.keytab", "m/_HOST@R", "master-1")

    def test_connect_from_worker_logs_in(self):
        """ Test that connect_from_worker() logs in with the worker keytab and principal """
        manager = MagicMock()
        ufs = HdfsUnderFileSystem(self.client, manager=manager)
        ufs.connect_from_worker(SecurityConfig(worker_keytab_file="/etc/w.keytab", worker_principal="w@R"), "w1")
        manager.login_from_keytab.assert_called_once_with("/etc/w.keytab", "w@R", "w1")

    def test_connect_login_failure_propagates(self):
        """ Test that a failed login is fatal """
        manager = MagicMock()
        manager.login_from_keytab.side_effect = LoginError("kinit failed")
        ufs = HdfsUnderFileSystem(self.client, manager=manager)
        with self.assertRaises(LoginError):
            ufs.connect_from_master({"master_keytab_file": "/k", "master_principal": "p@R"}, "h")
        manager.login_from_keytab.assert_called_once()

    # --- construction ---

    @patch("hdfsufs.schemas.filelayer.local_ufs.os.path.isdir", return_value=True)
    @patch("hdfsufs.schemas.filelayer.local_ufs.os.path.exists", return_value=True)
    def test_from_config(self, mock_exists, mock_isdir):
        """ Test that from_config() builds the client of the configured backend """
        with patch("hdfsufs.clients.local_client.LocalFileSystemClient") as mock_client:
            ufs = HdfsUnderFileSystem.from_config({"type": "local", "root_path": "/srv/ufs"})
        self.assertIs(ufs.client, mock_client.return_value)
        self.assertEqual(ufs.ufs_prefix, "file:///srv/ufs")
