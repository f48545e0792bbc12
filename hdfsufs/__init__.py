""" HDFS under-filesystem adapter package. """
from dotenv import load_dotenv
from importlib.metadata import version, PackageNotFoundError

# load env vars from .ufsenv
load_dotenv('.ufsenv')


from hdfsufs.filelayer.backend import UnderFileSystem, SpaceType, ListingStatus
from hdfsufs.filelayer.hdfs_backend import HdfsUnderFileSystem


try:
    __version__ = version('hdfsufs')
except PackageNotFoundError:
    __version__ = "unknown"
