""" Filesystem clients the adapter delegates I/O to. """
from .client import FileSystemClient, ClusterStatisticsProvider, FileStatus, BlockLocation, DiskStatus

__all__ = [
    'FileSystemClient',
    'ClusterStatisticsProvider',
    'FileStatus',
    'BlockLocation',
    'DiskStatus',
]
