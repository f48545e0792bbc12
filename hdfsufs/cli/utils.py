""" Helpers shared by the ufs commands. """

import sys
from typing import NoReturn
import click
from pydantic import ValidationError
from rich.console import Console
import hdfsufs.config as config
from hdfsufs.filelayer.hdfs_backend import HdfsUnderFileSystem
from hdfsufs.schemas.filelayer.storage import load_ufs_config


def fail(message: str) -> NoReturn:
    """ Print an error message and exit with status 1. """
    Console(stderr=True).print(f"[bold red]{message}[/bold red]", highlight=False)
    sys.exit(1)


def get_ufs(ctx: click.Context) -> HdfsUnderFileSystem:
    """
    Return the under filesystem of the command, building it on first use.

    The under filesystem is built from the configuration file given to the
    group and, when a role is given, connected with that role's login.

    Args:
        ctx (click.Context): Click context of the command.

    Returns:
        HdfsUnderFileSystem: The under filesystem.
    """
    obj = ctx.ensure_object(dict)
    if obj.get("ufs") is not None:
        return obj["ufs"]

    config_file = obj.get("config_file") or config.UFS_CONFIG
    try:
        ufs_config = load_ufs_config(config_file)
        storage = ufs_config.storage
        ufs = HdfsUnderFileSystem(storage.create_client_instance(), storage.ufs_prefix())
        role = obj.get("role")
        if role == "master":
            ufs.connect_from_master(ufs_config.security, obj.get("host"))
        elif role == "worker":
            ufs.connect_from_worker(ufs_config.security, obj.get("host"))
    except FileNotFoundError:
        fail(f"Configuration file {config_file} not found")
    except (ValidationError, ValueError, OSError) as e:
        fail(f"Cannot connect to the under filesystem: {e}")

    obj["ufs"] = ufs
    return ufs
