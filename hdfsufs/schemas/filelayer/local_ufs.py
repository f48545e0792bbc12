"""
Local under storage configuration schema.

This module defines the :class:`.LocalUfsConfig`, which extends
:class:`.BaseUfsConfig` to configure a host directory as under storage.

Warning:
    The local backend is intended for development and testing purposes.
    For production, use a distributed filesystem backend (e.g. WebHDFS).

Note:
    - The root path is validated to be absolute and to exist on the host.
    - Storage paths (``/a/b``) are resolved below the root path.
"""

import os
from typing import Literal
from pydantic import Field, field_validator
from hdfsufs.schemas.filelayer.base_ufs import BaseUfsConfig


class LocalUfsConfig(BaseUfsConfig):
    """
    Configuration schema of the local under storage.
    """

    type: Literal["local"] = Field(description="Type of the backend")
    root_path: str = Field(..., description="Absolute path of the root directory on the host")

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True
    }

    def ufs_prefix(self) -> str:
        return f"file://{self.root_path}"

    def default_client_class(self) -> type:
        from hdfsufs.clients.local_client import LocalFileSystemClient
        return LocalFileSystemClient

    @field_validator("root_path")
    def validate_root_path(cls, value: str) -> str:
        """
        Validates that the root path exists and is a valid absolute path.

        Args:
            value (str): Path to validate.

        Returns:
            str: Normalized absolute path.

        Raises:
            ValueError: If the path is not absolute or is not an existing directory.
        """
        value = value.strip()
        if not value.startswith("/"):
            raise ValueError("root_path must be an absolute path on the host")

        norm_path = os.path.normpath(value)

        if not os.path.exists(norm_path):
            raise ValueError(f"host path '{norm_path}' does not exist")

        if not os.path.isdir(norm_path):
            raise ValueError(f"host path '{norm_path}' must be a directory")

        return norm_path
