"""
WebHDFS under storage configuration schema.

This module defines the :class:`.WebHdfsUfsConfig`, which extends
:class:`.BaseUfsConfig` to configure an HDFS cluster reached through its
WebHDFS REST endpoint.

Note:
    - The address is the HTTP(S) endpoint of the NameNode (or HttpFS gateway),
      e.g. ``http://namenode:9870``.
    - `user` is the user name sent with non-secured requests issued by a
      client not bound to any caller identity.
    - Kerberos authentication is driven by the process login
      (see :mod:`hdfsufs.security.login`), not by this schema.
"""

import re
from typing import Optional, Literal
from pydantic import Field, field_validator
import hdfsufs.config as config
from hdfsufs.schemas.filelayer.base_ufs import BaseUfsConfig


class WebHdfsUfsConfig(BaseUfsConfig):
    """
    Configuration schema of the WebHDFS under storage.
    """

    type: Literal["webhdfs"] = Field(description="Type of the backend")
    address: str = Field(..., description="HTTP(S) address of the WebHDFS endpoint")
    user: Optional[str] = Field(None, description="User name of unbound clients on non-secured clusters")
    timeout: float = Field(default_factory=lambda: float(config.WEBHDFS_TIMEOUT),
                           gt=0, description="Timeout of each request in seconds")
    verify: bool = Field(True, description="Verify TLS certificates of HTTPS endpoints")

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True
    }

    def ufs_prefix(self) -> str:
        return self.address

    def default_client_class(self) -> type:
        from hdfsufs.clients.webhdfs_client import WebHdfsClient
        return WebHdfsClient

    @field_validator("address")
    def validate_address(cls, value: str) -> str:
        """
        Validates that the address is an HTTP(S) URL with a host.

        Args:
            value (str): Address to validate.

        Returns:
            str: Address without trailing slash.

        Raises:
            ValueError: If the address is not an HTTP(S) URL.
        """
        value = value.strip().rstrip("/")
        if not re.fullmatch(r"https?://[a-zA-Z0-9.\-\[\]:]+(:\d+)?", value):
            raise ValueError("address must be an http(s) URL such as http://namenode:9870")
        return value
