"""
Base configuration schema for all under storage backends of the hdfsufs adapter.

This module defines the :class:`.BaseUfsConfig` class, which serves as the
foundation for backend-specific configuration schemas (e.g., LocalUfsConfig,
WebHdfsUfsConfig).

Note:
    - Use subclasses to define fields specific to each backend.
    - The `extra="forbid"` option ensures that typos or unexpected fields in
      configuration files raise validation errors.
    - Subclasses must implement :meth:`.BaseUfsConfig.default_client_class`
      and :meth:`.BaseUfsConfig.ufs_prefix`.
    - `client_impl` overrides the client implementation with a plugin
      registered in the `hdfsufs.clients` entry point group.
    - `client_config` names a YAML resource whose mapping is handed over to
      the client as extra options.

Warning:
    The `BaseUfsConfig` class is an abstract class not intented to be used.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING
from pydantic import BaseModel, Field
from hdfsufs.config import load_yaml
from hdfsufs.logger import logger
from hdfsufs.utils.load_plugin import load_plugin

if TYPE_CHECKING:
    from hdfsufs.clients.client import FileSystemClient

CLIENTS_ENTRY_POINT_GROUP = "hdfsufs.clients"


class BaseUfsConfig(BaseModel):
    """
    Base configuration schema for all under storage backends.

    .. admonition:: Adding a new backend

          1. Create a subclass of :class:`BaseUfsConfig` with its specific fields.
          2. Update :class:`hdfsufs.schemas.filelayer.types.UnderStorage` to accept the new backend type.
          3. Implement the corresponding :class:`hdfsufs.clients.client.FileSystemClient` subclass.
    """

    type: str = Field(..., description="Type of the backend (e.g., local, webhdfs)")
    description: Optional[str] = Field(None, description="Optional description of the backend configuration.")
    client_impl: Optional[str] = Field(None, description="Name of a client plugin overriding the default client")
    client_config: Optional[str] = Field(None, description="Path of a YAML resource with extra client options")

    model_config = {
        "extra": "forbid",              # Disallow extra fields to avoid typos in config files
        "validate_assignment": True,    # Ensure validation on attribute assignment
    }

    def ufs_prefix(self) -> str:
        """
        Address of the backing store (e.g. ``http://namenode:9870``).

        Raises:
            NotImplementedError: If the subclass does not implement this method.
        """
        raise NotImplementedError("Subclasses must implement this method")

    def default_client_class(self) -> type:
        """
        Return the client class used when no `client_impl` is configured.

        Raises:
            NotImplementedError: If the subclass does not implement this method.
        """
        raise NotImplementedError("Subclasses must implement this method")

    def load_client_options(self) -> Dict[str, Any]:
        """
        Load the extra client options from the `client_config` resource.

        Returns:
            Dict[str, Any]: Client options, empty if no resource is configured.

        Raises:
            ValueError: If the resource does not hold a mapping.
        """
        if not self.client_config:
            return {}
        options = load_yaml(self.client_config) or {}
        if not isinstance(options, dict):
            raise ValueError(f"Client configuration {self.client_config} must be a mapping")
        return options

    def create_client_instance(self) -> "FileSystemClient":
        """
        Create the runtime filesystem client from this configuration.

        Returns:
            FileSystemClient: Client instance.

        Raises:
            ValueError: If `client_impl` names no registered plugin.
        """
        options = self.load_client_options()
        if self.client_impl:
            client_cls = load_plugin(CLIENTS_ENTRY_POINT_GROUP, self.client_impl)
            logger.info("Using client implementation '%s' for %s", self.client_impl, self.ufs_prefix())
        else:
            client_cls = self.default_client_class()
        return client_cls(self, options)
