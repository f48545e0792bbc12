"""
Top-level configuration of the hdfsufs adapter.

Example configuration file:
    .. code-block:: yaml

        storage:
          type: webhdfs
          address: http://namenode:9870

        security:
          master_keytab_file: /etc/security/keytabs/alluxio.keytab
          master_principal: alluxio/_HOST@EXAMPLE.COM

Example usage:
    .. code-block:: python

        from hdfsufs.schemas.filelayer.storage import load_ufs_config

        ufs_config = load_ufs_config("ufs.yml")
        client = ufs_config.storage.create_client_instance()
"""

from pydantic import BaseModel, Field
from hdfsufs.config import load_yaml
from hdfsufs.schemas.filelayer.types import UnderStorage
from hdfsufs.schemas.security import SecurityConfig


class UnderStorageSchema(BaseModel):
    """
    Pydantic wrapper for an under storage configuration.

    Automatically selects the correct schema based on the `type` field using
    the `UnderStorage` discriminated union.
    """
    storage: UnderStorage


class UfsConfigFile(UnderStorageSchema):
    """
    Schema of the configuration file of the adapter.
    """
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    model_config = {
        "extra": "forbid"
    }


def load_ufs_config(config_file: str) -> UfsConfigFile:
    """
    Load and validate an adapter configuration file.

    Args:
        config_file (str): Path of the YAML configuration file.

    Returns:
        UfsConfigFile: Validated configuration.

    Raises:
        pydantic.ValidationError: If the configuration is invalid.
    """
    return UfsConfigFile(**(load_yaml(config_file) or {}))
