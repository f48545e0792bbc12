"""
Under Storage Type

This module defines the `UnderStorage` type used in the hdfsufs configuration.
It represents a discriminated union of all supported under storage configurations.

By using a Pydantic `Annotated[..., Field(discriminator='type')]`, the input
YAML or dictionary is automatically parsed and validated against the correct backend
schema based on the `type` field.

Adding a New Under Storage:
---------------------------
1. Create a subclass of BaseUfsConfig with its specific fields.
2. Add the new subclass to the `UnderStorage` type using the `|` syntax.
3. Ensure the subclass defines a unique `type` literal matching the YAML `type` field.
"""

from typing import Annotated
from pydantic import Field
from hdfsufs.schemas.filelayer.local_ufs import LocalUfsConfig
from hdfsufs.schemas.filelayer.webhdfs_ufs import WebHdfsUfsConfig


UnderStorage = Annotated[
    WebHdfsUfsConfig | LocalUfsConfig,
    Field(
        discriminator="type",
        description="Discriminator field to select the correct under storage schema"
    )
]
"""
Discriminated union of all supported under storage schemas.
"""
