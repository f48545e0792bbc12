"""
Identities the adapter runs filesystem operations under.

An :class:`Identity` is an immutable value. The identity of the caller of an
operation is attached to the current execution context with
:func:`caller_identity`; each thread and each asyncio task sees its own value,
so concurrent callers never observe each other's identity.

Example usage:
    .. code-block:: python

        from hdfsufs.security.identity import Identity, caller_identity

        with caller_identity(Identity(user="alice")):
            ufs.mkdirs("/user/alice/data")
"""

import getpass
import os
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Literal, Optional
from pydantic import BaseModel, Field, field_validator


class Identity(BaseModel):
    """
    Principal an operation runs under.
    """

    user: str = Field(..., description="Short user name")
    principal: Optional[str] = Field(None, description="Kerberos principal (e.g. hdfs/host@REALM)")
    auth_method: Literal["simple", "kerberos"] = Field("simple", description="Authentication method of the identity")

    model_config = {
        "extra": "forbid",
        "frozen": True,
        "str_strip_whitespace": True
    }

    @field_validator("user")
    def validate_user(cls, value: str) -> str:
        """
        Validates that the user name is not empty.

        Raises:
            ValueError: If the user name is empty.
        """
        if not value:
            raise ValueError("user cannot be empty")
        return value

    @classmethod
    def from_principal(cls, principal: str) -> "Identity":
        """
        Build a Kerberos identity from a principal.

        The short user name is the first component of the principal
        (``hdfs/host@REALM`` gives ``hdfs``).

        Args:
            principal (str): Kerberos principal.

        Returns:
            Identity: Kerberos identity.
        """
        user = principal.split("@", 1)[0].split("/", 1)[0]
        return cls(user=user, principal=principal, auth_method="kerberos")

    @classmethod
    def os_user(cls) -> "Identity":
        """
        Identity of the operating system user running the process.

        The numeric user id is used as user name when the process user has
        no name (no ``USER``-like variable and no password database entry).
        """
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = str(os.getuid())
        return cls(user=user)


_caller_identity: ContextVar[Optional[Identity]] = ContextVar("hdfsufs_caller_identity", default=None)


def current_caller_identity() -> Optional[Identity]:
    """
    Return the caller identity attached to the current execution context.

    Returns:
        Optional[Identity]: The attached identity, or None if no caller identity is attached.
    """
    return _caller_identity.get()


@contextmanager
def caller_identity(identity: Identity) -> Iterator[Identity]:
    """
    Attach `identity` to the current execution context for the duration of the block.

    Args:
        identity (Identity): Identity of the caller.

    Yields:
        Identity: The attached identity.
    """
    token = _caller_identity.set(identity)
    try:
        yield identity
    finally:
        _caller_identity.reset(token)
