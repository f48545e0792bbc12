"""
Security configuration schema of the hdfsufs adapter.

Each process role (master, worker) may carry a keytab file and a principal.
A role with both fields set logs in with Kerberos when it connects to the
under filesystem; a role missing either of them connects without login.

Example usage:
    .. code-block:: python

        from hdfsufs.schemas.security import SecurityConfig

        conf = SecurityConfig(
            master_keytab_file="/etc/security/keytabs/alluxio.keytab",
            master_principal="alluxio/_HOST@EXAMPLE.COM"
        )
        conf.keytab_and_principal("master")
"""

from typing import Optional, Tuple
from pydantic import BaseModel, Field

ROLES = ("master", "worker")


class SecurityConfig(BaseModel):
    """
    Keytab and principal of each process role.
    """

    master_keytab_file: Optional[str] = Field(None, description="Keytab file used by the master role")
    master_principal: Optional[str] = Field(None, description="Kerberos principal of the master role")
    worker_keytab_file: Optional[str] = Field(None, description="Keytab file used by the worker role")
    worker_principal: Optional[str] = Field(None, description="Kerberos principal of the worker role")

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True
    }

    def keytab_and_principal(self, role: str) -> Optional[Tuple[str, str]]:
        """
        Return the keytab file and principal of a role.

        Args:
            role (str): Process role (``master`` or ``worker``).

        Returns:
            Optional[Tuple[str, str]]: ``(keytab_file, principal)``, or None if either is missing.

        Raises:
            ValueError: If `role` is unknown.
        """
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}', expected one of {ROLES}")
        keytab_file = getattr(self, f"{role}_keytab_file")
        principal = getattr(self, f"{role}_principal")
        if not keytab_file or not principal:
            return None
        return keytab_file, principal
