"""
Keytab login of the process roles (master, worker).

A role logs in once at process startup with the keytab file and principal
found in its :class:`hdfsufs.schemas.security.SecurityConfig`. The resulting
identity is installed as the process login identity, used for every
operation whose caller did not attach an identity of its own.

Note:
    - A missing keytab or principal makes the login a no-op, so that
      non-secured clusters can be used without any security configuration.
    - Login failures are fatal and are never retried.
    - The login identity is installed once. Logging in again with the same
      principal is a no-op, logging in with another principal raises
      :class:`hdfsufs.exceptions.IdentityConflictError`.
"""

import os
import socket
import subprocess
import threading
from typing import Optional
import hdfsufs.config as config
from hdfsufs.exceptions import LoginError, IdentityConflictError
from hdfsufs.logger import logger
from hdfsufs.schemas.security import SecurityConfig
from hdfsufs.security.identity import Identity

HOST_PATTERN = "_HOST"


def replace_host_pattern(principal: str, hostname: Optional[str] = None) -> str:
    """
    Replace the ``_HOST`` component of a principal by the host name.

    Args:
        principal (str): Principal possibly holding the ``_HOST`` token (e.g. ``hdfs/_HOST@REALM``).
        hostname (Optional[str]): Host name to use. The fully qualified name of
            the local host is used when empty or a wildcard address.

    Returns:
        str: Principal with the host name substituted.
    """
    if HOST_PATTERN not in principal:
        return principal
    if not hostname or hostname == "0.0.0.0":
        hostname = socket.getfqdn()
    return principal.replace(HOST_PATTERN, hostname.lower())


class LoginManager:
    """
    Holder of the process login identity.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._login_identity: Optional[Identity] = None

    @property
    def login_identity(self) -> Optional[Identity]:
        """ Installed login identity, or None if no login happened. """
        return self._login_identity

    @property
    def authentication(self) -> str:
        """ Authentication mode of the process, ``kerberos`` once a keytab login succeeded, else ``simple``. """
        identity = self._login_identity
        return identity.auth_method if identity is not None else "simple"

    def login_from_keytab(self, keytab_file: str, principal: str, hostname: Optional[str] = None) -> Identity:
        """
        Log in `principal` with `keytab_file` and install it as process login identity.

        Args:
            keytab_file (str): Path of the keytab file.
            principal (str): Kerberos principal, possibly holding the ``_HOST`` token.
            hostname (Optional[str]): Host name substituted for ``_HOST``.

        Returns:
            Identity: The installed login identity.

        Raises:
            LoginError: If the keytab is missing or the Kerberos login fails.
            IdentityConflictError: If another principal is already logged in.
        """
        principal = replace_host_pattern(principal, hostname)
        with self._lock:
            if self._login_identity is not None:
                if self._login_identity.principal == principal:
                    logger.info("Principal %s is already logged in", principal)
                    return self._login_identity
                raise IdentityConflictError(
                    f"Cannot log in {principal}: process is already logged in as {self._login_identity.principal}"
                )

            logger.info("Logging in principal %s from keytab %s (host %s)", principal, keytab_file, hostname)
            if not os.path.isfile(keytab_file):
                raise LoginError(f"Keytab file {keytab_file} does not exist")
            self._kinit(keytab_file, principal)
            self._login_identity = Identity.from_principal(principal)
            logger.info("Logged in as %s", principal)
            return self._login_identity

    def _kinit(self, keytab_file: str, principal: str) -> None:
        """
        Obtain a Kerberos ticket for `principal` from `keytab_file`.

        Raises:
            LoginError: If the kinit command is missing or fails.
        """
        cmd = [config.UFS_KINIT_CMD, "-kt", keytab_file, principal]
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise LoginError(f"Kerberos login of {principal} failed: command '{config.UFS_KINIT_CMD}' not found") from e
        except subprocess.CalledProcessError as e:
            raise LoginError(f"Kerberos login of {principal} failed: {(e.stderr or '').strip()}") from e


def login_role(conf: SecurityConfig, role: str, hostname: Optional[str] = None,
               manager: Optional["LoginManager"] = None) -> Optional[Identity]:
    """
    Log in the given process role if its keytab and principal are configured.

    Args:
        conf (SecurityConfig): Security configuration.
        role (str): Process role (``master`` or ``worker``).
        hostname (Optional[str]): Host the role runs on.
        manager (Optional[LoginManager]): Login manager to use. Defaults to the process-wide one.

    Returns:
        Optional[Identity]: The login identity, or None when the role is not configured for Kerberos.

    Raises:
        LoginError: If the login fails.
    """
    credentials = conf.keytab_and_principal(role)
    if credentials is None:
        logger.debug("No keytab/principal configured for %s, skipping login", role)
        return None
    if manager is None:
        manager = login_manager
    keytab_file, principal = credentials
    return manager.login_from_keytab(keytab_file, principal, hostname)


# Process-wide login manager
login_manager = LoginManager()
