"""
Secure execution of units of work against the filesystem client.

Every operation of the adapter is a unit of work receiving the client bound
to the identity it must run under. :class:`SecureExecutionContext` resolves
that identity and hands the bound client over:

1. the caller identity attached to the execution context
   (:func:`hdfsufs.security.identity.caller_identity`),
2. else the process login identity (keytab login of the process role),
3. else the operating system user.
"""

from typing import Callable, Optional, TypeVar, TYPE_CHECKING
from hdfsufs.logger import logger
from hdfsufs.security.identity import Identity, caller_identity, current_caller_identity
from hdfsufs.security.login import LoginManager, login_manager

if TYPE_CHECKING:
    from hdfsufs.clients.client import FileSystemClient

T = TypeVar("T")


class SecureExecutionContext:
    """
    Runs units of work under a resolved identity.
    """

    def __init__(self, client: "FileSystemClient", manager: Optional[LoginManager] = None) -> None:
        """
        Initialize the context.

        Args:
            client (FileSystemClient): Shared client the units of work use.
            manager (Optional[LoginManager]): Login manager holding the process
                login identity. Defaults to the process-wide one.
        """
        self._client = client
        self._login_manager = manager if manager is not None else login_manager

    def resolve_identity(self) -> Identity:
        """
        Resolve the identity of the current caller.

        Returns:
            Identity: Caller identity, login identity or operating system user, in this order.
        """
        identity = current_caller_identity()
        if identity is None:
            identity = self._login_manager.login_identity
        if identity is None:
            identity = Identity.os_user()
        return identity

    def run_as_current_user(self, work: Callable[["FileSystemClient"], T]) -> T:
        """
        Run `work` under the identity of the current caller.

        Args:
            work (Callable[[FileSystemClient], T]): Unit of work receiving the bound client.

        Returns:
            T: Result of `work`.
        """
        return self.run_as(self.resolve_identity(), work)

    def run_as(self, identity: Identity, work: Callable[["FileSystemClient"], T]) -> T:
        """
        Run `work` under `identity`.

        Failures of `work` propagate unchanged.

        Args:
            identity (Identity): Identity to run under.
            work (Callable[[FileSystemClient], T]): Unit of work receiving the bound client.

        Returns:
            T: Result of `work`.
        """
        logger.debug("Running as %s (%s)", identity.user, identity.auth_method)
        client = self._client.as_identity(identity)
        with caller_identity(identity):
            return work(client)
