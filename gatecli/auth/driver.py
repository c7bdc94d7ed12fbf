"""
Authentication driver

Drives a single login against a security manager built from a
materialized config file and turns the result into an AuthOutcome.
"""

import traceback
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ldap3.core.exceptions import LDAPException

from gatecli.auth.realm import AliasResolver
from gatecli.auth.security_manager import SecurityManager, Subject
from gatecli.constants import SUBJECT_USER_GROUPS
from gatecli.exceptions import AuthenticationError, SecurityConfigError
from gatecli.logger import CommandLogger
from gatecli.models.results import AuthOutcome
from gatecli.services.registry import GatewayServices


@contextmanager
def installed_security_manager(services: GatewayServices, manager) -> Iterator[None]:
    """Register a security manager for the duration of the block."""
    name = GatewayServices.SECURITY_MANAGER
    previous = services.get_service(name) if services.has_service(name) else None
    services.add_service(name, manager)
    try:
        yield
    finally:
        if previous is None:
            services.remove_service(name)
        else:
            services.add_service(name, previous)


class AuthenticationDriver:
    """Bootstraps a security manager and authenticates one user"""

    def __init__(
        self,
        services: GatewayServices,
        manager_factory=SecurityManager.from_ini,
        logger: Optional[CommandLogger] = None,
    ):
        self.services = services
        self.manager_factory = manager_factory
        self.logger = logger

    @contextmanager
    def session(
        self,
        config_path: Path,
        username: str,
        password: str,
        resolve_alias: Optional[AliasResolver] = None,
    ) -> Iterator[AuthOutcome]:
        """
        Log a user in and yield the outcome.

        The subject is logged out and the security manager uninstalled when
        the block exits, so callers report inside the block.

        Args:
            config_path: Materialized security config (shiro.ini)
            username: Login name
            password: Password
            resolve_alias: Resolves '${ALIAS=name}' placeholders

        Yields:
            AuthOutcome of the login attempt
        """
        manager = None
        try:
            manager = self.manager_factory(config_path, resolve_alias)
        except SecurityConfigError as e:
            self._log(f"Security manager bootstrap failed: {e.format_message()}", "ERROR")
            failure = AuthOutcome.error(e.format_message())

        if manager is None:
            yield failure
            return

        with installed_security_manager(self.services, manager):
            subject = manager.create_subject()
            try:
                yield self._login(subject, username, password)
            finally:
                subject.logout()
                self._log(f"Logged out subject {username}")

    def authenticate(
        self,
        config_path: Path,
        username: str,
        password: str,
        resolve_alias: Optional[AliasResolver] = None,
    ) -> AuthOutcome:
        """Log in, log out and return the outcome."""
        with self.session(config_path, username, password, resolve_alias) as outcome:
            return outcome

    def _login(self, subject: Subject, username: str, password: str) -> AuthOutcome:
        try:
            subject.login(username, password)
        except AuthenticationError as e:
            self._log(f"Authentication failed for {username}: {e.cause}", "WARNING")
            return AuthOutcome.failed(
                e.message,
                cause=str(e.cause) if e.cause is not None else None,
                trace="".join(traceback.format_exception(type(e), e, e.__traceback__)),
            )

        self._log(f"Authenticated {username}")
        try:
            # Populates the session's group set
            subject.has_role("")
        except LDAPException as e:
            self._log(f"Group lookup failed for {username}: {e}", "ERROR")
            return AuthOutcome.error(f"Group lookup failed: {e}")

        return AuthOutcome.authenticated(subject.session.get(SUBJECT_USER_GROUPS))

    def _log(self, message: str, level: str = "INFO") -> None:
        if self.logger:
            self.logger.log(message, level)
