"""
LDAP security manager

Builds an LDAP realm from a materialized shiro.ini and authenticates
subjects against it with ldap3.
"""

from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import ldap3
from ldap3.core.exceptions import LDAPBindError, LDAPException
from ldap3.utils.conv import escape_filter_chars

from gatecli.auth.realm import AliasResolver, LdapRealmConfig
from gatecli.constants import LDAP_CONNECT_TIMEOUT, SUBJECT_USER_GROUPS
from gatecli.exceptions import AuthenticationError, SecurityConfigError

AUTHENTICATION_MECHANISMS = {
    "simple": ldap3.SIMPLE,
    "none": ldap3.ANONYMOUS,
}


class SecurityManager:
    """Creates subjects and talks to the directory on their behalf"""

    def __init__(
        self,
        realm: LdapRealmConfig,
        server_factory=ldap3.Server,
        connection_factory=ldap3.Connection,
    ):
        """
        Initialize the security manager.

        Args:
            realm: LDAP realm settings
            server_factory: ldap3.Server compatible factory
            connection_factory: ldap3.Connection compatible factory

        Raises:
            SecurityConfigError: If the authentication mechanism is unsupported
        """
        mechanism = realm.authentication_mechanism.lower()
        if mechanism not in AUTHENTICATION_MECHANISMS:
            raise SecurityConfigError(
                f"Unsupported authentication mechanism: {realm.authentication_mechanism}",
                context=f"Supported: {', '.join(AUTHENTICATION_MECHANISMS)}",
            )
        self.realm = realm
        self.authentication = AUTHENTICATION_MECHANISMS[mechanism]
        self.server_factory = server_factory
        self.connection_factory = connection_factory

    @classmethod
    def from_ini(
        cls, config_path: Path, resolve_alias: Optional[AliasResolver] = None
    ) -> "SecurityManager":
        return cls(LdapRealmConfig.from_ini(config_path, resolve_alias))

    def create_subject(self) -> "Subject":
        return Subject(self)

    def bind(self, user: Optional[str], password: Optional[str]):
        """
        Open and bind a connection.

        Returns:
            Bound ldap3 connection

        Raises:
            LDAPBindError: If the directory rejects the credentials
            LDAPException: On connection or protocol errors
        """
        server = self.server_factory(self.realm.url, connect_timeout=LDAP_CONNECT_TIMEOUT)
        if self.authentication == ldap3.ANONYMOUS:
            connection = self.connection_factory(server, authentication=ldap3.ANONYMOUS)
        else:
            connection = self.connection_factory(
                server,
                user=user,
                password=password,
                authentication=self.authentication,
                receive_timeout=LDAP_CONNECT_TIMEOUT,
            )
        if not connection.bind():
            result = connection.result or {}
            description = result.get("description") or "bind failed"
            message = result.get("message") or ""
            _safe_unbind(connection)
            raise LDAPBindError(f"{description} {message}".strip())
        return connection

    def lookup_groups(self, username: str, user_connection) -> FrozenSet[str]:
        """
        Find the groups a user is a member of.

        Searches with the system user when one is configured, otherwise on
        the user's own connection.

        Args:
            username: Login name
            user_connection: The user's bound connection

        Returns:
            Group common names (empty when no search base is configured)
        """
        if not self.realm.search_base:
            return frozenset()

        search_filter = "(&(objectClass={}){})".format(
            escape_filter_chars(self.realm.group_object_class),
            "({}={})".format(
                escape_filter_chars(self.realm.member_attribute),
                escape_filter_chars(self.realm.member_value(username)),
            ),
        )

        system_connection = None
        connection = user_connection
        if self.realm.system_username:
            system_connection = self.bind(
                self.realm.system_username, self.realm.system_password
            )
            connection = system_connection

        try:
            connection.search(
                search_base=self.realm.search_base,
                search_filter=search_filter,
                search_scope=ldap3.SUBTREE,
                attributes=["cn"],
            )
            groups = set()
            for entry in connection.entries:
                groups.update(str(cn) for cn in entry.entry_attributes_as_dict.get("cn", []))
            return frozenset(groups)
        finally:
            if system_connection is not None:
                _safe_unbind(system_connection)


class Subject:
    """A login session against the security manager"""

    def __init__(self, manager: SecurityManager):
        self.manager = manager
        self.principal: Optional[str] = None
        self.session: Dict[str, Any] = {}
        self._connection = None

    def is_authenticated(self) -> bool:
        return self._connection is not None

    def login(self, username: str, password: str) -> None:
        """
        Authenticate the subject.

        Raises:
            AuthenticationError: If the directory rejects the login; the
                underlying ldap3 error is kept as the cause
        """
        message = f"Authentication failed for token submission [{username}]"
        if self.manager.authentication == ldap3.SIMPLE and not password:
            raise AuthenticationError(message, cause=ValueError("Empty passwords are not allowed"))
        try:
            self._connection = self.manager.bind(self.manager.realm.user_dn(username), password)
        except LDAPException as e:
            raise AuthenticationError(message, cause=e)
        self.principal = username

    def has_role(self, role: str) -> bool:
        """
        Check a role, resolving group membership on first use.

        Membership is cached in the session under 'subject.userGroups' and is
        only looked up when the realm has authorization enabled.
        """
        if not self.is_authenticated():
            return False
        if SUBJECT_USER_GROUPS not in self.session and self.manager.realm.authorization_enabled:
            self.session[SUBJECT_USER_GROUPS] = self.manager.lookup_groups(
                self.principal, self._connection
            )
        return role in (self.session.get(SUBJECT_USER_GROUPS) or frozenset())

    def logout(self) -> None:
        """End the session and release the directory connection."""
        connection, self._connection = self._connection, None
        self.principal = None
        self.session.clear()
        if connection is not None:
            _safe_unbind(connection)


def _safe_unbind(connection) -> None:
    try:
        connection.unbind()
    except LDAPException:
        # Connection already closed by the server
        pass
