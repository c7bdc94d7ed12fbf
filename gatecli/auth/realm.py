"""LDAP realm settings read from a materialized shiro.ini"""

import configparser
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from gatecli.constants import (
    DEFAULT_AUTHENTICATION_MECHANISM,
    DEFAULT_GROUP_OBJECT_CLASS,
    DEFAULT_MEMBER_ATTRIBUTE,
)
from gatecli.exceptions import SecurityConfigError

DEFAULT_REALM_NAME = "ldapRealm"
ALIAS_PATTERN = re.compile(r"^\$\{ALIAS=([^}]+)\}$")

AliasResolver = Callable[[str], Optional[str]]


@dataclass
class LdapRealmConfig:
    """Settings of the LDAP realm referenced by the security manager"""

    name: str
    realm_class: str
    url: str
    user_dn_template: Optional[str] = None
    system_username: Optional[str] = None
    system_password: Optional[str] = None
    authentication_mechanism: str = DEFAULT_AUTHENTICATION_MECHANISM
    search_base: Optional[str] = None
    group_object_class: str = DEFAULT_GROUP_OBJECT_CLASS
    member_attribute: str = DEFAULT_MEMBER_ATTRIBUTE
    member_attribute_value_template: Optional[str] = None
    authorization_enabled: bool = False

    @classmethod
    def from_ini(
        cls, config_path: Path, resolve_alias: Optional[AliasResolver] = None
    ) -> "LdapRealmConfig":
        """
        Read realm settings from a shiro.ini file.

        The realm is the first entry of 'securityManager.realms', or
        'ldapRealm' when that is not set.

        Args:
            config_path: Path to shiro.ini
            resolve_alias: Resolves '${ALIAS=name}' placeholders

        Returns:
            LdapRealmConfig instance

        Raises:
            SecurityConfigError: If the file cannot be parsed or the realm
                is incomplete
        """
        ini = configparser.ConfigParser(interpolation=None)
        ini.optionxform = str
        try:
            with open(config_path, "r") as f:
                ini.read_file(f)
        except (OSError, configparser.Error) as e:
            raise SecurityConfigError(f"Unable to read security config: {config_path}", context=str(e))

        if not ini.has_section("main"):
            raise SecurityConfigError(f"No [main] section in {config_path}")
        main = ini["main"]

        realms = main.get("securityManager.realms", "")
        name = realms.split(",")[0].strip().lstrip("$") or DEFAULT_REALM_NAME

        realm_class = main.get(name)
        if not realm_class:
            raise SecurityConfigError(f"No realm '{name}' is configured in {config_path}")
        if "ldap" not in realm_class.lower():
            raise SecurityConfigError(f"Realm '{name}' is not an LDAP realm: {realm_class}")

        def param(key: str) -> Optional[str]:
            value = main.get(f"{name}.{key}")
            if value is None:
                return None
            match = ALIAS_PATTERN.match(value.strip())
            if match:
                if resolve_alias is None:
                    return None
                return resolve_alias(match.group(1))
            return value

        url = param("contextFactory.url")
        if not url:
            raise SecurityConfigError(f"No LDAP url is configured for realm '{name}'")

        return cls(
            name=name,
            realm_class=realm_class,
            url=url,
            user_dn_template=param("userDnTemplate"),
            system_username=param("contextFactory.systemUsername"),
            system_password=param("contextFactory.systemPassword"),
            authentication_mechanism=(
                param("contextFactory.authenticationMechanism")
                or DEFAULT_AUTHENTICATION_MECHANISM
            ),
            search_base=param("searchBase"),
            group_object_class=param("groupObjectClass") or DEFAULT_GROUP_OBJECT_CLASS,
            member_attribute=param("memberAttribute") or DEFAULT_MEMBER_ATTRIBUTE,
            member_attribute_value_template=param("memberAttributeValueTemplate"),
            authorization_enabled=(param("authorizationEnabled") or "").lower() == "true",
        )

    def user_dn(self, username: str) -> str:
        """Principal DN for a login name ('{0}' in the template)."""
        if not self.user_dn_template:
            return username
        return self.user_dn_template.replace("{0}", username)

    def member_value(self, username: str) -> str:
        """Value group entries carry in the member attribute for this user."""
        if self.member_attribute_value_template:
            return self.member_attribute_value_template.replace("{0}", username)
        return self.user_dn(username)
