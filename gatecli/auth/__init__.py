"""
Gateway CLI Authentication

LDAP realm configuration, security manager and authentication driver.
"""

from .realm import LdapRealmConfig
from .security_manager import SecurityManager, Subject
from .driver import AuthenticationDriver, installed_security_manager

__all__ = [
    "LdapRealmConfig",
    "SecurityManager",
    "Subject",
    "AuthenticationDriver",
    "installed_security_manager",
]
