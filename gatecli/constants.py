"""
Gateway CLI Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Exit Codes
EXIT_OK = 0
EXIT_USAGE = -1
EXIT_INVALID_COMMAND = -2
EXIT_UNEXPECTED = -3
EXIT_INTERRUPTED = 130

# Credential Stores
DEFAULT_CLUSTER = "__gateway"
GATEWAY_CREDENTIAL_STORE_NAME = "__gateway"
GATEWAY_IDENTITY_ALIAS = "gateway-identity"
GATEWAY_IDENTITY_PASSPHRASE = "gateway-identity-passphrase"
CREDENTIAL_STORE_SUFFIX = "-credentials.json"
GATEWAY_KEYSTORE_NAME = "gateway.pem"
MASTER_FILE_NAME = "master"
GENERATED_ALIAS_BYTES = 24

# Certificates
DEFAULT_HOSTNAME = "localhost"
CERT_VALIDITY_DAYS = 365
CERT_KEY_SIZE = 2048

# Gateway Layout (relative to GATEWAY_HOME)
GATEWAY_SITE_FILE = "conf/gateway-site.yml"
DEFAULT_TOPOLOGIES_DIR = "conf/topologies"
DEFAULT_SECURITY_DIR = "data/security"
DEFAULT_LOG_DIR = "logs"
TOPOLOGY_EXTENSIONS = (".yml", ".yaml")

# Authentication Provider
AUTHENTICATION_ROLE = "authentication"
SHIRO_PROVIDER_NAME = "ShiroProvider"
DEPLOYMENT_SUFFIX = "_deploy.tmp"
SHIRO_CONFIG_PATH = "WEB-INF/shiro.ini"
SUBJECT_USER_GROUPS = "subject.userGroups"

# Param keys a Shiro provider needs for LDAP group lookup, in report order.
# authorizationEnabled appears twice and is reported twice when missing.
GROUP_LOOKUP_PARAMS = (
    "main.ldapRealm",
    "main.ldapGroupContextFactory",
    "main.ldapRealm.searchBase",
    "main.ldapRealm.groupObjectClass",
    "main.ldapRealm.memberAttributeValueTemplate",
    "main.ldapRealm.memberAttribute",
    "main.ldapRealm.authorizationEnabled",
    "main.ldapRealm.authorizationEnabled",
    "main.ldapRealm.contextFactory.systemUsername",
    "main.ldapRealm.contextFactory.systemPassword",
    "main.ldapRealm.userDnTemplate",
    "main.ldapRealm.contextFactory.url",
    "main.ldapRealm.contextFactory.authenticationMechanism",
)

# LDAP Realm Defaults
DEFAULT_GROUP_OBJECT_CLASS = "groupOfNames"
DEFAULT_MEMBER_ATTRIBUTE = "member"
DEFAULT_AUTHENTICATION_MECHANISM = "simple"
LDAP_CONNECT_TIMEOUT = 10

# Usage Output
USAGE_DIVIDER = "=" * 79
