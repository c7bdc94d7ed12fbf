"""Usage text for the gateway CLI"""

from typing import Optional, Type

from gatecli.constants import USAGE_DIVIDER
from gatecli.models.commands import (
    COMMAND_TYPES,
    AuthTest,
    CreateAlias,
    CreateCertificate,
    CreateMasterSecret,
    DeleteAlias,
    ListAliases,
    ListTopologies,
    Redeploy,
    ShowVersion,
    ValidateTopology,
)

USAGE_PREFIX = "gatecli {cmd} [options]"

# (usage, description) per command
COMMAND_USAGE = {
    ShowVersion: (
        "version",
        "Displays gateway CLI version information.",
    ),
    CreateMasterSecret: (
        "create-master [--force]",
        "The create-master command persists the\n"
        "master secret in a file located at:\n"
        "{GATEWAY_HOME}/data/security/master. It\n"
        "will prompt the user for the secret to persist.\n"
        "Use --force to overwrite the master secret.",
    ),
    CreateCertificate: (
        "create-cert [--hostname h]",
        "The create-cert command creates and populates\n"
        "a gateway.pem keystore with a self-signed certificate\n"
        "to be used as the gateway identity. The key passphrase\n"
        "is read from the __gateway credential store when present.",
    ),
    CreateAlias: (
        "create-alias aliasname [--cluster clustername] [ (--value v) | (--generate) ]",
        "The create-alias command will create an alias\n"
        "and secret pair within the credential store for the\n"
        "indicated --cluster otherwise within the gateway\n"
        "credential store. The actual secret may be specified via\n"
        "the --value option or --generate will create a random secret\n"
        "for you.",
    ),
    DeleteAlias: (
        "delete-alias aliasname [--cluster clustername]",
        "The delete-alias command removes the\n"
        "indicated alias from the --cluster specific\n"
        "credential store or the gateway credential store.",
    ),
    ListAliases: (
        "list-alias [--cluster clustername]",
        "The list-alias command lists all of the aliases\n"
        "for the given --cluster. The default\n"
        "--cluster being the gateway itself.",
    ),
    Redeploy: (
        "redeploy [--cluster clustername]",
        "Redeploys one or all of the gateway's clusters (a.k.a topologies).",
    ),
    ListTopologies: (
        "list-topologies",
        "Retrieves a list of the available topologies within the\n"
        "default topologies directory. Will return topologies that may not be deployed due\n"
        "errors in file formatting.",
    ),
    ValidateTopology: (
        'validate-topology [--cluster clustername] | [--path "path/to/file"]',
        "Ensures that a cluster's description (a.k.a topology)\n"
        "follows the correct formatting rules.\n"
        "use the list-topologies command to get a list of available cluster names",
    ),
    AuthTest: (
        "auth-test [--cluster clustername] [--u username] [--p password] [--g]",
        "This command tests a cluster's configuration ability to\n"
        "authenticate a user with a cluster's ShiroProvider settings.\n"
        'Use "--g" if you want to list the groups a user is a member of.\n'
        "Optional: [--u username]: Provide a username argument to the command\n"
        "Optional: [--p password]: Provide a password argument to the command.\n"
        "If a username and password argument are not supplied, the terminal will prompt you for one.",
    ),
}

COMMANDS = "   [--help]\n" + "".join(
    f"   [{COMMAND_USAGE[t][0]}]\n" for t in COMMAND_TYPES
)


def command_usage(command: Type) -> str:
    usage, description = COMMAND_USAGE[command]
    return f"{usage}:\n\n{description}"


def render_usage(command: Optional[Type] = None) -> str:
    """
    Build usage text.

    Args:
        command: Selected command type; every command is described when None

    Returns:
        Usage text ready for printing
    """
    lines = [f"{USAGE_PREFIX}\n{COMMANDS}"]
    if command is not None and command in COMMAND_USAGE:
        lines.append(command_usage(command))
        return "\n".join(lines)

    lines.append(USAGE_DIVIDER)
    for command_type in COMMAND_TYPES:
        usage, description = COMMAND_USAGE[command_type]
        lines.append(f"{usage}\n\n{description}")
        lines.append("")
        lines.append(USAGE_DIVIDER)
    return "\n".join(lines)
