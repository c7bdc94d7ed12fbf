"""
Command Models

One small dataclass per CLI command. The set is closed: the dispatcher
keeps a single handler table keyed by these types.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Union


@dataclass
class ShowVersion:
    token: ClassVar[str] = "version"


@dataclass
class CreateMasterSecret:
    token: ClassVar[str] = "create-master"


@dataclass
class CreateCertificate:
    token: ClassVar[str] = "create-cert"


@dataclass
class CreateAlias:
    """Create an alias and secret pair in a cluster's credential store."""

    token: ClassVar[str] = "create-alias"
    name: str


@dataclass
class DeleteAlias:
    """Remove an alias from a cluster's credential store."""

    token: ClassVar[str] = "delete-alias"
    name: str


@dataclass
class ListAliases:
    token: ClassVar[str] = "list-alias"


@dataclass
class Redeploy:
    token: ClassVar[str] = "redeploy"


@dataclass
class ListTopologies:
    token: ClassVar[str] = "list-topologies"


@dataclass
class ValidateTopology:
    token: ClassVar[str] = "validate-topology"


@dataclass
class AuthTest:
    token: ClassVar[str] = "auth-test"


@dataclass
class Unrecognized:
    """Placeholder when no command token was given."""

    token: ClassVar[str] = ""
    argument: Optional[str] = None


Command = Union[
    ShowVersion,
    CreateMasterSecret,
    CreateCertificate,
    CreateAlias,
    DeleteAlias,
    ListAliases,
    Redeploy,
    ListTopologies,
    ValidateTopology,
    AuthTest,
    Unrecognized,
]

# Order matches the usage listing
COMMAND_TYPES = (
    ShowVersion,
    CreateMasterSecret,
    CreateCertificate,
    CreateAlias,
    DeleteAlias,
    ListAliases,
    Redeploy,
    ListTopologies,
    ValidateTopology,
    AuthTest,
)
