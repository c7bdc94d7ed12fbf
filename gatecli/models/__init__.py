"""
Gateway CLI Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .commands import (
    Command,
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
    COMMAND_TYPES,
)
from .options import SharedOptions
from .results import AuthOutcome, AuthStatus, ValidationResult
from .topology import Provider, Service, Topology

__all__ = [
    # Commands
    "Command",
    "ShowVersion",
    "CreateMasterSecret",
    "CreateCertificate",
    "CreateAlias",
    "DeleteAlias",
    "ListAliases",
    "Redeploy",
    "ListTopologies",
    "ValidateTopology",
    "AuthTest",
    "Unrecognized",
    "COMMAND_TYPES",
    # Options
    "SharedOptions",
    # Results
    "AuthOutcome",
    "AuthStatus",
    "ValidationResult",
    # Topology
    "Provider",
    "Service",
    "Topology",
]
