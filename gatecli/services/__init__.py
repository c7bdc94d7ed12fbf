"""
Gateway CLI Services Layer

Secret, keystore and topology services used by commands.
"""

from .keystore_service import KeystoreService
from .alias_service import AliasService
from .master_service import MasterService
from .topology_service import TopologyService
from .registry import GatewayServices

__all__ = [
    "KeystoreService",
    "AliasService",
    "MasterService",
    "TopologyService",
    "GatewayServices",
]
