"""
Gateway CLI Core

Topology validation, deployment materialization and crypto helpers.
"""

from .crypto import derive_key, open_token, seal, stretch_key
from .deployment import DeploymentFactory
from .topology_validator import TopologyValidator

__all__ = [
    "derive_key",
    "open_token",
    "seal",
    "stretch_key",
    "DeploymentFactory",
    "TopologyValidator",
]
