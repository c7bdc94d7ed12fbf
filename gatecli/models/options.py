"""
Option Models

Flag state shared by every command of a single invocation.
"""

from dataclasses import dataclass
from typing import Optional

from gatecli.constants import DEFAULT_CLUSTER


@dataclass
class SharedOptions:
    """Mutable flag state filled in by the parser and read by one command."""

    cluster: Optional[str] = None
    value: Optional[str] = None
    generate: bool = False
    force: bool = False
    debug: bool = False
    path: Optional[str] = None
    hostname: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    list_groups: bool = False
    # Test-only master secret override (--master, or --value/--generate on create-master)
    master: Optional[str] = None

    @property
    def effective_cluster(self) -> str:
        """Cluster name, falling back to the gateway's own credential store."""
        return self.cluster if self.cluster is not None else DEFAULT_CLUSTER

    def __repr__(self) -> str:
        # Never echo secrets into logs or tracebacks
        return (
            f"SharedOptions(cluster={self.cluster!r}, generate={self.generate}, "
            f"force={self.force}, debug={self.debug}, path={self.path!r}, "
            f"hostname={self.hostname!r}, username={self.username!r}, "
            f"list_groups={self.list_groups})"
        )
