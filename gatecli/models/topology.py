"""
Topology Models

Dataclass models for cluster topologies and their providers.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class Provider:
    """A named, parameterized plugin with a role in a topology."""

    role: str
    name: str
    enabled: bool = True
    params: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        """Get a param value."""
        return self.params.get(key)

    def __repr__(self) -> str:
        return f"Provider(role={self.role}, name={self.name}, params={len(self.params)})"


@dataclass
class Service:
    """A backend service routed by a topology."""

    role: str
    urls: List[str] = field(default_factory=list)


@dataclass
class Topology:
    """A named cluster description."""

    name: str
    providers: Dict[tuple, Provider] = field(default_factory=dict)
    services: List[Service] = field(default_factory=list)
    path: Optional[Path] = None

    def add_provider(self, provider: Provider) -> None:
        self.providers[(provider.role, provider.name)] = provider

    def get_provider(self, role: str, name: str) -> Optional[Provider]:
        """Get the provider registered under (role, name), if any."""
        return self.providers.get((role, name))

    @classmethod
    def from_dict(
        cls, name: str, data: Dict[str, Any], path: Optional[Path] = None
    ) -> "Topology":
        """
        Build a topology from a parsed YAML descriptor.

        Args:
            name: Topology name (file stem)
            data: Parsed descriptor
            path: Source file

        Returns:
            Topology object
        """
        topology = cls(name=name, path=path)
        gateway = data.get("gateway") or {}
        for entry in gateway.get("providers") or []:
            params = entry.get("params") or {}
            topology.add_provider(
                Provider(
                    role=str(entry.get("role", "")),
                    name=str(entry.get("name", "")),
                    enabled=bool(entry.get("enabled", True)),
                    params={
                        str(k): _param_str(v)
                        for k, v in params.items()
                        if v is not None
                    },
                )
            )
        for entry in data.get("services") or []:
            urls = entry.get("urls") or ([entry["url"]] if entry.get("url") else [])
            topology.services.append(
                Service(role=str(entry.get("role", "")), urls=[str(u) for u in urls])
            )
        return topology

    def __repr__(self) -> str:
        return f"Topology(name={self.name}, providers={len(self.providers)})"


def _param_str(value: Any) -> str:
    # YAML booleans come back as Python bools; keep the descriptor spelling
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
