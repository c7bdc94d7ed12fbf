"""
Topology Service

Loads cluster topologies from the gateway's topologies directory.
"""

import os
import time
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from gatecli.constants import TOPOLOGY_EXTENSIONS
from gatecli.exceptions import TopologyError
from gatecli.logger import CommandLogger
from gatecli.models.topology import Topology


class TopologyService:
    """
    File-backed topology store.

    Responsibilities:
    - Reload and cache topology descriptors
    - Topology lookup by name
    - Trigger redeployment by touching descriptors
    """

    def __init__(self, topologies_dir: Path, logger: Optional[CommandLogger] = None):
        self.topologies_dir = Path(topologies_dir)
        self.logger = logger
        self._topologies: Dict[str, Topology] = {}

    def reload_topologies(self) -> None:
        """
        Re-read every topology descriptor.

        Descriptors that fail to parse are logged and skipped; they still
        show up in list_topology_names().
        """
        topologies: Dict[str, Topology] = {}
        for path in self._topology_files():
            try:
                topology = self.load_topology_file(path)
            except TopologyError as e:
                self._log(f"Skipping topology {path.name}: {e.format_message()}", "WARNING")
                continue
            topologies[topology.name] = topology
        self._topologies = topologies
        self._log(f"Loaded {len(topologies)} topologies from {self.topologies_dir}")

    def get_topologies(self) -> List[Topology]:
        return list(self._topologies.values())

    def get_topology(self, name: str) -> Optional[Topology]:
        """Get a loaded topology by name."""
        return self._topologies.get(name)

    def list_topology_names(self) -> List[str]:
        """Names of all descriptor files, whether or not they parse."""
        return [path.stem for path in self._topology_files()]

    def topology_file(self, name: str) -> Path:
        """Descriptor path for a topology name (may not exist)."""
        for ext in TOPOLOGY_EXTENSIONS:
            candidate = self.topologies_dir / f"{name}{ext}"
            if candidate.exists():
                return candidate
        return self.topologies_dir / f"{name}{TOPOLOGY_EXTENSIONS[0]}"

    def redeploy_topologies(self, name: Optional[str] = None) -> List[str]:
        """
        Mark one or all topologies for redeployment.

        The running gateway watches descriptor modification times, so
        redeploying is a touch of the descriptor file.

        Args:
            name: Topology name, or None for every loaded topology

        Returns:
            Names of the redeployed topologies
        """
        targets = [self._topologies[name]] if name else self.get_topologies()
        now = time.time()
        redeployed = []
        for topology in targets:
            if topology.path is None:
                continue
            os.utime(topology.path, (now, now))
            redeployed.append(topology.name)
            self._log(f"Redeploying topology: {topology.name}")
        return redeployed

    @staticmethod
    def load_topology_file(path: Path) -> Topology:
        """
        Parse a single topology descriptor.

        Args:
            path: Descriptor file

        Returns:
            Topology object

        Raises:
            TopologyError: If the file cannot be read or is not a mapping
        """
        path = Path(path)
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise TopologyError(f"Unable to read topology file: {path}", context=str(e))
        except yaml.YAMLError as e:
            raise TopologyError(f"Invalid YAML in topology file: {path}", context=str(e))

        if not isinstance(data, dict):
            raise TopologyError(
                f"Invalid topology file: {path}", context="Expected a mapping at the top level"
            )
        try:
            return Topology.from_dict(path.stem, data, path=path)
        except (AttributeError, TypeError, KeyError) as e:
            raise TopologyError(f"Malformed topology file: {path}", context=str(e))

    def _topology_files(self) -> List[Path]:
        if not self.topologies_dir.is_dir():
            return []
        return sorted(
            p
            for p in self.topologies_dir.iterdir()
            if p.is_file() and p.suffix in TOPOLOGY_EXTENSIONS
        )

    def _log(self, message: str, level: str = "INFO") -> None:
        if self.logger:
            self.logger.log(message, level)
