"""Gateway configuration for the CLI"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gatecli.constants import (
    DEFAULT_HOSTNAME,
    DEFAULT_LOG_DIR,
    DEFAULT_SECURITY_DIR,
    DEFAULT_TOPOLOGIES_DIR,
    GATEWAY_SITE_FILE,
    MASTER_FILE_NAME,
)
from gatecli.exceptions import ServiceLifecycleError


@dataclass
class GatewayConfig:
    """Resolved gateway directory layout"""

    gateway_home: Path
    topologies_dir: Path
    security_dir: Path
    log_dir: Path
    temp_dir: Path
    hostname: str = DEFAULT_HOSTNAME

    @property
    def master_file(self) -> Path:
        return self.security_dir / MASTER_FILE_NAME

    @property
    def keystores_dir(self) -> Path:
        return self.security_dir / "keystores"

    @classmethod
    def load(cls, gateway_home: Optional[Path] = None) -> "GatewayConfig":
        """
        Load configuration for a gateway installation.

        The gateway home is taken from the argument, then the GATEWAY_HOME
        environment variable, then the current directory. Values from
        conf/gateway-site.yml override the defaults; relative paths are
        resolved against the gateway home.

        Args:
            gateway_home: Explicit gateway home directory

        Returns:
            GatewayConfig instance

        Raises:
            ServiceLifecycleError: If gateway-site.yml is not valid YAML
        """
        if gateway_home is None:
            gateway_home = Path(os.environ.get("GATEWAY_HOME", os.getcwd()))
        home = Path(gateway_home).expanduser().resolve()

        site = cls._read_site_file(home / GATEWAY_SITE_FILE)

        def resolve(key: str, default: str) -> Path:
            path = Path(str(site.get(key, default))).expanduser()
            return path if path.is_absolute() else home / path

        return cls(
            gateway_home=home,
            topologies_dir=resolve("topologies_dir", DEFAULT_TOPOLOGIES_DIR),
            security_dir=resolve("security_dir", DEFAULT_SECURITY_DIR),
            log_dir=resolve("log_dir", DEFAULT_LOG_DIR),
            temp_dir=Path(site.get("temp_dir") or tempfile.gettempdir()),
            hostname=str(site.get("hostname") or DEFAULT_HOSTNAME),
        )

    @staticmethod
    def _read_site_file(site_file: Path) -> Dict[str, Any]:
        if not site_file.exists():
            return {}
        try:
            with open(site_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ServiceLifecycleError(
                f"Invalid gateway site file: {site_file}", context=str(e)
            )
        if not isinstance(data, dict):
            raise ServiceLifecycleError(
                f"Invalid gateway site file: {site_file}",
                context="Expected a mapping at the top level",
            )
        return data
