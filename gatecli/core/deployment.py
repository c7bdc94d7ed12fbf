"""
Deployment materialization

Expands a topology into an exploded deployment directory holding the
provider-specific configuration files the gateway would serve with.
"""

import configparser
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import yaml

from gatecli.config import GatewayConfig
from gatecli.constants import (
    AUTHENTICATION_ROLE,
    DEPLOYMENT_SUFFIX,
    SHIRO_CONFIG_PATH,
    SHIRO_PROVIDER_NAME,
)
from gatecli.logger import CommandLogger
from gatecli.models.topology import Provider, Topology

DEPLOYMENT_DESCRIPTOR_PATH = "WEB-INF/gateway.yml"
DEFAULT_URLS = {"/**": "authcBasic"}

Contributor = Callable[[Provider, Path], None]


def contribute_shiro_config(provider: Provider, deployment_dir: Path) -> None:
    """
    Write WEB-INF/shiro.ini from a Shiro provider's params.

    Params prefixed 'main.' go to the [main] section and params prefixed
    'urls.' to the [urls] section, prefix stripped. Other params are not
    part of the security descriptor.
    """
    ini = configparser.ConfigParser(interpolation=None)
    ini.optionxform = str  # Shiro keys are case-sensitive
    ini["main"] = {}
    ini["urls"] = {}

    for key, value in provider.params.items():
        section, _, option = key.partition(".")
        if section in ("main", "urls") and option:
            ini[section][option] = value

    if not ini["urls"]:
        ini["urls"] = DEFAULT_URLS

    target = deployment_dir / SHIRO_CONFIG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    # Holds the LDAP system password
    with os.fdopen(os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600), "w") as f:
        ini.write(f)


class DeploymentFactory:
    """Creates exploded deployments for topologies"""

    CONTRIBUTORS: Dict[Tuple[str, str], Contributor] = {
        (AUTHENTICATION_ROLE, SHIRO_PROVIDER_NAME): contribute_shiro_config,
    }

    def __init__(self, config: GatewayConfig, logger: Optional[CommandLogger] = None):
        self.config = config
        self.logger = logger

    def create_deployment(self, topology: Topology, target_dir: Path) -> Path:
        """
        Materialize a topology under target_dir.

        Every call gets a fresh directory '<target_dir>/<topology>_<random>_deploy.tmp'
        readable only by the current user. A failed materialization removes
        its partial output before the error propagates.

        Args:
            topology: Topology to expand
            target_dir: Parent directory for the deployment

        Returns:
            Path to the exploded deployment directory
        """
        Path(target_dir).mkdir(parents=True, exist_ok=True)
        deployment_dir = Path(
            tempfile.mkdtemp(
                prefix=f"{topology.name}_", suffix=DEPLOYMENT_SUFFIX, dir=target_dir
            )
        )

        try:
            (deployment_dir / "WEB-INF").mkdir(mode=0o700)
            self._write_descriptor(topology, deployment_dir)
            for (role, name), provider in topology.providers.items():
                contributor = self.CONTRIBUTORS.get((role, name))
                if contributor is None or not provider.enabled:
                    continue
                contributor(provider, deployment_dir)
                self._log(f"Contributed {role}/{name} for topology {topology.name}")
        except Exception:
            shutil.rmtree(deployment_dir, ignore_errors=True)
            raise

        self._log(f"Materialized topology {topology.name} into {deployment_dir}")
        return deployment_dir

    def _write_descriptor(self, topology: Topology, deployment_dir: Path) -> None:
        descriptor = {
            "topology": topology.name,
            "hostname": self.config.hostname,
            "providers": [
                {"role": p.role, "name": p.name, "enabled": p.enabled}
                for p in topology.providers.values()
            ],
            "services": [{"role": s.role, "urls": s.urls} for s in topology.services],
        }
        with open(deployment_dir / DEPLOYMENT_DESCRIPTOR_PATH, "w") as f:
            yaml.safe_dump(descriptor, f, default_flow_style=False, sort_keys=False)

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.info(message)
