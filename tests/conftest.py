"""Shared fixtures and fakes for the gateway CLI tests."""

import io
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional
from unittest import mock

import pytest
from rich.console import Console

from gatecli.config import GatewayConfig
from gatecli.credentials import CredentialSource
from gatecli.dispatcher import GatewayCli
from gatecli.models.results import AuthOutcome
from gatecli.models.topology import Provider, Topology
from gatecli.services.registry import GatewayServices

LDAP_PARAMS = {
    "main.ldapRealm": "gatecli.auth.LdapRealm",
    "main.ldapRealm.userDnTemplate": "uid={0},ou=people,dc=example,dc=com",
    "main.ldapRealm.contextFactory.url": "ldap://localhost:33389",
    "main.ldapRealm.contextFactory.authenticationMechanism": "simple",
    "urls./**": "authcBasic",
}


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class InMemoryCredentialSource(CredentialSource):
    """Deterministic credential source that records every read."""

    def __init__(self, username: Optional[str] = None, password: Optional[str] = None):
        self.username = username
        self.password = password
        self.reads: List[str] = []

    def read_username(self, prompt: str = "Username") -> Optional[str]:
        self.reads.append("username")
        return self.username

    def read_password(self, prompt: str = "Password", confirm: bool = False) -> Optional[str]:
        self.reads.append("password")
        return self.password


class FakeTopologyService:
    def __init__(self, topologies: Optional[List[Topology]] = None, topologies_dir: Path = Path(".")):
        self.topologies: Dict[str, Topology] = {t.name: t for t in topologies or []}
        self.topologies_dir = topologies_dir
        self.reloads = 0
        self.redeployed: List[Optional[str]] = []

    def reload_topologies(self) -> None:
        self.reloads += 1

    def get_topologies(self) -> List[Topology]:
        return list(self.topologies.values())

    def get_topology(self, name: str) -> Optional[Topology]:
        return self.topologies.get(name)

    def list_topology_names(self) -> List[str]:
        return sorted(self.topologies)

    def topology_file(self, name: str) -> Path:
        return self.topologies_dir / f"{name}.yml"

    def redeploy_topologies(self, name: Optional[str] = None) -> List[str]:
        self.redeployed.append(name)
        return [name] if name else sorted(self.topologies)


class FakeAuthDriver:
    """Yields a canned outcome and records the session lifecycle."""

    def __init__(self, outcome: AuthOutcome, console_file: Optional[io.StringIO] = None):
        self.outcome = outcome
        self.console_file = console_file
        self.calls = []
        self.config_existed = None
        self.logouts = 0
        self.output_at_logout = None

    @contextmanager
    def session(self, config_path, username, password, resolve_alias=None):
        self.calls.append((Path(config_path), username, password))
        self.config_existed = Path(config_path).is_file()
        try:
            yield self.outcome
        finally:
            self.logouts += 1
            if self.console_file is not None:
                self.output_at_logout = self.console_file.getvalue()


def make_topology(
    name: str = "sales",
    params: Optional[Dict[str, str]] = None,
    role: str = "authentication",
    provider_name: str = "ShiroProvider",
    enabled: bool = True,
) -> Topology:
    topology = Topology(name=name)
    topology.add_provider(
        Provider(
            role=role,
            name=provider_name,
            enabled=enabled,
            params=dict(LDAP_PARAMS if params is None else params),
        )
    )
    return topology


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def gateway_config(tmp_path) -> GatewayConfig:
    return GatewayConfig(
        gateway_home=tmp_path,
        topologies_dir=tmp_path / "conf" / "topologies",
        security_dir=tmp_path / "data" / "security",
        log_dir=tmp_path / "logs",
        temp_dir=tmp_path / "tmp",
    )


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def err_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def alias_service():
    service = mock.MagicMock()
    service.get_password_from_alias_for_cluster.return_value = None
    service.get_aliases_for_cluster.return_value = []
    return service


@pytest.fixture
def keystore_service():
    service = mock.MagicMock()
    service.is_credential_store_for_cluster_available.return_value = True
    return service


@pytest.fixture
def master_service():
    service = mock.MagicMock()
    service.get_master_secret.return_value = "master-secret"
    return service


@pytest.fixture
def topology_service(gateway_config) -> FakeTopologyService:
    return FakeTopologyService([make_topology()], gateway_config.topologies_dir)


@pytest.fixture
def services(master_service, keystore_service, alias_service, topology_service) -> GatewayServices:
    registry = GatewayServices()
    registry.add_service(GatewayServices.MASTER_SERVICE, master_service)
    registry.add_service(GatewayServices.KEYSTORE_SERVICE, keystore_service)
    registry.add_service(GatewayServices.ALIAS_SERVICE, alias_service)
    registry.add_service(GatewayServices.TOPOLOGY_SERVICE, topology_service)
    return registry


@pytest.fixture
def make_cli(gateway_config, services, output, err_output):
    """Build a GatewayCli wired to fakes, with captured consoles."""

    def _make(**overrides) -> GatewayCli:
        kwargs = dict(
            config=gateway_config,
            services=services,
            console=Console(file=output, width=200),
            err_console=Console(file=err_output, width=200),
            credential_source=InMemoryCredentialSource(),
        )
        kwargs.update(overrides)
        return GatewayCli(**kwargs)

    return _make
