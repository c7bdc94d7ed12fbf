"""
Gateway Services Registry

Explicit per-invocation service container handed to every command.
"""

from typing import Any, Dict, Optional

from gatecli.config import GatewayConfig
from gatecli.exceptions import ServiceLifecycleError
from gatecli.logger import CommandLogger
from gatecli.services.alias_service import AliasService
from gatecli.services.keystore_service import KeystoreService
from gatecli.services.master_service import MasterService
from gatecli.services.topology_service import TopologyService


class GatewayServices:
    """
    Named service registry.

    Services already registered (e.g. test fakes) are kept by init().
    """

    MASTER_SERVICE = "MasterService"
    KEYSTORE_SERVICE = "KeystoreService"
    ALIAS_SERVICE = "AliasService"
    TOPOLOGY_SERVICE = "TopologyService"
    SECURITY_MANAGER = "SecurityManager"

    def __init__(self):
        self._services: Dict[str, Any] = {}

    def init(
        self,
        config: GatewayConfig,
        persisting: bool = False,
        master: Optional[str] = None,
        credential_source=None,
        logger: Optional[CommandLogger] = None,
    ) -> None:
        """
        Initialize the default services for one invocation.

        Args:
            config: Gateway configuration
            persisting: Persist the master secret (create-master only)
            master: Explicit master secret override
            credential_source: Prompt used when the master secret is unknown
            logger: Optional command logger

        Raises:
            ServiceLifecycleError: If the master secret cannot be obtained
        """
        if self.MASTER_SERVICE not in self._services:
            master_service = MasterService(
                config.master_file,
                persisting=persisting,
                master=master,
                credential_source=credential_source,
                logger=logger,
            )
            master_service.init()
            self.add_service(self.MASTER_SERVICE, master_service)

        if self.KEYSTORE_SERVICE not in self._services:
            self.add_service(
                self.KEYSTORE_SERVICE,
                KeystoreService(
                    config.keystores_dir,
                    self.master_service.get_master_secret(),
                    logger=logger,
                ),
            )

        if self.ALIAS_SERVICE not in self._services:
            self.add_service(
                self.ALIAS_SERVICE, AliasService(self.keystore_service, logger=logger)
            )

        if self.TOPOLOGY_SERVICE not in self._services:
            self.add_service(
                self.TOPOLOGY_SERVICE, TopologyService(config.topologies_dir, logger=logger)
            )

    def add_service(self, name: str, service: Any) -> None:
        self._services[name] = service

    def remove_service(self, name: str) -> None:
        self._services.pop(name, None)

    def has_service(self, name: str) -> bool:
        return name in self._services

    def get_service(self, name: str) -> Any:
        """
        Get a registered service.

        Raises:
            ServiceLifecycleError: If the service is not registered
        """
        try:
            return self._services[name]
        except KeyError:
            raise ServiceLifecycleError(f"Service '{name}' is not available")

    @property
    def master_service(self) -> MasterService:
        return self.get_service(self.MASTER_SERVICE)

    @property
    def keystore_service(self) -> KeystoreService:
        return self.get_service(self.KEYSTORE_SERVICE)

    @property
    def alias_service(self) -> AliasService:
        return self.get_service(self.ALIAS_SERVICE)

    @property
    def topology_service(self) -> TopologyService:
        return self.get_service(self.TOPOLOGY_SERVICE)
