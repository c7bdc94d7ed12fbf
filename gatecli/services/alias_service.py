"""
Alias Service

Named secrets stored in per-cluster credential stores.
"""

import secrets
from typing import List, Optional

from gatecli.constants import GENERATED_ALIAS_BYTES
from gatecli.logger import CommandLogger
from gatecli.services.keystore_service import KeystoreService


class AliasService:
    """
    Alias management on top of the keystore service.

    Responsibilities:
    - List, add, remove and generate aliases per cluster
    - Resolve an alias to its secret value
    """

    def __init__(self, keystore: KeystoreService, logger: Optional[CommandLogger] = None):
        self.keystore = keystore
        self.logger = logger

    def get_aliases_for_cluster(self, cluster: str) -> List[str]:
        """
        List alias names of a cluster.

        Args:
            cluster: Cluster name

        Returns:
            Sorted alias names (empty if the store does not exist)
        """
        if not self.keystore.is_credential_store_for_cluster_available(cluster):
            return []
        return sorted(self.keystore.get_credentials_for_cluster(cluster))

    def add_alias_for_cluster(self, cluster: str, alias: str, value: str) -> None:
        """
        Add or replace an alias, creating the cluster's store if needed.

        Args:
            cluster: Cluster name
            alias: Alias name
            value: Secret value
        """
        if not self.keystore.is_credential_store_for_cluster_available(cluster):
            self.keystore.create_credential_store_for_cluster(cluster)
        credentials = self.keystore.get_credentials_for_cluster(cluster)
        credentials[alias] = value
        self.keystore.set_credentials_for_cluster(cluster, credentials)
        self._log(f"Stored alias '{alias}' for cluster '{cluster}'")

    def generate_alias_for_cluster(self, cluster: str, alias: str) -> None:
        """Store a freshly generated random secret under an alias."""
        self.add_alias_for_cluster(
            cluster, alias, secrets.token_urlsafe(GENERATED_ALIAS_BYTES)
        )

    def remove_alias_for_cluster(self, cluster: str, alias: str) -> None:
        """Remove an alias; removing an unknown alias is a no-op."""
        credentials = self.keystore.get_credentials_for_cluster(cluster)
        if credentials.pop(alias, None) is not None:
            self.keystore.set_credentials_for_cluster(cluster, credentials)
            self._log(f"Removed alias '{alias}' from cluster '{cluster}'")

    def get_password_from_alias_for_cluster(
        self, cluster: str, alias: str
    ) -> Optional[str]:
        """
        Get the secret stored under an alias.

        Returns:
            Secret value or None if the store or alias does not exist
        """
        if not self.keystore.is_credential_store_for_cluster_available(cluster):
            return None
        return self.keystore.get_credentials_for_cluster(cluster).get(alias)

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.info(message)
