"""
Keystore Service

Per-cluster credential stores and the gateway identity keystore.
"""

import base64
import datetime
import json
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from gatecli.constants import (
    CERT_KEY_SIZE,
    CERT_VALIDITY_DAYS,
    CREDENTIAL_STORE_SUFFIX,
    GATEWAY_KEYSTORE_NAME,
)
from gatecli.core.crypto import open_token, seal, stretch_key
from gatecli.exceptions import KeystoreError
from gatecli.logger import CommandLogger

STORE_FORMAT_VERSION = 2
STORE_KDF_ITERATIONS = 200_000
STORE_CHECK_VALUE = b"gatecli-credential-store-check"
SALT_SIZE = 16


class KeystoreService:
    """
    File-based keystore management.

    Responsibilities:
    - Create and open per-cluster credential stores
    - Encrypt alias values with a key derived from the master secret
    - Create the gateway identity keystore and its self-signed certificate
    """

    def __init__(
        self,
        keystores_dir: Path,
        master_secret: str,
        logger: Optional[CommandLogger] = None,
        kdf_iterations: int = STORE_KDF_ITERATIONS,
    ):
        """
        Initialize keystore service.

        Args:
            keystores_dir: Directory holding every keystore file
            master_secret: Master secret protecting the stores
            logger: Optional command logger
            kdf_iterations: PBKDF2 iterations for newly created stores
        """
        self.keystores_dir = Path(keystores_dir)
        self._master_secret = master_secret
        self.logger = logger
        self.kdf_iterations = kdf_iterations
        self._keys: Dict[Tuple[bytes, int], bytes] = {}

    def credential_store_path(self, cluster: str) -> Path:
        return self.keystores_dir / f"{cluster}{CREDENTIAL_STORE_SUFFIX}"

    @property
    def gateway_keystore_path(self) -> Path:
        return self.keystores_dir / GATEWAY_KEYSTORE_NAME

    def is_credential_store_for_cluster_available(self, cluster: str) -> bool:
        return self.credential_store_path(cluster).exists()

    def create_credential_store_for_cluster(self, cluster: str) -> None:
        """
        Create an empty credential store for a cluster.

        Args:
            cluster: Cluster name
        """
        salt = os.urandom(SALT_SIZE)
        key = self._store_key(salt, self.kdf_iterations)
        store = {
            "version": STORE_FORMAT_VERSION,
            "cluster": cluster,
            "kdf": "pbkdf2-sha256",
            "iterations": self.kdf_iterations,
            "salt": base64.b64encode(salt).decode("ascii"),
            "check": seal(key, STORE_CHECK_VALUE),
            "aliases": {},
        }
        self._write_store(cluster, store)
        self._log(f"Created credential store for cluster: {cluster}")

    def get_credentials_for_cluster(self, cluster: str) -> Dict[str, str]:
        """
        Decrypt every alias of a cluster's credential store.

        Args:
            cluster: Cluster name

        Returns:
            Mapping of alias name to secret value

        Raises:
            KeystoreError: If the store is missing, corrupt or the master
                secret does not match
        """
        store, key = self._open_store(cluster)
        return {
            alias: open_token(key, token).decode("utf-8")
            for alias, token in store["aliases"].items()
        }

    def set_credentials_for_cluster(
        self, cluster: str, credentials: Dict[str, str]
    ) -> None:
        """
        Replace the contents of a cluster's credential store.

        Args:
            cluster: Cluster name
            credentials: Mapping of alias name to secret value
        """
        store, key = self._open_store(cluster)
        store["aliases"] = {
            alias: seal(key, value.encode("utf-8"))
            for alias, value in sorted(credentials.items())
        }
        self._write_store(cluster, store)

    def is_keystore_for_gateway_available(self) -> bool:
        return self.gateway_keystore_path.exists()

    def create_keystore_for_gateway(self) -> None:
        """Create an empty gateway identity keystore."""
        self.keystores_dir.mkdir(parents=True, exist_ok=True)
        self.gateway_keystore_path.touch(mode=0o600)
        self._log(f"Created gateway keystore: {self.gateway_keystore_path}")

    def add_self_signed_cert_for_gateway(
        self, alias: str, passphrase: str, hostname: str
    ) -> x509.Certificate:
        """
        Generate a key pair and self-signed certificate for the gateway.

        The private key is stored encrypted with the passphrase. Any previous
        identity in the keystore is replaced.

        Args:
            alias: Entry name written to the keystore
            passphrase: Passphrase protecting the private key
            hostname: Common name and DNS subject alternative name

        Returns:
            The generated certificate

        Raises:
            KeystoreError: If the keystore does not exist or cannot be written
        """
        if not self.is_keystore_for_gateway_available():
            raise KeystoreError(
                "Gateway keystore does not exist",
                context=str(self.gateway_keystore_path),
            )
        if not passphrase:
            raise KeystoreError("A passphrase is required for the gateway identity key")

        key = rsa.generate_private_key(public_exponent=65537, key_size=CERT_KEY_SIZE)
        name = x509.Name(
            [
                x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Gateway"),
                x509.NameAttribute(NameOID.COMMON_NAME, hostname),
            ]
        )
        now = datetime.datetime.now(datetime.timezone.utc)
        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + datetime.timedelta(days=CERT_VALIDITY_DAYS))
            .add_extension(
                x509.SubjectAlternativeName([x509.DNSName(hostname)]), critical=False
            )
            .sign(key, hashes.SHA256())
        )

        key_pem = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(
                passphrase.encode("utf-8")
            ),
        )
        cert_pem = cert.public_bytes(serialization.Encoding.PEM)

        try:
            with open(self.gateway_keystore_path, "wb") as f:
                f.write(f"# alias: {alias}\n".encode("utf-8"))
                f.write(key_pem)
                f.write(cert_pem)
        except OSError as e:
            raise KeystoreError("Unable to write gateway keystore", context=str(e))

        self._log(f"Added self-signed certificate '{alias}' for {hostname}")
        return cert

    def _open_store(self, cluster: str):
        path = self.credential_store_path(cluster)
        if not path.exists():
            raise KeystoreError(f"Credential store for cluster '{cluster}' does not exist")
        try:
            with open(path, "r") as f:
                store = json.load(f)
            salt = base64.b64decode(store["salt"])
            iterations = int(store["iterations"])
            check = store["check"]
            store.setdefault("aliases", {})
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise KeystoreError(
                f"Credential store for cluster '{cluster}' is unreadable", context=str(e)
            )

        if iterations < 1:
            raise KeystoreError(
                f"Credential store for cluster '{cluster}' is unreadable",
                context=f"Invalid iteration count: {iterations}",
            )
        key = self._store_key(salt, iterations)
        if open_token(key, check) != STORE_CHECK_VALUE:
            raise KeystoreError(f"Credential store for cluster '{cluster}' failed verification")
        return store, key

    def _store_key(self, salt: bytes, iterations: int) -> bytes:
        cached = self._keys.get((salt, iterations))
        if cached is None:
            cached = stretch_key(self._master_secret, salt, iterations)
            self._keys[(salt, iterations)] = cached
        return cached

    def _write_store(self, cluster: str, store: dict) -> None:
        self.keystores_dir.mkdir(parents=True, exist_ok=True)
        path = self.credential_store_path(cluster)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(store, f, indent=2)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, path)
        except OSError as e:
            raise KeystoreError(
                f"Unable to write credential store for cluster '{cluster}'", context=str(e)
            )

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.info(message)
