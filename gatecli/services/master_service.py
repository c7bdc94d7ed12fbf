"""
Master Secret Service

Obtains, persists and serves the gateway master secret.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from gatecli.core.crypto import derive_key, open_token, seal
from gatecli.exceptions import KeystoreError, ServiceLifecycleError
from gatecli.logger import CommandLogger

MASTER_FILE_HEADER = "#1.0#"
# Fixed key material for the master file encoding
MASTER_OBFUSCATION_SECRET = "gatecli-master-secret-obfuscation"
MASTER_OBFUSCATION_SALT = b"gatecli-master"
MASTER_OBFUSCATION_INFO = b"gatecli-master-file"


class MasterService:
    """
    Master secret lifecycle.

    The secret comes from an explicit override, then the persisted master
    file, then an interactive prompt. It is written to disk only when the
    service is initialized for persisting.
    """

    def __init__(
        self,
        master_file: Path,
        persisting: bool = False,
        master: Optional[str] = None,
        credential_source=None,
        logger: Optional[CommandLogger] = None,
    ):
        self.master_file = Path(master_file)
        self.persisting = persisting
        self._master = master
        self.credential_source = credential_source
        self.logger = logger

    def init(self) -> None:
        """
        Resolve (and optionally persist) the master secret.

        Raises:
            ServiceLifecycleError: If no secret can be obtained or the master
                file cannot be read or written
        """
        if self._master is None and not self.persisting and self.master_file.exists():
            self._master = self._load()
            self._log(f"Loaded master secret from {self.master_file}")

        if self._master is None:
            self._master = self._prompt()

        if not self._master:
            raise ServiceLifecycleError("No master secret was provided")

        if self.persisting:
            self._persist()

    def get_master_secret(self) -> str:
        if self._master is None:
            raise ServiceLifecycleError("Master service has not been initialized")
        return self._master

    def _prompt(self) -> Optional[str]:
        if self.credential_source is None:
            return None
        return self.credential_source.read_password(
            "Enter master secret", confirm=self.persisting
        )

    def _load(self) -> str:
        try:
            lines = self.master_file.read_text().splitlines()
        except OSError as e:
            raise ServiceLifecycleError("Unable to read the master secret file", context=str(e))
        token = next(
            (line.strip() for line in lines if line.strip() and not line.startswith("#")),
            "",
        )
        try:
            return open_token(self._obfuscation_key(), token).decode("utf-8")
        except KeystoreError as e:
            raise ServiceLifecycleError(
                f"Master secret file is corrupt: {self.master_file}", context=e.message
            )

    def _persist(self) -> None:
        token = seal(self._obfuscation_key(), self._master.encode("utf-8"))
        try:
            self.master_file.parent.mkdir(parents=True, exist_ok=True)
            self.master_file.write_text(
                f"{MASTER_FILE_HEADER} {datetime.now().isoformat()}\n{token}\n"
            )
            self.master_file.chmod(0o600)
        except OSError as e:
            raise ServiceLifecycleError("Unable to persist the master secret", context=str(e))
        self._log(f"Persisted master secret to {self.master_file}")

    @staticmethod
    def _obfuscation_key() -> bytes:
        return derive_key(
            MASTER_OBFUSCATION_SECRET, MASTER_OBFUSCATION_SALT, MASTER_OBFUSCATION_INFO
        )

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.info(message)
