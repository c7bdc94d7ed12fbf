"""
Command Context

Everything one command needs for a single invocation, passed explicitly
to its validate and execute handlers.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.text import Text

from gatecli.auth.driver import AuthenticationDriver
from gatecli.config import GatewayConfig
from gatecli.core.deployment import DeploymentFactory
from gatecli.credentials import CredentialSource
from gatecli.logger import CommandLogger
from gatecli.models.options import SharedOptions
from gatecli.services.registry import GatewayServices


@dataclass
class CommandContext:
    """
    Invocation-scoped collaborators and output.

    Provides:
    - Services registry and configuration
    - Shared option state from the parser
    - Report helpers that never interpret user text as markup
    """

    config: GatewayConfig
    services: GatewayServices
    options: SharedOptions
    console: Console
    err_console: Console
    credential_source: CredentialSource
    materializer: DeploymentFactory
    auth_driver: AuthenticationDriver
    logger: Optional[CommandLogger] = None

    def report(self, message: str = "") -> None:
        """Print one report line to stdout."""
        self.console.print(Text(message), soft_wrap=True)

    def report_error(self, message: str) -> None:
        """Print an 'ERR:' line and record it in the log."""
        self.console.print(Text(f"ERR: {message}", style="red"), soft_wrap=True)
        self.log(message, "ERROR")

    def report_success(self, message: str) -> None:
        self.console.print(Text(message, style="green"), soft_wrap=True)
        self.log(message)

    def report_trace(self, trace: str) -> None:
        self.console.print(Text(trace.rstrip("\n"), style="dim"), soft_wrap=True)

    def log(self, message: str, level: str = "INFO") -> None:
        if self.logger:
            self.logger.log(message, level)
