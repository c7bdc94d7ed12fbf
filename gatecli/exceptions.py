"""
Gateway CLI Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
"""

from typing import Optional


class GatewayCliError(Exception):
    """Base exception for all gateway CLI errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class UsageError(GatewayCliError):
    """Raised when the command line is malformed or help was requested."""

    def __init__(self, message: str = "Usage requested", command=None):
        self.command = command
        super().__init__(message)


class ServiceLifecycleError(GatewayCliError):
    """Raised when a gateway service cannot be initialized or used."""

    pass


class KeystoreError(GatewayCliError):
    """Raised when a keystore or credential store cannot be loaded."""

    pass


class TopologyError(GatewayCliError):
    """Raised when a topology descriptor cannot be read."""

    pass


class SecurityConfigError(GatewayCliError):
    """Raised when a materialized security config is unusable."""

    pass


class AuthenticationError(GatewayCliError):
    """Raised when the directory rejects a login attempt."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        context: Optional[str] = None,
    ):
        self.cause = cause
        super().__init__(message, context)
