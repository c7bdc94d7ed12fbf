"""
Credential acquisition

Username/password sources used when credentials are not given as flags.
"""

import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO, Tuple

import click
from rich.console import Console

from gatecli.models.options import SharedOptions


class CredentialSource(ABC):
    """Source of interactively supplied credentials"""

    @abstractmethod
    def read_username(self, prompt: str = "Username") -> Optional[str]:
        """Return a username, or None if none could be read."""

    @abstractmethod
    def read_password(self, prompt: str = "Password", confirm: bool = False) -> Optional[str]:
        """Return a password, or None if none could be read."""


class TerminalCredentialSource(CredentialSource):
    """Prompts on an interactive terminal; passwords are not echoed."""

    def read_username(self, prompt: str = "Username") -> Optional[str]:
        try:
            return click.prompt(prompt, type=str, default="", show_default=False)
        except click.Abort:
            return None

    def read_password(self, prompt: str = "Password", confirm: bool = False) -> Optional[str]:
        try:
            return click.prompt(
                prompt,
                type=str,
                default="",
                show_default=False,
                hide_input=True,
                confirmation_prompt=confirm,
            )
        except click.Abort:
            return None


class StdinCredentialSource(CredentialSource):
    """Reads one visible line per value from a piped stdin."""

    def __init__(self, stream: Optional[TextIO] = None, console: Optional[Console] = None):
        self.stream = stream if stream is not None else sys.stdin
        self.console = console or Console()

    def read_username(self, prompt: str = "Username") -> Optional[str]:
        return self._read_line(prompt)

    def read_password(self, prompt: str = "Password", confirm: bool = False) -> Optional[str]:
        # No confirmation without a terminal: there is nobody to retype it
        return self._read_line(prompt)

    def _read_line(self, prompt: str) -> Optional[str]:
        self.console.print(f"{prompt}: ", markup=False, highlight=False)
        line = self.stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")


def default_credential_source(
    console: Optional[Console] = None, stream: Optional[TextIO] = None
) -> CredentialSource:
    """Secure prompt on a terminal, plain line reads otherwise."""
    stream = stream if stream is not None else sys.stdin
    if stream.isatty():
        return TerminalCredentialSource()
    return StdinCredentialSource(stream, console)


def resolve_credentials(
    options: SharedOptions, source: CredentialSource
) -> Tuple[Optional[str], Optional[str]]:
    """
    Combine flag-supplied credentials with prompted ones.

    Flags win; only missing fields are read from the source.

    Returns:
        Tuple of (username, password); either may still be None
    """
    username = options.username
    password = options.password
    if username is None:
        username = source.read_username("Username")
    if password is None:
        password = source.read_password("Password")
    return username, password
