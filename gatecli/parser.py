"""
Command Line Parser

Single left-to-right pass over argv with one token of lookahead.
Command tokens select the command (last one wins), flag tokens fill in
SharedOptions, anything else aborts with usage.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from gatecli.exceptions import UsageError
from gatecli.models.commands import (
    AuthTest,
    Command,
    CreateAlias,
    CreateCertificate,
    CreateMasterSecret,
    DeleteAlias,
    ListAliases,
    ListTopologies,
    Redeploy,
    ShowVersion,
    Unrecognized,
    ValidateTopology,
)
from gatecli.models.options import SharedOptions

HELP = "--help"


class ParseState(Enum):
    SCANNING = "scanning"
    AWAITING_VALUE = "awaiting_value"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ParseResult:
    command: Command
    options: SharedOptions


class CommandLineParser:
    """
    Turns argv into one command plus shared option state.

    Raises UsageError (carrying the command type selected so far) instead
    of printing; the dispatcher owns all output.
    """

    # Flags whose value must exist and must not look like a flag
    VALUE_FLAGS = {
        "--value": "value",
        "--cluster": "cluster",
        "--topology": "cluster",
        "--path": "path",
        "--hostname": "hostname",
        "--master": "master",
    }
    # Flags whose value is taken verbatim (passwords may start with '-')
    VERBATIM_FLAGS = {
        "--u": "username",
        "--p": "password",
    }
    SWITCHES = {
        "--force": "force",
        "--d": "debug",
        "--g": "list_groups",
    }
    SIMPLE_COMMANDS = {
        cls.token: cls for cls in (ShowVersion, ListAliases, Redeploy, ListTopologies)
    }
    ALIAS_COMMANDS = {cls.token: cls for cls in (CreateAlias, DeleteAlias)}

    def __init__(self, master_generator: Optional[Callable[[], str]] = None):
        """
        Initialize the parser.

        Args:
            master_generator: Produces the master secret for
                'create-master --generate' (random UUID by default)
        """
        self.master_generator = master_generator or (lambda: str(uuid.uuid4()))
        self.state = ParseState.SCANNING

    def parse(self, args: Sequence[str]) -> ParseResult:
        """
        Parse a full argument vector.

        Args:
            args: Arguments without the program name

        Returns:
            ParseResult with the selected command and options

        Raises:
            UsageError: If the arguments are malformed or help was requested
        """
        argv: List[str] = list(args)
        self.state = ParseState.SCANNING
        command: Optional[Command] = None
        options = SharedOptions()
        pending: Optional[str] = None

        if not argv:
            self._abort(None, "No command given")

        for index, token in enumerate(argv):
            following = argv[index + 1] if index + 1 < len(argv) else None

            if self.state == ParseState.AWAITING_VALUE:
                command = self._accept_value(pending, token, command, options)
                pending = None
                self.state = ParseState.SCANNING
                continue

            if token in self.ALIAS_COMMANDS:
                command_type = self.ALIAS_COMMANDS[token]
                if following is None or following.startswith("-"):
                    self._abort(command_type, f"{token} requires an alias name")
                pending = token
                self.state = ParseState.AWAITING_VALUE

            elif token in self.VALUE_FLAGS:
                if following is None or following.startswith("-"):
                    self._abort(type(command) if command else None, f"{token} requires a value")
                pending = token
                self.state = ParseState.AWAITING_VALUE

            elif token in self.VERBATIM_FLAGS:
                if following is None:
                    self._abort(type(command) if command else None, f"{token} requires a value")
                pending = token
                self.state = ParseState.AWAITING_VALUE

            elif token in (CreateMasterSecret.token, CreateCertificate.token):
                command = CreateMasterSecret() if token == CreateMasterSecret.token else CreateCertificate()
                if following == HELP:
                    self._abort(type(command), "Help requested")

            elif token in (AuthTest.token, ValidateTopology.token):
                if following is None:
                    self._abort(type(command) if command else None, f"{token} requires options")
                command = AuthTest() if token == AuthTest.token else ValidateTopology()
                if following == HELP:
                    self._abort(type(command), "Help requested")

            elif token in self.SIMPLE_COMMANDS:
                command = self.SIMPLE_COMMANDS[token]()

            elif token == "--generate":
                if isinstance(command, CreateMasterSecret):
                    options.master = self.master_generator()
                else:
                    options.generate = True

            elif token in self.SWITCHES:
                setattr(options, self.SWITCHES[token], True)

            elif token == HELP:
                self._abort(type(command) if command else None, "Help requested")

            else:
                self._abort(type(command) if command else None, f"Unrecognized argument: {token}")

        self.state = ParseState.DONE
        if command is None:
            command = Unrecognized(argument=argv[0])
        return ParseResult(command=command, options=options)

    def _accept_value(
        self,
        pending: str,
        value: str,
        command: Optional[Command],
        options: SharedOptions,
    ) -> Optional[Command]:
        if pending in self.ALIAS_COMMANDS:
            return self.ALIAS_COMMANDS[pending](name=value)

        if pending == "--value":
            options.value = value
            # Dual write: the value doubles as the master secret for create-master
            if isinstance(command, CreateMasterSecret):
                options.master = value
        elif pending in self.VALUE_FLAGS:
            setattr(options, self.VALUE_FLAGS[pending], value)
        else:
            setattr(options, self.VERBATIM_FLAGS[pending], value)
        return command

    def _abort(self, command_type, message: str) -> None:
        self.state = ParseState.ABORTED
        raise UsageError(message, command=command_type)
