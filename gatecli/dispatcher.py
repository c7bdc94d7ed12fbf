"""
Command Dispatcher

Parses argv, validates and executes the selected command, and maps
every failure to the CLI's exit codes.
"""

import traceback
from typing import Optional, Sequence

from rich.console import Console
from rich.text import Text

from gatecli.auth.driver import AuthenticationDriver
from gatecli.commands import COMMAND_HANDLERS
from gatecli.config import GatewayConfig
from gatecli.constants import (
    EXIT_INTERRUPTED,
    EXIT_INVALID_COMMAND,
    EXIT_OK,
    EXIT_UNEXPECTED,
    EXIT_USAGE,
)
from gatecli.context import CommandContext
from gatecli.core.deployment import DeploymentFactory
from gatecli.credentials import CredentialSource, default_credential_source
from gatecli.exceptions import ServiceLifecycleError, UsageError
from gatecli.logger import CommandLogger
from gatecli.models.commands import CreateMasterSecret, Unrecognized
from gatecli.parser import CommandLineParser
from gatecli.services.registry import GatewayServices
from gatecli.usage import render_usage


class GatewayCli:
    """
    Gateway operator CLI.

    Every collaborator can be injected; missing ones are built from the
    gateway configuration on first use. The master secret is prompted for
    through master_source, separate from the user credential source.
    """

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        services: Optional[GatewayServices] = None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
        credential_source: Optional[CredentialSource] = None,
        master_source: Optional[CredentialSource] = None,
        materializer: Optional[DeploymentFactory] = None,
        auth_driver: Optional[AuthenticationDriver] = None,
        parser: Optional[CommandLineParser] = None,
    ):
        self.config = config
        self.services = services if services is not None else GatewayServices()
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.credential_source = credential_source
        self.master_source = master_source
        self.materializer = materializer
        self.auth_driver = auth_driver
        self.parser = parser or CommandLineParser()

    def run(self, args: Sequence[str]) -> int:
        """
        Run one invocation.

        Args:
            args: Arguments without the program name

        Returns:
            Process exit code
        """
        args = list(args)
        try:
            parsed = self.parser.parse(args)
        except UsageError as e:
            self._print(render_usage(e.command))
            return EXIT_USAGE

        command, options = parsed.command, parsed.options
        handler = COMMAND_HANDLERS.get(type(command))
        if isinstance(command, Unrecognized) or handler is None:
            self._print_invalid_command(args)
            return EXIT_INVALID_COMMAND

        logger = None
        exit_code = EXIT_OK
        try:
            if self.config is None:
                self.config = GatewayConfig.load()
            logger = self._open_logger(command.token, options.debug)
            if logger:
                logger.info(f"Arguments parsed: {command!r} {options!r}")

            ctx = self._build_context(options, logger)
            if not handler.validate(command, ctx):
                self._print_invalid_command(args)
                exit_code = EXIT_INVALID_COMMAND
                return exit_code

            self.services.init(
                self.config,
                persisting=isinstance(command, CreateMasterSecret),
                master=options.master,
                credential_source=self.master_source or default_credential_source(self.console),
                logger=logger,
            )
            handler.execute(command, ctx)
        except ServiceLifecycleError as e:
            if logger:
                logger.log_error(e.format_message(), context=type(e).__name__)
            self._print(
                "ERROR: Internal Error: Please refer to the gatecli log file for details. "
                + e.message
            )
        except KeyboardInterrupt:
            self.err_console.print("\nOperation cancelled by user", style="yellow")
            exit_code = EXIT_INTERRUPTED
        except Exception as e:
            if logger:
                logger.log_error(f"{type(e).__name__}: {e}", context=traceback.format_exc())
            self.err_console.print(Text(traceback.format_exc().rstrip("\n")), soft_wrap=True)
            exit_code = EXIT_UNEXPECTED
        finally:
            if logger:
                logger.close(exit_code)
        return exit_code

    def _build_context(self, options, logger: Optional[CommandLogger]) -> CommandContext:
        credential_source = self.credential_source or default_credential_source(self.console)
        materializer = self.materializer or DeploymentFactory(self.config, logger=logger)
        auth_driver = self.auth_driver or AuthenticationDriver(self.services, logger=logger)
        return CommandContext(
            config=self.config,
            services=self.services,
            options=options,
            console=self.console,
            err_console=self.err_console,
            credential_source=credential_source,
            materializer=materializer,
            auth_driver=auth_driver,
            logger=logger,
        )

    def _open_logger(self, operation: str, verbose: bool) -> Optional[CommandLogger]:
        try:
            return CommandLogger(
                self.config.log_dir, operation, verbose=verbose, output=self.err_console
            )
        except OSError as e:
            # The command still runs without a log file
            self.err_console.print(
                Text(f"Unable to open log file in {self.config.log_dir}: {e}"), style="dim"
            )
            return None

    def _print_invalid_command(self, args: Sequence[str]) -> None:
        first = args[0] if args else ""
        self._print(
            "ERROR: Invalid Command\n"
            f"Unrecognized option:{first}\n"
            "A fatal exception has occurred. Program will exit."
        )

    def _print(self, text: str) -> None:
        self.console.print(Text(text), soft_wrap=True)
