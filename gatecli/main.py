#!/usr/bin/env python3
"""Gateway CLI - Main entry point"""

import sys

import rich_click as click

from gatecli.dispatcher import GatewayCli

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.MAX_WIDTH = 100
click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_USAGE = "bold yellow"


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "help_option_names": [],
    },
    add_help_option=False,
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(args):
    """
    Gateway operator CLI.

    Manages the master secret, aliases and gateway certificate, and checks
    topologies and their LDAP authentication setup. Run with --help for the
    full command list.
    """
    sys.exit(GatewayCli().run(list(args)))


def main():
    """Main entry point"""
    cli(prog_name="gatecli")


if __name__ == "__main__":
    main()
