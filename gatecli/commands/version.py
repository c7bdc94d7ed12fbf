"""version command"""

from gatecli import __build__, __version__
from gatecli.context import CommandContext
from gatecli.models.commands import ShowVersion


def execute(command: ShowVersion, ctx: CommandContext) -> None:
    ctx.report(f"Gateway CLI: {__version__} ({__build__})")
