"""create-master command"""

import os

from gatecli.context import CommandContext
from gatecli.models.commands import CreateMasterSecret


def validate(command: CreateMasterSecret, ctx: CommandContext) -> bool:
    """
    Check that the master secret file may be (re)written.

    With --force an existing, writable master file is deleted here so
    the services layer persists a fresh one.

    Returns:
        True if the command may run
    """
    security_dir = ctx.config.security_dir
    master_file = ctx.config.master_file

    if master_file.exists():
        if not ctx.options.force:
            ctx.report(
                "Master secret is already present on disk. "
                "Please be aware that overwriting it will require updating other security artifacts. "
                " Use --force to overwrite the existing master secret."
            )
            return False
        if not os.access(master_file, os.W_OK):
            ctx.report(
                "This command requires write permissions on the master secret file: "
                f"{master_file.resolve()}"
            )
            return False
        try:
            master_file.unlink()
        except OSError as e:
            ctx.log(f"Unable to delete {master_file}: {e}", "ERROR")
            ctx.report(f"Unable to delete the master secret file: {master_file.resolve()}")
            return False
        ctx.log(f"Deleted existing master secret file {master_file}")
    elif security_dir.exists() and not os.access(security_dir, os.W_OK):
        ctx.report(
            "This command requires write permissions on the security directory: "
            f"{security_dir.resolve()}"
        )
        return False
    return True


def execute(command: CreateMasterSecret, ctx: CommandContext) -> None:
    ctx.report("Master secret has been persisted to disk.")
