"""create-alias, delete-alias and list-alias commands"""

from gatecli.commands.common import keystore_guard
from gatecli.context import CommandContext
from gatecli.models.commands import CreateAlias, DeleteAlias, ListAliases


def create(command: CreateAlias, ctx: CommandContext) -> None:
    """
    Store an alias and its secret for the effective cluster.

    Raises:
        ValueError: If neither --value nor --generate was given
    """
    cluster = ctx.options.effective_cluster
    aliases = ctx.services.alias_service

    with keystore_guard(ctx):
        if ctx.options.value is not None:
            aliases.add_alias_for_cluster(cluster, command.name, ctx.options.value)
            ctx.report(f"{command.name} has been successfully created.")
        elif ctx.options.generate:
            aliases.generate_alias_for_cluster(cluster, command.name)
            ctx.report(f"{command.name} has been successfully generated.")
        else:
            raise ValueError("No value has been set. Consider setting --generate or --value.")


def delete(command: DeleteAlias, ctx: CommandContext) -> None:
    cluster = ctx.options.effective_cluster
    keystore = ctx.services.keystore_service

    if not keystore.is_credential_store_for_cluster_available(cluster):
        ctx.report(f"Invalid cluster name provided: {cluster}")
        return

    with keystore_guard(ctx):
        ctx.services.alias_service.remove_alias_for_cluster(cluster, command.name)
    ctx.report(f"{command.name} has been successfully deleted.")


def list_aliases(command: ListAliases, ctx: CommandContext) -> None:
    cluster = ctx.options.effective_cluster
    keystore = ctx.services.keystore_service

    if not keystore.is_credential_store_for_cluster_available(cluster):
        ctx.report(f"Invalid cluster name provided: {cluster}")
        return

    with keystore_guard(ctx):
        names = ctx.services.alias_service.get_aliases_for_cluster(cluster)

    ctx.report(f"Listing aliases for: {cluster}")
    for name in names:
        ctx.report(name)
    ctx.report()
    ctx.report(f"{len(names)} items.")
