"""redeploy, list-topologies and validate-topology commands"""

from pathlib import Path

from gatecli.context import CommandContext
from gatecli.core.topology_validator import TopologyValidator
from gatecli.models.commands import ListTopologies, Redeploy, ValidateTopology

TOPOLOGY_LIST_HEADER = "List of files available in the topologies directory"
VALIDATION_DIVIDER = "=" * 42


def redeploy(command: Redeploy, ctx: CommandContext) -> None:
    """Redeploy the --cluster topology, or every topology without one."""
    topologies = ctx.services.topology_service
    topologies.reload_topologies()

    cluster = ctx.options.cluster
    if cluster is not None and topologies.get_topology(cluster) is None:
        ctx.report("Invalid cluster name provided. Nothing to redeploy.")
        return

    for name in topologies.redeploy_topologies(cluster):
        ctx.log(f"Redeployed {name}")


def list_topologies(command: ListTopologies, ctx: CommandContext) -> None:
    topologies = ctx.services.topology_service

    ctx.report(TOPOLOGY_LIST_HEADER)
    ctx.report(str(ctx.config.topologies_dir))
    if not ctx.config.topologies_dir.is_dir():
        ctx.report_error("Topologies directory does not exist.")
        return
    for name in topologies.list_topology_names():
        ctx.report(name)


def validate_topology(command: ValidateTopology, ctx: CommandContext) -> None:
    """
    Validate a descriptor given by --path, or by --cluster name.

    With neither option the available topology names are listed instead.
    """
    topologies = ctx.services.topology_service

    if ctx.options.path is not None:
        target = Path(ctx.options.path)
    elif ctx.options.cluster is None:
        if not ctx.config.topologies_dir.is_dir():
            ctx.report("Could not locate topologies directory")
            return
        ctx.report(TOPOLOGY_LIST_HEADER)
        for name in topologies.list_topology_names():
            ctx.report(name)
        return
    else:
        target = topologies.topology_file(ctx.options.cluster)

    ctx.report()
    ctx.report("File to be validated: ")
    ctx.report(str(target))
    ctx.report(VALIDATION_DIVIDER)

    if not target.is_file():
        ctx.report("The topology file specified does not exist.")
        return

    validator = TopologyValidator(target)
    if validator.validate_topology():
        ctx.report_success("Topology file validated successfully")
        # Warnings alone do not fail validation
        if validator.result.warnings:
            ctx.report(validator.get_error_string())
    else:
        ctx.report(validator.get_error_string())
        ctx.report("Topology validation unsuccessful")
        ctx.log(f"Validation of {target} failed", "WARNING")
