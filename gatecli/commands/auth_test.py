"""
auth-test command

Materializes the topology's Shiro configuration, authenticates a user
against the LDAP realm it describes and reports the user's groups or
what is missing for group lookup.
"""

import shutil
from pathlib import Path
from typing import Optional

from ldap3.core.exceptions import LDAPException

from gatecli.checklist import report_missing_params
from gatecli.constants import AUTHENTICATION_ROLE, SHIRO_CONFIG_PATH, SHIRO_PROVIDER_NAME
from gatecli.context import CommandContext
from gatecli.credentials import resolve_credentials
from gatecli.exceptions import GatewayCliError
from gatecli.models.commands import AuthTest
from gatecli.models.results import AuthOutcome, AuthStatus
from gatecli.models.topology import Provider, Topology


def execute(command: AuthTest, ctx: CommandContext) -> None:
    """
    Run the LDAP authentication diagnostic for the effective cluster.

    Every failure ends this command with a diagnostic line; none of them
    propagate to the dispatcher.
    """
    cluster = ctx.options.effective_cluster
    topologies = ctx.services.topology_service

    topologies.reload_topologies()
    topology = topologies.get_topology(cluster)
    if topology is None:
        ctx.report_error(f"Topology: {cluster} does not exist")
        return

    provider = topology.get_provider(AUTHENTICATION_ROLE, SHIRO_PROVIDER_NAME)
    if provider is None:
        ctx.report_error("This tool currently only works with shiro as the authentication provider.")
        ctx.report_error(
            f'Please update the topology to use "{SHIRO_PROVIDER_NAME}" as the authentication provider.'
        )
        return

    username, password = resolve_credentials(ctx.options, ctx.credential_source)
    if username is None or password is None:
        ctx.log("Credentials incomplete, not attempting authentication", "WARNING")
        return

    deployment_dir: Optional[Path] = None
    try:
        deployment_dir = ctx.materializer.create_deployment(topology, ctx.config.temp_dir)
        config_file = deployment_dir / SHIRO_CONFIG_PATH
        if not config_file.is_file():
            ctx.report_error("No shiro config file found.")
            return

        def resolve_alias(alias: str) -> Optional[str]:
            return ctx.services.alias_service.get_password_from_alias_for_cluster(
                topology.name, alias
            )

        with ctx.auth_driver.session(config_file, username, password, resolve_alias) as outcome:
            _report_outcome(ctx, outcome, username, topology, provider)
    except (GatewayCliError, OSError, LDAPException) as e:
        ctx.log(f"auth-test failed: {e}", "ERROR")
        ctx.report_error(str(e))
    finally:
        if deployment_dir is not None:
            _remove_deployment(ctx, deployment_dir)


def _report_outcome(
    ctx: CommandContext,
    outcome: AuthOutcome,
    username: str,
    topology: Topology,
    provider: Provider,
) -> None:
    if outcome.status == AuthStatus.AUTHENTICATED:
        ctx.report_success("LDAP authentication successful!")
        _report_groups(ctx, outcome, username, provider)
        return

    if outcome.status == AuthStatus.FAILED:
        ctx.report(outcome.reason)
        if outcome.cause:
            ctx.report(outcome.cause)
        if ctx.options.debug and outcome.trace:
            ctx.report_trace(outcome.trace)
        else:
            ctx.report("For more info, use --d for debug output.")
    else:
        ctx.report(outcome.reason)

    ctx.report_error(f"Unable to authenticate user: {username}")
    ctx.log(f"Authentication against topology {topology.name} did not succeed", "WARNING")


def _report_groups(
    ctx: CommandContext, outcome: AuthOutcome, username: str, provider: Provider
) -> None:
    if outcome.groups:
        for group in sorted(outcome.groups):
            ctx.report(f"{username} is a member of: {group}")
        return

    ctx.report(f"{username} does not belong to any groups")
    if not ctx.options.list_groups:
        return

    ctx.report("You were looking for this user's groups but this user does not belong to any.")
    ctx.report("Your topology file may be incorrectly configured for group lookup.")
    if outcome.groups is None:
        ctx.report("Group lookup did not run: authorization is not enabled for the realm.")
    if not report_missing_params(provider.params, ctx.report):
        ctx.report(
            "Some of your topology's param values may be incorrect. "
            "See the gateway documentation for help."
        )


def _remove_deployment(ctx: CommandContext, deployment_dir: Path) -> None:
    try:
        shutil.rmtree(deployment_dir)
        ctx.log(f"Removed temporary deployment {deployment_dir}")
    except OSError as e:
        ctx.report(str(e))
        ctx.report_error("Error when attempting to delete temp deployment.")
