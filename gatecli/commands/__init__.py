"""
Command handlers

One (validate, execute) pair per command type, looked up by the
dispatcher in a single table.
"""

from typing import Callable, Dict, NamedTuple, Type

from gatecli.commands import alias, auth_test, cert, master, topology, version
from gatecli.commands.common import always_valid
from gatecli.models.commands import (
    AuthTest,
    CreateAlias,
    CreateCertificate,
    CreateMasterSecret,
    DeleteAlias,
    ListAliases,
    ListTopologies,
    Redeploy,
    ShowVersion,
    ValidateTopology,
)


class CommandHandler(NamedTuple):
    validate: Callable
    execute: Callable


COMMAND_HANDLERS: Dict[Type, CommandHandler] = {
    ShowVersion: CommandHandler(always_valid, version.execute),
    CreateMasterSecret: CommandHandler(master.validate, master.execute),
    CreateCertificate: CommandHandler(always_valid, cert.execute),
    CreateAlias: CommandHandler(always_valid, alias.create),
    DeleteAlias: CommandHandler(always_valid, alias.delete),
    ListAliases: CommandHandler(always_valid, alias.list_aliases),
    Redeploy: CommandHandler(always_valid, topology.redeploy),
    ListTopologies: CommandHandler(always_valid, topology.list_topologies),
    ValidateTopology: CommandHandler(always_valid, topology.validate_topology),
    AuthTest: CommandHandler(always_valid, auth_test.execute),
}

__all__ = ["CommandHandler", "COMMAND_HANDLERS"]
