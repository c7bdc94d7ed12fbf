"""Shared helpers for command handlers"""

from contextlib import contextmanager
from typing import Iterator

from gatecli.context import CommandContext
from gatecli.exceptions import KeystoreError, ServiceLifecycleError

KEYSTORE_NOT_LOADED = (
    "Keystore was not loaded properly - the provided (or persisted) master "
    "secret may not match the password for the keystore."
)


def always_valid(command, ctx: CommandContext) -> bool:
    return True


@contextmanager
def keystore_guard(ctx: CommandContext) -> Iterator[None]:
    """Surface keystore failures as a service lifecycle error."""
    try:
        yield
    except KeystoreError as e:
        ctx.log(e.format_message(), "ERROR")
        raise ServiceLifecycleError(KEYSTORE_NOT_LOADED, context=e.message) from e
