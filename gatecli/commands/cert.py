"""create-cert command"""

from gatecli.commands.common import keystore_guard
from gatecli.constants import (
    GATEWAY_CREDENTIAL_STORE_NAME,
    GATEWAY_IDENTITY_ALIAS,
    GATEWAY_IDENTITY_PASSPHRASE,
)
from gatecli.context import CommandContext
from gatecli.models.commands import CreateCertificate


def execute(command: CreateCertificate, ctx: CommandContext) -> None:
    """
    Create the gateway identity certificate.

    Ensures the gateway credential store and identity keystore exist, then
    writes a self-signed certificate protected by the identity passphrase
    alias, or the master secret when that alias is not set.
    """
    keystore = ctx.services.keystore_service
    aliases = ctx.services.alias_service

    with keystore_guard(ctx):
        if not keystore.is_credential_store_for_cluster_available(GATEWAY_CREDENTIAL_STORE_NAME):
            ctx.log("Creating credential store for the gateway")
            keystore.create_credential_store_for_cluster(GATEWAY_CREDENTIAL_STORE_NAME)

    with keystore_guard(ctx):
        if not keystore.is_keystore_for_gateway_available():
            ctx.log("Creating keystore for the gateway")
            keystore.create_keystore_for_gateway()

        passphrase = aliases.get_password_from_alias_for_cluster(
            GATEWAY_CREDENTIAL_STORE_NAME, GATEWAY_IDENTITY_PASSPHRASE
        )
        if passphrase is None:
            passphrase = ctx.services.master_service.get_master_secret()

        keystore.add_self_signed_cert_for_gateway(
            GATEWAY_IDENTITY_ALIAS,
            passphrase,
            ctx.options.hostname or ctx.config.hostname,
        )

    ctx.report(f"Certificate {GATEWAY_IDENTITY_ALIAS} has been successfully created.")
