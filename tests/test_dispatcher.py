"""Tests for dispatch, exit codes and the secret commands."""

from rich.console import Console

from gatecli import __build__, __version__
from gatecli.constants import (
    EXIT_INTERRUPTED,
    EXIT_INVALID_COMMAND,
    EXIT_OK,
    EXIT_UNEXPECTED,
    EXIT_USAGE,
    GATEWAY_IDENTITY_ALIAS,
    GATEWAY_IDENTITY_PASSPHRASE,
)
from gatecli.dispatcher import GatewayCli
from gatecli.exceptions import KeystoreError
from gatecli.usage import USAGE_PREFIX
from tests.conftest import InMemoryCredentialSource


class TestExitCodes:
    def test_usage_on_empty_argv(self, make_cli, output):
        assert make_cli().run([]) == EXIT_USAGE
        text = output.getvalue()
        assert USAGE_PREFIX in text
        assert "auth-test [--cluster clustername]" in text

    def test_command_usage_on_help(self, make_cli, output):
        assert make_cli().run(["create-master", "--help"]) == EXIT_USAGE
        assert "create-master [--force]:" in output.getvalue()

    def test_unrecognized(self, make_cli, output):
        assert make_cli().run(["--d"]) == EXIT_INVALID_COMMAND
        assert output.getvalue().splitlines() == [
            "ERROR: Invalid Command",
            "Unrecognized option:--d",
            "A fatal exception has occurred. Program will exit.",
        ]

    def test_usage_never_reaches_services(self, make_cli, alias_service):
        assert make_cli().run(["create-alias", "--value", "x"]) == EXIT_USAGE
        alias_service.add_alias_for_cluster.assert_not_called()

    def test_unexpected_error_prints_trace(self, make_cli, err_output, alias_service):
        alias_service.get_aliases_for_cluster.side_effect = RuntimeError("boom")
        assert make_cli().run(["list-alias"]) == EXIT_UNEXPECTED
        assert "RuntimeError: boom" in err_output.getvalue()
        assert "Traceback" in err_output.getvalue()

    def test_keyboard_interrupt(self, make_cli, alias_service):
        alias_service.get_aliases_for_cluster.side_effect = KeyboardInterrupt
        assert make_cli().run(["list-alias"]) == EXIT_INTERRUPTED

    def test_service_lifecycle_error_keeps_exit_code(self, make_cli, output, alias_service):
        alias_service.get_aliases_for_cluster.side_effect = KeystoreError("bad tag")
        assert make_cli().run(["list-alias"]) == EXIT_OK
        text = output.getvalue()
        assert "ERROR: Internal Error: Please refer to the gatecli log file for details." in text
        assert "Keystore was not loaded properly" in text

    def test_writes_log_file(self, make_cli, gateway_config):
        make_cli().run(["version"])
        logs = list(gateway_config.log_dir.glob("*/*_version.log"))
        assert len(logs) == 1
        assert "Operation: version" in logs[0].read_text()


class TestVersion:
    def test_version(self, make_cli, output):
        assert make_cli().run(["version"]) == EXIT_OK
        assert output.getvalue().strip() == f"Gateway CLI: {__version__} ({__build__})"


class TestCreateAlias:
    def test_create_with_value(self, make_cli, output, alias_service):
        code = make_cli().run(["create-alias", "db-pass", "--cluster", "sales", "--value", "s3cr3t"])
        assert code == EXIT_OK
        alias_service.add_alias_for_cluster.assert_called_once_with("sales", "db-pass", "s3cr3t")
        assert "db-pass has been successfully created." in output.getvalue()

    def test_create_defaults_to_gateway_cluster(self, make_cli, alias_service):
        make_cli().run(["create-alias", "db-pass", "--value", "s3cr3t"])
        alias_service.add_alias_for_cluster.assert_called_once_with("__gateway", "db-pass", "s3cr3t")

    def test_generate(self, make_cli, output, alias_service):
        assert make_cli().run(["create-alias", "db-pass", "--generate"]) == EXIT_OK
        alias_service.generate_alias_for_cluster.assert_called_once_with("__gateway", "db-pass")
        assert "db-pass has been successfully generated." in output.getvalue()

    def test_no_value_is_unexpected(self, make_cli, err_output, alias_service):
        assert make_cli().run(["create-alias", "db-pass"]) == EXIT_UNEXPECTED
        assert "No value has been set. Consider setting --generate or --value." in err_output.getvalue()
        alias_service.add_alias_for_cluster.assert_not_called()


class TestDeleteAndListAliases:
    def test_delete(self, make_cli, output, alias_service):
        assert make_cli().run(["delete-alias", "db-pass", "--cluster", "sales"]) == EXIT_OK
        alias_service.remove_alias_for_cluster.assert_called_once_with("sales", "db-pass")
        assert "db-pass has been successfully deleted." in output.getvalue()

    def test_delete_unknown_cluster(self, make_cli, output, keystore_service, alias_service):
        keystore_service.is_credential_store_for_cluster_available.return_value = False
        make_cli().run(["delete-alias", "db-pass", "--cluster", "nope"])
        assert "Invalid cluster name provided: nope" in output.getvalue()
        alias_service.remove_alias_for_cluster.assert_not_called()

    def test_list(self, make_cli, output, alias_service):
        alias_service.get_aliases_for_cluster.return_value = ["a", "b"]
        make_cli().run(["list-alias", "--cluster", "sales"])
        assert output.getvalue().splitlines() == [
            "Listing aliases for: sales",
            "a",
            "b",
            "",
            "2 items.",
        ]

    def test_list_unknown_cluster(self, make_cli, output, keystore_service):
        keystore_service.is_credential_store_for_cluster_available.return_value = False
        make_cli().run(["list-alias"])
        assert "Invalid cluster name provided: __gateway" in output.getvalue()


class TestCreateMaster:
    def test_existing_master_without_force(self, make_cli, output, gateway_config, master_service):
        gateway_config.security_dir.mkdir(parents=True)
        gateway_config.master_file.write_text("existing")

        assert make_cli().run(["create-master"]) == EXIT_INVALID_COMMAND
        assert "Master secret is already present on disk." in output.getvalue()
        assert gateway_config.master_file.exists()

    def test_existing_master_with_force_is_deleted(self, make_cli, output, gateway_config):
        gateway_config.security_dir.mkdir(parents=True)
        gateway_config.master_file.write_text("existing")

        assert make_cli().run(["create-master", "--force"]) == EXIT_OK
        assert not gateway_config.master_file.exists()
        assert "Master secret has been persisted to disk." in output.getvalue()

    def test_persists_new_master(self, gateway_config, output, err_output):
        cli = GatewayCli(
            config=gateway_config,
            console=Console(file=output, width=200),
            err_console=Console(file=err_output, width=200),
            credential_source=InMemoryCredentialSource(),
        )
        assert cli.run(["create-master", "--value", "s3cr3t"]) == EXIT_OK
        assert gateway_config.master_file.exists()
        assert cli.services.master_service.get_master_secret() == "s3cr3t"


class TestCreateCert:
    def test_uses_passphrase_alias(self, make_cli, output, alias_service, keystore_service):
        alias_service.get_password_from_alias_for_cluster.return_value = "phrase"
        keystore_service.is_keystore_for_gateway_available.return_value = False

        assert make_cli().run(["create-cert", "--hostname", "gw.example.com"]) == EXIT_OK
        alias_service.get_password_from_alias_for_cluster.assert_called_once_with(
            "__gateway", GATEWAY_IDENTITY_PASSPHRASE
        )
        keystore_service.create_keystore_for_gateway.assert_called_once_with()
        keystore_service.add_self_signed_cert_for_gateway.assert_called_once_with(
            GATEWAY_IDENTITY_ALIAS, "phrase", "gw.example.com"
        )
        assert "Certificate gateway-identity has been successfully created." in output.getvalue()

    def test_falls_back_to_master_secret(self, make_cli, keystore_service, gateway_config):
        make_cli().run(["create-cert"])
        keystore_service.add_self_signed_cert_for_gateway.assert_called_once_with(
            GATEWAY_IDENTITY_ALIAS, "master-secret", gateway_config.hostname
        )

    def test_creates_gateway_credential_store(self, make_cli, keystore_service):
        keystore_service.is_credential_store_for_cluster_available.return_value = False
        make_cli().run(["create-cert"])
        keystore_service.create_credential_store_for_cluster.assert_called_once_with("__gateway")

    def test_keystore_failure(self, make_cli, output, keystore_service):
        keystore_service.add_self_signed_cert_for_gateway.side_effect = KeystoreError("locked")
        assert make_cli().run(["create-cert"]) == EXIT_OK
        assert "Keystore was not loaded properly" in output.getvalue()


class TestTopologyCommands:
    def test_redeploy_named(self, make_cli, topology_service):
        make_cli().run(["redeploy", "--cluster", "sales"])
        assert topology_service.reloads == 1
        assert topology_service.redeployed == ["sales"]

    def test_redeploy_unknown(self, make_cli, output, topology_service):
        make_cli().run(["redeploy", "--cluster", "nope"])
        assert "Invalid cluster name provided. Nothing to redeploy." in output.getvalue()
        assert topology_service.redeployed == []

    def test_redeploy_all(self, make_cli, topology_service):
        make_cli().run(["redeploy"])
        assert topology_service.redeployed == [None]

    def test_list_topologies(self, make_cli, output, gateway_config):
        gateway_config.topologies_dir.mkdir(parents=True)
        make_cli().run(["list-topologies"])
        assert output.getvalue().splitlines() == [
            "List of files available in the topologies directory",
            str(gateway_config.topologies_dir),
            "sales",
        ]

    def test_list_topologies_missing_dir(self, make_cli, output):
        make_cli().run(["list-topologies"])
        assert "ERR: Topologies directory does not exist." in output.getvalue()

    def test_validate_missing_file(self, make_cli, output):
        make_cli().run(["validate-topology", "--cluster", "nope"])
        assert "The topology file specified does not exist." in output.getvalue()

    def test_validate_path(self, make_cli, output, tmp_path):
        path = tmp_path / "sales.yml"
        path.write_text(
            "gateway:\n"
            "  providers:\n"
            "    - role: authentication\n"
            "      name: ShiroProvider\n"
            "      enabled: true\n"
            "services:\n"
            "  - role: WEBHDFS\n"
            "    url: http://localhost:50070/webhdfs\n"
        )
        make_cli().run(["validate-topology", "--path", str(path)])
        text = output.getvalue()
        assert str(path) in text
        assert "Topology file validated successfully" in text

    def test_validate_path_invalid(self, make_cli, output, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("services: []\n")
        make_cli().run(["validate-topology", "--path", str(path)])
        text = output.getvalue()
        assert "Error: Missing required element: 'gateway'" in text
        assert "Topology validation unsuccessful" in text

    def test_validate_lists_without_target(self, make_cli, output, gateway_config):
        gateway_config.topologies_dir.mkdir(parents=True)
        make_cli().run(["validate-topology", "--d"])
        assert output.getvalue().splitlines()[-1] == "sales"

    def test_validate_without_topologies_dir(self, make_cli, output):
        make_cli().run(["validate-topology", "--d"])
        assert "Could not locate topologies directory" in output.getvalue()
