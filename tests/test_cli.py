"""
Tests for the typer CLI.

Remote access is replaced by the in-memory fakes from conftest; the
commands, exit codes and prompts run for real through typer's CliRunner.
"""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import HostIdentity, PipelineStage
from remoteadmin.interface.cli.commands import dns_cli, identity_cli, pipeline_cli
from remoteadmin.interface.cli.formatters import result_formatters
from remoteadmin.interface.cli.orchestrator import app

from conftest import FakeSystemClient, RecordingEvaluator

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path


def use_client(monkeypatch, module, client):
    monkeypatch.setattr(module, "WinRMSystemClient", lambda settings=None: client)
    return client


def invoke(config_dir, *args, input=None):
    return runner.invoke(app, ["--config-dir", str(config_dir), *args], input=input)


@pytest.fixture
def wide_console(monkeypatch):
    monkeypatch.setattr(result_formatters, "console", Console(width=200))


class TestConfirmIdentityCommand:
    def test_confirmed_by_name(self, monkeypatch, config_dir):
        use_client(monkeypatch, identity_cli, FakeSystemClient())

        result = invoke(config_dir, "confirm-identity", "win10")

        assert result.exit_code == 0
        assert "WIN10" in result.output
        assert "True" in result.output

    def test_address_only_is_not_success(self, monkeypatch, config_dir):
        use_client(monkeypatch, identity_cli, FakeSystemClient())

        result = invoke(config_dir, "confirm-identity", "192.168.2.60")

        assert result.exit_code == 1
        assert "Unverified" in result.output

    def test_expected_user_mismatch(self, monkeypatch, config_dir):
        use_client(monkeypatch, identity_cli, FakeSystemClient(user="CORP\\someone"))

        result = invoke(config_dir, "confirm-identity", "WIN10", "--expected-user", "jdoe")

        assert result.exit_code == 1

    def test_expected_user_match(self, monkeypatch, config_dir):
        use_client(monkeypatch, identity_cli, FakeSystemClient())

        result = invoke(config_dir, "confirm-identity", "WIN10", "-u", "jdoe")

        assert result.exit_code == 0

    def test_connection_failure(self, monkeypatch, config_dir):
        use_client(monkeypatch, identity_cli, FakeSystemClient(failures={
            "connect": AdminError.connection("Could not connect to WIN10", detail="WinRM unreachable"),
        }))

        result = invoke(config_dir, "confirm-identity", "WIN10")

        assert result.exit_code == 1
        assert "WinRM unreachable" in result.output

    def test_missing_credential_reference(self, monkeypatch, config_dir):
        client = use_client(monkeypatch, identity_cli, FakeSystemClient())

        result = invoke(config_dir, "confirm-identity", "WIN10", "--credential", "nope")

        assert result.exit_code == 1
        assert client.calls == []

    def test_credential_reference_is_passed_to_client(self, monkeypatch, config_dir):
        (config_dir / "credentials").mkdir()
        (config_dir / "credentials" / "lab.json").write_text(
            json.dumps({"username": "LAB\\admin", "password": "pw"})
        )
        client = use_client(monkeypatch, identity_cli, FakeSystemClient())

        result = invoke(config_dir, "confirm-identity", "WIN10", "-c", "lab")

        assert result.exit_code == 0
        credentials = client.calls[0][1][1]
        assert credentials.username == "LAB\\admin"
        assert "pw" not in result.output


class TestSetDnsCommand:
    ARGS = ("set-dns", "WIN10", "-d", "192.168.1.1", "-d", "192.168.1.2", "-d", "8.8.8.8")

    def test_confirmed_change(self, monkeypatch, config_dir):
        client = use_client(monkeypatch, dns_cli, FakeSystemClient())

        result = invoke(config_dir, *self.ARGS, input="y\n")

        assert result.exit_code == 0
        assert client.dns_servers == ["192.168.1.1", "192.168.1.2", "8.8.8.8"]
        assert "reregister_dns" in client.operations

    @pytest.mark.parametrize("answer", ["n\n", "\n", "yes\n", ""])
    def test_anything_but_y_aborts(self, monkeypatch, config_dir, answer):
        client = use_client(monkeypatch, dns_cli, FakeSystemClient())

        result = invoke(config_dir, *self.ARGS, input=answer)

        assert result.exit_code == 2
        assert not client.mutated
        assert client.dns_servers == ["192.168.1.1", "192.168.2.1"]

    def test_invalid_address_fails_before_connecting(self, monkeypatch, config_dir):
        client = use_client(monkeypatch, dns_cli, FakeSystemClient())

        result = invoke(config_dir, "set-dns", "WIN10", "-d", "8.8.8.888", input="y\n")

        assert result.exit_code == 1
        assert client.calls == []

    def test_set_failure(self, monkeypatch, config_dir):
        use_client(monkeypatch, dns_cli, FakeSystemClient(failures={
            "set_dns_servers": AdminError.mutation("set failed", step="set_dns_servers", detail="Access denied"),
        }))

        result = invoke(config_dir, *self.ARGS, input="y\n")

        assert result.exit_code == 1
        assert "Access denied" in result.output

    def test_reregistration_failure(self, monkeypatch, config_dir):
        use_client(monkeypatch, dns_cli, FakeSystemClient(failures={
            "reregister_dns": AdminError.mutation("re-registration failed", step="reregister_dns"),
        }))

        result = invoke(config_dir, *self.ARGS, input="y\n")

        assert result.exit_code == 3
        assert "8.8.8.8" in result.output

    def test_prompt_shows_answer_hint(self, monkeypatch, config_dir):
        use_client(monkeypatch, dns_cli, FakeSystemClient())

        result = invoke(config_dir, *self.ARGS, input="n\n")

        assert "[y/N]" in result.output

    def test_dns_option_is_required(self, config_dir):
        result = invoke(config_dir, "set-dns", "WIN10")
        assert result.exit_code != 0


class FakeEvaluatorFactory:
    def __init__(self, evaluator):
        self.evaluator = evaluator

    def local(self, settings=None):
        return self.evaluator

    def remote(self, session, json_depth=4):
        return self.evaluator


class TestRunPipelineCommand:
    def test_batch_mode_prints_every_stage(self, monkeypatch, config_dir):
        evaluator = RecordingEvaluator()
        monkeypatch.setattr(pipeline_cli, "PowerShellStageEvaluator", FakeEvaluatorFactory(evaluator))

        result = invoke(config_dir, "run-pipeline", "Get-Alpha | Get-Beta")

        assert result.exit_code == 0
        assert "Get-Alpha>Get-Beta" in result.output
        assert len(evaluator.inputs) == 2

    def test_interactive_mode_pauses(self, monkeypatch, config_dir):
        evaluator = RecordingEvaluator()
        monkeypatch.setattr(pipeline_cli, "PowerShellStageEvaluator", FakeEvaluatorFactory(evaluator))

        result = invoke(config_dir, "run-pipeline", "--interactive", "A | B | C", input="\n\n")

        assert result.exit_code == 0
        assert "Stage 1: A" in result.output
        assert "Stage 3: C" in result.output
        assert result.output.count("Press Enter") == 2

    def test_single_stage_is_rejected(self, monkeypatch, config_dir):
        evaluator = RecordingEvaluator()
        monkeypatch.setattr(pipeline_cli, "PowerShellStageEvaluator", FakeEvaluatorFactory(evaluator))

        result = invoke(config_dir, "run-pipeline", "Get-Process")

        assert result.exit_code == 1
        assert evaluator.inputs == []

    def test_remote_session_is_closed(self, monkeypatch, config_dir):
        client = use_client(monkeypatch, pipeline_cli, FakeSystemClient())
        monkeypatch.setattr(pipeline_cli, "PowerShellStageEvaluator", FakeEvaluatorFactory(RecordingEvaluator()))

        result = invoke(config_dir, "run-pipeline", "--computer", "WIN10", "A | B")

        assert result.exit_code == 0
        assert client.sessions[0].closed

    BRACKETED = "ForEach-Object { [math]::Round($_.CPU) } | Where-Object { $_ -match '[/]' }"

    def test_bracketed_stage_text_in_batch_mode(self, monkeypatch, config_dir, wide_console):
        monkeypatch.setattr(pipeline_cli, "PowerShellStageEvaluator", FakeEvaluatorFactory(RecordingEvaluator()))

        result = invoke(config_dir, "run-pipeline", self.BRACKETED)

        assert result.exit_code == 0, result.output
        assert "[math]::Round" in result.output
        assert "'[/]'" in result.output

    def test_bracketed_stage_text_in_interactive_mode(self, monkeypatch, config_dir, wide_console):
        monkeypatch.setattr(pipeline_cli, "PowerShellStageEvaluator", FakeEvaluatorFactory(RecordingEvaluator()))

        result = invoke(config_dir, "run-pipeline", "--interactive", self.BRACKETED, input="\n")

        assert result.exit_code == 0, result.output
        assert "Stage 1: ForEach-Object { [math]::Round($_.CPU) }" in result.output
        assert "Stage 2: Where-Object { $_ -match '[/]' }" in result.output

    def test_failing_stage(self, monkeypatch, config_dir):
        monkeypatch.setattr(
            pipeline_cli, "PowerShellStageEvaluator", FakeEvaluatorFactory(RecordingEvaluator(fail_on="B"))
        )

        result = invoke(config_dir, "run-pipeline", "A | B | C")

        assert result.exit_code == 1
        assert "boom" in result.output


def test_invalid_settings_file(config_dir):
    (config_dir / "remoteadmin.json").write_text("{broken")

    result = invoke(config_dir, "confirm-identity", "WIN10")

    assert result.exit_code == 1


class TestResultFormatters:
    """Operator and host text is printed literally, never as markup."""

    @pytest.fixture
    def recorded(self, monkeypatch):
        console = Console(record=True, width=200)
        monkeypatch.setattr(result_formatters, "console", console)
        return console

    def test_stage_table(self, recorded):
        result_formatters.PipelineFormatter().display_stages([
            PipelineStage(index=1, source_text="ForEach-Object { [math]::Round($_.CPU) }", result=1),
            PipelineStage(index=2, source_text="Where-Object { $_ -match '[/]' }", result=None),
        ])

        text = recorded.export_text()
        assert "ForEach-Object { [math]::Round($_.CPU) }" in text
        assert "Where-Object { $_ -match '[/]' }" in text

    def test_error_panel(self, recorded):
        error = AdminError.query(
            "Stage '[string]$x' failed", step="evaluate_stage", detail="Unexpected token '[/b]'"
        )

        result_formatters.display_error(error.to_record())

        text = recorded.export_text()
        assert "Stage '[string]$x' failed" in text
        assert "Unexpected token '[/b]'" in text

    def test_host_panel(self, recorded):
        identity = HostIdentity(
            requested_id="[lab]win10",
            resolved_name="WIN10",
            resolved_address="192.168.2.60",
            logged_on_user="CORP\\[svc]",
        )

        result_formatters.display_host(identity, ["8.8.8.8"])

        text = recorded.export_text()
        assert "[lab]win10" in text
        assert "CORP\\[svc]" in text
