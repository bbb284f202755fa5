import json
import pytest
import respx
from httpx import Response
from typer.testing import CliRunner
from ota_cli.cli import app

DEVICES = {"values": [{"uuid": "7c2f1e3a-4b5d-4e6f-8a9b-0c1d2e3f4a5b", "deviceName": "car-1",
                       "deviceId": "VIN1", "deviceType": "Vehicle", "deviceStatus": "UpToDate"}]}


@pytest.fixture
def runner():
    return CliRunner()


def test_init_then_config_on_disk(runner, tmp_path, oauth_zip):
    conf = tmp_path / "ota.conf"
    result = runner.invoke(app, [
        "--config", str(conf), "init",
        "--credentials", str(oauth_zip),
        "--campaigner", "https://campaigner.example.com",
        "--director", "https://director.example.com",
        "--registry", "https://registry.example.com",
    ])
    assert result.exit_code == 0, result.output
    data = json.loads(conf.read_text())
    assert data["reposerver"] == "https://repo.example.com/"
    assert "token" not in data


@respx.mock
def test_device_list_table_case_insensitive(runner, store, saved_config):
    respx.get("https://registry.example.com/api/v1/devices").mock(return_value=Response(200, json=DEVICES))
    result = runner.invoke(app, ["--config", str(store.path), "DEVICE", "LIST", "--all", "--table"])
    assert result.exit_code == 0, result.output
    assert "car-1" in result.output
    assert "UpToDate" in result.output


@respx.mock
def test_device_list_raw_by_default(runner, store, saved_config):
    route = respx.get("https://registry.example.com/api/v1/devices").mock(return_value=Response(200, json=DEVICES))
    result = runner.invoke(app, ["--config", str(store.path), "device", "list", "--all"])
    assert result.exit_code == 0, result.output
    assert route.calls.last.response.content.decode() in result.output


def test_missing_config_reports_hint(runner, tmp_path):
    result = runner.invoke(app, ["--config", str(tmp_path / "none.conf"), "device", "list", "--all"])
    assert result.exit_code == 1
    assert "Please run `ota init` first." in result.output


def test_usage_error_before_network(runner, store, saved_config):
    result = runner.invoke(app, ["--config", str(store.path), "device", "create", "--name", "car", "--id", "VIN1"])
    assert result.exit_code == 1
    assert "Either --vehicle or --other flag is required" in result.output


def test_unknown_subcommand(runner, store, saved_config):
    result = runner.invoke(app, ["--config", str(store.path), "device", "frobnicate"])
    assert result.exit_code != 0


@respx.mock
def test_error_response_sets_exit_code(runner, store, saved_config):
    respx.delete("https://registry.example.com/api/v1/devices/7c2f1e3a-4b5d-4e6f-8a9b-0c1d2e3f4a5b").mock(
        return_value=Response(404, json={"code": "missing_device"})
    )
    result = runner.invoke(app, ["--config", str(store.path), "device", "delete",
                                 "--device", "7c2f1e3a-4b5d-4e6f-8a9b-0c1d2e3f4a5b"])
    assert result.exit_code == 1
    assert "missing_device" in result.output


def test_bad_log_level(runner, store, saved_config):
    result = runner.invoke(app, ["--log-level", "chatty", "--config", str(store.path), "package", "list"])
    assert result.exit_code == 2


def test_unreadable_packages_file_reports_error(runner, store, saved_config, tmp_path):
    packages = tmp_path / "packages.toml"
    packages.write_bytes(b"[foo.1]\nformat = \"\xff\"\n")
    result = runner.invoke(app, ["--config", str(store.path), "package", "upload", "--packages", str(packages)])
    assert result.exit_code == 1
    assert "Parse error" in result.output
    assert "not valid UTF-8" in result.output
