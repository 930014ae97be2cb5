"""Tests for CLI module - value parsing and command structure."""

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from pyopto22.cli import (
    app,
    format_poll_value,
    format_value,
    parse_bool,
    parse_int,
    parse_value,
)
from pyopto22.errors import ReadOnlyError, RemoteError, UnknownVariableError
from pyopto22.types import Category, DeviceInfo, StrategyInfo

runner = CliRunner()

CONN = ["--host", "10.0.0.5", "--username", "admin", "--password", "secret"]


# ============================================================================
# Value Parsing Tests
# ============================================================================


class TestParseBool:
    """Test boolean value parsing."""

    def test_true_variants(self) -> None:
        for val in ["true", "True", "TRUE", "1", "on", "ON", "yes", "YES"]:
            assert parse_bool(val) is True

    def test_false_variants(self) -> None:
        for val in ["false", "False", "FALSE", "0", "off", "OFF", "no", "NO"]:
            assert parse_bool(val) is False

    def test_invalid_values(self) -> None:
        with pytest.raises(ValueError, match="Invalid boolean value"):
            parse_bool("maybe")
        with pytest.raises(ValueError):
            parse_bool("")


class TestParseInt:
    """Test integer value parsing."""

    def test_decimal(self) -> None:
        assert parse_int("0") == 0
        assert parse_int("-100") == -100
        assert parse_int("  1234  ") == 1234

    def test_hexadecimal(self) -> None:
        assert parse_int("0xFF") == 255
        assert parse_int("0x7FFFFFFF") == 2**31 - 1

    def test_range_validation(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            parse_int("2147483648")
        with pytest.raises(ValueError, match="out of range"):
            parse_int("-2147483649")

    def test_invalid_values(self) -> None:
        with pytest.raises(ValueError):
            parse_int("abc")
        with pytest.raises(ValueError):
            parse_int("12.34")


class TestParseValue:
    """Test category-driven value parsing."""

    def test_scalars(self) -> None:
        assert parse_value(Category.BOOLEAN, "on") is True
        assert parse_value(Category.DIGITAL_OUTPUT, "false") is False
        assert parse_value(Category.INTEGER, "0x10") == 16
        assert parse_value(Category.FLOAT, "2.5") == 2.5
        assert parse_value(Category.STRING, "hello world") == "hello world"

    def test_tables(self) -> None:
        assert parse_value(Category.INTEGER_TABLE, "[1, 2, 3]") == [1, 2, 3]
        assert parse_value(Category.BOOLEAN_TABLE, "[true, false]") == [True, False]

    def test_table_requires_json_array(self) -> None:
        with pytest.raises(ValueError, match="JSON array"):
            parse_value(Category.INTEGER_TABLE, "1,2,3")
        with pytest.raises(ValueError, match="JSON array"):
            parse_value(Category.INTEGER_TABLE, '{"a": 1}')


class TestFormatValue:
    """Test value formatting for display."""

    def test_formatting(self) -> None:
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(1234) == "1234"
        assert format_value([1, 2]) == "[1, 2]"
        assert format_value("idle") == "idle"

    def test_poll_formatting(self) -> None:
        assert format_poll_value(72.5) == "72.50"
        assert format_poll_value(12) == "12"
        assert format_poll_value(True) == "true"


# ============================================================================
# Command Structure Tests (with mocked controller)
# ============================================================================


def _mock_controller(mock_class: MagicMock) -> MagicMock:
    mock_client = MagicMock()
    mock_class.return_value = mock_client
    mock_client.__enter__.return_value = mock_client
    return mock_client


@patch("pyopto22.cli.PACController")
def test_ping_command(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.category_map.device_path = "/api/v1/device"

    result = runner.invoke(app, ["ping", *CONN])

    assert result.exit_code == 0
    assert "OK: Connected to 10.0.0.5" in result.stdout
    mock_client.get_json.assert_called_once_with("/api/v1/device")


@patch("pyopto22.cli.PACController")
def test_ping_remote_error(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.get_json.side_effect = RemoteError("GET", "http://10.0.0.5/api/v1/device", status=401)

    result = runner.invoke(app, ["ping", *CONN])

    assert result.exit_code == 3


def test_ping_requires_host() -> None:
    result = runner.invoke(app, ["ping"], env={"OPTO22_HOST": ""})
    assert result.exit_code == 2


def test_ping_blank_credentials() -> None:
    result = runner.invoke(app, ["ping", "--host", "10.0.0.5"], env={"OPTO22_USERNAME": "", "OPTO22_PASSWORD": ""})
    assert result.exit_code == 2


def test_info_command_local() -> None:
    result = runner.invoke(app, ["info"], env={"OPTO22_HOST": ""})

    assert result.exit_code == 0
    assert "version:" in result.stdout.lower()
    assert "profile:" in result.stdout.lower()


@patch("pyopto22.cli.PACController")
def test_info_command_json_with_device(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.device_info = DeviceInfo("SNAP-PAC-R1", "R10.3b", None, "m1", "m2", 10)
    mock_client.strategy_info = StrategyInfo("Plating", None, "0x1", 6)

    result = runner.invoke(app, ["info", *CONN, "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["profile"] == "snap-pac"
    assert data["device"]["controller_type"] == "SNAP-PAC-R1"
    assert data["strategy"]["running_charts"] == 6
    mock_client.load_device_info.assert_called_once()


@patch("pyopto22.cli.PACController")
def test_read_command(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.get.return_value = 1234

    result = runner.invoke(app, ["read", "iCount", *CONN])

    assert result.exit_code == 0
    assert "1234" in result.stdout
    mock_client.get.assert_called_once_with("iCount")


@patch("pyopto22.cli.PACController")
def test_read_command_json_table(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    table = MagicMock()
    table.to_list.return_value = [1, 9, 3]
    mock_client.get.return_value = table

    result = runner.invoke(app, ["read", "itCounts", *CONN, "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {"name": "itCounts", "value": [1, 9, 3]}


@patch("pyopto22.cli.PACController")
def test_read_unknown_variable(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.get.side_effect = UnknownVariableError("iMissing", Category.INTEGER)

    result = runner.invoke(app, ["read", "iMissing", *CONN])

    assert result.exit_code == 2


@patch("pyopto22.cli.PACController")
def test_write_command_bool(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)

    result = runner.invoke(app, ["write", "bReady", "true", *CONN])

    assert result.exit_code == 0
    assert "OK: Wrote bReady = true" in result.stdout
    mock_client.set.assert_called_once_with("bReady", True)


@patch("pyopto22.cli.PACController")
def test_write_command_int(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)

    result = runner.invoke(app, ["write", "iCount", "1234", *CONN])

    assert result.exit_code == 0
    mock_client.set.assert_called_once_with("iCount", 1234)


@patch("pyopto22.cli.PACController")
def test_write_command_table(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)

    result = runner.invoke(app, ["write", "ftSetpoints", "[1.5, 2]", *CONN])

    assert result.exit_code == 0
    mock_client.set.assert_called_once_with("ftSetpoints", [1.5, 2])


@patch("pyopto22.cli.PACController")
def test_write_command_negative(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)

    # Use -- so -100 is not parsed as an option
    result = runner.invoke(app, ["write", *CONN, "iCount", "--", "-100"])

    assert result.exit_code == 0
    mock_client.set.assert_called_once_with("iCount", -100)


@patch("pyopto22.cli.PACController")
def test_write_invalid_value(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)

    result = runner.invoke(app, ["write", "iCount", "lots", *CONN])

    assert result.exit_code == 2
    mock_client.set.assert_not_called()


@patch("pyopto22.cli.PACController")
def test_write_read_only(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.set.side_effect = ReadOnlyError("aiTemperature", Category.ANALOG_INPUT)

    result = runner.invoke(app, ["write", "aiTemperature", "1.0", *CONN])

    assert result.exit_code == 2


@patch("pyopto22.cli.PACController")
def test_write_remote_error(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.set.side_effect = RemoteError("POST", "http://10.0.0.5/x", status=400)

    result = runner.invoke(app, ["write", "iCount", "3", *CONN])

    assert result.exit_code == 3


def test_write_unknown_prefix() -> None:
    result = runner.invoke(app, ["write", "zCount", "3", *CONN])
    assert result.exit_code == 2


def test_explain_command() -> None:
    result = runner.invoke(app, ["explain", "aoValve"])

    assert result.exit_code == 0
    assert "Prefix:      ao" in result.stdout
    assert "analog_output" in result.stdout
    assert "/api/v1/device/strategy/ios/analogOutputs/aoValve/eu" in result.stdout


def test_explain_command_json() -> None:
    result = runner.invoke(app, ["explain", "btFlags", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["category"] == "boolean_table"
    assert data["base_type"] == "boolean"
    assert data["table"] is True
    assert data["read_path"] == "/api/v1/device/strategy/tables/int32s/btFlags"


def test_explain_no_prefix() -> None:
    result = runner.invoke(app, ["explain", "Count"])
    assert result.exit_code == 2


@patch("pyopto22.cli.PACController")
def test_read_many_command(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.read_many.return_value = {"iCount": 1234, "bReady": True}

    result = runner.invoke(app, ["read-many", "iCount", "bReady", *CONN])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["iCount"] == 1234
    assert data["bReady"] is True
    mock_client.read_many.assert_called_once_with(["iCount", "bReady"])


@patch("pyopto22.cli.PACController")
def test_read_many_partial(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)

    def fake_get(name: str):
        if name == "iMissing":
            raise UnknownVariableError(name, Category.INTEGER)
        return 7

    mock_client.get.side_effect = fake_get

    result = runner.invoke(app, ["read-many", "iCount", "iMissing", *CONN, "--partial"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["values"] == {"iCount": 7}
    assert "iMissing" in data["errors"]


@patch("pyopto22.cli.PACController")
def test_poll_command_once(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.read_many.return_value = {"iCount": 1234}

    result = runner.invoke(app, ["poll", "iCount", *CONN, "--once"])

    assert result.exit_code == 0
    assert "iCount=1234" in result.stdout
    mock_client.clear_cache.assert_called_once()
    mock_client.read_many.assert_called_once_with(["iCount"])


@patch("pyopto22.cli.PACController")
def test_poll_command_json_once(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.read_many.return_value = {"iCount": 1234}

    result = runner.invoke(app, ["poll", "iCount", *CONN, "--once", "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert "timestamp" in data
    assert data["values"]["iCount"] == 1234


@patch("pyopto22.cli.PACController")
def test_poll_command_csv_once(mock_class: MagicMock) -> None:
    mock_client = _mock_controller(mock_class)
    mock_client.read_many.return_value = {"iCount": 1234, "bReady": True}

    result = runner.invoke(app, ["poll", "iCount", "bReady", *CONN, "--once", "--format", "csv"])

    assert result.exit_code == 0
    lines = result.stdout.strip().split("\n")
    assert len(lines) == 2  # header + data
    assert lines[0] == "timestamp,iCount,bReady"
    assert lines[1].endswith(",1234,true")


def test_command_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("ping", "info", "read", "write", "explain", "read-many", "poll"):
        assert command in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "pyopto22" in result.stdout


def test_poll_invalid_interval() -> None:
    result = runner.invoke(app, ["poll", "iCount", *CONN, "--interval", "0"])
    assert result.exit_code == 2
    assert "Interval must be positive" in (result.stderr or result.stdout or "")


def test_poll_invalid_format() -> None:
    result = runner.invoke(app, ["poll", "iCount", *CONN, "--format", "xml"])
    assert result.exit_code == 2
    assert "Invalid format" in (result.stderr or result.stdout or "")
