"""Unit tests for the incell CLI using click's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from click.testing import CliRunner

from incell.cli.main import cli
from incell.parameters.template import EXPORT_TEMPLATE
from incell.parameters.workbook import read_parameters


class TestTemplate:
    def test_lists_every_row(self):
        result = CliRunner().invoke(cli, ["template"])

        assert result.exit_code == 0
        for row in EXPORT_TEMPLATE:
            assert row.name in result.output


class TestPorts:
    def test_lists_ports(self):
        fake = [SimpleNamespace(device="/dev/ttyUSB0", description="CP2102", hwid="")]
        with patch("incell.device.manager.comports", return_value=fake):
            result = CliRunner().invoke(cli, ["ports"])

        assert result.exit_code == 0
        assert "/dev/ttyUSB0" in result.output
        assert "CP2102" in result.output

    def test_no_ports(self):
        with patch("incell.device.manager.comports", return_value=[]):
            result = CliRunner().invoke(cli, ["ports"])

        assert result.exit_code == 0
        assert "No serial ports found." in result.output


class TestExportImport:
    def test_export_then_import(self, tmp_path: Path):
        params = tmp_path / "params.json"
        params.write_text(json.dumps({"VDD Voltage": 3.3, "I2C Address": "0x5D"}))
        output = tmp_path / "AB12.xlsx"

        result = CliRunner().invoke(
            cli, ["export", str(params), "--model", "AB12", "--output", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert f"Wrote {output}" in result.output
        assert read_parameters(output)["VDD Voltage"] == 3.3

        result = CliRunner().invoke(cli, ["import", str(output)])
        assert result.exit_code == 0, result.output
        assert '"VDD Voltage": 3.3' in result.output
        assert '"I2C Address": "0x5D"' in result.output
        assert '"success": true' in result.output

    def test_export_invalid_json(self, tmp_path: Path):
        params = tmp_path / "params.json"
        params.write_text("{not json")

        result = CliRunner().invoke(cli, ["export", str(params), "--output", str(tmp_path / "x.xlsx")])

        assert result.exit_code != 0
        assert "Invalid JSON" in result.output

    def test_export_requires_object(self, tmp_path: Path):
        params = tmp_path / "params.json"
        params.write_text("[1, 2, 3]")

        result = CliRunner().invoke(cli, ["export", str(params), "--output", str(tmp_path / "x.xlsx")])

        assert result.exit_code != 0
        assert "must be an object" in result.output

    def test_import_malformed_workbook(self, tmp_path: Path):
        path = tmp_path / "bad.xlsx"
        path.write_text("garbage")

        result = CliRunner().invoke(cli, ["import", str(path)])

        assert result.exit_code != 0
        assert "Error" in result.output


class TestSend:
    def test_send_failure_is_reported(self):
        with patch(
            "incell.device.connection.serial.serial_for_url",
            side_effect=ValueError("bad port"),
        ):
            result = CliRunner().invoke(cli, ["send", "COM99", "PING"])

        assert result.exit_code != 0
        assert "bad port" in result.output
