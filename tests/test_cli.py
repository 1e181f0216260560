# tests/test_cli.py
"""
Tests for the command line interface.
"""

from __future__ import annotations

import json

import pytest
import yaml
from typer.testing import CliRunner

from shapeforge import __version__
from shapeforge.cli.cli import app
from shapeforge.cli.ui import console

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep table cells and messages on one line."""
    monkeypatch.setattr(console, "width", 200)


@pytest.fixture
def weather_file(tmp_path, weather_document):
    path = tmp_path / "weather.json"
    path.write_text(json.dumps(weather_document))
    return path


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert f"shapeforge {__version__}" in result.output


def test_no_arguments_shows_help():
    result = runner.invoke(app, [])

    assert "generate" in result.output
    assert "decorators" in result.output


class TestGenerate:
    def test_lists_files_without_output(self, weather_file):
        result = runner.invoke(app, ["generate", str(weather_file), "-s", "example.weather#Weather"])

        assert result.exit_code == 0, result.output
        assert "Files" in result.output
        assert "Cargo.toml" in result.output
        assert "src/service.rs" in result.output
        assert "Pass --output" in result.output

    def test_plan(self, weather_file):
        result = runner.invoke(app, ["generate", str(weather_file), "-s", "example.weather#Weather", "--plan"])

        assert result.exit_code == 0, result.output
        plan = json.loads(result.output)
        assert plan["builder"] == "WeatherBuilder"
        assert [op["field"] for op in plan["operations"]] == ["get_city", "get_forecast", "list_cities"]

    def test_writes_the_crate(self, weather_file, tmp_path):
        out = tmp_path / "out"

        result = runner.invoke(
            app,
            ["generate", str(weather_file), "-s", "example.weather#Weather", "-m", "weather-server", "-o", str(out)],
        )

        assert result.exit_code == 0, result.output
        assert "Wrote" in result.output
        assert 'name = "weather-server"' in (out / "Cargo.toml").read_text()
        assert (out / "src" / "lib.rs").exists()
        assert (out / "src" / "service.rs").exists()

    def test_module_name_defaults_to_the_service_name(self, weather_file):
        result = runner.invoke(app, ["generate", str(weather_file), "-s", "example.weather#Weather"])

        assert result.exit_code == 0, result.output
        assert "Generated weather" in result.output

    def test_config_file(self, weather_file, tmp_path):
        config = tmp_path / "shapeforge.yaml"
        config.write_text(
            yaml.safe_dump(
                {
                    "service": "example.weather#Weather",
                    "module_name": "forecasts",
                    "decorators": {"disabled": ["SdkConfig"]},
                }
            )
        )
        out = tmp_path / "out"

        result = runner.invoke(app, ["generate", str(weather_file), "-c", str(config), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert 'name = "forecasts"' in (out / "Cargo.toml").read_text()
        assert "aws-types" not in (out / "Cargo.toml").read_text()

    def test_collisions_exit_with_1(self, tmp_path, collision_document):
        model = tmp_path / "collide.json"
        model.write_text(json.dumps(collision_document))

        result = runner.invoke(app, ["generate", str(model), "-s", "example.collide#Collide"])

        assert result.exit_code == 1
        assert "naming-collision" in result.output
        assert "GetThing" in result.output

    def test_missing_model(self, tmp_path):
        result = runner.invoke(app, ["generate", str(tmp_path / "nope.json"), "-s", "example.weather#Weather"])

        assert result.exit_code == 1
        assert "Model file not found" in result.output

    def test_missing_service(self, weather_file):
        result = runner.invoke(app, ["generate", str(weather_file)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestSymbols:
    def test_table(self, weather_file):
        result = runner.invoke(app, ["symbols", str(weather_file), "-s", "example.weather#Weather"])

        assert result.exit_code == 0, result.output
        assert "Symbols of example.weather#Weather" in result.output
        assert "GetCity" in result.output

    def test_collisions_are_shown_but_do_not_fail(self, tmp_path, collision_document):
        model = tmp_path / "collide.json"
        model.write_text(json.dumps(collision_document))

        result = runner.invoke(app, ["symbols", str(model), "-s", "example.collide#Collide"])

        assert result.exit_code == 0, result.output
        assert "naming-collision" in result.output


class TestDecorators:
    def test_default_manifest(self):
        result = runner.invoke(app, ["decorators"])

        assert result.exit_code == 0, result.output
        assert "IdempotencyToken" in result.output
        assert "no" not in result.output.split()

    def test_manifest_from_config(self, tmp_path):
        config = tmp_path / "shapeforge.yaml"
        config.write_text(yaml.safe_dump({"decorators": {"disabled": ["S3"]}}))

        result = runner.invoke(app, ["decorators", "-c", str(config)])

        assert result.exit_code == 0, result.output
        s3_row = next(line for line in result.output.splitlines() if " S3 " in line)
        assert "no" in s3_row

    def test_unknown_decorator(self, tmp_path):
        config = tmp_path / "shapeforge.yaml"
        config.write_text(yaml.safe_dump({"decorators": {"enabled": ["Nope"]}}))

        result = runner.invoke(app, ["decorators", "-c", str(config)])

        assert result.exit_code == 1
        assert "Nope" in result.output

    def test_invalid_manifest(self, tmp_path):
        config = tmp_path / "shapeforge.yaml"
        config.write_text(yaml.safe_dump({"decorators": {"enable": ["S3"]}}))

        result = runner.invoke(app, ["decorators", "-c", str(config)])

        assert result.exit_code == 1
        assert "Invalid decorator manifest" in result.output
