"""Tests for the PropFlow CLI commands."""

import json

from typer.testing import CliRunner

from propflow.cli.main import app

runner = CliRunner()


class TestShowCommand:

    def test_show_table(self, declarations_file):
        result = runner.invoke(app, ["show", str(declarations_file)])

        assert result.exit_code == 0
        assert "mode" in result.output
        assert "target" in result.output
        assert "auto" in result.output

    def test_show_json(self, declarations_file):
        result = runner.invoke(app, ["show", str(declarations_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        rows = {row["name"]: row for row in data["properties"]}
        assert rows["mode"]["default"] == "auto"
        assert rows["target"]["scope"] == "flow"
        assert rows["target"]["config"] == 21
        assert rows["count"]["scope"] == "node"
        assert data["settings"]["default_scope"] == "node"

    def test_show_missing_file(self, tmp_path):
        result = runner.invoke(app, ["show", str(tmp_path / "absent.yaml")])

        assert result.exit_code == 1
        assert "File not found" in result.output


class TestReplayCommand:

    def test_replay_json(self, declarations_file, events_file):
        result = runner.invoke(app, ["replay", str(declarations_file), str(events_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["events"] == 4
        assert data["matched"] == 3
        assert data["snapshot"] == {"mode": "manual", "target": 23, "count": 3}
        assert data["scopes"] == {"mode": "node", "target": "flow", "count": "node"}
        assert data["warnings"] == []

    def test_replay_table(self, declarations_file, events_file):
        result = runner.invoke(app, ["replay", str(declarations_file), str(events_file)])

        assert result.exit_code == 0
        assert "Final state after 4 event(s), 3 matched" in result.output
        assert "manual" in result.output

    def test_replay_verbose_reports_unmatched_events(self, declarations_file, events_file):
        result = runner.invoke(app, ["--verbose", "replay", str(declarations_file), str(events_file)])

        assert result.exit_code == 0
        assert "event 2: no property matched" in result.output

    def test_replay_reports_invalid_declared_scope(self, tmp_path, events_file):
        path = tmp_path / "decl.json"
        path.write_text(json.dumps({"properties": {"mode": {"scope": "cluster"}}}))

        result = runner.invoke(app, ["replay", str(path), str(events_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["warnings"][0]["kind"] == "invalid_scope"

    def test_replay_bad_events_file(self, declarations_file, tmp_path):
        path = tmp_path / "events.json"
        path.write_text('{"not": "a list"}')

        result = runner.invoke(app, ["replay", str(declarations_file), str(path), "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output) == {"error": "Events must be a list"}

    def test_replay_config_file_sets_resolution_mode(self, tmp_path):
        decl = tmp_path / "decl.json"
        decl.write_text(json.dumps({"properties": {"mode": {}, "count": {}}}))
        events = tmp_path / "events.json"
        events.write_text(json.dumps([{"mode": "A", "count": 5, "topic": "mode", "payload": "B"}]))
        config = tmp_path / "settings.yaml"
        config.write_text("resolution_mode: topic_first\n")

        result = runner.invoke(app, ["replay", str(decl), str(events), "--config", str(config), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["snapshot"] == {"mode": "B", "count": None}

    def test_replay_config_file_overrides_declared_settings(self, tmp_path):
        decl = tmp_path / "decl.json"
        decl.write_text(json.dumps({"properties": {"mode": {}}, "settings": {"default_scope": "global"}}))
        events = tmp_path / "events.json"
        events.write_text(json.dumps([{"mode": "eco"}]))
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"default_scope": "flow"}))

        result = runner.invoke(app, ["replay", str(decl), str(events), "--config", str(config), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["scopes"] == {"mode": "flow"}

    def test_replay_invalid_config_file(self, declarations_file, events_file, tmp_path):
        config = tmp_path / "settings.yaml"
        config.write_text("default_scope: cluster\n")

        result = runner.invoke(
            app, ["replay", str(declarations_file), str(events_file), "--config", str(config), "--json"]
        )

        assert result.exit_code == 1
        assert "Invalid default_scope" in json.loads(result.output)["error"]

    def test_replay_json_renders_non_json_values(self, tmp_path):
        decl = tmp_path / "decl.yaml"
        decl.write_text("properties:\n  when: {}\n")
        events = tmp_path / "events.yaml"
        events.write_text("- when: 2024-01-01\n")

        result = runner.invoke(app, ["replay", str(decl), str(events), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["snapshot"] == {"when": "2024-01-01"}
