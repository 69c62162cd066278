"""Tests for the command-line interface."""

import json

from typer.testing import CliRunner

from livescore.cli import app
from livescore.input import Performance

runner = CliRunner()


class TestCLI:
    """Tests for the replay, export and info commands."""

    def test_replay_preset_json(self):
        """Replaying the preset places all 16 notes."""
        result = runner.invoke(app, ["replay", "--json"])

        assert result.exit_code == 0
        assert '"emitted_count": 16' in result.output

    def test_replay_table(self):
        """The default output is a table of placed notes."""
        result = runner.invoke(app, ["replay"])
        assert result.exit_code == 0
        assert "Quantized Notes" in result.output

    def test_replay_json_file(self, tmp_path):
        """A saved performance can be replayed through the tracker."""
        path = tmp_path / "take.json"
        Performance.preset().to_json(str(path))

        result = runner.invoke(app, ["replay", str(path), "--tracker", "--json"])

        assert result.exit_code == 0
        assert '"emitted_count": 16' in result.output

    def test_replay_malformed_json_file(self, tmp_path):
        """A JSON file that is not an object fails with a message, not a traceback."""
        path = tmp_path / "bad.json"
        path.write_text("[]")

        result = runner.invoke(app, ["replay", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not isinstance(result.exception, AttributeError)

    def test_config_file(self, tmp_path):
        """Quantizer settings can come from a JSON file."""
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"on_beat_tolerance_ms": 50}))

        result = runner.invoke(app, ["replay", "-c", str(config)])

        assert result.exit_code == 0

    def test_bad_config_file(self, tmp_path):
        """Unknown settings are an error."""
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"unknown": 1}))

        result = runner.invoke(app, ["replay", "-c", str(config)])

        assert result.exit_code == 1

    def test_bad_min_beat_level(self):
        """Only 4, 8 and 16 are accepted as minimum beat levels."""
        result = runner.invoke(app, ["replay", "-l", "12"])
        assert result.exit_code == 1

    def test_export_midi(self, tmp_path):
        """Export writes a MIDI file."""
        output = tmp_path / "score.mid"
        result = runner.invoke(app, ["export", "-o", str(output)])

        assert result.exit_code == 0
        assert output.exists()

    def test_export_unsupported(self, tmp_path):
        """Unknown output formats are an error."""
        result = runner.invoke(app, ["export", "-o", str(tmp_path / "score.pdf")])
        assert result.exit_code == 1

    def test_info_missing_file(self, tmp_path):
        """Info on a missing file exits with an error."""
        result = runner.invoke(app, ["info", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_info(self, tmp_path):
        """Info reports the note count."""
        path = tmp_path / "take.json"
        Performance.preset().to_json(str(path))

        result = runner.invoke(app, ["info", str(path)])

        assert result.exit_code == 0
        assert "Notes: 16" in result.output
