"""Tests for the format, normalize, clean, validate and version commands."""

import json

from screenwright import __version__


class TestVersion:
    """Test the version command."""

    def test_text(self, run_cli):
        """Test the plain version line."""
        result = run_cli(["version"])
        assert result.exit_code == 0
        assert f"Screenwright v{__version__}" in result.output

    def test_json(self, run_cli):
        """Test JSON version output."""
        result = run_cli(["version", "--json"])
        assert json.loads(result.stdout)["version"] == __version__


class TestFormat:
    """Test the format command."""

    def test_stdin_lines(self, run_cli):
        """Test lines piped on stdin are spaced."""
        result = run_cli(["format"], input="Rain falls.\nJOHN\nHello.\nMARY\nHi.\n")
        assert result.exit_code == 0
        assert result.stdout == "Rain falls.\n\nJOHN\nHello.\n\nMARY\nHi.\n"

    def test_json_array_file(self, run_cli, tmp_path):
        """Test a JSON array file with JSON output."""
        path = tmp_path / "lines.json"
        path.write_text(json.dumps(["He leaves.", "EXT. STREET - NIGHT", "Cars pass."]))

        result = run_cli(["format", str(path), "--json-array", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "content": "He leaves.\n\nEXT. STREET - NIGHT\n\nCars pass."
        }

    def test_not_an_array(self, run_cli):
        """Test JSON that is not an array of strings is rejected."""
        result = run_cli(["format", "--json-array"], input='{"lines": 1}')
        assert result.exit_code == 1
        assert "Validation Error" in result.output

    def test_bad_json(self, run_cli):
        """Test unparseable JSON is reported as JSON."""
        result = run_cli(["format", "--json-array", "--json"], input="[1,")
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["success"] is False
        assert payload["error"].startswith("Invalid JSON array")

    def test_missing_file(self, run_cli, tmp_path):
        """Test a missing input file fails."""
        result = run_cli(["format", str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "File does not exist" in result.output


class TestNormalize:
    """Test the normalize command."""

    def test_stdout(self, run_cli, tmp_path):
        """Test the normalized text is printed."""
        path = tmp_path / "import.txt"
        path.write_text("INT. HOUSE - DAY\nJohn enters.\nJOHN\nHello.")

        result = run_cli(["normalize", str(path)])

        assert result.exit_code == 0
        assert result.stdout == "INT. HOUSE - DAY\n\nJohn enters.\n\nJOHN\nHello.\n"

    def test_output_file(self, run_cli, tmp_path):
        """Test --output writes the result and reports success."""
        source = tmp_path / "import.txt"
        source.write_text("John opens the\ndoor.\nJOHN\nI donâ€™t know.")
        target = tmp_path / "clean.fountain"

        result = run_cli(["normalize", str(source), "-o", str(target)])

        assert result.exit_code == 0
        assert "Normalized screenplay written" in result.output
        assert target.read_text() == "John opens the door.\n\nJOHN\nI don't know.\n"


class TestClean:
    """Test the clean command."""

    def test_removes_chatter(self, run_cli):
        """Test lead-ins and follow-up offers are removed."""
        raw = "Here's the rewrite:\nJOHN\nHello.\n\nWould you like more options?"
        result = run_cli(["clean"], input=raw)
        assert result.exit_code == 0
        assert result.stdout == "JOHN\nHello.\n"

    def test_missing_file(self, run_cli, tmp_path):
        """Test errors go through the shared error handler."""
        result = run_cli(["clean", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "File does not exist" in result.output


class TestValidate:
    """Test the validate command."""

    def test_valid_screenwriter(self, run_cli, tmp_path):
        """Test a valid response prints its content."""
        path = tmp_path / "response.json"
        path.write_text(json.dumps({"content": ["JOHN", "Hello."], "lineCount": 2}))

        result = run_cli(["validate", "screenwriter", str(path)])

        assert result.exit_code == 0
        assert result.stdout == "JOHN\nHello.\n"

    def test_invalid_lists_errors(self, run_cli, tmp_path):
        """Test an invalid response lists errors and exits 1."""
        path = tmp_path / "response.json"
        path.write_text(json.dumps({"content": ["INT. HOUSE - DAY"]}))

        result = run_cli(["validate", "screenwriter", str(path)])

        assert result.exit_code == 1
        assert "Invalid screenwriter response" in result.output
        assert "scene heading" in result.output

    def test_context_duplicate(self, run_cli, tmp_path):
        """Test --context enables the duplicate check."""
        line = "Rain hammers the tin roof all night."
        response = tmp_path / "response.json"
        response.write_text(json.dumps({"content": [line]}))
        context = tmp_path / "before.fountain"
        context.write_text(line)

        result = run_cli(
            ["validate", "screenwriter", str(response), "--context", str(context)]
        )

        assert result.exit_code == 1
        assert "duplicate" in result.output

    def test_director_scene_count_json(self, run_cli, tmp_path):
        """Test --scenes with JSON output."""
        scene = {"heading": "EXT. PARK - DAY", "content": ["Birds sing."] * 5}
        path = tmp_path / "response.json"
        path.write_text(json.dumps({"scenes": [scene]}))

        result = run_cli(["validate", "director", str(path), "--scenes", "2", "--json"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["valid"] is False
        assert payload["errors"] == ["Expected 2 scene(s), got 1"]

    def test_rewrite(self, run_cli, tmp_path):
        """Test rewrite responses."""
        path = tmp_path / "response.json"
        path.write_text(json.dumps({"rewrittenText": "Hello there."}))
        result = run_cli(["validate", "rewrite", str(path)])
        assert result.exit_code == 0
        assert result.stdout == "Hello there.\n"

    def test_unknown_agent(self, run_cli, tmp_path):
        """Test agent names are checked by the CLI."""
        path = tmp_path / "response.json"
        path.write_text("{}")
        result = run_cli(["validate", "narrator", str(path)])
        assert result.exit_code == 2
