"""Tests for the hmid command line."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from hmid.cli import cli, parse_range
from hmid.models.config import CodecConfig
from hmid.models.entity import CollapsedBlockRange


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner, missing_config_file: Path):
    """Invoke the CLI with default config."""

    def _invoke(*args: str):
        return runner.invoke(cli, ["-c", str(missing_config_file), *args])

    return _invoke


class TestCreateCommand:
    """Tests for 'hmid create'."""

    def test_create(self, invoke):
        """Test building an id with version and range."""
        result = invoke("create", "d", "abc123", "--version", "v9", "-b", "zzzzzzzz", "--range", "1:2")
        assert result.exit_code == 0
        assert result.output.strip() == "hm://d/abc123?v=v9#zzzzzzzz[1:2]"

    def test_create_variants_and_latest(self, invoke):
        """Test variant tokens keep their order."""
        result = invoke(
            "create", "d", "abc", "--variant", "a/x", "--variant", "g/y/p", "--latest", "--expanded", "-b", "abcdefgh"
        )
        assert result.exit_code == 0
        assert result.output.strip() == "hm://d/abc?b=a/x.g/y/p&l#abcdefgh+"

    def test_create_bad_range(self, invoke):
        """Test a malformed range is a usage error."""
        result = invoke("create", "d", "abc", "-b", "abcdefgh", "--range", "one:two")
        assert result.exit_code == 2

    def test_create_bad_type(self, invoke):
        """Test unknown entity types are rejected by click."""
        result = invoke("create", "x", "abc")
        assert result.exit_code == 2

    def test_create_range_with_expanded(self, invoke):
        """Test --range and --expanded together are a usage error."""
        result = invoke("create", "d", "abc", "-b", "abcdefgh", "--range", "1:2", "--expanded")
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    @pytest.mark.parametrize("flags", [["--range", "1:2"], ["--expanded"]])
    def test_create_range_without_block_ref(self, invoke, flags):
        """Test a block range without a block id is a usage error."""
        result = invoke("create", "d", "abc", *flags)
        assert result.exit_code == 2
        assert "--block-ref" in result.output


class TestUnpackCommand:
    """Tests for 'hmid unpack'."""

    def test_unpack_json(self, invoke):
        """Test JSON output carries the decoded fields."""
        result = invoke("unpack", "--json", "https://hyper.media/a/acct1?b=a/author1")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["type"] == "a"
        assert data["eid"] == "acct1"
        assert data["hostname"] == "hyper.media"
        assert data["variants"] == [{"key": "author", "author": "author1"}]

    def test_unpack_table(self, invoke):
        """Test the table output names the entity type."""
        result = invoke("unpack", "hm://d/abc")
        assert result.exit_code == 0
        assert "Document" in result.output
        assert "abc" in result.output

    def test_unpack_invalid(self, invoke):
        """Test non-ids exit with status 1."""
        result = invoke("unpack", "not-an-id")
        assert result.exit_code == 1


class TestWebUrlCommand:
    """Tests for 'hmid web-url'."""

    def test_default_gateway(self, invoke):
        result = invoke("web-url", "hm://d/abc?v=1")
        assert result.output.strip() == "https://hyper.media/d/abc?v=1"

    def test_relative(self, invoke):
        result = invoke("web-url", "--relative", "hm://d/abc")
        assert result.output.strip() == "/d/abc"

    def test_host(self, invoke):
        result = invoke("web-url", "--host", "example.com", "hm://d/abc")
        assert result.output.strip() == "https://example.com/d/abc"

    def test_configured_gateway(self, runner: CliRunner, temp_config_file: Path):
        """Test the gateway comes from the config file."""
        result = runner.invoke(cli, ["-c", str(temp_config_file), "web-url", "hm://d/abc"])
        assert result.exit_code == 0
        assert result.output.strip() == "https://gw.test/d/abc"

    def test_invalid(self, invoke):
        assert invoke("web-url", "junk").exit_code == 1


class TestNormalizeCommand:
    """Tests for 'hmid normalize'."""

    def test_gateway_link(self, runner: CliRunner, temp_config_file: Path):
        """Test a link under the configured gateway normalizes."""
        result = runner.invoke(cli, ["-c", str(temp_config_file), "normalize", "https://gw.test/d/abc?v=2"])
        assert result.exit_code == 0
        assert result.output.strip() == "hm://d/abc?v=2"

    def test_other_host(self, invoke):
        """Test links under other hosts exit with status 1."""
        assert invoke("normalize", "https://example.com/d/abc").exit_code == 1


class TestWithVersionCommand:
    """Tests for 'hmid with-version'."""

    def test_with_version(self, invoke):
        result = invoke("with-version", "hm://d/abc?v=1", "2", "-b", "abcdefgh")
        assert result.exit_code == 0
        assert result.output.strip() == "hm://d/abc?v=2#abcdefgh"

    def test_invalid(self, invoke):
        assert invoke("with-version", "junk", "2").exit_code == 1


class TestInitCommand:
    """Tests for 'hmid init'."""

    def test_init_writes_config(self, runner: CliRunner, tmp_path: Path, missing_config_file: Path):
        """Test init saves the given gateway."""
        config_path = tmp_path / "out.json"
        result = runner.invoke(
            cli,
            ["-c", str(missing_config_file), "init", "-g", "https://gw.test/", "-c", str(config_path)],
        )
        assert result.exit_code == 0
        assert CodecConfig.load(config_path).gateway_url == "https://gw.test"

    def test_init_invalid_gateway(self, runner: CliRunner, tmp_path: Path, missing_config_file: Path):
        """Test an invalid gateway is reported and nothing is written."""
        config_path = tmp_path / "out.json"
        result = runner.invoke(
            cli,
            ["-c", str(missing_config_file), "init", "-g", "nope", "-c", str(config_path)],
        )
        assert result.exit_code == 1
        assert not config_path.exists()


class TestParseRange:
    """Tests for parse_range."""

    def test_parse(self):
        assert parse_range("3:7") == CollapsedBlockRange(start=3, end=7)
        assert parse_range(None) is None
