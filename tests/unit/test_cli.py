"""Unit tests for the command-line interface."""

from typer.testing import CliRunner

from webber.cli import app
from webber.core.config import get_config

runner = CliRunner()


class TestCli:
    """Tests for CLI commands that need no network."""

    def test_appname(self):
        result = runner.invoke(app, ["appname", "https://Example.COM/path"])

        assert result.exit_code == 0
        assert result.output.strip() == "webapp-example-com"

    def test_build_and_inspect(self, temp_dir):
        root = temp_dir / "build"
        result = runner.invoke(
            app,
            ["build", "https://example.org", "--name", "Example", "--staging-root", str(root)],
        )

        assert result.exit_code == 0, result.output
        package = root / "shortcut.click"
        assert package.is_file()
        assert "Exec=webapp-container --webappUrlPatterns=https?://example.org/* " in (
            root / "data" / "shortcut.desktop"
        ).read_text()

        inspected = runner.invoke(app, ["inspect", str(package)])
        assert inspected.exit_code == 0, inspected.output
        for name in ("debian-binary", "control.tar.gz", "data.tar.gz", "_click-binary", "./manifest", "./icon.svg"):
            assert name in inspected.output

    def test_verbose_build_leaves_global_config_untouched(self, temp_dir):
        before = get_config().log_level
        result = runner.invoke(
            app,
            ["build", "https://example.org", "--name", "Example", "--staging-root", str(temp_dir / "b"), "--verbose"],
        )

        assert result.exit_code == 0, result.output
        assert get_config().log_level == before

    def test_inspect_rejects_non_archive(self, temp_dir):
        bogus = temp_dir / "bogus.click"
        bogus.write_bytes(b"not an ar archive")

        result = runner.invoke(app, ["inspect", str(bogus)])

        assert result.exit_code == 1
        assert "Cannot read package" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "webber v1.0.0" in result.output
