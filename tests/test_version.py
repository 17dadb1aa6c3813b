from typer.testing import CliRunner

import fontquery
from fontquery.cli import app


def test_get_version_matches_public_api() -> None:
    assert fontquery.get_version() == fontquery.__version__
    assert isinstance(fontquery.__version__, str)


def test_cli_version_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0, result.stdout
    assert result.stdout.strip() == fontquery.get_version()
