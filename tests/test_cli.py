from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from conveyor.cli.main import cli


def _config_file(
    tmp_path: Path,
    image: str = "team/hello:1.0",
    repository: str = "https://git.example.com/hello-devops.git",
) -> Path:
    path = tmp_path / "conveyor.yaml"
    path.write_text(
        "\n".join(
            [
                "source:",
                f"  repository: {repository}",
                "container:",
                f"  image: '{image}'",
                "workspace:",
                f"  root: {tmp_path / 'workspace'}",
                f"  artifacts: {tmp_path / 'artifacts'}",
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_list_stages(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["-c", str(_config_file(tmp_path)), "--list-stages"])

    assert result.exit_code == 0
    for name in ("Clone", "Run Tests", "Build", "Containerize", "Publish", "Deploy/Run"):
        assert name in result.output


def test_dry_run_exits_zero(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["-c", str(_config_file(tmp_path)), "--dry-run", "v1.0.0"],
        env={"REGISTRY_USERNAME": "ci-bot", "REGISTRY_PASSWORD": "token"},
    )

    assert result.exit_code == 0, result.output
    assert "Pipeline succeeded (dry run)" in result.output
    assert not (tmp_path / "workspace").exists()


def test_image_option_overrides_file(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["-c", str(_config_file(tmp_path, image="")), "-i", "team/hello:9", "--list-stages"],
    )

    assert result.exit_code == 0, result.output


def test_missing_image_is_configuration_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["-c", str(_config_file(tmp_path, image="")), "--dry-run"],
        env={"CONVEYOR_IMAGE": None},
    )

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_dry_run_without_credential_prints_warning(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["-c", str(_config_file(tmp_path)), "--dry-run"],
        env={"REGISTRY_USERNAME": None, "REGISTRY_PASSWORD": None},
    )

    assert result.exit_code == 0, result.output
    assert "Warning:" in result.output
    assert "No registry credential configured" in result.output


def test_failed_run_lists_errors_and_exits_one(tmp_path: Path) -> None:
    missing_repo = tmp_path / "no-such-repo"

    result = CliRunner().invoke(
        cli,
        ["-c", str(_config_file(tmp_path, repository=str(missing_repo)))],
        env={"REGISTRY_USERNAME": "ci-bot", "REGISTRY_PASSWORD": "token"},
    )

    assert result.exit_code == 1
    assert "Pipeline failed at stage 'Clone'" in result.output
    assert "Errors:" in result.output
    assert "SourceUnavailable" in result.output
