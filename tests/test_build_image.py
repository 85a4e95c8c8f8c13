"""
Tests for the build-image use case: provider → jlink → modules → run.
"""

import json
from pathlib import Path

import pytest

from fakes import make_jdk, posix_only
from jlink_wrapper.adapters.shell.process import ProcessOutcome
from jlink_wrapper.core.errors import (
    ConfigurationError,
    NoModulesError,
    OfflineUnavailableError,
    ToolExecutionError,
)
from jlink_wrapper.core.models.config import BuildSession, JlinkConfig
from jlink_wrapper.core.models.toolchain import ToolchainEntry, ToolchainsFile
from jlink_wrapper.core.services.toolchains import FileToolchainRegistry
from jlink_wrapper.core.use_cases.build_image import build_image


class _RecordingRunner:
    """Runner double that records the command instead of spawning."""

    def __init__(self):
        self.commands = []

    def run(self, command, output_path=None):
        self.commands.append((command, output_path))
        return ProcessOutcome(command=tuple(command), exit_code=0)


def _config(tmp_path: Path, jdk: Path, **overrides) -> JlinkConfig:
    values = {
        "cache_path": str(tmp_path / "cache"),
        "provider": "LOCAL",
        "provider_config": {"path": str(jdk)},
        "tool_jdk": str(jdk),
        "add_modules": ["java.base"],
        "output": str(tmp_path / "image"),
    }
    values.update(overrides)
    return JlinkConfig(**values)


class TestBuildImage:
    def test_skip(self, tmp_path: Path, fake_jdk: Path):
        runner = _RecordingRunner()
        assert build_image(_config(tmp_path, fake_jdk, skip=True), runner=runner) is None
        assert runner.commands == []
        assert not (tmp_path / "cache").exists()

    def test_command_passed_to_runner(self, tmp_path: Path, fake_jdk: Path):
        runner = _RecordingRunner()
        build_image(_config(tmp_path, fake_jdk, options=["--strip-debug"]), runner=runner)
        (command, output), = runner.commands
        assert command == (
            str(fake_jdk / "bin" / "jlink"),
            "--output", str(tmp_path / "image"),
            "--strip-debug",
            "--module-path", str(fake_jdk / "jmods"),
            "--add-modules", "java.base",
        )
        assert output == tmp_path / "image"
        assert (tmp_path / "cache").is_dir()

    def test_jdeps_modules_first(self, tmp_path: Path, fake_jdk: Path):
        report = tmp_path / "jdeps.out"
        report.write_text("app -> java.sql\napp -> java.xml\n")
        runner = _RecordingRunner()
        build_image(_config(tmp_path, fake_jdk, jdeps_report_path=str(report)), runner=runner)
        command = runner.commands[0][0]
        assert command[-1] == "java.sql,java.xml,java.base"

    def test_no_modules_before_output_removed(self, tmp_path: Path, fake_jdk: Path):
        old = tmp_path / "image"
        old.mkdir()
        runner = _RecordingRunner()
        with pytest.raises(NoModulesError):
            build_image(_config(tmp_path, fake_jdk, add_modules=[]), runner=runner)
        assert old.is_dir()
        assert runner.commands == []

    def test_no_modules_before_provider(self, tmp_path: Path, fake_jdk: Path, monkeypatch):
        def unexpected(*args, **kwargs):
            raise AssertionError("provider must not run")

        monkeypatch.setattr("jlink_wrapper.core.use_cases.build_image.make_provider", unexpected)
        with pytest.raises(NoModulesError):
            build_image(_config(tmp_path, fake_jdk, add_modules=[]), runner=_RecordingRunner())
        assert not (tmp_path / "cache").exists()

    def test_missing_jlink_before_cache_created(self, tmp_path: Path):
        jdk = make_jdk(tmp_path / "jdk", with_jlink=False)
        with pytest.raises(ConfigurationError, match="Can't find jlink"):
            build_image(_config(tmp_path, jdk, add_modules=[]), runner=_RecordingRunner())
        assert not (tmp_path / "cache").exists()

    def test_add_modules_without_value_before_provider(self, tmp_path: Path, fake_jdk: Path):
        config = _config(tmp_path, fake_jdk, options=["--add-modules", "--strip-debug"])
        with pytest.raises(ConfigurationError, match="has no value"):
            build_image(config, runner=_RecordingRunner())
        assert not (tmp_path / "cache").exists()

    def test_existing_output_deleted(self, tmp_path: Path, fake_jdk: Path):
        old = tmp_path / "image"
        (old / "lib").mkdir(parents=True)
        build_image(_config(tmp_path, fake_jdk), runner=_RecordingRunner())
        assert not old.exists()

    def test_jlink_not_found(self, tmp_path: Path):
        jdk = make_jdk(tmp_path / "jdk", with_jlink=False)
        with pytest.raises(ConfigurationError, match="Can't find jlink"):
            build_image(_config(tmp_path, jdk), runner=_RecordingRunner())

    def test_jlink_from_toolchain(self, tmp_path: Path):
        provider_jdk = make_jdk(tmp_path / "provider", with_jlink=False)
        tool_jdk = make_jdk(tmp_path / "tool")
        registry = FileToolchainRegistry(ToolchainsFile(toolchains=[
            ToolchainEntry(provides={"version": "21"}, configuration={"jdkHome": str(tool_jdk)}),
        ]))
        runner = _RecordingRunner()
        build_image(_config(tmp_path, provider_jdk, tool_jdk=None), registry=registry, runner=runner)
        assert runner.commands[0][0][0] == str(tool_jdk / "bin" / "jlink")

    def test_session_offline_reaches_provider(self, tmp_path: Path, fake_jdk: Path):
        config = _config(
            tmp_path, fake_jdk,
            provider="URL",
            provider_config={"url": "https://example.invalid/jdk17.tar.gz"},
        )
        with pytest.raises(OfflineUnavailableError):
            build_image(config, session=BuildSession(offline=True), runner=_RecordingRunner())

    def test_use_only_cache_reaches_provider(self, tmp_path: Path, fake_jdk: Path):
        config = _config(
            tmp_path, fake_jdk,
            provider="URL",
            use_only_cache=True,
            provider_config={"url": "https://example.invalid/jdk17.tar.gz"},
        )
        with pytest.raises(OfflineUnavailableError):
            build_image(config, runner=_RecordingRunner())

    def test_blank_cache_path(self, tmp_path: Path, fake_jdk: Path):
        with pytest.raises(ConfigurationError):
            build_image(_config(tmp_path, fake_jdk, cache_path="  "), runner=_RecordingRunner())


@posix_only
class TestBuildImageEndToEnd:
    def test_runs_scripted_jlink(self, tmp_path: Path, fake_jdk: Path):
        outcome = build_image(_config(tmp_path, fake_jdk))
        assert outcome.ok
        assert (tmp_path / "image" / "release").is_file()
        args = json.loads((fake_jdk / "last_args.json").read_text())
        assert args[:2] == ["--output", str(tmp_path / "image")]
        assert args[-2:] == ["--add-modules", "java.base"]

    def test_incompatible_jdk(self, tmp_path: Path, fake_jdk: Path, monkeypatch):
        monkeypatch.setenv("FAKE_JLINK_EXIT", "1")
        monkeypatch.setenv("FAKE_JLINK_STDOUT", "Error: java.lang.IllegalArgumentException")
        with pytest.raises(ToolExecutionError) as exc:
            build_image(_config(tmp_path, fake_jdk))
        assert exc.value.exit_code == 1
        assert "incompatible" in exc.value.diagnostic
