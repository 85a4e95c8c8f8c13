"""
jlink-wrapper: CLI entrypoint.

Usage:
    jlink-wrapper --help
    jlink-wrapper image --output target/image --add-module java.base
    jlink-wrapper cache
    jlink-wrapper find-tool jlink
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import click

from jlink_wrapper import __version__
from jlink_wrapper.core.errors import JlinkError, ToolExecutionError
from jlink_wrapper.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="jlink-wrapper")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to jlink.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """jlink-wrapper: build modular Java runtime images with jlink."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


def _fail(error: JlinkError) -> None:
    click.secho(f"❌ {error}", fg="red", err=True)
    if isinstance(error, ToolExecutionError) and error.diagnostic:
        click.echo(error.diagnostic, err=True)
    sys.exit(1)


def _load(ctx: click.Context, overrides: dict[str, Any]):
    from jlink_wrapper.core.config.loader import load_config

    return load_config(ctx.obj.get("config_path"), overrides)


# ── Image ───────────────────────────────────────────────────────


@cli.command()
@click.option("--output", "-o", default=None, help="Image output folder.")
@click.option("--add-module", "add_modules", multiple=True, help="Module to add (repeatable).")
@click.option("--jdeps-report", "jdeps_report_path", default=None, help="jdeps report to mine modules from.")
@click.option("--option", "options", multiple=True, help="Raw jlink option (repeatable).")
@click.option("--provider", default=None, help="JDK provider: LOCAL or URL.")
@click.option("--provider-config", "provider_config", multiple=True, metavar="KEY=VALUE",
              help="Provider setting (repeatable).")
@click.option("--cache-path", default=None, help="JDK cache folder.")
@click.option("--tool-jdk", default=None, help="JDK home whose jlink is used.")
@click.option("--toolchains", "toolchains_file", default=None, help="Toolchains file.")
@click.option("--toolchain-version", default=None, help="JDK toolchain version pinned for this build.")
@click.option("--offline", is_flag=True, help="Build session is offline.")
@click.option("--use-only-cache", is_flag=True, help="Never download JDKs.")
@click.option("--skip", is_flag=True, help="Do nothing.")
@click.pass_context
def image(
    ctx: click.Context,
    output: str | None,
    add_modules: tuple[str, ...],
    jdeps_report_path: str | None,
    options: tuple[str, ...],
    provider: str | None,
    provider_config: tuple[str, ...],
    cache_path: str | None,
    tool_jdk: str | None,
    toolchains_file: str | None,
    toolchain_version: str | None,
    offline: bool,
    use_only_cache: bool | None,
    skip: bool | None,
) -> None:
    """Build a runtime image with jlink."""
    from jlink_wrapper.core.config.loader import load_toolchains
    from jlink_wrapper.core.models.config import BuildSession
    from jlink_wrapper.core.use_cases.build_image import build_image

    parsed_provider_config: dict[str, str] | None = None
    if provider_config:
        parsed_provider_config = {}
        for item in provider_config:
            key, sep, value = item.partition("=")
            if not sep:
                raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--provider-config")
            parsed_provider_config[key.strip()] = value

    try:
        config = _load(ctx, {
            "output": output,
            "add_modules": add_modules,
            "jdeps_report_path": jdeps_report_path,
            "options": options,
            "provider": provider,
            "provider_config": parsed_provider_config,
            "cache_path": cache_path,
            "tool_jdk": tool_jdk,
            "toolchains_file": toolchains_file,
            "use_only_cache": use_only_cache or None,
            "skip": skip or None,
        })

        session = BuildSession(offline=offline)
        if toolchain_version:
            session.toolchain_requirements["jdk"] = {"version": toolchain_version}

        registry = load_toolchains(Path(config.toolchains_file) if config.toolchains_file else None)
        outcome = build_image(config, session=session, registry=registry)
    except JlinkError as e:
        _fail(e)
        return

    if outcome is None:
        click.secho("⏭️  Skipped", fg="yellow")
        return
    click.secho(f"✅ Image created: {config.output}", fg="green")


# ── Cache ───────────────────────────────────────────────────────


@cli.command()
@click.option("--cache-path", default=None, help="JDK cache folder.")
@click.pass_context
def cache(ctx: click.Context, cache_path: str | None) -> None:
    """Create and validate the JDK cache folder, then print it."""
    from jlink_wrapper.core.config.loader import load_cache_path
    from jlink_wrapper.core.services.cache_dir import resolve_cache_root

    try:
        if cache_path is None:
            cache_path = load_cache_path(ctx.obj.get("config_path"))
        root = resolve_cache_root(cache_path)
    except JlinkError as e:
        _fail(e)
        return

    click.echo(str(root))


# ── Tools ───────────────────────────────────────────────────────


@cli.command("find-tool")
@click.argument("name")
@click.option("--tool-jdk", default=None, help="Explicit JDK home.")
@click.option("--toolchains", "toolchains_file", default=None, help="Toolchains file.")
@click.option("--toolchain-version", default=None, help="JDK toolchain version pinned for this build.")
def find_tool(
    name: str,
    tool_jdk: str | None,
    toolchains_file: str | None,
    toolchain_version: str | None,
) -> None:
    """Print the path of a JDK tool such as jlink or jdeps."""
    from jlink_wrapper.core.config.loader import load_toolchains
    from jlink_wrapper.core.models.config import BuildSession
    from jlink_wrapper.core.services.toolchains import resolve_tool_path

    session = BuildSession()
    if toolchain_version:
        session.toolchain_requirements["jdk"] = {"version": toolchain_version}

    try:
        registry = load_toolchains(Path(toolchains_file) if toolchains_file else None)
    except JlinkError as e:
        _fail(e)
        return

    found = resolve_tool_path(name, tool_jdk, registry=registry, session=session)
    if found is None:
        click.secho(f"❌ Can't find {name}", fg="red", err=True)
        sys.exit(1)
    click.echo(found)


@cli.command("hash")
@click.argument("line")
def hash_(line: str) -> None:
    """Print the digest from a '<hex>  <filename>' checksum line."""
    from jlink_wrapper.core.services.text_utils import extract_file_hash

    try:
        click.echo(extract_file_hash(line))
    except JlinkError as e:
        _fail(e)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
