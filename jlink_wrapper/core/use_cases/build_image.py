"""
Build image use case: the whole jlink pipeline for one build step.

Flow:
    jlink tool → module list → provider JDK → command → reset output → run
"""

from __future__ import annotations

import logging
from pathlib import Path

from jlink_wrapper.adapters.shell.process import ProcessOutcome, ProcessRunner
from jlink_wrapper.core.errors import ConfigurationError
from jlink_wrapper.core.models.config import BuildSession, JlinkConfig
from jlink_wrapper.core.services.cache_dir import resolve_cache_root
from jlink_wrapper.core.services.command import build_command, check_modules, reset_output_dir
from jlink_wrapper.core.services.modules import build_module_list
from jlink_wrapper.core.services.providers import (
    ProviderContext,
    is_offline_mode,
    make_provider,
)
from jlink_wrapper.core.services.toolchains import ToolchainRegistry, resolve_tool_path

logger = logging.getLogger(__name__)

JLINK = "jlink"


def prepare_provider_jdk(config: JlinkConfig, session: BuildSession) -> Path:
    """Run the configured provider against the validated cache root."""
    offline = is_offline_mode(config.use_only_cache, session.offline)
    if offline:
        logger.info("Offline mode is active, only cached JDKs can be used")

    context = ProviderContext(
        cache_root=resolve_cache_root(config.cache_path),
        offline=offline,
        disable_ssl_check=config.disable_ssl_check,
        proxy=config.proxy,
    )
    provider = make_provider(config.provider, context)
    logger.debug("JDK provider: %r", provider)
    return provider.prepare_jdk_folder(dict(config.provider_config))


def build_image(
    config: JlinkConfig,
    session: BuildSession | None = None,
    registry: ToolchainRegistry | None = None,
    runner: ProcessRunner | None = None,
) -> ProcessOutcome | None:
    """Produce the runtime image described by ``config``.

    Returns:
        The successful process outcome, or None when ``config.skip`` is set.

    Raises:
        JlinkError: Any configuration, provider, I/O or tool failure.
        ExecutionInterrupted: The jlink run was interrupted.
    """
    if config.skip:
        logger.debug("Skip flag is active")
        return None

    session = session or BuildSession()
    runner = runner or ProcessRunner()

    output_path = Path(config.output)

    # Configuration errors surface before the cache is touched.
    jlink_path = resolve_tool_path(JLINK, config.tool_jdk, registry=registry, session=session)
    if jlink_path is None:
        raise ConfigurationError("Can't find jlink in JDK")

    report = Path(config.jdeps_report_path) if config.jdeps_report_path else None
    modules = build_module_list(config.add_modules, report)
    logger.info("List of modules : %s", ",".join(modules))
    check_modules(modules, config.options)

    provider_jdk = prepare_provider_jdk(config, session)

    command = build_command(jlink_path, output_path, provider_jdk, modules, config.options)

    reset_output_dir(output_path)

    logger.info("CLI arguments: %s", " ".join(command[1:]))
    return runner.run(command, output_path)
