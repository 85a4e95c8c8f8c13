"""
Domain models: pydantic types for configuration and toolchains.

    from jlink_wrapper.core.models import JlinkConfig, BuildSession, ProviderId
"""

from jlink_wrapper.core.models.config import (
    BuildSession,
    JlinkConfig,
    ProviderId,
    ProxySettings,
)
from jlink_wrapper.core.models.toolchain import ToolchainEntry, ToolchainsFile

__all__ = [
    # config.py
    "BuildSession",
    "JlinkConfig",
    "ProviderId",
    "ProxySettings",
    # toolchain.py
    "ToolchainEntry",
    "ToolchainsFile",
]
