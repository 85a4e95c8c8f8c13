"""
Configuration models: the settings surface of one image build.

Loaded from ``jlink.yml`` (see ``core.config.loader``) and merged with
CLI overrides.  Values arrive here already parsed; the pipeline only
reads them.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ProviderId(str, Enum):
    """Identifier selecting one of the JDK provider variants."""

    LOCAL = "LOCAL"
    URL = "URL"


class ProxySettings(BaseModel):
    """HTTP proxy used by network-capable providers."""

    protocol: str = "http"
    host: str
    port: int = 8080
    username: str | None = None
    password: str | None = None
    non_proxy_hosts: str = ""       # pipe-separated globs, e.g. "localhost|*.corp"

    def url(self) -> str:
        """Proxy URL with credentials embedded when configured."""
        auth = ""
        if self.username:
            auth = self.username
            if self.password:
                auth += f":{self.password}"
            auth += "@"
        return f"{self.protocol}://{auth}{self.host}:{self.port}"

    def non_proxy_patterns(self) -> list[str]:
        return [p.strip() for p in self.non_proxy_hosts.split("|") if p.strip()]


class BuildSession(BaseModel):
    """Ambient state of the surrounding build invocation.

    ``toolchain_requirements`` holds the toolchain selection pinned in the
    build context, keyed by toolchain kind, e.g.
    ``{"jdk": {"version": "17"}}``.
    """

    offline: bool = False
    toolchain_requirements: dict[str, dict[str, str]] = Field(default_factory=dict)


class JlinkConfig(BaseModel):
    """Everything one ``image`` run needs."""

    cache_path: str
    use_only_cache: bool = False
    disable_ssl_check: bool = False
    proxy: ProxySettings | None = None

    provider: ProviderId = ProviderId.LOCAL
    provider_config: dict[str, str] = Field(default_factory=dict)

    tool_jdk: str | None = None
    toolchains_file: str | None = None

    jdeps_report_path: str | None = None
    add_modules: list[str] = Field(default_factory=list)
    options: list[str] = Field(default_factory=list)
    output: str

    skip: bool = False

    @field_validator("provider", mode="before")
    @classmethod
    def _upper_provider(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("provider_config", mode="before")
    @classmethod
    def _stringify_provider_config(cls, value: object) -> object:
        # YAML turns bare numbers and booleans into non-strings.
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value
