"""
Toolchain models: entries of a toolchains file.

The file mirrors the layout build tools use for registering local JDKs::

    toolchains:
      - type: jdk
        provides:
          version: "17"
          vendor: temurin
        configuration:
          jdkHome: /usr/lib/jvm/temurin-17
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ToolchainEntry(BaseModel):
    """One registered toolchain."""

    type: str = "jdk"
    provides: dict[str, str] = Field(default_factory=dict)
    configuration: dict[str, str] = Field(default_factory=dict)

    @field_validator("provides", "configuration", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items() if v is not None}
        return value

    @property
    def jdk_home(self) -> str | None:
        return self.configuration.get("jdkHome")


class ToolchainsFile(BaseModel):
    """Root of a toolchains file; order of entries is registration order."""

    toolchains: list[ToolchainEntry] = Field(default_factory=list)
