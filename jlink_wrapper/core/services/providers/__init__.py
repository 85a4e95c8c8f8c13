"""
JDK providers: selection by identifier.

    provider = make_provider(ProviderId.URL, context)
    jdk_home = provider.prepare_jdk_folder({"url": "..."})
"""

from __future__ import annotations

from jlink_wrapper.core.errors import ProviderFailure
from jlink_wrapper.core.models.config import ProviderId
from jlink_wrapper.core.services.providers.base import (
    JdkProvider,
    ProviderContext,
    has_jmods,
    is_offline_mode,
)
from jlink_wrapper.core.services.providers.local import LocalJdkProvider
from jlink_wrapper.core.services.providers.url import UrlJdkProvider

PROVIDERS: dict[ProviderId, type[JdkProvider]] = {
    ProviderId.LOCAL: LocalJdkProvider,
    ProviderId.URL: UrlJdkProvider,
}


def make_provider(provider_id: ProviderId | str, context: ProviderContext) -> JdkProvider:
    """Instantiate the provider registered for ``provider_id``."""
    try:
        key = ProviderId(str(getattr(provider_id, "value", provider_id)).upper())
    except ValueError:
        known = ", ".join(p.value for p in ProviderId)
        raise ProviderFailure(f"Unsupported provider '{provider_id}'. Valid: {known}") from None
    return PROVIDERS[key](context)


__all__ = [
    "JdkProvider",
    "LocalJdkProvider",
    "PROVIDERS",
    "ProviderContext",
    "UrlJdkProvider",
    "has_jmods",
    "is_offline_mode",
    "make_provider",
]
