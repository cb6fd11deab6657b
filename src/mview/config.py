"""Process-wide translator settings.

The only setting is the diagnostic fidelity toggle. It is read from the
``MVIEW_ENHANCED_DIAGNOSTICS`` environment variable on first use and may be set
explicitly, once, with :func:`configure` at build configuration time. It never
changes what code is generated.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENV_VAR = "MVIEW_ENHANCED_DIAGNOSTICS"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    enhanced_diagnostics: bool = False
    configured: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        value = os.environ.get(ENV_VAR, "")
        return cls(enhanced_diagnostics=value.strip().lower() in _TRUTHY)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(enhanced_diagnostics: bool) -> Settings:
    """Select basic or enhanced diagnostic rendering for this process.

    Repeating the call with the same value is a no-op; changing the value
    after it has been configured raises ``RuntimeError``.
    """
    settings = get_settings()
    if settings.configured and settings.enhanced_diagnostics != enhanced_diagnostics:
        raise RuntimeError("mview diagnostics are already configured for this process")
    settings.enhanced_diagnostics = enhanced_diagnostics
    settings.configured = True
    return settings
