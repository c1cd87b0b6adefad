from .loader import load_config
from .models import (
    CatalogDiffConfig,
    CompatibilityConfig,
    IdentityConfig,
    LifecycleConfig,
    LimitsConfig,
    ReleaseConfig,
)

__all__ = [
    "CatalogDiffConfig",
    "CompatibilityConfig",
    "IdentityConfig",
    "LifecycleConfig",
    "LimitsConfig",
    "ReleaseConfig",
    "load_config",
]
