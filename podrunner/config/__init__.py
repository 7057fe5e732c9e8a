from .provider import (
    APIConfig,
    CatalogConfig,
    ConfigProvider,
    EnvConfigProvider,
    TargetConfig,
    TrackingConfig,
)

__all__ = [
    "APIConfig",
    "CatalogConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "TargetConfig",
    "TrackingConfig",
]
