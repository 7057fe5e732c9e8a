"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class CatalogConfig:
    """Script catalog configuration."""
    path: str
    cache_enabled: bool


@dataclass
class TargetConfig:
    """Execution target configuration."""
    namespace: str
    label_selector: str
    shell: str
    exec_timeout: float
    kubectl_timeout: float


@dataclass
class TrackingConfig:
    """Process tracking service configuration."""
    url: Optional[str]
    stage: str
    group: str
    timeout: float

    @property
    def is_configured(self) -> bool:
        """Check if process tracking is enabled."""
        return bool(self.url)


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_catalog_config(self) -> CatalogConfig:
        """Get script catalog configuration."""
        ...

    def get_target_config(self) -> TargetConfig:
        """Get execution target configuration."""
        ...

    def get_tracking_config(self) -> TrackingConfig:
        """Get process tracking configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_catalog_config(self) -> CatalogConfig:
        """Get script catalog configuration from environment variables."""
        return CatalogConfig(
            path=os.getenv("SCRIPTS_PATH", "/config/scripts.json"),
            cache_enabled=_env_flag("CATALOG_CACHE_ENABLED"),
        )

    def get_target_config(self) -> TargetConfig:
        """Get execution target configuration from environment variables."""
        return TargetConfig(
            namespace=os.getenv("NAMESPACE", "default"),
            label_selector=os.getenv("POD_LABEL_SELECTOR", "app=query-server"),
            shell=os.getenv("EXEC_SHELL", "/bin/bash"),
            exec_timeout=float(os.getenv("EXEC_TIMEOUT_SECONDS", "300")),
            kubectl_timeout=float(os.getenv("KUBECTL_TIMEOUT_SECONDS", "30")),
        )

    def get_tracking_config(self) -> TrackingConfig:
        """Get process tracking configuration from environment variables."""
        # Empty string disables tracking the same way an unset variable does
        url = os.getenv("PROCESS_TRACKING_SERVICE_URL") or None

        return TrackingConfig(
            url=url,
            stage=os.getenv("PROCESS_TRACKING_STAGE", "EXECUTION"),
            group=os.getenv("PROCESS_TRACKING_GROUP", "ScriptExecution"),
            timeout=float(os.getenv("PROCESS_TRACKING_TIMEOUT_SECONDS", "10")),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=_env_flag("API_DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
