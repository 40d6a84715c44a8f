from .providers import ConfigProvider, DictProvider, DefaultsProvider
from .settings import AthenaSettings, LoggingSettings, RenderSettings, loadSettings

__all__ = [
    "ConfigProvider",
    "DictProvider",
    "DefaultsProvider",
    "AthenaSettings",
    "LoggingSettings",
    "RenderSettings",
    "loadSettings",
]
