"""Aurora Core - configuration and shared errors"""

from .config import (
    AuroraConfig,
    PathConfig,
    ModelConfig,
    RequirementsConfig,
    ReportConfig,
    get_config,
    set_config,
)
from .exceptions import (
    AuroraError,
    ModelLoadError,
    ExportError,
    RequirementImportError,
    DisplayUnavailableError,
)

__all__ = [
    "AuroraConfig",
    "PathConfig",
    "ModelConfig",
    "RequirementsConfig",
    "ReportConfig",
    "get_config",
    "set_config",
    "AuroraError",
    "ModelLoadError",
    "ExportError",
    "RequirementImportError",
    "DisplayUnavailableError",
]
