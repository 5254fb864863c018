"""
Aurora Configuration
Environment-based configuration for the model tooling
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class PathConfig:
    """Project folders used by the tools"""
    project_root: Path = field(default_factory=Path.cwd)

    # Architecture model exports (<name>.json)
    model_dir: Optional[Path] = None

    # Requirements workbook and requirement store live here
    model_data_dir: Optional[Path] = None

    # Reports are always written to the Tools folder
    output_dir: Optional[Path] = None

    def __post_init__(self):
        """Load from environment variables"""
        self.project_root = Path(os.getenv("AURORA_PROJECT_ROOT", self.project_root))
        self.model_dir = Path(os.getenv("AURORA_MODEL_DIR", self.model_dir or self.project_root))
        self.model_data_dir = Path(self.model_data_dir or self.project_root / "ModelData")
        self.output_dir = Path(os.getenv("AURORA_OUTPUT_DIR", self.output_dir or self.project_root / "Tools"))


@dataclass
class ModelConfig:
    """Architecture model settings"""
    default_model_name: str = "NRC_Template"
    model_file_suffix: str = ".json"

    def __post_init__(self):
        self.default_model_name = os.getenv("AURORA_MODEL_NAME", self.default_model_name)


@dataclass
class RequirementsConfig:
    """Requirements import settings"""
    workbook_name: str = "Aurora Requirements.xlsx"
    sheet_name: str = "NRC REQ"
    store_name: str = "Aurora_Requirements.db"

    # Explicit overrides (absolute or relative to the working directory)
    workbook_path: Optional[Path] = None
    store_path: Optional[Path] = None

    # First-cell keywords that mark a header row
    header_keywords: tuple = ("Requirement", "Competition")

    def __post_init__(self):
        """Load from environment variables"""
        workbook = os.getenv("AURORA_REQUIREMENTS_FILE")
        if workbook:
            self.workbook_path = Path(workbook)
        store = os.getenv("AURORA_REQUIREMENTS_DB")
        if store:
            self.store_path = Path(store)
        self.sheet_name = os.getenv("AURORA_REQUIREMENTS_SHEET", self.sheet_name)


@dataclass
class ReportConfig:
    """Report generation settings"""
    # Cosmetic styling is a best-effort post-processing step
    enable_formatting: bool = True

    # Breakdown reports refresh OccurrenceProperties.xlsx first
    refresh_properties: bool = True

    occurrence_export_name: str = "OccurrenceProperties"

    def __post_init__(self):
        self.enable_formatting = _env_flag("AURORA_FORMAT_REPORTS", self.enable_formatting)
        self.refresh_properties = _env_flag("AURORA_REFRESH_PROPERTIES", self.refresh_properties)


@dataclass
class AuroraConfig:
    """Master configuration for the Aurora model tools"""
    paths: PathConfig = field(default_factory=PathConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    requirements: RequirementsConfig = field(default_factory=RequirementsConfig)
    reports: ReportConfig = field(default_factory=ReportConfig)

    @classmethod
    def from_env(cls) -> "AuroraConfig":
        """Create configuration from environment variables"""
        return cls(
            paths=PathConfig(),
            model=ModelConfig(),
            requirements=RequirementsConfig(),
            reports=ReportConfig()
        )

    @classmethod
    def for_root(cls, project_root: Path) -> "AuroraConfig":
        """Configuration with every folder placed under project_root"""
        root = Path(project_root)
        return cls(
            paths=PathConfig(
                project_root=root,
                model_dir=root,
                model_data_dir=root / "ModelData",
                output_dir=root / "Tools"
            )
        )

    @property
    def requirements_workbook(self) -> Path:
        return self.requirements.workbook_path or self.paths.model_data_dir / self.requirements.workbook_name

    @property
    def requirements_store(self) -> Path:
        return self.requirements.store_path or self.paths.model_data_dir / self.requirements.store_name

    def validate(self) -> list:
        """Validate configuration and return list of issues"""
        issues = []

        if not self.paths.model_dir.is_dir():
            issues.append(f"Model directory does not exist: {self.paths.model_dir}")
        if not self.requirements_workbook.exists():
            issues.append(f"Requirements workbook not found: {self.requirements_workbook}")
        if not self.model.model_file_suffix.startswith("."):
            issues.append(f"Model file suffix must start with '.': {self.model.model_file_suffix}")

        return issues


# Global configuration instance
_config: Optional[AuroraConfig] = None


def get_config() -> AuroraConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = AuroraConfig.from_env()
    return _config


def set_config(config: Optional[AuroraConfig]) -> None:
    """Set the global configuration instance (None resets to environment defaults)"""
    global _config
    _config = config
