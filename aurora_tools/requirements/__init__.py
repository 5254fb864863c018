"""Aurora Requirements - spreadsheet import and the requirement store"""

from .persistence import RequirementRecord, RequirementStore
from .importer import (
    ImportResult,
    RowError,
    RequirementImporter,
    import_requirements,
    normalize_cell,
    build_keywords,
)

__all__ = [
    "RequirementRecord",
    "RequirementStore",
    "ImportResult",
    "RowError",
    "RequirementImporter",
    "import_requirements",
    "normalize_cell",
    "build_keywords",
]
