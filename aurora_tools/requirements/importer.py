"""
Aurora Requirements Importer
Import requirements from the Excel requirements sheet into the requirement store

Expected columns (fixed layout, sheet "NRC REQ" by default):
  A: Requirement ID
  B: Requirement Title
  C: Main Text (Description)
  D: Rationale
  E: Additional Notes
  F: Verification Method

A header row is optional. The first row is skipped when its first cell
mentions "Requirement" or "Competition"; later rows whose ID mentions
either word are skipped as well.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

import openpyxl

from ..core.config import AuroraConfig, get_config
from ..core.exceptions import RequirementImportError
from .persistence import RequirementStore

logger = logging.getLogger(__name__)

NUM_COLUMNS = 6


@dataclass
class RowError:
    """A row that could not be imported"""
    row_number: int
    req_id: str
    message: str


@dataclass
class ImportResult:
    """Outcome of a requirements import"""
    store_path: str
    created: int = 0
    updated: int = 0
    skipped_header: bool = False
    errors: List[RowError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.created + self.updated


def normalize_cell(value: Any) -> str:
    """Cell value as trimmed text; empty cells and NaN become ''"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def build_keywords(verification_method: str, notes: str) -> List[str]:
    """Verification method and notes are carried as keywords"""
    keywords = []
    if verification_method:
        keywords.append(f"Verification: {verification_method}")
    if notes and notes != "N/A":
        keywords.append(f"Notes: {notes}")
    return keywords


class RequirementImporter:
    """
    Upsert requirements from a worksheet into a RequirementStore.

    Existing requirements (matched by ID) are updated in place, new ones
    are created. A row that fails is logged and skipped; the store is
    saved once after all rows have been processed.
    """

    def __init__(self, config: Optional[AuroraConfig] = None):
        self.config = config or get_config()
        self.header_keywords = tuple(k.lower() for k in self.config.requirements.header_keywords)

    def is_header_value(self, value: str) -> bool:
        value_lower = value.lower()
        return any(keyword in value_lower for keyword in self.header_keywords)

    def read_rows(self, excel_file: Path, sheet_name: str) -> Tuple[List[Tuple[int, List[str]]], bool]:
        """
        Read and normalize the data rows of the requirements sheet

        Returns:
            (rows as (row_number, six values), whether a header row was skipped)

        Raises:
            RequirementImportError: If the file or sheet cannot be read
        """
        if not excel_file.exists():
            raise RequirementImportError(f"File not found: {excel_file}")

        try:
            wb = openpyxl.load_workbook(excel_file, read_only=True, data_only=True)
        except Exception as e:
            raise RequirementImportError(f"Could not open {excel_file}: {e}") from e

        try:
            if sheet_name not in wb.sheetnames:
                raise RequirementImportError(f"Sheet '{sheet_name}' not found in {excel_file}")

            rows: List[Tuple[int, List[str]]] = []
            for row_number, raw in enumerate(wb[sheet_name].iter_rows(values_only=True), 1):
                values = [normalize_cell(v) for v in list(raw)[:NUM_COLUMNS]]
                values += [""] * (NUM_COLUMNS - len(values))
                rows.append((row_number, values))
        finally:
            wb.close()

        skipped_header = False
        if rows and self.is_header_value(rows[0][1][0]):
            rows = rows[1:]
            skipped_header = True
            logger.info("Skipped header row")

        return rows, skipped_header

    def import_file(
        self,
        excel_file: Optional[Union[str, Path]] = None,
        store_path: Optional[Union[str, Path]] = None,
        sheet_name: Optional[str] = None
    ) -> ImportResult:
        """
        Import every requirement row of the sheet

        Raises:
            RequirementImportError: If the workbook or sheet cannot be read
        """
        excel_file = Path(excel_file or self.config.requirements_workbook)
        store_path = Path(store_path or self.config.requirements_store)
        sheet_name = sheet_name or self.config.requirements.sheet_name

        logger.info(f"Reading Excel file: {excel_file}")
        rows, skipped_header = self.read_rows(excel_file, sheet_name)
        logger.info(f"Found {len(rows)} requirements")

        store = RequirementStore.open(store_path)
        result = ImportResult(store_path=str(store_path), skipped_header=skipped_header)

        logger.info("Importing requirements...")
        for row_number, values in rows:
            req_id = values[0]

            if not req_id:
                continue
            if self.is_header_value(req_id):
                continue

            try:
                action = self._apply_row(store, values)
            except Exception as e:
                logger.error(f"  ERROR importing {req_id}: {e}")
                result.errors.append(RowError(row_number=row_number, req_id=req_id, message=str(e)))
                continue

            if action == "Created":
                result.created += 1
            else:
                result.updated += 1
            logger.info(f"  {action}: {req_id} - {values[1]}")

        store.save()

        logger.info("=== Import Complete ===")
        logger.info(f"Requirement set saved to: {store_path}")
        logger.info(f"  Created: {result.created}")
        logger.info(f"  Updated: {result.updated}")
        logger.info(f"  Total:   {result.total}")

        return result

    @staticmethod
    def _apply_row(store: RequirementStore, values: Sequence[str]) -> str:
        req_id, title, main_text, rationale, notes, verification_method = values[:NUM_COLUMNS]

        req = store.find(req_id)
        if req is not None:
            action = "Updated"
        else:
            req = store.add(req_id, title)
            action = "Created"

        req.summary = title
        if main_text:
            req.description = main_text
        if rationale:
            req.rationale = rationale

        keywords = build_keywords(verification_method, notes)
        if keywords:
            req.keywords = keywords

        return action


def import_requirements(
    model_name: Optional[str] = None,
    excel_file: Optional[Union[str, Path]] = None,
    config: Optional[AuroraConfig] = None
) -> ImportResult:
    """
    Import requirements from Excel into the requirement store

    Args:
        model_name: Model the requirement set belongs to (default from configuration)
        excel_file: Requirements workbook (default: ModelData/Aurora Requirements.xlsx)
        config: Configuration (global configuration when omitted)
    """
    config = config or get_config()
    model_name = model_name or config.model.default_model_name

    logger.info("=== Requirements Import ===")
    result = RequirementImporter(config).import_file(excel_file)
    logger.info(f"Requirement set ready to link to model: {model_name}")
    return result
