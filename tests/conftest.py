"""
Aurora Test Configuration
=========================

Fixtures:
- Isolated configuration rooted at tmp_path
- Rocket model: a small component tree with occurrence numbers,
  part numbers and numeric properties (in memory and as a JSON export)
- Requirements workbook writer
- tkinter stand-in for machines without a display
"""

import json
import os
import sys
import types
from typing import Any, Dict, List

import pytest
from openpyxl import Workbook

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from aurora_tools.core.config import AuroraConfig, set_config
from aurora_tools.model.architecture import ModelLoader, model_from_dict


AURORA_ENV_VARS = [
    "AURORA_PROJECT_ROOT",
    "AURORA_MODEL_DIR",
    "AURORA_OUTPUT_DIR",
    "AURORA_MODEL_NAME",
    "AURORA_REQUIREMENTS_FILE",
    "AURORA_REQUIREMENTS_SHEET",
    "AURORA_REQUIREMENTS_DB",
    "AURORA_FORMAT_REPORTS",
    "AURORA_REFRESH_PROPERTIES",
]


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (workbooks and files on disk)")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """No AURORA_* variables leak in, and the global configuration is reset afterwards"""
    for name in AURORA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def config(tmp_path):
    """Configuration with every folder under tmp_path, installed globally"""
    cfg = AuroraConfig.for_root(tmp_path)
    set_config(cfg)
    return cfg


@pytest.fixture
def loader(config):
    return ModelLoader(config)


# =============================================================================
# Rocket Model Fixture
# =============================================================================

def part(**props) -> Dict[str, Any]:
    """Stereotype properties under the AuroraProfile.Part stereotype"""
    return {f"AuroraProfile.Part.{name}": value for name, value in props.items()}


ROCKET_MODEL = {
    "name": "NRC_Template",
    "architecture": {
        "components": [
            {
                "name": "Nose Cone",
                "properties": part(OccuranceNumber="OCC-001", PartNumber="PN-100",
                                   Mass=1.5, Cost="250", AirResistance=12.0),
            },
            {
                "name": "Body Tube",
                "properties": part(OccurrenceNumber="OCC-002", PartNumber="",
                                   Mass="3.25", Cost=400),
                "architecture": {
                    "components": [
                        {
                            "name": "Fin 1",
                            "properties": {
                                "AuroraProfile.Fin.occurrenceNUMBER": "OCC-003",
                                "AuroraProfile.Fin.PartNumber": "PN-300",
                                "AuroraProfile.Fin.Mass": 0.5,
                                "AuroraProfile.Fin.Cost": 20,
                                "AuroraProfile.Fin.AirResistance": "2.5",
                            },
                        },
                        {
                            "name": "Fin 2",
                            "properties": {
                                "AuroraProfile.Fin.OCCURANCENUMBER": "OCC-003",
                                "AuroraProfile.Fin.PartNumber": "PN-301",
                                "AuroraProfile.Fin.Mass": 0.5,
                                "AuroraProfile.Fin.Cost": 20,
                                "AuroraProfile.Fin.AirResistance": "n/a",
                            },
                        },
                        {
                            "name": "Bracket",
                            "properties": part(Mass=9.9),
                            "architecture": {
                                "components": [
                                    {
                                        "name": "Bolt",
                                        "properties": part(OccuranceNumber="OCC-004", Mass=0.01),
                                    },
                                ]
                            },
                        },
                    ]
                },
            },
            {
                "name": "Payload Bay",
            },
            {
                "name": "Recovery",
                "properties": part(OccuranceNumber=7, Mass={"value": 2.0, "unit": "kg"},
                                   Deployed=True),
            },
        ]
    },
}

ROCKET_TOTAL_MASS = 1.5 + 3.25 + 0.5 + 0.5 + 0.01 + 2.0
ROCKET_TOTAL_COST = 250 + 400 + 20 + 20
ROCKET_TOTAL_AIR_RESISTANCE = 12.0 + 2.5


@pytest.fixture
def rocket_model_data() -> Dict[str, Any]:
    return json.loads(json.dumps(ROCKET_MODEL))


@pytest.fixture
def rocket_model(rocket_model_data):
    """In-memory ArchitectureModel"""
    return model_from_dict(rocket_model_data)


@pytest.fixture
def write_model(config):
    """Write a model export into the configured model directory"""
    def _write(data: Dict[str, Any], name: str = "NRC_Template"):
        path = config.paths.model_dir / f"{name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def model_file(write_model, rocket_model_data):
    return write_model(rocket_model_data)


# =============================================================================
# Requirements Workbook Fixture
# =============================================================================

REQUIREMENTS_HEADER = [
    "Requirement ID", "Requirement Title", "Main Text", "Rationale",
    "Additional Notes", "Verification Method",
]


@pytest.fixture
def write_requirements(tmp_path):
    """Write rows to a requirements workbook and return its path"""
    def _write(rows: List[List[Any]], sheet_name: str = "NRC REQ", file_name: str = "Aurora Requirements.xlsx"):
        path = tmp_path / "ModelData" / file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name
        for row in rows:
            ws.append(row)
        wb.save(path)
        return path
    return _write


# =============================================================================
# Headless Display Fixture
# =============================================================================

@pytest.fixture
def headless_tkinter(monkeypatch):
    """tkinter whose Tk() fails the way it does without a display"""
    tk = types.ModuleType("tkinter")

    class TclError(Exception):
        pass

    def Tk():
        raise TclError("no display name and no $DISPLAY environment variable")

    tk.TclError = TclError
    tk.Tk = Tk
    tk.messagebox = types.ModuleType("tkinter.messagebox")

    monkeypatch.setitem(sys.modules, "tkinter", tk)
    monkeypatch.setitem(sys.modules, "tkinter.messagebox", tk.messagebox)
    return tk
