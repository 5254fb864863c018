"""
Aurora Backend: Data Models
Occurrence groups and the tagged property values carried by each component
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class PropertyKind(Enum):
    """Type tag of a stereotype property value"""
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    OTHER = "other"      # lists, nested objects, null


def format_number(value: float) -> str:
    """Render a number the way the reports show it: integral values without a decimal point"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return f"{value:.15g}"


@dataclass
class PropertyValue:
    """A stereotype property value with its type tag"""
    kind: PropertyKind
    raw: Any

    @classmethod
    def from_raw(cls, raw: Any) -> "PropertyValue":
        # bool is an int subclass, test it first
        if isinstance(raw, bool):
            return cls(PropertyKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return cls(PropertyKind.NUMBER, raw)
        if isinstance(raw, str):
            return cls(PropertyKind.STRING, raw)
        return cls(PropertyKind.OTHER, raw)

    def is_empty(self) -> bool:
        if self.raw is None:
            return True
        if self.kind == PropertyKind.STRING:
            return self.raw == ""
        if self.kind == PropertyKind.OTHER and isinstance(self.raw, (list, dict)):
            return len(self.raw) == 0
        return False

    def as_number(self) -> float:
        """
        Numeric reading used by the breakdown reports.

        Numbers pass through, numeric strings are parsed, anything else
        (booleans, unparsable strings, lists, null) reads as 0.
        """
        if self.kind == PropertyKind.NUMBER:
            value = float(self.raw)
            return value if not math.isnan(value) else 0.0
        if self.kind == PropertyKind.STRING:
            text = self.raw.strip()
            # float() also takes digit separators ("1_000"), which are not numbers here
            if "_" in text:
                return 0.0
            try:
                value = float(text)
            except ValueError:
                return 0.0
            return value if not math.isnan(value) else 0.0
        return 0.0

    def as_text(self) -> str:
        """Display string for the Properties sheet"""
        if self.kind == PropertyKind.NUMBER:
            return format_number(self.raw)
        if self.kind == PropertyKind.STRING:
            return self.raw
        if self.kind == PropertyKind.BOOLEAN:
            return "true" if self.raw else "false"
        if self.raw is None:
            return ""
        if isinstance(self.raw, list):
            return ", ".join(PropertyValue.from_raw(item).as_text() for item in self.raw)
        return str(self.raw)


@dataclass
class ComponentRecord:
    """One component instance that carries an occurrence number"""
    name: str
    path: str
    occurrence_number: str
    part_number: str = ""
    properties: Dict[str, PropertyValue] = field(default_factory=dict)

    def get_number(self, property_name: str) -> float:
        """Numeric value of a property, 0 when absent or not numeric"""
        value = self.properties.get(property_name)
        if value is None:
            return 0.0
        return value.as_number()


@dataclass
class OccurrenceGroup:
    """All components sharing one occurrence number"""
    occurrence_number: str
    components: List[ComponentRecord] = field(default_factory=list)

    @property
    def component_names(self) -> List[str]:
        return [c.name for c in self.components]

    @property
    def part_number(self) -> str:
        """First non-empty part number among the members"""
        for component in self.components:
            if component.part_number:
                return component.part_number
        return ""

    def __len__(self) -> int:
        return len(self.components)


@dataclass
class BreakdownRow:
    """One component row in a breakdown report"""
    occurrence_number: str
    component_name: str
    value: float


@dataclass
class BreakdownResult:
    """Result of a breakdown report run"""
    title: str
    header: str
    rows: List[BreakdownRow]
    total: float
    output_path: Optional[str] = None
    formatted: bool = False

    def table(self) -> List[List[Any]]:
        """Header, one row per component, and the TOTAL row"""
        data: List[List[Any]] = [["OccurrenceNumber", "ComponentName", self.header]]
        for row in self.rows:
            data.append([row.occurrence_number, row.component_name, row.value])
        data.append(["", "TOTAL", self.total])
        return data
