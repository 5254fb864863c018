"""
Aurora Backend: Occurrence Data Extractor
Walks the component hierarchy and groups components by occurrence number

Stereotype properties are discovered dynamically on every component, so
the extractor does not depend on any particular profile or stereotype name.
The profile historically spells the key "OccuranceNumber"; both spellings
are matched case-insensitively.

Usage:
    from aurora_tools.backend.extractor import extract_occurrence_data

    groups = extract_occurrence_data("NRC_Template")
    for group in groups:
        print(group.occurrence_number, group.component_names)
"""

import logging
import re
from typing import Any, Dict, List, Optional, Union

from ..model.architecture import ArchitectureModel, ModelLoader, load_model
from .models import ComponentRecord, OccurrenceGroup, PropertyKind, PropertyValue, format_number

logger = logging.getLogger(__name__)

OCCURRENCE_KEY_PATTERNS = ("occurrencenumber", "occurancenumber")
PART_NUMBER_PROPERTY = "PartNumber"

ModelRef = Union[str, ArchitectureModel]


def is_occurrence_property(property_name: str) -> bool:
    """True for any property name containing either spelling of OccurrenceNumber"""
    name_lower = property_name.lower()
    return any(pattern in name_lower for pattern in OCCURRENCE_KEY_PATTERNS)


def sanitize_field_name(property_name: str) -> str:
    """Turn a property name into a safe identifier"""
    field_name = re.sub(r'[^a-zA-Z0-9_]', '_', property_name)
    if field_name and not field_name[0].isalpha():
        field_name = f"prop_{field_name}"
    if not field_name:
        field_name = "property"
    return field_name


def value_to_string(value: PropertyValue) -> str:
    """Occurrence and part numbers are compared as text"""
    if value.kind == PropertyKind.NUMBER:
        return format_number(value.raw)
    if value.kind == PropertyKind.STRING:
        return value.raw
    return value.as_text()


class OccurrenceExtractor:
    """
    Extract occurrence groups from an architecture.

    Traversal is depth-first and pre-order: a component is visited before
    its children, and its children before its next sibling. A component
    without an occurrence number is left out of every group but its
    children are still visited.
    """

    def __init__(self):
        self._groups: Dict[str, OccurrenceGroup] = {}

    def extract(self, architecture: Any) -> List[OccurrenceGroup]:
        """Groups sorted by occurrence number"""
        self._groups = {}
        self._process_components(architecture)
        return [self._groups[key] for key in sorted(self._groups)]

    def _process_components(self, architecture: Any) -> None:
        for component in list(architecture.components):
            record = self._read_component(component)

            if record is not None:
                group = self._groups.get(record.occurrence_number)
                if group is None:
                    group = OccurrenceGroup(occurrence_number=record.occurrence_number)
                    self._groups[record.occurrence_number] = group
                group.components.append(record)

            child_arch = self._child_architecture(component)
            if child_arch is not None:
                self._process_components(child_arch)

    def _read_component(self, component: Any) -> Optional[ComponentRecord]:
        """Read every stereotype property; None when the component has no occurrence number"""
        occurrence_number = ""
        part_number = ""
        properties: Dict[str, PropertyValue] = {}

        try:
            property_paths = component.get_stereotype_properties() or []
        except Exception as e:
            logger.debug(f"No stereotype properties on {getattr(component, 'name', component)}: {e}")
            property_paths = []

        for prop_path in property_paths:
            try:
                value = PropertyValue.from_raw(component.get_property_value(prop_path))
            except Exception as e:
                logger.debug(f"Skipping unreadable property {prop_path}: {e}")
                continue

            prop_name = str(prop_path).split(".")[-1]

            if is_occurrence_property(prop_name) and not value.is_empty():
                occurrence_number = value_to_string(value)

            if prop_name.lower() == PART_NUMBER_PROPERTY.lower() and not value.is_empty():
                part_number = value_to_string(value)

            properties[sanitize_field_name(prop_name)] = value

        if not occurrence_number:
            return None

        return ComponentRecord(
            name=component.name,
            path=self._component_path(component),
            occurrence_number=occurrence_number,
            part_number=part_number,
            properties=properties
        )

    @staticmethod
    def _child_architecture(component: Any) -> Optional[Any]:
        """Sub-architecture of a component, None for leaves"""
        try:
            child_arch = component.architecture
            if child_arch is not None and child_arch.components:
                return child_arch
        except Exception as e:
            logger.debug(f"Treating {getattr(component, 'name', component)} as a leaf: {e}")
        return None

    @staticmethod
    def _component_path(component: Any) -> str:
        try:
            return component.full_name
        except Exception:
            return component.name


def extract_occurrence_data(
    model: ModelRef,
    loader: Optional[ModelLoader] = None
) -> List[OccurrenceGroup]:
    """
    Extract occurrence groups from a model.

    Args:
        model: Model name (loaded through the model loader) or a loaded model
        loader: Optional model loader; the shared one is used otherwise

    Returns:
        Occurrence groups sorted by occurrence number

    Raises:
        ModelLoadError: If the model cannot be loaded
    """
    if isinstance(model, str):
        model = load_model(model, loader=loader)

    groups = OccurrenceExtractor().extract(model.architecture)
    logger.debug(f"Extracted {len(groups)} occurrence groups from {model.name}")
    return groups
