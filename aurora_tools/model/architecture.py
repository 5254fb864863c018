"""
Aurora Architecture Model
File-backed component hierarchy exported from the architecture modeling tool

A model export is a JSON document:

    {
      "name": "NRC_Template",
      "architecture": {
        "components": [
          {
            "name": "Nose Cone",
            "properties": {
              "AuroraProfile.Part.OccuranceNumber": "OCC-001",
              "AuroraProfile.Part.Mass": {"value": 1.2, "unit": "kg"}
            },
            "architecture": {"components": [...]}
          }
        ]
      }
    }

Property keys are stereotype property paths (Profile.Stereotype.Property).
A property value is either a plain JSON value or an object with a "value"
entry; units and other metadata are kept but not interpreted.

Usage:
    from aurora_tools.model import ModelLoader

    loader = ModelLoader()
    model = loader.load("NRC_Template")
    for component in model.architecture.components:
        print(component.name, component.get_stereotype_properties())
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.config import AuroraConfig, get_config
from ..core.exceptions import ModelLoadError

logger = logging.getLogger(__name__)


class Component:
    """A node in the architecture with stereotype properties and an optional sub-architecture"""

    def __init__(
        self,
        name: str,
        properties: Optional[Dict[str, Any]] = None,
        architecture: Optional["Architecture"] = None,
        parent: Optional["Architecture"] = None
    ):
        self.name = name
        self._properties: Dict[str, Any] = dict(properties or {})
        self.architecture = architecture
        self.parent = parent
        if architecture is not None:
            architecture.owner = self

    def get_stereotype_properties(self) -> List[str]:
        """Property paths applied to this component, in declaration order"""
        return list(self._properties.keys())

    def get_property_value(self, path: str) -> Any:
        """
        Value of a stereotype property.

        Raises:
            KeyError: If the component has no property at that path
        """
        if path not in self._properties:
            raise KeyError(f"Component '{self.name}' has no property '{path}'")
        value = self._properties[path]
        if isinstance(value, dict) and "value" in value:
            return value["value"]
        return value

    @property
    def full_name(self) -> str:
        """Slash separated path from the model root, e.g. NRC_Template/Body/Fin"""
        parent_name = self.parent.full_name if self.parent is not None else ""
        if not parent_name:
            return self.name
        return f"{parent_name}/{self.name}"

    def __repr__(self) -> str:
        return f"Component({self.name!r})"


class Architecture:
    """An ordered set of components owned by a model or by a component"""

    def __init__(self, components: Optional[List[Component]] = None, owner: Any = None):
        self.components: List[Component] = list(components or [])
        self.owner = owner
        for component in self.components:
            component.parent = self

    @property
    def full_name(self) -> str:
        if self.owner is None:
            return ""
        return self.owner.full_name

    def __repr__(self) -> str:
        return f"Architecture({len(self.components)} components)"


class ArchitectureModel:
    """A loaded architecture model"""

    def __init__(self, name: str, architecture: Architecture, source: Optional[Path] = None):
        self.name = name
        self.architecture = architecture
        self.source = source
        architecture.owner = self

    @property
    def full_name(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ArchitectureModel({self.name!r})"


def build_architecture(data: Dict[str, Any]) -> Architecture:
    """Build an Architecture from its JSON representation"""
    components = []
    for entry in data.get("components", []) or []:
        if not isinstance(entry, dict) or "name" not in entry:
            raise ValueError(f"Component entry without a name: {entry!r}")

        child_data = entry.get("architecture")
        child_arch = build_architecture(child_data) if child_data else None

        component = Component(
            name=str(entry["name"]),
            properties=entry.get("properties") or {},
            architecture=child_arch
        )
        components.append(component)

    return Architecture(components)


def model_from_dict(data: Dict[str, Any], default_name: str = "", source: Optional[Path] = None) -> ArchitectureModel:
    """Build an ArchitectureModel from a parsed JSON document"""
    if not isinstance(data, dict):
        raise ValueError("Model document must be a JSON object")
    name = str(data.get("name") or default_name)
    architecture = build_architecture(data.get("architecture") or {})
    return ArchitectureModel(name, architecture, source=source)


class ModelLoader:
    """
    Locates and loads architecture model exports.

    Loaded models are cached by resolved file for the lifetime of the
    loader, so several reports in one session share a single parse. A name
    loaded without an explicit file returns the model last loaded under it.
    """

    def __init__(self, config: Optional[AuroraConfig] = None):
        self.config = config or get_config()
        self._loaded: Dict[Path, ArchitectureModel] = {}
        self._by_name: Dict[str, Path] = {}

    def is_loaded(self, name: str) -> bool:
        return name in self._by_name

    def candidate_paths(self, name: str, file_path: Optional[Path] = None) -> List[Path]:
        """Locations searched for a model, in order"""
        suffix = self.config.model.model_file_suffix
        file_name = name if name.endswith(suffix) else f"{name}{suffix}"

        candidates = [
            Path.cwd() / file_name,
            Path(self.config.paths.model_dir) / file_name,
        ]
        if file_path is not None:
            candidates.append(Path(file_path))
        elif Path(name).suffix == suffix:
            candidates.append(Path(name))

        # Keep order, drop duplicates
        unique: List[Path] = []
        for candidate in candidates:
            if candidate not in unique:
                unique.append(candidate)
        return unique

    def load(self, name: str, file_path: Optional[Path] = None) -> ArchitectureModel:
        """
        Load a model by name, falling back to an explicit file path.

        Raises:
            ModelLoadError: If no candidate exists or the export cannot be parsed
        """
        if file_path is None and name in self._by_name:
            return self._loaded[self._by_name[name]]

        candidates = self.candidate_paths(name, file_path)
        path = next((c for c in candidates if c.is_file()), None)
        if path is None:
            searched = ", ".join(str(c) for c in candidates)
            raise ModelLoadError(f"Failed to load model: {name}\nError: not found (searched {searched})")

        key = path.resolve()
        model = self._loaded.get(key)
        if model is None:
            logger.info(f"Loading model from: {path}")
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                model = model_from_dict(data, default_name=Path(name).stem, source=path)
            except (OSError, ValueError) as e:
                raise ModelLoadError(f"Failed to load model: {name}\nError: {e}") from e
            self._loaded[key] = model

        self._by_name[name] = key
        return model

    def clear(self) -> None:
        self._loaded.clear()
        self._by_name.clear()


# Shared loader for a session
_loader: Optional[ModelLoader] = None


def get_model_loader() -> ModelLoader:
    """Get the shared model loader, rebuilt whenever the global configuration changes"""
    global _loader
    config = get_config()
    if _loader is None or _loader.config is not config:
        _loader = ModelLoader(config)
    return _loader


def load_model(name: str, file_path: Optional[Path] = None, loader: Optional[ModelLoader] = None) -> ArchitectureModel:
    """Load a model through the given loader or the shared one"""
    return (loader or get_model_loader()).load(name, file_path)
