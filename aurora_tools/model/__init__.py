"""Aurora Model - architecture model exports and loading"""

from .architecture import (
    Component,
    Architecture,
    ArchitectureModel,
    ModelLoader,
    build_architecture,
    model_from_dict,
    get_model_loader,
    load_model,
)

__all__ = [
    "Component",
    "Architecture",
    "ArchitectureModel",
    "ModelLoader",
    "build_architecture",
    "model_from_dict",
    "get_model_loader",
    "load_model",
]
