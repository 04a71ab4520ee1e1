"""
Data Layer

File-backed dataset models, the caching data manager and the directory
watcher that drives hot reload.
"""

from design_system.data.data_manager import (
    CachedDataset,
    DataManager,
    DataManagerConfig,
    LoadResult,
    ValidationReport,
)
from design_system.data.models import (
    AccessibilityInfo,
    Component,
    ComponentExample,
    ComponentProp,
    ComponentVariant,
    DesignToken,
    Guideline,
)

__all__ = [
    "AccessibilityInfo",
    "CachedDataset",
    "Component",
    "ComponentExample",
    "ComponentProp",
    "ComponentVariant",
    "DataManager",
    "DataManagerConfig",
    "DesignToken",
    "Guideline",
    "LoadResult",
    "ValidationReport",
]
