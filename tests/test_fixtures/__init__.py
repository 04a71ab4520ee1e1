"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .dataset_factory import DatasetFactory

__all__ = ["DatasetFactory"]
