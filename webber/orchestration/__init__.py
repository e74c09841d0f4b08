"""Orchestration module for Webber."""

from .pipeline import ClickPackagePipeline, build_package, error_kind_for

__all__ = [
    "ClickPackagePipeline",
    "build_package",
    "error_kind_for",
]
