"""Staging storage for Webber builds."""

from .staging import StagingArea

__all__ = ["StagingArea"]
