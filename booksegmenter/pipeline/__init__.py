"""Segmentation pipeline package.

This package contains orchestration, stage execution, telemetry, and artifact
serialization helpers for full book segmentation runs.
"""

from .orchestrator import BookSegmenterPipeline

__all__ = ["BookSegmenterPipeline"]
