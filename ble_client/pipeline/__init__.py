"""Scan pipeline - orquestación por anuncio."""

from .scan_pipeline import ScanPipeline
from .stats import PipelineStats

__all__ = ["ScanPipeline", "PipelineStats"]
