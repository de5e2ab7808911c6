"""
Tile-set generation pipeline.

Runs enumeration, mesh authoring and export as one staged job.
"""

from .tileset_pipeline import (
    TileSetPipeline,
    PipelineSettings,
    PipelineResult,
    PipelineProgress,
    PipelineStage,
    PipelineError,
    GenerationCancelledException,
)

__all__ = [
    'TileSetPipeline',
    'PipelineSettings',
    'PipelineResult',
    'PipelineProgress',
    'PipelineStage',
    'PipelineError',
    'GenerationCancelledException',
]
