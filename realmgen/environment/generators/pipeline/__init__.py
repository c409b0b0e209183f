"""Layer-based map generation pipeline."""

from .context import GenerationContext
from .factory import create_pipeline
from .layer import GenerationLayer
from .pipeline import PipelineGenerator

__all__ = [
    "GenerationContext",
    "GenerationLayer",
    "PipelineGenerator",
    "create_pipeline",
]
