from .map_generator import MapGenerator, generate_map
from .options import DensityProfile, Difficulty, MapOptions, MapType
from .pipeline import GenerationContext, PipelineGenerator, create_pipeline

__all__ = [
    "DensityProfile",
    "Difficulty",
    "GenerationContext",
    "MapGenerator",
    "MapOptions",
    "MapType",
    "PipelineGenerator",
    "create_pipeline",
    "generate_map",
]
