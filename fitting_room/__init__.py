"""Virtual Fitting Room: multi-garment try-on and size-fit rendering."""

from .config import PipelineConfig, load_config
from .errors import (
    FittingRoomError,
    MissingInput,
    AnalysisFailed,
    NoImageProduced,
    CapabilityUnavailable,
    CapabilityCallFailed,
)
from .pipeline import TryOnPipeline
from .agents import SizeAdvisor

__all__ = [
    "PipelineConfig",
    "load_config",
    "FittingRoomError",
    "MissingInput",
    "AnalysisFailed",
    "NoImageProduced",
    "CapabilityUnavailable",
    "CapabilityCallFailed",
    "TryOnPipeline",
    "SizeAdvisor",
]
