from .config import ReelConfig
from .errors import (
    CompositionError,
    ConfigurationError,
    MediaProbeError,
    ParseError,
    ReelError,
    SegmentExtractionError,
)
from .pipelines import CodingChallengePipeline, ReadCaptionPipeline

__version__ = "0.1.0"

__all__ = [
    "ReelConfig",
    "CodingChallengePipeline",
    "ReadCaptionPipeline",
    "ReelError",
    "ConfigurationError",
    "ParseError",
    "MediaProbeError",
    "SegmentExtractionError",
    "CompositionError",
]
