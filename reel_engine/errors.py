class ReelError(Exception):
    """Base class for failures raised while generating a reel"""


class ConfigurationError(ReelError):
    """Missing credential or required input file/directory"""


class ParseError(ReelError):
    """Model output was not in the expected structured shape"""


class MediaProbeError(ReelError):
    """ffmpeg could not report the metadata we need (duration, streams)"""


class SegmentExtractionError(ReelError):
    """ffmpeg failed while cutting, looping or resizing the b-roll"""


class CompositionError(ReelError):
    """ffmpeg failed while building the final reel"""
