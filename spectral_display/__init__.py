"""Live spectral display pipeline: smoothing, averaging, zoom and outline geometry."""

__version__ = "0.1.0"
