"""Pipeline package: orchestration, concurrency limits and progress delivery."""

from repograph.pipeline.limiter import ConcurrencyLimiter
from repograph.pipeline.orchestrator import GraphPipeline, GraphStore, stream_pipeline
from repograph.pipeline.progress import ProgressChannel, ProgressEvent, ProgressReporter

__all__ = [
    "ConcurrencyLimiter",
    "GraphPipeline",
    "GraphStore",
    "stream_pipeline",
    "ProgressChannel",
    "ProgressEvent",
    "ProgressReporter",
]
