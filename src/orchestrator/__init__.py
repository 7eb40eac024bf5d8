"""Pipeline wiring the parser, the propagation engine and the viewers."""

from .orchestrator import PipelineResult, build_parser, main, run_pipeline, write_trace
from . import log

__all__ = [
    "PipelineResult",
    "build_parser",
    "log",
    "main",
    "run_pipeline",
    "write_trace",
]
