"""Trace and step builders plus the configuration facade.

@public
"""

from xray_core.tracer.builders import OnTraceCallback, StepBuilder, TraceBuilder
from xray_core.tracer.xray import XRay, configure, get_xray, reset, trace

__all__ = [
    "OnTraceCallback",
    "StepBuilder",
    "TraceBuilder",
    "XRay",
    "configure",
    "get_xray",
    "reset",
    "trace",
]
