"""Layout analytics: live critical path and post-run utilization."""

from factory_flow.analysis.critical_path import analyze, analyze_graph
from factory_flow.analysis.stats import summarize

__all__ = [
    "analyze",
    "analyze_graph",
    "summarize",
]
