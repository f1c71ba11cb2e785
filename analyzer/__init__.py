"""
Elevator Run Analyzer

Derived metrics and reporting for finished (or in-progress) runs.

Components:
- TimeBreakdown / compute_breakdown: aggregate phase durations
- format_step: step-by-step text for a single event
- RunStatistics: event recorder, console summary, JSON Lines log, route diagram
"""

__version__ = "0.1.0"

from .statistics import (
    RunStatistics,
    TimeBreakdown,
    compute_breakdown,
    format_step,
    route_profile,
)

__all__ = ['RunStatistics', 'TimeBreakdown', 'compute_breakdown', 'format_step', 'route_profile']
