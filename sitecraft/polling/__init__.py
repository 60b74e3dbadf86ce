"""
Polling

A single generic poll utility plus the analysis-specific controller built on it.
"""

from .poller import PollConfig, PollOutcome, PollResult, poll
from .controller import AnalysisPoller, is_transient_error

__all__ = [
    "PollConfig",
    "PollOutcome",
    "PollResult",
    "poll",
    "AnalysisPoller",
    "is_transient_error",
]
