"""Base exception shared by every pipeline stage.

WHY: Callers (CLI, tests, alternate front ends) need one type to catch
for "the run failed" while still being able to tell stages apart.

RULES:
- Each stage defines its own subclass next to the code that raises it
- ``stage`` names the failing stage for the one-line CLI diagnostic
"""

from __future__ import annotations


class TzLookupError(Exception):
    """Root of all tzlookup faults."""

    stage = "pipeline"


class PipelineCancelled(TzLookupError):
    """Raised when a caller-supplied cancel event stops the pipeline."""

    stage = "cancelled"
