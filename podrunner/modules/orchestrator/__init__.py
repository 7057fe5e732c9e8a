"""
Orchestrator Module - Black Box Interface

Purpose: Run one execute request end to end
Interface: ExecutionOrchestrator.execute(), ExecutionOrchestrator.list_scripts()
Hidden: Pipeline ordering, tracking lifecycle, error correlation

The only place where the other modules meet.
"""

from .orchestrator import ExecutionOrchestrator, ExecutionOutcome, ExecutionRequest

__all__ = ["ExecutionOrchestrator", "ExecutionOutcome", "ExecutionRequest"]
