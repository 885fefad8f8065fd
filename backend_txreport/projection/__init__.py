"""
Projection core: turns raw wallet transactions into report rows.

Pure and synchronous. Nothing here performs I/O or mutates its input;
each view re-derives its rows from the same transactions.
"""

from backend_txreport.projection.projector import ProjectionResult, RowProjector
from backend_txreport.projection.summary import Summary, summarize
from backend_txreport.projection.type_gate import TypeGate

__all__ = ["ProjectionResult", "RowProjector", "Summary", "TypeGate", "summarize"]
