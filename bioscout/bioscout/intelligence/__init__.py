"""Creator intelligence: turns platform results and canonical links into a report."""

from bioscout.intelligence.analyzer import analyze, priority_for

__all__ = ["analyze", "priority_for"]
