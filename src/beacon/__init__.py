"""
Beacon: collection and derived-fact layer for inspected browser sessions.

Collects instrumentation events and network activity from one inspected
session, normalizes them into immutable artifacts, and memoizes the facts
derived from those artifacts for the lifetime of a run.
"""

__version__ = "0.1.0"
