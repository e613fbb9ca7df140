"""Teamline - concurrency-aware timeline scheduling for developer capacity planning."""

__version__ = "0.1.0"
