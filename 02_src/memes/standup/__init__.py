"""Standup aggregation."""

from .aggregator import StandupAggregator

__all__ = ["StandupAggregator"]
