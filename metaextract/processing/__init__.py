"""Processing module for aggregating metadata across inputs."""

from .aggregator import KIND_FILTERS, AggregationResult, MetadataAggregator

__all__ = ["KIND_FILTERS", "AggregationResult", "MetadataAggregator"]
