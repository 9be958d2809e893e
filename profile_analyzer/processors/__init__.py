"""Processors for profile reconstruction and aggregation."""

from .file_processor import ProfileFileProcessor
from .hierarchy_builder import HierarchyBuilder
from .sample_mapper import SampleMapper
from .timing_calculator import TimingCalculator
from .locator_matcher import LocatorMatcher
from .aggregator import AggregationCollector, aggregate, verify_locators
from .categorizer import categorize_aggregations, collapse_call_frames

__all__ = [
    "ProfileFileProcessor",
    "HierarchyBuilder",
    "SampleMapper",
    "TimingCalculator",
    "LocatorMatcher",
    "AggregationCollector",
    "aggregate",
    "verify_locators",
    "categorize_aggregations",
    "collapse_call_frames",
]
