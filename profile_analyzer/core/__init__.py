"""Core components for profile analysis."""

from .errors import (
    ArchiveLookupError,
    DuplicateLocatorError,
    InvalidProfileError,
    LocatorError,
    MissingRootError,
    ProfileAnalyzerError,
)
from .types import AnalysisConfig, CallFrame, Locator, ProfileNode, Sample
from .profile import CpuProfile, reconstruct
from .analyzer import ProfileAnalyzer

__all__ = [
    "ProfileAnalyzer",
    "CpuProfile",
    "reconstruct",
    "AnalysisConfig",
    "CallFrame",
    "Locator",
    "ProfileNode",
    "Sample",
    "ProfileAnalyzerError",
    "InvalidProfileError",
    "MissingRootError",
    "LocatorError",
    "DuplicateLocatorError",
    "ArchiveLookupError",
]
