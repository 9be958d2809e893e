"""
Profile Analyzer - CPU Profile Reconstruction and Time Attribution Tool
"""

__version__ = "1.0.0"

from .core.analyzer import ProfileAnalyzer
from .core.profile import CpuProfile, reconstruct
from .core.types import AnalysisConfig, CallFrame, Locator

__all__ = ["ProfileAnalyzer", "CpuProfile", "reconstruct", "AnalysisConfig", "CallFrame", "Locator"]
