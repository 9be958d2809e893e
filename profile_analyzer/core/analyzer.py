"""
Main profile analyzer orchestrator.
"""

from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.profile import CpuProfile
from ..core.types import UNKNOWN_BUCKET, UNSET, AnalysisConfig, Aggregations, Categorized, Locator
from ..extractors import AmdModuleResolver, StaticModuleResolver
from ..filters import BuiltinFrameFilter
from ..formatters import format_time
from ..processors import (
    ProfileFileProcessor,
    aggregate,
    categorize_aggregations,
    collapse_call_frames,
    verify_locators,
)


class ProfileAnalyzer:
    """Main orchestrator for CPU profile analysis."""

    def __init__(
        self,
        locators: Iterable[Any],
        categories: Optional[Dict[str, Sequence[Any]]] = None,
        window_min: float = UNSET,
        window_max: float = UNSET,
        collapse_call_frames: bool = True,
        builtin_urls: Sequence[str] = (),
        archive=None,
        module_resolver=None
    ):
        """
        Initialize the ProfileAnalyzer.

        Args:
            locators: Locators in priority order ({functionName, moduleName})
            categories: Mapping of category name -> locators, optional
            window_min: Exclusive lower bound for samples counted in timings
            window_max: Exclusive upper bound, -1 for no bound
            collapse_call_frames: If True, deduplicate identical stacks per bucket
            builtin_urls: Extra script URLs to treat as engine internals
            archive: Content lookup for script sources (e.g. an Archive)
            module_resolver: Resolver for call frame module names. Defaults to
                             an AMD resolver over the archive when one is
                             given, otherwise a resolver that knows no modules.

        Raises:
            LocatorError: If a locator is invalid or duplicated
        """
        # Configuration
        self.config = AnalysisConfig(
            window_min=window_min,
            window_max=window_max,
            collapse_call_frames=collapse_call_frames,
            builtin_urls=builtin_urls
        )
        self.locators = [Locator.parse(locator) for locator in locators]
        verify_locators(self.locators)
        self.categories = categories or {}

        # Collaborators
        self.archive = archive
        if module_resolver is None:
            module_resolver = AmdModuleResolver(archive) if archive is not None else StaticModuleResolver()
        self.module_resolver = module_resolver
        self.builtin_filter = BuiltinFrameFilter(self.config.builtin_urls)
        self.file_processor = ProfileFileProcessor()

        # Results
        self.profile: Optional[CpuProfile] = None
        self.aggregations: Aggregations = {}
        self.categorized: Categorized = {}

    def process_profile_file(self, file_path: str) -> Aggregations:
        """
        Load a profile or trace JSON file and analyze it.

        Args:
            file_path: Path to the .cpuprofile or trace JSON file

        Returns:
            Mapping of bucket key -> AggregationResult
        """
        raw_profile = self.file_processor.process_file(file_path)
        return self.analyze(raw_profile)

    def analyze(self, raw_profile: Dict[str, Any]) -> Aggregations:
        """
        Reconstruct a raw profile and aggregate its time into buckets.

        Args:
            raw_profile: Raw profile dict (nodes, samples, timeDeltas, startTime)

        Returns:
            Mapping of bucket key -> AggregationResult
        """
        # Step 1: Rebuild the call tree and per-node timings
        self.profile = CpuProfile(raw_profile, self.config.window_min, self.config.window_max)

        # Step 2: Walk every sampled node and bill its time to buckets
        self.aggregations = aggregate(
            self.profile,
            self.locators,
            self.module_resolver,
            self.archive,
            self.builtin_filter
        )

        # Step 3: Post-process for reporting
        if self.config.collapse_call_frames:
            collapse_call_frames(self.aggregations)
        self.categorized = categorize_aggregations(self.aggregations, self.categories)

        # Step 4: Report summary
        print(f"\nReconstructed {len(self.profile.nodes)} nodes and {len(self.profile.samples)} samples "
              f"spanning {self.format_time(self.profile.duration)}")
        print(f"Aggregated into {len(self.aggregations) - 1} locator buckets")
        unknown = self.aggregations[UNKNOWN_BUCKET]
        print(f"Unattributed time: {self.format_time(unknown['self'])} "
              f"across {len(unknown['callframes'])} stacks")

        return self.aggregations

    def format_time(self, us: float) -> str:
        """
        Format time in microseconds to a human-readable string.

        Args:
            us: Time in microseconds

        Returns:
            Formatted time string
        """
        return format_time(us)
