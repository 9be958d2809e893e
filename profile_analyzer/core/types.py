"""
Type definitions for profile analysis.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from .errors import LocatorError

# Reserved call frames emitted by the V8 profiler
NATIVE_SCRIPT_ID = '0'
ROOT_FUNCTION_NAME = '(root)'
PROGRAM_FUNCTION_NAME = '(program)'
IDLE_FUNCTION_NAME = '(idle)'
GC_FUNCTION_NAME = '(garbage collector)'

UNKNOWN_BUCKET = 'unknown'
WILDCARD = '*'

# '.*' is accepted as an older spelling of the wildcard
_WILDCARD_SPELLINGS = (WILDCARD, '.*')
_REGEX_METACHARACTERS = frozenset('.^$*+?{}[]\\|()')

UNSET = -1


@dataclass(frozen=True)
class CallFrame:
    """Identity of a single executable location."""
    function_name: str
    script_id: str
    url: Optional[str]
    line_number: int
    column_number: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CallFrame':
        """Build a CallFrame from the raw profile representation."""
        return cls(
            function_name=data.get('functionName', ''),
            script_id=str(data.get('scriptId', '')),
            url=data.get('url'),
            line_number=data.get('lineNumber', UNSET),
            column_number=data.get('columnNumber', UNSET),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the raw profile representation."""
        return {
            'functionName': self.function_name,
            'scriptId': self.script_id,
            'url': self.url,
            'lineNumber': self.line_number,
            'columnNumber': self.column_number,
        }


@dataclass(eq=False)
class ProfileNode:
    """
    A vertex of the profile call tree.

    The derived timing fields start out unset and are written once during
    reconstruction. Times are in the profile's unit (microseconds for V8).
    """
    id: int
    call_frame: CallFrame
    hit_count: int = 0
    children_ids: Optional[List[int]] = None
    sample_count: int = 0
    self_time: float = 0
    total_time: float = 0
    min_time: float = UNSET
    max_time: float = UNSET

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileNode':
        children = data.get('children')
        return cls(
            id=data['id'],
            call_frame=CallFrame.from_dict(data.get('callFrame', {})),
            hit_count=data.get('hitCount', 0),
            children_ids=list(children) if children is not None else None,
        )


@dataclass(eq=False)
class Sample:
    """One point of the chronologically ordered sample stream."""
    node: ProfileNode
    timestamp: float
    delta: float = 0
    prev: Optional['Sample'] = field(default=None, repr=False)
    next: Optional['Sample'] = field(default=None, repr=False)


class LocatorKind(Enum):
    """Shape of a locator, used to short-circuit matching."""
    WILDCARD_MODULE = 'wildcard-module'
    WILDCARD_FUNCTION = 'wildcard-function'
    EXACT = 'exact'
    REGEX = 'regex'


def is_wildcard(pattern: str) -> bool:
    return pattern in _WILDCARD_SPELLINGS


def _is_literal(pattern: str) -> bool:
    return not any(char in _REGEX_METACHARACTERS for char in pattern)


def compile_function_pattern(function_name: str) -> re.Pattern:
    """
    Compile a function name pattern into an anchored regex.

    A dotted path such as ``Foo.bar.baz`` only pins the trailing segments;
    the leading segment is replaced by an alphabetic class so that any
    receiver name matches (``^([A-Za-z]+\\.bar\\.baz)$``).
    """
    if is_wildcard(function_name):
        return re.compile(r'.*', re.DOTALL)
    parts = function_name.split('.')
    if len(parts) > 1:
        return re.compile(r'^([A-Za-z]+\.' + r'\.'.join(parts[1:]) + r')$')
    return re.compile(f'^(?:{function_name})$')


def compile_module_pattern(module_name: str) -> re.Pattern:
    """Compile a module name pattern into an anchored regex."""
    if is_wildcard(module_name):
        return re.compile(r'.*', re.DOTALL)
    return re.compile(f'^(?:{module_name})$')


@dataclass(frozen=True)
class Locator:
    """A user defined rule that bills call frames to a named bucket."""
    function_name: str
    module_name: str
    function_name_regex: re.Pattern = field(repr=False, compare=False)
    module_name_regex: re.Pattern = field(repr=False, compare=False)
    kind: LocatorKind = field(compare=False)

    @classmethod
    def compile(cls, function_name: str, module_name: str) -> 'Locator':
        """
        Build a locator from its two patterns.

        Raises:
            LocatorError: If either pattern is empty or not a valid regex
        """
        if not function_name or not module_name:
            raise LocatorError(
                f'Locator needs both a function and a module name, got '
                f'{function_name!r}/{module_name!r}'
            )
        try:
            function_regex = compile_function_pattern(function_name)
            module_regex = compile_module_pattern(module_name)
        except re.error as e:
            raise LocatorError(f'Invalid locator pattern {module_name}@{function_name}: {e}') from e

        if is_wildcard(module_name):
            kind = LocatorKind.WILDCARD_MODULE
        elif is_wildcard(function_name):
            kind = LocatorKind.WILDCARD_FUNCTION
        elif _is_literal(function_name) and _is_literal(module_name):
            kind = LocatorKind.EXACT
        else:
            kind = LocatorKind.REGEX

        return cls(function_name, module_name, function_regex, module_regex, kind)

    @classmethod
    def parse(cls, value: Any) -> 'Locator':
        """
        Build a locator from its input form.

        Accepts an existing Locator, a ``{functionName, moduleName}`` mapping
        or a ``[functionName, moduleName]`` pair.
        """
        if isinstance(value, Locator):
            return value
        if isinstance(value, dict):
            return cls.compile(value.get('functionName', ''), value.get('moduleName', ''))
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls.compile(value[0], value[1])
        raise LocatorError(f'Cannot build a locator from {value!r}')

    @property
    def key(self) -> str:
        return self.function_name + self.module_name

    @property
    def function_is_wildcard(self) -> bool:
        return is_wildcard(self.function_name)

    @property
    def module_is_wildcard(self) -> bool:
        return is_wildcard(self.module_name)


class CallFrameInfo(TypedDict):
    """Self time of one sampled node and its full stack (node first, root last)."""
    self: float
    stack: List[CallFrame]


class AggregationResult(TypedDict):
    """Accumulated time for one locator bucket."""
    total: float
    self: float
    attributed: float
    function_name: str
    module_name: str
    callframes: List[CallFrameInfo]


Aggregations = Dict[str, AggregationResult]
Categorized = Dict[str, List[AggregationResult]]
Categories = Dict[str, Sequence[Any]]


class AnalysisConfig:
    """Configuration for profile analysis."""

    def __init__(
        self,
        window_min: float = UNSET,
        window_max: float = UNSET,
        collapse_call_frames: bool = True,
        builtin_urls: Sequence[str] = ()
    ):
        """
        Initialize profile analysis configuration.

        Args:
            window_min: Samples at or before this timestamp are ignored for
                        timing. Default: -1 (no lower bound)

            window_max: Samples at or after this timestamp are ignored for
                        timing. Default: -1 (no upper bound)

            collapse_call_frames: If True, structurally identical call stacks
                                  are deduplicated within each bucket after
                                  aggregation. Totals are not affected.
                                  Default: True

            builtin_urls: Extra script URLs to treat as engine internals, on
                          top of the built-in denylist. Frames from these
                          scripts can only match wildcard-module locators.
        """
        self.window_min = window_min
        self.window_max = window_max
        self.collapse_call_frames = collapse_call_frames
        self.builtin_urls = tuple(builtin_urls)
