"""
JSON profile and configuration file processing.
"""

import json
from typing import Any, Dict, Iterable, List, Optional

import ijson

from ..core.errors import InvalidProfileError, LocatorError

# Top level keys of a bare .cpuprofile document
PROFILE_KEYS = ('nodes', 'samples', 'timeDeltas', 'startTime', 'endTime')


class ProfileFileProcessor:
    """Loads CPU profiles and analysis configuration from JSON files."""

    @staticmethod
    def process_file(file_path: str) -> Dict[str, Any]:
        """
        Read a CPU profile from disk using a streaming parser.

        Three layouts are understood: a bare ``.cpuprofile`` object, a JSON
        array of trace events, and a ``{"traceEvents": [...]}`` object. In
        the trace layouts the first ``CpuProfile`` instant event is used.

        Args:
            file_path: Path to the profile or trace JSON file

        Returns:
            Raw profile dict (nodes, samples, timeDeltas, startTime, endTime)

        Raises:
            InvalidProfileError: If the file is not valid JSON or contains no
                CPU profile
        """
        print(f"Processing {file_path}...")

        with open(file_path, 'rb') as f:
            first = _first_significant_byte(f)
            f.seek(0)
            try:
                if first == b'[':
                    profile = _profile_from_events(ijson.items(f, 'item', use_float=True))
                elif first == b'{':
                    profile = _profile_from_object(ijson.kvitems(f, '', use_float=True))
                else:
                    profile = None
            except ijson.JSONError as e:
                raise InvalidProfileError(f'{file_path}: malformed JSON: {e}') from e

        if profile is None:
            raise InvalidProfileError(f'no CPU profile found in {file_path}')

        print(f"Completed reading file: {len(profile.get('nodes', []))} nodes, "
              f"{len(profile.get('samples', []))} samples found.")
        return profile

    @staticmethod
    def load_locators(file_path: str) -> List[Any]:
        """
        Load locators from a JSON array of ``{functionName, moduleName}``
        objects or ``[functionName, moduleName]`` pairs.
        """
        locators = _load_config(file_path)
        if not isinstance(locators, list):
            raise LocatorError(f'{file_path}: expected a JSON array of locators')
        return locators

    @staticmethod
    def load_categories(file_path: str) -> Dict[str, List[Any]]:
        """Load a JSON object mapping category name -> list of locators."""
        categories = _load_config(file_path)
        if not isinstance(categories, dict):
            raise LocatorError(f'{file_path}: expected a JSON object of categories')
        return categories

    @staticmethod
    def load_module_map(file_path: str) -> Dict[str, str]:
        """Load a JSON object mapping script URL -> module name."""
        module_map = _load_config(file_path)
        if not isinstance(module_map, dict):
            raise LocatorError(f'{file_path}: expected a JSON object of URL -> module name')
        return module_map


def _load_config(file_path: str) -> Any:
    with open(file_path, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise LocatorError(f'{file_path}: malformed JSON: {e}') from e


def _first_significant_byte(f) -> bytes:
    while True:
        char = f.read(1)
        if not char or not char.isspace():
            return char


def _profile_from_events(events: Iterable[Dict]) -> Optional[Dict[str, Any]]:
    for event in events:
        if event.get('ph') == 'I' and event.get('name') == 'CpuProfile':
            return event['args']['data']['cpuProfile']
    return None


def _profile_from_object(items: Iterable) -> Optional[Dict[str, Any]]:
    profile = {}
    for key, value in items:
        if key == 'traceEvents':
            return _profile_from_events(value)
        if key in PROFILE_KEYS:
            profile[key] = value
    return profile if 'nodes' in profile else None
