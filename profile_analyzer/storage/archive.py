"""
HTTP archive backed content lookup.

The archive maps request URLs to the response text recorded for them. It is
loaded from a HAR file and used to fetch script sources for call frames.
"""

from typing import Dict, Iterable, Iterator, Tuple

import ijson

from ..core.errors import ArchiveLookupError, ProfileAnalyzerError


class Archive:
    """
    In-memory collection of URL -> response text entries.

    Args:
        entries: Iterable of (url, text) pairs. Later entries for the same
                 URL do not replace the first one.
    """

    def __init__(self, entries: Iterable[Tuple[str, str]] = ()):
        self._content: Dict[str, str] = {}
        for url, text in entries:
            self._content.setdefault(url, text)

    @classmethod
    def from_file(cls, file_path: str) -> 'Archive':
        """
        Load an archive from a HAR file using a streaming parser.

        Args:
            file_path: Path to the HAR JSON file

        Returns:
            Archive with one entry per recorded request

        Raises:
            ProfileAnalyzerError: If the file is not valid JSON
        """
        with open(file_path, 'rb') as f:
            try:
                return cls(_har_entries(ijson.items(f, 'log.entries.item')))
            except ijson.JSONError as e:
                raise ProfileAnalyzerError(f'{file_path}: malformed HAR: {e}') from e

    @classmethod
    def from_har(cls, har: Dict) -> 'Archive':
        """Build an archive from an already parsed HAR document."""
        return cls(_har_entries(har.get('log', {}).get('entries', [])))

    def content_for(self, url: str) -> str:
        """
        Return the recorded response text for a URL.

        Raises:
            ArchiveLookupError: If the archive has no entry for the URL
        """
        try:
            return self._content[url]
        except KeyError:
            raise ArchiveLookupError(url) from None

    def __contains__(self, url: str) -> bool:
        return url in self._content

    def __len__(self) -> int:
        return len(self._content)


def _har_entries(entries: Iterable[Dict]) -> Iterator[Tuple[str, str]]:
    for entry in entries:
        url = entry.get('request', {}).get('url')
        if not url:
            continue
        text = entry.get('response', {}).get('content', {}).get('text') or ''
        yield url, text
