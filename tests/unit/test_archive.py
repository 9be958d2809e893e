"""
Unit tests for profile_analyzer.storage.archive module.
"""
import pytest
from profile_analyzer.core.errors import ArchiveLookupError, ProfileAnalyzerError
from profile_analyzer.storage.archive import Archive

A_JS = 'https://www.example.com/a.js'


class TestArchive:
    """Tests for the Archive class."""

    def test_content_for(self):
        """Test looking up recorded response text."""
        archive = Archive([(A_JS, 'console.log(1);')])

        assert archive.content_for(A_JS) == 'console.log(1);'
        assert A_JS in archive
        assert len(archive) == 1

    def test_missing_url(self):
        """Test that misses raise with the offending URL."""
        archive = Archive()
        with pytest.raises(ArchiveLookupError) as excinfo:
            archive.content_for(A_JS)

        assert excinfo.value.url == A_JS
        assert str(excinfo.value) == f'Could not find "{A_JS}" in the archive file.'

    def test_lookup_error_is_key_error(self):
        """Test that misses can be handled as ordinary key errors."""
        with pytest.raises(KeyError):
            Archive().content_for(A_JS)

    def test_first_entry_wins(self):
        """Test that repeated URLs keep the first recorded response."""
        archive = Archive([(A_JS, 'first'), (A_JS, 'second')])
        assert archive.content_for(A_JS) == 'first'

    def test_from_har(self, sample_har):
        """Test building from a parsed HAR document."""
        archive = Archive.from_har(sample_har)
        assert archive.content_for(A_JS).startswith('define("app/a"')

    def test_from_file(self, sample_har, temp_json_file):
        """Test streaming a HAR file from disk."""
        archive = Archive.from_file(temp_json_file(sample_har, 'page.har'))
        assert archive.content_for(A_JS).startswith('define("app/a"')

    def test_entries_without_content(self, temp_json_file):
        """Test that entries without response text map to empty strings."""
        har = {'log': {'entries': [
            {'request': {'url': A_JS}, 'response': {'content': {}}},
            {'request': {}, 'response': {'content': {'text': 'ignored'}}},
        ]}}
        archive = Archive.from_file(temp_json_file(har))

        assert archive.content_for(A_JS) == ''
        assert len(archive) == 1

    def test_from_file_malformed(self, tmp_path):
        """Test that a truncated HAR file is a typed error."""
        path = tmp_path / 'broken.har'
        path.write_text('{"log": {"entries": [{"request": ')
        with pytest.raises(ProfileAnalyzerError, match='malformed HAR'):
            Archive.from_file(str(path))
