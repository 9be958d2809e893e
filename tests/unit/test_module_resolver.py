"""
Unit tests for profile_analyzer.extractors.module_resolver module.
"""
import pytest
from profile_analyzer.core.errors import ArchiveLookupError
from profile_analyzer.core.types import CallFrame
from profile_analyzer.extractors.module_resolver import AmdModuleResolver, ModuleResolver, StaticModuleResolver
from profile_analyzer.storage.archive import Archive

A_JS = 'https://www.example.com/a.js'


def frame(line_number, column_number, url=A_JS):
    """Helper to create a call frame at a script position."""
    return CallFrame('fn', '3', url, line_number, column_number)


class TestStaticModuleResolver:
    """Tests for the StaticModuleResolver class."""

    def test_known_url(self):
        """Test resolving a mapped URL."""
        resolver = StaticModuleResolver({A_JS: 'app/a'})
        assert resolver.find_module_name(frame(1, 1)) == 'app/a'

    def test_unknown_url(self):
        """Test that unmapped URLs are unresolved."""
        resolver = StaticModuleResolver({A_JS: 'app/a'})
        assert resolver.find_module_name(frame(1, 1, url='https://www.example.com/z.js')) is None

    def test_no_url(self):
        """Test that frames without a URL are unresolved."""
        assert StaticModuleResolver().find_module_name(frame(1, 1, url='')) is None


class TestAmdModuleResolver:
    """Tests for the AmdModuleResolver class."""

    @pytest.fixture
    def resolver(self, sample_har):
        return AmdModuleResolver(Archive.from_har(sample_har))

    def test_frame_inside_first_module(self, resolver):
        """Test that a frame resolves to the enclosing define call."""
        assert resolver.find_module_name(frame(1, 2)) == 'app/a'

    def test_frame_inside_second_module(self, resolver):
        """Test that later define calls take over."""
        assert resolver.find_module_name(frame(4, 2)) == 'app/b'

    def test_frame_at_define_position(self, resolver):
        """Test that a frame exactly at a define call belongs to it."""
        assert resolver.find_module_name(frame(3, 0)) == 'app/b'

    def test_frame_before_any_define(self):
        """Test that code ahead of the first define is unresolved."""
        archive = Archive([(A_JS, '"use strict";\n\ndefine(\'late\', function () {});')])
        resolver = AmdModuleResolver(archive)

        assert resolver.find_module_name(frame(0, 3)) is None
        assert resolver.find_module_name(frame(2, 5)) == 'late'

    def test_source_fetched_once(self, sample_har):
        """Test that script sources are parsed once per URL."""
        archive = Archive.from_har(sample_har)
        calls = []
        original = archive.content_for

        class CountingLookup:
            def content_for(self, url):
                calls.append(url)
                return original(url)

        resolver = AmdModuleResolver(CountingLookup())
        resolver.find_module_name(frame(1, 2))
        resolver.find_module_name(frame(4, 2))

        assert calls == [A_JS]

    def test_missing_script_raises(self, resolver):
        """Test that a frame from a script not in the archive is fatal."""
        with pytest.raises(ArchiveLookupError):
            resolver.find_module_name(frame(1, 1, url='https://www.example.com/missing.js'))

    def test_base_class_is_abstract(self):
        """Test that the interface itself resolves nothing."""
        with pytest.raises(NotImplementedError):
            ModuleResolver().find_module_name(frame(1, 1))
