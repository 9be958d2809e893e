"""
Exceptions raised while reconstructing and aggregating CPU profiles.
"""


class ProfileAnalyzerError(Exception):
    """Base class for all profile analyzer errors."""


class InvalidProfileError(ProfileAnalyzerError):
    """The raw profile is malformed (dangling ids, mismatched arrays, ...)."""


class MissingRootError(InvalidProfileError):
    """The profile has no (root) node."""

    def __init__(self):
        super().__init__('missing root node in profile')


class LocatorError(ProfileAnalyzerError):
    """A locator definition is invalid."""


class DuplicateLocatorError(LocatorError):
    """Two locators share the same function/module key."""

    def __init__(self, function_name: str, module_name: str):
        self.function_name = function_name
        self.module_name = module_name
        super().__init__(f'Duplicate heuristic detected {module_name}@{function_name}')


class ArchiveLookupError(ProfileAnalyzerError, KeyError):
    """A URL was requested from an archive that does not contain it."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f'Could not find "{url}" in the archive file.')

    def __str__(self):
        return self.args[0]
