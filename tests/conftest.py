"""
Pytest configuration and shared fixtures for profile analyzer tests.
"""
import json
import pytest

from profile_analyzer.core.types import CallFrame


class NodeIdGenerator:
    """Hands out consecutive node ids for one generated profile."""

    def __init__(self, start=0):
        self.next_id = start

    def __call__(self):
        node_id = self.next_id
        self.next_id += 1
        return node_id


class GeneratedNode:
    """Node of a generated profile; children are created through child()."""

    def __init__(self, node_id, call_frame):
        self.id = node_id
        self.call_frame = call_frame
        self.children = None

    def to_json(self):
        data = {'id': self.id, 'callFrame': dict(self.call_frame), 'hitCount': 0}
        if self.children is not None:
            data['children'] = list(self.children)
        return data


class ProfileGenerator:
    """
    Builds raw CPU profiles for tests.

    Every node created through append() also receives one sample with the
    given delta, so a node's self time equals the delta it was appended with.
    """

    def __init__(self, start_time=0):
        self.ids = NodeIdGenerator()
        self.start_time = start_time
        self.nodes = []
        self.samples = []
        self.time_deltas = []
        self.root = self._new_node({'functionName': '(root)', 'url': ''})

    def _new_node(self, options):
        call_frame = {
            'functionName': options.get('functionName'),
            'scriptId': str(options.get('scriptId', 0)),
            'url': options.get('url', 'script'),
            'lineNumber': options.get('lineNumber', -1),
            'columnNumber': options.get('columnNumber', -1),
        }
        node = GeneratedNode(self.ids(), call_frame)
        self.nodes.append(node)
        return node

    def child(self, parent, **options):
        """Create a child node without sampling it."""
        if 'functionName' not in options:
            raise ValueError('Must provide function name for new child node')
        node = self._new_node(options)
        if parent.children is None:
            parent.children = []
        parent.children.append(node.id)
        return node

    def append(self, parent, delta, **options):
        """Create a child node and sample it once."""
        node = self.child(parent, **options)
        self.sample(node, delta)
        return node

    def sample(self, node, delta):
        self.samples.append(node.id)
        self.time_deltas.append(delta)

    def end(self):
        duration = sum(self.time_deltas)
        return {
            'startTime': self.start_time,
            'endTime': self.start_time + duration,
            'nodes': [node.to_json() for node in self.nodes],
            'samples': list(self.samples),
            'timeDeltas': list(self.time_deltas),
        }


class RecordingResolver:
    """Module resolver backed by a dict that counts its lookups."""

    def __init__(self, url_to_module=None):
        self.url_to_module = url_to_module or {}
        self.calls = 0

    def find_module_name(self, call_frame):
        self.calls += 1
        return self.url_to_module.get(call_frame.url)


@pytest.fixture
def profile_generator():
    """Factory for fresh ProfileGenerator instances."""
    return ProfileGenerator


@pytest.fixture
def resolver():
    """Resolver that maps the test script URLs to module names."""
    return RecordingResolver({
        'https://www.example.com/a.js': 'app/a',
        'https://www.example.com/b.js': 'app/b',
    })


@pytest.fixture
def make_frame():
    """Helper to create call frames with test defaults."""
    def _make_frame(function_name, url='https://www.example.com/a.js', line_number=1, column_number=1):
        return CallFrame(
            function_name=function_name,
            script_id='42',
            url=url,
            line_number=line_number,
            column_number=column_number,
        )
    return _make_frame


@pytest.fixture
def nested_profile():
    """
    Raw profile: (root) -> A (self 5) -> B (self 10), plus (program) and
    (idle) children of root and a (garbage collector) node.
    """
    gen = ProfileGenerator()
    a = gen.append(gen.root, 5, functionName='A')
    gen.append(a, 10, functionName='B')
    gen.child(gen.root, functionName='(program)')
    gen.child(gen.root, functionName='(idle)')
    gen.child(gen.root, functionName='(garbage collector)')
    return gen.end()


@pytest.fixture
def sample_har():
    """HAR document with one AMD script."""
    source = (
        'define("app/a", [], function () {\n'
        '  function foo() {}\n'
        '});\n'
        'define("app/b", [], function () {\n'
        '  function bar() {}\n'
        '});\n'
    )
    return {
        'log': {
            'entries': [
                {
                    'request': {'url': 'https://www.example.com/a.js'},
                    'response': {'content': {'text': source}},
                },
            ]
        }
    }


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file and return a helper function."""
    def _create_file(data, name=None):
        file_path = tmp_path / (name or f"test_{id(data)}.json")
        with open(file_path, "w") as f:
            json.dump(data, f)
        return str(file_path)

    return _create_file
