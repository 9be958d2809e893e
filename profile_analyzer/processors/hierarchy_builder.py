"""
Hierarchy builder for CPU profile nodes.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import InvalidProfileError, MissingRootError
from ..core.types import (
    GC_FUNCTION_NAME,
    IDLE_FUNCTION_NAME,
    NATIVE_SCRIPT_ID,
    PROGRAM_FUNCTION_NAME,
    ROOT_FUNCTION_NAME,
    ProfileNode,
)


class HierarchyBuilder:
    """Builds the id-addressed call tree from the flat node table."""

    def __init__(self):
        self.nodes: Dict[int, ProfileNode] = {}
        self.parent_links: Dict[int, ProfileNode] = {}
        self.children_links: Dict[int, List[ProfileNode]] = {}
        self.root: Optional[ProfileNode] = None
        self.program: Optional[ProfileNode] = None
        self.idle: Optional[ProfileNode] = None
        self.gc: Optional[ProfileNode] = None
        self.hit_count = 0

    def build(self, raw_nodes: List[Dict[str, Any]]) -> Dict[int, ProfileNode]:
        """
        Map and link the raw profile nodes.

        Pass 1 creates a ProfileNode per entry, pass 2 picks out the meta
        nodes, pass 3 resolves child ids into parent and children links.

        Args:
            raw_nodes: Node table of the raw profile

        Returns:
            Mapping of node id -> ProfileNode

        Raises:
            InvalidProfileError: On entries without an id, duplicate or
                dangling node ids, or a node listed under more than one parent
            MissingRootError: If no (root) node exists
        """
        # First pass: create nodes with their derived fields reset
        for raw in raw_nodes:
            if not isinstance(raw, dict) or 'id' not in raw:
                raise InvalidProfileError(f'node without id: {raw!r}')
            if not isinstance(raw.get('callFrame', {}), dict):
                raise InvalidProfileError(f'node {raw["id"]} has an invalid callFrame')
            node = ProfileNode.from_dict(raw)
            if node.id in self.nodes:
                raise InvalidProfileError(f'duplicate node id: {node.id}')
            self.nodes[node.id] = node

        # Second pass: identify meta nodes
        for node in self.nodes.values():
            self.hit_count += node.hit_count

            if node.call_frame.script_id != NATIVE_SCRIPT_ID:
                continue
            function_name = node.call_frame.function_name
            if function_name == ROOT_FUNCTION_NAME:
                self.root = node
            elif function_name == PROGRAM_FUNCTION_NAME:
                self.program = node
            elif function_name == IDLE_FUNCTION_NAME:
                self.idle = node
            elif function_name == GC_FUNCTION_NAME:
                self.gc = node

        if self.root is None:
            raise MissingRootError()

        # Third pass: link children to parents
        for node in self.nodes.values():
            self._link_children(node)

        return self.nodes

    def _link_children(self, parent: ProfileNode) -> None:
        if parent.children_ids is None:
            return

        children = []
        for child_id in parent.children_ids:
            child = self.nodes.get(child_id)
            if child is None:
                raise InvalidProfileError(
                    f'node {parent.id} references unknown child id: {child_id}'
                )
            # Every node but the root has exactly one parent
            if child is self.root:
                raise InvalidProfileError(f'node {parent.id} lists the root node as a child')
            if child.id in self.parent_links:
                raise InvalidProfileError(
                    f'node {child_id} has more than one parent: '
                    f'{self.parent_links[child.id].id} and {parent.id}'
                )
            children.append(child)
            self.parent_links[child.id] = parent
        self.children_links[parent.id] = children

    def links(self) -> Tuple[Dict[int, ProfileNode], Dict[int, List[ProfileNode]]]:
        """Return the (parent_links, children_links) pair."""
        return self.parent_links, self.children_links
