"""
Coordinate assignment for rendering.

x comes from the inorder rank, so no two nodes share a column and the
margins are symmetric; y comes from depth. Both passes run on a private
clone, the input tree is never touched.
"""

from typing import List, Optional

from avltrace import config
from avltrace.nodes import TreeNode, clone_tree


def inorder_nodes(root: Optional[TreeNode]) -> List[TreeNode]:
    """Return the nodes of root in inorder, iteratively."""
    out: List[TreeNode] = []
    stack: List[TreeNode] = []
    walk = root
    while stack or walk is not None:
        while walk is not None:
            stack.append(walk)
            walk = walk.left
        walk = stack.pop()
        out.append(walk)
        walk = walk.right
    return out


def _assign_depth(node: Optional[TreeNode], depth: int, base_offset: float, spacing: float) -> None:
    if node is None:
        return
    node.y = base_offset + depth * spacing
    _assign_depth(node.left, depth + 1, base_offset, spacing)
    _assign_depth(node.right, depth + 1, base_offset, spacing)


def calculate_layout(
    root: Optional[TreeNode],
    base_offset: Optional[float] = None,
    vertical_spacing: Optional[float] = None,
) -> Optional[TreeNode]:
    """Return a positioned deep copy of root (None for None).

    x is a percentage in (0, 100): ``(rank + 1) / (count + 1) * 100``.
    y is ``base_offset + depth * vertical_spacing``.
    """
    if root is None:
        return None
    if base_offset is None:
        base_offset = config.LAYOUT_BASE_OFFSET
    if vertical_spacing is None:
        vertical_spacing = config.LAYOUT_VERTICAL_SPACING

    clone = clone_tree(root)
    nodes = inorder_nodes(clone)
    total = len(nodes)
    for rank, node in enumerate(nodes):
        node.x = (rank + 1) / (total + 1) * 100

    _assign_depth(clone, 0, base_offset, vertical_spacing)
    return clone
