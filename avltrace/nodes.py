"""
Node model for the AVL step simulator.

A TreeNode owns its children exclusively (no parent pointers); every
snapshot holds its own deep copy, so the ``id`` is what ties "the same node"
together across frames.
"""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


_id_counter = itertools.count()


def generate_id() -> str:
    """Return a fresh node id; ids are never reused within the process."""
    return f"node-{next(_id_counter)}"


class ActionType(str, Enum):
    """Closed set of frame tags."""
    INSERT = "insert"
    DELETE = "delete"
    BALANCE = "balance"
    ROTATE = "rotate"
    INFO = "info"
    CHECK = "check"
    IMBALANCE = "imbalance"


# ------------------ Tree node ------------------
class TreeNode:
    """One key plus its structural metadata."""
    __slots__ = 'id', 'value', 'height', 'balance_factor', 'left', 'right', 'x', 'y'

    def __init__(self, value, node_id: Optional[str] = None, height: int = 1, balance_factor: int = 0,
                 left: Optional["TreeNode"] = None, right: Optional["TreeNode"] = None,
                 x: float = 0.0, y: float = 0.0):
        self.id = node_id if node_id is not None else generate_id()
        self.value = value
        self.height = height
        self.balance_factor = balance_factor
        self.left = left
        self.right = right
        self.x = x
        self.y = y

    def __repr__(self):
        return f"TreeNode({self.value!r}, id={self.id!r}, h={self.height}, bf={self.balance_factor})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "value": self.value,
            "height": self.height,
            "balanceFactor": self.balance_factor,
            "x": self.x,
            "y": self.y,
            "left": self.left.to_dict() if self.left is not None else None,
            "right": self.right.to_dict() if self.right is not None else None,
        }

    @classmethod
    def from_dict(cls, state: Optional[Dict[str, Any]]) -> Optional["TreeNode"]:
        """Rebuild a tree from ``to_dict`` output. Raises ValueError/KeyError on bad input."""
        if state is None:
            return None
        if not isinstance(state, dict):
            raise ValueError(f"Tree node must be an object, got {type(state).__name__}")
        value = state["value"]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Node value must be numeric, got {value!r}")
        return cls(
            value,
            node_id=str(state["id"]) if state.get("id") is not None else None,
            height=int(state.get("height", 1)),
            balance_factor=int(state.get("balanceFactor", 0)),
            left=cls.from_dict(state.get("left")),
            right=cls.from_dict(state.get("right")),
            x=float(state.get("x", 0.0)),
            y=float(state.get("y", 0.0)),
        )


# ------------------ Tree helpers ------------------
def clone_tree(node: Optional[TreeNode]) -> Optional[TreeNode]:
    """Deep copy a subtree, preserving every id."""
    if node is None:
        return None
    return TreeNode(
        node.value,
        node_id=node.id,
        height=node.height,
        balance_factor=node.balance_factor,
        left=clone_tree(node.left),
        right=clone_tree(node.right),
        x=node.x,
        y=node.y,
    )


def height_of(node: Optional[TreeNode]) -> int:
    """Return the stored height of node (or 0 if None)."""
    return node.height if node is not None else 0


def balance_of(node: Optional[TreeNode]) -> int:
    """Return height(left) - height(right) computed from the children."""
    if node is None:
        return 0
    return height_of(node.left) - height_of(node.right)


def update_metrics(node: TreeNode) -> None:
    """Recompute height and balance factor of node from its children."""
    node.height = 1 + max(height_of(node.left), height_of(node.right))
    node.balance_factor = balance_of(node)


def search(node: Optional[TreeNode], value) -> Optional[TreeNode]:
    """Read-only BST search; return the node holding value, or None."""
    walk = node
    while walk is not None:
        if value == walk.value:
            return walk
        walk = walk.left if value < walk.value else walk.right
    return None


def iter_inorder(node: Optional[TreeNode]) -> Iterable[TreeNode]:
    if node is None:
        return
    yield from iter_inorder(node.left)
    yield node
    yield from iter_inorder(node.right)


def inorder_values(node: Optional[TreeNode]) -> List[Any]:
    return [n.value for n in iter_inorder(node)]


def count_nodes(node: Optional[TreeNode]) -> int:
    return sum(1 for _ in iter_inorder(node))


def tree_to_dict(node: Optional[TreeNode]) -> Optional[Dict[str, Any]]:
    return node.to_dict() if node is not None else None


# ------------------ Frames ------------------
@dataclass(frozen=True)
class AnimationStep:
    """One recorded frame. All trees are laid-out copies private to this frame."""
    tree: Optional[TreeNode]
    description: str
    action_type: ActionType
    highlight_node_id: Optional[str] = None
    comparison_tree: Optional[TreeNode] = None
    base_tree: Optional[TreeNode] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tree": tree_to_dict(self.tree),
            "comparisonTree": tree_to_dict(self.comparison_tree),
            "baseTree": tree_to_dict(self.base_tree),
            "description": self.description,
            "highlightNodeId": self.highlight_node_id,
            "actionType": self.action_type.value,
        }


@dataclass(frozen=True)
class OperationResult:
    """What one insert/delete call hands back to the caller."""
    final_tree: Optional[TreeNode]
    steps: List[AnimationStep]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finalTree": tree_to_dict(self.final_tree),
            "steps": [step.to_dict() for step in self.steps],
        }
