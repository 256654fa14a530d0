"""
AVL insert/delete with step recording.

The simulator works on a private clone of the root it is given. Every
recursive call receives a ``link`` callback that writes a new subtree root
into the parent slot (or the tree root), so rotations and leaf creation are
attached before their frame is recorded and the frames always show the whole
tree.
"""

import logging
from typing import Callable, Optional

from avltrace.nodes import (
    ActionType,
    OperationResult,
    TreeNode,
    balance_of,
    clone_tree,
    height_of,
    search,
    update_metrics,
)
from avltrace.recorder import StepRecorder

logger = logging.getLogger(__name__)

Link = Callable[[Optional[TreeNode]], None]

LEFT_LEFT = "Left-Left"
RIGHT_RIGHT = "Right-Right"
LEFT_RIGHT = "Left-Right"
RIGHT_LEFT = "Right-Left"


def _subtree_first(node: TreeNode) -> TreeNode:
    """Return the leftmost node of the subtree rooted at node."""
    walk = node
    while walk.left is not None:
        walk = walk.left
    return walk


class AVLTreeSimulator:
    """Runs one insert or delete at a time and records every micro-step."""

    def __init__(self, initial_root: Optional[TreeNode] = None):
        self._root: Optional[TreeNode] = clone_tree(initial_root)
        self._recorder = StepRecorder(lambda: self._root)

    @property
    def root(self) -> Optional[TreeNode]:
        """A copy of the working root; the live tree is never handed out."""
        return clone_tree(self._root)

    def _snapshot(self, description, action_type=ActionType.INFO, highlight_node_id=None, comparison_tree=None):
        self._recorder.snapshot(description, action_type, highlight_node_id, comparison_tree)

    def _result(self) -> OperationResult:
        return OperationResult(final_tree=clone_tree(self._root), steps=self._recorder.steps)

    def _linker(self, parent: Optional[TreeNode], make_left_child: bool) -> Link:
        """Return a callback that relinks a new child under parent (or as root)."""
        def link(child: Optional[TreeNode]) -> None:
            if parent is None:
                self._root = child
            elif make_left_child:
                parent.left = child
            else:
                parent.right = child
        return link

    # ------------------ Rotations ------------------
    def _rotate_right(self, y: TreeNode, link: Link) -> TreeNode:
        pre_rotation = clone_tree(self._root)
        x = y.left
        t2 = x.right

        self._snapshot(
            f"Performing Right Rotation on Node {y.value}. Node {x.value} will move up.",
            ActionType.ROTATE, y.id, pre_rotation,
        )

        x.right = y
        y.left = t2

        # y is below x now, so it must be refreshed first
        update_metrics(y)
        update_metrics(x)
        link(x)

        self._snapshot(
            f"Right Rotation complete. {x.value} is now the parent of {y.value}.",
            ActionType.ROTATE, x.id, pre_rotation,
        )
        return x

    def _rotate_left(self, x: TreeNode, link: Link) -> TreeNode:
        pre_rotation = clone_tree(self._root)
        y = x.right
        t2 = y.left

        self._snapshot(
            f"Performing Left Rotation on Node {x.value}. Node {y.value} will move up.",
            ActionType.ROTATE, x.id, pre_rotation,
        )

        y.left = x
        x.right = t2

        update_metrics(x)
        update_metrics(y)
        link(y)

        self._snapshot(
            f"Left Rotation complete. {y.value} is now the parent of {x.value}.",
            ActionType.ROTATE, y.id, pre_rotation,
        )
        return y

    def _restructure(self, node: TreeNode, case: str, link: Link) -> TreeNode:
        """Apply the rotation(s) for an already classified imbalance at node."""
        balance = node.balance_factor
        if case == LEFT_LEFT:
            self._snapshot(
                f"Imbalance detected at Node {node.value} (BF: {balance}). Left-Left Case. Needs Right Rotation.",
                ActionType.IMBALANCE, node.id,
            )
            return self._rotate_right(node, link)

        if case == RIGHT_RIGHT:
            self._snapshot(
                f"Imbalance detected at Node {node.value} (BF: {balance}). Right-Right Case. Needs Left Rotation.",
                ActionType.IMBALANCE, node.id,
            )
            return self._rotate_left(node, link)

        if case == LEFT_RIGHT:
            self._snapshot(
                f"Imbalance detected at Node {node.value} (BF: {balance}). Left-Right Case.",
                ActionType.IMBALANCE, node.id,
            )
            self._snapshot(
                f"Step 1 of LR: Left Rotate on left child {node.left.value}.",
                ActionType.BALANCE, node.left.id,
            )
            node.left = self._rotate_left(node.left, self._linker(node, True))
            self._snapshot(f"Step 2 of LR: Now Right Rotate on pivot {node.value}.", ActionType.BALANCE, node.id)
            return self._rotate_right(node, link)

        if case == RIGHT_LEFT:
            self._snapshot(
                f"Imbalance detected at Node {node.value} (BF: {balance}). Right-Left Case.",
                ActionType.IMBALANCE, node.id,
            )
            self._snapshot(
                f"Step 1 of RL: Right Rotate on right child {node.right.value}.",
                ActionType.BALANCE, node.right.id,
            )
            node.right = self._rotate_right(node.right, self._linker(node, False))
            self._snapshot(f"Step 2 of RL: Now Left Rotate on pivot {node.value}.", ActionType.BALANCE, node.id)
            return self._rotate_left(node, link)

        raise ValueError(f"Unknown imbalance case: {case}")

    # ------------------ Insert ------------------
    def insert(self, value) -> OperationResult:
        self._recorder.begin(self._root)

        existing = search(self._root, value)
        if existing is not None:
            self._snapshot(f"Value {value} already exists.", ActionType.INFO, existing.id)
            logger.debug("insert %s skipped (duplicate)", value)
            return self._result()

        self._snapshot(f"Starting insertion of {value}.", ActionType.INSERT)
        self._insert(self._root, value, self._linker(None, True))
        self._snapshot(f"Insertion of {value} complete. Tree is balanced.", ActionType.INFO)

        result = self._result()
        logger.debug("insert %s: %d frames, height %d", value, len(result.steps), height_of(self._root))
        return result

    def _insert(self, node: Optional[TreeNode], value, link: Link) -> TreeNode:
        if node is None:
            leaf = TreeNode(value)
            link(leaf)
            self._snapshot(f"Inserted new node {value}.", ActionType.INSERT, leaf.id)
            return leaf

        self._snapshot(f"Comparing {value} with {node.value}.", ActionType.INFO, node.id)

        if value < node.value:
            node.left = self._insert(node.left, value, self._linker(node, True))
        elif value > node.value:
            node.right = self._insert(node.right, value, self._linker(node, False))
        else:
            self._snapshot(f"Value {value} already exists.", ActionType.INFO, node.id)
            return node

        update_metrics(node)
        balance = node.balance_factor
        self._snapshot(
            f"Calculated Height: {node.height}, Balance Factor: {balance} for Node {node.value}.",
            ActionType.CHECK, node.id,
        )

        if balance > 1 and value < node.left.value:
            return self._restructure(node, LEFT_LEFT, link)
        if balance < -1 and value > node.right.value:
            return self._restructure(node, RIGHT_RIGHT, link)
        if balance > 1 and value > node.left.value:
            return self._restructure(node, LEFT_RIGHT, link)
        if balance < -1 and value < node.right.value:
            return self._restructure(node, RIGHT_LEFT, link)
        return node

    # ------------------ Delete ------------------
    def delete(self, value) -> OperationResult:
        self._recorder.begin(self._root)

        if search(self._root, value) is None:
            self._snapshot(f"Node {value} not found in the tree.", ActionType.INFO)
            logger.debug("delete %s skipped (not found)", value)
            return self._result()

        self._snapshot(f"Starting deletion of {value}.", ActionType.DELETE)
        self._delete(self._root, value, self._linker(None, True))
        self._snapshot(f"Deletion of {value} complete.", ActionType.INFO)

        result = self._result()
        logger.debug("delete %s: %d frames, height %d", value, len(result.steps), height_of(self._root))
        return result

    def _delete(self, node: Optional[TreeNode], value, link: Link) -> Optional[TreeNode]:
        if node is None:
            return None

        if value < node.value:
            node.left = self._delete(node.left, value, self._linker(node, True))
        elif value > node.value:
            node.right = self._delete(node.right, value, self._linker(node, False))
        elif node.left is None or node.right is None:
            child = node.left if node.left is not None else node.right
            if child is None:
                self._snapshot(f"Leaf node {value} removed.", ActionType.DELETE, node.id)
            else:
                self._snapshot(f"Node {value} replaced by child {child.value}.", ActionType.DELETE, node.id)
            link(child)
            return child
        else:
            # the node keeps its id, only the key changes
            successor = _subtree_first(node.right)
            original_value = node.value
            node.value = successor.value
            self._snapshot(
                f"Copied successor value {successor.value} to node {original_value}. "
                f"Deleting duplicate successor from right subtree.",
                ActionType.DELETE, node.id,
            )
            node.right = self._delete(node.right, successor.value, self._linker(node, False))

        update_metrics(node)
        balance = node.balance_factor
        self._snapshot(f"Checking balance of {node.value} (BF: {balance}).", ActionType.CHECK, node.id)

        if balance > 1:
            case = LEFT_LEFT if balance_of(node.left) >= 0 else LEFT_RIGHT
            return self._restructure(node, case, link)
        if balance < -1:
            case = RIGHT_RIGHT if balance_of(node.right) <= 0 else RIGHT_LEFT
            return self._restructure(node, case, link)
        return node


# ------------------ Public entry points ------------------
def insert(root: Optional[TreeNode], value) -> OperationResult:
    """Insert value into a copy of root and return the final tree plus frames."""
    return AVLTreeSimulator(root).insert(value)


def delete(root: Optional[TreeNode], value) -> OperationResult:
    """Delete value from a copy of root and return the final tree plus frames."""
    return AVLTreeSimulator(root).delete(value)


def build(values, root: Optional[TreeNode] = None) -> Optional[TreeNode]:
    """Insert values one by one, discarding the frames."""
    for value in values:
        root = insert(root, value).final_tree
    return root


def is_avl(root: Optional[TreeNode]) -> bool:
    """True if root is ordered, its stored metadata is accurate and every |bf| <= 1."""
    def check(node, low, high):
        if node is None:
            return True, 0
        if (low is not None and node.value <= low) or (high is not None and node.value >= high):
            return False, 0
        ok_left, h_left = check(node.left, low, node.value)
        ok_right, h_right = check(node.right, node.value, high)
        height = 1 + max(h_left, h_right)
        ok = (
            ok_left and ok_right
            and abs(h_left - h_right) <= 1
            and node.height == height
            and node.balance_factor == h_left - h_right
        )
        return ok, height

    return check(root, None, None)[0]
