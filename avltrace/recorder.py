from typing import Callable, List, Optional

from avltrace.layout import calculate_layout
from avltrace.nodes import ActionType, AnimationStep, TreeNode, clone_tree


class StepRecorder:
    """Append-only frame log for the operation in progress.

    ``current_root`` is read on every snapshot so each frame reflects the
    live tree at that instant; the stored trees are laid-out copies.
    """

    def __init__(self, current_root: Callable[[], Optional[TreeNode]]):
        self._current_root = current_root
        self._steps: List[AnimationStep] = []
        self._base_tree: Optional[TreeNode] = None

    def begin(self, base_tree: Optional[TreeNode]) -> None:
        """Start a new operation; base_tree is frozen for all of its frames."""
        self._steps = []
        self._base_tree = clone_tree(base_tree)

    def snapshot(
        self,
        description: str,
        action_type: ActionType = ActionType.INFO,
        highlight_node_id: Optional[str] = None,
        comparison_tree: Optional[TreeNode] = None,
    ) -> AnimationStep:
        step = AnimationStep(
            tree=calculate_layout(self._current_root()),
            description=description,
            action_type=action_type,
            highlight_node_id=highlight_node_id,
            comparison_tree=calculate_layout(comparison_tree),
            base_tree=calculate_layout(self._base_tree),
        )
        self._steps.append(step)
        return step

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> List[AnimationStep]:
        return list(self._steps)
