import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from avltrace import config, simulator
from avltrace.layout import calculate_layout
from avltrace.nodes import AnimationStep, OperationResult, TreeNode, count_nodes, height_of, tree_to_dict

logger = logging.getLogger(__name__)


def parse_key(raw: Any) -> Optional[int]:
    """
    Accept ints, integral floats and integer strings ("42", " -7 ").

    Returns the int key or None if invalid (bools, NaN, inf, "3.5", "abc").
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if math.isnan(raw) or math.isinf(raw) or not raw.is_integer():
            return None
        return int(raw)
    if isinstance(raw, str):
        s = raw.strip()
        if not s:
            return None
        try:
            return int(s)
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class HistoryEntry:
    """Root before an operation, plus where that operation's frames begin."""
    tree: Optional[TreeNode]
    label: str
    step_start_index: int


class Session:
    """Caller-side state around the engine: root, frame trail, cursor and undo stack."""

    # ------------------ Initialization ------------------
    def __init__(self, speed_ms: int = config.DEFAULT_SPEED_MS):
        self.root: Optional[TreeNode] = None
        self.steps: List[AnimationStep] = []
        self.step_index: int = -1
        self.history: List[HistoryEntry] = []
        self.playing: bool = False
        self.speed_ms: int = self._clamp_speed(speed_ms)

    def __len__(self) -> int:
        """Number of keys in the current tree."""
        return count_nodes(self.root)

    # ------------------ Operations ------------------
    def insert(self, value: int) -> OperationResult:
        result = simulator.insert(self.root, value)
        self._add_operation(result, f"Insert {value}")
        return result

    def delete(self, value: int) -> OperationResult:
        result = simulator.delete(self.root, value)
        self._add_operation(result, f"Delete {value}")
        return result

    def _add_operation(self, result: OperationResult, label: str) -> None:
        self.history.append(HistoryEntry(tree=self.root, label=label, step_start_index=len(self.steps)))
        self.step_index = len(self.steps)
        self.steps.extend(result.steps)
        self.root = result.final_tree
        self.playing = True
        logger.info("%s recorded (%d frames, history depth %d)", label, len(result.steps), len(self.history))

    def undo(self) -> Optional[HistoryEntry]:
        """Roll back the last whole operation. Returns the popped entry or None."""
        if not self.history:
            return None
        last = self.history.pop()
        self.root = last.tree
        del self.steps[last.step_start_index:]
        self.step_index = last.step_start_index - 1
        self.playing = False
        logger.info("Undid %s", last.label)
        return last

    def reset(self) -> None:
        self.root = None
        self.steps = []
        self.step_index = -1
        self.history = []
        self.playing = False

    # ------------------ Cursor / playback ------------------
    @property
    def can_prev(self) -> bool:
        return self.step_index > -1

    @property
    def can_next(self) -> bool:
        return self.step_index < len(self.steps) - 1

    def step(self, delta: int) -> int:
        self.step_index = max(-1, min(len(self.steps) - 1, self.step_index + delta))
        return self.step_index

    def seek(self, index: int) -> int:
        if index < -1 or index >= len(self.steps):
            raise IndexError(f"step index {index} out of range [-1, {len(self.steps) - 1}]")
        self.step_index = index
        return self.step_index

    def tick(self) -> bool:
        """Advance one frame while playing; stop at the end. Returns True if moved."""
        if not self.playing:
            return False
        if self.can_next:
            self.step_index += 1
            return True
        self.playing = False
        return False

    def toggle_play(self) -> bool:
        self.playing = not self.playing
        return self.playing

    def set_speed(self, ms: int) -> int:
        self.speed_ms = self._clamp_speed(ms)
        return self.speed_ms

    @staticmethod
    def _clamp_speed(ms: int) -> int:
        return max(config.MIN_SPEED_MS, min(config.MAX_SPEED_MS, int(ms)))

    # ------------------ Views ------------------
    @property
    def current_step(self) -> Optional[AnimationStep]:
        if 0 <= self.step_index < len(self.steps):
            return self.steps[self.step_index]
        return None

    @property
    def display_tree(self) -> Optional[TreeNode]:
        step = self.current_step
        if step is not None:
            return step.tree
        return calculate_layout(self.root)

    def comparison_panel(self, offset: int = 0) -> Tuple[Optional[TreeNode], str]:
        """Tree shown beside the main view, and its label.

        offset 0 follows the current frame (pre-rotation tree if any, else the
        operation's base tree); offset k >= 1 walks back through history.
        """
        step = self.current_step
        if offset == 0:
            if step is not None and step.comparison_tree is not None:
                return step.comparison_tree, "Pre-Rotation"
            if step is not None:
                return step.base_tree, "Initial State"
            return None, "Ready"

        index = len(self.history) - offset
        if offset > 0 and 0 <= index < len(self.history):
            entry = self.history[index]
            return calculate_layout(entry.tree), entry.label
        return None, "Ready"

    def status(self) -> Dict[str, Any]:
        return {
            "nodes": len(self),
            "height": height_of(self.root),
            "steps": len(self.steps),
            "step_index": self.step_index,
            "can_prev": self.can_prev,
            "can_next": self.can_next,
            "playing": self.playing,
            "speed_ms": self.speed_ms,
            "history": [entry.label for entry in self.history],
        }

    def frame(self, offset: int = 0) -> Dict[str, Any]:
        step = self.current_step
        panel_tree, panel_label = self.comparison_panel(offset)
        return {
            "step_index": self.step_index,
            "step": step.to_dict() if step is not None else None,
            "display_tree": tree_to_dict(self.display_tree),
            "comparison": {"label": panel_label, "tree": tree_to_dict(panel_tree)},
        }
