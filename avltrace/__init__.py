from .nodes import ActionType, AnimationStep, OperationResult, TreeNode
from .layout import calculate_layout
from .simulator import AVLTreeSimulator, build, delete, insert, is_avl
from .session import HistoryEntry, Session, parse_key

__all__ = [
    "ActionType",
    "AnimationStep",
    "OperationResult",
    "TreeNode",
    "calculate_layout",
    "AVLTreeSimulator",
    "build",
    "insert",
    "delete",
    "is_avl",
    "HistoryEntry",
    "Session",
    "parse_key",
]
