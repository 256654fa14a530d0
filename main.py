import sys
import time
from typing import List, Optional, Tuple

from avltrace.nodes import TreeNode, height_of, inorder_values
from avltrace.session import Session, parse_key
from avltrace.simulator import is_avl

DEFAULT_SCRIPT = "+30 +20 +10 +25 +28 +5 +40 -20 -99 +10"


def parse_script(tokens: List[str]) -> List[Tuple[str, int]]:
    """'+5' inserts, '-5' deletes; a bare number inserts."""
    ops: List[Tuple[str, int]] = []
    for tok in tokens:
        kind = "delete" if tok.startswith("-") else "insert"
        key = parse_key(tok.lstrip("+-"))
        if key is None:
            print(f"[script] skipping invalid token {tok!r}")
            continue
        ops.append((kind, key))
    return ops


def render(node: Optional[TreeNode], prefix: str = "", tail: str = "") -> List[str]:
    """Sideways drawing, right subtree on top."""
    if node is None:
        return []
    lines = render(node.right, prefix + "    ", "/ ")
    lines.append(f"{prefix}{tail}{node.value} (h={node.height}, bf={node.balance_factor})")
    lines.extend(render(node.left, prefix + "    ", "\\ "))
    return lines


def run_smoke_test(tokens: List[str]):
    print("--- AVL trace smoke test ---")
    session = Session()

    for kind, key in parse_script(tokens):
        t0 = time.time()
        result = session.insert(key) if kind == "insert" else session.delete(key)
        t1 = time.time()

        print(f"\n{kind.upper()} {key}: {len(result.steps)} frames in {(t1 - t0) * 1000:.2f}ms")
        for i, step in enumerate(result.steps):
            print(f"  [{i:02d}] {step.action_type.value:<9} {step.description}")

    print("\nFinal tree:")
    for line in render(session.root) or ["  (empty)"]:
        print("  " + line)
    print(f"Inorder: {inorder_values(session.root)}")
    print(f"Height: {height_of(session.root)}, balanced: {is_avl(session.root)}")
    print(f"History: {[entry.label for entry in session.history]}")


if __name__ == "__main__":
    run_smoke_test(sys.argv[1:] or DEFAULT_SCRIPT.split())
