"""Structural helpers shared by the tree tests."""


def shape(node):
    """Nested tuples of (value, height, bf, left, right); ignores ids and coordinates."""
    if node is None:
        return None
    return (node.value, node.height, node.balance_factor, shape(node.left), shape(node.right))


def depth_map(node, depth=0, out=None):
    """value -> depth for every node."""
    out = {} if out is None else out
    if node is not None:
        out[node.value] = depth
        depth_map(node.left, depth + 1, out)
        depth_map(node.right, depth + 1, out)
    return out


def all_nodes(node):
    if node is None:
        return []
    return all_nodes(node.left) + [node] + all_nodes(node.right)
