"""
Stateless traversal helpers shared by the detectors.

These are pure helper functions over the normalized tree.
They never mutate a node and never look outside the subtree they are given.
"""
from typing import Iterator, List

from ..data_structures import NodeKind, SyntaxNode

LOGICAL_OPERATORS = frozenset({"&&", "||"})


# Tree walking utilities

def iter_nodes(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield root and all of its descendants in pre-order (source order)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_nodes_of_kind(root: SyntaxNode, kind: NodeKind) -> List[SyntaxNode]:
    """
    Find all nodes of a specific kind in the tree.

    Example:
        find_nodes_of_kind(root, NodeKind.METHOD_DECLARATION)  # All methods
    """
    return [node for node in iter_nodes(root) if node.kind is kind]


# Nesting utilities

def block_depths(node: SyntaxNode, depth: int = 0) -> List[int]:
    """
    Record the nesting depth of every block below node.

    A block child records the current depth and is descended one level
    deeper; other children are descended at the same depth. Called on a
    method, its body records 0 and a block d levels inside the body
    records d.
    """
    depths: List[int] = []
    stack = [(child, depth) for child in reversed(node.children)]
    while stack:
        current, level = stack.pop()
        if current.is_block:
            depths.append(level)
            level += 1
        stack.extend((child, level) for child in reversed(current.children))
    return depths


# Token utilities

def count_logical_operators(node: SyntaxNode) -> int:
    """Count `&&` and `||` tokens anywhere in the subtree of node."""
    return sum(
        1
        for current in iter_nodes(node)
        for token in current.tokens
        if token.text in LOGICAL_OPERATORS
    )
