"""
Method-level detectors.

Triggered on method declarations. Each detector is a pure function:
(node, facts) -> List[Diagnostic]

All three skip methods without a body (abstract, interface, extern,
expression-bodied).
"""
from typing import List, Optional

from ..data_structures import (
    DataFlowFacts,
    Diagnostic,
    MethodNode,
    RuleId,
    SourceSpan,
    SyntaxNode,
)
from .utils import block_depths

MAX_PARAMETERS    = 3
MAX_NESTING_DEPTH = 3


def _has_body(node: SyntaxNode) -> bool:
    return isinstance(node, MethodNode) and node.body is not None


def _anchor(node: MethodNode) -> SourceSpan:
    # Recovered trees can lack the name token
    return node.identifier.location if node.identifier else node.location


def find_unused_locals(
    node: SyntaxNode,
    facts: Optional[DataFlowFacts] = None,
) -> List[Diagnostic]:
    """
    Report locals that are declared in the method body but never read.

    VIOLATION PATTERN: Unused local variable.

    One diagnostic per unread symbol, at its declaration, in source order.
    Without data-flow facts nothing is reported.
    """
    if not _has_body(node) or facts is None:
        return []

    unused = sorted(facts.unread, key=lambda s: s.location)
    return [
        Diagnostic(RuleId.UNUSED_LOCAL, symbol.location, (symbol.name,))
        for symbol in unused
    ]


def check_parameter_count(
    node: SyntaxNode,
    facts: Optional[DataFlowFacts] = None,
) -> List[Diagnostic]:
    """
    Report methods that take more than MAX_PARAMETERS parameters.

    VIOLATION PATTERN: Too many parameters.

    Only implementations are reported: interface and abstract
    declarations have no body and are skipped.
    """
    if not _has_body(node):
        return []

    count = len(node.parameters)
    if count <= MAX_PARAMETERS:
        return []

    return [
        Diagnostic(
            RuleId.HIGH_PARAM_COUNT,
            _anchor(node),
            (node.name, str(count)),
        )
    ]


def max_nesting_depth(node: MethodNode) -> int:
    """Deepest block level below the method body. A flat body is 0."""
    return max(block_depths(node), default=0)


def check_nesting_depth(
    node: SyntaxNode,
    facts: Optional[DataFlowFacts] = None,
) -> List[Diagnostic]:
    """
    Report methods whose blocks nest more than MAX_NESTING_DEPTH levels.

    VIOLATION PATTERN: Deeply nested blocks.
    """
    if not _has_body(node):
        return []

    depth = max_nesting_depth(node)
    if depth <= MAX_NESTING_DEPTH:
        return []

    return [
        Diagnostic(
            RuleId.DEEP_NESTING,
            _anchor(node),
            (node.name, str(depth)),
        )
    ]
