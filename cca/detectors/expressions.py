"""
Expression-level detectors.

Triggered on equality expressions and if-statements.

Each detector is a pure function: (node, facts) -> List[Diagnostic]
Facts are accepted for a uniform signature and ignored.
"""
from typing import List, Optional

from ..data_structures import (
    BinaryNode,
    DataFlowFacts,
    Diagnostic,
    IfNode,
    RuleId,
    SyntaxNode,
)
from .utils import count_logical_operators

STRING_COMPARE_PREFIX = "string.Compare("
MAX_LOGICAL_OPERATORS = 2


def check_string_compare(
    node: SyntaxNode,
    facts: Optional[DataFlowFacts] = None,
) -> List[Diagnostic]:
    """
    Detect `string.Compare(...) == 0` used as an equality test.

    VIOLATION PATTERN: string.Compare where string.Equals is meant.

    Matching is textual: the left operand must start with
    STRING_COMPARE_PREFIX and the right operand must be exactly `0`.
    Anything else that happens to share the prefix also matches.
    """
    if not isinstance(node, BinaryNode):
        return []

    if node.left is None or node.operator is None or node.right is None:
        return []

    if (
        node.left.text.startswith(STRING_COMPARE_PREFIX)
        and node.operator.text == "=="
        and node.right.text == "0"
    ):
        return [Diagnostic(RuleId.STRING_COMPARE_ABUSE, node.location, (node.text,))]

    return []


def check_if_condition(
    node: SyntaxNode,
    facts: Optional[DataFlowFacts] = None,
) -> List[Diagnostic]:
    """
    Report if-conditions with more than MAX_LOGICAL_OPERATORS `&&`/`||`.

    VIOLATION PATTERN: Overly compound condition.

    Operators are counted over the whole condition, including
    parenthesized sub-expressions and nested lambdas.
    """
    if not isinstance(node, IfNode) or node.condition is None:
        return []

    found = count_logical_operators(node.condition)
    if found <= MAX_LOGICAL_OPERATORS:
        return []

    return [
        Diagnostic(
            RuleId.COMPLEX_IF_CONDITION,
            node.condition.location,
            (str(found),),
        )
    ]
