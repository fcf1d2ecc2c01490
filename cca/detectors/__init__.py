"""
Structural Complexity Detectors

Detectors are pure functions that answer: "Which rule violations exist here?"

Design principles:
- Return a list of Diagnostics (empty when the rule does not apply)
- Stateless (no history, no configuration)
- Never raise on unexpected input
- No severity, filtering or message formatting

Thresholds are module constants. They are not user configurable.
"""
from typing import Callable, List, Optional

from ..data_structures import DataFlowFacts, Diagnostic, SyntaxNode


# Detector type signature
# Pure function: (node, facts) -> diagnostics
Detector = Callable[[SyntaxNode, Optional[DataFlowFacts]], List[Diagnostic]]


# Import all detector functions
from .expressions import (
    MAX_LOGICAL_OPERATORS,
    STRING_COMPARE_PREFIX,
    check_if_condition,
    check_string_compare,
)
from .methods import (
    MAX_NESTING_DEPTH,
    MAX_PARAMETERS,
    check_nesting_depth,
    check_parameter_count,
    find_unused_locals,
)

__all__ = [
    'Detector',
    'MAX_LOGICAL_OPERATORS',
    'MAX_NESTING_DEPTH',
    'MAX_PARAMETERS',
    'STRING_COMPARE_PREFIX',
    'check_if_condition',
    'check_nesting_depth',
    'check_parameter_count',
    'check_string_compare',
    'find_unused_locals',
]
