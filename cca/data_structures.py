"""
Data structures for the normalized syntax tree and analysis results.

All structures are immutable. Syntax nodes compare by identity: a node is
one position in one parsed tree, two nodes with the same text are still
different nodes.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True, order=True)
class SourceSpan:
    """A region of a source file. Lines and columns are 1-based."""

    path: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.start_line}:{self.start_column}"


@dataclass(frozen=True)
class Token:
    text: str
    location: SourceSpan


class NodeKind(Enum):
    METHOD_DECLARATION = "method_declaration"
    BLOCK              = "block"
    IF_STATEMENT       = "if_statement"
    EQUALS_EXPRESSION  = "equals_expression"
    BINARY_EXPRESSION  = "binary_expression"
    PARAMETER_LIST     = "parameter_list"
    PARAMETER          = "parameter"
    OTHER              = "other"


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """
    Read-only view of one node of the host tree.

    `syntax` is the grammar's own name for the node, `kind` is the
    closed tag the orchestrator dispatches on.
    """

    kind: NodeKind
    syntax: str
    text: str
    location: SourceSpan
    children: Tuple["SyntaxNode", ...] = ()
    tokens: Tuple[Token, ...] = ()

    @property
    def is_block(self) -> bool:
        return self.kind is NodeKind.BLOCK


@dataclass(frozen=True, eq=False)
class MethodNode(SyntaxNode):
    identifier: Optional[Token] = None
    parameters: Tuple[SyntaxNode, ...] = ()
    body: Optional[SyntaxNode] = None  # None for abstract / interface / extern

    @property
    def name(self) -> str:
        return self.identifier.text if self.identifier else ""


@dataclass(frozen=True, eq=False)
class IfNode(SyntaxNode):
    condition: Optional[SyntaxNode] = None


@dataclass(frozen=True, eq=False)
class BinaryNode(SyntaxNode):
    left: Optional[SyntaxNode] = None
    operator: Optional[Token] = None
    right: Optional[SyntaxNode] = None


@dataclass(frozen=True)
class Symbol:
    """A local variable, identified by where it is declared."""

    name: str
    location: SourceSpan


@dataclass(frozen=True)
class DataFlowFacts:
    """Declared and read locals of one method body."""

    declared: FrozenSet[Symbol] = field(default_factory=frozenset)
    read: FrozenSet[Symbol] = field(default_factory=frozenset)

    @property
    def unread(self) -> FrozenSet[Symbol]:
        return self.declared - self.read


class RuleId(Enum):
    UNUSED_LOCAL         = "PNCC001"
    HIGH_PARAM_COUNT     = "PNCC002"
    DEEP_NESTING         = "PNCC003"
    STRING_COMPARE_ABUSE = "PNCC004"
    COMPLEX_IF_CONDITION = "PNCC005"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding. `arguments` fill the rule's message template."""

    rule_id: RuleId
    location: SourceSpan
    arguments: Tuple[str, ...] = ()
