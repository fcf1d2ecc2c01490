"""
Tree-sitter parsing for C# sources.

Turns a tree-sitter tree into the read-only SyntaxNode view the detectors
consume, and computes data-flow facts for every method body:

- Named tree-sitter nodes become SyntaxNodes, anonymous ones become Tokens
- Named leaves (identifiers, literals) become a node holding one token
- Comments are dropped

Conversion uses an explicit stack. Tree-sitter nests long operator chains
one level per operand, so tree depth is bounded only by the source.

Note: data flow here is syntactic. A read is an identifier occurrence that
resolves by name to the innermost enclosing declaration. Fields,
parameters and anything not declared inside the body are ignored; lambda
and local-function parameters shadow locals but are never locals themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

import tree_sitter_c_sharp as tscsharp
from tree_sitter import Language, Node, Parser

from .data_structures import (
    BinaryNode,
    DataFlowFacts,
    IfNode,
    MethodNode,
    NodeKind,
    SourceSpan,
    Symbol,
    SyntaxNode,
    Token,
)

log = logging.getLogger(__name__)

CSHARP_LANGUAGE = Language(tscsharp.language())

_SKIPPED = frozenset({"comment"})

_SIMPLE_KINDS = {
    "block":          NodeKind.BLOCK,
    "parameter_list": NodeKind.PARAMETER_LIST,
    "parameter":      NodeKind.PARAMETER,
    "parameter_array": NodeKind.PARAMETER,
}

# Constructs that open a scope for the names declared inside them
_SCOPES = frozenset({
    "block",
    "for_statement",
    "foreach_statement",
    "catch_clause",
    "using_statement",
    "fixed_statement",
    "switch_section",
    "lambda_expression",
    "anonymous_method_expression",
    "local_function_statement",
})

# Constructs that introduce locals
_DECLARATIONS = frozenset({
    "variable_declarator",
    "foreach_statement",
    "catch_declaration",
    "declaration_expression",
    "declaration_pattern",
    "var_pattern",
    "recursive_pattern",
    "single_variable_designation",
    "parenthesized_variable_designation",
    "tuple_pattern",
})

# Constructs whose parameters shadow outer locals
_FUNCTIONS = frozenset({
    "lambda_expression",
    "anonymous_method_expression",
    "local_function_statement",
})

# Identifier positions that never name a local
_NON_REFERENCE_PARENTS = frozenset({"name_colon", "name_equals"})

_Span = Tuple[int, int]


@dataclass(frozen=True)
class ParsedSource:
    path: str
    root: SyntaxNode
    facts: Mapping[MethodNode, DataFlowFacts]
    has_errors: bool = False


def _span(node: Node) -> _Span:
    return node.start_byte, node.end_byte


class _Normalizer:
    """Converts one tree-sitter tree; not reusable across files."""

    def __init__(self, source: bytes, path: str):
        self.source = source
        self.path = path
        self.facts: Dict[MethodNode, DataFlowFacts] = {}

    def _column(self, byte_offset: int, byte_column: int) -> int:
        # tree-sitter columns count bytes; report characters
        line_start = byte_offset - byte_column
        prefix = self.source[line_start:byte_offset]
        return len(prefix.decode("utf-8", errors="replace")) + 1

    def location(self, node: Node) -> SourceSpan:
        return SourceSpan(
            path=self.path,
            start_line=node.start_point[0] + 1,
            start_column=self._column(node.start_byte, node.start_point[1]),
            end_line=node.end_point[0] + 1,
            end_column=self._column(node.end_byte, node.end_point[1]),
        )

    def text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def token(self, node: Node) -> Token:
        return Token(text=self.text(node), location=self.location(node))

    def convert(self, root: Node) -> SyntaxNode:
        """Build the SyntaxNode tree bottom-up, children before parents."""
        order: List[Node] = []
        stack = [root]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(c for c in node.children if c.is_named and c.type not in _SKIPPED)

        built: Dict[int, SyntaxNode] = {}
        for node in reversed(order):
            built[node.id] = self._build(node, built)
        return built[root.id]

    def _build(self, node: Node, built: Dict[int, SyntaxNode]) -> SyntaxNode:
        children: List[SyntaxNode] = []
        tokens: List[Token] = []
        by_span: Dict[_Span, SyntaxNode] = {}

        for child in node.children:
            if child.type in _SKIPPED:
                continue
            if child.is_named:
                converted = built.pop(child.id)
                children.append(converted)
                by_span[_span(child)] = converted
            else:
                tokens.append(self.token(child))

        if not node.children:
            tokens.append(self.token(node))

        def field(name: str) -> Optional[SyntaxNode]:
            target = node.child_by_field_name(name)
            return by_span.get(_span(target)) if target is not None else None

        common = dict(
            syntax=node.type,
            text=self.text(node),
            location=self.location(node),
            children=tuple(children),
            tokens=tuple(tokens),
        )

        if node.type == "method_declaration":
            return self._method(node, children, field, common)

        if node.type == "if_statement":
            return IfNode(kind=NodeKind.IF_STATEMENT, condition=field("condition"), **common)

        if node.type == "binary_expression":
            op_node = node.child_by_field_name("operator")
            operator = self.token(op_node) if op_node is not None else None
            kind = NodeKind.BINARY_EXPRESSION
            if operator is not None and operator.text == "==":
                kind = NodeKind.EQUALS_EXPRESSION
            return BinaryNode(
                kind=kind,
                left=field("left"),
                operator=operator,
                right=field("right"),
                **common,
            )

        return SyntaxNode(kind=_SIMPLE_KINDS.get(node.type, NodeKind.OTHER), **common)

    def _method(self, node, children, field, common) -> MethodNode:
        name_node = node.child_by_field_name("name")
        identifier = self.token(name_node) if name_node is not None else None

        parameters: Tuple[SyntaxNode, ...] = ()
        for child in children:
            if child.kind is NodeKind.PARAMETER_LIST:
                parameters = tuple(
                    p for p in child.children if p.kind is NodeKind.PARAMETER
                )
                break

        body = field("body")
        if body is not None and not body.is_block:
            body = None  # expression-bodied

        method = MethodNode(
            kind=NodeKind.METHOD_DECLARATION,
            identifier=identifier,
            parameters=parameters,
            body=body,
            **common,
        )
        if body is not None:
            self.facts[method] = _DataFlowCollector(self).collect(
                node.child_by_field_name("body")
            )
        return method


class _DataFlowCollector:
    """Declared and read locals of one method body."""

    def __init__(self, normalizer: _Normalizer):
        self.normalizer = normalizer
        # (name, declaring identifier, enclosing scope, is a local)
        self.declarations: List[Tuple[str, Node, Node, bool]] = []
        self.declaring: set[_Span] = set()
        self.identifiers: List[Node] = []

    def _declare(self, ident: Node, scope: Node, local: bool = True) -> None:
        self.declarations.append((self.normalizer.text(ident), ident, scope, local))
        self.declaring.add(_span(ident))

    def collect(self, body: Node) -> DataFlowFacts:
        stack = [(body, body)]
        while stack:
            node, scope = stack.pop()
            if node.type in _DECLARATIONS:
                own_scope = node if node.type == "foreach_statement" else scope
                for ident in _declared_identifiers(node):
                    self._declare(ident, own_scope)
            elif node.type == "identifier":
                self.identifiers.append(node)

            if node.type in _FUNCTIONS:
                for ident in _parameter_identifiers(node):
                    self._declare(ident, node, local=False)

            inner = node if node.type in _SCOPES else scope
            for child in reversed(node.children):
                if child.is_named:
                    stack.append((child, inner))

        declared = {
            _span(ident): Symbol(name, self.normalizer.location(ident))
            for name, ident, _, local in self.declarations
            if local
        }

        read = set()
        for ident in self.identifiers:
            if _span(ident) in self.declaring or not _is_read(ident):
                continue
            target = self._resolve(ident)
            if target is not None and _span(target) in declared:
                read.add(declared[_span(target)])

        return DataFlowFacts(declared=frozenset(declared.values()), read=frozenset(read))

    def _resolve(self, ident: Node) -> Optional[Node]:
        """Innermost declaration of the same name visible at ident."""
        name = self.normalizer.text(ident)
        best = None
        best_key = None
        for decl_name, decl_ident, scope, _ in self.declarations:
            if decl_name != name:
                continue
            if not (scope.start_byte <= ident.start_byte < scope.end_byte):
                continue
            if decl_ident.start_byte > ident.start_byte:
                continue
            key = (scope.end_byte - scope.start_byte, -decl_ident.start_byte)
            if best_key is None or key < best_key:
                best, best_key = decl_ident, key
        return best


def _identifier_children(node: Node) -> List[Node]:
    """Direct identifier children, leaving out the declared type."""
    type_node = node.child_by_field_name("type")
    type_span = _span(type_node) if type_node is not None else None
    return [
        child for child in node.named_children
        if child.type == "identifier" and _span(child) != type_span
    ]


def _declared_identifiers(node: Node) -> List[Node]:
    if node.type == "foreach_statement":
        left = node.child_by_field_name("left")
        return [left] if left is not None and left.type == "identifier" else []

    name = node.child_by_field_name("name")
    if name is not None and name.type == "identifier":
        return [name]

    if node.type == "variable_declarator":
        # initializer identifiers follow the name; tuple targets are their own node
        first = node.named_children[0] if node.named_children else None
        return [first] if first is not None and first.type == "identifier" else []

    if node.type == "catch_declaration" or node.type == "declaration_expression":
        return _identifier_children(node)[-1:]

    return _identifier_children(node)


def _parameter_identifiers(node: Node) -> List[Node]:
    params = node.child_by_field_name("parameters")
    if params is None:
        kinds = ("parameter_list",)
        if node.type == "lambda_expression":
            kinds = ("parameter_list", "identifier", "implicit_parameter")
        for child in node.children:
            if child.type in kinds:
                params = child
                break
            if child.type in ("=>", "block"):
                break
    if params is None:
        return []

    # `x => ...` has a bare name instead of a list
    if params.type in ("identifier", "implicit_parameter"):
        return [params]

    names = []
    for param in params.named_children:
        if param.type == "identifier":
            names.append(param)
            continue
        name = param.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            names.append(name)
    return names


def _is_out_argument(node: Node) -> bool:
    return node.type == "argument" and any(
        child.type in ("out", "modifier") and child.text == b"out"
        for child in node.children
    )


def _is_assignment_target(ident: Node) -> bool:
    """True when ident is written by a plain `=`, alone or inside a tuple."""
    node = ident
    parent = node.parent
    while parent is not None:
        if parent.type == "tuple_expression":
            node, parent = parent, parent.parent
        elif parent.type == "argument" and parent.parent is not None \
                and parent.parent.type == "tuple_expression":
            node, parent = parent, parent.parent
        else:
            break

    if parent is None or parent.type != "assignment_expression":
        return False
    left = parent.child_by_field_name("left")
    return (
        left is not None
        and _span(left) == _span(node)
        and _assignment_operator(parent) == "="
    )


def _is_read(ident: Node) -> bool:
    parent = ident.parent
    if parent is None:
        return True

    if parent.type in _NON_REFERENCE_PARENTS:
        return False

    if parent.type == "member_access_expression":
        member = parent.child_by_field_name("name")
        if member is not None and _span(member) == _span(ident):
            return False

    if _is_out_argument(parent):
        return False

    return not _is_assignment_target(ident)


def _assignment_operator(node: Node) -> str:
    op = node.child_by_field_name("operator")
    if op is not None:
        return op.text.decode("utf-8")
    for child in node.children:
        if not child.is_named or child.type == "assignment_operator":
            return child.text.decode("utf-8")
    return ""


def parse_source(source: str, path: str = "<string>") -> ParsedSource:
    """
    Parse C# source into the normalized tree plus per-method facts.

    Never raises on malformed code: tree-sitter recovers and whatever
    parsed is analyzed.
    """
    data = source.encode("utf-8")
    tree = Parser(CSHARP_LANGUAGE).parse(data)

    has_errors = tree.root_node.has_error
    if has_errors:
        log.warning("%s: syntax errors, analysis may be incomplete", path)

    normalizer = _Normalizer(data, path)
    root = normalizer.convert(tree.root_node)
    return ParsedSource(
        path=path,
        root=root,
        facts=normalizer.facts,
        has_errors=has_errors,
    )
