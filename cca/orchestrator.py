"""
Orchestrator

Glue layer. Routes normalized nodes to detectors and collects diagnostics.
No thresholds, no rule logic.
"""
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

from .data_structures import DataFlowFacts, Diagnostic, NodeKind, RuleId, SyntaxNode
from .detectors import (
    Detector,
    check_if_condition,
    check_nesting_depth,
    check_parameter_count,
    check_string_compare,
    find_unused_locals,
)
from .detectors.utils import iter_nodes
from .findings import gate_diagnostics
from .git_files import SOURCE_SUFFIX, changed_files
from .parsing import parse_source

log = logging.getLogger(__name__)


DISPATCH_TABLE: Mapping[NodeKind, Tuple[Detector, ...]] = MappingProxyType({
    NodeKind.METHOD_DECLARATION: (
        find_unused_locals,
        check_parameter_count,
        check_nesting_depth,
    ),
    NodeKind.EQUALS_EXPRESSION: (check_string_compare,),
    NodeKind.IF_STATEMENT:      (check_if_condition,),
})

_SKIPPED_DIRS = {"bin", "obj", "node_modules", "packages"}


def analyze_tree(
    root: SyntaxNode,
    facts: Optional[Mapping[SyntaxNode, DataFlowFacts]] = None,
    rules: Optional[Iterable[RuleId]] = None,
) -> List[Diagnostic]:
    """Run every registered detector over the tree and gate the results."""
    facts = facts or {}
    diagnostics: List[Diagnostic] = []

    for node in iter_nodes(root):
        for detector in DISPATCH_TABLE.get(node.kind, ()):
            found = detector(node, facts.get(node))
            for diagnostic in found:
                log.debug("%s: %s %s", diagnostic.location, diagnostic.rule_id.value, diagnostic.arguments)
            diagnostics.extend(found)

    return gate_diagnostics(diagnostics, rules)


def analyze_source(
    source: str,
    path: str = "<string>",
    rules: Optional[Iterable[RuleId]] = None,
) -> List[Diagnostic]:
    parsed = parse_source(source, path)
    return analyze_tree(parsed.root, parsed.facts, rules)


def analyze_file(
    file_path: Path,
    rules: Optional[Iterable[RuleId]] = None,
    display_path: Optional[str] = None,
) -> List[Diagnostic]:
    try:
        source = Path(file_path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Skipping %s: %s", file_path, e)
        return []

    log.debug("Analyzing %s", file_path)
    return analyze_source(source, display_path or str(file_path), rules)


def _iter_source_files(root: Path) -> Iterator[Path]:
    for file_path in sorted(root.rglob(f"*{SOURCE_SUFFIX}")):
        # Skip hidden, build output, restored packages
        parts = file_path.relative_to(root).parts
        if any(p.startswith(".") or p in _SKIPPED_DIRS for p in parts[:-1]):
            continue
        if file_path.is_file():
            yield file_path


def analyze_path(
    path: Path,
    rules: Optional[Iterable[RuleId]] = None,
    changed_since: Optional[str] = None,
) -> List[Diagnostic]:
    """
    Analyze a single file or every C# file below a directory.

    With changed_since, only files changed relative to that Git revision
    (plus untracked files) are analyzed.
    """
    root = Path(path).resolve()
    if not root.exists():
        raise ValueError(f"Path does not exist: {root}")

    if changed_since is not None:
        repo = root if root.is_dir() else root.parent
        candidates = [
            p for p in changed_files(str(repo), changed_since)
            if p == root or root in p.parents
        ]
    elif root.is_file():
        candidates = [root]
    else:
        candidates = list(_iter_source_files(root))

    base = root if root.is_dir() else root.parent
    all_diagnostics: List[Diagnostic] = []
    for file_path in candidates:
        display = str(file_path.relative_to(base)) if base in file_path.parents else str(file_path)
        all_diagnostics.extend(analyze_file(file_path, rules, display_path=display))

    return gate_diagnostics(all_diagnostics, rules)
