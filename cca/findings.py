"""
Diagnostic Gating

Filter, dedup, rank.
Pipeline: filter → dedup → rank
"""
from typing import Iterable, List, Optional

from .data_structures import Diagnostic, RuleId
from .rules import default_enabled_rules


def _filter(diagnostics: List[Diagnostic], enabled: Iterable[RuleId]) -> List[Diagnostic]:
    enabled = frozenset(enabled)
    return [d for d in diagnostics if d.rule_id in enabled]


def _dedup(diagnostics: List[Diagnostic]) -> List[Diagnostic]:
    # Exact key dedup, first occurrence wins
    seen: dict[Diagnostic, None] = {}
    for d in diagnostics:
        seen.setdefault(d, None)
    return list(seen)


def _rank(diagnostics: List[Diagnostic]) -> List[Diagnostic]:
    return sorted(
        diagnostics,
        key=lambda d: (d.location, d.rule_id.value, d.arguments),
    )


def gate_diagnostics(
    diagnostics: List[Diagnostic],
    enabled: Optional[Iterable[RuleId]] = None,
) -> List[Diagnostic]:
    if enabled is None:
        enabled = default_enabled_rules()
    filtered = _filter(diagnostics, enabled)
    deduped  = _dedup(filtered)
    return _rank(deduped)
