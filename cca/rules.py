"""
Rule Registry

Static descriptor table, one entry per RuleId.
Built once at import, read-only afterwards.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional

from .data_structures import RuleId


class Severity(Enum):
    INFO    = "info"
    WARNING = "warning"
    ERROR   = "error"


class Category:
    OPTIMIZATION = "Optimization"
    CLEAN_CODE   = "CleanCode"


@dataclass(frozen=True)
class RuleDescriptor:
    id:                 RuleId
    title:              str
    message_template:   str  # positional str.format fields: {0}, {1}
    category:           str
    severity:           Severity
    enabled_by_default: bool
    description:        str


_DESCRIPTORS = (
    RuleDescriptor(
        id=RuleId.UNUSED_LOCAL,
        title="Unused Local Variable.",
        message_template="{0} is unused.",
        category=Category.OPTIMIZATION,
        severity=Severity.WARNING,
        enabled_by_default=True,
        description="A local variable is declared in a method body but never read.",
    ),
    RuleDescriptor(
        id=RuleId.HIGH_PARAM_COUNT,
        title="Number of Parameters.",
        message_template="{0} has too many parameters ({1} parameters).",
        category=Category.OPTIMIZATION,
        severity=Severity.WARNING,
        enabled_by_default=True,
        description="A method declares more than three parameters.",
    ),
    RuleDescriptor(
        id=RuleId.DEEP_NESTING,
        title="Deep Nested Blocks.",
        message_template="{0} has deep nested blocks ({1} levels).",
        category=Category.OPTIMIZATION,
        severity=Severity.WARNING,
        enabled_by_default=True,
        description="A method nests blocks more than three levels below its body.",
    ),
    RuleDescriptor(
        id=RuleId.STRING_COMPARE_ABUSE,
        title="Use string.Equals instead of string.Compare.",
        message_template="Use string.Equals instead of string.Compare.",
        category=Category.CLEAN_CODE,
        severity=Severity.WARNING,
        enabled_by_default=True,
        description="string.Compare(...) == 0 is an equality test; string.Equals states it directly.",
    ),
    RuleDescriptor(
        id=RuleId.COMPLEX_IF_CONDITION,
        title="Complex If Condition.",
        message_template="Complex If Condition ({0}).",
        category=Category.CLEAN_CODE,
        severity=Severity.WARNING,
        enabled_by_default=True,
        description="An if-condition combines more than two && / || operators.",
    ),
)


RULES: Mapping[RuleId, RuleDescriptor] = MappingProxyType(
    {descriptor.id: descriptor for descriptor in _DESCRIPTORS}
)


assert set(RULES) == set(RuleId)


def descriptor_for(rule_id: RuleId) -> RuleDescriptor:
    return RULES[rule_id]


def supported_rules() -> List[RuleDescriptor]:
    return list(RULES.values())


def default_enabled_rules() -> FrozenSet[RuleId]:
    return frozenset(r.id for r in RULES.values() if r.enabled_by_default)


def parse_rule_ids(text: str) -> FrozenSet[RuleId]:
    """
    Parse a comma-separated list of rule ids, e.g. "PNCC001,pncc004".

    Raises ValueError on an unknown id.
    """
    ids = set()
    for part in text.split(","):
        part = part.strip().upper()
        if not part:
            continue
        try:
            ids.add(RuleId(part))
        except ValueError:
            known = ", ".join(r.value for r in RuleId)
            raise ValueError(f"Unknown rule id: {part} (known: {known})") from None
    return frozenset(ids)


def resolve_enabled_rules(
    select: Optional[Iterable[RuleId]] = None,
    ignore: Optional[Iterable[RuleId]] = None,
) -> FrozenSet[RuleId]:
    """Selected rules (default: enabled-by-default ones) minus ignored ones."""
    enabled = frozenset(select) if select else default_enabled_rules()
    return enabled - frozenset(ignore or ())
