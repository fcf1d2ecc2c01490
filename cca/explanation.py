"""
Explanation Layer

Translate Diagnostics to human-readable text using the rule registry.
"""
from dataclasses import dataclass
from typing import Any, Dict, List

from .data_structures import Diagnostic
from .rules import RuleDescriptor, descriptor_for


@dataclass(frozen=True)
class Explanation:
    diagnostic: Diagnostic
    descriptor: RuleDescriptor
    message: str

    def render(self) -> str:
        return (
            f"{self.diagnostic.location}: "
            f"{self.descriptor.severity.value} {self.descriptor.id.value}: "
            f"{self.message}"
        )

    def to_dict(self) -> Dict[str, Any]:
        loc = self.diagnostic.location
        return {
            "rule": self.descriptor.id.value,
            "title": self.descriptor.title,
            "category": self.descriptor.category,
            "severity": self.descriptor.severity.value,
            "message": self.message,
            "arguments": list(self.diagnostic.arguments),
            "path": loc.path,
            "line": loc.start_line,
            "column": loc.start_column,
            "end_line": loc.end_line,
            "end_column": loc.end_column,
        }


def format_message(diagnostic: Diagnostic) -> str:
    template = descriptor_for(diagnostic.rule_id).message_template
    return template.format(*diagnostic.arguments)


def explain(diagnostics: List[Diagnostic]) -> List[Explanation]:
    return [
        Explanation(
            diagnostic=d,
            descriptor=descriptor_for(d.rule_id),
            message=format_message(d),
        )
        for d in diagnostics
    ]
