"""
Ordered keyword rules.

Pricing and categorization are both "first matching rule wins" lookups over
an ingredient name.
"""

from dataclasses import dataclass
from typing import Any, Sequence, Tuple


@dataclass(frozen=True)
class KeywordRule:
    """A single substring rule mapping a name to a value."""

    label: str
    value: Any
    any_of: Tuple[str, ...] = ()   # at least one must occur (ignored if empty)
    all_of: Tuple[str, ...] = ()   # every one must occur
    none_of: Tuple[str, ...] = ()  # none may occur

    def matches(self, name: str) -> bool:
        if self.any_of and not any(word in name for word in self.any_of):
            return False
        if not all(word in name for word in self.all_of):
            return False
        return not any(word in name for word in self.none_of)


def first_match(rules: Sequence[KeywordRule], name: str, default: Any) -> Any:
    """
    Return the value of the first rule matching ``name``.

    Args:
        rules: Rules in precedence order
        name: Lowercased ingredient name
        default: Value returned when no rule matches

    Returns:
        Matched rule value or ``default``
    """
    for rule in rules:
        if rule.matches(name):
            return rule.value
    return default


def matching_rule(rules: Sequence[KeywordRule], name: str):
    """Return the first matching rule itself, or None."""
    for rule in rules:
        if rule.matches(name):
            return rule
    return None
