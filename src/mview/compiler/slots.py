"""Slot grouping over a completed children spec."""

import re
from dataclasses import dataclass, field
from typing import Dict, List

from mview.compiler.ast_nodes import ChildrenSpec, Node, Slot

_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM = re.compile(r"([A-Z]+)([A-Z][a-z])")


def slot_param_name(slot_name: str) -> str:
    """Keyword under which a slot is passed: ``ui.ElseIf`` -> ``else_if``."""
    last = slot_name.rsplit(".", 1)[-1]
    snake = _ACRONYM.sub(r"\1_\2", last)
    snake = _LOWER_UPPER.sub(r"\1_\2", snake)
    return snake.lower()


@dataclass
class GroupedChildren:
    children: List[Node] = field(default_factory=list)
    # Keyed by parameter name, in order of first appearance.
    slots: Dict[str, List[Slot]] = field(default_factory=dict)


def group_slots(spec: ChildrenSpec) -> GroupedChildren:
    """Split ordinary children from slots, grouping slots by parameter name.

    Slots of the same name keep their declaration order; nothing is
    deduplicated.
    """
    grouped = GroupedChildren()
    for node in spec.nodes:
        if isinstance(node, Slot):
            grouped.slots.setdefault(slot_param_name(node.name), []).append(node)
        else:
            grouped.children.append(node)
    return grouped
