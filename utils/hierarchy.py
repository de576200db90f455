# utils/hierarchy.py
import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from models.template import TaskTemplate

logger = logging.getLogger(__name__)


class InvalidTemplateStructure(ValueError):
    pass


@dataclass
class TemplateNode:
    template: TaskTemplate
    children: List["TemplateNode"] = field(default_factory=list)

    @property
    def id(self):
        return self.template.id


def _check_cycles(by_id: dict) -> None:
    done = set()
    for start in by_id:
        path = []
        seen = set()
        current = start
        while current in by_id and current not in done:
            if current in seen:
                cycle = path[path.index(current):] + [current]
                raise InvalidTemplateStructure(
                    "Invalid template structure: cyclic parent chain "
                    + " -> ".join(str(i) for i in cycle))
            seen.add(current)
            path.append(current)
            current = by_id[current].parent_template_id
        done.update(path)


def _sort_key(node: TemplateNode) -> int:
    return node.template.sort_order or 0


def build_tree(flat_templates: Sequence[TaskTemplate]) -> List[TemplateNode]:
    """Turn a flat list of task templates into sibling-ordered trees.

    Children follow ``sort_order``; equal sort orders keep input order.
    A parent id that matches no template makes the task a root (logged).
    Cyclic parent chains and duplicate ids raise ``InvalidTemplateStructure``.
    """
    nodes = {}
    for t in flat_templates:
        if t.id is None:
            raise InvalidTemplateStructure(f"Invalid template structure: task template {t.title!r} has no id")
        if t.id in nodes:
            raise InvalidTemplateStructure(f"Invalid template structure: duplicate task template id {t.id}")
        nodes[t.id] = TemplateNode(t)

    _check_cycles({i: n.template for i, n in nodes.items()})

    roots = []
    for node in nodes.values():
        parent_id = node.template.parent_template_id
        if parent_id is None:
            roots.append(node)
        elif parent_id in nodes:
            nodes[parent_id].children.append(node)
        else:
            logger.warning("Task template %s (%r) references missing parent %s; treating it as top level",
                           node.id, node.template.title, parent_id)
            roots.append(node)

    # list.sort is stable, so ties stay in input order
    roots.sort(key=_sort_key)
    for node in nodes.values():
        node.children.sort(key=_sort_key)
    return roots


def walk(tree: Sequence[TemplateNode]) -> Iterator[Tuple[TemplateNode, int]]:
    """Pre-order ``(node, depth)`` pairs."""
    stack = [(n, 0) for n in reversed(tree)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((c, depth + 1) for c in reversed(node.children))
