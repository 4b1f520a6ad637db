"""
Generic XML node tree.

A node is a tag plus an attribute map, an optional scalar text value and an
ordered list of child nodes. Repeated children under one tag are just
repeated entries in ``children``. The manifest builder produces this tree;
the serializer walks it without knowing anything about the manifest shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class XmlNode:
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["XmlNode"] = field(default_factory=list)
    text: Optional[str] = None

    def append(self, *children: Optional["XmlNode"]) -> "XmlNode":
        """Append children, skipping absent (None) ones. Returns self."""
        for child in children:
            if child is not None:
                self.children.append(child)
        return self

    def extend(self, children: Iterable[Optional["XmlNode"]]) -> "XmlNode":
        return self.append(*children)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def find(self, tag: str) -> Optional["XmlNode"]:
        """First direct child with ``tag``."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def find_all(self, tag: str) -> List["XmlNode"]:
        return [child for child in self.children if child.tag == tag]

    def find_path(self, path: str) -> Optional["XmlNode"]:
        """Follow a ``/``-separated chain of first-match child tags."""
        current: Optional[XmlNode] = self
        for tag in path.split("/"):
            if current is None:
                return None
            current = current.find(tag)
        return current

    def iter(self, tag: Optional[str] = None) -> Iterator["XmlNode"]:
        """Depth-first walk over this node and all descendants."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            yield from child.iter(tag)

    @property
    def is_empty(self) -> bool:
        return not self.attributes and not self.children and self.text is None


def node(
    tag: str,
    attributes: Optional[Mapping[str, Any]] = None,
    *children: Optional[XmlNode],
    text: Any = None,
) -> XmlNode:
    """
    Build a node; attributes whose value is None are dropped and scalar
    values are stringified.
    """
    attrs = {name: _stringify(value) for name, value in (attributes or {}).items() if value is not None}
    return XmlNode(
        tag=tag,
        attributes=attrs,
        text=None if text is None else _stringify(text),
    ).append(*children)
