"""Resolve one field descriptor against a matched node into named row values."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from bs4.element import Tag

from .fields import TEXT_ATTRIBUTE, FieldSpec


class NamedValueRow:
    """Insertion-ordered values keyed "{index}-{attribute}" with a 1-based running index."""

    def __init__(self) -> None:
        self._values: Dict[str, str] = {}

    def add(self, attribute: str, value: str) -> str:
        key = f"{len(self._values) + 1}-{attribute}"
        self._values[key] = value
        return key

    def keys(self) -> List[str]:
        return list(self._values)

    def values(self) -> List[str]:
        return list(self._values.values())

    def items(self) -> List[Tuple[str, str]]:
        return list(self._values.items())

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"NamedValueRow({self._values!r})"


def attribute_value(node: Tag, attribute: str) -> str:
    value = node.get(attribute)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def match_text(spec: FieldSpec, text: str, max_text_length: int = 0) -> str:
    """Return the payload group of the field pattern, or "" when it does not match."""
    if max_text_length > 0:
        text = text[:max_text_length]
    match = spec.regex.search(text)
    if match is None:
        return ""
    return match.group(2) or ""


def resolve_field(
    spec: FieldSpec,
    node: Optional[Tag],
    row: NamedValueRow,
    max_text_length: int = 0,
) -> None:
    """Append one value per requested attribute of ``spec`` to ``row``.

    A missing node yields empty strings so every row has the same width
    whether or not the selector matched.
    """
    for attribute in spec.attributes:
        if node is None:
            row.add(attribute, "")
        elif attribute == TEXT_ATTRIBUTE:
            row.add(attribute, match_text(spec, node.get_text(), max_text_length))
        else:
            row.add(attribute, attribute_value(node, attribute))


__all__ = ["NamedValueRow", "resolve_field", "match_text", "attribute_value"]
