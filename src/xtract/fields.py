"""Field descriptors: what to extract for each output column."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .errors import ConfigError, InvalidPattern

# Group 1 is an optional prefix, group 2 the payload, group 3 an optional suffix.
DEFAULT_PATTERN = r"^()(.*?)()$"
TEXT_ATTRIBUTE = "text"

_BRACE_QUANTIFIER = re.compile(r"\{(\d*)(,(\d*))?\}")


def _quantifier(pattern: str, pos: int) -> Tuple[bool, int]:
    """Read an optional quantifier at ``pos``; return (unbounded, next position)."""
    if pos >= len(pattern):
        return False, pos
    char = pattern[pos]
    if char in "*+":
        unbounded, pos = True, pos + 1
    elif char == "?":
        unbounded, pos = False, pos + 1
    elif char == "{":
        match = _BRACE_QUANTIFIER.match(pattern, pos)
        if match is None or not (match.group(1) or match.group(3)):
            return False, pos
        unbounded, pos = match.group(2) is not None and not match.group(3), match.end()
    else:
        return False, pos
    # lazy or possessive suffix
    if pos < len(pattern) and pattern[pos] in "?+":
        pos += 1
    return unbounded, pos


def _skip_class(pattern: str, pos: int) -> int:
    """Return the position just past the character class opening at ``pos``."""
    pos += 1
    if pos < len(pattern) and pattern[pos] == "^":
        pos += 1
    if pos < len(pattern) and pattern[pos] == "]":
        pos += 1
    while pos < len(pattern) and pattern[pos] != "]":
        pos += 2 if pattern[pos] == "\\" else 1
    return pos + 1


def _skip_group_prefix(pattern: str, pos: int) -> Tuple[int, bool]:
    """Skip the ``?...`` extension after an opening parenthesis.

    Returns the body start and whether the group closed already, as for
    inline flags ``(?i)``, comments and named backreferences.
    """
    if pos >= len(pattern) or pattern[pos] != "?":
        return pos, False
    pos += 1
    if pattern.startswith("P<", pos):
        return pattern.index(">", pos) + 1, False
    if pattern.startswith(("<=", "<!"), pos):
        return pos + 2, False
    if pattern.startswith(("P=", "#"), pos):
        return pattern.index(")", pos) + 1, True
    if pattern[pos] in ":=!>":
        return pos + 1, False
    if pattern[pos] == "(":
        # conditional group; the body follows the group reference
        return pattern.index(")", pos) + 1, False
    while pos < len(pattern) and pattern[pos] not in ":)":
        pos += 1
    return pos + 1, pattern[pos] == ")"


def has_nested_unbounded_quantifier(pattern: str) -> bool:
    """True when a group repeated without bound contains an unbounded quantifier.

    ``(a+)+``, ``(\\w+\\s?)+`` and ``(.*)*`` qualify; ``(?:,\\d{3})*`` does not.
    """
    # one flag per open group: does its body contain an unbounded quantifier
    stack: List[bool] = [False]
    pos = 0
    while pos < len(pattern):
        char = pattern[pos]
        if char == "(":
            pos, closed = _skip_group_prefix(pattern, pos + 1)
            if not closed:
                stack.append(False)
            continue
        if char == ")":
            body_unbounded = stack.pop()
            unbounded, pos = _quantifier(pattern, pos + 1)
            if unbounded and body_unbounded:
                return True
            stack[-1] = stack[-1] or body_unbounded or unbounded
            continue
        if char == "[":
            pos = _skip_class(pattern, pos)
        elif char == "\\":
            pos += 2
        else:
            pos += 1
        unbounded, pos = _quantifier(pattern, pos)
        stack[-1] = stack[-1] or unbounded
    return False


def validate_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a field pattern, rejecting shapes that backtrack catastrophically."""
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise InvalidPattern(pattern, str(exc)) from exc
    if compiled.groups < 2:
        raise InvalidPattern(pattern, "expected a prefix group and a payload group")
    if has_nested_unbounded_quantifier(pattern):
        raise InvalidPattern(pattern, "nested unbounded quantifiers are not allowed")
    return compiled


@dataclass(frozen=True)
class FieldSpec:
    """Selector, text pattern and requested attributes for one field."""

    selector: str
    pattern: str = DEFAULT_PATTERN
    attributes: Tuple[str, ...] = field(default=(TEXT_ATTRIBUTE,))
    name: Optional[str] = None
    _regex: re.Pattern[str] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        attributes = tuple(self.attributes)
        if not attributes:
            raise ValueError(f"field {self.selector!r} must request at least one attribute")
        object.__setattr__(self, "attributes", attributes)
        object.__setattr__(self, "_regex", validate_pattern(self.pattern))

    @property
    def regex(self) -> re.Pattern[str]:
        return self._regex

    @property
    def width(self) -> int:
        """Number of values this field contributes to a row."""
        return len(self.attributes)

    def with_pattern(self, pattern: str) -> "FieldSpec":
        return replace(self, pattern=pattern)

    def with_attributes(self, attributes: Iterable[str]) -> "FieldSpec":
        return replace(self, attributes=tuple(attributes))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | str) -> "FieldSpec":
        if isinstance(data, str):
            return cls(selector=data)
        if not isinstance(data, Mapping) or not data.get("selector"):
            raise ConfigError(f"field definition needs a selector: {data!r}")
        attributes = data.get("attributes") or [TEXT_ATTRIBUTE]
        if isinstance(attributes, str):
            attributes = [attributes]
        return cls(
            selector=data["selector"],
            pattern=data.get("pattern") or DEFAULT_PATTERN,
            attributes=tuple(attributes),
            name=data.get("name"),
        )


def total_width(specs: Iterable[FieldSpec]) -> int:
    return sum(spec.width for spec in specs)


__all__ = [
    "FieldSpec",
    "DEFAULT_PATTERN",
    "TEXT_ATTRIBUTE",
    "validate_pattern",
    "has_nested_unbounded_quantifier",
    "total_width",
]
