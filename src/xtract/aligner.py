"""Row alignment: run every field descriptor against one parsed document.

``resolve_one`` builds a single row from each field's first match.
``resolve_all`` walks every field's matches in lockstep, one row per step,
until all fields are exhausted; fields that run out early contribute empty
values to the remaining rows.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag
from soupsieve import SelectorSyntaxError

from .fields import FieldSpec
from .resolver import NamedValueRow, resolve_field

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "lxml"


def parse_document(markup: str, parser: str = DEFAULT_PARSER) -> BeautifulSoup:
    return BeautifulSoup(markup, parser)


def select_first(document: BeautifulSoup, selector: str) -> Optional[Tag]:
    try:
        return document.select_one(selector)
    except (SelectorSyntaxError, ValueError, NotImplementedError) as exc:
        logger.warning("Invalid selector %r: %s", selector, exc)
        return None


def select_all(document: BeautifulSoup, selector: str) -> List[Tag]:
    try:
        return list(document.select(selector))
    except (SelectorSyntaxError, ValueError, NotImplementedError) as exc:
        logger.warning("Invalid selector %r: %s", selector, exc)
        return []


def resolve_one(
    specs: Sequence[FieldSpec],
    document: BeautifulSoup,
    max_text_length: int = 0,
) -> NamedValueRow:
    row = NamedValueRow()
    for spec in specs:
        resolve_field(spec, select_first(document, spec.selector), row, max_text_length)
    return row


def resolve_all(
    specs: Sequence[FieldSpec],
    document: BeautifulSoup,
    max_text_length: int = 0,
) -> List[NamedValueRow]:
    cursors: List[Optional[Iterator[Tag]]] = []
    for spec in specs:
        matches = select_all(document, spec.selector)
        cursors.append(iter(matches) if matches else None)

    rows: List[NamedValueRow] = []
    while True:
        step = [next(cursor, None) if cursor is not None else None for cursor in cursors]
        if all(node is None for node in step):
            return rows
        row = NamedValueRow()
        for spec, node in zip(specs, step):
            resolve_field(spec, node, row, max_text_length)
        rows.append(row)


__all__ = ["DEFAULT_PARSER", "parse_document", "select_first", "select_all", "resolve_one", "resolve_all"]
