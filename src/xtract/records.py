"""Typed output records built positionally from named-value rows."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from .errors import ShapeMismatch
from .fields import TEXT_ATTRIBUTE, FieldSpec, total_width
from .resolver import NamedValueRow

FieldDef = Union[str, Tuple[str, Any]]


class ExtractedRecord(BaseModel):
    """Base for generated record models; records are immutable once built."""

    model_config = ConfigDict(frozen=True)


def _slug(text: str) -> str:
    slug = re.sub(r"\W+", "_", text).strip("_").lower()
    if not slug:
        slug = "field"
    if slug[0].isdigit():
        slug = f"f_{slug}"
    if hasattr(BaseModel, slug) or slug.startswith("model_"):
        slug = f"{slug}_field"
    return slug


def column_names(specs: Sequence[FieldSpec]) -> List[str]:
    """One unique column name per attribute slot, in declaration order."""
    names: List[str] = []
    seen: Dict[str, int] = {}
    for spec in specs:
        base = _slug(spec.name or spec.selector)
        for attribute in spec.attributes:
            if spec.width == 1 and attribute == TEXT_ATTRIBUTE:
                name = base
            else:
                name = f"{base}_{_slug(attribute)}"
            count = seen.get(name, 0) + 1
            seen[name] = count
            names.append(name if count == 1 else f"{name}_{count}")
    return names


class RecordShape:
    """Ordered, typed field list of an output record, backed by a pydantic model."""

    def __init__(self, model: Type[BaseModel]) -> None:
        self.model = model

    @classmethod
    def from_model(cls, model: Type[BaseModel]) -> "RecordShape":
        return cls(model)

    @classmethod
    def from_fields(cls, fields: Sequence[FieldDef], name: str = "Record") -> "RecordShape":
        definitions: Dict[str, Any] = {}
        for item in fields:
            field_name, field_type = (item, str) if isinstance(item, str) else item
            if field_name in definitions:
                raise ShapeMismatch(f"duplicate field name {field_name!r}")
            definitions[field_name] = (field_type, ...)
        return cls(create_model(name, __base__=ExtractedRecord, **definitions))

    @classmethod
    def from_specs(cls, specs: Sequence[FieldSpec], name: str = "Record") -> "RecordShape":
        return cls.from_fields(column_names(specs), name=name)

    @property
    def field_names(self) -> List[str]:
        return list(self.model.model_fields)

    @property
    def width(self) -> int:
        return len(self.model.model_fields)

    def validate_specs(self, specs: Sequence[FieldSpec]) -> None:
        slots = total_width(specs)
        if slots != self.width:
            raise ShapeMismatch(
                f"{self.model.__name__} declares {self.width} fields but the field specs produce {slots} values"
            )

    def build(self, values: Sequence[Any]) -> BaseModel:
        if len(values) != self.width:
            raise ShapeMismatch(
                f"{self.model.__name__} declares {self.width} fields, got {len(values)} values"
            )
        try:
            return self.model.model_validate(dict(zip(self.field_names, values)))
        except ValidationError as exc:
            raise ShapeMismatch(f"values do not fit {self.model.__name__}: {exc}") from exc

    def __repr__(self) -> str:
        return f"RecordShape({self.model.__name__}: {', '.join(self.field_names)})"


def build_record(row: NamedValueRow, shape: RecordShape) -> BaseModel:
    return shape.build(row.values())


__all__ = ["ExtractedRecord", "RecordShape", "build_record", "column_names"]
