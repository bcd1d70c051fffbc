"""Declarative structural validation of raw input items.

A schema description maps field names to rules::

    {
        "text": {"type": "string", "minLength": 1},
        "label": {"type": "string", "enum": ["positive", "negative"]},
        "score": {"type": "number", "minimum": 0, "maximum": 1, "required": false},
        "source": "string"
    }

Supported types: string, integer, number, boolean, array, object, any.
Supported constraints: required (default true), enum, minLength, maxLength,
minimum, maximum, pattern. A bare string is shorthand for ``{"type": ...}``.
Fields not named in the description are allowed.

The description is compiled once into a pydantic model; a malformed
description raises ``SchemaDefinitionError`` at construction time.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    create_model,
    field_validator,
)

from data_enricher.core.errors import SchemaDefinitionError

logger = logging.getLogger(__name__)

TYPE_MAP: Dict[str, Any] = {
    "string": StrictStr,
    "integer": StrictInt,
    "number": StrictFloat,
    "boolean": StrictBool,
    "array": List[Any],
    "object": Dict[str, Any],
    "any": Any,
}


class FieldRule(BaseModel):
    """One field's constraints, as written in the schema description."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: str = "any"
    required: bool = True
    enum: Optional[List[Any]] = None
    min_length: Optional[int] = Field(None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(None, alias="maxLength", ge=0)
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    pattern: Optional[str] = None

    @field_validator("type")
    def _known_type(cls, v: str) -> str:
        if v not in TYPE_MAP:
            raise ValueError(f"unsupported type {v!r}; expected one of {sorted(TYPE_MAP)}")
        return v

    @field_validator("enum")
    def _non_empty_enum(cls, v):
        if v is not None and not v:
            raise ValueError("enum must list at least one value")
        return v

    @field_validator("pattern")
    def _valid_regex(cls, v):
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid pattern: {e}")
        return v

    def annotation(self) -> Any:
        if self.enum is not None:
            return Literal[tuple(self.enum)]
        return TYPE_MAP[self.type]

    def field_info(self, name: str):
        kwargs: Dict[str, Any] = {"alias": name}
        if self.min_length is not None:
            kwargs["min_length"] = self.min_length
        if self.max_length is not None:
            kwargs["max_length"] = self.max_length
        if self.minimum is not None:
            kwargs["ge"] = self.minimum
        if self.maximum is not None:
            kwargs["le"] = self.maximum
        if self.pattern is not None:
            kwargs["pattern"] = self.pattern
        if self.required:
            return Field(..., **kwargs)
        return Field(None, **kwargs)


@dataclass
class SchemaCheckResult:
    valid: bool = True
    errors: List[str] = field(default_factory=list)


def parse_rules(description: Mapping[str, Any]) -> Dict[str, FieldRule]:
    if not isinstance(description, Mapping):
        raise SchemaDefinitionError("schema description must be a mapping of field name -> rule")
    rules: Dict[str, FieldRule] = {}
    for name, raw in description.items():
        if isinstance(raw, str):
            raw = {"type": raw}
        if not isinstance(raw, Mapping):
            raise SchemaDefinitionError(f"rule for field {name!r} must be a type name or an object")
        try:
            rules[str(name)] = FieldRule.model_validate(dict(raw))
        except ValidationError as e:
            first = e.errors()[0]
            where = ".".join(str(p) for p in first["loc"])
            raise SchemaDefinitionError(f"invalid rule for field {name!r} ({where}): {first['msg']}") from e
    return rules


def compile_schema(description: Mapping[str, Any], model_name: str = "InputItemSchema") -> Type[BaseModel]:
    """Build a pydantic model class from a schema description."""
    rules = parse_rules(description)
    fields: Dict[str, Any] = {}
    try:
        # aliased positional names so any input key (leading underscores, spaces) works
        for i, (name, rule) in enumerate(rules.items()):
            annotation = rule.annotation()
            if not rule.required:
                annotation = Optional[annotation]
            fields[f"field_{i}"] = (annotation, rule.field_info(name))
        return create_model(model_name, __config__=ConfigDict(extra="allow"), **fields)
    except Exception as e:
        raise SchemaDefinitionError(f"could not compile schema: {e}") from e


def format_errors(exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "item"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return messages


class SchemaValidator:
    """Validate raw items against a compiled schema description.

    An empty description disables validation: every item passes.
    """

    def __init__(self, description: Optional[Mapping[str, Any]] = None):
        if description is not None and not isinstance(description, Mapping):
            raise SchemaDefinitionError("schema description must be a mapping of field name -> rule")
        self.description = dict(description or {})
        self._model: Optional[Type[BaseModel]] = compile_schema(self.description) if self.description else None

    @property
    def enabled(self) -> bool:
        return self._model is not None

    def validate(self, item: Mapping[str, Any]) -> SchemaCheckResult:
        if self._model is None:
            return SchemaCheckResult()
        try:
            self._model.model_validate(dict(item))
        except ValidationError as e:
            return SchemaCheckResult(valid=False, errors=format_errors(e))
        except Exception as e:
            logger.warning("Schema validation raised unexpectedly: %s", e)
            return SchemaCheckResult(valid=False, errors=[f"item: {e}"])
        return SchemaCheckResult()


__all__ = ["SchemaValidator", "SchemaCheckResult", "FieldRule", "compile_schema", "parse_rules", "TYPE_MAP"]
