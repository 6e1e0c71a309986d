"""ResponseSchema — the structural shape a valid answer must have.

A prompt derives its schema from its own fields only; no answer data is
involved, so schemas can be produced before any response exists.

Kinds:
  - string, number, timestamp: scalar answers
  - array: ``items`` describes each element
  - object: ``fields`` describes the members, ``required`` names the
    members that must be present
  - any: no structural restriction (e.g. an embedded schema without a type)
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

SchemaKind = Literal["string", "number", "timestamp", "object", "array", "any"]

# JSON Schema "type" keyword → ResponseSchema kind
_JSON_TYPE_KINDS: dict[str, SchemaKind] = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "object": "object",
    "array": "array",
}


class ResponseSchema(BaseModel):
    """Structural descriptor of one answer (or one part of an answer)."""

    model_config = ConfigDict(frozen=True)

    kind: SchemaKind
    name: Optional[str] = None
    doc: Optional[str] = None
    optional: bool = False
    items: Optional[ResponseSchema] = None
    fields: Optional[List[ResponseSchema]] = None
    required: Optional[List[str]] = None

    def rescoped(
        self, *, name: str | None, doc: str | None, optional: bool
    ) -> ResponseSchema:
        """Return a copy placed under a new name with new visibility."""
        return self.model_copy(update={"name": name, "doc": doc, "optional": optional})

    @classmethod
    def from_json_schema(
        cls,
        schema: dict[str, Any],
        *,
        name: str | None = None,
        optional: bool = False,
    ) -> ResponseSchema:
        """Convert a JSON Schema document into a ResponseSchema tree.

        Only the structural keywords are looked at (``type``,
        ``properties``, ``required``, ``items``, ``description``, and
        ``format: date-time``).  Value constraints such as ``minimum`` are
        left to the nested-schema validator.
        """
        json_type = schema.get("type")
        # "type": ["string", "null"] is a nullable scalar
        if isinstance(json_type, list):
            non_null = [t for t in json_type if t != "null"]
            optional = optional or len(non_null) != len(json_type)
            json_type = non_null[0] if len(non_null) == 1 else None

        kind: SchemaKind = _JSON_TYPE_KINDS.get(json_type, "any")
        if kind == "string" and schema.get("format") == "date-time":
            kind = "timestamp"
        doc = schema.get("description")

        if kind == "object":
            required = list(schema.get("required", []))
            fields = [
                cls.from_json_schema(sub, name=key, optional=key not in required)
                for key, sub in schema.get("properties", {}).items()
            ]
            return cls(
                kind=kind,
                name=name,
                doc=doc,
                optional=optional,
                fields=fields,
                required=required,
            )

        if kind == "array":
            raw_items = schema.get("items")
            items = cls.from_json_schema(raw_items) if isinstance(raw_items, dict) else None
            return cls(kind=kind, name=name, doc=doc, optional=optional, items=items)

        return cls(kind=kind, name=name, doc=doc, optional=optional)
