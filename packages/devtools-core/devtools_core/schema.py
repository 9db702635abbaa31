"""In-memory model of the DevTools protocol schema document.

The schema is loaded once, validated by pydantic, and frozen.  Nothing
here knows about Python code generation; see :mod:`devtools_core.resolver`
and :mod:`devtools_core.emitter` for that.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devtools_core.errors import SchemaError

logger = logging.getLogger(__name__)


class _SchemaNode(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class TypeDecl(_SchemaNode):
    """A type declaration, parameter, return value or object property."""

    id: str | None = None
    type: str | None = None
    optional: bool = False
    ref: str | None = Field(default=None, alias="$ref")
    items: TypeDecl | None = None
    enum: tuple[str, ...] | None = None
    description: str | None = None
    name: str | None = None
    properties: tuple[TypeDecl, ...] | None = None


class Command(_SchemaNode):
    name: str
    description: str | None = None
    parameters: tuple[TypeDecl, ...] | None = None
    returns: tuple[TypeDecl, ...] | None = None
    experimental: bool = False


class Event(_SchemaNode):
    name: str
    description: str | None = None
    parameters: tuple[TypeDecl, ...] | None = None
    experimental: bool = False


class Domain(_SchemaNode):
    domain: str
    description: str | None = None
    experimental: bool = False
    commands: tuple[Command, ...]
    events: tuple[Event, ...] | None = None
    types: tuple[TypeDecl, ...] | None = None


class SchemaDocument(_SchemaNode):
    """Ordered collection of protocol domains."""

    domains: tuple[Domain, ...]

    def domain(self, name: str) -> Domain:
        """Return the domain called *name*; ``KeyError`` if absent."""
        for domain in self.domains:
            if domain.domain == name:
                return domain
        raise KeyError(name)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_schema(data: Any) -> SchemaDocument:
    """Validate an already-decoded schema document."""
    try:
        return SchemaDocument.model_validate(data)
    except ValidationError as exc:
        raise SchemaError(f"Invalid protocol schema: {exc}") from exc


def load_schema(path: str | Path) -> SchemaDocument:
    """Read and validate the schema JSON at *path*."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Cannot read protocol schema {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Protocol schema {path} is not valid JSON: {exc}") from exc

    document = parse_schema(data)
    logger.debug("Loaded %d domains from %s", len(document.domains), path)
    return document
