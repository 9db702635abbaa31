"""Turn schema type declarations into concrete Python type expressions.

:func:`resolve` maps one :class:`~devtools_core.schema.TypeDecl` to a
:class:`ResolvedType`; each resolved type renders itself as the annotation
text the emitter writes into the generated module.

References are rendered fully qualified (``DOM.Node``) because every
domain lives in its own namespace class of the generated module.  The
caller supplies the prefixes: absolute references (``Runtime.RemoteObject``)
get *absolute_prefix* prepended, relative ones (``Node``) get
*relative_prefix*, which is normally ``"<CurrentDomain>."``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from devtools_core.schema import TypeDecl

# ---------------------------------------------------------------------------
# Resolved types
# ---------------------------------------------------------------------------

_SCALARS = {
    "boolean": "bool",
    "string": "str",
    "integer": "int",
    "number": "float",
}


@dataclass(frozen=True)
class Scalar:
    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class Opaque:
    """Untyped JSON payload (``any`` / unstructured ``object``)."""

    def render(self) -> str:
        return "Any"


@dataclass(frozen=True)
class ListOf:
    item: ResolvedType

    def render(self) -> str:
        return f"list[{self.item.render()}]"


@dataclass(frozen=True)
class Reference:
    domain: str | None
    name: str
    prefix: str = ""

    def render(self) -> str:
        if self.domain is None:
            return f"{self.prefix}{self.name}"
        return f"{self.prefix}{self.domain}.{self.name}"


@dataclass(frozen=True)
class EnumType:
    """Closed set of string variants.

    Named enumerations render as their id; inline ones (parameters and
    properties without an id) render as a ``Literal`` of the wire strings.
    """

    id: str | None
    variants: tuple[str, ...]

    def render(self) -> str:
        if self.id is not None:
            return self.id
        return "Literal[" + ", ".join(json.dumps(v) for v in self.variants) + "]"


@dataclass(frozen=True)
class StructType:
    id: str
    fields: tuple[TypeDecl, ...]

    def render(self) -> str:
        return self.id


@dataclass(frozen=True)
class SelfReference:
    """A field that refers to its own enclosing type.

    The generated module defers annotation evaluation and rebuilds every
    model once all namespaces exist, so the cycle is closed lazily through
    the class object instead of by value.
    """

    target: ResolvedType

    def render(self) -> str:
        return self.target.render()


@dataclass(frozen=True)
class Optional:
    inner: ResolvedType

    def render(self) -> str:
        return f"{self.inner.render()} | None"


ResolvedType = Union[
    Scalar, Opaque, ListOf, Reference, EnumType, StructType, SelfReference, Optional
]


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve(
    decl: TypeDecl,
    enclosing: str | None = None,
    absolute_prefix: str = "",
    relative_prefix: str = "",
) -> ResolvedType | None:
    """Resolve *decl*, or return ``None`` when it has no usable type.

    *enclosing* is the rendered name of the named type whose field is being
    resolved; a reference that renders to the same text is wrapped in
    :class:`SelfReference`.  Optionality is applied last.
    """
    resolved = _resolve_base(decl, absolute_prefix, relative_prefix)
    if resolved is None:
        return None

    if enclosing is not None and resolved.render() == enclosing:
        resolved = SelfReference(resolved)

    if decl.optional:
        resolved = Optional(resolved)
    return resolved


def _resolve_base(
    decl: TypeDecl, absolute_prefix: str, relative_prefix: str
) -> ResolvedType | None:
    if decl.type is not None:
        kind = decl.type
        if kind == "string" and decl.enum is not None:
            return EnumType(decl.id, tuple(decl.enum))
        if kind in _SCALARS:
            return Scalar(_SCALARS[kind])
        if kind == "array":
            if decl.items is None:
                return None
            item = resolve(
                decl.items,
                absolute_prefix=absolute_prefix,
                relative_prefix=relative_prefix,
            )
            return ListOf(item) if item is not None else None
        if kind == "object" and decl.id is not None and decl.properties is not None:
            return StructType(decl.id, tuple(decl.properties))
        if kind in ("any", "object"):
            return Opaque()
        return None

    if decl.ref is not None:
        if "." in decl.ref:
            domain, _, name = decl.ref.partition(".")
            return Reference(domain, name, absolute_prefix)
        return Reference(None, decl.ref, relative_prefix)

    return None
