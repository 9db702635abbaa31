"""Emit Python bindings from a protocol schema.

The generated module has one namespace class per domain holding its
enums, models, aliases and per-command request/return wrappers, followed
by a ``<Domain>Api`` contract and ``<Domain>Commands`` binding per domain,
the event variants with their registry, and a ``DevTools`` facade.

All references are written fully qualified (``DOM.Node``) and resolved
lazily: the module uses postponed annotations and rebuilds every model
once all namespaces exist.  Aliases that refer to other types cannot be
lazy, so they are assigned after the namespace classes.

Output depends only on the document: iteration follows schema order and
nothing environment-specific is written.
"""

from __future__ import annotations

import keyword
import logging
import re
from collections.abc import Iterable

from devtools_core.errors import GenerationError
from devtools_core.resolver import (
    EnumType,
    ListOf,
    Optional,
    Reference,
    ResolvedType,
    SelfReference,
    StructType,
    resolve,
)
from devtools_core.schema import Command, Domain, SchemaDocument, TypeDecl

logger = logging.getLogger(__name__)

INDENT = "    "
_MAX_LINE = 88

# Names that must not become pydantic fields or clash with the builtins
# used in annotations.
_RESERVED_FIELDS = frozenset(
    {
        "json", "dict", "copy", "schema", "schema_json", "validate",
        "construct", "fields", "parse_obj", "parse_raw", "parse_file",
        "from_orm", "update_forward_refs",
        "bool", "str", "int", "float", "list", "self",
    }
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_IDENT = re.compile(r"[^0-9A-Za-z_]+")

HEADER = '''\
"""DevTools protocol bindings.

Generated by ``python -m devtools_core.codegen``.  Do not edit by hand.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar, Literal, Protocol, Union

from pydantic import Field

from devtools_core.cdp_client import DevToolsClient
from devtools_core.models import (
    EventRegistry,
    Nothing,
    ProtocolEvent,
    ProtocolModel,
    RequestModel,
)
from devtools_core.protocol import DEFAULT_HOST, DEFAULT_PORT
'''


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------


def snake_case(name: str) -> str:
    """``getDocument`` -> ``get_document``, ``documentURL`` -> ``document_url``."""
    name = _NON_IDENT.sub("_", name)
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def python_identifier(name: str) -> str:
    """A snake_case identifier safe to use as a field or parameter name."""
    # Leading underscores would make pydantic treat the field as private.
    ident = snake_case(name).lstrip("_")
    if not ident or ident[0].isdigit():
        ident = f"n_{ident}"
    if keyword.iskeyword(ident) or ident in _RESERVED_FIELDS or ident.startswith("model_"):
        ident += "_"
    return ident


def enum_member_names(values: Iterable[str]) -> list[str]:
    """Upper-snake member names for *values*, de-duplicated in order."""
    names: list[str] = []
    seen: set[str] = set()
    for value in values:
        base = snake_case(value).upper().strip("_")
        if not base or base[0].isdigit():
            base = f"V_{base}"
        name = base
        counter = 2
        while name in seen:
            name = f"{base}_{counter}"
            counter += 1
        seen.add(name)
        names.append(name)
    return names


def upper_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def docstring(text: str | None, indent: str) -> list[str]:
    """Render *text* as a docstring at *indent*; empty when there is none."""
    if not text or not text.strip():
        return []
    body = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if body.endswith('"'):
        body = body[:-1] + '\\"'
    lines = [line.rstrip() for line in body.splitlines()]
    if len(lines) == 1:
        return [f'{indent}"""{lines[0]}"""']
    out = [f'{indent}"""{lines[0]}']
    out.extend(f"{indent}{line}" if line else "" for line in lines[1:])
    out.append(f'{indent}"""')
    return out


def references(resolved: ResolvedType) -> list[Reference]:
    """Every :class:`Reference` inside *resolved*, outermost first."""
    if isinstance(resolved, Reference):
        return [resolved]
    if isinstance(resolved, ListOf):
        return references(resolved.item)
    if isinstance(resolved, Optional):
        return references(resolved.inner)
    if isinstance(resolved, SelfReference):
        return references(resolved.target)
    return []


def _require_name(decl: TypeDecl, what: str) -> str:
    if decl.name is None:
        raise GenerationError(f"{what} has no name")
    return decl.name


def _require_id(decl: TypeDecl, domain: str) -> str:
    if decl.id is None:
        raise GenerationError(f"Domain type in {domain} has no id")
    return decl.id


# ---------------------------------------------------------------------------
# Field emission (shared by models, wrappers and events)
# ---------------------------------------------------------------------------


def field_lines(
    decl: TypeDecl, resolved: ResolvedType, indent: str
) -> list[str]:
    """Declare one pydantic field for *decl* with its wire alias."""
    wire = _require_name(decl, "Property")
    ident = python_identifier(wire)
    annotation = resolved.render()

    if ident == wire:
        default = " = None" if decl.optional else ""
    elif decl.optional:
        default = f' = Field(default=None, alias="{wire}")'
    else:
        default = f' = Field(alias="{wire}")'

    lines = [f"{indent}{ident}: {annotation}{default}"]
    lines.extend(docstring(decl.description, indent))
    return lines


def class_body(lines: list[str], indent: str) -> list[str]:
    return lines if lines else [f"{indent}pass"]


# ---------------------------------------------------------------------------
# Per-command metadata
# ---------------------------------------------------------------------------


class CommandInfo:
    """Resolved signature of one command."""

    def __init__(self, domain: str, command: Command) -> None:
        self.domain = domain
        self.command = command
        self.method = f"{domain}.{command.name}"
        self.python_name = python_identifier(command.name)

        prefix = f"{domain}."
        self.parameters: list[tuple[TypeDecl, str, ResolvedType]] = []
        for param in command.parameters or ():
            wire = _require_name(param, f"Parameter of {self.method}")
            resolved = resolve(param, None, "", prefix)
            if resolved is None:
                raise GenerationError(f"Cannot determine type of {self.method}({wire})")
            self.parameters.append((param, python_identifier(wire), resolved))

        self.returns: list[tuple[TypeDecl, ResolvedType]] = []
        for ret in command.returns or ():
            wire = _require_name(ret, f"Return value of {self.method}")
            resolved = resolve(ret, None, "", prefix)
            if resolved is None:
                raise GenerationError(f"Cannot determine return type {self.method} -> {wire}")
            self.returns.append((ret, resolved))

        stem = upper_first(command.name)
        self.return_class = f"{stem}Return" if self.returns else None
        self.request_class = f"_{stem}Request" if command.parameters else None

    @property
    def return_annotation(self) -> str:
        if self.return_class is None:
            return "Nothing"
        return f"{self.domain}.{self.return_class}"

    def signature(self, indent: str) -> list[str]:
        """``def name(self, ...) -> Return:`` with trailing optionals defaulted."""
        first_default = len(self.parameters)
        for index in range(len(self.parameters) - 1, -1, -1):
            if not self.parameters[index][0].optional:
                break
            first_default = index

        args = ["self"]
        for index, (_decl, ident, resolved) in enumerate(self.parameters):
            default = " = None" if index >= first_default else ""
            args.append(f"{ident}: {resolved.render()}{default}")

        head = f"{indent}def {self.python_name}("
        tail = f") -> {self.return_annotation}:"
        one_line = head + ", ".join(args) + tail
        if len(one_line) <= _MAX_LINE:
            return [one_line]
        lines = [head]
        lines.extend(f"{indent}{INDENT}{arg}," for arg in args)
        lines.append(f"{indent}{tail}")
        return lines


# ---------------------------------------------------------------------------
# Domain emitter
# ---------------------------------------------------------------------------


class DomainEmitter:
    """Emits one domain: namespace, deferred aliases, contract and binding."""

    def __init__(self, domain: Domain) -> None:
        self.domain = domain
        self.name = domain.domain
        self.prefix = f"{domain.domain}."
        self.commands = [CommandInfo(self.name, cmd) for cmd in domain.commands]
        self.models: list[str] = []
        self.deferred_aliases: list[tuple[str, ResolvedType, TypeDecl]] = []

    # -- namespace -------------------------------------------------------

    def namespace(self) -> list[str]:
        out = [f"class {self.name}:"]
        description = self.domain.description or f"Types of the {self.name} domain."
        out.extend(docstring(description, INDENT))

        for decl in self.domain.types or ():
            out.append("")
            out.extend(self._type_decl(decl))

        for info in self.commands:
            if info.return_class is not None:
                out.append("")
                out.extend(self._return_wrapper(info))
            if info.request_class is not None:
                out.append("")
                out.extend(self._request_wrapper(info))
        return out

    def _type_decl(self, decl: TypeDecl) -> list[str]:
        type_id = _require_id(decl, self.name)

        if decl.enum is not None:
            body = docstring(decl.description, INDENT * 2)
            for member, value in zip(enum_member_names(decl.enum), decl.enum):
                body.append(f'{INDENT * 2}{member} = "{_escape(value)}"')
            return [f"{INDENT}class {type_id}(str, enum.Enum):"] + class_body(
                body, INDENT * 2
            )

        if decl.properties is not None:
            qualified = f"{self.prefix}{type_id}"
            body = docstring(decl.description, INDENT * 2)
            for prop in decl.properties:
                _require_name(prop, f"Property of {qualified}")
                resolved = resolve(prop, qualified, "", self.prefix)
                if resolved is None:
                    logger.debug("Dropping unresolvable field %s.%s", qualified, prop.name)
                    continue
                if body:
                    body.append("")
                body.extend(field_lines(prop, resolved, INDENT * 2))
            self.models.append(qualified)
            return [f"{INDENT}class {type_id}(ProtocolModel):"] + class_body(body, INDENT * 2)

        resolved = resolve(decl, None, "", self.prefix)
        annotation = resolved.render() if resolved is not None else "Any"
        if resolved is not None and references(resolved):
            self.deferred_aliases.append((f"{self.prefix}{type_id}", resolved, decl))
            return [f"{INDENT}# {type_id} = {annotation} (assigned below)"]
        out = [f"{INDENT}{type_id} = {annotation}"]
        out.extend(docstring(decl.description, INDENT))
        return out

    def _return_wrapper(self, info: CommandInfo) -> list[str]:
        body = docstring(f"Result of ``{info.method}``.", INDENT * 2)
        for decl, resolved in info.returns:
            body.append("")
            body.extend(field_lines(decl, resolved, INDENT * 2))
        self.models.append(f"{self.prefix}{info.return_class}")
        return [f"{INDENT}class {info.return_class}(ProtocolModel):"] + body

    def _request_wrapper(self, info: CommandInfo) -> list[str]:
        body: list[str] = []
        for decl, _ident, resolved in info.parameters:
            if body:
                body.append("")
            body.extend(field_lines(decl, resolved, INDENT * 2))
        self.models.append(f"{self.prefix}{info.request_class}")
        return [f"{INDENT}class {info.request_class}(RequestModel):"] + class_body(
            body, INDENT * 2
        )

    # -- contract and binding ---------------------------------------------

    def contract(self) -> list[str]:
        out = [f"class {self.name}Api(Protocol):"]
        out.extend(docstring(f"Commands of the {self.name} domain.", INDENT))
        for info in self.commands:
            out.append("")
            out.extend(info.signature(INDENT))
            out.extend(docstring(info.command.description, INDENT * 2))
            out.append(f"{INDENT * 2}...")
        return out

    def binding(self) -> list[str]:
        out = [f"class {self.name}Commands({self.name}Api):"]
        out.extend(
            docstring(f":class:`{self.name}Api` bound to a :class:`DevToolsClient`.", INDENT)
        )
        out.append("")
        out.append(f"{INDENT}def __init__(self, client: DevToolsClient) -> None:")
        out.append(f"{INDENT * 2}self._client = client")
        for info in self.commands:
            out.append("")
            out.extend(info.signature(INDENT))
            if info.request_class is None:
                request = "None"
            else:
                kwargs = ", ".join(f"{ident}={ident}" for _d, ident, _r in info.parameters)
                request = f"{self.prefix}{info.request_class}({kwargs})"
            out.append(f"{INDENT * 2}return self._client.invoke(")
            out.append(f'{INDENT * 3}"{info.method}",')
            out.append(f"{INDENT * 3}{request},")
            out.append(f"{INDENT * 3}{info.return_annotation},")
            out.append(f"{INDENT * 2})")
        return out


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


# ---------------------------------------------------------------------------
# Event emitter
# ---------------------------------------------------------------------------


class EventEmitter:
    """Emits the closed sum type over every domain's events."""

    def __init__(self, document: SchemaDocument) -> None:
        self.document = document
        self.variants: list[str] = []

    def variant_classes(self) -> list[str]:
        out: list[str] = []
        seen: dict[str, str] = {}
        for domain in self.document.domains:
            prefix = f"{domain.domain}."
            for event in domain.events or ():
                method = f"{domain.domain}.{event.name}"
                class_name = f"{domain.domain}{upper_first(event.name)}"
                if class_name in seen:
                    raise GenerationError(
                        f"Events {seen[class_name]} and {method} both map to {class_name}"
                    )
                seen[class_name] = method

                out.append("")
                out.append("")
                out.append(f"class {class_name}(ProtocolEvent):")
                doc = docstring(event.description, INDENT)
                if doc:
                    out.extend(doc)
                    out.append("")
                out.append(f'{INDENT}METHOD: ClassVar[str] = "{method}"')
                for param in event.parameters or ():
                    wire = _require_name(param, f"Parameter of event {method}")
                    resolved = resolve(param, None, "", prefix)
                    if resolved is None:
                        raise GenerationError(f"Cannot determine type of {method}({wire})")
                    out.append("")
                    out.extend(field_lines(param, resolved, INDENT))
                self.variants.append(class_name)
        return out

    def sum_type(self) -> list[str]:
        if not self.variants:
            out = ["Event = ProtocolEvent"]
        elif len(self.variants) == 1:
            out = [f"Event = {self.variants[0]}"]
        else:
            out = ["Event = Union["]
            out.extend(f"{INDENT}{name}," for name in self.variants)
            out.append("]")
        out.extend(docstring("Any event the browser may push.", ""))
        out.append("")
        if self.variants:
            out.append("EVENTS = EventRegistry(")
            out.append(f"{INDENT}[")
            out.extend(f"{INDENT * 2}{name}," for name in self.variants)
            out.append(f"{INDENT}]")
            out.append(")")
        else:
            out.append("EVENTS = EventRegistry([])")
        out.extend(docstring("Event variants keyed by their wire tag.", ""))
        return out


# ---------------------------------------------------------------------------
# Whole module
# ---------------------------------------------------------------------------


def _ordered_aliases(
    emitters: list[DomainEmitter],
) -> list[tuple[str, ResolvedType, TypeDecl]]:
    """Deferred aliases ordered so each follows the aliases it refers to."""
    pending = [alias for emitter in emitters for alias in emitter.deferred_aliases]
    pending_names = {name for name, _r, _d in pending}
    ordered: list[tuple[str, ResolvedType, TypeDecl]] = []
    done: set[str] = set()

    while pending:
        progressed = False
        for alias in list(pending):
            name, resolved, _decl = alias
            needs = {ref.render() for ref in references(resolved)} & pending_names
            if needs <= done:
                ordered.append(alias)
                done.add(name)
                pending.remove(alias)
                progressed = True
        if not progressed:
            cycle = ", ".join(name for name, _r, _d in pending)
            raise GenerationError(f"Type aliases refer to each other in a cycle: {cycle}")
    return ordered


def _facade(emitters: list[DomainEmitter]) -> list[str]:
    out = ["class DevTools:"]
    out.extend(docstring("Every domain bound to one :class:`DevToolsClient`.", INDENT))
    out.append("")
    out.append(f"{INDENT}def __init__(self, client: DevToolsClient) -> None:")
    out.append(f"{INDENT * 2}self.client = client")
    for emitter in emitters:
        attr = python_identifier(emitter.name)
        out.append(f"{INDENT * 2}self.{attr} = {emitter.name}Commands(client)")
    out.append("")
    out.append(f"{INDENT}@classmethod")
    out.append(
        f"{INDENT}def connect(cls, port: int = DEFAULT_PORT, host: str = DEFAULT_HOST) -> DevTools:"
    )
    out.extend(docstring("Discover the first target and bind a typed client to it.", INDENT * 2))
    out.append(f"{INDENT * 2}return cls(DevToolsClient.connect(port, host, events=EVENTS))")
    return out


def generate(document: SchemaDocument) -> str:
    """Render the bindings module for *document*."""
    emitters = [DomainEmitter(domain) for domain in document.domains]
    out = [HEADER.rstrip("\n")]

    for emitter in emitters:
        out.extend(["", ""])
        out.extend(emitter.namespace())

    aliases = _ordered_aliases(emitters)
    if aliases:
        out.extend(["", ""])
        for name, resolved, decl in aliases:
            out.append(f"{name} = {resolved.render()}")
            out.extend(docstring(decl.description, ""))

    for emitter in emitters:
        out.extend(["", ""])
        out.extend(emitter.contract())
        out.extend(["", ""])
        out.extend(emitter.binding())

    events = EventEmitter(document)
    out.extend(events.variant_classes())
    out.extend(["", ""])
    out.extend(events.sum_type())

    out.extend(["", ""])
    out.extend(_facade(emitters))

    models = [name for emitter in emitters for name in emitter.models] + events.variants
    if models:
        out.extend(["", ""])
        out.extend(f"{name}.model_rebuild()" for name in models)

    logger.info(
        "Generated %d domains, %d models, %d events",
        len(emitters),
        len(models) - len(events.variants),
        len(events.variants),
    )
    return "\n".join(out) + "\n"
