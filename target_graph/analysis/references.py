"""Parsing of link dependency references.

A reference is one of:

* a plain name (``core``),
* a namespaced name (``Qt5::Core``), or
* a generator expression wrapping either (``$<LINK_ONLY:Qt5::Core>``).
"""

from __future__ import annotations

import re

from target_graph.models import DependencyReference, ReferenceKind

GENEX_MARKER = "$<"
NAMESPACE_SEPARATOR = "::"

_NAMESPACED_RE = re.compile(r"^([^:]+)::(.+)$")
_WRAPPER_CHARS_RE = re.compile(r"[$<>]")


def _value_index(body: str) -> int:
    """Index of the ':' separating a generator expression's head from its value.

    Only a single ':' at nesting depth zero counts; ``::`` belongs to a
    namespaced name.
    """
    depth = 0
    i = 0
    while i < len(body):
        if body.startswith(GENEX_MARKER, i):
            depth += 1
            i += 2
            continue
        char = body[i]
        if char == ">":
            depth -= 1
        elif char == ":" and depth == 0:
            if body.startswith(NAMESPACE_SEPARATOR, i):
                i += 2
                continue
            return i
        i += 1
    return -1


def unwrap(raw: str) -> str:
    """Strip generator-expression wrappers down to the innermost value.

    Returns an empty string when a wrapper carries no value, e.g.
    ``$<CONFIG>``.
    """
    value = raw.strip()
    while value.startswith(GENEX_MARKER):
        if not value.endswith(">"):
            # Malformed; keep the trailing segment and drop wrapper punctuation.
            tail = re.split(r"(?<!:):(?!:)", value)[-1]
            return _WRAPPER_CHARS_RE.sub("", tail)
        body = value[len(GENEX_MARKER):-1]
        index = _value_index(body)
        if index < 0:
            return ""
        value = body[index + 1:]
    return _WRAPPER_CHARS_RE.sub("", value) if ">" in value else value


def split_namespace(name: str) -> tuple[str, str] | None:
    m = _NAMESPACED_RE.match(name)
    if not m:
        return None
    return m.group(1), m.group(2)


def package_of(name: str) -> str:
    """Text before the first ``::``, or the whole name."""
    return name.split(NAMESPACE_SEPARATOR, 1)[0]


def parse_reference(raw: str) -> DependencyReference:
    wrapped = raw.strip().startswith(GENEX_MARKER)
    name = unwrap(raw) if wrapped else raw.strip()
    parts = split_namespace(name)
    if wrapped:
        kind = ReferenceKind.WRAPPED
    elif parts:
        kind = ReferenceKind.NAMESPACED
    else:
        kind = ReferenceKind.PLAIN
    return DependencyReference(
        raw=raw,
        kind=kind,
        name=name,
        package=parts[0] if parts else None,
        member=parts[1] if parts else None,
    )


def diagram_safe(name: str) -> str:
    """``Qt5::Core`` -> ``Qt5__Core``."""
    return name.replace(":", "_")
