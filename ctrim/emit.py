#!/usr/bin/env python3
"""
Token dump of retained top-level declarations.

libclang's reported extents do not always match the textual boundaries of a
top-level C declaration, so rendering goes through a small per-kind table of
corrections before the tokens are written out one per line.
"""

import logging
from collections.abc import Callable, Iterable
from typing import TextIO

from ctrim.frontend import RECORD_KINDS, Decl, DeclKind

logger = logging.getLogger(__name__)

# Keyword that opens a trailing type attribute on a typedef
ATTRIBUTE_KEYWORD = "__attribute__"
STATEMENT_END = "; "

# (decl, tokens) -> output chunks, or None to suppress the declaration
Renderer = Callable[[Decl, list[str]], list[str] | None]


def _lines(tokens: list[str]) -> list[str]:
    return [f"{token}\n" for token in tokens]


def render_default(decl: Decl, tokens: list[str]) -> list[str] | None:
    return _lines(tokens)


def render_function(decl: Decl, tokens: list[str]) -> list[str] | None:
    # A definition's extent also covers the next, unrelated token, except
    # when the definition ends the file. A body never ends in anything but "}".
    if decl.is_definition and tokens[-1] != "}":
        tokens = tokens[:-1]
    return _lines(tokens)


def render_record(decl: Decl, tokens: list[str]) -> list[str] | None:
    # The struct of `typedef struct {...} name;` ends on the typedef's name;
    # its text belongs to the typedef cursor that follows.
    if tokens[-1] not in (";", "}"):
        return None
    return _lines(tokens)


def render_typedef(decl: Decl, tokens: list[str]) -> list[str] | None:
    # The attribute's argument list is not part of the extent, so the clause
    # is dropped and the declaration terminated in its place.
    chunks = _lines(tokens)
    if tokens[-1] == ATTRIBUTE_KEYWORD:
        chunks[-1] = STATEMENT_END
    return chunks


RENDERERS: dict[DeclKind, Renderer] = {
    DeclKind.FUNCTION: render_function,
    DeclKind.STRUCT: render_record,
    DeclKind.UNION: render_record,
    DeclKind.ENUM: render_record,
    DeclKind.TYPEDEF: render_typedef,
}


def render(stream: TextIO, decl: Decl, tokens: list[str]) -> bool:
    """Write `decl` to `stream`. Returns False when nothing was written."""
    if not tokens:
        return False

    chunks = RENDERERS.get(decl.kind, render_default)(decl, tokens)
    if chunks is None:
        logger.debug("Suppressed %s %s", decl.kind.value, decl.name)
        return False

    stream.write("".join(chunks))
    return True


def is_retained(decl: Decl, keep: set[str], blacklist: set[str]) -> bool:
    """Functions must be kept; any declaration may be blacklisted."""
    if decl.kind is DeclKind.FUNCTION and decl.name not in keep:
        return False
    return decl.name not in blacklist


def is_nested_record(decl: Decl, following: Decl | None) -> bool:
    """A struct/union/enum whose text is part of the next declaration."""
    return (
        decl.kind in RECORD_KINDS
        and following is not None
        and following.encloses(decl)
    )


def emit_declarations(
    stream: TextIO,
    decls: Iterable[Decl],
    keep: set[str],
    blacklist: set[str],
) -> int:
    """Render every retained declaration in source order.

    Returns the number of declarations written.
    """
    written = 0
    current: Decl | None = None
    for following in [*decls, None]:
        if current is not None:
            if is_retained(current, keep, blacklist) and not is_nested_record(
                current, following
            ):
                if render(stream, current, current.tokens()):
                    written += 1
        current = following
    return written
