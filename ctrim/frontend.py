#!/usr/bin/env python3
"""
C parsing front-end.

Wraps libclang so that the rest of ctrim only deals with top-level
declarations, their extents and their token spellings.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import clang.cindex as clang

from ctrim.errors import TrimError

logger = logging.getLogger(__name__)


class FrontendError(TrimError):
    """Raised when libclang cannot produce a translation unit."""


class DeclKind(str, Enum):
    FUNCTION = "function"
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"
    TYPEDEF = "typedef"
    OTHER = "other"


_DECL_KINDS = {
    clang.CursorKind.FUNCTION_DECL: DeclKind.FUNCTION,  # type: ignore
    clang.CursorKind.STRUCT_DECL: DeclKind.STRUCT,  # type: ignore
    clang.CursorKind.UNION_DECL: DeclKind.UNION,  # type: ignore
    clang.CursorKind.ENUM_DECL: DeclKind.ENUM,  # type: ignore
    clang.CursorKind.TYPEDEF_DECL: DeclKind.TYPEDEF,  # type: ignore
}

# Source bytes that are not valid UTF-8 round-trip through surrogate escapes
SOURCE_ENCODING = "utf-8"
SOURCE_ERRORS = "surrogateescape"

RECORD_KINDS = frozenset({DeclKind.STRUCT, DeclKind.UNION, DeclKind.ENUM})


def _no_tokens() -> list[str]:
    return []


@dataclass(frozen=True)
class Decl:
    """A top-level declaration of the translation unit."""

    kind: DeclKind
    name: str
    is_definition: bool = False
    file: str | None = None
    start: int = 0  # extent offsets within `file`
    end: int = 0
    tokenize: Callable[[], list[str]] = field(
        default=_no_tokens, repr=False, compare=False
    )

    def tokens(self) -> list[str]:
        """Token spellings covering this declaration's extent."""
        return list(self.tokenize())

    def encloses(self, other: "Decl") -> bool:
        """Whether `other`'s extent lies strictly inside this one."""
        if self.file != other.file:
            return False
        if (self.start, self.end) == (other.start, other.end):
            return False
        return self.start <= other.start and other.end <= self.end


class ClangUnit:
    """A parsed translation unit."""

    def __init__(self, tu: clang.TranslationUnit):
        self._tu: clang.TranslationUnit | None = tu
        self._sources: dict[str, bytes] = {}

    @property
    def tu(self) -> clang.TranslationUnit:
        if self._tu is None:
            raise FrontendError("translation unit already released")
        return self._tu

    def close(self) -> None:
        self._tu = None

    def top_level_cursors(self) -> Iterator[clang.Cursor]:
        return self.tu.cursor.get_children()

    def declarations(self) -> Iterator[Decl]:
        """Yield every top-level declaration in source order."""
        for cursor in self.top_level_cursors():
            yield self._make_decl(cursor)

    def function_definitions(self) -> dict[str, clang.Cursor]:
        """Map each defined function's name to its definition cursor."""
        definitions: dict[str, clang.Cursor] = {}
        for cursor in self.top_level_cursors():
            if cursor.kind != clang.CursorKind.FUNCTION_DECL:  # type: ignore
                continue
            if cursor.is_definition() and cursor.spelling:
                definitions.setdefault(cursor.spelling, cursor)
        return definitions

    def called_functions(self, cursor: clang.Cursor) -> Iterator[str]:
        """Yield the name of the function called at each call site in `cursor`."""
        for node in cursor.walk_preorder():
            if node.kind != clang.CursorKind.CALL_EXPR:  # type: ignore
                continue
            target = node.referenced
            if target is None or target.kind != clang.CursorKind.FUNCTION_DECL:  # type: ignore
                logger.debug(
                    "Ignoring indirect call in %s at line %d",
                    cursor.spelling,
                    node.location.line,
                )
                continue
            yield target.spelling

    def tokenize(self, cursor: clang.Cursor) -> list[str]:
        return [self.token_text(token) for token in self.tu.get_tokens(extent=cursor.extent)]

    def token_text(self, token: clang.Token) -> str:
        """Source text of `token`, with undecodable bytes kept as surrogates."""
        extent = token.extent
        file = extent.start.file
        if file is None:
            return token.spelling
        data = self._source_bytes(file.name)
        return data[extent.start.offset : extent.end.offset].decode(
            SOURCE_ENCODING, errors=SOURCE_ERRORS
        )

    def _source_bytes(self, file_name: str) -> bytes:
        if file_name not in self._sources:
            try:
                self._sources[file_name] = Path(file_name).read_bytes()
            except OSError as e:
                raise FrontendError(f"failed to read {file_name}: {e.strerror or e}") from e
        return self._sources[file_name]

    def _make_decl(self, cursor: clang.Cursor) -> Decl:
        extent = cursor.extent
        file = extent.start.file
        return Decl(
            kind=_decl_kind(cursor),
            name=cursor.spelling,
            is_definition=cursor.is_definition(),
            file=file.name if file else None,
            start=extent.start.offset,
            end=extent.end.offset,
            tokenize=lambda: self.tokenize(cursor),
        )


def _decl_kind(cursor: clang.Cursor) -> DeclKind:
    try:
        kind = cursor.kind
    except ValueError:
        # Bindings older than the shared library do not know every cursor kind
        logger.debug("Unknown cursor kind for %s", cursor.spelling)
        return DeclKind.OTHER
    return _DECL_KINDS.get(kind, DeclKind.OTHER)


def _log_diagnostics(tu: clang.TranslationUnit) -> None:
    for diag in tu.diagnostics:
        if diag.severity >= clang.Diagnostic.Error:
            logger.debug("clang: %s", diag)


@contextmanager
def parse_source(path: Path, args: list[str]) -> Iterator[ClangUnit]:
    """Parse `path` as C and release the translation unit on exit."""
    try:
        index = clang.Index.create()
        tu = index.parse(str(path), args=args)
    except clang.TranslationUnitLoadError as e:
        raise FrontendError(f"failed to parse source file {path}") from e
    except clang.LibclangError as e:
        raise FrontendError(f"failed to load libclang: {e}") from e

    unit = ClangUnit(tu)
    try:
        _log_diagnostics(tu)
        yield unit
    finally:
        unit.close()
        del tu, index
