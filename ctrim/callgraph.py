#!/usr/bin/env python3
"""
Static call graph over the functions defined in one translation unit.

Call sites are discovered lazily: a function's body is only scanned the
first time that function is expanded.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

from ctrim.errors import TrimError
from ctrim.frontend import ClangUnit

logger = logging.getLogger(__name__)


class CallGraphError(TrimError):
    """Raised when the call graph cannot be built or traversed."""


class VisitResult(Enum):
    STOP = "stop"  # do not expand this callee
    RECURSE = "recurse"  # also visit this callee's own callees


# visitor(callee, caller); callee is None for a call to an undefined function
CalleeVisitor = Callable[[str | None, str], VisitResult]


class CallGraph:
    """Caller -> callee relation, keyed by function name."""

    def __init__(
        self,
        definitions: Mapping[str, Any],
        scan_calls: Callable[[Any], Iterable[str]],
    ):
        """
        Args:
            definitions: Defined function name -> opaque body handle
            scan_calls: Yields the called function name for each call site in a body
        """
        self._definitions = dict(definitions)
        self._scan_calls = scan_calls
        self._call_sites: dict[str, list[str | None]] = {}

    @classmethod
    def from_translation_unit(cls, unit: ClangUnit) -> "CallGraph":
        try:
            definitions = unit.function_definitions()
        except Exception as e:
            raise CallGraphError(f"failed to form call graph: {e}") from e
        logger.debug("Call graph has %d defined functions", len(definitions))
        return cls(definitions, unit.called_functions)

    @classmethod
    def from_edges(cls, edges: Mapping[str, Iterable[str]]) -> "CallGraph":
        """Build a graph from a plain mapping of defined function -> callees."""
        return cls({caller: list(callees) for caller, callees in edges.items()}, iter)

    def is_defined(self, name: str) -> bool:
        return name in self._definitions

    def call_sites(self, caller: str) -> list[str | None]:
        """Callees of `caller` in call-site order; None marks an undefined callee."""
        if caller not in self._call_sites:
            try:
                names = list(self._scan_calls(self._definitions[caller]))
            except Exception as e:
                raise CallGraphError(f"failed to traverse callees of {caller}: {e}") from e
            self._call_sites[caller] = [
                name if self.is_defined(name) else None for name in names
            ]
        return self._call_sites[caller]

    def visit_callees(
        self,
        caller: str,
        visitor: CalleeVisitor,
        expanded: set[str] | None = None,
    ) -> None:
        """
        Call `visitor` once per call site reachable from `caller`.

        A callee is expanded in turn when the visitor returns RECURSE. Every
        function is expanded at most once per `expanded` set; pass the same
        set to several calls to share that bookkeeping between them.

        A caller without a definition gets a single visitor(None, caller).
        """
        if expanded is None:
            expanded = set()

        if not self.is_defined(caller):
            visitor(None, caller)
            return

        pending = [caller]
        while pending:
            current = pending.pop()
            if current in expanded:
                continue
            expanded.add(current)

            for callee in self.call_sites(current):
                result = visitor(callee, current)
                if callee is None:
                    continue
                if result is VisitResult.RECURSE and callee not in expanded:
                    pending.append(callee)
