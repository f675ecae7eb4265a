"""Expand a keep set to every function it can statically reach."""

import logging

from ctrim.callgraph import CallGraph, VisitResult

logger = logging.getLogger(__name__)


def expand_keep(keep: set[str], graph: CallGraph) -> set[str]:
    """
    Add the transitive callees of every function in `keep` to `keep`.

    Callees are collected in a separate set and merged only once every caller
    has been traversed, so a traversal failure leaves `keep` untouched.

    Returns:
        The symbols that were not in `keep` before.
    """
    callees: set[str] = set()
    expanded: set[str] = set()

    def add_callee(callee: str | None, caller: str) -> VisitResult:
        if callee is None:
            logger.warning("no definition for a function called from %s", caller)
            return VisitResult.STOP
        callees.add(callee)
        return VisitResult.RECURSE

    for caller in sorted(keep):
        graph.visit_callees(caller, add_callee, expanded)

    added = callees - keep
    keep |= callees
    logger.debug("Closure added %d symbols: %s", len(added), ", ".join(sorted(added)))
    return added
