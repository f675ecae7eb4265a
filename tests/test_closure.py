#!/usr/bin/env python3
"""
Test cases for keep set expansion.
"""

import logging

import pytest

from ctrim.callgraph import CallGraph, CallGraphError
from ctrim.closure import expand_keep


def test_callee_is_added():
    graph = CallGraph.from_edges({"a": ["b"], "b": [], "c": []})
    keep = {"a"}

    added = expand_keep(keep, graph)

    assert keep == {"a", "b"}
    assert added == {"b"}


def test_transitive_callees_are_added():
    graph = CallGraph.from_edges({"a": ["b"], "b": ["c"], "c": ["d"], "d": [], "e": []})
    keep = {"a"}

    expand_keep(keep, graph)

    assert keep == {"a", "b", "c", "d"}


def test_undefined_callee_warns(caplog):
    graph = CallGraph.from_edges({"a": ["b"]})
    keep = {"a"}

    with caplog.at_level(logging.WARNING, logger="ctrim"):
        expand_keep(keep, graph)

    assert keep == {"a"}
    assert "no definition for a function called from a" in caplog.text


def test_undefined_keep_symbol_warns(caplog):
    graph = CallGraph.from_edges({"a": []})
    keep = {"ghost"}

    with caplog.at_level(logging.WARNING, logger="ctrim"):
        expand_keep(keep, graph)

    assert keep == {"ghost"}
    assert "called from ghost" in caplog.text


def test_no_warning_when_everything_defined(caplog):
    graph = CallGraph.from_edges({"a": ["b"], "b": []})

    with caplog.at_level(logging.WARNING, logger="ctrim"):
        expand_keep({"a"}, graph)

    assert caplog.records == []


def test_closure_is_monotonic():
    graph = CallGraph.from_edges({"a": [], "b": ["a"]})
    keep = {"a", "b", "unrelated"}
    before = set(keep)

    expand_keep(keep, graph)

    assert keep >= before


def test_recursion_is_tolerated():
    graph = CallGraph.from_edges({"a": ["b"], "b": ["a", "b"]})
    keep = {"a"}

    expand_keep(keep, graph)

    assert keep == {"a", "b"}


def test_closure_is_sound():
    edges = {"a": ["b"], "b": ["c"], "c": [], "x": ["y"], "y": []}
    graph = CallGraph.from_edges(edges)
    keep = {"a"}

    expand_keep(keep, graph)

    assert "x" not in keep
    assert "y" not in keep


def test_failure_leaves_keep_untouched():
    def scan(body):
        if body == "bad":
            raise RuntimeError("malformed AST")
        return iter(body)

    graph = CallGraph({"a": ["b"], "b": [], "z": "bad"}, scan)
    keep = {"a", "z"}

    with pytest.raises(CallGraphError):
        expand_keep(keep, graph)

    assert keep == {"a", "z"}
