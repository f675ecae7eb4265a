#!/usr/bin/env python3
"""
Trim driver: parse, expand the keep set over the call graph, then dump the
retained top-level declarations.
"""

import logging

import click
from pydantic import BaseModel, Field

from ctrim.callgraph import CallGraph
from ctrim.closure import expand_keep
from ctrim.config import TrimConfig
from ctrim.emit import emit_declarations
from ctrim.errors import InputError, OutputError
from ctrim.frontend import SOURCE_ENCODING, SOURCE_ERRORS, parse_source

logger = logging.getLogger(__name__)


class TrimResult(BaseModel):
    """Summary of a completed trim run."""

    keep: set[str] = Field(description="Keep set after closure")
    added: set[str] = Field(description="Symbols pulled in by the closure")
    emitted: int = Field(description="Number of declarations written")


def check_readable(config: TrimConfig) -> None:
    try:
        with open(config.input_path, "rb"):
            pass
    except OSError as e:
        raise InputError(config.input_path, e.strerror or str(e)) from e


def run_trim(config: TrimConfig) -> TrimResult:
    """Run the whole pipeline for one input file."""
    check_readable(config)

    keep = set(config.keep)
    with parse_source(config.input_path, config.parser_args()) as unit:
        graph = CallGraph.from_translation_unit(unit)
        added = expand_keep(keep, graph)
        del graph  # not needed for emission

        try:
            stream = click.open_file(
                config.output, "w", encoding=SOURCE_ENCODING, errors=SOURCE_ERRORS
            )
        except OSError as e:
            raise OutputError(config.output, e.strerror or str(e)) from e

        with stream:
            emitted = emit_declarations(
                stream, unit.declarations(), keep, config.blacklist
            )

    destination = "stdout" if config.writes_to_stdout() else config.output
    logger.debug("Emitted %d declarations to %s", emitted, destination)
    return TrimResult(keep=keep, added=added, emitted=emitted)
