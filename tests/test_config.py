#!/usr/bin/env python3

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ctrim.config import TrimConfig


def test_defaults():
    config = TrimConfig(input_path=Path("input.c"))

    assert config.writes_to_stdout()
    assert config.keep == set()
    assert config.blacklist == set()
    assert config.parser_args() == ["-x", "c"]


def test_extra_clang_args_follow_language_flags():
    config = TrimConfig(input_path=Path("input.c"), clang_args=["-Iinclude"])

    assert config.parser_args() == ["-x", "c", "-Iinclude"]


def test_merge_adds_command_line_values():
    config = TrimConfig(
        input_path=Path("input.c"), keep={"main"}, blacklist={"dbg"}, output="out.txt"
    )

    merged = config.merged_with(keep=("helper",), blacklist=("trace",), clang_args=("-DX",))

    assert merged.keep == {"main", "helper"}
    assert merged.blacklist == {"dbg", "trace"}
    assert merged.clang_args == ["-DX"]
    assert merged.output == "out.txt"
    # The original is left alone
    assert config.keep == {"main"}


def test_merge_output_override():
    config = TrimConfig(input_path=Path("input.c"), output="out.txt")

    assert config.merged_with(output="other.txt").output == "other.txt"


def test_save_and_load_round_trip(tmp_path):
    config_path = tmp_path / "ctrim.json"
    config = TrimConfig(
        input_path=Path("input.c"),
        keep={"b", "a"},
        blacklist={"z"},
        clang_args=["-std=c99"],
    )

    config.save_to_file(config_path)
    data = json.loads(config_path.read_text())
    loaded = TrimConfig.load_from_file(config_path, Path("other.c"))

    assert "input_path" not in data
    assert data["keep"] == ["a", "b"]
    assert loaded.input_path == Path("other.c")
    assert loaded.keep == {"a", "b"}
    assert loaded.blacklist == {"z"}
    assert loaded.clang_args == ["-std=c99"]


def test_load_rejects_bad_schema(tmp_path):
    config_path = tmp_path / "ctrim.json"
    config_path.write_text(json.dumps({"keep": 42}))

    with pytest.raises(ValidationError):
        TrimConfig.load_from_file(config_path, Path("input.c"))


def test_load_rejects_non_object(tmp_path):
    config_path = tmp_path / "ctrim.json"
    config_path.write_text(json.dumps(["a"]))

    with pytest.raises(ValueError, match="JSON object"):
        TrimConfig.load_from_file(config_path, Path("input.c"))
