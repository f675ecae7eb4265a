#!/usr/bin/env python3

import json
from pathlib import Path

from pydantic import BaseModel, Field

# Flags that make clang treat the input as C regardless of its extension.
BASE_CLANG_ARGS = ["-x", "c"]

STDOUT = "-"


class TrimConfig(BaseModel):
    """Configuration for a single trim run."""

    input_path: Path
    output: str = STDOUT  # "-" writes to standard output

    # Symbol sets
    keep: set[str] = Field(default_factory=set)
    blacklist: set[str] = Field(default_factory=set)

    # Extra parser arguments, e.g. include directories or defines
    clang_args: list[str] = Field(default_factory=list)

    def parser_args(self) -> list[str]:
        """Get the full argument list passed to the parser."""
        return BASE_CLANG_ARGS + self.clang_args

    def writes_to_stdout(self) -> bool:
        return self.output == STDOUT

    def merged_with(
        self,
        keep: tuple[str, ...] | list[str] = (),
        blacklist: tuple[str, ...] | list[str] = (),
        clang_args: tuple[str, ...] | list[str] = (),
        output: str | None = None,
    ) -> "TrimConfig":
        """Return a copy with command line values added on top of this config."""
        return self.model_copy(
            update={
                "keep": self.keep | set(keep),
                "blacklist": self.blacklist | set(blacklist),
                "clang_args": self.clang_args + list(clang_args),
                "output": output if output is not None else self.output,
            }
        )

    @classmethod
    def load_from_file(cls, config_path: Path, input_path: Path) -> "TrimConfig":
        """Load symbol sets and parser settings from a JSON file."""
        args = json.loads(config_path.read_text())
        if not isinstance(args, dict):
            raise ValueError(f"expected a JSON object, got {type(args).__name__}")
        return cls.model_validate({**args, "input_path": input_path})

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        # The input file is given on the command line, not stored with the config
        data = self.model_dump(mode="json", exclude={"input_path"})
        data["keep"] = sorted(self.keep)
        data["blacklist"] = sorted(self.blacklist)
        config_path.write_text(json.dumps(data, indent=2))
