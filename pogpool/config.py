"""Reading and creating the generator's YAML-like configuration file."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_CONFIG = (
    "input_model_folder: ./models\n"
    "output_model_folder: ./models\n"
    "database_url: db_urls\n"
)


@dataclass
class PogPoolConfig:
    """Settings read from the configuration file."""

    input_dir: str = ""
    output_dir: str = ""
    output_file: str = ""
    database_url: str = ""


def ensure_default_config(path: str | os.PathLike) -> None:
    """Write the default configuration to ``path``, replacing any content."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(DEFAULT_CONFIG)


def _split_line(line: str) -> tuple[str, str] | None:
    stripped = line.lstrip(":")
    if not stripped:
        return None
    key, sep, rest = stripped.partition(":")
    if not sep:
        return None
    rest = rest.lstrip("\n")
    if not rest:
        return None
    value = rest.split("\n", 1)[0]
    return key, value.lstrip(" \t")


def parse_config(path: str | os.PathLike) -> PogPoolConfig:
    """Read the configuration at ``path``, creating a default one if it is missing."""
    if not os.path.exists(path):
        ensure_default_config(path)
    config = PogPoolConfig()
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            parsed = _split_line(line)
            if parsed is None:
                continue
            key, value = parsed
            if key == "input_model_folder":
                config.input_dir = value
            elif key == "output_model_code_folder":
                config.output_dir = value
                config.output_file = f"{value}/models.h"
            elif key == "database_url":
                config.database_url = value
    return config