"""Command that generates C model files for every SQL file named by the configuration."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .codegen import create_crud_files_from_sql
from .config import parse_config

DEFAULT_CONFIG_PATH = "pog_pool_config.yml"

_MODELS_HEADER_OPEN = "#ifndef MODELS_H\n#define MODELS_H\n\n"
_MODELS_HEADER_CLOSE = "\n#endif // MODELS_H\n"


def _table_name_from_file(file_name: str) -> str:
    return file_name.split(".", 1)[0]


def _sql_files(input_dir: str) -> list[os.DirEntry]:
    with os.scandir(input_dir) as entries:
        found = [
            entry
            for entry in entries
            if entry.is_file(follow_symlinks=False)
            and ".swp" not in entry.name
            and ".sql" in entry.name
        ]
    return sorted(found, key=lambda entry: entry.name)


def generate_models_from_config(config_path: str | os.PathLike = DEFAULT_CONFIG_PATH) -> Path:
    """Generate model files for each SQL file in the configured input folder.

    Writes ``models.h`` in the configured output folder, including one
    ``model_<name>.h`` per SQL file, and returns its path. A missing
    configuration file is first created with default settings.
    """
    config = parse_config(config_path)
    if not os.path.isdir(config.input_dir):
        raise FileNotFoundError(f"Failed to open input directory: {config.input_dir!r}")
    sql_files = _sql_files(config.input_dir)

    if not config.output_file:
        raise ValueError("Failed to open output file: output_model_code_folder is not set")
    models_header = Path(config.output_file)

    with open(models_header, "w", encoding="utf-8") as handle:
        handle.write(_MODELS_HEADER_OPEN)
        for entry in sql_files:
            handle.write(f'#include "model_{_table_name_from_file(entry.name)}.h"\n')
            create_crud_files_from_sql(Path(config.input_dir) / entry.name, config.output_dir)
        handle.write(_MODELS_HEADER_CLOSE)
    return models_header


def main(argv: list[str] | None = None) -> int:
    """Run the generator from the command line; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="pogpool",
        description="Generate C model structs and CRUD functions from SQL table definitions.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"path of the configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    args = parser.parse_args(argv)
    try:
        output = generate_models_from_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"pogpool: {exc}", file=sys.stderr)
        return 1
    print(f"Wrote {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())