"""Generation of C model files (struct plus CRUD functions) from SQL table definitions."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from .templates import HEADER_TEMPLATE, SOURCE_TEMPLATE, render_template

MAX_COLUMNS = 64
QUERY_BUFFER = "4096"
SERIALIZE_BUFFER = "4096"

_CREATE_TABLE = "CREATE TABLE"
# Offset of the table name after "CREATE TABLE IF NOT EXISTS ".
_TABLE_NAME_OFFSET = 27
_WORD = re.compile(r"[^ ,]*")

_ARRAY_C_TYPES = ("int*", "char**")
_FLOAT_C_TYPES = ("float", "double")
_NUMERIC_C_TYPES = ("int", "short", "long long", "float", "double")


@dataclass(frozen=True)
class Column:
    """A column of a table: its name and its SQL type as written."""

    name: str
    sql_type: str


@dataclass
class CodegenPieces:
    """Snippets of C code filled into the source template."""

    column_names: str = "()"
    format_parts: str = ""
    value_args: str = ""
    set_clause: str = ""
    update_args: str = ""
    field_assignments: str = ""
    serialize_format: str = "{}"
    serialize_args: str = ""
    columns: list[Column] = field(default_factory=list, repr=False)


def sql_to_c_type(sql_type: str) -> str:
    """Map an SQL column type to the C type used in the generated struct."""
    if "[]" in sql_type:
        if sql_type.startswith("INT"):
            return "int*"
        if sql_type.startswith(("TEXT", "VARCHAR")):
            return "char**"
        return "char*"
    if sql_type.startswith("SMALLINT"):
        return "short"
    if sql_type.startswith(("INTEGER", "INT")):
        return "int"
    if sql_type.startswith("BIGINT"):
        return "long long"
    if sql_type.startswith(("DECIMAL", "NUMERIC")):
        return "double"
    if sql_type.startswith("REAL"):
        return "float"
    if sql_type.startswith("DOUBLE"):
        return "double"
    if sql_type.startswith("SERIAL"):
        return "void*"
    if sql_type.startswith("BOOL"):
        return "bool"
    # UUID, character, date/time, JSON, BYTEA, enums and anything unknown.
    return "char*"


def default_value(c_type: str) -> str:
    """C expression used when a field is unset in serialisation."""
    return "0" if c_type in _NUMERIC_C_TYPES else '"null"'


def _word(text: str) -> str:
    return _WORD.match(text).group()


def parse_sql_schema(text: str) -> tuple[str, list[Column]]:
    """Read the table name and columns from a ``CREATE TABLE IF NOT EXISTS`` script.

    Every non-blank line after the ``CREATE TABLE`` line that does not start
    with ``)`` or ``--`` is read as ``name type ...``.
    """
    table_name: str | None = None
    columns: list[Column] = []
    for line in text.splitlines():
        if line.startswith(_CREATE_TABLE):
            table_name = _word(line[_TABLE_NAME_OFFSET:])
            continue
        if table_name is None:
            continue
        skipped = line.lstrip(" \t")
        if not skipped or skipped.startswith(")"):
            continue
        name = _word(skipped)
        if name.startswith("--"):
            continue
        sql_type = _word(skipped[len(name):].lstrip(" \t"))
        if len(columns) >= MAX_COLUMNS:
            raise ValueError(f"too many columns: at most {MAX_COLUMNS} are supported")
        columns.append(Column(name, sql_type))
    if table_name is None:
        raise ValueError("no CREATE TABLE statement found")
    if not table_name:
        raise ValueError("CREATE TABLE statement has no table name")
    return table_name, columns


def _format_part(c_type: str) -> str:
    if c_type in ("short", "int"):
        return "%d"
    if c_type == "long long":
        return "%lld"
    if c_type in _FLOAT_C_TYPES:
        return "%f"
    if c_type == "bool":
        return "%s"
    return "'%s'"


def _value_arg(name: str, c_type: str) -> str:
    if c_type == "bool":
        return f'u.{name} ? "TRUE" : "FALSE"'
    if c_type == "void*":
        return f"(char*)u.{name}"
    if c_type in _ARRAY_C_TYPES:
        return f'u.{name} ? ArrayToString(u.{name}, u.{name}_len, 0) : "null"'
    return f"u.{name}"


def _set_clause(name: str, c_type: str) -> str:
    if c_type in ("int", "short"):
        return f"{name}=%d"
    if c_type == "long long":
        return f"{name}=%lld"
    if c_type in _FLOAT_C_TYPES:
        return f"{name}=%f"
    if c_type == "bool":
        return f"{name}=%s"
    return f"{name}='%s'"


def _field_assignment(name: str, c_type: str) -> str:
    if c_type in ("int", "short"):
        value = "atoi(value)"
    elif c_type == "long long":
        value = "atoll(value)"
    elif c_type in _FLOAT_C_TYPES:
        value = "atof(value)"
    elif c_type == "bool":
        value = '(strcmp(value, "t") == 0)'
    elif c_type == "int*":
        value = f"(int*) ParseArray(value, ARRAY_TYPE_INT, &list[i].{name}_len)"
    elif c_type == "char**":
        value = f"(char**) ParseArray(value, ARRAY_TYPE_STRING, &list[i].{name}_len)"
    else:
        value = "strdup(value)"
    return f'      if (strcmp(colname, "{name}") == 0) list[i].{name} = {value};\n'


def _serialize_format(name: str, sql_type: str, c_type: str) -> str:
    key = f'\\"{name}\\":'
    if c_type in ("int", "short"):
        return key + "%d"
    if c_type == "long long":
        return key + "%lld"
    if c_type in _FLOAT_C_TYPES:
        return key + "%f"
    if c_type == "bool" or sql_type.startswith("JSON") or "[]" in sql_type:
        return key + "%s"
    return key + '\\"%s\\"'


def _serialize_arg(name: str, sql_type: str, c_type: str) -> str:
    if c_type == "bool":
        return f'u.{name} ? "true" : "false"'
    if "[]" in sql_type:
        return f"ArrayToString(u.{name}, u.{name}_len, 1)"
    if c_type == "void*" or sql_type.startswith("JSON"):
        return f'(u.{name} ? (char*)u.{name} : "null")'
    if sql_type.startswith("BYTEA"):
        return f"(u.{name} ? SanitizeHexForJSON(u.{name}) : {default_value(c_type)})"
    return f"(u.{name} ? u.{name} : {default_value(c_type)})"


def build_codegen_pieces(columns: list[Column]) -> CodegenPieces:
    """Build the C snippets for the CRUD functions; ``SERIAL`` columns are left out."""
    used = [column for column in columns if column.sql_type != "SERIAL"]
    typed = [(column.name, column.sql_type, sql_to_c_type(column.sql_type)) for column in used]
    return CodegenPieces(
        column_names="(" + ", ".join(name for name, _, _ in typed) + ")",
        format_parts=", ".join(_format_part(c_type) for _, _, c_type in typed),
        value_args=", ".join(_value_arg(name, c_type) for name, _, c_type in typed),
        set_clause=", ".join(_set_clause(name, c_type) for name, _, c_type in typed),
        update_args=", ".join(_value_arg(name, c_type) for name, _, c_type in typed),
        field_assignments="".join(_field_assignment(name, c_type) for name, _, c_type in typed),
        serialize_format="{"
        + ", ".join(_serialize_format(name, sql, c_type) for name, sql, c_type in typed)
        + "}",
        serialize_args=",\n    ".join(_serialize_arg(name, sql, c_type) for name, sql, c_type in typed),
        columns=used,
    )


def render_header(table_name: str, columns: list[Column]) -> str:
    """Render the C header declaring the model struct and its CRUD functions."""
    lines = []
    for column in columns:
        c_type = sql_to_c_type(column.sql_type)
        lines.append(f"  {c_type} {column.name};\n")
        if c_type in _ARRAY_C_TYPES:
            lines.append(f"  size_t {column.name}_len;\n")
    return render_template(
        HEADER_TEMPLATE,
        {"{{TABLE_NAME}}": table_name, "{{STRUCT_FIELDS}}": "".join(lines)},
    )


def render_source(table_name: str, columns: list[Column]) -> str:
    """Render the C source implementing the model's CRUD functions."""
    pieces = build_codegen_pieces(columns)
    return render_template(
        SOURCE_TEMPLATE,
        [
            ("{{TABLE_NAME}}", table_name),
            ("{{STRUCT_NAME}}", table_name),
            ("{{QUERY_BUFFER}}", QUERY_BUFFER),
            ("{{SERIALIZE_BUFFER}}", SERIALIZE_BUFFER),
            ("{{COLUMN_NAMES}}", pieces.column_names),
            ("{{FORMAT_PARTS}}", pieces.format_parts),
            ("{{VALUE_ARGS}}", pieces.value_args),
            ("{{SET_CLAUSE}}", pieces.set_clause),
            ("{{UPDATE_ARGS}}", pieces.update_args),
            ("{{FIELD_ASSIGNMENTS}}", pieces.field_assignments),
            ("{{SERIALIZE_JSON_FORMAT}}", pieces.serialize_format),
            ("{{SERIALIZE_JSON_ARGS}}", pieces.serialize_args),
        ],
    )


def create_crud_files(
    table_name: str,
    columns: list[Column],
    output_folder: str | os.PathLike,
) -> tuple[Path, Path]:
    """Write ``model_<table>.h`` and ``model_<table>.c`` and return their paths."""
    folder = Path(output_folder)
    header_path = folder / f"model_{table_name}.h"
    source_path = folder / f"model_{table_name}.c"
    header_path.write_text(render_header(table_name, columns), encoding="utf-8")
    source_path.write_text(render_source(table_name, columns), encoding="utf-8")
    return header_path, source_path


def create_crud_files_from_sql(
    sql_path: str | os.PathLike,
    output_folder: str | os.PathLike,
) -> tuple[Path, Path]:
    """Generate the model files for the table defined in an SQL file."""
    text = Path(sql_path).read_text(encoding="utf-8")
    table_name, columns = parse_sql_schema(text)
    return create_crud_files(table_name, columns, output_folder)