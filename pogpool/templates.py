"""Templates for the generated C model files, and the placeholder filler."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

_TABLE = "{{TABLE_NAME}}"
_STRUCT = "{{STRUCT_NAME}}"
_QUERY_BUFFER = "{{QUERY_BUFFER}}"
_SERIALIZE_BUFFER = "{{SERIALIZE_BUFFER}}"


def _join_blocks(blocks: Sequence[Sequence[str]]) -> str:
    """Join blocks of lines, separating blocks by one blank line."""
    return "\n\n".join("\n".join(block) for block in blocks) + "\n"


def _build_header() -> str:
    query_type = f"{_TABLE}Query"
    guard = [f"#ifndef MODEL_{_TABLE}", f"#define MODEL_{_TABLE}"]
    includes = [
        f"#include <{name}>"
        for name in (
            "postgresql/libpq-fe.h",
            "stdbool.h",
            "pog_pool/connection.h",
            "pog_pool/auto_generate.h",
        )
    ]
    record = ["typedef struct {", "{{STRUCT_FIELDS}}} " + _TABLE + ";"]
    result = [
        "typedef struct {",
        f"  {_TABLE}* {_TABLE};",
        "  ExecStatusType status;",
        f"}} {query_type};",
    ]
    operations = [
        ("Query", "PGconn *conn, const char *select, const char *where_clause"),
        ("Insert", f"PGconn *conn, {_TABLE} u"),
        ("Update", f"PGconn *conn, {_TABLE} u, const char *where_clause"),
        ("Delete", "PGconn *conn, const char *where_clause"),
    ]
    prototypes = [f"{query_type} {verb}{_TABLE}({params});" for verb, params in operations]
    prototypes.append(f"char* Serialize{_TABLE}({_TABLE} u);")
    prototypes.append(f"void Free{_TABLE}Query({query_type} *query_result);")
    footer = [f"#endif // MODEL_{_TABLE}"]
    return _join_blocks([guard, includes, record, result, prototypes, footer])


def _statement_prelude(call_lines: Sequence[str]) -> list[str]:
    """Lines that format a statement into a buffer, run it and record the status."""
    return [
        f"  {_STRUCT}Query query_result;",
        f"  char query[{_QUERY_BUFFER}];",
        *call_lines,
        r'  printf("SQL: %s\n", query);',
        "  PGresult *res = PQexec(conn, query);",
        "  ExecStatusType status = PQresultStatus(res);",
        f"  query_result.{_TABLE} = NULL;",
        "  query_result.status = status;",
    ]


def _command_function(
    signature: str, sql_lines: Sequence[str], error_message: str
) -> list[str]:
    """A function that runs a statement expected to return no rows."""
    call = ["  snprintf(query, sizeof(query),", *(f"    {line}" for line in sql_lines)]
    return [
        signature,
        "{",
        *_statement_prelude(call),
        "  if (status != PGRES_COMMAND_OK)",
        "  {",
        f'    fprintf(stderr, "{error_message}", PQerrorMessage(conn));',
        "  }",
        "  PQclear(res);",
        "  return query_result;",
        "}",
    ]


def _query_function() -> list[str]:
    select_call = [
        "  snprintf(query, sizeof(query), "
        f'"SELECT %s FROM {_TABLE} WHERE %s;", select, where_clause);'
    ]
    return [
        f"{_STRUCT}Query Query{_STRUCT}"
        "(PGconn *conn, const char *select, const char *where_clause)",
        "{",
        *_statement_prelude(select_call),
        "  if (status != PGRES_TUPLES_OK)",
        "  {",
        r'    fprintf(stderr, "QUERY failed: %s\\n", PQerrorMessage(conn));',
        "    PQclear(res);",
        "    return query_result;",
        "  }",
        "  int rows = PQntuples(res);",
        "  if (rows == 0) return query_result;",
        f"  {_STRUCT}* list = malloc(rows * sizeof({_STRUCT}));",
        "  for (int i = 0; i < rows; i++)",
        "  {",
        f"    memset(&list[i], 0, sizeof({_STRUCT}));",
        "    for (int j = 0; j < PQnfields(res); j++)",
        "    {",
        "      const char *colname = PQfname(res, j);",
        "      const char *value = PQgetvalue(res, i, j);",
        "{{FIELD_ASSIGNMENTS}}",
        "    }",
        "  }",
        "  PQclear(res);",
        f"  query_result.{_TABLE} = list;",
        "  return query_result;",
        "}",
    ]


def _serialize_function() -> list[str]:
    return [
        f"char* Serialize{_STRUCT}({_STRUCT} u)",
        "{",
        f"  char *buffer = malloc({_SERIALIZE_BUFFER});",
        "  if (!buffer) return NULL;",
        f"  snprintf(buffer, {_SERIALIZE_BUFFER},",
        '    "{{SERIALIZE_JSON_FORMAT}}",',
        "{{SERIALIZE_JSON_ARGS}}",
        "  );",
        "  return buffer;",
        "}",
    ]


def _free_function() -> list[str]:
    field = f"query_result->{_TABLE}"
    return [
        f"void Free{_STRUCT}Query({_STRUCT}Query *query_result)",
        "{",
        "  if (!query_result) return;",
        "",
        f"  if ({field} != NULL)",
        "  {",
        f"    free({field});",
        f"    {field} = NULL;",
        "  }",
        "",
        "  // So they know",
        "  query_result->status = PGRES_FATAL_ERROR;",
        "}",
    ]


def _build_source() -> str:
    includes = [f'#include "model_{_TABLE}.h"'] + [
        f"#include <{name}>" for name in ("stdlib.h", "stdio.h", "string.h")
    ]
    insert = _command_function(
        f"{_TABLE}Query Insert{_STRUCT}(PGconn *conn, {_STRUCT} u)",
        [
            f'"INSERT INTO {_TABLE} {{{{COLUMN_NAMES}}}} "',
            '"VALUES ({{FORMAT_PARTS}});",',
            "{{VALUE_ARGS}});",
        ],
        r"INSERT failed: %s\\n",
    )
    update = _command_function(
        f"{_STRUCT}Query Update{_STRUCT}"
        f"(PGconn *conn, {_STRUCT} u, const char *where_clause)",
        [
            f'"UPDATE {_TABLE} SET {{{{SET_CLAUSE}}}} WHERE %s;",',
            "{{UPDATE_ARGS}}, where_clause);",
        ],
        r"Update failed: %s\n",
    )
    delete = _command_function(
        f"{_STRUCT}Query Delete{_STRUCT}(PGconn *conn, const char *where_clause)",
        [f'"DELETE FROM {_TABLE} WHERE %s;",', "where_clause);"],
        r"Update failed: %s\n",
    )
    return _join_blocks(
        [includes, _query_function(), insert, update, delete,
         _serialize_function(), _free_function()]
    )


HEADER_TEMPLATE = _build_header()
SOURCE_TEMPLATE = _build_source()


def render_template(
    template: str,
    replacements: Mapping[str, str] | Iterable[tuple[str, str]],
) -> str:
    """Replace every occurrence of each placeholder, one placeholder after another.

    Replacements are applied in order, so a value inserted by an earlier
    replacement is itself subject to the later ones.
    """
    pairs = replacements.items() if isinstance(replacements, Mapping) else replacements
    result = template
    for placeholder, value in pairs:
        if not placeholder:
            raise ValueError("placeholder must not be empty")
        result = result.replace(placeholder, value)
    return result