import pytest

from pogpool.templates import HEADER_TEMPLATE, SOURCE_TEMPLATE, render_template


def test_replaces_every_occurrence():
    assert render_template("a {{X}} b {{X}}", {"{{X}}": "y"}) == "a y b y"


def test_accepts_pairs():
    assert render_template("{{A}}-{{B}}", [("{{A}}", "1"), ("{{B}}", "2")]) == "1-2"


def test_replacements_apply_in_order():
    result = render_template("{{A}}", {"{{A}}": "{{B}}", "{{B}}": "z"})
    assert result == "z"


def test_later_value_not_rewritten_by_earlier_placeholder():
    result = render_template("{{B}}", {"{{A}}": "q", "{{B}}": "{{A}}"})
    assert result == "{{A}}"


def test_unknown_placeholders_left_untouched():
    assert render_template("{{KEEP}}", {"{{OTHER}}": "x"}) == "{{KEEP}}"


def test_empty_placeholder_rejected():
    with pytest.raises(ValueError):
        render_template("abc", {"": "x"})


def test_header_template_fully_rendered():
    result = render_template(
        HEADER_TEMPLATE,
        {"{{TABLE_NAME}}": "Users", "{{STRUCT_FIELDS}}": "  int id;\n"},
    )
    assert "{{" not in result
    assert result.startswith("#ifndef MODEL_Users\n")
    assert "  int id;\n} Users;" in result
    assert "UsersQuery QueryUsers(PGconn *conn" in result


def test_source_template_keeps_c_escapes():
    result = render_template(SOURCE_TEMPLATE, {"{{TABLE_NAME}}": "T", "{{STRUCT_NAME}}": "T"})
    assert 'printf("SQL: %s\\n", query);' in result
    assert 'fprintf(stderr, "QUERY failed: %s\\\\n", PQerrorMessage(conn));' in result
    assert result.endswith("PGRES_FATAL_ERROR;\n}\n")