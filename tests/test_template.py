import pytest

from tri_state.template import PLACEHOLDERS, TemplateContext, expand, split_lines


@pytest.fixture
def ctx() -> TemplateContext:
    return TemplateContext(value=7.532, text="7.5V", name="Battery")


@pytest.mark.parametrize(
    ("template", "expected"),
    [
        ("_v", "8"),
        ("_3v", "7.532"),
        ("_1v", "7.5"),
        ("_0v", "8"),
        ("_5v", "7.53200"),
        ("__", "_"),
        ("", ""),
        ("_t", "7.5V"),
        ("_n", "Battery"),
        ("_n: _t (_2v)", "Battery: 7.5V (7.53)"),
        ("___v", "_8"),
        ("__v", "_v"),
        ("__3v", "_3v"),
        ("_1_v", "_18"),
        ("value_", "value_"),
        ("_x _12 _", "_x _12 _"),
        ("plain text", "plain text"),
    ],
)
def test_expand(template: str, ctx: TemplateContext, expected: str) -> None:
    assert expand(template, ctx) == expected


def test_expand_none_is_empty(ctx: TemplateContext) -> None:
    assert expand(None, ctx) == ""


def test_expand_does_not_rescan_substituted_text() -> None:
    ctx = TemplateContext(value=1.0, text="_n", name="_v")
    assert expand("_t/_n", ctx) == "_n/_v"


def test_expand_negative_and_large_precision() -> None:
    ctx = TemplateContext(value=-0.25, text="", name="")
    assert expand("_2v", ctx) == "-0.25"
    assert expand("_12v", ctx) == "-0.250000000000"


@pytest.mark.parametrize(
    ("template", "expected"),
    [
        ("_n: _v", "Battery: 60"),
        ("Level __ _3v", "Level _ 60.000"),
        ("_t", "60%"),
        ("no placeholders", "no placeholders"),
        ("_b_x", "_b_x"),
        ("", ""),
    ],
)
def test_expand_is_idempotent_once_placeholders_are_gone(template: str, expected: str) -> None:
    ctx = TemplateContext(value=60.0, text="60%", name="Battery")
    once = expand(template, ctx)
    assert once == expected
    assert expand(once, ctx) == once


def test_split_lines() -> None:
    assert split_lines("") == []
    assert split_lines(None) == []
    assert split_lines("one") == ["one"]
    assert split_lines("one_btwo_bthree") == ["one", "two", "three"]
    assert split_lines("a\nb") == ["a", "b"]
    assert split_lines("a\r\nb") == ["a", "b"]
    assert split_lines("a_b") == ["a", ""]


def test_split_lines_keeps_escapes_for_expansion() -> None:
    ctx = TemplateContext(value=1.0, text="", name="")
    lines = split_lines("keep__bliteral_b_v")
    assert lines == ["keep__bliteral", "_v"]
    assert [expand(line, ctx) for line in lines] == ["keep_bliteral", "1"]


def test_placeholder_table_lists_every_token() -> None:
    tokens = [token for _, token in PLACEHOLDERS]
    assert tokens == ["_n", "_t", "_v", "_<N>v", "_b", "__"]
