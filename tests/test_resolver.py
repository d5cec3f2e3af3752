import pytest
from bs4 import BeautifulSoup

from xtract.fields import FieldSpec
from xtract.resolver import NamedValueRow, match_text, resolve_field


def _node(markup: str, selector: str):
    return BeautifulSoup(markup, "lxml").select_one(selector)


def test_absent_node_yields_empty_values():
    spec = FieldSpec("a", attributes=["text", "href"])
    row = NamedValueRow()
    resolve_field(spec, None, row)
    assert row.items() == [("1-text", ""), ("2-href", "")]


def test_text_and_attributes_from_node():
    node = _node('<a href="/go" class="btn primary">Go now</a>', "a")
    spec = FieldSpec("a", attributes=["text", "href", "class", "title"])
    row = NamedValueRow()
    resolve_field(spec, node, row)
    assert row.as_dict() == {"1-text": "Go now", "2-href": "/go", "3-class": "btn primary", "4-title": ""}


@pytest.mark.parametrize("present", [True, False])
def test_row_width_matches_attribute_count(present):
    node = _node("<p>x</p>", "p") if present else None
    spec = FieldSpec("p", attributes=["text", "id", "text"])
    row = NamedValueRow()
    resolve_field(spec, node, row)
    assert len(row) == 3


def test_keys_keep_counting_across_fields():
    row = NamedValueRow()
    resolve_field(FieldSpec("h1"), _node("<h1>Title</h1>", "h1"), row)
    resolve_field(FieldSpec("a", attributes=["href", "href"]), None, row)
    assert row.keys() == ["1-text", "2-href", "3-href"]


def test_pattern_payload_group():
    spec = FieldSpec("span").with_pattern(r"^(Price: )(\d+)( EUR)$")
    assert match_text(spec, "Price: 249 EUR") == "249"
    assert match_text(spec, "Sold out") == ""


def test_unmatched_optional_payload_is_empty():
    spec = FieldSpec("span").with_pattern(r"^(Sold out)(x)?()$")
    assert match_text(spec, "Sold out") == ""


def test_inner_text_includes_descendants():
    node = _node("<div><b>Big</b> deal</div>", "div")
    row = NamedValueRow()
    resolve_field(FieldSpec("div"), node, row)
    assert row["1-text"] == "Big deal"


def test_text_length_cap():
    assert match_text(FieldSpec("p"), "abcdef", max_text_length=3) == "abc"
    assert match_text(FieldSpec("p"), "abcdef", max_text_length=0) == "abcdef"
