from xtract.aligner import parse_document, resolve_all, resolve_one, select_all, select_first
from xtract.fields import FieldSpec

HEADLINES = """
<html><body>
  <h1>First</h1>
  <h1>Second</h1>
  <h1>Third</h1>
  <span class="price">10</span>
</body></html>
"""


def _texts(row):
    return row.values()


def test_resolve_one_takes_first_match_per_field():
    doc = parse_document(HEADLINES)
    row = resolve_one([FieldSpec("h1"), FieldSpec(".price"), FieldSpec(".missing")], doc)
    assert row.items() == [("1-text", "First"), ("2-text", "10"), ("3-text", "")]


def test_resolve_one_with_no_specs_gives_one_empty_row():
    row = resolve_one([], parse_document(HEADLINES))
    assert len(row) == 0


def test_resolve_all_continues_to_longest_field():
    doc = parse_document(HEADLINES)
    rows = resolve_all([FieldSpec("h1"), FieldSpec(".price")], doc)
    assert [_texts(r) for r in rows] == [["First", "10"], ["Second", ""], ["Third", ""]]


def test_resolve_all_pads_field_that_never_matched():
    doc = parse_document(HEADLINES)
    rows = resolve_all([FieldSpec(".missing", attributes=["text", "id"]), FieldSpec("h1")], doc)
    assert len(rows) == 3
    assert all(r.values()[:2] == ["", ""] for r in rows)
    assert [r.values()[2] for r in rows] == ["First", "Second", "Third"]


def test_resolve_all_keys_follow_declaration_order():
    doc = parse_document(HEADLINES)
    rows = resolve_all([FieldSpec(".price"), FieldSpec("h1", attributes=["text", "id"])], doc)
    assert rows[0].keys() == ["1-text", "2-text", "3-id"]


def test_resolve_all_edge_cases():
    doc = parse_document(HEADLINES)
    assert resolve_all([], doc) == []
    assert resolve_all([FieldSpec(".missing"), FieldSpec("table")], doc) == []


def test_row_count_is_max_of_match_counts():
    doc = parse_document("<p>a</p><p>b</p><i>1</i><i>2</i><i>3</i><i>4</i><b>x</b>")
    rows = resolve_all([FieldSpec("p"), FieldSpec("i"), FieldSpec("b")], doc)
    assert len(rows) == 4
    assert rows[3].values() == ["", "4", ""]


def test_invalid_selector_is_a_miss():
    doc = parse_document(HEADLINES)
    assert select_first(doc, "h1[") is None
    assert select_all(doc, "h1[") == []
    assert resolve_one([FieldSpec("h1[")], doc).values() == [""]


def test_malformed_markup_is_tolerated():
    doc = parse_document("<div><h1>Open <b>tags</div>", parser="html.parser")
    assert resolve_one([FieldSpec("h1")], doc).values() == ["Open tags"]
