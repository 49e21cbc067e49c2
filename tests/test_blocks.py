"""Block schema: constructors, nesting rules and storage round-trip."""

import json

import pytest

from fenix.modules.templates import blocks as b


def test_constructors_set_id_and_type():
    block = b.heading("Hello", level=2, textAlign="center")
    assert block["type"] == "heading"
    assert block["level"] == 2
    assert block["textAlign"] == "center"
    assert block["id"]
    assert b.heading("Hello")["id"] != block["id"]


def test_heading_level_must_be_one_to_three():
    with pytest.raises(ValueError):
        b.heading("Too deep", level=4)


def test_unknown_style_field_rejected():
    with pytest.raises(ValueError):
        b.text("Hi", colour="red")


def test_invalid_alignment_rejected():
    with pytest.raises(ValueError):
        b.text("Hi", textAlign="justify")


def test_section_rejects_nested_containers():
    inner = b.section([b.text("inside")])
    with pytest.raises(ValueError):
        b.section([inner])
    with pytest.raises(ValueError):
        b.section([b.columns([[b.text("a")]])])


def test_columns_rejects_nested_containers():
    with pytest.raises(ValueError):
        b.columns([[b.text("a")], [b.section([b.text("b")])]])
    with pytest.raises(ValueError):
        b.columns([])


def test_columns_lanes_are_lists():
    block = b.columns([(b.text("a"),), [b.text("b"), b.button("Go")]])
    assert [len(lane) for lane in block["columns"]] == [1, 2]


def test_is_nestable():
    assert b.is_nestable(b.footer())
    assert not b.is_nestable(b.section([]))
    assert not b.is_nestable({"type": "columns", "columns": []})
    assert not b.is_nestable("text")


def test_social_link_platforms():
    assert b.social_link("custom", "https://shop.example.com", icon_url="https://cdn.example.com/i.png") == {
        "platform": "custom", "url": "https://shop.example.com", "iconUrl": "https://cdn.example.com/i.png",
    }
    with pytest.raises(ValueError):
        b.social_link("myspace", "https://myspace.com/x")


def test_find_nesting_errors_reports_illegal_nesting():
    doc = [
        {"type": "section", "children": [{"type": "columns", "columns": []}, {"type": "text"}]},
        {"type": "columns", "columns": [[{"type": "section", "children": []}]]},
        "not a block",
        {"content": "no type"},
    ]
    problems = b.find_nesting_errors(doc)
    assert problems == [
        "Section 0 child 0 cannot be nested",
        "Columns 1 lane 0 item 0 cannot be nested",
        "Block 2 is not an object",
        "Block 3 has no type",
    ]


def test_serialization_preserves_unknown_fields():
    doc = [
        dict(b.text("Olá <b>amigo</b>"), editorState={"collapsed": True}),
        b.columns([[b.image("https://cdn.example.com/a.png", alt="A")], [b.text("B")]]),
    ]
    raw = b.serialize_blocks(doc)
    assert "Olá" in raw
    assert b.deserialize_blocks(raw) == doc


def test_nested_tree_round_trips():
    doc = [
        b.heading("Spring catalog"),
        b.section([b.text("Top sellers"), b.button("Shop", "https://fenixbrokers.com")]),
        b.columns([
            [b.product("Rose Palette", src="https://cdn.example.com/rose.png")],
            [b.text("Middle lane")],
            [b.image("https://cdn.example.com/c.png", alt="C")],
        ]),
    ]
    restored = b.deserialize_blocks(b.serialize_blocks(doc))

    assert restored == doc
    assert [blk["type"] for blk in restored[1]["children"]] == ["text", "button"]
    assert len(restored[2]["columns"]) == 3
    assert [lane[0]["type"] for lane in restored[2]["columns"]] == ["product", "text", "image"]
    assert b.find_nesting_errors(restored) == []


@pytest.mark.parametrize("raw", [None, "", "{not json", json.dumps({"type": "text"}), 42])
def test_deserialize_bad_input_gives_empty_list(raw):
    assert b.deserialize_blocks(raw) == []


def test_deserialize_list_is_copied():
    doc = [b.text("a")]
    loaded = b.deserialize_blocks(doc)
    loaded[0]["content"] = "changed"
    assert doc[0]["content"] == "a"
