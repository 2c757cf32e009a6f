from __future__ import annotations

from handcraft_mapper.mapping.mapping_context import MappingContext


def test_defaults():
    ctx = MappingContext()
    assert ctx.is_empty()
    assert ctx.source is None
    assert ctx.source_index == -1
    assert len(ctx) == 0


def test_put_get_chain_and_default():
    ctx = MappingContext().put("locale", "nl").put("tz", None)
    assert ctx.get("locale") == "nl"
    assert ctx.get("missing", "fallback") == "fallback"
    # None values fall back to the default as well
    assert ctx.get("tz", "UTC") == "UTC"
    assert ctx.contains_key("tz")
    assert "locale" in ctx


def test_keys_keep_insertion_order():
    ctx = MappingContext().put_all({"b": 1, "a": 2}).put("c", 3)
    assert list(ctx.keys()) == ["b", "a", "c"]
    assert list(ctx) == ["b", "a", "c"]


def test_remove_and_clear():
    ctx = MappingContext.of("a", 1).put("b", 2)
    ctx.remove("a").remove("never-there")
    assert list(ctx.keys()) == ["b"]
    ctx.clear()
    assert ctx.is_empty()


def test_constructor_does_not_alias_caller_dict():
    data = {"a": 1}
    ctx = MappingContext(data)
    ctx.put("b", 2)
    assert data == {"a": 1}


def test_copy_drops_bulk_position():
    ctx = MappingContext.of("a", 1)
    ctx.source = [1, 2]
    ctx.source_index = 1
    clone = ctx.copy()
    clone.put("b", 2)
    assert clone.source is None
    assert clone.source_index == -1
    assert "b" not in ctx
