"""
资源加载验证脚本（schema / prompt）

运行方式：pytest test_asset_store.py
"""

import pytest

from salus.settings import DEFAULT_ASSETS_DIR
from salus_libs.core.asset_store import AssetNotFound, AssetReadError, AssetStore


def _make_store(tmp_path):
    (tmp_path / "schemas").mkdir()
    (tmp_path / "prompts").mkdir()
    (tmp_path / "schemas" / "meal.json").write_text('{"type": "object"}', encoding="utf-8")
    (tmp_path / "prompts" / "meal_base_prompt.txt").write_text("Make a meal plan.", encoding="utf-8")
    return AssetStore(tmp_path)


def test_load_schema_and_prompt(tmp_path):
    store = _make_store(tmp_path)
    schema = store.load_schema("meal")
    assert schema.name == "meal"
    assert schema.text == '{"type": "object"}'
    assert store.load_prompt("meal_base_prompt") == "Make a meal plan."


def test_documents_are_cached_until_cleared(tmp_path):
    store = _make_store(tmp_path)
    assert store.load_prompt("meal_base_prompt") == "Make a meal plan."

    (tmp_path / "prompts" / "meal_base_prompt.txt").write_text("Changed.", encoding="utf-8")
    assert store.load_prompt("meal_base_prompt") == "Make a meal plan."

    store.clear_cache()
    assert store.load_prompt("meal_base_prompt") == "Changed."


def test_missing_document(tmp_path):
    store = _make_store(tmp_path)
    with pytest.raises(AssetNotFound) as exc_info:
        store.load_schema("workout")
    assert exc_info.value.kind == "schema"
    assert exc_info.value.name == "workout"


def test_unsafe_names_are_not_found(tmp_path):
    store = _make_store(tmp_path)
    for name in ("../meal", "", "meal/../../etc", ".hidden"):
        with pytest.raises(AssetNotFound):
            store.load_schema(name)


def test_undecodable_document_is_a_read_error(tmp_path):
    store = _make_store(tmp_path)
    (tmp_path / "prompts" / "binary.txt").write_bytes(b"\xff\xfe\x00bad")
    with pytest.raises(AssetReadError):
        store.load_prompt("binary")


def test_bundled_assets_exist():
    store = AssetStore(DEFAULT_ASSETS_DIR)
    for name in ("meal", "workout"):
        assert store.load_schema(name).text.strip().startswith("{")
    for name in ("meal_base_prompt", "workout_base_prompt"):
        assert "JSON" in store.load_prompt(name)
