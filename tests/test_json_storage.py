import json

from minisocial.storage.json_storage import JsonStorage


def test_load_missing_key_returns_fallback(storage):
    assert storage.load("users", []) == []
    assert storage.load("current_user", None) is None


def test_save_then_load(storage):
    storage.save("posts", [{"id": "p1", "text": "hi"}])
    assert storage.load("posts", []) == [{"id": "p1", "text": "hi"}]


def test_save_overwrites_previous_value(storage):
    storage.save("posts", [1, 2, 3])
    storage.save("posts", [4])
    assert storage.load("posts", []) == [4]


def test_corrupt_blob_returns_fallback(storage):
    storage.path_for("users").write_text("{not json", encoding="utf-8")
    assert storage.load("users", ["fallback"]) == ["fallback"]


def test_null_blob_returns_fallback(storage):
    storage.path_for("current_user").write_text("null", encoding="utf-8")
    assert storage.load("current_user", "absent") == "absent"


def test_delete_is_idempotent(storage):
    storage.save("current_user", {"id": "u1"})
    storage.delete("current_user")
    storage.delete("current_user")
    assert storage.load("current_user", None) is None


def test_keys_are_independent_files(storage):
    storage.save("users", [{"id": "u1"}])
    storage.save("posts", [])
    assert json.loads(storage.path_for("users").read_text(encoding="utf-8")) == [{"id": "u1"}]
    assert storage.path_for("posts").exists()


def test_key_is_sanitized_into_file_name(tmp_path):
    storage = JsonStorage(tmp_path)
    path = storage.path_for("../escape")
    assert path.parent == tmp_path
    assert path.name == "___escape.json"


def test_no_temp_files_left_behind(storage):
    storage.save("users", [])
    storage.save("users", [{"id": "u1"}])
    assert [p.name for p in storage.data_dir.iterdir()] == ["users.json"]
