"""Key-value slots backing the client cart cache."""
from marketcart.client.storage import JsonFileStorage, MemoryStorage


def test_memory_storage_roundtrip():
    storage = MemoryStorage()

    storage.set("cart", "{}")
    assert storage.get("cart") == "{}"

    storage.delete("cart")
    storage.delete("cart")
    assert storage.get("cart") is None


def test_json_file_storage_survives_new_instance(tmp_path):
    path = tmp_path / "state" / "cart.json"
    JsonFileStorage(path).set("cart", '{"items": []}')

    assert JsonFileStorage(path).get("cart") == '{"items": []}'


def test_json_file_storage_keeps_other_keys(tmp_path):
    storage = JsonFileStorage(tmp_path / "kv.json")
    storage.set("cart", "a")
    storage.set("token", "b")

    storage.delete("cart")

    assert storage.get("cart") is None
    assert storage.get("token") == "b"


def test_json_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "kv.json"
    path.write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(path)

    assert storage.get("cart") is None

    storage.set("cart", "x")
    assert storage.get("cart") == "x"
