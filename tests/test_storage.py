import json

from weatheryou.storage import LAST_CITY_KEY, STATE_FILE_ENV, JsonFileStore, MemoryStore, default_state_path


def test_memory_store():
    store = MemoryStore()
    assert store.get(LAST_CITY_KEY) is None
    store.set(LAST_CITY_KEY, "Lisbon")
    store.set(LAST_CITY_KEY, "Porto")
    assert store.get(LAST_CITY_KEY) == "Porto"


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "state.json"
    JsonFileStore(path).set(LAST_CITY_KEY, "Arlington VA")

    assert JsonFileStore(path).get(LAST_CITY_KEY) == "Arlington VA"
    assert json.loads(path.read_text()) == {LAST_CITY_KEY: "Arlington VA"}


def test_json_store_keeps_other_keys(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"theme": "dark"}))
    JsonFileStore(path).set(LAST_CITY_KEY, "Oslo")
    assert json.loads(path.read_text()) == {"theme": "dark", LAST_CITY_KEY: "Oslo"}


def test_json_store_missing_or_corrupt_file_reads_empty(tmp_path):
    assert JsonFileStore(tmp_path / "absent.json").get(LAST_CITY_KEY) is None

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json")
    store = JsonFileStore(corrupt)
    assert store.get(LAST_CITY_KEY) is None
    store.set(LAST_CITY_KEY, "Oslo")
    assert store.get(LAST_CITY_KEY) == "Oslo"


def test_default_path_honours_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(STATE_FILE_ENV, str(tmp_path / "s.json"))
    assert default_state_path() == tmp_path / "s.json"
    monkeypatch.delenv(STATE_FILE_ENV)
    assert default_state_path().name == "state.json"


def test_json_store_write_failure_is_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    store = JsonFileStore(blocker / "state.json")

    store.set(LAST_CITY_KEY, "Oslo")

    assert store.get(LAST_CITY_KEY) is None
    assert blocker.read_text() == "not a directory"
    assert "cannot write state file" in caplog.text


def test_json_store_leaves_no_temp_file_behind(tmp_path, monkeypatch):
    path = tmp_path / "state.json"
    store = JsonFileStore(path)

    def fail_replace(self, target):
        raise PermissionError("read-only")

    monkeypatch.setattr(type(path), "replace", fail_replace)
    store.set(LAST_CITY_KEY, "Oslo")

    assert list(tmp_path.iterdir()) == []
