import json
import os, sys

sys.path.append(os.path.abspath('.'))
from cmdbrain.defaults import default_dictionary, default_snippets
import cmdbrain.kvstore as kvstore
from cmdbrain.kvstore import KEYS, JsonFileStore, MemoryStore
from cmdbrain.schemas import BrainRun, Dictionary
from cmdbrain.store import BrainStore


def test_defaults_on_empty_store():
    store = BrainStore(MemoryStore())
    snap = store.snapshot()
    assert snap.commands == ()
    assert snap.brain_runs == ()
    assert [s.id for s in snap.snippets] == [s.id for s in default_snippets()]
    assert snap.dictionary == default_dictionary()


def test_blank_command_rejected_without_side_effects():
    kv = MemoryStore()
    store = BrainStore(kv)
    calls = []
    store.subscribe("commands", calls.append)
    assert store.append_command("   \n\t ") is None
    assert store.append_command("") is None
    assert store.commands == ()
    assert calls == []
    assert KEYS["commands"] not in kv.data


def test_append_and_delete_replace_collection():
    store = BrainStore(MemoryStore())
    before = store.commands
    c1 = store.append_command("  build a website ")
    c2 = store.append_command("destroy the database")
    assert c1.raw == "build a website"
    assert c1.id != c2.id
    assert store.commands is not before
    assert store.delete_command(c1.id) is True
    assert [c.raw for c in store.commands] == ["destroy the database"]
    assert store.delete_command("nope") is False


def test_retention_keeps_thirty_newest():
    store = BrainStore(MemoryStore())
    runs = [BrainRun(plan=f"plan {i}") for i in range(31)]
    for r in runs:
        store.record_run(r)
    assert len(store.brain_runs) == 30
    assert store.brain_runs[0].plan == "plan 30"
    assert store.brain_runs[-1].plan == "plan 1"
    assert all(r.plan != "plan 0" for r in store.brain_runs)


def test_roundtrip_through_json_files(tmp_path):
    kv = JsonFileStore(tmp_path)
    store = BrainStore(kv)
    cmd = store.append_command("build a website")
    store.set_dictionary(Dictionary(synonyms={"x": ["y"]}, stopwords={"b", "a"}))
    store.record_run(BrainRun(plan="p"))

    saved = json.loads((tmp_path / f"{KEYS['dictionary']}.json").read_text(encoding="utf-8"))
    assert saved["stopwords"] == ["a", "b"]

    again = BrainStore(JsonFileStore(tmp_path))
    assert again.commands == (cmd,)
    assert again.dictionary.synonyms == {"x": ["y"]}
    assert again.dictionary.stopwords == {"a", "b"}
    assert again.brain_runs[0].plan == "p"


def test_malformed_data_falls_back_to_defaults(tmp_path):
    (tmp_path / f"{KEYS['commands']}.json").write_text("{not json", encoding="utf-8")
    (tmp_path / f"{KEYS['dictionary']}.json").write_text(json.dumps({"synonyms": "oops"}), encoding="utf-8")
    (tmp_path / f"{KEYS['snippets']}.json").write_text(json.dumps([{"no_title": 1}]), encoding="utf-8")
    store = BrainStore(JsonFileStore(tmp_path))
    assert store.commands == ()
    assert store.dictionary == default_dictionary()
    assert len(store.snippets) == len(default_snippets())


def test_invalid_rewrite_pattern_is_malformed(tmp_path):
    bad = default_dictionary().model_dump(mode="json")
    bad["replacements"].append({"pattern": "(unclosed", "replace": "x"})
    (tmp_path / f"{KEYS['dictionary']}.json").write_text(json.dumps(bad), encoding="utf-8")
    store = BrainStore(JsonFileStore(tmp_path))
    assert len(store.dictionary.replacements) == len(default_dictionary().replacements)


def test_save_failures_are_swallowed(tmp_path, monkeypatch):
    kv = JsonFileStore(tmp_path)

    def boom(*a, **k):
        raise OSError("disk full")

    monkeypatch.setattr(kvstore.tempfile, "NamedTemporaryFile", boom)
    store = BrainStore(kv)
    assert store.append_command("still works") is not None
    assert len(store.commands) == 1
    assert not list(tmp_path.glob("*.json"))


def test_subscribers_get_collection_name_and_errors_do_not_propagate():
    store = BrainStore(MemoryStore())
    seen = []

    def bad(name):
        raise RuntimeError("x")

    store.subscribe("commands", bad)
    store.subscribe("", seen.append)
    store.append_command("a")
    store.set_dictionary(Dictionary())
    store.record_run(BrainRun(plan="p"))
    assert seen == ["commands", "dictionary", "brain_runs"]


def test_export_contains_all_collections():
    store = BrainStore(MemoryStore())
    store.append_command("build")
    store.record_run(BrainRun(plan="p"))
    doc = store.export().model_dump(mode="json")
    assert set(doc) == {"commands", "brain_runs", "snippets", "dictionary"}
    assert doc["commands"][0]["raw"] == "build"
    assert json.loads(json.dumps(doc)) == doc


def test_failed_replace_removes_temp_file(tmp_path):
    # a directory where the target file should go makes os.replace fail
    (tmp_path / f"{KEYS['commands']}.json").mkdir()
    store = BrainStore(JsonFileStore(tmp_path))
    for raw in ("a", "b", "c"):
        store.append_command(raw)
    assert len(store.commands) == 3
    assert not list(tmp_path.glob("*.tmp"))


def test_load_survives_stat_errors(tmp_path, monkeypatch):
    kv = JsonFileStore(tmp_path)

    def denied(self, *a, **k):
        raise PermissionError("denied")

    monkeypatch.setattr(kvstore.Path, "exists", denied)
    assert kv.load(KEYS["commands"], "fallback") == "fallback"
