import os, sys

sys.path.append(os.path.abspath('.'))
from cmdbrain.interpreter import analyze, submit
from cmdbrain.kvstore import MemoryStore
from cmdbrain.schemas import Command, Dictionary
from cmdbrain.store import BrainStore


def test_blank_submission_is_dropped():
    store = BrainStore(MemoryStore())
    assert submit(store, "   ") is None
    assert submit(store, "") is None
    assert store.commands == ()


def test_first_submission_has_no_history():
    store = BrainStore(MemoryStore())
    res = submit(store, "Build a Website")
    assert res.tokens == ["build", "website"]
    assert {"build", "create", "website"} <= set(res.expanded)
    assert res.antonyms == ["destroy"]
    assert res.similarity == 0
    assert res.difference == 1000
    assert res.similar == [] and res.different == [] and res.opposite == []
    assert [c.raw for c in store.commands] == ["Build a Website"]
    assert res.command.id == store.commands[0].id


def test_history_scenario():
    store = BrainStore(MemoryStore())
    a = submit(store, "build a website").command
    submit(store, "destroy the database")
    res = submit(store, "build a website")
    assert res.similar[0].id == a.id
    assert res.similarity == 1000
    assert res.difference == 0
    assert res.opposite[0].raw == "destroy the database"
    # the new command is not compared with itself
    assert len(res.similar) == 2
    assert len(store.commands) == 3


def test_result_texts_and_snippets():
    store = BrainStore(MemoryStore())
    res = submit(store, "fetch http data with python, very quickly")
    assert res.interpretation.startswith("# Interpretation")
    assert "very quickly" in res.interpretation
    assert "highly quickly" in res.enhanced
    assert res.snippets[0].id == "py-requests-get"
    assert len(res.snippets) <= 5
    assert 'command = """fetch http data with python, very quickly"""' in res.plan


def test_analyze_is_pure():
    d = Dictionary(stopwords={"a"})
    history = (Command(raw="a b"),)
    res = analyze(Command(raw="b"), history, d, [])
    assert res.similarity == 1000
    assert history == (Command(raw="a b", id=history[0].id, created_at=history[0].created_at),)
    assert res.snippets == []


def test_failed_analysis_leaves_log_untouched():
    import re

    import pytest
    from cmdbrain.schemas import RewriteRule

    store = BrainStore(MemoryStore())
    seen = []
    store.subscribe("commands", seen.append)
    # model_construct skips validation, like a rule that slipped past it
    bad = RewriteRule.model_construct(pattern="foo", replace="\\q", ignore_case=True)
    store.dictionary = Dictionary(replacements=[bad])
    with pytest.raises(re.error):
        submit(store, "build a website")
    assert store.commands == ()
    assert seen == []
