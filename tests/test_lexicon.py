import os, sys
from types import SimpleNamespace

sys.path.append(os.path.abspath('.'))
from cmdbrain.core.lexicon import antonyms_of, expand_synonyms
from cmdbrain.core.text import tokenize


def make_dict(**kw):
    base = {"synonyms": {}, "antonyms": {}, "stopwords": set()}
    base.update(kw)
    return SimpleNamespace(**base)


def test_build_a_website_scenario():
    d = make_dict(synonyms={"build": ["create"]}, stopwords={"a", "the"})
    toks = tokenize("Build a Website", d.stopwords)
    assert toks == ["build", "website"]
    assert {"build", "create", "website"} <= set(expand_synonyms(toks, d))


def test_expansion_order_originals_then_synonyms():
    d = make_dict(synonyms={"website": ["site", "webapp"], "build": ["make"]})
    assert expand_synonyms(["build", "website", "build"], d) == ["build", "website", "make", "site", "webapp"]


def test_expansion_is_single_level():
    d = make_dict(synonyms={"build": ["create"], "create": ["spawn"]})
    out = expand_synonyms(["build"], d)
    assert out == ["build", "create"]
    assert "spawn" not in out


def test_expansion_is_superset_of_tokens():
    d = make_dict(synonyms={"x": ["y"]})
    for toks in ([], ["x"], ["q", "x", "z"], ["y", "y"]):
        assert set(toks) <= set(expand_synonyms(toks, d))


def test_empty_dictionary_expands_to_tokens_only():
    assert expand_synonyms(["a", "b"], make_dict()) == ["a", "b"]
    assert antonyms_of(["a", "b"], make_dict()) == []


def test_antonyms_union():
    d = make_dict(antonyms={"build": ["destroy"], "allow": ["forbid", "deny"], "create": ["destroy"]})
    assert antonyms_of(["build", "allow", "create", "other"], d) == ["destroy", "forbid", "deny"]
    assert antonyms_of(["other"], d) == []
