import json
import os, sys

sys.path.append(os.path.abspath('.'))
from cmdbrain import cli


def write_config(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(f"storage:\n  dir: {tmp_path / 'data'}\nlogging:\n  dir: null\n", encoding="utf-8")
    return str(p)


def test_interpret_list_brain_export(tmp_path, capsys):
    cfg = write_config(tmp_path)
    assert cli.main(["--config", cfg, "interpret", "build", "a", "website"]) == 0
    out = capsys.readouterr().out
    assert "# Interpretation" in out
    assert "Similarity: 0  Difference: 1000" in out

    assert cli.main(["--config", cfg, "interpret", "--json", "build a website"]) == 0
    res = json.loads(capsys.readouterr().out)
    assert res["similarity"] == 1000

    assert cli.main(["--config", cfg, "list"]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 2

    assert cli.main(["--config", cfg, "brain"]) == 0
    assert "# PSEUDOCODE PLAN (auto-generated)" in capsys.readouterr().out

    out_file = tmp_path / "export.json"
    assert cli.main(["--config", cfg, "export", "--out", str(out_file)]) == 0
    doc = json.loads(out_file.read_text(encoding="utf-8"))
    assert len(doc["commands"]) == 2
    assert len(doc["brain_runs"]) == 1


def test_blank_interpret_and_unknown_delete(tmp_path, capsys):
    cfg = write_config(tmp_path)
    assert cli.main(["--config", cfg, "interpret", "   "]) == 1
    assert "EMPTY" in capsys.readouterr().out
    assert cli.main(["--config", cfg, "delete", "missing"]) == 1


def test_add_snippet(tmp_path, capsys):
    cfg = write_config(tmp_path)
    body = tmp_path / "get.go"
    body.write_text("http.Get(url)", encoding="utf-8")
    rc = cli.main(["--config", cfg, "add-snippet", "--title", "Go GET", "--language", "Go",
                   "--tags", "http,get", "--body-file", str(body)])
    assert rc == 0
    assert "(go)" in capsys.readouterr().out
    assert cli.main(["--config", cfg, "add-snippet", "--title", " "]) == 2
