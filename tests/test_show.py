"""Tests for the show CLI."""

import json

from src.console.show import main
from src.warehouse.db import get_connection, load_namespaces

CONFIG = {
    "namespaces": [
        {
            "name": "prod",
            "publish": True,
            "labels": [{"key": "env", "value": "prod", "enabled": False}],
            "experiments": [
                {"id": "exp-a", "name": "A", "numSegments": 10, "segments": [0, 1, 2],
                 "params": [{"name": "color"}]},
                {"id": "exp-b", "name": "B", "numSegments": 10, "segments": [2, 3, 4]},
            ],
        },
        {"name": "staging"},
    ]
}


def _write_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG))
    return str(path)


class TestShow:
    def test_prints_allocation(self, tmp_path, capsys):
        main(["--config", _write_config(tmp_path)])
        out = capsys.readouterr().out
        assert "Namespace: prod [publish]" in out
        assert "env=prod (disabled)" in out
        assert "exp-a A: 3/10 segments (0-2)  params: color" in out
        assert "combined (5): 0-4" in out
        assert "available (5/10): 5-9" in out
        assert "overlap exp-a / exp-b: 2" in out
        assert "Namespace: staging" in out
        assert "available (128/128): 0-127" in out

    def test_exclude_and_filter(self, tmp_path, capsys):
        main(["--config", _write_config(tmp_path), "--namespace", "prod", "--exclude", "exp-a"])
        out = capsys.readouterr().out
        assert "staging" not in out
        assert "available (7/10): 0-1, 5-9" in out

    def test_unknown_namespace(self, tmp_path, capsys):
        main(["--config", _write_config(tmp_path), "--namespace", "nope"])
        assert "Namespace 'nope' not found" in capsys.readouterr().out

    def test_save_then_load_from_db(self, tmp_path, capsys):
        db = str(tmp_path / "console.duckdb")
        main(["--config", _write_config(tmp_path), "--save", "--db", db])
        assert "Saved: 2, Deleted: 0" in capsys.readouterr().out

        conn = get_connection(db)
        assert [p["name"] for p in load_namespaces(conn)] == ["prod", "staging"]
        conn.close()

        main(["--db", db, "--namespace", "prod"])
        assert "exp-b B: 3/10 segments (2-4)" in capsys.readouterr().out
