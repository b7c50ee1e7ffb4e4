"""Tests for the duckdb load/save boundary."""

import json

import pytest

from src.console import actions as act
from src.console.store import apply_action, get_namespace, hydrate, namespace_experiments
from src.warehouse.db import get_connection, init_db, load_namespaces, load_state, save_namespaces

PAYLOADS = [
    {
        "name": "prod",
        "labels": [{"key": "env", "value": "prod"}],
        "experiments": [{"id": "exp-a", "name": "A", "numSegments": 10, "segments": [0, 1]}],
    },
    {"name": "staging"},
]


@pytest.fixture
def conn():
    connection = get_connection(":memory:")
    init_db(connection)
    yield connection
    connection.close()


class TestSaveAndLoad:
    def test_round_trip(self, conn):
        state = hydrate(PAYLOADS)
        saved, deleted = save_namespaces(conn, state)
        assert (saved, deleted) == (2, 0)

        loaded = load_state(conn)
        assert [ns.name for ns in loaded.namespaces] == ["prod", "staging"]
        assert namespace_experiments(loaded, "prod")[0].segments == frozenset({0, 1})
        assert get_namespace(loaded, "prod").labels[0].value == "prod"

    def test_saving_twice_replaces_rows(self, conn):
        state = hydrate(PAYLOADS)
        save_namespaces(conn, state)
        state = apply_action(state, act.RenameExperiment("prod", "exp-a", "Renamed"))
        assert save_namespaces(conn, state) == (2, 0)
        assert load_namespaces(conn)[0]["experiments"][0]["name"] == "Renamed"

    def test_deleted_namespace_is_removed(self, conn):
        state = hydrate(PAYLOADS)
        save_namespaces(conn, state)
        state = apply_action(state, act.DeleteNamespace("staging"))
        assert save_namespaces(conn, state) == (1, 1)
        assert [p["name"] for p in load_namespaces(conn)] == ["prod"]

    def test_saving_empty_state_clears_table(self, conn):
        save_namespaces(conn, hydrate(PAYLOADS))
        assert save_namespaces(conn, hydrate([])) == (0, 2)
        assert load_namespaces(conn) == []

    def test_stored_payload_has_no_internal_flags(self, conn):
        state = apply_action(hydrate(PAYLOADS), act.AddExperiment("staging", "new"))
        save_namespaces(conn, state)
        raw = conn.execute("SELECT payload FROM namespaces WHERE name = 'staging'").fetchone()[0]
        experiment = json.loads(raw)["experiments"][0]
        assert "isDirty" not in experiment
        assert "isNew" not in experiment
        assert experiment["name"] == "new"

    def test_file_database(self, tmp_path):
        path = str(tmp_path / "nested" / "console.duckdb")
        conn = get_connection(path)
        init_db(conn)
        save_namespaces(conn, hydrate(PAYLOADS))
        conn.close()

        conn = get_connection(path)
        assert len(load_namespaces(conn)) == 2
        conn.close()
