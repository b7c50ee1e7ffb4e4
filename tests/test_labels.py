"""Tests for label list edits."""

from src.console.labels import add_label, set_label_value, toggle_label
from src.console.records import Label


class TestAddLabel:
    def test_appends_enabled_label_with_empty_value(self):
        labels = add_label((), "env")
        assert labels == (Label(key="env", value="", enabled=True),)

    def test_keeps_existing_labels(self):
        first = Label("team", "search")
        labels = add_label((first,), "env")
        assert labels[0] is first
        assert [lb.key for lb in labels] == ["team", "env"]

    def test_empty_key_is_ignored(self):
        labels = (Label("team"),)
        assert add_label(labels, "") is labels

    def test_duplicate_key_is_ignored(self):
        labels = (Label("team"),)
        assert add_label(labels, "team") is labels


class TestToggleLabel:
    def test_flips_enabled(self):
        labels = toggle_label((Label("env"),), "env")
        assert labels[0].enabled is False

    def test_toggle_twice_restores(self):
        labels = (Label("env"), Label("team"))
        assert toggle_label(toggle_label(labels, "env"), "env") == labels

    def test_only_target_changes(self):
        other = Label("team")
        labels = toggle_label((Label("env"), other), "env")
        assert labels[1] is other

    def test_unknown_key_is_noop(self):
        labels = (Label("env"),)
        assert toggle_label(labels, "missing") is labels


class TestSetLabelValue:
    def test_sets_value(self):
        labels = set_label_value((Label("env"),), "env", "prod")
        assert labels[0].value == "prod"
        assert labels[0].enabled is True

    def test_unknown_key_is_noop(self):
        labels = (Label("env"),)
        assert set_label_value(labels, "missing", "x") is labels
