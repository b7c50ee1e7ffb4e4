"""Tests for choice/weight edits."""

import pytest

from src.console.choices import (
    add_choice,
    clear_choices,
    delete_choice,
    normalized_weights,
    set_weight,
    total_weight,
)
from src.console.records import Choice

THREE = (Choice("red", 1), Choice("blue", 2), Choice("green", 3))


class TestChoiceEdits:
    def test_add_choice_has_zero_weight(self):
        choices = add_choice(THREE, "black")
        assert choices[-1] == Choice("black", 0)
        assert choices[:3] == THREE

    def test_delete_preserves_order(self):
        assert delete_choice(THREE, 1) == (Choice("red", 1), Choice("green", 3))

    def test_delete_out_of_range_is_noop(self):
        assert delete_choice(THREE, 3) is THREE
        assert delete_choice(THREE, -1) is THREE

    def test_set_weight_replaces_only_index(self):
        choices = set_weight(THREE, 2, 10)
        assert choices[2] == Choice("green", 10)
        assert choices[0] is THREE[0]

    def test_set_weight_does_not_clamp(self):
        choices = set_weight(THREE, 0, -5)
        assert choices[0].weight == -5

    def test_set_weight_out_of_range_is_noop(self):
        assert set_weight(THREE, 7, 1) is THREE

    def test_clear(self):
        assert clear_choices(THREE) == ()


class TestWeights:
    def test_total(self):
        assert total_weight(THREE) == 6

    def test_normalized(self):
        assert normalized_weights(THREE) == pytest.approx([1 / 6, 2 / 6, 3 / 6])

    def test_zero_weights_split_uniformly(self):
        choices = (Choice("a"), Choice("b"))
        assert normalized_weights(choices) == [0.5, 0.5]

    def test_empty(self):
        assert normalized_weights(()) == []
