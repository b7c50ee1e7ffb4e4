"""Ordered (value, weight) pairs of a parameter's distribution.

Weights are stored exactly as given. Whether they are non-negative or
sum to anything in particular is left to whoever edits them; the CI gate
in ``ci/validate_config.py`` reports negative weights before publishing.
"""

from dataclasses import replace

from src.console.records import Choice


def add_choice(choices: tuple[Choice, ...], value: str) -> tuple[Choice, ...]:
    return (*choices, Choice(value=value, weight=0))


def delete_choice(choices: tuple[Choice, ...], index: int) -> tuple[Choice, ...]:
    if not 0 <= index < len(choices):
        return choices
    return choices[:index] + choices[index + 1:]


def set_weight(
    choices: tuple[Choice, ...], index: int, weight: float,
) -> tuple[Choice, ...]:
    if not 0 <= index < len(choices):
        return choices
    updated = replace(choices[index], weight=weight)
    return choices[:index] + (updated,) + choices[index + 1:]


def clear_choices(choices: tuple[Choice, ...]) -> tuple[Choice, ...]:
    return ()


def total_weight(choices: tuple[Choice, ...]) -> float:
    return sum(c.weight for c in choices)


def normalized_weights(choices: tuple[Choice, ...]) -> list[float]:
    """Weights scaled to sum to 1.0.

    Falls back to a uniform split when the weights sum to zero, which is
    also how an unweighted param distributes its choices.
    """
    if not choices:
        return []
    total = total_weight(choices)
    if total == 0:
        return [1.0 / len(choices)] * len(choices)
    return [c.weight / total for c in choices]
