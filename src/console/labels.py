"""Edit primitives for a namespace's label list.

Every function returns a new tuple, or the input tuple itself when the
edit does not apply. Labels that are not touched are carried over as-is.
"""

from dataclasses import replace

from src.console.records import Label


def add_label(labels: tuple[Label, ...], key: str) -> tuple[Label, ...]:
    """Append an enabled label with an empty value.

    Empty keys and keys already present are ignored.
    """
    if not key or any(label.key == key for label in labels):
        return labels
    return (*labels, Label(key=key))


def toggle_label(labels: tuple[Label, ...], key: str) -> tuple[Label, ...]:
    for i, label in enumerate(labels):
        if label.key == key:
            return _replace_at(labels, i, replace(label, enabled=not label.enabled))
    return labels


def set_label_value(
    labels: tuple[Label, ...], key: str, value: str,
) -> tuple[Label, ...]:
    for i, label in enumerate(labels):
        if label.key == key:
            return _replace_at(labels, i, replace(label, value=value))
    return labels


def _replace_at(labels: tuple[Label, ...], index: int, label: Label) -> tuple[Label, ...]:
    return labels[:index] + (label,) + labels[index + 1:]
