"""Segment allocation queries.

Experiments in one namespace share a universe of segments numbered
0..num_segments-1 and should claim disjoint subsets of it. Nothing here
mutates state: these functions answer "what is taken" and "what is free"
for a set of experiments, optionally ignoring some of them.

When computing what experiment X may claim, exclude X itself so that it
can keep its own segments. For a brand-new experiment exclude nothing.
Experiments marked for deletion still hold their segments until they are
purged or explicitly excluded.

Overlapping claims are never rejected; they are reported by
``find_overlaps`` so an editor can show them while the user fixes them.
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable

from src.console.records import Experiment

DEFAULT_NUM_SEGMENTS = 128


@dataclass(frozen=True)
class SegmentOverlap:
    first: str  # experiment id
    second: str
    segments: frozenset[int]


@dataclass(frozen=True)
class SegmentReport:
    num_segments: int
    combined: frozenset[int]
    available: frozenset[int]
    overlaps: tuple[SegmentOverlap, ...]


def combined_segments(
    experiments: Iterable[Experiment],
    exclude_ids: Iterable[str] = (),
    num_segments: int | None = None,
    default: int = DEFAULT_NUM_SEGMENTS,
) -> frozenset[int]:
    """Segments claimed by the experiments not excluded.

    Claims outside the namespace universe are left out; they are reported
    by ``experiment_problems`` instead.
    """
    experiments = list(experiments)
    excluded = set(exclude_ids)
    claimed: set[int] = set()
    for exp in experiments:
        if exp.id not in excluded:
            claimed |= exp.segments
    size = universe_size(experiments, num_segments, default)
    return frozenset(s for s in claimed if 0 <= s < size)


def universe_size(
    experiments: Iterable[Experiment],
    num_segments: int | None = None,
    default: int = DEFAULT_NUM_SEGMENTS,
) -> int:
    """Size of the segment universe for a namespace.

    An explicit ``num_segments`` wins; otherwise it is read from the first
    experiment (excluded or not), and ``default`` covers empty namespaces.
    """
    if num_segments is not None:
        return num_segments
    for exp in experiments:
        return exp.num_segments
    return default


def available_segments(
    experiments: Iterable[Experiment],
    exclude_ids: Iterable[str] = (),
    num_segments: int | None = None,
    default: int = DEFAULT_NUM_SEGMENTS,
) -> frozenset[int]:
    experiments = list(experiments)
    size = universe_size(experiments, num_segments, default)
    return frozenset(range(size)) - combined_segments(experiments, exclude_ids, size)


def find_overlaps(
    experiments: Iterable[Experiment],
    exclude_ids: Iterable[str] = (),
) -> list[SegmentOverlap]:
    excluded = set(exclude_ids)
    candidates = [e for e in experiments if e.id not in excluded]
    overlaps = []
    for a, b in combinations(candidates, 2):
        shared = a.segments & b.segments
        if shared:
            overlaps.append(SegmentOverlap(first=a.id, second=b.id, segments=shared))
    return overlaps


def segment_report(
    experiments: Iterable[Experiment],
    exclude_ids: Iterable[str] = (),
    num_segments: int | None = None,
    default: int = DEFAULT_NUM_SEGMENTS,
) -> SegmentReport:
    experiments = list(experiments)
    exclude_ids = set(exclude_ids)
    size = universe_size(experiments, num_segments, default)
    combined = combined_segments(experiments, exclude_ids, size)
    return SegmentReport(
        num_segments=size,
        combined=combined,
        available=frozenset(range(size)) - combined,
        overlaps=tuple(find_overlaps(experiments, exclude_ids)),
    )


# --- Bitmap codec ---
# The backend stores a segment set as a hex string of a bitmap: segment s
# is bit (s % 8) of byte (s // 8). 128 segments take 16 bytes.

def encode_segments(segments: Iterable[int], num_segments: int = DEFAULT_NUM_SEGMENTS) -> str:
    bitmap = bytearray((num_segments + 7) // 8)
    for seg in segments:
        if not 0 <= seg < num_segments:
            raise ValueError(f"Segment {seg} outside universe of {num_segments}")
        bitmap[seg // 8] |= 1 << (seg % 8)
    return bitmap.hex()


def decode_segments(encoded: str) -> frozenset[int]:
    try:
        bitmap = bytes.fromhex(encoded)
    except ValueError as exc:
        raise ValueError(f"Invalid segment bitmap: {encoded!r}") from exc
    return frozenset(
        i * 8 + bit
        for i, byte in enumerate(bitmap)
        for bit in range(8)
        if byte & (1 << bit)
    )


def format_segments(segments: Iterable[int]) -> str:
    """Render a segment set as comma-separated ranges, e.g. "0-2, 5"."""
    ordered = sorted(set(segments))
    parts = []
    i = 0
    while i < len(ordered):
        start = ordered[i]
        while i + 1 < len(ordered) and ordered[i + 1] == ordered[i] + 1:
            i += 1
        end = ordered[i]
        parts.append(str(start) if start == end else f"{start}-{end}")
        i += 1
    return ", ".join(parts)
