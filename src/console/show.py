"""CLI entrypoint: load a configuration and print segment allocation.

Usage:
    python -m src.console.show --config config.json
    python -m src.console.show --config config.json --namespace prod --exclude exp-1
    python -m src.console.show --db data/console.duckdb
    python -m src.console.show --config config.json --save --db data/console.duckdb
"""

import argparse
import json
from pathlib import Path

from src.console.config import StoreConfig
from src.console.segments import format_segments
from src.console.store import (
    State,
    experiment_params,
    get_namespace,
    hydrate,
    namespace_experiments,
    problems,
    report,
)
from src.payloads.schemas import ConfigPayload
from src.warehouse.db import DEFAULT_DB_PATH, get_connection, init_db, load_state, save_namespaces


def load_config_file(path: Path, config: StoreConfig) -> State:
    payload = ConfigPayload.model_validate(json.loads(path.read_text()))
    return hydrate(payload.namespaces, config)


def describe_namespace(state: State, name: str, exclude_ids: list[str], num_segments: int | None) -> list[str]:
    ns = get_namespace(state, name)
    if ns is None:
        return [f"Namespace {name!r} not found"]

    lines = [f"Namespace: {ns.name}{' [publish]' if ns.publish else ''}"]
    if ns.labels:
        labels = ", ".join(
            f"{lb.key}={lb.value}" + ("" if lb.enabled else " (disabled)") for lb in ns.labels
        )
        lines.append(f"  labels: {labels}")

    for exp in namespace_experiments(state, name):
        param_names = ", ".join(p.name or p.id for p in experiment_params(state, exp.id))
        lines.append(
            f"  {exp.id} {exp.name}: {len(exp.segments)}/{exp.num_segments} segments "
            f"({format_segments(exp.segments) or 'none'})"
            + (f"  params: {param_names}" if param_names else "")
        )
        for problem in problems(state, name, exp.id):
            lines.append(f"    ! {problem}")

    result = report(state, name, exclude_ids, num_segments)
    lines.append(f"  combined ({len(result.combined)}): {format_segments(result.combined) or 'none'}")
    lines.append(
        f"  available ({len(result.available)}/{result.num_segments}): "
        f"{format_segments(result.available) or 'none'}"
    )
    for overlap in result.overlaps:
        lines.append(
            f"  overlap {overlap.first} / {overlap.second}: {format_segments(overlap.segments)}"
        )
    return lines


def main(args: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Show namespace segment allocation")
    parser.add_argument("--config", type=str, default=None, help="Configuration JSON file")
    parser.add_argument("--db", type=str, default=DEFAULT_DB_PATH, help="Database path")
    parser.add_argument("--namespace", type=str, default=None, help="Only show this namespace")
    parser.add_argument(
        "--exclude", action="append", default=[], help="Experiment id to leave out (repeatable)",
    )
    parser.add_argument("--num-segments", type=int, default=None, help="Override universe size")
    parser.add_argument(
        "--default-num-segments", type=int, default=StoreConfig.default_num_segments,
        help="Universe size for namespaces without experiments",
    )
    parser.add_argument("--save", action="store_true", help="Save the loaded config to --db")
    opts = parser.parse_args(args)

    config = StoreConfig(default_num_segments=opts.default_num_segments)

    if opts.config:
        state = load_config_file(Path(opts.config), config)
    else:
        conn = get_connection(opts.db)
        init_db(conn)
        state = load_state(conn, config)
        conn.close()

    names = [opts.namespace] if opts.namespace else [ns.name for ns in state.namespaces]
    if not names:
        print("No namespaces.")
    for name in names:
        print("\n".join(describe_namespace(state, name, opts.exclude, opts.num_segments)))

    if opts.save:
        print(f"\nSaving to {opts.db}...")
        conn = get_connection(opts.db)
        init_db(conn)
        saved, deleted = save_namespaces(conn, state)
        conn.close()
        print(f"Saved: {saved}, Deleted: {deleted}")


if __name__ == "__main__":
    main()
