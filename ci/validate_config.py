"""CI validation: verify an exported namespace configuration before publishing.

The store accepts overlapping or out-of-range segment claims while they
are being edited. This script is the gate that refuses to publish them:
it reads the exported configuration JSON and checks structural and
allocation invariants. If anything is wrong, it exits non-zero.

Usage:
    python ci/validate_config.py
    python ci/validate_config.py --data data/config.json
"""

import argparse
import json
import sys
from collections import Counter
from itertools import combinations
from pathlib import Path

REQUIRED_EXPERIMENT_KEYS = {"name", "numSegments", "segments", "params"}


def validate(data: dict) -> list[str]:
    """Return a list of validation errors (empty = pass)."""
    errors = []

    if "namespaces" not in data:
        return ["Missing top-level key: namespaces"]

    namespaces = data["namespaces"]
    names = [ns.get("name") for ns in namespaces]
    for name, count in Counter(names).items():
        if count > 1:
            errors.append(f"Namespace name {name!r} used {count} times")

    for ns in namespaces:
        ns_name = ns.get("name") or "UNNAMED"
        if not ns.get("name"):
            errors.append("Namespace without a name")

        label_keys = [label.get("key") for label in ns.get("labels", [])]
        for key, count in Counter(label_keys).items():
            if count > 1:
                errors.append(f"Namespace {ns_name} has duplicate label {key!r}")

        experiments = ns.get("experiments", [])
        valid = []
        for exp in experiments:
            exp_name = exp.get("name") or exp.get("id") or "UNNAMED"
            missing = REQUIRED_EXPERIMENT_KEYS - set(exp.keys())
            if missing:
                errors.append(f"Experiment {ns_name}/{exp_name} missing fields: {sorted(missing)}")
                continue
            if not isinstance(exp["segments"], list) or not all(
                isinstance(s, int) for s in exp["segments"]
            ):
                errors.append(f"Experiment {ns_name}/{exp_name} segments must be a list of integers")
                continue
            valid.append(exp)

            size = exp["numSegments"]
            bad = sorted(s for s in exp["segments"] if not 0 <= s < size)
            if bad:
                errors.append(f"Experiment {ns_name}/{exp_name} segments out of range 0-{size - 1}: {bad}")

            param_names = Counter(p.get("name") for p in exp["params"])
            for pname, count in param_names.items():
                if count > 1:
                    errors.append(f"Experiment {ns_name}/{exp_name} has duplicate param {pname!r}")

            for p in exp["params"]:
                if not p.get("weighted"):
                    continue
                for choice in p.get("choices", []):
                    if choice.get("weight", 0) < 0:
                        errors.append(
                            f"Param {ns_name}/{exp_name}/{p.get('name')} has negative weight "
                            f"for {choice.get('value')!r}"
                        )

        sizes = {exp["numSegments"] for exp in valid}
        if len(sizes) > 1:
            errors.append(f"Namespace {ns_name} experiments disagree on numSegments: {sorted(sizes)}")

        for a, b in combinations(valid, 2):
            shared = sorted(set(a["segments"]) & set(b["segments"]))
            if shared:
                errors.append(
                    f"Namespace {ns_name}: {a['name']} and {b['name']} overlap on segments {shared}"
                )

    return errors


def main() -> None:
    parser = argparse.ArgumentParser(description="Validate an exported namespace configuration")
    parser.add_argument(
        "--data",
        default="data/config.json",
        help="Path to exported configuration JSON",
    )
    opts = parser.parse_args()

    path = Path(opts.data)
    if not path.exists():
        print(f"FAIL: {opts.data} not found.")
        sys.exit(1)

    data = json.loads(path.read_text())
    errors = validate(data)

    if errors:
        print(f"FAIL: {len(errors)} validation error(s):")
        for e in errors:
            print(f"  - {e}")
        sys.exit(1)

    namespaces = data["namespaces"]
    print("PASS: Configuration validated")
    print(f"  Namespaces: {len(namespaces)}")
    for ns in namespaces:
        claimed = sum(len(exp["segments"]) for exp in ns.get("experiments", []))
        print(f"  {ns['name']}: {len(ns.get('experiments', []))} experiments, {claimed} segments claimed")


if __name__ == "__main__":
    main()
