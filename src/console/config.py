"""Store configuration.

The segment universe defaults to 128 segments, matching the 16-byte
bitmap the backend stores per namespace and experiment.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoreConfig:
    # Universe size used when a namespace has no experiments to read it from
    default_num_segments: int = 128

    # Prefixes for generated identities ("exp-1", "param-2", ...)
    experiment_id_prefix: str = "exp"
    param_id_prefix: str = "param"
