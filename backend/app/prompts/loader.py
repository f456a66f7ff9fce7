"""Demo inputs for the policy simplifier page."""

from functools import lru_cache
from pathlib import Path

import yaml

SAMPLES_PATH = Path(__file__).parent / "samples.yaml"


@lru_cache(maxsize=None)
def sample_policies(path: Path = SAMPLES_PATH) -> tuple[str, ...]:
    """Return the demo policy texts listed under ``policies`` in ``path``."""
    with open(path, encoding="utf-8") as f:
        samples = yaml.safe_load(f) or {}
    return tuple(str(p) for p in samples.get("policies", []))
