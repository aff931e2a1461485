from __future__ import annotations

import os
from pathlib import Path
from typing import Dict


def load_env_file(path: Path | str = ".env") -> Dict[str, str]:
    """
    Minimal .env loader.

    Reads KEY=VALUE pairs, ignoring blank lines, comments and an optional
    ``export`` prefix. Quoted values are unwrapped. Variables already present in
    the environment are kept; only new ones are injected into os.environ.
    Returns the pairs that were injected.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}

    loaded: Dict[str, str] = {}
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue
        value = value.strip().strip("'\"")
        os.environ[key] = value
        loaded[key] = value
    return loaded
