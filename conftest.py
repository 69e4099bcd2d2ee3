"""Load .env.test into the environment before campus_chat.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

ENV_TEST = Path(__file__).resolve().parent / ".env.test"


def _load_env_file(path: Path) -> None:
    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        # Variables already exported by CI win over the file
        os.environ.setdefault(key.strip(), value.strip().strip("\"'"))


if ENV_TEST.exists():
    _load_env_file(ENV_TEST)
