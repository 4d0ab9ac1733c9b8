#!/usr/bin/env python3
"""Smoke-test deterministic behaviour of the steady-state pipeline."""

from __future__ import annotations

import hashlib
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from orchestrator import resolve_settings, run_steady_states

MODELS = ROOT / "models"


def _run(model_path: Path, bounds: dict[str, int] | None = None) -> tuple[str, str]:
    with tempfile.TemporaryDirectory() as out_dir:
        settings = resolve_settings(cli={"output_dir": out_dir, "events_enabled": False})
        result = run_steady_states(model_path, bounds=bounds, settings=settings)
        digest = hashlib.sha256(Path(result["output_path"]).read_bytes()).hexdigest()
    return result["run_id"], digest


def main() -> int:
    models = sorted(MODELS.glob("*.json"))
    if not models:
        print(f"no models found under {MODELS}")
        return 1

    for model_path in models:
        first = _run(model_path)
        second = _run(model_path)
        if first != second:
            print(f"determinism failed for {model_path.name}: {first} vs {second}")
            return 1

    bounded = _run(MODELS / "toggle.json", {"A": 0})
    if bounded[0] == _run(MODELS / "toggle.json")[0]:
        print("different bounds produced identical run ids")
        return 1

    print("Determinism smoke-test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
