"""JSON exporter for translated earthquake responses."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def export_json(
    payload: dict[str, Any],
    output_path: Path,
    indent: int = 2,
) -> Path:
    """Write an ``/earthquakes`` response body to a JSON file."""
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=indent, ensure_ascii=False)
    return output_path
