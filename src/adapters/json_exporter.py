"""JSON export of descriptors.

Why JSON:
- Lets other build tools consume the derived descriptors without importing
  this package.
- Useful to review what the engine decided for each type.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.domain.descriptors import ConfigDescriptor


def descriptors_payload(descriptors: Sequence[ConfigDescriptor]) -> dict:
    return {"types": [d.model_dump(mode="json") for d in descriptors]}


def export_descriptors_json(*, descriptors: Sequence[ConfigDescriptor], output_path: Path) -> Path:
    """Write descriptors as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(descriptors_payload(descriptors), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
