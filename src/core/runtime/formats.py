"""Default format handler (JSON)."""

from __future__ import annotations

import json
from typing import Any, Mapping


def json_serialize(data: Mapping[str, Any], *, indent: int = 2) -> str:
    return json.dumps(dict(data), ensure_ascii=False, indent=indent) + "\n"


def json_deserialize(text: str) -> Any:
    return json.loads(text)
