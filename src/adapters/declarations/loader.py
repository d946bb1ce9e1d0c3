"""Loading of JSON declaration files."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from adapters.declarations.models import DeclarationFile
from core.domain.models import TypeDeclaration
from core.errors import DeclarationSourceError


def load_declaration_file(path: Path, *, encoding: str = "utf-8") -> list[TypeDeclaration]:
    try:
        raw = path.read_text(encoding=encoding)
        data = json.loads(raw)
        parsed = DeclarationFile.model_validate(data)
    except OSError as exc:
        raise DeclarationSourceError(f"cannot read {path}: {exc}") from exc
    except ValueError as exc:
        # json.JSONDecodeError and pydantic's ValidationError are both ValueErrors.
        kind = "invalid declaration file" if isinstance(exc, ValidationError) else "invalid JSON"
        raise DeclarationSourceError(f"{path}: {kind}: {exc}") from exc
    return [spec.to_declaration() for spec in parsed.types]


class JsonDeclarations:
    """`DeclarationSource` backed by a JSON declaration file."""

    def __init__(self, path: Path, *, encoding: str = "utf-8") -> None:
        self._path = path
        self._encoding = encoding

    def declarations(self) -> list[TypeDeclaration]:
        return load_declaration_file(self._path, encoding=self._encoding)
