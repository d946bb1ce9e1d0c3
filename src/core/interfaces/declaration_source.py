"""Declaration source contract.

Why Protocol:
- A structural contract (duck typing) without rigid inheritance.
- Python source scanning, runtime reflection and JSON declaration files are
  interchangeable and testable without coupling the core to any of them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import TypeDeclaration


@runtime_checkable
class DeclarationSource(Protocol):
    """Minimal contract for a host declaration parser.

    Design rules:
    - `declarations` returns the annotated types in declaration order.
    - Unreadable input raises `DeclarationSourceError`; invalid annotations
      are left for the engine to reject.
    """

    def declarations(self) -> list[TypeDeclaration]:
        """Return the structured declarations found in this source."""

        ...
