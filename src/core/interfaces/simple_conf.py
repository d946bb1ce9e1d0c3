"""Load/save capability contract.

Every binding, generated or reflected, exposes these operations. The string
overloads only wrap a `Path(...)` around the two path operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


class SimpleConf(ABC, Generic[T]):
    """Capability of a configuration type, exposed as class methods."""

    @classmethod
    @abstractmethod
    def from_serialized(cls, serialized: str) -> T:
        """Build an instance from its inline serialized form."""

    @classmethod
    @abstractmethod
    def from_path(cls, path: Path) -> T:
        """Read and deserialize the configuration stored at `path`."""

    @classmethod
    def from_path_str(cls, path: str) -> T:
        return cls.from_path(Path(path))

    @classmethod
    @abstractmethod
    def to_serialized(cls, instance: T) -> str:
        """Serialize `instance` to its inline form."""

    @classmethod
    @abstractmethod
    def to_path(cls, instance: T, path: Path) -> None:
        """Serialize `instance` and persist it at `path`."""

    @classmethod
    def to_path_str(cls, instance: T, path: str) -> None:
        cls.to_path(instance, Path(path))
