"""Derivation orchestration.

The engine raises at the first problem; this module turns each derivation
into a result value so a host tool (the CLI, a build step, tests) can report
every broken type of every source in one pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from core.config import ConfSettings
from core.domain.descriptors import ConfigDescriptor
from core.domain.models import TypeDeclaration
from core.engine import build_config_descriptor
from core.errors import ConfigDerivationError
from core.interfaces.declaration_source import DeclarationSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Derivation:
    """Outcome of deriving one type: a descriptor or the error that stopped it."""

    type_name: str
    descriptor: ConfigDescriptor | None = None
    error: ConfigDerivationError | None = None

    def __post_init__(self) -> None:
        if (self.descriptor is None) == (self.error is None):
            raise ValueError("a derivation holds either a descriptor or an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ConfigDescriptor:
        if self.error is not None:
            raise self.error
        if self.descriptor is None:
            raise ValueError(f"{self.type_name}: derivation has no descriptor")
        return self.descriptor


@dataclass
class DerivationReport:
    """All derivations of one run, in input order."""

    derivations: list[Derivation] = field(default_factory=list)

    @property
    def descriptors(self) -> list[ConfigDescriptor]:
        return [d.descriptor for d in self.derivations if d.descriptor is not None]

    @property
    def errors(self) -> list[ConfigDerivationError]:
        return [d.error for d in self.derivations if d.error is not None]

    @property
    def ok(self) -> bool:
        return all(d.ok for d in self.derivations)

    def extend(self, other: "DerivationReport") -> None:
        self.derivations.extend(other.derivations)


def derive(declaration: TypeDeclaration, settings: ConfSettings | None = None) -> Derivation:
    """Derive the descriptor of one type without raising derivation errors."""

    settings = settings or ConfSettings()
    try:
        descriptor = build_config_descriptor(
            declaration,
            namespace=settings.namespace,
            cli_annotations=settings.cli_annotations,
        )
    except ConfigDerivationError as exc:
        logger.warning("Cannot derive %s: %s", declaration.name, exc.detail)
        return Derivation(type_name=declaration.name, error=exc)

    logger.debug(
        "Derived %s (%s source, %d fields)",
        declaration.name,
        descriptor.source.kind.value,
        len(descriptor.fields),
    )
    return Derivation(type_name=declaration.name, descriptor=descriptor)


def derive_all(
    declarations: Iterable[TypeDeclaration],
    settings: ConfSettings | None = None,
) -> DerivationReport:
    """Derive every declaration independently; one failure never hides another."""

    settings = settings or ConfSettings()
    return DerivationReport(derivations=[derive(d, settings) for d in declarations])


def derive_source(source: DeclarationSource, settings: ConfSettings | None = None) -> DerivationReport:
    return derive_all(source.declarations(), settings)
