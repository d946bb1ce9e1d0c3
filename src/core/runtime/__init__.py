"""Runtime support imported by generated binding modules."""

from core.runtime.binding import CliConfigBinding, ConfigBinding, binding_for
from core.runtime.fields import SKIP, FieldBinding

__all__ = [
    "SKIP",
    "CliConfigBinding",
    "ConfigBinding",
    "FieldBinding",
    "binding_for",
]
