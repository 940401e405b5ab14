"""Signature registry — the catalog of vulnerability signatures."""

from hybridscan.registry.loader import (
    default_registry,
    load_preset,
    load_registry,
    load_registry_from_string,
)
from hybridscan.registry.models import (
    RegistryError,
    Severity,
    Signature,
    SignatureRegistry,
)

__all__ = [
    "RegistryError",
    "Severity",
    "Signature",
    "SignatureRegistry",
    "default_registry",
    "load_preset",
    "load_registry",
    "load_registry_from_string",
]
