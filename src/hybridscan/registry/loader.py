"""Load and validate SignatureRegistry objects from YAML files."""

from __future__ import annotations

import functools
import importlib.resources
import re
from pathlib import Path

import yaml

from hybridscan.registry.models import (
    WILDCARD_LANGUAGES,
    RegistryError,
    Severity,
    Signature,
    SignatureRegistry,
)

_PRESET_PREFIX = "preset:"
DEFAULT_PRESET = "default"


def load_registry(path: str | Path, _chain: tuple[str, ...] = ()) -> SignatureRegistry:
    """Load a signature registry from a YAML file path.

    Relative ``inherit`` paths are resolved against the file's directory.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RegistryError(f"Cannot read registry {path}: {e}") from e
    return _build_registry(
        _parse_yaml(text, str(path)),
        key=str(path.resolve()),
        base_dir=path.resolve().parent,
        _chain=_chain,
    )


def load_registry_from_string(text: str) -> SignatureRegistry:
    """Parse a YAML string into a registry, resolving inheritance."""
    return _build_registry(_parse_yaml(text, "<string>"), key="<string>", base_dir=None, _chain=())


def load_preset(name: str) -> SignatureRegistry:
    """Load one of the registries bundled with the package."""
    return _load_preset(name, ())


@functools.lru_cache(maxsize=1)
def default_registry() -> SignatureRegistry:
    """The bundled default catalog, loaded once per process."""
    return load_preset(DEFAULT_PRESET)


def _parse_yaml(text: str, source: str) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RegistryError(f"Malformed registry YAML in {source}: {e}") from e
    if not isinstance(data, dict):
        raise RegistryError("Registry YAML must be a mapping")
    return data


def _build_registry(
    data: dict,
    key: str,
    base_dir: Path | None,
    _chain: tuple[str, ...],
) -> SignatureRegistry:
    name = data.get("name", "unnamed")

    # Cycles are checked against ancestors only
    if key in _chain:
        raise RegistryError(
            f"Circular registry inheritance detected: {' -> '.join((*_chain, key))}"
        )
    chain = (*_chain, key)

    inherit_list = data.get("inherit", [])
    if isinstance(inherit_list, str):
        inherit_list = [inherit_list]

    # Inherited signatures keep their published position ahead of extensions
    inherited: list[Signature] = []
    origin: dict[str, str] = {}
    for ref in inherit_list:
        for sig in _load_ref(str(ref), base_dir, chain):
            if sig.id in origin:
                raise RegistryError(
                    f"Registry {name}: signature {sig.id} is inherited through both "
                    f"{origin[sig.id]} and {ref}; inherit the shared parent only once"
                )
            origin[sig.id] = str(ref)
            inherited.append(sig)

    raw = data.get("signatures", [])
    if not isinstance(raw, list):
        raise RegistryError(f"Registry {name}: 'signatures' must be a list")
    own = [_parse_signature(entry, index) for index, entry in enumerate(raw)]

    return SignatureRegistry(tuple(inherited) + tuple(own), name=name)


def _parse_signature(entry: object, index: int) -> Signature:
    if not isinstance(entry, dict):
        raise RegistryError(f"Signature #{index} must be a mapping")

    sig_id = str(entry.get("id") or "").strip()
    if not sig_id:
        raise RegistryError(f"Signature #{index} has no id")

    pattern = entry.get("pattern")
    if not isinstance(pattern, str) or not pattern:
        raise RegistryError(f"Signature {sig_id}: pattern must be a non-empty string")

    flags = 0 if entry.get("case_sensitive", False) else re.IGNORECASE
    try:
        regex = re.compile(pattern, flags)
    except re.error as e:
        raise RegistryError(f"Signature {sig_id}: invalid pattern: {e}") from e

    severity = Severity.parse(entry.get("severity"))
    if severity is None:
        raise RegistryError(
            f"Signature {sig_id}: unknown severity {entry.get('severity')!r}"
        )

    return Signature(
        id=sig_id,
        name=str(entry.get("name") or sig_id),
        regex=regex,
        severity=severity,
        languages=_parse_languages(entry.get("languages"), sig_id),
        description=str(entry.get("description", "")),
        remediation=str(entry.get("remediation", "")),
    )


def _parse_languages(raw: object, sig_id: str) -> frozenset[str]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw:
        raise RegistryError(f"Signature {sig_id}: languages must be a non-empty list or 'all'")
    languages = frozenset(str(lang).strip().lower() for lang in raw if str(lang).strip())
    if not languages:
        raise RegistryError(f"Signature {sig_id}: languages must be a non-empty list or 'all'")
    if languages & WILDCARD_LANGUAGES:
        return frozenset({"all"})
    return languages


def _load_ref(ref: str, base_dir: Path | None, _chain: tuple[str, ...]) -> SignatureRegistry:
    if ref.startswith(_PRESET_PREFIX):
        return _load_preset(ref[len(_PRESET_PREFIX) :], _chain)
    path = Path(ref).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return load_registry(path, _chain=_chain)


def _load_preset(name: str, _chain: tuple[str, ...]) -> SignatureRegistry:
    pkg = importlib.resources.files("hybridscan.registry.presets")
    resource = pkg.joinpath(f"{name}.yaml")
    if not resource.is_file():
        raise RegistryError(f"Unknown registry preset: {name}")
    text = resource.read_text(encoding="utf-8")
    return _build_registry(
        _parse_yaml(text, f"preset:{name}"),
        key=f"{_PRESET_PREFIX}{name}",
        base_dir=None,
        _chain=_chain,
    )
