# contractgen/patch.py
"""Apply a definitions patch to a generated contract JSON Schema.

The schema generator writes ``$ref: "#/definitions/Coin"`` style pointers
into some schemas without the matching ``definitions`` entries.  This module
fills them in, and offers the helpers used to find refs that still dangle.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from .errors import SchemaPatchError

logger = logging.getLogger(__name__)

LOCAL_DEFINITION_PREFIX = "#/definitions/"


@dataclass
class PatchResult:
    """Outcome of patching one schema file."""

    path: Path
    added: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.replaced)


def _walk(node: Any) -> Iterator[Mapping[str, Any]]:
    if isinstance(node, Mapping):
        yield node
        for value in node.values():
            yield from _walk(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk(item)


def collect_refs(document: Any) -> list[str]:
    """Return every ``$ref`` string in *document*, first occurrence order."""
    seen: dict[str, None] = {}
    for node in _walk(document):
        ref = node.get("$ref")
        if isinstance(ref, str):
            seen.setdefault(ref, None)
    return list(seen)


def _defined_names(document: Any) -> set[str]:
    names: set[str] = set()
    for node in _walk(document):
        defs = node.get("definitions")
        if isinstance(defs, Mapping):
            names.update(defs.keys())
    return names


def unresolved_refs(document: Any) -> list[str]:
    """Return local ``#/definitions/<Name>`` refs that point at nothing.

    Contract IDL files nest a ``definitions`` block inside each message
    schema, so a name defined in any of them counts as resolved.
    Refs to other documents are ignored.
    """
    defined = _defined_names(document)
    missing = []
    for ref in collect_refs(document):
        if not ref.startswith(LOCAL_DEFINITION_PREFIX):
            continue
        name = ref[len(LOCAL_DEFINITION_PREFIX):].split("/", 1)[0]
        if name not in defined:
            missing.append(ref)
    return missing


def check_schema(document: Mapping[str, Any]) -> None:
    """Raise :class:`SchemaPatchError` unless *document* is a valid draft-7 schema."""
    try:
        Draft7Validator.check_schema(document)
    except SchemaError as exc:
        location = "/".join(str(p) for p in exc.path) or "<root>"
        raise SchemaPatchError(f"Invalid JSON Schema at {location}: {exc.message}") from exc


def read_schema(path: str | Path) -> dict[str, Any]:
    """Read a schema file, raising :class:`SchemaPatchError` on any problem."""
    path = Path(path)
    if not path.is_file():
        raise SchemaPatchError(f"Schema file not found: {path}")
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SchemaPatchError(f"Schema file {path} is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise SchemaPatchError(f"Schema file {path} must hold a JSON object")
    return document


def apply_definitions(
    document: dict[str, Any],
    definitions: Mapping[str, Any],
    *,
    overwrite: bool = True,
) -> tuple[list[str], list[str], list[str]]:
    """Merge *definitions* into ``document["definitions"]`` in place.

    Returns the ``(added, replaced, skipped)`` definition names.
    """
    existing = document.setdefault("definitions", {})
    if not isinstance(existing, dict):
        raise SchemaPatchError("'definitions' must be a JSON object")

    added: list[str] = []
    replaced: list[str] = []
    skipped: list[str] = []
    for name, body in definitions.items():
        if name not in existing:
            added.append(name)
        elif not overwrite:
            skipped.append(name)
            continue
        elif existing[name] != body:
            replaced.append(name)
        existing[name] = body
    return added, replaced, skipped


def patch_schema_file(
    path: str | Path,
    definitions: Mapping[str, Any],
    *,
    overwrite: bool = True,
) -> PatchResult:
    """Merge *definitions* into the schema at *path* and write it back.

    With ``overwrite=False`` only names missing from the schema are filled in.
    Definitions the patch does not name are always preserved.
    """
    path = Path(path)
    document = read_schema(path)
    added, replaced, skipped = apply_definitions(document, definitions, overwrite=overwrite)

    path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")

    result = PatchResult(
        path=path,
        added=added,
        replaced=replaced,
        skipped=skipped,
        unresolved=unresolved_refs(document),
    )
    logger.info(
        "Patched %s: %d added, %d replaced, %d kept",
        path, len(added), len(replaced), len(skipped),
    )
    for ref in result.unresolved:
        logger.warning("Unresolved $ref after patch in %s: %s", path, ref)
    return result
