# contractgen/contracts.py
"""Contract directory discovery and schema loading.

A contracts directory holds one subdirectory per contract, each with a
``schema`` folder produced by ``cosmwasm-schema``.  Two layouts exist in the
wild and both are supported:

- **IDL form**: one ``<contract>.json`` document carrying ``contract_name``
  and the ``instantiate`` / ``execute`` / ``query`` / ``migrate`` / ``sudo``
  / ``responses`` sections.
- **Split form**: ``instantiate_msg.json``, ``execute_msg.json``, ...,
  ``<query>_response.json`` (or the ``raw/instantiate.json``,
  ``raw/response_to_<query>.json`` variant).
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .errors import ContractsDirError, SchemaNotFoundError
from .naming import is_pascal_identifier, to_pascal_case

logger = logging.getLogger(__name__)

JSON_SCHEMA_DRAFT7 = "http://json-schema.org/draft-07/schema#"

# (IDL section, split file stem, raw file stem, definition name)
MESSAGE_SECTIONS: tuple[tuple[str, str, str, str], ...] = (
    ("instantiate", "instantiate_msg", "instantiate", "InstantiateMsg"),
    ("execute", "execute_msg", "execute", "ExecuteMsg"),
    ("query", "query_msg", "query", "QueryMsg"),
    ("migrate", "migrate_msg", "migrate", "MigrateMsg"),
    ("sudo", "sudo_msg", "sudo", "SudoMsg"),
)


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContractSource:
    """One contract directory."""

    name: str
    dir: Path

    @property
    def schema_dir(self) -> Path:
        return self.dir / "schema"


def discover_contracts(contracts_dir: str | Path) -> list[ContractSource]:
    """List every contract directory under *contracts_dir*, sorted by name.

    Plain files and hidden directories are skipped.
    """
    contracts_dir = Path(contracts_dir)
    if not contracts_dir.is_dir():
        raise ContractsDirError(f"Contracts directory not found: {contracts_dir}")

    contracts = [
        ContractSource(name=entry.name, dir=entry)
        for entry in sorted(contracts_dir.iterdir(), key=lambda p: p.name)
        if entry.is_dir() and not entry.name.startswith(".")
    ]
    logger.debug("Discovered %d contract(s) in %s", len(contracts), contracts_dir)
    return contracts


# ---------------------------------------------------------------------------
# Schema loading
# ---------------------------------------------------------------------------


@dataclass
class ContractSchema:
    """Message schemas for one contract, in whichever layout they came from."""

    name: str
    version: Optional[str] = None
    layout: str = "idl"
    source: Optional[Path] = None
    instantiate: Optional[dict[str, Any]] = None
    execute: Optional[dict[str, Any]] = None
    query: Optional[dict[str, Any]] = None
    migrate: Optional[dict[str, Any]] = None
    sudo: Optional[dict[str, Any]] = None
    responses: dict[str, dict[str, Any]] = field(default_factory=dict)
    definitions: dict[str, Any] = field(default_factory=dict)

    def message(self, section: str) -> Optional[dict[str, Any]]:
        return getattr(self, section)

    def response_name(self, query: str) -> str:
        """Definition name used for the response of *query*."""
        title = (self.responses.get(query) or {}).get("title")
        if isinstance(title, str) and is_pascal_identifier(title):
            return title
        return f"{to_pascal_case(query)}Response"


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SchemaNotFoundError(f"Schema file {path} is not valid JSON: {exc}") from exc


def _find_idl(source: ContractSource) -> Optional[Path]:
    preferred = source.schema_dir / f"{source.name}.json"
    candidates = [preferred] + sorted(
        p for p in source.schema_dir.glob("*.json") if p != preferred
    )
    for path in candidates:
        if not path.is_file():
            continue
        document = _read_json(path)
        if isinstance(document, dict) and "contract_name" in document:
            return path
    return None


def _load_idl(source: ContractSource, path: Path) -> ContractSchema:
    document = _read_json(path)
    schema = ContractSchema(
        name=document.get("contract_name") or source.name,
        version=document.get("contract_version"),
        layout="idl",
        source=path,
        responses=dict(document.get("responses") or {}),
        definitions=dict(document.get("definitions") or {}),
    )
    for section, *_ in MESSAGE_SECTIONS:
        setattr(schema, section, document.get(section))
    return schema


def _load_split(source: ContractSource) -> Optional[ContractSchema]:
    schema_dir = source.schema_dir
    raw_dir = schema_dir / "raw"
    schema = ContractSchema(name=source.name, layout="split", source=schema_dir)
    found = False

    for section, split_stem, raw_stem, _ in MESSAGE_SECTIONS:
        for path in (schema_dir / f"{split_stem}.json", raw_dir / f"{raw_stem}.json"):
            if path.is_file():
                setattr(schema, section, _read_json(path))
                found = True
                break

    for path in sorted(schema_dir.glob("*_response.json")):
        schema.responses[path.name[: -len("_response.json")]] = _read_json(path)
        found = True
    if raw_dir.is_dir():
        for path in sorted(raw_dir.glob("response_to_*.json")):
            query = path.stem[len("response_to_"):]
            schema.responses.setdefault(query, _read_json(path))
            found = True

    return schema if found else None


def load_contract_schema(source: ContractSource) -> ContractSchema:
    """Load the message schemas of *source*, IDL form first."""
    if not source.schema_dir.is_dir():
        raise SchemaNotFoundError(f"{source.name}: no schema folder at {source.schema_dir}")

    idl = _find_idl(source)
    if idl is not None:
        logger.debug("%s: using IDL schema %s", source.name, idl)
        return _load_idl(source, idl)

    split = _load_split(source)
    if split is not None:
        logger.debug("%s: using split schema files in %s", source.name, source.schema_dir)
        return split

    raise SchemaNotFoundError(f"{source.name}: no contract schema found in {source.schema_dir}")


# ---------------------------------------------------------------------------
# Types document
# ---------------------------------------------------------------------------


def _strip(schema: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    body = copy.deepcopy(schema)
    nested = body.pop("definitions", None) or {}
    body.pop("$schema", None)
    return body, nested


def build_types_schema(schema: ContractSchema) -> dict[str, Any]:
    """Flatten *schema* into one draft-07 document for the types generator.

    Every message, every response and every nested definition is hoisted into
    the root ``definitions`` so ``#/definitions/<Name>`` refs resolve.  When
    two bodies share a name the first one wins; shared (patched) definitions
    are added first.
    """
    definitions: dict[str, Any] = {}

    def add(name: str, body: Any, origin: str) -> None:
        if name in definitions:
            if definitions[name] != body:
                logger.warning(
                    "%s: definition %r from %s differs from an earlier one; keeping the first",
                    schema.name, name, origin,
                )
            return
        definitions[name] = body

    for name, body in schema.definitions.items():
        add(name, copy.deepcopy(body), "shared definitions")

    properties: dict[str, Any] = {}
    for section, _, _, def_name in MESSAGE_SECTIONS:
        message = schema.message(section)
        if not message:
            continue
        body, nested = _strip(message)
        for name, nested_body in nested.items():
            add(name, nested_body, def_name)
        add(def_name, body, section)
        properties[section] = {"$ref": f"#/definitions/{def_name}"}

    responses: dict[str, Any] = {}
    for query, response in schema.responses.items():
        body, nested = _strip(response)
        for name, nested_body in nested.items():
            add(name, nested_body, f"{query} response")
        def_name = schema.response_name(query)
        add(def_name, body, f"{query} response")
        responses[query] = {"$ref": f"#/definitions/{def_name}"}
    if responses:
        properties["responses"] = {
            "type": "object",
            "properties": responses,
            "additionalProperties": False,
        }

    return {
        "$schema": JSON_SCHEMA_DRAFT7,
        "title": f"{to_pascal_case(schema.name)}Schema",
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
        "definitions": definitions,
    }
