# tests/conftest.py
"""Shared fixtures: an isolated config home and sample contract trees."""

import copy
import importlib
import json
import logging
import sys
from pathlib import Path

import pytest

DRAFT7 = "http://json-schema.org/draft-07/schema#"


def _wrap(variant: str, body: dict, description: str | None = None) -> dict:
    option = {
        "type": "object",
        "required": [variant],
        "properties": {variant: body},
        "additionalProperties": False,
    }
    if description:
        option["description"] = description
    return option


TRANSMUTER_IDL = {
    "contract_name": "transmuter",
    "contract_version": "0.1.0",
    "idl_version": "1.0.0",
    "instantiate": {
        "$schema": DRAFT7,
        "title": "InstantiateMsg",
        "type": "object",
        "required": ["in_denom", "out_denom"],
        "properties": {
            "in_denom": {"type": "string"},
            "out_denom": {"type": "string"},
        },
        "additionalProperties": False,
    },
    "execute": {
        "$schema": DRAFT7,
        "title": "ExecuteMsg",
        "oneOf": [
            _wrap(
                "supply",
                {"type": "object", "additionalProperties": False},
                "Supply the pool with out_coin.",
            ),
            _wrap("transmute", {"type": "object", "additionalProperties": False}),
            _wrap(
                "withdraw",
                {
                    "type": "object",
                    "required": ["coins"],
                    "properties": {
                        "coins": {"type": "array", "items": {"$ref": "#/definitions/Coin"}},
                    },
                    "additionalProperties": False,
                },
            ),
        ],
    },
    "query": {
        "$schema": DRAFT7,
        "title": "QueryMsg",
        "oneOf": [
            _wrap("pool", {"type": "object", "additionalProperties": False}),
            _wrap(
                "shares",
                {
                    "type": "object",
                    "required": ["address"],
                    "properties": {"address": {"type": "string"}},
                    "additionalProperties": False,
                },
            ),
        ],
    },
    "migrate": None,
    "sudo": None,
    "responses": {
        "pool": {
            "$schema": DRAFT7,
            "title": "PoolResponse",
            "type": "object",
            "required": ["pool"],
            "properties": {"pool": {"$ref": "#/definitions/TransmuterPool"}},
            "additionalProperties": False,
        },
        "shares": {
            "$schema": DRAFT7,
            "title": "SharesResponse",
            "type": "object",
            "required": ["shares"],
            "properties": {"shares": {"$ref": "#/definitions/Uint128"}},
            "additionalProperties": False,
        },
    },
}

COUNTER_SPLIT = {
    "instantiate_msg.json": {
        "$schema": DRAFT7,
        "title": "InstantiateMsg",
        "type": "object",
        "required": ["count"],
        "properties": {"count": {"type": "integer", "format": "int32"}},
    },
    "execute_msg.json": {
        "$schema": DRAFT7,
        "title": "ExecuteMsg",
        "oneOf": [
            {"type": "string", "enum": ["increment"]},
            _wrap(
                "reset",
                {
                    "type": "object",
                    "required": ["count"],
                    "properties": {
                        "count": {"type": "integer", "format": "int32"},
                        "from": {"type": ["string", "null"]},
                    },
                },
                "Reset the counter to count.",
            ),
        ],
    },
    "query_msg.json": {
        "$schema": DRAFT7,
        "title": "QueryMsg",
        "oneOf": [_wrap("get_count", {"type": "object"})],
    },
    "get_count_response.json": {
        "$schema": DRAFT7,
        "title": "GetCountResponse",
        "type": "object",
        "required": ["count"],
        "properties": {"count": {"type": "integer", "format": "int32"}},
    },
}


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config and session logs out of the real home directory."""
    from contractgen.config import get_config

    home = tmp_path / "cg-home"
    monkeypatch.setenv("CONTRACTGEN_HOME_DIR", str(home))
    monkeypatch.setenv("CONTRACTGEN_LOG_DIR", str(home / "logs"))
    get_config.cache_clear()
    yield home
    get_config.cache_clear()

    root = logging.getLogger("contractgen")
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.filters.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)


@pytest.fixture
def transmuter_idl():
    return copy.deepcopy(TRANSMUTER_IDL)


@pytest.fixture
def counter_split():
    return copy.deepcopy(COUNTER_SPLIT)


@pytest.fixture
def contracts_dir(tmp_path):
    """A contracts tree with an IDL contract, a split contract and a stray file."""
    root = tmp_path / "repo" / "contracts"
    _write_json(root / "transmuter" / "schema" / "transmuter.json", TRANSMUTER_IDL)
    for name, data in COUNTER_SPLIT.items():
        _write_json(root / "counter" / "schema" / name, data)
    (root / "README.md").write_text("not a contract", encoding="utf-8")
    return root


@pytest.fixture
def transmuter_schema_path(contracts_dir):
    return contracts_dir / "transmuter" / "schema" / "transmuter.json"


@pytest.fixture
def import_generated(monkeypatch):
    """Import a generated output package by directory, cleaning up afterwards."""
    imported: list[str] = []

    def _import(out_dir: Path):
        monkeypatch.syspath_prepend(str(out_dir.parent))
        importlib.invalidate_caches()
        imported.append(out_dir.name)
        return importlib.import_module(out_dir.name)

    yield _import

    for name in imported:
        for key in [k for k in sys.modules if k == name or k.startswith(f"{name}.")]:
            del sys.modules[key]


class RecordingClient:
    """Stand-in chain client that records calls made by generated bindings."""

    def __init__(self, query_result=None):
        self.query_result = query_result
        self.queries = []
        self.executions = []

    def query_contract_smart(self, address, query_msg):
        self.queries.append((address, query_msg))
        return self.query_result

    def execute(self, sender_address, contract_address, msg, fee, memo=None, funds=None):
        self.executions.append(
            {
                "sender": sender_address,
                "contract": contract_address,
                "msg": msg,
                "fee": fee,
                "memo": memo,
                "funds": funds,
            }
        )
        return {"code": 0}


@pytest.fixture
def recording_client():
    return RecordingClient
