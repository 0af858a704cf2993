# contractgen/definitions.py
"""JSON Schema definitions that the contract schema generator leaves out.

``cosmwasm-schema`` emits ``$ref`` pointers to ``Coin``, ``Uint128`` and friends
without always emitting the referenced definitions.  The shapes below are the
cosmwasm-std ones, copied verbatim so generated bindings keep the upstream
descriptions.

Public API
----------
- :data:`DEFINITIONS`: the built-in definitions table.
- :func:`builtin_definitions`: deep copy of the table, safe to mutate.
- :func:`load_definitions_file`: read extra definitions from JSON or YAML.
- :func:`merge_definitions`: combine tables, later ones win.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import DefinitionsError

__all__ = [
    "DEFINITIONS",
    "builtin_definitions",
    "load_definitions_file",
    "merge_definitions",
]


def _coin_ref(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "allOf": [{"$ref": "#/definitions/Coin"}],
    }


DEFINITIONS: dict[str, dict[str, Any]] = {
    "TransmuterPool": {
        "type": "object",
        "required": ["in_coin", "out_coin_reserve"],
        "properties": {
            "in_coin": _coin_ref("incoming coins are stored here"),
            "out_coin_reserve": _coin_ref("reserve of coins for future transmutations"),
        },
        "additionalProperties": False,
    },
    "Coin": {
        "type": "object",
        "required": ["amount", "denom"],
        "properties": {
            "amount": {"$ref": "#/definitions/Uint128"},
            "denom": {"type": "string"},
        },
    },
    "Uint128": {
        "description": (
            "A thin wrapper around u128 that is using strings for JSON encoding/decoding, "
            "such that the full u128 range can be used for clients that convert JSON numbers "
            "to floats, like JavaScript and jq.\n\n# Examples\n\nUse `from` to create instances "
            "of this and `u128` to get the value out:\n\n``` # use cosmwasm_std::Uint128; "
            "let a = Uint128::from(123u128); assert_eq!(a.u128(), 123);\n\n"
            "let b = Uint128::from(42u64); assert_eq!(b.u128(), 42);\n\n"
            "let c = Uint128::from(70u32); assert_eq!(c.u128(), 70); ```"
        ),
        "type": "string",
    },
    "Decimal": {
        "description": (
            "A fixed-point decimal value with 18 fractional digits, i.e. "
            "Decimal(1_000_000_000_000_000_000) == 1.0\n\nThe greatest possible value that "
            "can be represented is 340282366920938463463.374607431768211455 "
            "(which is (2^128 - 1) / 10^18)"
        ),
        "type": "string",
    },
    "Addr": {
        "description": (
            "A human readable address.\n\nIn Cosmos, this is typically bech32 encoded. "
            "But for multi-chain smart contracts no assumptions should be made other than "
            "being UTF-8 encoded and of reasonable length.\n\nThis type represents a "
            "validated address. It can be created in the following ways "
            "1. Use `Addr::unchecked(input)` "
            "2. Use `let checked: Addr = deps.api.addr_validate(input)?` "
            "3. Use `let checked: Addr = deps.api.addr_humanize(canonical_addr)?` "
            "4. Deserialize from JSON. This must only be done from JSON that was validated "
            "before such as a contract's state. `Addr` must not be used in messages sent by "
            "the user because this would result in unvalidated instances.\n\n"
            "This type is immutable. If you really need to mutate it (Really? Are you sure?), "
            "create a mutable copy using `let mut mutable = Addr::to_string()` and operate on "
            "that `String` instance."
        ),
        "type": "string",
    },
}


def builtin_definitions() -> dict[str, dict[str, Any]]:
    """Return a deep copy of :data:`DEFINITIONS`."""
    return copy.deepcopy(DEFINITIONS)


def load_definitions_file(path: str | Path) -> dict[str, dict[str, Any]]:
    """Load a definitions table from a ``.json``, ``.yaml`` or ``.yml`` file.

    The file may hold the table directly or wrap it in a top-level
    ``definitions`` key, so a whole JSON Schema document works too.
    """
    path = Path(path)
    if not path.is_file():
        raise DefinitionsError(f"Definitions file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DefinitionsError(f"Cannot parse {path}: {exc}") from exc

    if isinstance(data, Mapping) and "definitions" in data:
        data = data["definitions"]
    if not isinstance(data, Mapping):
        raise DefinitionsError(f"{path} must contain a mapping of definitions")

    for name, body in data.items():
        if not isinstance(body, Mapping):
            raise DefinitionsError(f"Definition {name!r} in {path} is not an object")
    return {str(k): dict(v) for k, v in data.items()}


def merge_definitions(
    base: Mapping[str, Any],
    *extra: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Merge definition tables left to right; later tables win per name."""
    merged = copy.deepcopy(dict(base))
    for table in extra:
        if table:
            merged.update(copy.deepcopy(dict(table)))
    return merged
