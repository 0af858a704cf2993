# contractgen/messages.py
"""Enumerate the variants of a CosmWasm enum message schema."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .patch import LOCAL_DEFINITION_PREFIX


@dataclass
class MessageVariant:
    """One variant of an ``ExecuteMsg`` / ``QueryMsg`` style enum.

    ``unit`` variants serialize as a bare string (``"pause"``); the others
    as a single-key object (``{"swap": {...}}``).
    """

    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    description: Optional[str] = None
    unit: bool = False


def _resolve(node: Mapping[str, Any], definitions: Mapping[str, Any]) -> Mapping[str, Any]:
    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith(LOCAL_DEFINITION_PREFIX):
        target = definitions.get(ref[len(LOCAL_DEFINITION_PREFIX):])
        if isinstance(target, Mapping):
            return target
    return node


def _unit_variants(option: Mapping[str, Any]) -> list[MessageVariant]:
    return [
        MessageVariant(name=str(value), description=option.get("description"), unit=True)
        for value in option.get("enum", [])
    ]


def message_variants(
    schema: Optional[Mapping[str, Any]],
    definitions: Optional[Mapping[str, Any]] = None,
) -> list[MessageVariant]:
    """Return the variants of *schema* in declaration order.

    *definitions* defaults to the schema's own ``definitions`` block and is
    used to resolve variants whose body is a ``$ref``.  A schema that is not
    an enum (a plain struct such as most ``InstantiateMsg``) yields ``[]``.
    """
    if not schema:
        return []
    if definitions is None:
        definitions = schema.get("definitions") or {}

    if "enum" in schema:
        return _unit_variants(schema)

    options = schema.get("oneOf") or schema.get("anyOf") or []
    variants: list[MessageVariant] = []
    for option in options:
        option = _resolve(option, definitions)
        if "enum" in option:
            variants.extend(_unit_variants(option))
            continue

        props = option.get("properties") or {}
        if len(props) != 1:
            continue
        name, body = next(iter(props.items()))
        body = _resolve(body, definitions)
        variants.append(
            MessageVariant(
                name=name,
                properties=dict(body.get("properties") or {}),
                required=list(body.get("required") or []),
                description=option.get("description") or body.get("description"),
            )
        )
    return variants
