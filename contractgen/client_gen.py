# contractgen/client_gen.py
"""Render the ``client.py`` module for one contract.

The module holds a ``<Contract>QueryClient`` with one method per ``QueryMsg``
variant and a ``<Contract>Client`` that adds one method per ``ExecuteMsg``
variant.  Both delegate to any object implementing ``query_contract_smart``
and ``execute``, so the bindings stay independent of the chain client used.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .contracts import ContractSchema
from .messages import MessageVariant, message_variants
from .naming import is_pascal_identifier, safe_identifier, to_pascal_identifier
from .patch import LOCAL_DEFINITION_PREFIX

_JSON_TYPES = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "object": "dict[str, Any]",
    "null": "None",
}

_CLIENT_ATTRIBUTES = frozenset({"client", "contract_address", "sender"})
_EXECUTE_EXTRAS = frozenset({"fee", "memo", "funds"})
# Names the generated method bodies refer to.
_BODY_NAMES = frozenset({"self", "_msg", "_to_json", "_types"})

_HEADER = '''\
"""Client bindings for the {name} contract{version}.

Generated by contractgen. Do not edit by hand.
"""

from __future__ import annotations

from typing import Any, Protocol
'''

_RUNTIME = '''

class CosmWasmClient(Protocol):
    def query_contract_smart(self, address: str, query_msg: Any) -> Any: ...


class SigningCosmWasmClient(CosmWasmClient, Protocol):
    def execute(
        self,
        sender_address: str,
        contract_address: str,
        msg: Any,
        fee: Any,
        memo: str | None = None,
        funds: list[dict[str, str]] | None = None,
    ) -> Any: ...


def _to_json(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    return value


def _msg(variant: str, args: dict[str, Any]) -> dict[str, Any]:
    return {variant: {k: _to_json(v) for k, v in args.items() if v is not None}}
'''


def _docstring(text: str | None, indent: str) -> list[str]:
    if not text:
        return []
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"').strip()
    if text.startswith('"'):
        text = f" {text}"
    if text.endswith('"'):
        text = f"{text} "
    lines = text.splitlines()
    if len(lines) == 1:
        return [f'{indent}"""{lines[0]}"""']
    out = [f'{indent}"""{lines[0]}']
    out.extend(f"{indent}{line}".rstrip() for line in lines[1:])
    out.append(f'{indent}"""')
    return out


class _TypeMapper:
    """Map JSON Schema property bodies to annotation strings."""

    def __init__(self, type_names: set[str]) -> None:
        self.type_names = type_names

    def _ref(self, ref: str) -> str:
        if ref.startswith(LOCAL_DEFINITION_PREFIX):
            name = ref[len(LOCAL_DEFINITION_PREFIX):]
            if name in self.type_names and is_pascal_identifier(name):
                return f"_types.{name}"
        return "Any"

    def annotation(self, schema: Mapping[str, Any]) -> str:
        if "$ref" in schema:
            return self._ref(schema["$ref"])

        for key in ("allOf", "anyOf", "oneOf"):
            options = schema.get(key)
            if not options:
                continue
            hints = []
            for option in options:
                hint = self.annotation(option)
                if hint not in hints:
                    hints.append(hint)
            if key == "allOf" and len(hints) != 1:
                return "Any"
            if "Any" in hints:
                return "Any"
            return " | ".join(hints)

        json_type = schema.get("type")
        if isinstance(json_type, list):
            hints = [self.annotation({**schema, "type": t}) for t in json_type]
            return "Any" if "Any" in hints else " | ".join(dict.fromkeys(hints))
        if json_type == "array":
            items = schema.get("items")
            if isinstance(items, Mapping):
                return f"list[{self.annotation(items)}]"
            return "list[Any]"
        return _JSON_TYPES.get(json_type, "Any")


def _arguments(
    variant: MessageVariant,
    mapper: _TypeMapper,
    reserved: frozenset[str],
) -> list[tuple[str, str, str, bool]]:
    """Return ``(json key, python name, annotation, required)`` per property.

    Python names are unique within the method: ``from`` and ``from_`` become
    ``from_`` and ``from__``.
    """
    taken = set(reserved) | _BODY_NAMES
    args = []
    for key, body in variant.properties.items():
        required = key in variant.required
        hint = mapper.annotation(body) if isinstance(body, Mapping) else "Any"
        if not required and "None" not in hint.split(" | "):
            hint = f"{hint} | None"
        name = safe_identifier(key, taken)
        taken.add(name)
        args.append((key, name, hint, required))
    return args


def _message_expr(variant: MessageVariant, args: list[tuple[str, str, str, bool]]) -> str:
    if variant.unit:
        return repr(variant.name)
    mapping = ", ".join(f"{key!r}: {py}" for key, py, _, _ in args)
    return f"_msg({variant.name!r}, {{{mapping}}})"


def _signature(
    method: str,
    args: list[tuple[str, str, str, bool]],
    extras: list[str],
    returns: str,
) -> list[str]:
    params = [f"{py}: {hint}" if req else f"{py}: {hint} = None" for _, py, hint, req in args]
    params += extras
    if not params:
        return [f"    def {method}(self) -> {returns}:"]
    lines = [f"    def {method}(", "        self,", "        *,"]
    lines.extend(f"        {p}," for p in params)
    lines.append(f"    ) -> {returns}:")
    return lines


def _query_method(
    variant: MessageVariant,
    schema: ContractSchema,
    mapper: _TypeMapper,
    with_types: bool,
) -> list[str]:
    method = safe_identifier(variant.name, _CLIENT_ATTRIBUTES)
    args = _arguments(variant, mapper, _CLIENT_ATTRIBUTES)

    response = schema.responses.get(variant.name) or {}
    response_name = schema.response_name(variant.name)
    typed = (
        with_types
        and response.get("type") == "object"
        and response_name in mapper.type_names
        and is_pascal_identifier(response_name)
    )
    returns = f"_types.{response_name}" if typed else "Any"

    lines = _signature(method, args, [], returns)
    lines.extend(_docstring(variant.description, "        "))
    lines.append(
        "        result = self.client.query_contract_smart("
        f"self.contract_address, {_message_expr(variant, args)})"
    )
    if typed:
        lines.append(f"        return _types.{response_name}.model_validate(result)")
    else:
        lines.append("        return result")
    return lines


def _execute_method(
    variant: MessageVariant,
    mapper: _TypeMapper,
    taken: frozenset[str],
) -> list[str]:
    method = safe_identifier(variant.name, taken)
    args = _arguments(variant, mapper, _CLIENT_ATTRIBUTES | _EXECUTE_EXTRAS)
    extras = [
        'fee: Any = "auto"',
        "memo: str | None = None",
        "funds: list[dict[str, str]] | None = None",
    ]
    lines = _signature(method, args, extras, "Any")
    lines.extend(_docstring(variant.description, "        "))
    lines.extend(
        [
            "        return self.client.execute(",
            "            self.sender,",
            "            self.contract_address,",
            f"            {_message_expr(variant, args)},",
            "            fee,",
            "            memo,",
            "            funds,",
            "        )",
        ]
    )
    return lines


def client_class_names(schema: ContractSchema) -> tuple[str, str]:
    """Return ``(query client, signing client)`` class names for *schema*."""
    base = to_pascal_identifier(schema.name) or "Contract"
    return f"{base}QueryClient", f"{base}Client"


def generate_client_code(
    schema: ContractSchema,
    *,
    type_names: set[str] | None = None,
) -> str:
    """Render the ``client.py`` source for *schema*.

    *type_names* lists the models available in the sibling ``types`` module;
    pass ``None`` when no types module is generated and every argument and
    result will be annotated ``Any``.
    """
    with_types = type_names is not None
    mapper = _TypeMapper(type_names or set())
    query_cls, exec_cls = client_class_names(schema)

    version = f" (v{schema.version})" if schema.version else ""
    lines = [_HEADER.format(name=schema.name, version=version).rstrip("\n")]
    if with_types:
        lines += ["", "from . import types as _types"]
    lines.append(_RUNTIME.rstrip("\n"))

    query_variants = message_variants(schema.query)
    lines += [
        "",
        "",
        f"class {query_cls}:",
        f'    """Read-only queries against a deployed {schema.name} contract."""',
        "",
        "    def __init__(self, client: CosmWasmClient, contract_address: str) -> None:",
        "        self.client = client",
        "        self.contract_address = contract_address",
    ]
    query_methods: set[str] = set()
    for variant in query_variants:
        lines.append("")
        lines.extend(_query_method(variant, schema, mapper, with_types))
        query_methods.add(safe_identifier(variant.name, _CLIENT_ATTRIBUTES))

    taken = set(_CLIENT_ATTRIBUTES | query_methods)
    lines += [
        "",
        "",
        f"class {exec_cls}({query_cls}):",
        f'    """Queries plus signed executions against a {schema.name} contract."""',
        "",
        "    client: SigningCosmWasmClient",
        "",
        "    def __init__(",
        "        self,",
        "        client: SigningCosmWasmClient,",
        "        sender: str,",
        "        contract_address: str,",
        "    ) -> None:",
        "        super().__init__(client, contract_address)",
        "        self.sender = sender",
    ]
    for variant in message_variants(schema.execute):
        lines.append("")
        lines.extend(_execute_method(variant, mapper, frozenset(taken)))
        taken.add(safe_identifier(variant.name, taken))

    lines += [
        "",
        "",
        f"__all__ = [{query_cls!r}, {exec_cls!r}, 'CosmWasmClient', 'SigningCosmWasmClient']",
        "",
    ]
    return "\n".join(lines)
