# contractgen/codegen.py
"""Generate Python bindings for a set of contract directories.

For every contract the output directory receives a package::

    <out>/<contract>/
        __init__.py   re-exports
        types.py      Pydantic v2 models (datamodel-code-generator)
        client.py     query / execute client classes

followed by a bundle module exposing all contracts under one scope::

    from <out> import contracts
    contracts.Transmuter.TransmuterClient(...)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from datamodel_code_generator import DataModelType, InputFileType, PythonVersion, generate
from pydantic import BaseModel, Field, field_validator

from .client_gen import client_class_names, generate_client_code
from .contracts import ContractSource, build_types_schema, load_contract_schema
from .errors import CodegenError
from .naming import to_pascal_identifier, to_snake_case

logger = logging.getLogger(__name__)

GENERATED_NOTICE = "Generated by contractgen. Do not edit by hand."


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class BundleOptions(BaseModel):
    """Where and under which name the bundle module exposes all contracts."""

    enabled: bool = True
    bundle_file: str = "__init__.py"
    scope: str = "contracts"

    @field_validator("bundle_file")
    @classmethod
    def _python_file(cls, value: str) -> str:
        if not value.endswith(".py") or "/" in value or "\\" in value:
            raise ValueError("bundle_file must be a bare '.py' file name")
        return value

    @field_validator("scope")
    @classmethod
    def _identifier(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError("scope must be a valid Python identifier")
        return value


class CodegenOptions(BaseModel):
    """Options for :func:`codegen`."""

    bundle: BundleOptions = Field(default_factory=BundleOptions)
    types: bool = True
    client: bool = True
    target_python_version: str = "3.10"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class GeneratedContract:
    """Files written for one contract."""

    name: str
    module: str
    package_dir: Path
    files: list[Path] = field(default_factory=list)
    type_names: list[str] = field(default_factory=list)


@dataclass
class CodegenResult:
    out_path: Path
    contracts: list[GeneratedContract] = field(default_factory=list)
    bundle_path: Optional[Path] = None


# ---------------------------------------------------------------------------
# Types module (delegated to datamodel-code-generator)
# ---------------------------------------------------------------------------


def generate_types(
    schema_doc: dict[str, Any],
    output: Path,
    *,
    target_python_version: str = "3.10",
) -> None:
    """Write Pydantic v2 models for every definition in *schema_doc*."""
    generate(
        json.dumps(schema_doc),
        input_file_type=InputFileType.JsonSchema,
        input_filename=f"{schema_doc.get('title', 'schema')}.json",
        output=output,
        output_model_type=DataModelType.PydanticV2BaseModel,
        target_python_version=PythonVersion(target_python_version),
        disable_timestamp=True,
        use_schema_description=True,
        use_field_description=True,
    )


# ---------------------------------------------------------------------------
# Package and bundle modules
# ---------------------------------------------------------------------------


def _package_init(name: str, exports: list[str], with_types: bool) -> str:
    lines = [f'"""Bindings for the {name} contract.', "", GENERATED_NOTICE, '"""', ""]
    if with_types:
        lines.append("from . import types")
    if exports:
        lines.append(f"from .client import {', '.join(exports)}")
    names = (["types"] if with_types else []) + exports
    lines += ["", f"__all__ = {names!r}", ""]
    return "\n".join(lines)


def bundle_attribute(name: str, module: str) -> str:
    """Attribute a contract is exposed under in the bundle (``Transmuter``)."""
    return to_pascal_identifier(name) or module


def render_bundle(contracts: list[GeneratedContract], scope: str) -> str:
    """Render the bundle module exposing *contracts* as ``<scope>.<Pascal>``."""
    lines = ['"""Contract bindings bundle.', "", GENERATED_NOTICE, '"""', ""]
    lines.append("from types import SimpleNamespace")
    if contracts:
        lines.append("")
        for item in contracts:
            lines.append(f"from . import {item.module} as _{item.module}")
    lines += ["", f"{scope} = SimpleNamespace("]
    for item in contracts:
        lines.append(f"    {bundle_attribute(item.name, item.module)}=_{item.module},")
    lines += [")", "", f"__all__ = [{scope!r}]", ""]
    return "\n".join(lines)


def _generate_contract(
    source: ContractSource,
    out_path: Path,
    options: CodegenOptions,
) -> GeneratedContract:
    schema = load_contract_schema(source)
    module = to_snake_case(source.name)
    package_dir = out_path / module
    package_dir.mkdir(parents=True, exist_ok=True)
    result = GeneratedContract(name=schema.name, module=module, package_dir=package_dir)

    type_names: Optional[set[str]] = None
    if options.types:
        types_doc = build_types_schema(schema)
        types_path = package_dir / "types.py"
        try:
            generate_types(
                types_doc,
                types_path,
                target_python_version=options.target_python_version,
            )
        except Exception as exc:  # the generator raises assorted error types
            raise CodegenError(source.name, f"types generation failed: {exc}") from exc
        type_names = set(types_doc["definitions"])
        result.type_names = sorted(type_names)
        result.files.append(types_path)

    exports: list[str] = []
    if options.client:
        client_path = package_dir / "client.py"
        client_path.write_text(generate_client_code(schema, type_names=type_names), encoding="utf-8")
        exports = list(client_class_names(schema))
        result.files.append(client_path)

    init_path = package_dir / "__init__.py"
    init_path.write_text(_package_init(schema.name, exports, options.types), encoding="utf-8")
    result.files.append(init_path)
    return result


def codegen(
    contracts: Iterable[ContractSource],
    out_path: str | Path,
    options: Optional[CodegenOptions] = None,
    on_contract: Optional[Callable[[GeneratedContract], None]] = None,
) -> CodegenResult:
    """Generate bindings for *contracts* into *out_path*.

    *on_contract* is called after each contract is written, in order.
    """
    options = options or CodegenOptions()
    out_path = Path(out_path)
    out_path.mkdir(parents=True, exist_ok=True)
    result = CodegenResult(out_path=out_path)

    modules: dict[str, str] = {}
    attributes: dict[str, str] = {}
    for source in contracts:
        module = to_snake_case(source.name)
        if module in modules:
            raise CodegenError(
                source.name,
                f"module name {module!r} already used by contract {modules[module]!r}",
            )
        modules[module] = source.name

        logger.info("Generating bindings for %s", source.name)
        generated = _generate_contract(source, out_path, options)
        attribute = bundle_attribute(generated.name, generated.module)
        if options.bundle.enabled and attribute in attributes:
            raise CodegenError(
                source.name,
                f"bundle name {attribute!r} already used by contract {attributes[attribute]!r}",
            )
        attributes[attribute] = source.name
        result.contracts.append(generated)
        if on_contract is not None:
            on_contract(generated)

    bundle = options.bundle
    if bundle.enabled:
        bundle_path = out_path / bundle.bundle_file
        bundle_path.write_text(render_bundle(result.contracts, bundle.scope), encoding="utf-8")
        result.bundle_path = bundle_path
        if bundle.bundle_file != "__init__.py" and not (out_path / "__init__.py").exists():
            (out_path / "__init__.py").write_text(f'"""{GENERATED_NOTICE}"""\n', encoding="utf-8")
        logger.info("Wrote bundle %s (scope %r)", bundle_path, bundle.scope)

    return result
