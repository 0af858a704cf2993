# contractgen/build.py
"""End-to-end build: patch the contract schema, then regenerate bindings.

This is what ``contractgen generate`` and ``scripts/codegen.py`` run:

1. merge the definitions patch into the configured schema file;
2. enumerate the contract directories;
3. wipe the output directory;
4. generate bindings plus the bundle module.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .codegen import BundleOptions, CodegenOptions, CodegenResult, GeneratedContract, codegen
from .config import ContractgenConfig
from .contracts import ContractSource, discover_contracts
from .definitions import builtin_definitions, load_definitions_file, merge_definitions
from .errors import BuildError
from .patch import PatchResult, patch_schema_file

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    contracts: list[ContractSource]
    codegen: CodegenResult
    patch: Optional[PatchResult] = None


def resolve_definitions(
    config: ContractgenConfig,
    extra: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Built-in definitions, then the configured file, then *extra*."""
    from_file = load_definitions_file(config.definitions_file) if config.definitions_file else None
    return merge_definitions(builtin_definitions(), from_file, extra)


def check_output_path(out_path: str | Path, contracts_dir: str | Path) -> Path:
    """Resolve *out_path* and refuse paths that must never be wiped.

    Refuses the filesystem root, a file, and any directory that is, or
    contains, *contracts_dir*.
    """
    out = Path(out_path).resolve()
    contracts = Path(contracts_dir).resolve()

    if out == Path(out.anchor):
        raise BuildError(f"Refusing to remove filesystem root {out}")
    if contracts == out or contracts.is_relative_to(out):
        raise BuildError(f"Refusing to remove {out}: it contains the contracts directory")
    if out.is_file():
        raise BuildError(f"Output path {out} is a file")
    return out


def prepare_output(out_path: str | Path, contracts_dir: str | Path) -> Path:
    """Remove *out_path* recursively so generation starts clean.

    A missing directory is fine.
    """
    out = check_output_path(out_path, contracts_dir)
    if out.exists():
        logger.info("Removing previous output %s", out)
        shutil.rmtree(out)
    return out


def run_build(
    config: ContractgenConfig,
    *,
    extra_definitions: Optional[Mapping[str, Any]] = None,
    patch: bool = True,
    on_contract: Optional[Callable[[GeneratedContract], None]] = None,
) -> BuildReport:
    """Patch the configured schema, then regenerate all bindings.

    Bundle options and the output path are validated before anything is
    written.
    """
    options = CodegenOptions(
        bundle=BundleOptions(bundle_file=config.bundle_file, scope=config.bundle_scope),
        types=config.generate_types,
        client=config.generate_client,
        target_python_version=config.target_python_version,
    )
    check_output_path(config.out_dir, config.contracts_dir)

    patch_result: Optional[PatchResult] = None
    target = config.patch_target
    if patch and target is not None:
        definitions = resolve_definitions(config, extra_definitions)
        patch_result = patch_schema_file(target, definitions, overwrite=config.patch_overwrite)
    elif patch:
        logger.info("No patch contract configured; skipping definitions patch")

    contracts = discover_contracts(config.contracts_dir)
    out_path = prepare_output(config.out_dir, config.contracts_dir)
    result = codegen(contracts, out_path, options, on_contract=on_contract)
    logger.info("Python code is generated successfully (%d contract(s))", len(result.contracts))
    return BuildReport(contracts=contracts, codegen=result, patch=patch_result)
