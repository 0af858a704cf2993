"""
contractgen - schema patching and Python bindings for CosmWasm contracts

Main Components:
    - contractgen.patch: merge missing type definitions into a contract schema
    - contractgen.contracts: contract directory discovery and schema loading
    - contractgen.codegen: types/client generation and the bundle module
    - contractgen.build: the patch-then-generate pipeline behind the CLI
"""

__version__ = "0.1.0"

from .build import BuildReport, run_build
from .codegen import BundleOptions, CodegenOptions, CodegenResult
from .contracts import ContractSource, discover_contracts, load_contract_schema
from .definitions import DEFINITIONS
from .patch import PatchResult, patch_schema_file, unresolved_refs

__all__ = [
    "BuildReport",
    "BundleOptions",
    "CodegenOptions",
    "CodegenResult",
    "ContractSource",
    "DEFINITIONS",
    "PatchResult",
    "discover_contracts",
    "load_contract_schema",
    "patch_schema_file",
    "run_build",
    "unresolved_refs",
]
