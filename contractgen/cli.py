# contractgen/cli.py
"""
contractgen CLI -- Click commands with a rich terminal UI.

Provides the ``contractgen`` console entry-point declared in pyproject.toml as
``contractgen.cli:cli``.  Commands call into the pipeline modules:

- generate:  patch the schema, then regenerate all bindings (build.run_build)
- patch:     only merge the definitions patch into a schema file
- check:     report $refs that do not resolve in a schema file
- list:      show the contract directories and their schema layout
- config:    ContractgenConfig display
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError
from rich.console import Console

from . import __version__
from . import cli_theme as theme
from .config import ContractgenConfig, get_config
from .errors import ContractgenError

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _print_version(
    ctx: click.Context,
    _param: click.Parameter,
    value: bool,
) -> None:
    if not value or ctx.resilient_parsing:
        return
    theme.print_version(__version__, console)
    ctx.exit()


def _start_logging(verbose: bool) -> Path:
    from .utils.logging import setup_logging

    env_dir = os.getenv("CONTRACTGEN_LOG_DIR")
    log_dir = Path(env_dir) if env_dir else get_config().log_dir
    return setup_logging(
        level="DEBUG" if verbose else None,
        log_dir=log_dir,
        console_output=verbose,
    )


def _effective_config(**overrides: Any) -> ContractgenConfig:
    """Apply CLI flags (ignoring unset ones) on top of the loaded config."""
    update = {k: v for k, v in overrides.items() if v is not None}
    return get_config().model_copy(update=update)


def _load_extra_definitions(path: Optional[Path]) -> Optional[dict[str, Any]]:
    if path is None:
        return None
    from .definitions import load_definitions_file

    try:
        return load_definitions_file(path)
    except ContractgenError as exc:
        raise click.ClickException(str(exc))


# ---------------------------------------------------------------------------
# Main CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at DEBUG level and echo logs to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """contractgen -- patch contract JSON Schemas and generate Python bindings."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return
    ctx.ensure_object(dict)
    ctx.obj["log_file"] = _start_logging(verbose)


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--contracts-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory holding one subdirectory per contract.")
@click.option("--out-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Output directory (wiped before generation).")
@click.option("--definitions", "definitions_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Extra definitions (JSON or YAML) merged over the built-in patch.")
@click.option("--no-patch", is_flag=True, default=False, help="Skip the definitions patch step.")
@click.option("--no-types", is_flag=True, default=False, help="Do not generate Pydantic types modules.")
@click.option("--no-client", is_flag=True, default=False, help="Do not generate client modules.")
@click.option("--scope", type=str, default=None, help="Name the bundle exposes all contracts under.")
@click.pass_context
def generate(
    ctx: click.Context,
    contracts_dir: Optional[Path],
    out_dir: Optional[Path],
    definitions_file: Optional[Path],
    no_patch: bool,
    no_types: bool,
    no_client: bool,
    scope: Optional[str],
) -> None:
    """Patch the contract schema and regenerate Python bindings.

    \b
    Examples:
      contractgen generate
      contractgen generate --contracts-dir ../contracts --out-dir sdk/contracts
      contractgen generate --no-patch --no-types
    """
    from .build import run_build
    from .contracts import discover_contracts
    from .utils.logging import get_logger, log_codegen_complete, log_codegen_start

    logger = get_logger(__name__)
    cfg = _effective_config(
        contracts_dir=contracts_dir,
        out_dir=out_dir,
        bundle_scope=scope,
        generate_types=False if no_types else None,
        generate_client=False if no_client else None,
    )
    extra = _load_extra_definitions(definitions_file)

    started = time.monotonic()
    try:
        total = len(discover_contracts(cfg.contracts_dir))
        log_codegen_start(logger, cfg.contracts_dir, cfg.out_dir, total)
        with theme.progress(total, "contracts", console) as advance:
            report = run_build(
                cfg,
                extra_definitions=extra,
                patch=not no_patch,
                on_contract=lambda _generated: advance(),
            )
    except (ContractgenError, ValidationError) as exc:
        logger.error(f"Build failed: {exc}")
        log_codegen_complete(logger, cfg.out_dir, success=False)
        raise click.ClickException(str(exc))

    log_codegen_complete(
        logger,
        cfg.out_dir,
        success=True,
        contracts_generated=len(report.codegen.contracts),
        total_duration=time.monotonic() - started,
    )

    if report.patch is not None:
        theme.section("Definitions patch", console, "01")
        _print_patch(report.patch)

    theme.section("Bindings", console, "02")
    t = theme.make_table()
    t.add_column("Contract", style=f"bold {theme.TEAL}", no_wrap=True)
    t.add_column("Module")
    t.add_column("Files", style=theme.MUTED)
    for item in report.codegen.contracts:
        t.add_row(item.name, item.module, ", ".join(p.name for p in item.files))
    console.print(t)
    if report.codegen.bundle_path is not None:
        console.print(theme.info(f"Bundle: {report.codegen.bundle_path} (scope {cfg.bundle_scope!r})"))
    console.print(theme.ok("✨ Python code is generated successfully!"))
    console.print(theme.info(f"Log: {ctx.obj['log_file']}"))


def _print_patch(result: Any) -> None:
    console.print(theme.info(f"Schema: {result.path}"))
    if result.added:
        console.print(theme.ok(f"Added: {', '.join(result.added)}"))
    if result.replaced:
        console.print(theme.ok(f"Replaced: {', '.join(result.replaced)}"))
    if result.skipped:
        console.print(theme.info(f"Kept existing: {', '.join(result.skipped)}"))
    if not result.changed:
        console.print(theme.info("Schema already up to date"))
    for ref in result.unresolved:
        console.print(theme.warn(f"Unresolved $ref: {ref}"))


# ---------------------------------------------------------------------------
# patch
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--schema", "schema_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Schema file to patch (default: the configured patch target).")
@click.option("--definitions", "definitions_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Extra definitions (JSON or YAML) merged over the built-in patch.")
@click.option("--fill-missing", is_flag=True, default=False, help="Only add definitions the schema does not have yet.")
def patch(schema_path: Optional[Path], definitions_file: Optional[Path], fill_missing: bool) -> None:
    """Merge the built-in definitions into a contract schema file.

    \b
    Examples:
      contractgen patch
      contractgen patch --schema contracts/transmuter/schema/transmuter.json
    """
    from .build import resolve_definitions
    from .patch import patch_schema_file

    cfg = get_config()
    target = schema_path or cfg.patch_target
    if target is None:
        raise click.ClickException("No schema given and no patch contract configured.")

    extra = _load_extra_definitions(definitions_file)
    try:
        definitions = resolve_definitions(cfg, extra)
        overwrite = cfg.patch_overwrite and not fill_missing
        result = patch_schema_file(target, definitions, overwrite=overwrite)
    except ContractgenError as exc:
        raise click.ClickException(str(exc))

    _print_patch(result)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, default=False, help="Also validate the file against the draft-07 meta-schema.")
@click.pass_context
def check(ctx: click.Context, schema_path: Path, strict: bool) -> None:
    """Report $refs in SCHEMA_PATH that point at missing definitions.

    Exits with status 1 when any are found.

    \b
    Examples:
      contractgen check contracts/transmuter/schema/transmuter.json
    """
    from .patch import check_schema, read_schema, unresolved_refs

    try:
        document = read_schema(schema_path)
        if strict:
            check_schema(document)
    except ContractgenError as exc:
        raise click.ClickException(str(exc))

    missing = unresolved_refs(document)
    if not missing:
        console.print(theme.ok(f"All $refs resolve in {schema_path}"))
        return
    for ref in missing:
        console.print(theme.err(f"Unresolved $ref: {ref}"))
    console.print(theme.info(f"{len(missing)} unresolved reference(s)"))
    ctx.exit(1)


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@cli.command("list")
@click.option("--contracts-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory holding one subdirectory per contract.")
def list_contracts(contracts_dir: Optional[Path]) -> None:
    """List contract directories and their schema layout.

    \b
    Examples:
      contractgen list
    """
    from .contracts import discover_contracts, load_contract_schema
    from .messages import message_variants

    cfg = _effective_config(contracts_dir=contracts_dir)
    try:
        contracts = discover_contracts(cfg.contracts_dir)
    except ContractgenError as exc:
        raise click.ClickException(str(exc))

    theme.section("Contracts", console)
    t = theme.make_table()
    t.add_column("Name", style=f"bold {theme.TEAL}", no_wrap=True)
    t.add_column("Version")
    t.add_column("Layout", style=theme.SAND)
    t.add_column("Execute", justify="right")
    t.add_column("Query", justify="right")
    for source in contracts:
        try:
            schema = load_contract_schema(source)
        except ContractgenError:
            t.add_row(source.name, "—", "[red]no schema[/red]", "—", "—")
            continue
        t.add_row(
            schema.name,
            schema.version or "—",
            schema.layout,
            str(len(message_variants(schema.execute))),
            str(len(message_variants(schema.query))),
        )
    console.print(t)
    console.print(theme.info(f"{len(contracts)} contract(s) in {cfg.contracts_dir}"))


# ---------------------------------------------------------------------------
# config (group)
# ---------------------------------------------------------------------------


@cli.group()
def config() -> None:
    """View contractgen configuration."""


@config.command("show")
def config_show() -> None:
    """Show current configuration.

    \b
    Examples:
      contractgen config show
    """
    cfg = get_config()
    dump = cfg.model_dump()

    theme.section("Layout", console, "01")
    t = theme.make_kv_table()
    t.add_row("contracts_dir", str(dump["contracts_dir"]))
    t.add_row("out_dir", str(dump["out_dir"]))
    console.print(t)

    theme.section("Definitions patch", console, "02")
    t = theme.make_kv_table()
    t.add_row("patch_contract", dump["patch_contract"] or "[dim]disabled[/dim]")
    t.add_row("patch_target", str(cfg.patch_target) if cfg.patch_target else "—")
    t.add_row("patch_overwrite", str(dump["patch_overwrite"]))
    t.add_row("definitions_file", str(dump["definitions_file"] or "—"))
    console.print(t)

    theme.section("Codegen", console, "03")
    t = theme.make_kv_table()
    t.add_row("bundle_file", dump["bundle_file"])
    t.add_row("bundle_scope", dump["bundle_scope"])
    t.add_row("generate_types", str(dump["generate_types"]))
    t.add_row("generate_client", str(dump["generate_client"]))
    t.add_row("target_python_version", dump["target_python_version"])
    console.print(t)

    theme.section("Paths", console, "04")
    t = theme.make_kv_table()
    t.add_row("home_dir", str(dump["home_dir"]))
    t.add_row("log_dir", str(cfg.log_dir))
    console.print(t)
    console.print()
