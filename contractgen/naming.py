# contractgen/naming.py
"""Identifier helpers shared by the generators."""

from __future__ import annotations

import keyword
import re

_PASCAL_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def to_pascal_case(name: str) -> str:
    """Convert ``get_pool`` / ``my-contract`` to ``GetPool`` / ``MyContract``."""
    parts = re.split(r"[^0-9A-Za-z]+", name)
    return "".join(p[:1].upper() + p[1:] for p in parts if p)


def to_pascal_identifier(name: str) -> str:
    """Like :func:`to_pascal_case` but always a valid identifier (or ``""``)."""
    pascal = to_pascal_case(name)
    if pascal[:1].isdigit():
        pascal = f"C{pascal}"
    return safe_identifier(pascal) if pascal else ""


def to_snake_case(name: str) -> str:
    """Convert a contract directory name to a Python module name."""
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"[^0-9A-Za-z]+", "_", name).strip("_").lower()
    if not name:
        return "contract"
    if name[0].isdigit():
        name = f"c_{name}"
    return safe_identifier(name)


def safe_identifier(name: str, reserved: frozenset[str] | set[str] = frozenset()) -> str:
    """Make *name* usable as a Python identifier, suffixing ``_`` on clashes."""
    name = re.sub(r"\W", "_", name)
    if not name or name[0].isdigit():
        name = f"_{name}"
    while keyword.iskeyword(name) or name in reserved:
        name = f"{name}_"
    return name


def is_pascal_identifier(name: str) -> bool:
    return bool(_PASCAL_RE.match(name))
