"""Jinja environment shared by the page and data-table templates."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


def build_environment(templates_dir: Path | None = None) -> Environment:
    """Return an autoescaping environment loading from ``templates_dir``.

    Defaults to the ``sitepages/templates`` directory shipped with the package.
    """
    return Environment(
        loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


__all__ = ["TEMPLATES_DIR", "build_environment"]
