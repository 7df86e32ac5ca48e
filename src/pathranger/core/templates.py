"""Centralized Jinja2 template utilities.

This module provides:
- resolve_template_root: Find the templates directory
- get_template_environment: Cached template environment factory
- render_template: Render a template by name
- render_shell_init: Shell integration script for bash, zsh or fish
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from pathranger.core.result import Err, NotFoundError, Ok, Result

SHELL_TEMPLATES: dict[str, str] = {
    "bash": "bash.sh.j2",
    "zsh": "zsh.sh.j2",
    "fish": "fish.fish.j2",
}

DEFAULT_EXECUTABLE = "pathranger"
DEFAULT_ALIAS = "pr"


def resolve_template_root(custom_root: Path | None = None) -> Path:
    """Resolve the templates directory path.

    Searches in order:
    1. custom_root if provided and valid
    2. Package templates directory (pathranger/templates)

    Raises:
        FileNotFoundError: If no valid templates directory found.
    """
    if custom_root is not None and custom_root.is_dir():
        return custom_root.resolve()

    package_templates = Path(__file__).parent.parent / "templates"
    if package_templates.is_dir():
        return package_templates.resolve()

    raise FileNotFoundError("No templates directory found")


@lru_cache(maxsize=4)
def get_template_environment(template_root: Path) -> Environment:
    """Create or retrieve a cached Jinja2 Environment."""
    return Environment(
        loader=FileSystemLoader(str(template_root)),
        autoescape=False,
        keep_trailing_newline=True,
    )


def render_template(
    name: str,
    context: dict[str, object],
    *,
    template_root: Path | None = None,
) -> str:
    """Render a template by name with the given context.

    Raises:
        FileNotFoundError: If template or templates directory not found.
    """
    root = resolve_template_root(template_root)
    env = get_template_environment(root)
    try:
        template = env.get_template(name)
    except TemplateNotFound as exc:
        raise FileNotFoundError(f"Template {name} not found in {root}") from exc
    return template.render(**context)


def _function_name(executable: str) -> str:
    return re.sub(r"\W", "_", Path(executable).name) or DEFAULT_EXECUTABLE


def render_shell_init(
    shell: str,
    *,
    executable: str = DEFAULT_EXECUTABLE,
    alias: str = DEFAULT_ALIAS,
) -> Result[str, NotFoundError]:
    """Render the `cd` wrapper and goto alias for ``shell``."""
    name = SHELL_TEMPLATES.get(shell.lower())
    if name is None:
        supported = ", ".join(SHELL_TEMPLATES)
        return Err(
            NotFoundError(f"Unsupported shell: {shell}", context={"supported": supported})
        )
    try:
        script = render_template(
            name,
            {"exe": executable, "func": _function_name(executable), "alias": alias},
        )
    except FileNotFoundError as exc:
        return Err(NotFoundError(f"Shell template missing for {shell}", context={"error": exc}))
    return Ok(script)


__all__ = [
    "SHELL_TEMPLATES",
    "get_template_environment",
    "render_shell_init",
    "render_template",
    "resolve_template_root",
]
