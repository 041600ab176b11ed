"""Jinja2 rendering of complete C# compilation units."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from jinja2 import Environment, FileSystemLoader

_DEFAULT_TEMPLATES = Path(__file__).with_name("templates")


class UnitRenderer:
    """Wraps emitted member text in the header, usings and namespace of a unit."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render_bridge(
        self,
        *,
        class_name: str,
        script_path: str,
        namespace: Optional[str],
        usings: Sequence[str],
        declaration: str,
        members: str,
    ) -> str:
        return self._render(
            "bridge.cs.j2",
            class_name=class_name,
            script_path=script_path,
            namespace=namespace,
            usings=usings,
            declaration=declaration,
            members=members,
        )

    def render_proxy(
        self,
        *,
        native_type: str,
        namespace: str,
        usings: Sequence[str],
        declaration: str,
        members: str,
    ) -> str:
        return self._render(
            "proxy.cs.j2",
            native_type=native_type,
            namespace=namespace,
            usings=usings,
            declaration=declaration,
            members=members,
        )

    def _render(self, template_name: str, **context: object) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context).rstrip("\n") + "\n"

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        if str(_DEFAULT_TEMPLATES) not in directories:
            directories.append(str(_DEFAULT_TEMPLATES))
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["UnitRenderer"]
