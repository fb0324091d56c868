"""Jinja2 environment shared by the formatters and emitters of one run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from .shared.naming import to_camel_case, to_hyphen_case, to_pascal_case

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"


@dataclass
class GeneratorContext:
    """Context for code generation with cached templates."""

    template_env: Environment = field(init=False)
    _templates: dict[str, Template] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,  # Disable auto-reload for performance
        )
        self.template_env.filters["camel"] = to_camel_case
        self.template_env.filters["pascal"] = to_pascal_case
        self.template_env.filters["hyphen"] = to_hyphen_case

    def template(self, name: str) -> Template:
        """Return a compiled template, compiling it on first use."""
        if name not in self._templates:
            self._templates[name] = self.template_env.get_template(name)
        return self._templates[name]

    def render(self, name: str, **context: Any) -> str:
        return self.template(name).render(**context)
