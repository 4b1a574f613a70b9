"""Jinja2 prompt rendering for discovery requests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class PromptManager:
    """Loads and renders prompt templates from a directory of ``.j2`` files."""

    def __init__(self, templates_dir: Optional[Path] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            undefined=StrictUndefined,
            autoescape=False,
        )

    def render(self, name: str, **context: Any) -> str:
        """Render template ``<name>.j2`` with the given context.

        Raises:
            ValueError: If no template with that name exists
        """
        try:
            template = self.env.get_template(f"{name}.j2")
        except TemplateNotFound:
            raise ValueError(f"Unknown prompt template: {name}") from None
        prompt = template.render(**context).strip()
        logger.debug(f"Rendered prompt '{name}' ({len(prompt)} chars)")
        return prompt


_prompt_manager: Optional[PromptManager] = None


def get_prompt_manager() -> PromptManager:
    global _prompt_manager
    if _prompt_manager is None:
        _prompt_manager = PromptManager()
    return _prompt_manager


def render_prompt(name: str, **context: Any) -> str:
    """Render a prompt with the shared manager."""
    return get_prompt_manager().render(name, **context)
