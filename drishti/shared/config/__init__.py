"""
Shared Config Module
====================

Configuration settings, prompts and seed data.

Structure:
- prompts/: Jinja2 templates for discovery prompts
- settings/: YAML configuration files (defaults, project, user)
- data/: bootstrap asset records
"""

from drishti.shared.config.prompts import (
    PromptManager,
    render_prompt,
    get_prompt_manager,
)

__all__ = [
    "PromptManager",
    "render_prompt",
    "get_prompt_manager",
]
