"""Prompt templates for INFRA-DRISHTI using Jinja2."""

from drishti.shared.config.prompts.manager import PromptManager, render_prompt, get_prompt_manager

__all__ = ["PromptManager", "render_prompt", "get_prompt_manager"]
