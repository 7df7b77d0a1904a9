"""Prompt templates for the chat widget.

- Defaults: built-in templates, variable catalog and intent routing table
- Renderer: single-pass ``{{name}}`` substitution
- Assembler: resolves a template and pairs it with the active profile
"""

from app.domain.prompts.renderer import extract_placeholders, render_template

__all__ = ["extract_placeholders", "render_template"]
