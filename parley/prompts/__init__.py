"""Prompt template loader.

Loads Markdown prompt templates from the prompts/ directory and renders
them with Jinja2 variable substitution.
"""

from __future__ import annotations

import json
from pathlib import Path

from jinja2 import BaseLoader, Environment

from parley.schemas.config import AssistantSettings
from parley.schemas.fragment import Fragment

# Directory containing the .md prompt template files
_PROMPTS_DIR = Path(__file__).parent


def render_prompt(template_name: str, **variables: object) -> str:
    """Load a prompt template and render it with Jinja2 variables.

    Args:
        template_name: Name of the template file (without .md extension).
        **variables: Template variables to inject.

    Returns:
        The fully rendered prompt string.

    Raises:
        FileNotFoundError: If the template file does not exist.
    """
    path = _PROMPTS_DIR / f"{template_name}.md"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")

    template_text = path.read_text(encoding="utf-8")

    env = Environment(loader=BaseLoader(), keep_trailing_newline=True)
    template = env.from_string(template_text)
    return template.render(**variables)


def build_system_prompt(settings: AssistantSettings) -> str:
    """Render the assistant system prompt, including the output contract."""
    return render_prompt(
        "assistant",
        product_name=settings.product_name,
        output_schema=json.dumps(Fragment.output_schema(), indent=2),
    )
