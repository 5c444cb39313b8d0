"""Prompt loading utility for reading prompt templates from files."""

import logging
import re
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

# Base directory for prompts
_PROMPTS_DIR = Path(__file__).parent / "prompts"


class PromptName(str, Enum):
    """Enumeration of all available prompt names for type safety."""

    INITIAL_VIDEO = "initial_video"
    EXTENSION_VIDEO = "extension_video"


def _extract_template_vars(template: str) -> set[str]:
    """Extract variable names from template string.

    Args:
        template: Template string with {var_name} placeholders.

    Returns:
        Set of variable names found in template.
    """
    return set(re.findall(r"\{(\w+)\}", template))


def _substitute_template(template: str, **vars: str) -> str:
    """Substitute variables in template string.

    Args:
        template: Template string with {var_name} placeholders.
        **vars: Variables to substitute.

    Returns:
        Template with variables substituted.

    Raises:
        KeyError: If a template variable is missing from vars.
    """
    if not vars:
        return template

    try:
        return template.format(**vars)
    except KeyError as e:
        required = _extract_template_vars(template)
        raise KeyError(
            f"Missing template variable: {e}. "
            f"Required variables: {sorted(required)}"
        ) from e


def load_prompt(prompt_name: str | PromptName, **template_vars: str) -> str:
    """Load prompt text from a file with optional template variable substitution.

    Args:
        prompt_name: Name of the prompt file (without .txt extension) or PromptName enum.
        **template_vars: Variables to substitute in the template using {var_name} syntax.

    Returns:
        The prompt text content with variables substituted.

    Raises:
        FileNotFoundError: If the prompt file does not exist.
        IOError: If the file cannot be read.
        KeyError: If a template variable is missing.
    """
    if isinstance(prompt_name, PromptName):
        prompt_name = prompt_name.value

    prompt_path = _PROMPTS_DIR / f"{prompt_name}.txt"

    if not prompt_path.exists():
        raise FileNotFoundError(
            f"Prompt file not found: {prompt_path}. "
            f"Expected location: {_PROMPTS_DIR}/"
        )

    try:
        content = prompt_path.read_text(encoding="utf-8")
        logger.debug("Loaded prompt from %s (%d chars)", prompt_path, len(content))
        return _substitute_template(content.strip(), **template_vars)
    except IOError as e:
        raise IOError(f"Failed to read prompt file {prompt_path}: {e}") from e


def build_initial_prompt(image_count: int, user_prompt: str) -> str:
    """Build the prompt for the first segment.

    The prompt names the full screenshot count even though only a few
    images are embedded as references.
    """
    return load_prompt(
        PromptName.INITIAL_VIDEO,
        image_count=str(image_count),
        user_prompt=user_prompt,
    )


def build_extension_prompt(image_count: int, user_prompt: str) -> str:
    """Build the prompt for a continuation segment."""
    return load_prompt(
        PromptName.EXTENSION_VIDEO,
        image_count=str(image_count),
        user_prompt=user_prompt,
    )
