"""Configuration module for the marketing video generator."""

from config.prompt_loader import PromptName, load_prompt
from config.settings import ExecutionProfile, Settings

__all__ = ["ExecutionProfile", "PromptName", "Settings", "load_prompt"]
