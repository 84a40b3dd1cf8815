"""Snapshot prompt adapters."""

from .click_prompt import ClickPrompter
from .scripted import ScriptedPrompter

__all__ = ["ClickPrompter", "ScriptedPrompter"]
