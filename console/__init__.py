"""Text front end: prompts human seats, plays the rest with the house bot."""

from .table import ConsoleCollaborator, parse_action

__all__ = ["ConsoleCollaborator", "parse_action"]
