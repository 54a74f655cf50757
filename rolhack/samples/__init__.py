"""Hand-authored sample worlds."""

from .tutorial import create_tutorial_world, tutorial_document, TUTORIAL_PROJECT_NAME

__all__ = ["create_tutorial_world", "tutorial_document", "TUTORIAL_PROJECT_NAME"]
