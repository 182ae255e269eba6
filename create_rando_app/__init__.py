"""create-rando-app -- scaffold a Dev Rando coding challenge project."""

__version__ = "1.0.0"
