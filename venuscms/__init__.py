"""VenusCMS - bulk import/export for the game reference content editor."""

__version__ = "0.1.0"
