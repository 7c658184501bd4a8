"""PARA folder organizer: Projects, Areas, Resources, Archives."""

__version__ = "0.1.0"
