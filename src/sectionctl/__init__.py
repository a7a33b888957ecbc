"""sectionctl — section and entry type configuration control."""

__version__ = "0.1.0"
