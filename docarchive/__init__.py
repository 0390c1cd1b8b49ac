"""Document archive: categories with typed dynamic fields, EAV document values, folders."""

__version__ = "1.0.0"
