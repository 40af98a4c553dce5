"""Application utilities: option values and files, regex cache, shared instances, thread contexts, fuzzy ranking, formatting and console capture."""

__version__ = "0.1.0"