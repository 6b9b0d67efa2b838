"""Concrete adapters for the interfaces in ``radiorecall.interfaces``."""
