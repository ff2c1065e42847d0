"""Querysmith: typed query construction for the Typesense search engine."""

__version__ = "0.1.0"
