# escope/__init__.py
"""Diagnóstico de salud y dimensionamiento de shards para clústeres Elasticsearch."""

__version__ = "0.1.0"
