from __future__ import annotations


class CullError(Exception):
    """Base class for errors raised before a run starts."""


class CatalogError(CullError):
    pass


class RecordNotFoundError(CullError):
    pass


class ConfigError(CullError):
    pass
