"""Exceptions raised by nfeature."""


class NFeatureError(Exception):
    """Base class for all nfeature errors."""


class ConfigurationError(NFeatureError):
    """A feature is missing a collaborator it needs, usually its store."""


class InvalidChildError(NFeatureError, TypeError):
    """A subfeature is neither a feature, a feature-like object nor a coordinate pair."""


class StoreWriteError(NFeatureError):
    """A store insert or update failed."""


class NoIdentityError(NFeatureError):
    """A normalized subfeature has no primary id after being stored."""


class MethodNotFoundError(NFeatureError, AttributeError):
    """An unknown lowercase accessor was dispatched on a feature."""
