"""
Error classes for amphitheatre resources.

These error types separate what a caller did wrong from what failed around it:
- ValidationError: A document or value does not satisfy the actor schema
- ManifestError: A manifest file could not be read or parsed
- ConfigError: The local configuration is invalid

Derivations (locators, port and environment projections, status queries)
never raise. They return None when there is nothing to project.
"""


class AmphitheatreError(Exception):
    """Base exception for amphitheatre."""
    pass


class ValidationError(AmphitheatreError, ValueError):
    """
    Schema validation error - the input cannot become a resource.

    Examples:
    - Missing or empty required field (name, repository, commit)
    - Port that is not an int32
    - Condition with an unknown type or status string

    Raised at construction or deserialization time and surfaced to
    the caller unchanged.
    """
    pass


class ManifestError(AmphitheatreError):
    """
    Manifest loading error.

    Raised when a manifest file is missing, has an unsupported extension,
    or does not parse as YAML/JSON.
    """
    pass


class ConfigError(AmphitheatreError):
    """Configuration validation error."""
    pass
