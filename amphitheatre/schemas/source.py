"""
Source locator schema - where an actor's code is fetched from.

A source locator is the (repository, reference, path) triple composed into a
single string:

    https://github.com/amphitheatre-app/amphitheatre.git#main:getting-started/.amp.toml

The reference follows '#', the path follows ':' and is only embedded when a
reference is present. Git refnames cannot contain ':', so the composed string
splits back into its parts unambiguously.
"""

from dataclasses import dataclass
from typing import Any, Optional

from amphitheatre.errors import ValidationError

# Relative path from the repo root to the configuration file
DEFAULT_PATH = "./.amp.toml"


def url(repository: str, reference: Optional[str] = None, path: Optional[str] = None) -> str:
    """
    Compose a canonical source locator.

    Args:
        repository: Source code repository, e.g. https://example.com/r.git
        reference: Optional git ref (branch or tag)
        path: Optional path to the configuration file within the repository

    Returns:
        The repository alone when there is no reference, otherwise
        "{repository}#{reference}" with ":{path}" appended when a path is set.
    """
    if reference is None:
        return repository
    locator = f"{repository}#{reference}"
    if path is not None:
        locator = f"{locator}:{path}"
    return locator


def parse_url(locator: str) -> tuple[str, Optional[str], Optional[str]]:
    """Split a locator produced by url() back into (repository, reference, path)."""
    repository, sep, fragment = locator.partition("#")
    if not sep:
        return locator, None, None
    reference, sep, path = fragment.partition(":")
    return repository, reference, path if sep else None


def require_str(data: dict[str, Any], key: str, owner: str) -> str:
    """Fetch a required non-empty string field from a document."""
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{owner}: '{key}' is required and must be a non-empty string")
    return value


def optional_str(data: dict[str, Any], key: str, owner: str) -> Optional[str]:
    """Fetch an optional string field from a document."""
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{owner}: '{key}' must be a string, got {type(value).__name__}")
    return value


def optional_int(data: dict[str, Any], key: str, owner: str) -> Optional[int]:
    """Fetch an optional integer field from a document, rejecting bools."""
    value = data.get(key)
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValidationError(f"{owner}: '{key}' must be an integer, got {value!r}")
    return value


def optional_str_map(data: dict[str, Any], key: str, owner: str) -> Optional[dict[str, str]]:
    """Fetch an optional name -> value mapping, coercing scalar values to str."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError(f"{owner}: '{key}' must be a mapping")
    result = {}
    for name, item in value.items():
        if item is None:
            raise ValidationError(f"{owner}: '{key}.{name}' must not be null")
        # YAML turns unquoted true/1 into bool/int; variables are always strings
        result[str(name)] = _scalar_str(item)
    return result


def _scalar_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Partner:
    """
    A named dependency on another actor, fetched from its own source.

    A partner carries no commit. Resolving the commit of its reference is
    the source-control client's concern.

    Attributes:
        name: Name of the partner actor
        repository: Source code repository the partner is cloned from
        path: Relative path from the repo root to the configuration file
        reference: Git ref the partner is cloned from, e.g. master or main
    """
    name: str
    repository: str
    path: Optional[str] = None
    reference: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValidationError("Partner: 'name' is required")
        if not self.repository:
            raise ValidationError(f"Partner '{self.name}': 'repository' is required")

    def url(self) -> str:
        """Canonical source locator for this partner."""
        return url(self.repository, self.reference, self.path)

    @property
    def manifest_path(self) -> str:
        """Configuration file path, falling back to DEFAULT_PATH."""
        return self.path if self.path is not None else DEFAULT_PATH

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, omitting absent fields."""
        result: dict[str, Any] = {"name": self.name, "repository": self.repository}
        if self.path is not None:
            result["path"] = self.path
        if self.reference is not None:
            result["reference"] = self.reference
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Partner":
        """Deserialize from dictionary."""
        if not isinstance(data, dict):
            raise ValidationError("Partner: expected a mapping")
        return cls(
            name=require_str(data, "name", "Partner"),
            repository=require_str(data, "repository", "Partner"),
            path=optional_str(data, "path", "Partner"),
            reference=optional_str(data, "reference", "Partner"),
        )
