"""
Build schema - describes how an actor's image is built.

Two build modes exist:
- Dockerfile: `dockerfile` is set, the image is built from it
- Buildpacks: `builder` (and optionally `buildpacks`) is set, the image is
  built with Cloud Native Buildpacks

Both may be declared at once. Dockerfile mode takes precedence, see
ActorSpec.has_dockerfile().
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from amphitheatre.errors import ValidationError
from amphitheatre.schemas.source import optional_str, optional_str_map


@dataclass(frozen=True)
class Build:
    """
    Image build descriptor.

    Attributes:
        context: Directory containing the artifact's sources
        env: Environment variables passed to the build
        dockerfile: Locates the Dockerfile relative to the workspace
        builder: Builder image used for buildpack builds
        buildpacks: Specific buildpacks to use with the builder, order matters.
            When set, builder image automatic detection is ignored.
    """
    context: Optional[str] = None
    env: Optional[dict[str, str]] = None
    dockerfile: Optional[str] = None
    builder: Optional[str] = None
    buildpacks: Optional[tuple[str, ...]] = None

    def __post_init__(self):
        # Private copies of the caller's collections; hashed by content
        if self.env is not None:
            object.__setattr__(self, "env", dict(self.env))
        if self.buildpacks is not None:
            object.__setattr__(self, "buildpacks", tuple(self.buildpacks))

    def __hash__(self) -> int:
        return hash(json.dumps(self.to_dict(), sort_keys=True))

    def has_buildpacks(self) -> bool:
        """Check whether a buildpack build is declared (builder or buildpacks)."""
        return self.builder is not None or bool(self.buildpacks)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, omitting absent fields."""
        result: dict[str, Any] = {}
        if self.context is not None:
            result["context"] = self.context
        if self.env is not None:
            result["env"] = dict(self.env)
        if self.dockerfile is not None:
            result["dockerfile"] = self.dockerfile
        if self.builder is not None:
            result["builder"] = self.builder
        if self.buildpacks is not None:
            result["buildpacks"] = list(self.buildpacks)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Build":
        """Deserialize from dictionary."""
        if not isinstance(data, dict):
            raise ValidationError("Build: expected a mapping")
        buildpacks = data.get("buildpacks")
        if buildpacks is not None:
            if not isinstance(buildpacks, list) or not all(isinstance(b, str) for b in buildpacks):
                raise ValidationError("Build: 'buildpacks' must be a list of strings")
            buildpacks = tuple(buildpacks)
        return cls(
            context=optional_str(data, "context", "Build"),
            env=optional_str_map(data, "env", "Build"),
            dockerfile=optional_str(data, "dockerfile", "Build"),
            builder=optional_str(data, "builder", "Build"),
            buildpacks=buildpacks,
        )
