"""
Actor schema - the declarative description of a deployable unit.

An ActorSpec is replaced wholesale on every edit and never mutated. It names
the source to build (repository, reference, path, commit), how to build it,
and what the running container exposes. Derivations turn it into what the
build and deploy collaborators consume:

- url(): canonical source locator
- has_dockerfile(): Dockerfile vs buildpack build mode
- env_vars(): container environment variables
- container_ports() / service_ports(): port projections

An Actor wraps a spec with its resource identity and the status the
controller writes back.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from amphitheatre.errors import ValidationError
from amphitheatre.schemas.build import Build
from amphitheatre.schemas.service import (
    ContainerPort,
    EnvVar,
    Service,
    ServicePort,
    to_container_ports,
    to_env_vars,
    to_service_ports,
)
from amphitheatre.schemas.source import (
    DEFAULT_PATH,
    Partner,
    optional_int,
    optional_str,
    optional_str_map,
    require_str,
    url,
)
from amphitheatre.schemas.status import ActorStatus, Condition

API_VERSION = "amphitheatre.app/v1"
KIND = "Actor"


@dataclass(frozen=True)
class ActorSpec:
    """
    The declarative specification of an actor.

    Attributes:
        name: The name of the actor
        repository: Source code repository the package is cloned from
        commit: The resolved commit the source was fetched at
        description: The description of the actor
        image: Image to launch the container, in the addressable image format
            [<registry>/][<project>/]<image>[:<tag>|@<digest>]
        command: Overrides the default command declared by the image
        path: Relative path from the repo root to the configuration file
        reference: Git ref the package is cloned from, e.g. master or main
        environments: Environment variables set in the container
        partners: Dependencies on other actors
        services: Services and the ports they declare
        sync: Rebuild and redeploy on every push when enabled
        build: How the image is built
    """
    name: str
    repository: str
    commit: str
    description: str = ""
    image: str = ""
    command: Optional[str] = None
    path: Optional[str] = None
    reference: Optional[str] = None
    environments: Optional[dict[str, str]] = None
    partners: Optional[tuple[Partner, ...]] = None
    services: Optional[tuple[Service, ...]] = None
    sync: Optional[bool] = None
    build: Optional[Build] = None

    def __post_init__(self):
        if not self.name:
            raise ValidationError("ActorSpec: 'name' is required")
        if not self.repository:
            raise ValidationError(f"Actor '{self.name}': 'repository' is required")
        if not self.commit:
            raise ValidationError(f"Actor '{self.name}': 'commit' is required")
        # Private copy of the caller's mapping; hashed by content
        if self.environments is not None:
            object.__setattr__(self, "environments", dict(self.environments))

    def __hash__(self) -> int:
        return hash(json.dumps(self.to_dict(), sort_keys=True))

    def url(self) -> str:
        """Canonical source locator for this actor."""
        return url(self.repository, self.reference, self.path)

    @property
    def manifest_path(self) -> str:
        """Configuration file path, falling back to DEFAULT_PATH."""
        return self.path if self.path is not None else DEFAULT_PATH

    def has_dockerfile(self) -> bool:
        """Check whether the image is built from a Dockerfile."""
        return self.build is not None and self.build.dockerfile is not None

    def env_vars(self) -> Optional[list[EnvVar]]:
        """Container environment variables, None when none are declared."""
        return to_env_vars(self.environments)

    def container_ports(self) -> Optional[list[ContainerPort]]:
        """All declared ports, exposed or not, None without services."""
        return to_container_ports(self.services)

    def service_ports(self) -> Optional[list[ServicePort]]:
        """Exposed ports only, None when nothing is exposed."""
        return to_service_ports(self.services)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, omitting absent fields."""
        result: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "image": self.image,
        }
        if self.command is not None:
            result["command"] = self.command
        result["repository"] = self.repository
        if self.path is not None:
            result["path"] = self.path
        if self.reference is not None:
            result["reference"] = self.reference
        result["commit"] = self.commit
        if self.environments is not None:
            result["environments"] = dict(self.environments)
        if self.partners is not None:
            result["partners"] = [p.to_dict() for p in self.partners]
        if self.services is not None:
            result["services"] = [s.to_dict() for s in self.services]
        if self.sync is not None:
            result["sync"] = self.sync
        if self.build is not None:
            result["build"] = self.build.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActorSpec":
        """Deserialize from dictionary."""
        if not isinstance(data, dict):
            raise ValidationError("ActorSpec: expected a mapping")

        partners = data.get("partners")
        if partners is not None:
            if not isinstance(partners, list):
                raise ValidationError("ActorSpec: 'partners' must be a list")
            partners = tuple(Partner.from_dict(p) for p in partners)

        services = data.get("services")
        if services is not None:
            if not isinstance(services, list):
                raise ValidationError("ActorSpec: 'services' must be a list")
            services = tuple(Service.from_dict(s) for s in services)

        sync = data.get("sync")
        if sync is not None and not isinstance(sync, bool):
            raise ValidationError(f"ActorSpec: 'sync' must be a boolean, got {sync!r}")

        build = data.get("build")
        return cls(
            name=require_str(data, "name", "ActorSpec"),
            repository=require_str(data, "repository", "ActorSpec"),
            commit=require_str(data, "commit", "ActorSpec"),
            description=optional_str(data, "description", "ActorSpec") or "",
            image=optional_str(data, "image", "ActorSpec") or "",
            command=optional_str(data, "command", "ActorSpec"),
            path=optional_str(data, "path", "ActorSpec"),
            reference=optional_str(data, "reference", "ActorSpec"),
            environments=optional_str_map(data, "environments", "ActorSpec"),
            partners=partners,
            services=services,
            sync=sync,
            build=Build.from_dict(build) if build is not None else None,
        )


@dataclass
class Actor:
    """
    An actor resource: identity, spec and controller-owned status.

    Attributes:
        name: Resource name
        spec: The declarative specification
        namespace: Namespace, implied by the hosting system when absent
        generation: Resource generation counter, bumped on every spec edit
        status: Lifecycle conditions written by the controller
    """
    name: str
    spec: ActorSpec
    namespace: Optional[str] = None
    generation: Optional[int] = None
    status: ActorStatus = field(default_factory=ActorStatus)

    def build_name(self) -> str:
        """Name of the image build for the current commit."""
        return f"{self.spec.name}-{self.spec.commit}"

    def docker_tag(self) -> str:
        """Image tag pinned to the current commit."""
        return f"{self.spec.image}:{self.spec.commit}"

    def set_condition(self, condition: Condition) -> Condition:
        """Record a condition, stamping the current generation when unset."""
        if condition.observed_generation is None and self.generation is not None:
            condition = replace(condition, observed_generation=self.generation)
        return self.status.set_condition(condition)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a resource document."""
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace is not None:
            metadata["namespace"] = self.namespace
        if self.generation is not None:
            metadata["generation"] = self.generation
        result: dict[str, Any] = {
            "apiVersion": API_VERSION,
            "kind": KIND,
            "metadata": metadata,
            "spec": self.spec.to_dict(),
        }
        status = self.status.to_dict()
        if status:
            result["status"] = status
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Actor":
        """
        Deserialize from a resource document.

        The resource name defaults to the spec name when metadata is absent.
        """
        if not isinstance(data, dict):
            raise ValidationError("Actor: expected a mapping")
        kind = data.get("kind", KIND)
        if kind != KIND:
            raise ValidationError(f"Actor: unexpected kind {kind!r}")
        api_version = data.get("apiVersion", API_VERSION)
        if api_version != API_VERSION:
            raise ValidationError(f"Actor: unsupported apiVersion {api_version!r}")
        if "spec" not in data:
            raise ValidationError("Actor: 'spec' is required")

        spec = ActorSpec.from_dict(data["spec"])
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValidationError("Actor: 'metadata' must be a mapping")
        generation = optional_int(metadata, "generation", "Actor")
        return cls(
            name=optional_str(metadata, "name", "Actor") or spec.name,
            spec=spec,
            namespace=optional_str(metadata, "namespace", "Actor"),
            generation=generation,
            status=ActorStatus.from_dict(data.get("status")),
        )
