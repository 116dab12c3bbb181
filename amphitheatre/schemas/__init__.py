"""
amphitheatre.schemas - Schema definitions for actor resources.

This module defines the data structures an actor controller consumes
and produces:

Actor -> ActorSpec (what to build and run) + ActorStatus (what happened)

Spec side:
1. ActorSpec: Declarative, replaced wholesale on edit
2. Partner: Dependency on another actor, with its own source locator
3. Build: Dockerfile or buildpack build descriptor
4. Service / Port: Declared ports, projected to ContainerPort and ServicePort

Status side:
1. ActorState: Pending, Building, Running, Failed
2. Condition: One assertion about a phase
3. ActorStatus: One condition per phase, upserted by the controller
"""

from .source import (
    DEFAULT_PATH,
    Partner,
    parse_url,
    url,
)
from .build import Build
from .service import (
    ContainerPort,
    EnvVar,
    Port,
    Service,
    ServicePort,
    to_container_ports,
    to_env_vars,
    to_service_ports,
)
from .status import (
    ActorState,
    ActorStatus,
    Condition,
)
from .actor import (
    API_VERSION,
    KIND,
    Actor,
    ActorSpec,
)

__all__ = [
    # Source
    "DEFAULT_PATH",
    "Partner",
    "parse_url",
    "url",
    # Build
    "Build",
    # Services
    "ContainerPort",
    "EnvVar",
    "Port",
    "Service",
    "ServicePort",
    "to_container_ports",
    "to_env_vars",
    "to_service_ports",
    # Status
    "ActorState",
    "ActorStatus",
    "Condition",
    # Actor
    "API_VERSION",
    "KIND",
    "Actor",
    "ActorSpec",
]
