"""
Service schemas and their workload-facing projections.

An actor declares services, each with ports. The deployer consumes two flat
projections of them:

- Container ports: every declared port, what the container listens on
- Service ports: only ports with expose=true, what the network routes to

Environment variables are projected the same way, from a name -> value
mapping into a list of name/value records.

All projections are free functions over immutable inputs and return freshly
built lists, or None when there is nothing to project.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from amphitheatre.errors import ValidationError
from amphitheatre.schemas.source import optional_str

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class Port:
    """
    A port the container listens on.

    Attributes:
        port: Port number (int32)
        protocol: Optional protocol, e.g. TCP or UDP
        expose: Whether the port is exposed through a service; absent means false
    """
    port: int
    protocol: Optional[str] = None
    expose: Optional[bool] = None

    def __post_init__(self):
        # bool is an int subclass
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValidationError(f"Port: 'port' must be an integer, got {self.port!r}")
        if not INT32_MIN <= self.port <= INT32_MAX:
            raise ValidationError(f"Port: {self.port} is out of int32 range")

    @property
    def exposed(self) -> bool:
        return bool(self.expose)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"port": self.port}
        if self.protocol is not None:
            result["protocol"] = self.protocol
        if self.expose is not None:
            result["expose"] = self.expose
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Port":
        if not isinstance(data, dict):
            raise ValidationError("Port: expected a mapping")
        if "port" not in data:
            raise ValidationError("Port: 'port' is required")
        expose = data.get("expose")
        if expose is not None and not isinstance(expose, bool):
            raise ValidationError(f"Port: 'expose' must be a boolean, got {expose!r}")
        return cls(
            port=data["port"],
            protocol=optional_str(data, "protocol", "Port"),
            expose=expose,
        )


@dataclass(frozen=True)
class Service:
    """
    Defines the behavior of a service.

    Attributes:
        ports: Ordered ports of this service
        kind: Optional service kind discriminator
    """
    ports: tuple[Port, ...] = ()
    kind: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.kind is not None:
            result["kind"] = self.kind
        result["ports"] = [p.to_dict() for p in self.ports]
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Service":
        if not isinstance(data, dict):
            raise ValidationError("Service: expected a mapping")
        ports = data.get("ports")
        if not isinstance(ports, list):
            raise ValidationError("Service: 'ports' is required and must be a list")
        return cls(
            ports=tuple(Port.from_dict(p) for p in ports),
            kind=optional_str(data, "kind", "Service"),
        )


@dataclass(frozen=True)
class EnvVar:
    """An environment variable as set in a container."""
    name: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class ContainerPort:
    """A port declared on the running container."""
    container_port: int
    protocol: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"containerPort": self.container_port}
        if self.protocol is not None:
            result["protocol"] = self.protocol
        return result


@dataclass(frozen=True)
class ServicePort:
    """A port routed to the container by the network service."""
    port: int
    protocol: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"port": self.port}
        if self.protocol is not None:
            result["protocol"] = self.protocol
        return result


def to_env_vars(variables: Optional[dict[str, str]]) -> Optional[list[EnvVar]]:
    """Project a name -> value mapping into EnvVar records, None for None."""
    if variables is None:
        return None
    return [EnvVar(name=name, value=value) for name, value in variables.items()]


def to_container_ports(services: Optional[Iterable[Service]]) -> Optional[list[ContainerPort]]:
    """
    Flatten every port of every service into container ports.

    Service order then port order is preserved; `expose` is ignored.
    Returns None when services is None, an empty list for services
    without ports.
    """
    if services is None:
        return None
    return [
        ContainerPort(container_port=p.port, protocol=p.protocol)
        for service in services
        for p in service.ports
    ]


def to_service_ports(services: Optional[Iterable[Service]]) -> Optional[list[ServicePort]]:
    """
    Flatten exposed ports of every service into service ports.

    Returns None when services is None or when no port is exposed.
    """
    if services is None:
        return None
    ports = [
        ServicePort(port=p.port, protocol=p.protocol)
        for service in services
        for p in service.ports
        if p.exposed
    ]
    return ports or None
