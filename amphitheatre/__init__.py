"""
amphitheatre - Actor resource model

Declarative actor specs, their build and deploy derivations, and the
lifecycle condition ledger a controller writes back.
"""

__version__ = "0.1.0"


__all__ = ["Actor", "ActorSpec", "ActorStatus", "ActorState", "load_manifest"]

from .schemas import Actor, ActorSpec, ActorStatus, ActorState
from .manifest import load_manifest
