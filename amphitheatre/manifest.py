"""
Manifest loading - read and write actor documents.

A manifest is either a full resource document

    apiVersion: amphitheatre.app/v1
    kind: Actor
    metadata: {name: web}
    spec: {...}
    status: {conditions: [...]}

or a bare ActorSpec mapping. Files ending in .yaml/.yml are parsed with
PyYAML, .json with json. Loading never touches the network; it only turns
text into validated resources.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from amphitheatre.errors import ManifestError
from amphitheatre.schemas import Actor, ActorSpec

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


def parse_manifest(text: str, fmt: str = "yaml") -> dict[str, Any]:
    """
    Parse manifest text into a document.

    Args:
        text: Manifest contents
        fmt: "yaml" or "json"

    Raises:
        ManifestError: If the text does not parse or is not a mapping
    """
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise ManifestError(f"Unsupported manifest format: {fmt}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ManifestError(f"Invalid {fmt.upper()} manifest: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError("Manifest must contain a mapping")
    return data


def actor_from_document(data: dict[str, Any], namespace: Optional[str] = None) -> Actor:
    """
    Build an Actor from a resource document or a bare spec.

    Args:
        data: Parsed manifest
        namespace: Namespace applied when the document has none

    Raises:
        ValidationError: If the document does not satisfy the schema
    """
    if "spec" in data or "kind" in data:
        actor = Actor.from_dict(data)
    else:
        spec = ActorSpec.from_dict(data)
        actor = Actor(name=spec.name, spec=spec)
    if actor.namespace is None and namespace is not None:
        actor.namespace = namespace
    return actor


def load_manifest(path: Path | str, namespace: Optional[str] = None) -> Actor:
    """
    Load an Actor from a YAML or JSON file.

    Raises:
        ManifestError: If the file is missing, unsupported or unparseable
        ValidationError: If the document does not satisfy the schema
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        fmt = "yaml"
    elif suffix in JSON_SUFFIXES:
        fmt = "json"
    else:
        raise ManifestError(f"Unsupported manifest extension: {path.name}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ManifestError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read {path}: {e}") from e

    actor = actor_from_document(parse_manifest(text, fmt), namespace=namespace)
    logger.debug(f"Loaded actor {actor.name} from {path}")
    return actor


def dump_manifest(actor: Actor, fmt: str = "yaml") -> str:
    """Serialize an Actor to YAML or JSON text."""
    data = actor.to_dict()
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False)
    raise ManifestError(f"Unsupported manifest format: {fmt}")


def content_hash(spec: ActorSpec) -> str:
    """SHA256 of the spec's canonical JSON form, for content addressing."""
    canonical = json.dumps(spec.to_dict(), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
