"""Tests for amphitheatre.manifest module.

Tests loading actors from YAML/JSON files, bare specs vs full documents,
dumping, and content hashing.
"""

import json
import pytest
from pathlib import Path

import yaml

from amphitheatre.errors import ManifestError, ValidationError
from amphitheatre.manifest import (
    actor_from_document,
    content_hash,
    dump_manifest,
    load_manifest,
    parse_manifest,
)
from amphitheatre.schemas import ActorSpec, ActorState


def _write_yaml(path: Path, data: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f)


class TestLoadManifest:
    """Tests for load_manifest()."""

    def test_bare_spec_yaml(self, tmp_path, spec_data):
        path = tmp_path / "actor.yaml"
        _write_yaml(path, spec_data)
        actor = load_manifest(path)
        assert actor.name == "web"
        assert actor.spec == ActorSpec.from_dict(spec_data)
        assert actor.status.phase() is None

    def test_full_document_json(self, tmp_path, spec_data):
        path = tmp_path / "actor.json"
        path.write_text(json.dumps({
            "apiVersion": "amphitheatre.app/v1",
            "kind": "Actor",
            "metadata": {"name": "web-prod", "namespace": "prod"},
            "spec": spec_data,
            "status": {"conditions": [{
                "type": "Running",
                "status": "True",
                "reason": "Deployed",
                "message": "",
                "lastTransitionTime": "2024-01-01T00:00:00Z",
            }]},
        }))
        actor = load_manifest(path, namespace="default")
        assert actor.name == "web-prod"
        assert actor.namespace == "prod"
        assert actor.status.running() is True

    def test_namespace_applied_when_absent(self, tmp_path, spec_data):
        path = tmp_path / "actor.yml"
        _write_yaml(path, spec_data)
        assert load_manifest(path, namespace="team-a").namespace == "team-a"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match="Failed to read"):
            load_manifest(tmp_path / "missing.yaml")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / ".amp.toml"
        path.write_text("[character]\nname = 'web'\n")
        with pytest.raises(ManifestError, match="Unsupported manifest extension"):
            load_manifest(path)

    def test_invalid_utf8(self, tmp_path):
        """Undecodable bytes surface as a ManifestError."""
        path = tmp_path / "actor.yaml"
        path.write_bytes(b"name: \xff\xfe web\n")
        with pytest.raises(ManifestError, match="not valid UTF-8") as excinfo:
            load_manifest(path)
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_utf8_content(self, tmp_path, spec_data):
        spec_data["description"] = "Frontal web, déployé partout"
        path = tmp_path / "actor.yaml"
        path.write_bytes(yaml.safe_dump(spec_data, allow_unicode=True).encode("utf-8"))
        assert load_manifest(path).spec.description == "Frontal web, déployé partout"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "actor.yaml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(ManifestError, match="Invalid YAML manifest"):
            load_manifest(path)

    def test_schema_error_propagates(self, tmp_path, spec_data):
        del spec_data["commit"]
        path = tmp_path / "actor.yaml"
        _write_yaml(path, spec_data)
        with pytest.raises(ValidationError, match="'commit' is required"):
            load_manifest(path)


class TestParseManifest:
    """Tests for parse_manifest()."""

    def test_non_mapping(self):
        with pytest.raises(ManifestError, match="must contain a mapping"):
            parse_manifest("- a\n- b\n")

    def test_invalid_json(self):
        with pytest.raises(ManifestError, match="Invalid JSON manifest"):
            parse_manifest("{", fmt="json")

    def test_unknown_format(self):
        with pytest.raises(ManifestError, match="Unsupported manifest format"):
            parse_manifest("a: 1", fmt="toml")


class TestDumpManifest:
    """Tests for dump_manifest()."""

    def test_yaml_reloads_to_same_actor(self, spec_data):
        actor = actor_from_document(spec_data)
        actor.set_condition(ActorState.pending())
        text = dump_manifest(actor)
        restored = actor_from_document(yaml.safe_load(text))
        assert restored.spec == actor.spec
        assert restored.status.pending() is True

    def test_json(self, spec_data):
        actor = actor_from_document(spec_data)
        data = json.loads(dump_manifest(actor, fmt="json"))
        assert data["kind"] == "Actor"
        assert data["spec"]["commit"] == "8f3c2a1"
        assert "status" not in data


class TestContentHash:
    """Tests for content_hash()."""

    def test_stable(self, spec_data):
        assert content_hash(ActorSpec.from_dict(spec_data)) == content_hash(
            ActorSpec.from_dict(dict(spec_data))
        )

    def test_changes_with_commit(self, spec_data):
        before = content_hash(ActorSpec.from_dict(spec_data))
        spec_data["commit"] = "0000000"
        assert content_hash(ActorSpec.from_dict(spec_data)) != before

    def test_is_sha256_hex(self, spec_data):
        digest = content_hash(ActorSpec.from_dict(spec_data))
        assert len(digest) == 64
        int(digest, 16)
