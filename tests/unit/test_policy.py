"""
Unit tests for policy templates and the policy loader.

Tests cover:
- Built-in template catalog
- Loading JSON and YAML files
- Error reporting for missing and malformed files
- Documents are independent copies
"""

import json
from pathlib import Path

import pytest

from vigil.errors import PolicyLoadError
from vigil.policy import BUILTIN_POLICIES, dump_policy, list_policies, load_policy
from vigil.schema import PolicyDocument


class TestBuiltinPolicies:
    """Tests for the built-in templates."""

    def test_list_order(self) -> None:
        assert list_policies() == ["restrictive", "moderate", "permissive"]

    @pytest.mark.parametrize("name", ["restrictive", "moderate", "permissive"])
    def test_load_builtin(self, name: str) -> None:
        document = load_policy(name)
        assert isinstance(document, PolicyDocument)
        assert document.name == name
        assert document.description
        assert document.version == "1.0"

    def test_restrictive_blocks_outbound(self) -> None:
        rules = load_policy("restrictive").rules
        assert rules.network is not None
        assert rules.network.allow_outbound is False
        assert "exec" in rules.blocked_tools

    def test_moderate_limits(self) -> None:
        rules = load_policy("moderate").rules
        assert rules.max_params == {"exec.timeout": 300}
        assert "webhook.site" in rules.network.blocked_domains

    def test_permissive_allows_any_tool(self) -> None:
        rules = load_policy("permissive").rules
        assert "*" in rules.allowed_tools
        assert rules.blocked_tools == []

    def test_returns_independent_copy(self) -> None:
        """Mutating a loaded document does not affect later loads."""
        first = load_policy("moderate")
        first.rules.allowed_tools.append("admin")
        first.name = "changed"
        second = load_policy("moderate")
        assert "admin" not in second.rules.allowed_tools
        assert second.name == "moderate"
        assert "admin" not in BUILTIN_POLICIES["moderate"]["rules"]["allowedTools"]


class TestLoadFromFile:
    """Tests for loading policy files."""

    def test_yaml_file(self, temp_dir: Path, sample_policy_yaml: str) -> None:
        path = temp_dir / "team.yaml"
        path.write_text(sample_policy_yaml)
        document = load_policy(path)
        assert document.name == "team-default"
        assert document.version == "2.1"
        assert document.rules.blocked_patterns == {"exec": ["rm -rf /"]}
        assert document.rules.max_params == {"exec.timeout": 120}

    def test_json_file(self, temp_dir: Path) -> None:
        path = temp_dir / "policy.json"
        path.write_text(json.dumps({"name": "from-json", "rules": {"blockedTools": ["admin"]}}))
        document = load_policy(str(path))
        assert document.name == "from-json"
        assert document.rules.blocked_tools == ["admin"]

    def test_file_named_like_builtin(self, temp_dir: Path) -> None:
        """Paths are only treated as names when they match exactly."""
        path = temp_dir / "moderate.json"
        path.write_text(json.dumps({"name": "local-moderate"}))
        assert load_policy(path).name == "local-moderate"

    def test_missing_file(self) -> None:
        with pytest.raises(PolicyLoadError) as exc_info:
            load_policy("/nonexistent/policy.json")
        error = exc_info.value
        assert error.message == 'Failed to load policy from "/nonexistent/policy.json": No such file'
        assert error.policy_path == "/nonexistent/policy.json"

    def test_relative_path_resolved(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(temp_dir)
        with pytest.raises(PolicyLoadError) as exc_info:
            load_policy("missing.yaml")
        assert exc_info.value.policy_path == str((temp_dir / "missing.yaml").resolve())

    def test_malformed_json(self, temp_dir: Path) -> None:
        path = temp_dir / "broken.json"
        path.write_text("{not json")
        with pytest.raises(PolicyLoadError) as exc_info:
            load_policy(path)
        assert "broken.json" in exc_info.value.message

    def test_malformed_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "broken.yaml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(PolicyLoadError):
            load_policy(path)

    def test_empty_file(self, temp_dir: Path) -> None:
        path = temp_dir / "empty.yaml"
        path.write_text("")
        with pytest.raises(PolicyLoadError) as exc_info:
            load_policy(path)
        assert "Empty policy file" in exc_info.value.message

    def test_invalid_document(self, temp_dir: Path) -> None:
        path = temp_dir / "invalid.yaml"
        path.write_text("name: x\nrules:\n  allowEverything: true\n")
        with pytest.raises(PolicyLoadError) as exc_info:
            load_policy(path)
        assert "Invalid policy" in exc_info.value.message
        assert "allowEverything" in exc_info.value.message

    def test_directory_rejected(self, temp_dir: Path) -> None:
        with pytest.raises(PolicyLoadError):
            load_policy(temp_dir)


class TestDumpPolicy:
    """Tests for dump_policy."""

    def test_file_format(self) -> None:
        data = json.loads(dump_policy(load_policy("restrictive")))
        assert data["name"] == "restrictive"
        assert data["rules"]["network"] == {"allowOutbound": False, "blockedDomains": ["*"]}
        assert data["rules"]["maxParams"] == {"exec.timeout": 30}

    def test_round_trip_through_file(self, temp_dir: Path) -> None:
        path = temp_dir / "copy.json"
        path.write_text(dump_policy(load_policy("permissive")))
        assert load_policy(path) == load_policy("permissive")
