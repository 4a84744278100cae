"""
Policy loader.

Resolves a policy by built-in template name or by file path:
- Built-in names (restrictive, moderate, permissive) return a fresh copy
- Anything else is resolved to an absolute path and parsed: .json files
  as JSON, everything else as YAML
- Missing, unreadable, empty or invalid files raise PolicyLoadError
  naming the resolved path and the underlying cause

Loaded documents are inert: the rule engine does not consult them.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vigil.errors import PolicyLoadError
from vigil.policy.templates import BUILTIN_POLICIES, POLICY_NAMES
from vigil.schema import PolicyDocument

logger = logging.getLogger(__name__)


def list_policies() -> list[str]:
    """List built-in policy template names, most restrictive first."""
    return list(POLICY_NAMES)


def load_policy(name_or_path: str | Path) -> PolicyDocument:
    """
    Load a policy by built-in template name or from a JSON/YAML file.

    Args:
        name_or_path: 'restrictive' | 'moderate' | 'permissive' or a file path

    Returns:
        A PolicyDocument the caller is free to mutate

    Raises:
        PolicyLoadError: If the file is missing or malformed
    """
    if isinstance(name_or_path, str) and name_or_path in BUILTIN_POLICIES:
        return PolicyDocument.model_validate(BUILTIN_POLICIES[name_or_path])

    policy_path = Path(name_or_path).resolve()
    try:
        data = _read_policy_file(policy_path)
        if data is None:
            msg = "Empty policy file"
            raise ValueError(msg)
        document = PolicyDocument.model_validate(data)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise PolicyLoadError(
            policy_path=str(policy_path),
            underlying_error=_describe(e),
        ) from e

    logger.debug("Loaded policy %r from %s", document.name, policy_path)
    return document


def dump_policy(document: PolicyDocument) -> str:
    """Render a policy document as indented JSON in the file format."""
    return json.dumps(document.to_dict(), indent=2)


def _read_policy_file(path: Path) -> Any:
    """Parse a policy file by extension."""
    with path.open(encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def _describe(error: Exception) -> str:
    """One-line description of a load failure."""
    if isinstance(error, FileNotFoundError):
        return "No such file"
    if isinstance(error, ValidationError):
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in error.errors()
        ]
        return "Invalid policy: " + "; ".join(problems)
    return str(error)
