"""
Pytest configuration and fixtures for Vigil tests.

This module provides shared fixtures used across unit, integration,
and security tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from vigil.engine import Engine
from vigil.schema import EngineConfig, Mode


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def engine() -> Engine:
    """A fresh engine in enforce mode."""
    return Engine(EngineConfig(mode=Mode.ENFORCE))


@pytest.fixture
def warn_engine() -> Engine:
    """A fresh engine in warn mode."""
    return Engine(EngineConfig(mode=Mode.WARN))


@pytest.fixture
def sample_policy_yaml() -> str:
    """Return a small policy document in YAML form."""
    return """
name: team-default
description: Team policy for coding agents
version: "2.1"
rules:
  allowedTools:
    - exec
    - read
  blockedTools:
    - admin
  blockedPatterns:
    exec:
      - "rm -rf /"
  allowedPaths:
    - /workspace/
  maxParams:
    exec.timeout: 120
  network:
    allowOutbound: true
    blockedDomains:
      - webhook.site
"""
