import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from stacks_mcp.config import StacksConfig  # noqa: E402


@pytest.fixture
def config():
    return StacksConfig()


@pytest.fixture(autouse=True)
def isolated_api_key_file(monkeypatch, tmp_path):
    # Keep a developer's local hiro_apikey.txt out of resolve_config().
    monkeypatch.chdir(tmp_path)
