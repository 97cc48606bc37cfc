"""Manifest loader — read cardindex.yaml and apply environment overrides.

Qdrant credentials usually live outside the manifest, so
``CARDINDEX_QDRANT_URL`` and ``CARDINDEX_QDRANT_API_KEY`` take precedence
over the ``qdrant`` section when set.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from contracts.manifest import Manifest

ENV_OVERRIDES = {
    "CARDINDEX_QDRANT_URL": "url",
    "CARDINDEX_QDRANT_API_KEY": "api_key",
}


def load_manifest(path: str | Path, env: Mapping[str, str] | None = None) -> Manifest:
    """Parse *path* into a validated Manifest."""
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Manifest not found: {path}")

    data = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a YAML mapping, got {type(data).__name__}")

    _apply_env(data, os.environ if env is None else env)
    return Manifest.model_validate(data)


def _apply_env(data: dict[str, Any], env: Mapping[str, str]) -> None:
    qdrant = data.get("qdrant") or {}
    if not isinstance(qdrant, dict):
        return
    for var, field in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            qdrant[field] = value
    if qdrant:
        data["qdrant"] = qdrant
