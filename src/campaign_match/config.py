"""
Configuration for the match engine.

Values come from pydantic defaults, optionally overlaid by a JSON file, then
by ``CAMPAIGN_MATCH_*`` environment variables.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "CAMPAIGN_MATCH_"


class OpenSearchConfig(BaseModel):
    """OpenSearch connection settings."""
    host: str = Field(default="localhost")
    port: int = Field(default=9200)
    user: str = Field(default="admin")
    password: str = Field(default="")
    use_ssl: bool = Field(default=True)
    verify_certs: bool = Field(default=False)
    timeout: int = Field(default=30)


class IndexConfig(BaseModel):
    """Index names for the three record types."""
    users: str = Field(default="users_v1")
    campaigns: str = Field(default="campaigns_v1")
    applications: str = Field(default="campaign_applications_v1")


class MatchingConfig(BaseModel):
    min_match_score: int = Field(default=60, ge=0, le=100)
    max_candidates: int = Field(default=10000, gt=0)


class AppConfig(BaseModel):
    opensearch: OpenSearchConfig = Field(default_factory=OpenSearchConfig)
    indices: IndexConfig = Field(default_factory=IndexConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)


# env suffix -> (section, key)
_ENV_KEYS = {
    "OPENSEARCH_HOST": ("opensearch", "host"),
    "OPENSEARCH_PORT": ("opensearch", "port"),
    "OPENSEARCH_USER": ("opensearch", "user"),
    "OPENSEARCH_PASSWORD": ("opensearch", "password"),
    "OPENSEARCH_USE_SSL": ("opensearch", "use_ssl"),
    "OPENSEARCH_VERIFY_CERTS": ("opensearch", "verify_certs"),
    "OPENSEARCH_TIMEOUT": ("opensearch", "timeout"),
    "USERS_INDEX": ("indices", "users"),
    "CAMPAIGNS_INDEX": ("indices", "campaigns"),
    "APPLICATIONS_INDEX": ("indices", "applications"),
    "MIN_MATCH_SCORE": ("matching", "min_match_score"),
    "MAX_CANDIDATES": ("matching", "max_candidates"),
}


def _apply_env_overrides(config_dict: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    for suffix, (section, key) in _ENV_KEYS.items():
        name = ENV_PREFIX + suffix
        if name in environ:
            config_dict.setdefault(section, {})[key] = environ[name]
    return config_dict


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build an AppConfig.

    Args:
        path: Optional JSON file with ``opensearch``/``indices``/``matching`` sections.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated configuration. pydantic coerces string env values
        ("9201", "false") to the field types.
    """
    config_dict: Dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as f:
            config_dict = json.load(f) or {}
    config_dict = _apply_env_overrides(config_dict, os.environ if environ is None else environ)
    return AppConfig.model_validate(config_dict)
