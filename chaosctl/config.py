"""Client configuration, read from the environment."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

DEFAULT_URL = "http://127.0.0.1:2333/api/graphql"


class CtrlConfig(BaseModel):
    """Settings for talking to the control-plane query service."""

    url: str = DEFAULT_URL
    timeout: float = Field(default=10.0, gt=0)
    completion_depth: int = Field(default=6, ge=1)
    headers: dict[str, str] = Field(default_factory=lambda: dict[str, str]())

    @classmethod
    def from_env(cls, **overrides: object) -> CtrlConfig:
        """Build a config from ``CHAOSCTL_*`` variables; explicit overrides win.

        ``None`` overrides are ignored so CLI options can be passed through
        unconditionally.
        """
        values: dict[str, object] = {}
        env_map = {
            "url": "CHAOSCTL_URL",
            "timeout": "CHAOSCTL_TIMEOUT",
            "completion_depth": "CHAOSCTL_COMPLETION_DEPTH",
        }
        for key, env_name in env_map.items():
            raw = os.environ.get(env_name)
            if raw:
                values[key] = raw
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return cls.model_validate(values)
