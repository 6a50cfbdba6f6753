"""Runtime settings read from environment variables.

    AAVA_API_BASE_URL   Backend base URL (default http://localhost:8000)
    AAVA_DEMO_MODE      "true" to run fully offline
    AAVA_TIMEOUT        Backend request timeout in seconds (default 30)
    AAVA_USER_ID        User id used by the CLI (default demo-user)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from aavaverify.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from aavaverify.service import Mode


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_BASE_URL
    demo_mode: bool = False
    timeout: float = DEFAULT_TIMEOUT
    user_id: str = "demo-user"

    @property
    def mode(self) -> Mode:
        return Mode.OFFLINE if self.demo_mode else Mode.ONLINE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ
        timeout_raw = env.get("AAVA_TIMEOUT", "")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"AAVA_TIMEOUT must be a number, got {timeout_raw!r}") from None
        return cls(
            api_base_url=env.get("AAVA_API_BASE_URL") or DEFAULT_BASE_URL,
            demo_mode=env.get("AAVA_DEMO_MODE", "").strip().lower() == "true",
            timeout=timeout,
            user_id=env.get("AAVA_USER_ID") or "demo-user",
        )
