"""CI environment metadata.

Built once at the process boundary and passed by value into the extractor
and renderers. Values are passed through as-is; nothing is validated.

Environment variables (with local-run fallbacks):
    CI_BUILD_ID       local-<epoch ms>
    CI_BUILD_URL      http://localhost
    CI_COMMIT_SHA     unknown
    CI_COMMIT_REF     unknown
    CI_PIPELINE_NAME  Local
"""

import os
from datetime import datetime, timezone
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

BRANCH_PREFIX = "refs/heads/"


def _get(environ: Mapping[str, str], key: str, default: str) -> str:
    # Empty strings count as unset (CI systems often export blank vars)
    return environ.get(key) or default


class EnvironmentMetadata(BaseModel):
    """Who/what/where of the current pipeline run."""

    model_config = ConfigDict(frozen=True)

    build_id: str
    build_url: str = "http://localhost"
    commit_sha: str = "unknown"
    commit_ref: str = "unknown"
    pipeline_name: str = "Local"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> "EnvironmentMetadata":
        env = os.environ if environ is None else environ
        now = now or datetime.now(timezone.utc)
        return cls(
            build_id=_get(env, "CI_BUILD_ID", f"local-{int(now.timestamp() * 1000)}"),
            build_url=_get(env, "CI_BUILD_URL", "http://localhost"),
            commit_sha=_get(env, "CI_COMMIT_SHA", "unknown"),
            commit_ref=_get(env, "CI_COMMIT_REF", "unknown"),
            pipeline_name=_get(env, "CI_PIPELINE_NAME", "Local"),
        )

    @property
    def branch(self) -> str:
        if self.commit_ref.startswith(BRANCH_PREFIX):
            return self.commit_ref[len(BRANCH_PREFIX):]
        return self.commit_ref

    @property
    def short_sha(self) -> str:
        return self.commit_sha[:8]
