from __future__ import annotations

import pytest

from preview_api.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        cache_enabled=False,
        render_timeout_seconds=1.0,
        navigation_timeout_seconds=0.5,
        rate_limit_total=300,
    )
