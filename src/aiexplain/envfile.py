"""Template for the .env file read by aiexplain.config."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_TEMPLATE = """\
# MySQL connection
host=127.0.0.1
port=3306
username=root
password=
database=

# Seconds to wait for the MySQL handshake
connect_timeout=10

# Chat completion endpoint. Leave ai_api_key empty to skip the AI analysis.
# ai_provider is "openai" (any OpenAI-compatible endpoint) or "anthropic".
ai_provider=openai
ai_api_key=
ai_base_url=
ai_model=gpt-4o-mini
ai_max_tokens=4096
"""


def write_env_template(path: str | Path = ".env", force: bool = False) -> bool:
    """
    Write the .env template.

    Returns False, without touching the file, when it already exists and
    force is not set.
    """
    target = Path(path)
    if target.exists() and not force:
        logger.debug("%s already exists, not overwriting", target)
        return False

    target.write_text(ENV_TEMPLATE, encoding="utf-8")
    return True
