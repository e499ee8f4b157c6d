"""Environment utilities for resolving Docker secret files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def load_secret_file_variables() -> List[str]:
    """
    Expose ``KEY_FILE`` secrets as ``KEY`` environment variables.

    Keys that already carry a value are left untouched. Unreadable files are
    logged and skipped so that a missing secret never prevents start-up.

    Returns:
        Names of the variables that were populated from files.
    """

    resolved: List[str] = []
    for key, file_path in list(os.environ.items()):
        if not key.endswith("_FILE") or not file_path:
            continue
        target_key = key[: -len("_FILE")]
        if os.environ.get(target_key):
            continue
        try:
            os.environ[target_key] = Path(file_path).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "env.secret_file.unreadable",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
            continue
        resolved.append(target_key)
    return resolved


load_secret_file_variables()
