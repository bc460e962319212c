from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

FFPROBE_TIMEOUT_SECONDS = 10


def probe_duration(media_path: Path, timeout_seconds: int = FFPROBE_TIMEOUT_SECONDS) -> Optional[float]:
    """Container duration in seconds, or None when ffprobe can't tell."""
    try:
        result = subprocess.run(
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(media_path),
            ],
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout_seconds,
        )
    except (FileNotFoundError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as error:
        logger.warning("ffprobe not available for duration check: %s", error)
        return None

    try:
        return float(result.stdout.strip())
    except ValueError:
        return None
