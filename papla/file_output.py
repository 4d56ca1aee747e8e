"""Output path resolution and audio file writing."""

import logging
import os
from datetime import datetime, timezone
from typing import Optional

from papla.base import FileOutputError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


def resolve_output_path(
    output_dir: str,
    user_path: Optional[str] = None,
    prefix: str = "tts",
    now: Optional[datetime] = None
) -> str:
    """
    Decide where an audio file should be written.

    An explicit user_path is returned as given. Otherwise the path is
    <output_dir>/<prefix>-<timestamp>.mp3, with the UTC time truncated to
    whole seconds. Two calls with the same prefix within one second
    produce the same path.

    Args:
        output_dir: Directory for generated files
        user_path: Explicit output path, if the caller chose one
        prefix: Purpose tag used as the filename prefix (e.g. 'tts', 'history')
        now: Instant to stamp the filename with (defaults to the current time)

    Returns:
        The resolved file path
    """
    if user_path:
        return user_path

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)

    timestamp = now.strftime(TIMESTAMP_FORMAT)
    return os.path.join(output_dir, f"{prefix}-{timestamp}.mp3")


def write_audio_file(path: str, data: bytes) -> None:
    """
    Write audio bytes to path, creating parent directories as needed.

    An existing file at path is overwritten.

    Raises:
        FileOutputError: If a directory cannot be created or the file cannot be written
    """
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        logger.error("Failed to write audio file %s: %s", path, e)
        raise FileOutputError(path, e) from e

    logger.info("Wrote %d bytes to %s", len(data), path)
