"""Desktop notifications through ``notify-send``."""

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

NOTIFY_COMMAND = "notify-send"
DEFAULT_TIMEOUT_MS = 6000


def send_notification(summary: str, body: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    """Show a desktop notification.

    Failures are logged, never raised.

    Args:
        summary: Notification title.
        body: Notification text.
        timeout_ms: How long the notification stays visible.

    Returns:
        True if the notification was delivered.
    """
    binary = shutil.which(NOTIFY_COMMAND)
    if binary is None:
        logger.warning("%s not found, skipping notification '%s'", NOTIFY_COMMAND, summary)
        return False

    try:
        subprocess.run(
            [binary, "-t", str(timeout_ms), summary, body],
            capture_output=True,
            timeout=5,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Notification '%s' failed: %s", summary, e)
        return False

    return True
