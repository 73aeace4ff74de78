"""
Export of step outputs to the pipeline environment.
"""

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

DOWNLOADED_FILES_DIR_KEY = "VDTESTING_DOWNLOADED_FILES_DIR"


def export_environment(key: str, value: str) -> bool:
    """
    Expose `key=value` to the following pipeline steps through envman.

    Returns:
        True if the value was exported
    """
    envman = shutil.which("envman")
    if envman is None:
        logger.warning(f"Failed to export environment ({key}), error: envman not found in PATH")
        return False

    try:
        subprocess.run([envman, "add", "--key", key, "--value", value], check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Failed to export environment ({key}), error: {e}")
        return False
    return True
