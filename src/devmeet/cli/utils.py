"""CLI utilities"""
import os
from pathlib import Path


def use_instance_path(path: str | None) -> Path | None:
    """Point the backend settings at an instance directory

    Must run before anything under ``devmeet.backend`` is imported, since
    settings are read once at import time.

    Args:
        path: Instance directory path, or None to keep the environment

    Returns:
        Resolved path if one was given
    """
    if not path:
        return None
    instance_path = Path(path).expanduser().resolve()
    os.environ["DEVMEET_INSTANCE_PATH"] = str(instance_path)
    return instance_path
