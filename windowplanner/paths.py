from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "WINDOWPLANNER_HOME"
APP_ENV_CONFIG = "WINDOWPLANNER_CONFIG"


def project_root() -> Path:
    """
    Repository/project root directory.
    Contains windowplanner/, config/, tests/.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    Home for windowplanner settings.
    Override with WINDOWPLANNER_HOME; defaults to the project root.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return project_root()


def config_dir() -> Path:
    return app_home() / "config"


def settings_path() -> Path:
    """
    Scheduler settings file.

    Resolution order:
    1. WINDOWPLANNER_CONFIG env var (explicit override)
    2. <app_home>/config/scheduler.yaml (default)
    """
    if os.environ.get(APP_ENV_CONFIG):
        return Path(os.environ[APP_ENV_CONFIG]).expanduser().resolve()
    return config_dir() / "scheduler.yaml"
