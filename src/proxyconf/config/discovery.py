"""Settings file discovery.

Walk-up finder locates proxyconf.toml, similar to how git finds .git/.
Supports the PROXYCONF_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "proxyconf.toml"
CONFIG_ENV_VAR = "PROXYCONF_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for proxyconf.toml.

    *start* may be the configuration file being checked; the search then
    begins in its directory. Returns the settings path, or None if not
    found. PROXYCONF_CONFIG takes precedence over the walk.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
