# -*- coding: utf-8 -*-
"""
OS-level helper functions used at startup.
"""

import os
import shutil
from typing import List


def is_root() -> bool:
    """Checks whether the process already runs as root."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def is_shell_available(prefix: List[str]) -> bool:
    """Checks that the first program of the privilege prefix (e.g. `su`, `adb`) is on PATH."""
    if not prefix:
        return shutil.which("sh") is not None
    return shutil.which(prefix[0]) is not None
