#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Ownership normalization for directories written during a run.
"""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


def chown_recursive(owner: str, directories: Iterable[Path]) -> List[str]:
    """
    Recursively hand ``directories`` to ``owner`` (``user`` or ``user:group``).

    Runs once after all transactions have finished. Directories that do not
    exist are left out.

    Returns:
        The directories passed to ``chown``

    Raises:
        subprocess.CalledProcessError: if ``chown`` fails
    """
    targets = [str(d) for d in directories if Path(d).exists()]
    if not owner or not targets:
        return []

    cmd = ["chown", "-R", owner, *targets]
    logger.info("Setting owner %s on %s", owner, ", ".join(targets))
    subprocess.run(cmd, check=True, capture_output=True, text=True)
    return targets
