#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Eligibility filter: decides whether a discovered file is worth optimizing.
"""

import time
from typing import Callable, NamedTuple, Optional

from ..config import EligibilityConfig
from ..models.candidate import Candidate


class Eligibility(NamedTuple):
    eligible: bool
    original_mtime: Optional[float]


def is_eligible(candidate: Candidate, config: EligibilityConfig,
                now: Optional[float] = None) -> Eligibility:
    """
    Check a candidate against the size floor and age ceiling.

    Returns the candidate's modification time when accepted so it can be
    restored after an in-place transform.
    """
    if config.min_size is not None and candidate.size < config.min_size:
        return Eligibility(False, None)

    if config.max_age is not None:
        now = time.time() if now is None else now
        if now - candidate.mtime > config.max_age:
            return Eligibility(False, None)

    return Eligibility(True, candidate.mtime)


class EligibilityFilter:
    """Eligibility predicate bound to one config and clock."""

    def __init__(self, config: EligibilityConfig, clock: Callable[[], float] = time.time):
        self.config = config
        self.clock = clock

    def check(self, candidate: Candidate) -> Eligibility:
        return is_eligible(candidate, self.config, now=self.clock())

    def __call__(self, candidate: Candidate) -> bool:
        return self.check(candidate).eligible
