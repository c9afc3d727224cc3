#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exceptions that abort a run before any file is processed.
"""


class MediaOptimizerError(Exception):
    """Base class for fatal startup errors."""


class ConfigurationError(MediaOptimizerError):
    """Invalid or out-of-range configuration value."""


class MissingDirectoryError(MediaOptimizerError):
    """A directory required by the selected mode does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"{path} directory not found. Please make sure you have mounted it.")
