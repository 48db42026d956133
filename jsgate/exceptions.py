#!/usr/bin/env python3
"""Exceptions raised inside the gate pipeline."""


class GateError(Exception):
    """Base exception for gate failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FileReadError(GateError):
    """A candidate file could not be read"""

    def __init__(self, path: str, message: str):
        super().__init__(f"Error reading file {path}: {message}")
        self.path = path


class CheckEngineError(GateError):
    """A check engine failed to process its input"""

    def __init__(self, engine: str, message: str):
        super().__init__(f"{engine} failed: {message}")
        self.engine = engine
        self.reason = message


class ConfigError(GateError):
    """Invalid configuration value"""
