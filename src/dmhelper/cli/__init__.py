#!/usr/bin/env python3
"""
docker-machine-helper CLI package.
"""

from .parsers import build_parser, main
from .utils import build_context, console, custom_style, require_machine

__all__ = [
    "build_context",
    "build_parser",
    "console",
    "custom_style",
    "main",
    "require_machine",
]
