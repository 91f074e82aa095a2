"""Shared utilities."""

from __future__ import annotations

from .time import Clock, parse_github_datetime, utcnow

__all__ = ["Clock", "parse_github_datetime", "utcnow"]
