"""Contribution report endpoints."""

from __future__ import annotations

from .resources import ContributionsResource, serialize_report

__all__ = ["ContributionsResource", "serialize_report"]
