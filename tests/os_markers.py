"""Shared pytest markers describing platform coverage."""

from __future__ import annotations

import pytest

OS_AGNOSTIC = pytest.mark.os_agnostic

__all__ = ["OS_AGNOSTIC"]
