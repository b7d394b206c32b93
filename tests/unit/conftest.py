"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from fakes import BASE_SCHEMA, FakeQueryEngine, region_tree

from tabview.pivot.models import Schema
from tabview.pivot.runtime import PagingConfig, PagingPolicy


@pytest.fixture
def base_schema() -> Schema:
    return BASE_SCHEMA


@pytest.fixture
def paging() -> PagingPolicy:
    """Policy with a 10 row margin on both sides of the viewport."""
    return PagingPolicy(PagingConfig(offset_pad=10, limit_pad=10))


@pytest.fixture
def engine() -> FakeQueryEngine:
    """Engine with an empty unpivoted table and a 50 row region pivot."""
    return FakeQueryEngine({(): [], ("region",): region_tree(regions=7, cities_per_region=6)})
