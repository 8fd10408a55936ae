from __future__ import annotations

from typing import Dict, List, Union
from urllib.error import HTTPError

import pytest


class FakeFetcher:
    """Serves canned text per URL; exceptions in the table are raised instead."""

    def __init__(self, responses: Dict[str, Union[str, Exception]]) -> None:
        self.responses = responses
        self.calls: List[str] = []

    def __call__(self, url: str, timeout: float) -> str:
        self.calls.append(url)
        value = self.responses.get(url)
        if value is None:
            raise HTTPError(url, 404, "Not Found", None, None)
        if isinstance(value, Exception):
            raise value
        return value


class FakePage:
    """Stands in for a playwright page by answering scripts by keyword."""

    def __init__(self, stacks=None, resources=None, properties=None, restricted=None) -> None:
        self.stacks = stacks or []
        self.resources = resources or []
        self.properties = properties or []
        self.restricted = restricted or []

    def evaluate(self, expression, arg=None):
        if "getEntriesByType" in expression:
            return self.resources
        if "styleSheets" in expression:
            return {"properties": self.properties, "restricted": self.restricted}
        if "fontFamily" in expression:
            return self.stacks
        raise AssertionError(f"unexpected script: {expression[:40]}")


@pytest.fixture
def fake_fetcher():
    return FakeFetcher
