"""Shared fixtures for valkit tests."""

import json

import pytest

from valkit.diagnostics import DiagnosticCollector
from valkit.validation import Validator


class CountingValidator(Validator):
    """Test double that records every payload it is asked to check.

    Rejects payloads equal to ``reject``.
    """

    name = "counting"
    summary = "value must not be 'bad'"
    markdown_summary = "value must not be `bad`"

    def __init__(self, reject: str = "bad"):
        self.reject = reject
        self.calls: list = []

    def check(self, payload, collector: DiagnosticCollector) -> None:
        self.calls.append(payload)
        if payload == self.reject:
            collector.add_error("Rejected", f"{payload!r} is not allowed")


@pytest.fixture
def counting_validator():
    """Fresh call-counting validator."""
    return CountingValidator()


@pytest.fixture
def config_file(tmp_path):
    """Write a .valkit.json with configured rules and return its path."""
    config_data = {
        "catalog": {
            "disabled": ["is_uppercase"],
            "rules": [
                {"name": "port_range", "kind": "range", "minimum": 1, "maximum": 65535},
                {"name": "has_env_prefix", "kind": "starts_with", "prefix": "env-"},
                {"name": "tier", "kind": "one_of", "choices": ["dev", "staging", "prod"]},
            ],
        },
        "output": {"format": "table"},
        "logging": {"level": "error"},
    }

    config_path = tmp_path / ".valkit.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f, indent=2)

    return config_path
