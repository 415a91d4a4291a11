"""Plugin module test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from aidesigner.llm.conftest import MockCompletionProvider
from aidesigner.session import InMemorySessionStore

from .lib import PluginController


class Outbox(list):
    """Messages posted to the UI, in order."""

    def of_type(self, kind: str) -> list[dict[str, Any]]:
        return [message for message in self if message["type"] == kind]

    @property
    def types(self) -> list[str]:
        return [message["type"] for message in self]


@pytest.fixture
def outbox() -> Outbox:
    return Outbox()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def scripted_provider() -> MockCompletionProvider:
    """Provider handed out by the controller's factory."""
    return MockCompletionProvider()


@pytest.fixture
def controller(kit_host, store, outbox, scripted_provider) -> PluginController:
    """Controller over the component kit with a scripted provider."""
    return PluginController(
        kit_host,
        store,
        outbox.append,
        provider_factory=lambda api_key: scripted_provider,
    )
