"""Shared pytest fixtures for test modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pitch_counter.repos.game_repo import LocalGameRepo
from pitch_counter.services.session import SessionController
from pitch_counter.sync.replicator import Replicator
from tests.fakes.stores import FakeSyncChannel, InMemoryKeyValueStore
from tests.helpers import SequentialIds, StepClock

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repo(store: InMemoryKeyValueStore) -> LocalGameRepo:
    return LocalGameRepo(store)


@pytest.fixture
def channel() -> FakeSyncChannel:
    return FakeSyncChannel()


@pytest.fixture
def controller(repo: LocalGameRepo) -> Generator[SessionController]:
    """A local-only controller with a fixed game code and deterministic ids and clock."""
    session = SessionController.load(
        repo,
        Replicator(None),
        clock=StepClock(),
        id_factory=SequentialIds(),
        rng=lambda low, high: 123456,
    )
    yield session
    session.close()


@pytest.fixture
def synced_controller(repo: LocalGameRepo, channel: FakeSyncChannel) -> Generator[SessionController]:
    """A controller replicating inline to an in-memory remote store."""
    session = SessionController.load(
        repo,
        Replicator(channel, background=False),
        clock=StepClock(),
        id_factory=SequentialIds(),
        rng=lambda low, high: 123456,
    )
    yield session
    session.close()
