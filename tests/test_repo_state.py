# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Tests for the published-snapshot holder."""

import pytest

from fode.codebase.graph import EntityGraph
from fode.codebase.search import SearchIndex
from fode.errors import NoRepoOpenError
from fode.models import RepoInfo
from fode.repo_state import RepoSnapshot, RepoState, RepoStatus


def make_snapshot(name="repo"):
    info = RepoInfo(
        path=f"/tmp/{name}",
        name=name,
        language="Go",
        total_files=0,
        parsed_files=0,
        total_entities=0,
        module_name=name,
    )
    return RepoSnapshot(graph=EntityGraph([]), info=info, search_index=SearchIndex([]))


class TestRepoState:
    def test_initially_empty(self):
        state = RepoState()
        assert state.status == RepoStatus.EMPTY
        assert state.snapshot is None
        with pytest.raises(NoRepoOpenError):
            state.require_snapshot()

    def test_publish(self):
        state = RepoState()
        token = state.begin_open()
        assert state.status == RepoStatus.PARSING
        snapshot = make_snapshot()
        assert state.publish(token, snapshot)
        assert state.status == RepoStatus.READY
        assert state.require_snapshot() is snapshot

    def test_newer_open_wins(self):
        state = RepoState()
        first = state.begin_open()
        second = state.begin_open()
        newer = make_snapshot("newer")
        assert state.publish(second, newer)
        assert not state.publish(first, make_snapshot("older"))
        assert state.snapshot is newer
        assert state.generation == second

    def test_failure_without_snapshot(self):
        state = RepoState()
        token = state.begin_open()
        error = RuntimeError("boom")
        assert state.fail(token, error)
        assert state.status == RepoStatus.ERROR
        assert state.last_error is error

    def test_failure_keeps_previous_snapshot(self):
        state = RepoState()
        snapshot = make_snapshot()
        state.publish(state.begin_open(), snapshot)
        state.fail(state.begin_open(), RuntimeError("boom"))
        assert state.status == RepoStatus.READY
        assert state.snapshot is snapshot

    def test_stale_failure_ignored(self):
        state = RepoState()
        first = state.begin_open()
        state.begin_open()
        assert not state.fail(first, RuntimeError("late"))
        assert state.status == RepoStatus.PARSING
        assert state.last_error is None
