from __future__ import annotations

import pytest

from reentry import RegionBoundaryError, RegionFrameStack, RegistrationList, SuspensionToken


class TestRegionFrameStack:
    def test_push_returns_token_with_depth(self):
        stack = RegionFrameStack()
        first = stack.push(RegistrationList())
        second = stack.push(RegistrationList())

        assert first.depth == 1
        assert second.depth == 2
        assert stack.depth == 2
        assert stack.peek().token == second

    def test_pop_returns_saved_list(self):
        stack = RegionFrameStack()
        saved = RegistrationList()
        saved.append("a")
        token = stack.push(saved)

        assert stack.pop(token) is saved
        assert stack.depth == 0
        assert stack.peek() is None

    def test_pop_with_outer_token_is_rejected(self):
        stack = RegionFrameStack()
        outer = stack.push(RegistrationList())
        inner = stack.push(RegistrationList())

        with pytest.raises(RegionBoundaryError) as excinfo:
            stack.pop(outer)

        assert excinfo.value.expected == inner
        assert excinfo.value.actual == outer
        assert stack.depth == 2

    def test_pop_on_empty_stack_is_rejected(self):
        stack = RegionFrameStack()
        with pytest.raises(RegionBoundaryError, match="no suspended region"):
            stack.pop(SuspensionToken(depth=1))

    def test_stale_token_of_same_depth_does_not_match(self):
        stack = RegionFrameStack()
        stale = stack.push(RegistrationList())
        stack.pop(stale)
        stack.push(RegistrationList())

        with pytest.raises(RegionBoundaryError):
            stack.pop(stale)

    def test_iteration_is_innermost_first(self):
        stack = RegionFrameStack()
        tokens = [stack.push(RegistrationList()) for _ in range(3)]
        assert [frame.token for frame in stack] == list(reversed(tokens))
        assert len(stack) == 3
