from __future__ import annotations

import pytest

from reentry._vendor import NOTHING, Nothing, Some


class TestMaybe:
    def test_some_is_truthy_and_unwraps(self):
        assert Some("closed")
        assert Some("closed").unwrap() == "closed"

    def test_nothing_is_falsy_singleton(self):
        assert Nothing() is NOTHING
        assert not NOTHING
        with pytest.raises(RuntimeError, match="unwrap on Nothing"):
            NOTHING.unwrap()
