from __future__ import annotations

from unixlog.markers import Marker, MarkerManager, get_marker


class TestMarker:
    """Marker hierarchy"""

    def test_instance_of_self_and_ancestors(self) -> None:
        security = Marker("SECURITY")
        audit = Marker("AUDIT", security)
        login = Marker("LOGIN", audit)

        assert login.is_instance_of("LOGIN")
        assert login.is_instance_of(audit)
        assert login.is_instance_of("SECURITY")
        assert not audit.is_instance_of("LOGIN")

    def test_cycles_terminate(self) -> None:
        a = Marker("A")
        b = Marker("B", a)
        a.add_parents(b)
        assert a.is_instance_of("B")
        assert not a.is_instance_of("C")

    def test_add_parents_ignores_duplicates(self) -> None:
        parent = Marker("P")
        child = Marker("C", parent)
        child.add_parents(Marker("P"), child)
        assert child.parents == (parent,)

    def test_equality_by_name(self) -> None:
        assert Marker("X") == Marker("X")
        assert len({Marker("X"), Marker("X")}) == 1
        assert str(Marker("X")) == "X"


class TestMarkerManager:
    """Interned markers"""

    def test_same_name_same_instance(self) -> None:
        manager = MarkerManager()
        assert manager.get_marker("SQL") is manager.get_marker("SQL")
        assert manager.exists("SQL")

    def test_late_parents_are_added(self) -> None:
        manager = MarkerManager()
        parent = manager.get_marker("DB")
        child = manager.get_marker("SQL")
        manager.get_marker("SQL", parent)
        assert child.is_instance_of("DB")

    def test_process_wide_helper(self) -> None:
        assert get_marker("test-markers-helper") is get_marker("test-markers-helper")
