"""Tests for counted maps."""

import pytest

from blueshell import InvalidArgument, Record, create_map, map_count, map_remove, map_set


class TestCreateMap:
    """Test map construction."""

    def test_count_from_spec(self, engine):
        m = create_map({"name": "john", "age": 28}, engine=engine)
        assert map_count(m, engine=engine) == 2
        assert m.get("name") == "john"

    def test_empty(self, engine):
        assert map_count(create_map(engine=engine), engine=engine) == 0

    def test_count_lives_on_delegate(self, engine):
        m = create_map({"a": 1}, engine=engine)
        assert not m.has("count")
        assert engine.get_delegate(m).get("count") == 1

    def test_protoref_not_counted(self, engine):
        m = create_map({"a": 1, "protoRef": "x"}, engine=engine)
        assert map_count(m, engine=engine) == 1

    def test_default_engine(self):
        m = create_map({"a": 1})
        assert map_count(m) == 1


class TestSetRemove:
    """Test count bookkeeping."""

    def test_set_new_key(self, engine):
        m = create_map({"name": "john"}, engine=engine)
        map_set(m, "age", 28, engine=engine)
        assert m.get("age") == 28
        assert map_count(m, engine=engine) == 2

    def test_replace_keeps_count(self, engine):
        m = create_map({"name": "john"}, engine=engine)
        map_set(m, "name", "jane", engine=engine)
        assert m.get("name") == "jane"
        assert map_count(m, engine=engine) == 1

    def test_falsy_value_counted_once(self, engine):
        """An existing field with a falsy value is still an existing field."""
        m = create_map({"flag": False}, engine=engine)
        map_set(m, "flag", True, engine=engine)
        assert map_count(m, engine=engine) == 1

    def test_remove(self, engine):
        m = create_map({"a": 1, "b": 0}, engine=engine)
        assert map_remove(m, "b", engine=engine) is True
        assert not m.has("b")
        assert map_count(m, engine=engine) == 1

    def test_remove_missing(self, engine):
        m = create_map({"a": 1}, engine=engine)
        assert map_remove(m, "zzz", engine=engine) is False
        assert map_count(m, engine=engine) == 1


class TestValidation:
    """Test misuse."""

    def test_not_a_map(self, engine):
        with pytest.raises(InvalidArgument):
            map_count(Record(), engine=engine)
        with pytest.raises(InvalidArgument):
            map_set(engine.classical_create({}), "a", 1, engine=engine)

    def test_reserved_key(self, engine):
        m = create_map({}, engine=engine)
        with pytest.raises(InvalidArgument):
            map_set(m, "protoRef", "x", engine=engine)
        with pytest.raises(InvalidArgument):
            map_remove(m, "protoRef", engine=engine)

    def test_bad_key_leaves_count(self, engine):
        m = create_map({}, engine=engine)
        with pytest.raises(InvalidArgument):
            map_set(m, 3, "x", engine=engine)
        assert map_count(m, engine=engine) == 0
