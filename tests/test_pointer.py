import pytest

from jsontools.errors import PointerError
from jsontools.pointer import Pointer, escape_segment, fix_key, resolve, unescape_segment


@pytest.fixture
def doc():
    return {
        "foo": ["bar", "baz"],
        "": 0,
        "a/b": 1,
        "m~n": 8,
        "a": {"b": {"c": "123!ABC"}},
        "nested": [{"x": 1}, {"x": [10, 20]}],
        "nothing": None,
    }


class TestParse:
    def test_segments_and_last(self):
        ptr = Pointer.parse("/a/b/c")
        assert ptr.parts == ("a", "b")
        assert ptr.last == "c"
        assert str(ptr) == "/a/b/c"

    def test_root(self):
        ptr = Pointer.parse("")
        assert ptr.is_root
        assert ptr.parts == ()
        assert ptr.last is None

    def test_slash_is_empty_key(self):
        ptr = Pointer.parse("/")
        assert not ptr.is_root
        assert ptr.last == ""

    def test_unescaping(self):
        assert Pointer.parse("/a~1b~0c").last == "a/b~c"
        assert unescape_segment("~01") == "~1"
        assert unescape_segment("~10") == "/0"

    def test_escape_roundtrip(self):
        assert escape_segment("a/b~c") == "a~1b~0c"
        assert Pointer.from_parts(["a/b~c", 0]).path == "/a~1b~0c/0"
        assert Pointer.from_parts([]).is_root

    def test_missing_leading_slash_fails_lazily(self, doc):
        ptr = Pointer.parse("a/b")
        assert not ptr.well_formed
        assert ptr.exists(doc) is False
        with pytest.raises(PointerError):
            ptr.parent(doc)

    def test_non_string_path(self):
        with pytest.raises(PointerError):
            Pointer.parse(None)


class TestResolution:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/foo", ["bar", "baz"]),
            ("/foo/0", "bar"),
            ("/", 0),
            ("/a~1b", 1),
            ("/m~0n", 8),
            ("/a/b/c", "123!ABC"),
            ("/nested/1/x/0", 10),
        ],
    )
    def test_value_matches_nested_access(self, doc, path, expected):
        assert Pointer.parse(path).value(doc) == expected
        assert Pointer.parse(path).exists(doc)

    def test_root_value(self, doc):
        assert Pointer.parse("").value(doc) is doc
        assert Pointer.parse("").exists(doc)

    def test_parent(self, doc):
        assert Pointer.parse("/a/b/c").parent(doc) == {"c": "123!ABC"}
        assert Pointer.parse("/foo/1").parent(doc) is doc["foo"]

    def test_parent_of_missing_member_is_none(self, doc):
        assert Pointer.parse("/missing/x").parent(doc) is None

    def test_parent_fails_past_missing_member(self, doc):
        with pytest.raises(PointerError):
            Pointer.parse("/missing/x/y").parent(doc)

    def test_parent_fails_on_bad_index(self, doc):
        with pytest.raises(PointerError):
            Pointer.parse("/foo/x/y").parent(doc)
        with pytest.raises(PointerError):
            Pointer.parse("/foo/5/y").parent(doc)

    def test_parent_fails_on_scalar(self, doc):
        with pytest.raises(PointerError):
            Pointer.parse("/a/b/c/d/e").parent(doc)

    def test_root_has_no_parent(self, doc):
        with pytest.raises(PointerError):
            Pointer.parse("").parent(doc)

    def test_exists_never_raises(self, doc):
        assert not Pointer.parse("/missing").exists(doc)
        assert not Pointer.parse("/missing/x/y").exists(doc)
        assert not Pointer.parse("/foo/2").exists(doc)
        assert not Pointer.parse("/foo/-").exists(doc)
        assert not Pointer.parse("/foo/01").exists(doc)
        assert not Pointer.parse("/a/b/c/d").exists(doc)

    def test_null_and_absent_values_look_alike(self, doc):
        assert Pointer.parse("/nothing").value(doc) is None
        assert Pointer.parse("/missing").value(doc) is None
        assert Pointer.parse("/nothing").exists(doc)

    def test_value_with_fail(self, doc):
        assert Pointer.parse("/nothing").value_with_fail(doc) is None
        with pytest.raises(PointerError):
            Pointer.parse("/missing").value_with_fail(doc)
        assert resolve(doc, "/foo/1") == "baz"

    def test_locate(self, doc):
        loc = Pointer.parse("/foo/1").locate(doc)
        assert loc.exists
        assert loc.container is doc["foo"]
        assert loc.key == 1
        missing = Pointer.parse("/foo/9").locate(doc)
        assert not missing.exists
        assert missing.key is None


class TestFixKey:
    def test_array_key_becomes_int(self):
        assert fix_key([1, 2], "1") == 1

    def test_object_key_unchanged(self):
        assert fix_key({"1": 1}, "1") == "1"

    @pytest.mark.parametrize("key", ["2", "-", "x", "-1"])
    def test_invalid_array_keys(self, key):
        with pytest.raises(PointerError):
            fix_key([1, 2], key)

    def test_scalar_container(self):
        with pytest.raises(PointerError):
            fix_key("abc", "0")


class TestWalk:
    def test_walk_yields_each_step(self):
        doc = {"a": {"b": {"c": 123}}}
        steps = list(Pointer.parse("/a/b/c").walk(doc))
        assert steps == [("a", {"b": {"c": 123}}), ("b", {"c": 123}), ("c", 123)]

    def test_walk_stops_at_none(self):
        doc = {"a": {}}
        steps = list(Pointer.parse("/a/b/c/d").walk(doc))
        assert steps == [("a", {}), ("b", None)]

    def test_walk_through_arrays(self):
        doc = {"a": [{"b": 1}]}
        assert list(Pointer.parse("/a/0/b").walk(doc)) == [("a", [{"b": 1}]), ("0", {"b": 1}), ("b", 1)]
