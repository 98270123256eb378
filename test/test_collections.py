from __future__ import annotations

import pytest

from httpmessages._collections import (
    HTTPHeaderDict,
    normalize_header_value,
    validate_header_name,
    validate_header_value,
)
from httpmessages.exceptions import InvalidArgumentError, InvalidHeader


@pytest.fixture()
def d() -> HTTPHeaderDict:
    return HTTPHeaderDict(Cookie="foo").add("cookie", "bar")


class TestHTTPHeaderDict:
    def test_create_from_kwargs(self) -> None:
        h = HTTPHeaderDict(ab=1, cd=2, ef=3, gh=4)
        assert len(h) == 4
        assert "ab" in h

    def test_create_from_dict(self) -> None:
        h = HTTPHeaderDict(dict(ab=1, cd=2, ef=3, gh=4))
        assert len(h) == 4
        assert "ab" in h

    def test_create_from_iterator(self) -> None:
        teststr = "httpmessagesrock"
        h = HTTPHeaderDict((c, c * 5) for c in teststr)
        assert len(h) == len(set(teststr))

    def test_create_from_list(self) -> None:
        headers = [
            ("ab", "A"),
            ("cd", "B"),
            ("cookie", "C"),
            ("cookie", "D"),
            ("cookie", "E"),
        ]
        h = HTTPHeaderDict(headers)
        assert len(h) == 3
        assert "ab" in h
        clist = h.getlist("cookie")
        assert len(clist) == 3
        assert clist[0] == "C"
        assert clist[-1] == "E"

    def test_create_from_headerdict(self, d: HTTPHeaderDict) -> None:
        h = HTTPHeaderDict(d)
        assert h == d
        assert h.getlist("cookie") == ["foo", "bar"]

    def test_create_from_list_values(self) -> None:
        h = HTTPHeaderDict({"Accept": ["text/html", "text/plain"]})
        assert h.getlist("accept") == ["text/html", "text/plain"]

    def test_numbers_are_stringified(self) -> None:
        h = HTTPHeaderDict({"Content-Length": 42, "X-Ratio": 0.5})
        assert h["content-length"] == "42"
        assert h.getlist("x-ratio") == ["0.5"]

    def test_getitem(self, d: HTTPHeaderDict) -> None:
        assert d["cookie"] == "foo, bar"
        assert d["COOKIE"] == "foo, bar"
        with pytest.raises(KeyError):
            d["Content-Type"]

    def test_set_replaces_values(self, d: HTTPHeaderDict) -> None:
        h = d.set("COOKIE", "baz")
        assert h.getlist("cookie") == ["baz"]
        assert d.getlist("cookie") == ["foo", "bar"]

    def test_set_keeps_casing_and_position(self) -> None:
        h = HTTPHeaderDict([("Content-Type", "text/html"), ("Accept", "*/*")])
        h = h.set("CONTENT-TYPE", "text/plain")
        assert list(h) == ["Content-Type", "Accept"]

    def test_add_is_a_copy(self, d: HTTPHeaderDict) -> None:
        h = d.add("Cookie", ["baz", "qux"])
        assert h.getlist("cookie") == ["foo", "bar", "baz", "qux"]
        assert d.getlist("cookie") == ["foo", "bar"]

    def test_add_new_key(self, d: HTTPHeaderDict) -> None:
        h = d.add("X-Foo", "bar")
        assert list(h) == ["Cookie", "X-Foo"]

    def test_remove(self, d: HTTPHeaderDict) -> None:
        h = d.remove("COOKIE")
        assert "cookie" not in h
        assert "cookie" in d

    def test_remove_missing_key(self, d: HTTPHeaderDict) -> None:
        assert d.remove("X-Missing") == d

    @pytest.mark.parametrize("key", [None, 1, ""])
    def test_remove_invalid_key(self, d: HTTPHeaderDict, key: object) -> None:
        with pytest.raises(InvalidHeader):
            d.remove(key)  # type: ignore[arg-type]

    def test_getlist_non_string_key(self, d: HTTPHeaderDict) -> None:
        assert d.getlist(None) == []  # type: ignore[arg-type]

    def test_getlist_missing(self, d: HTTPHeaderDict) -> None:
        assert d.getlist("X-Missing") == []

    def test_line(self, d: HTTPHeaderDict) -> None:
        assert d.line("cookie") == "foo, bar"
        assert d.line("x-missing") == ""

    def test_contains(self, d: HTTPHeaderDict) -> None:
        assert "COOKIE" in d
        assert 1 not in d  # type: ignore[comparison-overlap]

    def test_equal(self, d: HTTPHeaderDict) -> None:
        b = HTTPHeaderDict(cookie="foo, bar")
        c = [("cookie", "foo, bar")]
        assert d == b
        assert d == HTTPHeaderDict(c)
        assert d == {"COOKIE": "foo, bar"}
        assert d != 2

    def test_not_equal(self, d: HTTPHeaderDict) -> None:
        b = HTTPHeaderDict(cookie="foo, bar")
        c = HTTPHeaderDict(cookie="baz")
        assert not (d != b)
        assert d != c
        assert d != {"": ["invalid"]}

    def test_unhashable(self, d: HTTPHeaderDict) -> None:
        with pytest.raises(TypeError):
            hash(d)

    def test_iter_preserves_first_casing(self) -> None:
        h = HTTPHeaderDict([("X-Foo", "a"), ("x-foo", "b"), ("X-BAR", "c")])
        assert list(h) == ["X-Foo", "X-BAR"]

    def test_iteritems(self, d: HTTPHeaderDict) -> None:
        assert list(d.iteritems()) == [("Cookie", "foo"), ("Cookie", "bar")]

    def test_itermerged(self, d: HTTPHeaderDict) -> None:
        assert list(d.itermerged()) == [("Cookie", "foo, bar")]

    def test_as_dict_is_a_copy(self, d: HTTPHeaderDict) -> None:
        as_dict = d.as_dict()
        assert as_dict == {"Cookie": ["foo", "bar"]}
        as_dict["Cookie"].append("baz")
        assert d.getlist("cookie") == ["foo", "bar"]

    def test_repr(self) -> None:
        h = HTTPHeaderDict(Accept="*/*")
        assert repr(h) == "HTTPHeaderDict({'Accept': '*/*'})"

    @pytest.mark.parametrize(
        "headers",
        [
            {"": "value"},
            [(None, "value")],
            {"X-Empty": []},
            {"X-Nested": [["a"]]},
            {"X-None": None},
            {"X-Bool": True},
        ],
    )
    def test_invalid_construction(self, headers: object) -> None:
        with pytest.raises(InvalidHeader):
            HTTPHeaderDict(headers)  # type: ignore[arg-type]


class TestValidation:
    @pytest.mark.parametrize("name", ["", None, 1, b"Host"])
    def test_invalid_name(self, name: object) -> None:
        with pytest.raises(InvalidHeader):
            validate_header_name(name)

    @pytest.mark.parametrize("value", ["text/html", 1, 1.5, ["a", 2], ("a",)])
    def test_valid_value(self, value: object) -> None:
        validate_header_value(value)

    @pytest.mark.parametrize("value", [None, [], (), [None], {"a": "b"}, False])
    def test_invalid_value(self, value: object) -> None:
        with pytest.raises(InvalidHeader):
            validate_header_value(value)

    def test_invalid_header_is_an_invalid_argument(self) -> None:
        with pytest.raises(InvalidArgumentError):
            validate_header_name("")
        with pytest.raises(ValueError):
            validate_header_name("")

    def test_normalize(self) -> None:
        assert normalize_header_value(3) == ["3"]
        assert normalize_header_value(("a", 1)) == ["a", "1"]
