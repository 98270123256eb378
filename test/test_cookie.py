from __future__ import annotations

import datetime

import pytest

from httpmessages.cookie import SAME_SITE_POLICIES, Cookie
from httpmessages.exceptions import InvalidCookie

UTC = datetime.timezone.utc


class TestCookie:
    def test_minimal(self) -> None:
        assert str(Cookie("id", "1")) == "id=1"
        assert str(Cookie("id")) == "id="

    def test_max_age_and_secure(self) -> None:
        assert str(Cookie("id", "1", max_age=3600, secure=True)) == (
            "id=1; MaxAge=3600; Secure"
        )

    def test_max_age_zero_is_rendered(self) -> None:
        assert str(Cookie("id", "1", max_age=0)) == "id=1; MaxAge=0"

    def test_every_clause_in_order(self) -> None:
        cookie = Cookie(
            "id",
            "1",
            max_age=60,
            expires=0,
            path="/app",
            domain="example.com",
            secure=True,
            http_only=True,
            same_site="Strict",
        )
        assert str(cookie) == (
            "id=1; MaxAge=60; Expires=Thu, 01 Jan 1970 00:00:00 GMT; "
            "Domain=example.com; Path=/app; SameSite=Strict; Secure; HttpOnly"
        )

    def test_expires_timestamp(self) -> None:
        cookie = Cookie("id", "1", expires=86400)
        assert cookie.expires == datetime.datetime(1970, 1, 2, tzinfo=UTC)

    def test_expires_is_normalized_to_utc(self) -> None:
        tz = datetime.timezone(datetime.timedelta(hours=-3))
        cookie = Cookie("id", "1", expires=datetime.datetime(2030, 1, 1, 21, tzinfo=tz))
        assert cookie.expires == datetime.datetime(2030, 1, 2, 0, tzinfo=UTC)
        assert cookie.expires.tzinfo is UTC
        assert str(cookie) == "id=1; Expires=Wed, 02 Jan 2030 00:00:00 GMT"

    def test_naive_expires_is_local_time(self) -> None:
        naive = datetime.datetime(2030, 6, 1, 12, 0)
        cookie = Cookie("id", "1", expires=naive)
        assert cookie.expires == naive.astimezone(UTC)

    @pytest.mark.parametrize("expires", ["tomorrow", 1.5, True, datetime.date(2030, 1, 1)])
    def test_invalid_expires(self, expires: object) -> None:
        with pytest.raises(InvalidCookie):
            Cookie("id", "1", expires=expires)  # type: ignore[arg-type]
        with pytest.raises(InvalidCookie):
            Cookie("id", "1").with_expires(expires)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "expires",
        [
            10**20,
            -(10**20),
            datetime.datetime.max.replace(
                tzinfo=datetime.timezone(datetime.timedelta(hours=-1))
            ),
            datetime.datetime.min.replace(
                tzinfo=datetime.timezone(datetime.timedelta(hours=1))
            ),
        ],
    )
    def test_out_of_range_expires(self, expires: object) -> None:
        with pytest.raises(InvalidCookie):
            Cookie("id", "1", expires=expires)  # type: ignore[arg-type]
        with pytest.raises(InvalidCookie):
            Cookie("id", "1").with_expires(expires)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "name",
        ["", "a b", "a;b", "a=b", "a,b", "(a)", "<a>", "a:b", "{a}", 'a"b', "a/b",
         "[a]", "a?b", "a\\b", "a\tb", "a\x00b", "a\x7fb", None, 1],
    )
    def test_invalid_name(self, name: object) -> None:
        with pytest.raises(InvalidCookie):
            Cookie(name)  # type: ignore[arg-type]
        with pytest.raises(InvalidCookie):
            Cookie("id").with_name(name)  # type: ignore[arg-type]

    @pytest.mark.parametrize("name", ["id", "session_id", "X-Token", "a.b", "a!b"])
    def test_valid_name(self, name: str) -> None:
        assert Cookie(name).name == name

    @pytest.mark.parametrize("same_site", SAME_SITE_POLICIES)
    def test_valid_same_site(self, same_site: str) -> None:
        assert Cookie("id").with_same_site(same_site).same_site == same_site

    @pytest.mark.parametrize("same_site", ["strict", "LAX", "none", "Other", None])
    def test_invalid_same_site(self, same_site: object) -> None:
        with pytest.raises(InvalidCookie):
            Cookie("id", same_site=same_site)  # type: ignore[arg-type]

    @pytest.mark.parametrize("domain", ["", "example.com", "sub.example.com", "127.0.0.1"])
    def test_valid_domain(self, domain: str) -> None:
        assert Cookie("id").with_domain(domain).domain == domain

    @pytest.mark.parametrize("domain", ["exa mple.com", "-example.com", "bad_host", None])
    def test_invalid_domain(self, domain: object) -> None:
        with pytest.raises(InvalidCookie):
            Cookie("id").with_domain(domain)  # type: ignore[arg-type]

    @pytest.mark.parametrize("max_age", ["60", 1.5, True])
    def test_invalid_max_age(self, max_age: object) -> None:
        with pytest.raises(InvalidCookie):
            Cookie("id").with_max_age(max_age)  # type: ignore[arg-type]

    def test_invalid_value(self) -> None:
        with pytest.raises(InvalidCookie):
            Cookie("id", 1)  # type: ignore[arg-type]

    def test_with_ers(self) -> None:
        cookie = (
            Cookie("id")
            .with_name("session")
            .with_value("abc")
            .with_max_age(10)
            .with_path("/")
            .with_domain("example.com")
            .with_secure(True)
            .with_http_only(True)
            .with_same_site("Lax")
            .with_expires(None)
        )
        assert str(cookie) == (
            "session=abc; MaxAge=10; Domain=example.com; Path=/; SameSite=Lax; "
            "Secure; HttpOnly"
        )

    def test_with_ers_leave_receiver_intact(self) -> None:
        cookie = Cookie("id", "1")
        cookie.with_value("2")
        cookie.with_secure(True)
        assert str(cookie) == "id=1"

    def test_with_max_age_none_removes_clause(self) -> None:
        cookie = Cookie("id", "1", max_age=10).with_max_age(None)
        assert str(cookie) == "id=1"

    def test_equality_and_hash(self) -> None:
        a = Cookie("id", "1", expires=0)
        b = Cookie("id", "1", expires=datetime.datetime(1970, 1, 1, tzinfo=UTC))
        assert a == b
        assert hash(a) == hash(b)
        assert a != Cookie("id", "2", expires=0)
        assert a.with_value("1") == a

    def test_repr(self) -> None:
        assert repr(Cookie("id", "1")) == "Cookie('id=1')"
