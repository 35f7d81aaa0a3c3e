import pytest

from humptykit.headers import Header, HeaderName, Headers


def test_header_replace_all():
    n = Headers()
    assert len(n) == 0
    n.add("Some", "Header")
    n.add("Another", "Value")
    n.add("Another", "Meep")
    n.add("Mop", "Dop")
    assert list(n) == [
        Header.create("Some", "Header"),
        Header.create("Another", "Value"),
        Header.create("Another", "Meep"),
        Header.create("Mop", "Dop"),
    ]

    removed = n.replace_all("Another", "Friend")
    assert list(n) == [
        Header.create("Some", "Header"),
        Header.create("Mop", "Dop"),
        Header.create("Another", "Friend"),
    ]
    assert removed == [
        Header.create("Another", "Value"),
        Header.create("Another", "Meep"),
    ]


@pytest.mark.parametrize(
    "raw,canonical",
    [
        ("content-type", "Content-Type"),
        ("CONTENT-LENGTH", "Content-Length"),
        ("etag", "ETag"),
        ("te", "TE"),
        ("Set-Cookie", "Set-Cookie"),
        ("proxy-authenticate", "Proxy-Authenticate"),
    ],
)
def test_well_known_names_are_canonicalised(raw, canonical):
    name = HeaderName.parse(raw)
    assert name.is_well_known()
    assert not name.is_custom()
    assert str(name) == canonical
    assert name.well_known_str() == canonical


def test_custom_name_kept_verbatim():
    name = HeaderName.parse("X-Magic")
    assert name.is_custom()
    assert name.well_known_str() is None
    assert str(name) == "X-Magic"


def test_custom_names_compare_case_sensitively():
    assert HeaderName.parse("X-Magic") != HeaderName.parse("x-magic")
    assert HeaderName.parse("Content-Type") == HeaderName.parse("content-type")


def test_constants_match_parsed_names():
    assert HeaderName.CONTENT_TYPE == HeaderName.parse("Content-Type")
    assert HeaderName.ETAG == HeaderName.parse("etag")
    assert HeaderName.LOCATION == HeaderName.parse("LOCATION")


def test_well_known_list_round_trips():
    names = HeaderName.well_known()
    assert all(n.is_well_known() for n in names)
    assert all(HeaderName.parse(str(n).lower()) == n for n in names)
    assert HeaderName.parse("Accept") in names
    assert HeaderName.parse("Proxy-Authenticate") in names


def test_ordering_by_name():
    assert sorted([HeaderName.parse("Via"), HeaderName.parse("Age"), HeaderName.parse("Host")]) == [
        HeaderName.parse("Age"),
        HeaderName.parse("Host"),
        HeaderName.parse("Via"),
    ]


def test_parse_accepts_header_name():
    name = HeaderName.parse("Host")
    assert HeaderName.parse(name) is name


def test_get_is_case_insensitive_for_well_known():
    h = Headers()
    h.add("content-type", "text/html")
    assert h.get("Content-Type") == "text/html"
    assert h.get(HeaderName.CONTENT_TYPE) == "text/html"
    assert h.get("Content-Length") is None


def test_get_returns_first_and_get_all_returns_all():
    h = Headers()
    h.add("Accept", "a")
    h.add("Host", "h")
    h.add("accept", "b")
    assert h.get("Accept") == "a"
    assert h.get_all("ACCEPT") == ["a", "b"]
    assert h.get_all("Missing") == []


def test_set_leaves_exactly_one():
    h = Headers()
    h.add("Via", "1")
    h.add("Host", "h")
    h.add("Via", "2")
    h.set("Via", "3")
    assert h.get_all("Via") == ["3"]
    assert len(h) == 2


def test_try_set():
    h = Headers()
    assert h.try_set("Server", "one") is None
    assert h.try_set("Server", "two") == "one"
    assert h.get_all("Server") == ["one"]


def test_remove():
    h = Headers()
    h.add("Host", "h")
    h.add("Via", "v")
    h.add("host", "h2")
    h.remove("HOST")
    assert [header.value for header in h] == ["v"]


def test_push_existing_header():
    h = Headers()
    header = Header.create("Age", "10")
    h.push(header)
    assert list(h) == [header]
    assert header.name == HeaderName.AGE


def test_replace_all_without_existing_appends():
    h = Headers()
    h.add("Host", "h")
    removed = h.replace_all("Via", "v")
    assert removed == []
    assert list(h) == [Header.create("Host", "h"), Header.create("Via", "v")]