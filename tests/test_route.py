import pytest

from webserv.route import Route


def test_defaults():
    route = Route()
    assert route.path == "/"
    assert route.autoindex is False
    assert route.allowed_methods == []
    assert route.redirect == ""


def test_empty_method_list_allows_everything():
    route = Route("/x")
    assert route.is_method_allowed("GET")
    assert route.is_method_allowed("DELETE")


def test_method_list_restricts():
    route = Route("/x", allowed_methods=["GET", "POST"])
    assert route.is_method_allowed("GET")
    assert route.is_method_allowed("POST")
    assert not route.is_method_allowed("DELETE")


def test_cgi_extensions():
    route = Route("/cgi", cgi_extensions={".py": "/usr/bin/python3"})
    assert route.has_cgi_extension(".py")
    assert not route.has_cgi_extension(".php")
    assert route.cgi_handler(".py") == "/usr/bin/python3"
    assert route.cgi_handler(".php") == ""


def test_root_route_matches_everything():
    route = Route("/")
    assert route.matches("/")
    assert route.matches("/anything/at/all")
    assert route.matches("")


@pytest.mark.parametrize(
    "request_path, expected",
    [
        ("/api", True),
        ("/api/", True),
        ("/api/users", True),
        ("/apix", False),
        ("/ap", False),
        ("/other", False),
    ],
)
def test_prefix_matching_respects_segments(request_path, expected):
    assert Route("/api").matches(request_path) is expected


def test_trailing_slash_route():
    route = Route("/api/")
    assert route.matches("/api/")
    assert not route.matches("/api/x")
    assert not route.matches("/api")