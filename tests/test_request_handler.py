import pytest

from webserv.http_request import HttpRequest
from webserv.http_response import HttpResponse
from webserv.request_handler import RequestHandler, mime_from_extension
from webserv.route import Route
from webserv.server_config import ServerConfig


def make_request(method, uri):
    request = HttpRequest()
    request.parse(f"{method} {uri} HTTP/1.1\r\nHost: localhost\r\n\r\n")
    return request


def run(config, method, uri):
    response = HttpResponse()
    handler = RequestHandler(make_request(method, uri), response, config)
    handler.handle()
    return handler, response


@pytest.fixture
def site(tmp_path):
    (tmp_path / "page.html").write_bytes(b"<p>page</p>")
    (tmp_path / "data.bin").write_bytes(b"\x00\x01\x02")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "a.txt").write_text("a")
    return tmp_path


def test_serves_static_file(site):
    _, response = run(ServerConfig(root=str(site)), "GET", "/page.html")
    assert response.status_code == 200
    assert response.body == b"<p>page</p>"
    assert response.headers["Content-Type"] == "text/html"


def test_unknown_extension_is_octet_stream(site):
    _, response = run(ServerConfig(root=str(site)), "GET", "/data.bin")
    assert response.body == b"\x00\x01\x02"
    assert response.headers["Content-Type"] == "application/octet-stream"


def test_missing_file_is_404(site):
    _, response = run(ServerConfig(root=str(site)), "GET", "/nope.html")
    assert response.status_code == 404
    assert b"404 Not Found" in response.body
    assert response.headers["Content-Type"] == "text/html"


def test_parent_traversal_is_403(site):
    _, response = run(ServerConfig(root=str(site)), "GET", "/../page.html")
    assert response.status_code == 403


def test_directory_without_autoindex_is_403(site):
    _, response = run(ServerConfig(root=str(site)), "GET", "/docs")
    assert response.status_code == 403
    assert b"Forbidden" in response.body


def test_directory_listing(site):
    config = ServerConfig(root=str(site), routes=[Route("/", autoindex=True)])
    _, response = run(config, "GET", "/docs")
    assert response.status_code == 200
    assert b'<a href="a.txt">a.txt</a>' in response.body
    assert b'<a href="..">..</a>' in response.body
    assert b'<a href=".">' not in response.body
    assert b"Index of /docs" in response.body


def test_server_index_file(site):
    config = ServerConfig(root=str(site), index=["missing.html", "page.html"])
    _, response = run(config, "GET", "/")
    assert response.status_code == 200
    assert response.body == b"<p>page</p>"


def test_route_index_takes_precedence(site):
    (site / "docs" / "home.html").write_text("home")
    route = Route("/", index=["home.html"])
    config = ServerConfig(root=str(site), index=["a.txt"], routes=[route])
    _, response = run(config, "GET", "/docs/")
    assert response.body == b"home"


def test_route_prefix_stripped_and_root_used(site):
    assets = site / "assets"
    assets.mkdir()
    (assets / "style.css").write_text("body {}")
    config = ServerConfig(root=str(site), routes=[Route("/static", root=str(assets) + "/")])
    handler, response = run(config, "GET", "/static/style.css")
    assert handler.route is config.routes[0]
    assert response.body == b"body {}"
    assert response.headers["Content-Type"] == "text/css"


def test_redirect(site):
    config = ServerConfig(root=str(site), routes=[Route("/old", redirect="/new")])
    _, response = run(config, "GET", "/old/thing")
    assert response.status_code == 301
    assert response.headers["Location"] == "/new"
    assert response.body == b"<html><body><h1>301 Moved Permanently</h1></body></html>"


def test_method_not_allowed_by_route(site):
    config = ServerConfig(root=str(site), routes=[Route("/", allowed_methods=["POST"])])
    _, response = run(config, "GET", "/page.html")
    assert response.status_code == 405


@pytest.mark.parametrize("method", ["POST", "DELETE"])
def test_post_and_delete_not_implemented(site, method):
    _, response = run(ServerConfig(root=str(site)), method, "/page.html")
    assert response.status_code == 501
    assert b"Not Implemented" in response.body


@pytest.mark.parametrize("method", ["PUT", "HEAD"])
def test_other_methods_rejected(site, method):
    _, response = run(ServerConfig(root=str(site)), method, "/page.html")
    assert response.status_code == 405


def test_allowed_but_unhandled_method_is_405(site):
    config = ServerConfig(root=str(site), routes=[Route("/")])
    _, response = run(config, "PUT", "/page.html")
    assert response.status_code == 405


def test_custom_error_page(site):
    page = site / "err404.html"
    page.write_bytes(b"custom missing")
    config = ServerConfig(root=str(site), error_pages={404: str(page)})
    _, response = run(config, "GET", "/nothing")
    assert response.status_code == 404
    assert response.body == b"custom missing"


def test_error_page_relative_to_working_directory(site, monkeypatch):
    (site / "errs").mkdir()
    (site / "errs" / "forbidden.html").write_bytes(b"relative page")
    monkeypatch.chdir(site)
    config = ServerConfig(root=str(site), error_pages={403: "/errs/forbidden.html"})
    _, response = run(config, "GET", "/docs")
    assert response.status_code == 403
    assert response.body == b"relative page"


def test_unreadable_error_page_falls_back(site):
    config = ServerConfig(root=str(site), error_pages={404: str(site / "absent.html")})
    _, response = run(config, "GET", "/nothing")
    assert b"404 Not Found" in response.body


def test_handle_error_directly(site):
    response = HttpResponse()
    handler = RequestHandler(make_request("GET", "/"), response, ServerConfig(root=str(site)))
    handler.handle_error(500)
    assert response.status_code == 500
    assert b"500 Internal Server Error" in response.body


@pytest.mark.parametrize(
    "ext, expected",
    [
        ("html", "text/html"),
        ("htm", "text/html"),
        ("css", "text/css"),
        ("js", "application/javascript"),
        ("json", "application/json"),
        ("txt", "text/plain"),
        ("png", "image/png"),
        ("jpg", "image/jpeg"),
        ("jpeg", "image/jpeg"),
        ("gif", "image/gif"),
        ("ico", "image/x-icon"),
        ("exe", "application/octet-stream"),
        ("", "application/octet-stream"),
    ],
)
def test_mime_from_extension(ext, expected):
    assert mime_from_extension(ext) == expected