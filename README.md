# webserv

A small HTTP/1.1 server built on one readiness-selector event loop. It
serves static files, lists directories when asked to, answers configured
redirects, uses custom error pages and keeps connections alive. Its
configuration file is written in an nginx-like syntax. It needs nothing
beyond the Python standard library (3.10 or later).

## Running

```
webserv [configuration_file]
```

With no argument, `config/default.conf` is read. `webserv -h` (or
`--help`) prints usage; more than one argument is an error (exit status 1).
If the configuration cannot be read or is invalid, the error is logged and
the exit status is 1.

Log lines look like `[2025-01-01 12:00:00] [INFO] message`. They go to
standard output and are appended to `webserv.log` in the working directory.
SIGINT or SIGTERM stops the server; SIGPIPE is ignored while it runs.

## Configuration

```
server {
    listen 127.0.0.1:8080;
    server_name localhost;
    root ./www;
    index index.html;
    client_max_body_size 1048576;
    error_page 404 /errors/404.html;

    location /files {
        allowed_methods GET;
        root ./www/files;
        autoindex on;
    }

    location /old {
        return 301 /new;
    }
}
```

- A server block opens with `server {` (or `server{`), or with `server`
  and a `{` alone on the next line. A location opens with
  `location <path> {` on one line. A closing `}` stands on its own line.
- Server directives: `listen` (a port or `host:port`; default
  `0.0.0.0:8080`), `server_name`, `root`, `index`, `client_max_body_size`,
  `error_page <codes...> <page>`.
- Location directives: `allowed_methods`, `root`, `autoindex on|off`,
  `index`, `upload_path`, `return <code> <url>`,
  `cgi_extension <ext> <handler>`.
- A trailing `;` is optional. Everything after `#` on a line is a comment.
  Unknown directives are ignored.
- The file must hold at least one server, and every server's port must be
  between 1 and 65535. Any other problem raises
  `webserv.config_parser.ConfigError`, with the file name and line number.

## Behaviour

- The longest matching `location` wins; a location matches its own path
  and anything below it, and `/` matches everything.
- A location with `return` answers 301 with a `Location` header.
- Without a matching location, GET, POST and DELETE are accepted; with
  one, its `allowed_methods` apply (an empty list allows all). A method
  that is not allowed answers 405.
- GET maps the path onto the location's `root` (or the server's), with the
  location prefix removed. Paths containing `..` answer 403, missing files
  404. Files are served with a content type chosen from the extension
  (html, css, js, json, txt, png, jpg, gif, ico; otherwise
  `application/octet-stream`). A directory is served through the first
  existing index file, location ones first, then listed if `autoindex` is
  on, and otherwise refused with 403.
- POST and DELETE answer 501; any other method answers 405.
- Error pages come from `error_page`; a path starting with `/` is also
  tried relative to the working directory. Without one, a short HTML page
  is generated.
- Connections stay open after HTTP/1.1 requests unless the client sends
  `Connection: close`, and after HTTP/1.0 ones only with
  `Connection: keep-alive`. Connections idle for 30 seconds are closed.
- Each server block gets its own listening socket; a block whose address
  cannot be bound is skipped with a warning, and the server fails to start
  only if no socket could be opened.

## What it does not do

- CGI is not run: `cgi_extension` is read into `Route.cgi_extensions` but
  no script is ever executed.
- Uploads are not stored: `upload_path` is read but POST only answers 501.
- `client_max_body_size` is read but not enforced.
- `server_name` does not select between servers; requests are served by
  the server whose socket accepted them.
- Chunked request bodies are recognised as complete but not decoded.
- HEAD, PUT and other methods are not served.

## Using it as a library

```python
from webserv.config_parser import ConfigParser
from webserv.server import Server

server = Server()
for config in ConfigParser("site.conf").parse():
    server.add_server_config(config)
server.init()
server.run()
```

`Server.load_config(path)` does the same in one step. `Server.stop()` ends
the loop and closes every socket.

Smaller pieces can be used on their own:

- `webserv.http_request.HttpRequest` parses request bytes incrementally
  (`append_data`, `is_complete`, `header`, `path`, `keep_alive`).
- `webserv.http_response.HttpResponse` builds response bytes (`set_status`,
  `add_header`, `set_cookie`, `build`); headers are written sorted by name
  and `Content-Length` is set from the body.
- `webserv.request_handler.RequestHandler` fills a response for a request
  and a `webserv.server_config.ServerConfig`.
- `webserv.logger.get_logger()` returns the shared `Logger`.

## Tests

```
pip install -e .[test]
pytest
```