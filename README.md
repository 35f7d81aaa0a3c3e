# humptykit

humptykit provides the parts that a small thread-per-connection HTTP server
is built from. It uses only the Python standard library and runs on Python
3.10 and later.

## Contents

- `humptykit.headers`
  - `HeaderName` is the name of a header. Well-known names such as
    `Content-Type` match without regard to case and are stored in their
    canonical spelling. You can also reach them as class attributes, for
    example `HeaderName.CONTENT_TYPE`. Any other name is a custom name: it is
    kept exactly as given and compared with case.
  - `Header` is one name/value pair.
  - `Headers` is an ordered collection in which names may repeat. It offers
    `add`, `push`, `get`, `get_all`, `set`, `try_set`, `replace_all` and
    `remove`.
- `humptykit.method`
  - `Method` represents the eight standard verbs: `GET`, `HEAD`, `POST`,
    `PUT`, `DELETE`, `OPTIONS`, `TRACE` and `PATCH`.
  - Any other verb becomes a custom method and is upper-cased.
- `humptykit.cookie`
  - `Cookie` is a cookie sent in the request `Cookie` header.
  - `SetCookie` is a cookie set through the response `Set-Cookie` header. Its
    `with_*` methods return modified copies.
  - `SameSite` holds the possible values of the SameSite attribute.
- `humptykit.qvalue`
  - `qvalue_to_str` renders a quality value given in thousandths (0 to 1000)
    as text. For example, 500 gives `"0.5"` and 1000 gives `"1.0"`.
  - A value out of range raises `ValueError`. A value that is not an integer
    raises `TypeError`.
- `humptykit.thread_adapter`
  - `ThreadAdapter` is the interface for starting tasks.
  - `DefaultThreadAdapter` starts one thread per task.
  - `ThreadAdapterJoinHandle.join()` waits for a task to finish. If the task
    raised an exception, `join()` raises it again.
- `humptykit.connector`
  - `Connector` is the lifecycle interface. It has `shutdown`, `join`,
    `shutdown_and_join`, `is_marked_for_shutdown`, `is_shutting_down` and
    `is_shutdown`.
  - `ConnectorMeta` records which kind of connector accepted a connection:
    `TCP`, `TLS_TCP`, `UNIX` or `TLS_UNIX`.
  - `ConnWait` is a progress value that threads can wait on.
- `humptykit.tcp_connector.TcpConnector`, `humptykit.unix_connector.UnixConnector`,
  `humptykit.tls_tcp_connector.TlsTcpConnector` and
  `humptykit.tls_unix_connector.TlsUnixConnector`
  - Each of these listens on a background thread and passes every accepted
    connection to a server object.
- `humptykit.static_files`
  - `serve_file`, `serve_dir`, `serve_as_file_path` and `redirect` each return
    a handler function that produces a `StaticResponse`.
  - `find_path` is the lookup function used by `serve_dir`.

## Install

```
pip install humptykit
```

## Headers, methods and cookies

```python
from humptykit.headers import Headers

headers = Headers()
headers.add("Content-Type", "text/html")
headers.add("X-Magic", "one")
headers.add("X-Magic", "two")

headers.get("content-type")          # "text/html" (well-known names ignore case)
headers.get_all("X-Magic")           # ["one", "two"]
removed = headers.replace_all("X-Magic", "three")
[h.value for h in removed]           # ["one", "two"]
[str(h) for h in headers]            # ["Content-Type: text/html", "X-Magic: three"]
```

```python
from humptykit.method import Method

Method.parse("GET") == Method.GET    # True
Method.parse("query").as_str()       # "QUERY"
Method.parse("query").is_custom()    # True
```

```python
from humptykit.cookie import Cookie, SameSite, SetCookie

header = (
    SetCookie("session", "token")
    .with_path("/")
    .with_same_site(SameSite.LAX)
    .with_http_only(True)
    .to_header()
)
str(header)   # "Set-Cookie: session=token; Path=/; SameSite=Lax; HttpOnly"

str(Cookie.to_header([Cookie("a", "1"), Cookie("b", "2")]))   # "Cookie: a=1; b=2"
Cookie.to_header([])                                          # None
```

## Connectors

A connector passes each connection to a server object that you supply. That
object must provide three methods:

- `is_shutdown()` returns True when the server has stopped. The connector
  checks it and stops accepting connections once it returns True.
- `add_shutdown_hook(hook)` is called once when the connector starts. Your
  server should call `hook()` when it shuts down, so that the connector stops
  too.
- `handle_connection_with_meta(stream, meta)` is called on a worker thread for
  each accepted socket. `meta` is a `ConnectorMeta` value. The connector
  closes the socket after this method returns. If the method raises an
  exception, the connector logs it.

```python
from humptykit.tcp_connector import TcpConnector


class HelloServer:
    def __init__(self):
        self._hooks = []
        self._down = False

    def is_shutdown(self):
        return self._down

    def add_shutdown_hook(self, hook):
        self._hooks.append(hook)

    def shutdown(self):
        self._down = True
        for hook in self._hooks:
            hook()

    def handle_connection_with_meta(self, stream, meta):
        stream.recv(65536)
        body = f"Hello via {meta}"
        stream.sendall(
            f"HTTP/1.1 200 OK\r\nContent-Length: {len(body)}\r\n"
            f"Connection: Close\r\n\r\n{body}".encode()
        )


server = HelloServer()
connector = TcpConnector.start_unpooled("127.0.0.1:8080", server)
# ...
connector.shutdown_and_join(None)   # True once every open connection has finished
```

Starting and stopping:

- Addresses can be given as `"host:port"`, as `"[ipv6]:port"`, or as a
  `(host, port)` tuple.
- `start_unpooled` serves every connection on a new thread. To control how
  threads are created, use `start` and pass your own `ThreadAdapter`.
- Timeouts for `join` and `shutdown_and_join` are in seconds. `None` means
  wait indefinitely.
- `UnixConnector.start_unpooled(path, server)` first removes any file already
  at `path`, then binds to it.
- The TLS connectors take an `ssl.SSLContext`:
  `TlsTcpConnector.start_unpooled(addr, context, server)` and
  `TlsUnixConnector.start_unpooled(path, context, server)`.
  - The context is checked at start. If it is not a context, `TypeError` is
    raised. If it cannot serve the server side of TLS, `ValueError` is raised.
  - The TLS handshake runs on the worker thread, before the server object is
    called.

Connectors report their activity through the standard `logging` module.

## Static file endpoints

Each handler is called with the request path. Handlers that need the route
pattern also take it as a second argument, which defaults to `"/*"`.

```python
from humptykit.static_files import redirect, serve_dir, serve_file

handler = serve_dir("public")
response = handler("/img/logo.png", "/img/*")   # looks up public/logo.png
response.status, response.content_type, response.body

serve_dir("public")("/docs", "/*")   # 301 to "/docs/" if public/docs is a directory
serve_file("public/index.html")()   # always that file, or 404 if it is missing
redirect("/img/ferris.png")().location   # "/img/ferris.png"
```

How `serve_dir` resolves a path:

- A path that ends in `/` is served from `index.html` or `index.htm` in that
  directory.
- A request path that contains `..` or `:` is refused with 404.
- The content type is guessed from the file extension. If the extension is
  unknown, it is `application/octet-stream`.

## What it does not do

humptykit has no HTTP request parser, no router and no server object of its
own. The connectors need a server object that you provide, and the static
file handlers return `StaticResponse` values that you must write to the
client yourself. The package provides no command-line program.

## Tests

```
pip install "humptykit[test]"
pytest
```