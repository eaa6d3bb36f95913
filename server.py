# server.py  — 単体起動（Werkzeug）と Vercel 用 WSGI アダプタ
import logging
import os
import socket
import sys
import time
from functools import lru_cache

from dotenv import load_dotenv
from flask import Flask, Response, g, request
from flask_cors import CORS
from werkzeug.serving import WSGIRequestHandler, make_server

from routes import bp

DEFAULT_PORT = 8080
HOST = "0.0.0.0"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


def load_env(path=None) -> bool:
    """Load a .env file into os.environ; variables already set win."""
    return load_dotenv(dotenv_path=path)


def read_port(environ=None) -> int:
    """Port from $PORT; 8080 when unset or not an integer."""
    environ = os.environ if environ is None else environ
    raw = (environ.get("PORT") or "").strip()
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        log.warning("PORT=%r is not an integer; using %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT


def create_app() -> Flask:
    app = Flask(__name__)
    app.logger.setLevel(logging.INFO)

    @app.before_request
    def _start_timer():
        g.started = time.perf_counter()

    @app.before_request
    def _preflight():
        # OPTIONS は CORS 層で完結させる（ルートには届かない）
        if request.method != "OPTIONS":
            return None
        if request.headers.get("Origin") and request.headers.get("Access-Control-Request-Method"):
            return Response(status=204)
        return Response("Invalid Preflight Request", status=400, mimetype="text/plain")

    @app.after_request
    def _log_request(resp):
        elapsed = (time.perf_counter() - g.get("started", time.perf_counter())) * 1000
        app.logger.info(
            "%s %s -> %d (%.1f ms)", request.method, request.path, resp.status_code, elapsed
        )
        return resp

    CORS(app, send_wildcard=True)
    app.register_blueprint(bp)
    return app


@lru_cache(maxsize=None)
def ready() -> Flask:
    # 初回だけ組み立て、以降は同じインスタンス
    return create_app()


def handler(environ, start_response):
    """WSGI entry for the serverless host: one request/response pair per call."""
    return ready()(environ, start_response)


load_env()
app = ready()


class _QuietHandler(WSGIRequestHandler):
    # アクセスログは app.logger 側で出す
    def log_request(self, code="-", size="-"):
        pass


def build_server(port):
    """Bind HOST:port ourselves so bind errors surface as OSError, then hand
    the listening socket to a single-threaded Werkzeug server."""
    sock = socket.create_server((HOST, port))
    try:
        # werkzeug は fd を複製して使う
        return make_server(HOST, port, app, request_handler=_QuietHandler, fd=sock.fileno())
    finally:
        sock.close()


def main():
    port = read_port()
    try:
        srv = build_server(port)
    except (OSError, OverflowError) as e:
        log.error("could not listen on %s:%d: %s", HOST, port, e)
        sys.exit(1)

    log.info("Servidor rodando na porta http://%s:%d", HOST, port)
    try:
        srv.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        srv.server_close()


if __name__ == "__main__":
    main()
