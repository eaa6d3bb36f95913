# routes.py  — ルート定義（GET / だけ）
import json

from flask import Blueprint, Response

bp = Blueprint("routes", __name__)


@bp.get("/", provide_automatic_options=False)
def root():
    return _json(200, {"message": "Olá, mundo"})


def _json(status, obj):
    body = json.dumps(obj, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    resp = Response(body, status=status)
    resp.headers["Content-Type"] = "application/json; charset=utf-8"
    resp.headers["Content-Length"] = str(len(body))
    return resp
