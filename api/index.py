# api/index.py  — server.handler を Vercel の WSGI エントリ `app` として公開するだけ
# ルーティングは Flask 側（vercel.json が全パスをここへ rewrite）
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from server import handler as app  # noqa: E402
