"""Local HTTP entrypoint (`uvicorn main:app` from this directory)."""

from pathlib import Path
import sys

backend_root = Path(__file__).resolve().parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from graphql_bridge.runtime import get_runtime
from graphql_bridge.server import create_app

app = create_app(get_runtime())
