"""
Function-invocation entrypoint.

The function host imports this module once per process and calls
`handler(event, context)` for every invocation. The same schema and
request pipeline serve the local `main:app` listener.
"""

from pathlib import Path
import sys

backend_root = Path(__file__).resolve().parents[1]
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from graphql_bridge.function_handler import create_handler
from graphql_bridge.runtime import get_runtime

handler = create_handler(get_runtime())
