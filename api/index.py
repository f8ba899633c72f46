"""
Serverless entry point: exposes the projects API to Vercel's Python runtime
"""
import sys
from pathlib import Path

# the app package lives under backend/, which is not on the runtime's path
backend_path = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from app.main import app

from mangum import Mangum

# no lifespan: each invocation may run in a fresh container
asgi_adapter = Mangum(app, lifespan="off")


def handler(event, context=None):
    """Translate a Lambda-style invocation into an ASGI request for the app."""
    return asgi_adapter(event, context)
