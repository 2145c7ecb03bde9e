"""Health check endpoints for the operator."""

from typing import Any

from prometheus_client import make_wsgi_app
from werkzeug.wrappers import Response


def create_combined_wsgi_app() -> Any:
    """Create a WSGI app that combines metrics and health check endpoints.

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> Any:
        """WSGI app that routes /healthz and /readyz, delegates /metrics to prometheus."""
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        if path == "/readyz":
            response = Response('{"status":"ready"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        # Delegate all other paths (including /metrics) to prometheus app
        return metrics_app(environ, start_response)

    return combined_app
