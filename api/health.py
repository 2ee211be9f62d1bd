"""Health check endpoint."""

from src.utils.http import JSONRequestHandler


class handler(JSONRequestHandler):
    """Health check handler for Vercel serverless function."""

    endpoint = "health"

    def handle_get(self):
        return 200, {"status": "ok", "service": "skyrealty-backend"}

    def handle_post(self):
        return self.handle_get()
