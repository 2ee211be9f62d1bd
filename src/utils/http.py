"""Base request handler for the Vercel Python runtime."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Optional
from urllib.parse import urlparse, parse_qs

from pydantic import ValidationError as PydanticValidationError

from src.services import records
from src.services.supabase_client import get_supabase_client
from src.utils.errors import SkyRealtyError, RequestValidationError
from src.utils.logging import get_structured_logger, correlation_context
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


def run_async(coro):
    """Run a service coroutine from a synchronous handler."""
    return asyncio.run(coro)


class JSONRequestHandler(BaseHTTPRequestHandler):
    """
    JSON request/response plumbing shared by every endpoint.

    Subclasses implement handle_get/handle_post/handle_put/handle_delete.
    Each returns (status, payload); payload None means an empty body.
    Domain errors are mapped to their HTTP status here.
    """

    endpoint = "unknown"

    def do_GET(self):
        self._dispatch("get")

    def do_POST(self):
        self._dispatch("post")

    def do_PUT(self):
        self._dispatch("put")

    def do_DELETE(self):
        self._dispatch("delete")

    def log_message(self, format, *args):
        logger.debug("HTTP access", endpoint=self.endpoint, detail=format % args)

    # Request helpers

    def supabase(self):
        return get_supabase_client()

    @property
    def query(self) -> dict[str, str]:
        parsed = parse_qs(urlparse(self.path).query)
        return {key: values[0] for key, values in parsed.items() if values}

    def require_query(self, name: str) -> str:
        value = self.query.get(name)
        if not value:
            raise RequestValidationError(f"{name} is required")
        return value

    def raw_body(self) -> bytes:
        if not hasattr(self, "_raw_body"):
            content_length = int(self.headers.get("Content-Length", 0) or 0)
            self._raw_body = self.rfile.read(content_length) if content_length > 0 else b""
        return self._raw_body

    def read_json(self) -> dict:
        raw = self.raw_body()
        if not raw:
            return {}
        try:
            body = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise RequestValidationError("Request body is not valid JSON")
        if not isinstance(body, dict):
            raise RequestValidationError("Request body must be a JSON object")
        return body

    # Response helpers

    def send_json(self, status: int, payload: Any, headers: Optional[dict] = None) -> None:
        self.send_response(status)
        if payload is None:
            for name, value in (headers or {}).items():
                self.send_header(name, value)
            self.send_header("Content-Length", "0")
            self.end_headers()
            return

        body = json.dumps(payload, default=str).encode("utf-8")
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def _dispatch(self, method: str) -> None:
        LoggingConfig.ensure_configured()
        header = LoggingConfig.LOG_CORRELATION_ID_HEADER
        incoming_id = self.headers.get(header) or None

        with correlation_context(incoming_id) as correlation_id:
            response_headers = {header: correlation_id}
            func = getattr(self, f"handle_{method}", None)
            if func is None:
                self.send_json(405, {"error": "Method not allowed"}, response_headers)
                return

            try:
                status, payload = func()
            except PydanticValidationError as e:
                logger.warning("Payload validation failed", endpoint=self.endpoint, errors=e.error_count())
                self.send_json(400, {"error": "invalid payload", "details": _summarize(e)}, response_headers)
                return
            except SkyRealtyError as e:
                status = e.status_code
                if status >= 500:
                    logger.error(
                        "Request failed",
                        endpoint=self.endpoint,
                        error=str(e),
                        error_type=type(e).__name__,
                        exc_info=True
                    )
                else:
                    logger.warning(
                        "Request rejected",
                        endpoint=self.endpoint,
                        status=status,
                        error=str(e),
                        error_type=type(e).__name__
                    )
                self.send_json(status, {"error": str(e)}, response_headers)
                return
            except Exception as e:
                logger.error(
                    "Unhandled error",
                    endpoint=self.endpoint,
                    error=str(e),
                    exc_info=True
                )
                self.send_json(500, {"error": "internal server error"}, response_headers)
                return

            self.send_json(status, payload, response_headers)


class ResourceHandler(JSONRequestHandler):
    """
    REST handler for one owner-scoped resource.

    GET ?realtor_id=[&id=]  list, or fetch one
    POST {..., realtor_id}  create (201)
    PUT ?id=&realtor_id=    update
    DELETE ?id=&realtor_id= delete (204)
    """

    resource = ""

    def _owner(self, body: Optional[dict] = None) -> str:
        realtor_id = self.query.get("realtor_id") or (body or {}).get("realtor_id")
        if not realtor_id:
            raise RequestValidationError("realtor_id is required")
        return realtor_id

    def handle_get(self):
        realtor_id = self._owner()
        record_id = self.query.get("id")
        if record_id:
            return 200, run_async(records.get_record(self.supabase(), self.resource, record_id, realtor_id))
        return 200, run_async(records.list_records(self.supabase(), self.resource, realtor_id))

    def handle_post(self):
        body = self.read_json()
        realtor_id = self._owner(body)
        payload = {k: v for k, v in body.items() if k != "realtor_id"}
        return 201, run_async(records.create_record(self.supabase(), self.resource, realtor_id, payload))

    def handle_put(self):
        body = self.read_json()
        realtor_id = self._owner()
        record_id = self.require_query("id")
        return 200, run_async(records.update_record(self.supabase(), self.resource, record_id, realtor_id, body))

    def handle_delete(self):
        realtor_id = self._owner()
        record_id = self.require_query("id")
        run_async(records.delete_record(self.supabase(), self.resource, record_id, realtor_id))
        return 204, None


def _summarize(error: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    ]
