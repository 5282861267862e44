"""
Structured logging middleware with PII masking.

Candidate records carry names, emails and phone numbers, so anything that
reaches the logs from a request or response body goes through
`mask_sensitive_data` first.
"""

import json
import logging
import re
import time
import traceback
import uuid
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


# Field names whose values are never logged
SENSITIVE_FIELD_PATTERNS = [
    re.compile(r'password', re.IGNORECASE),
    re.compile(r'token', re.IGNORECASE),
    re.compile(r'api[_-]?key', re.IGNORECASE),
    re.compile(r'secret', re.IGNORECASE),
    re.compile(r'authorization', re.IGNORECASE),
    re.compile(r'cookie', re.IGNORECASE),
    re.compile(r'session', re.IGNORECASE),
    re.compile(r'^(email|phone)$', re.IGNORECASE),
]

# PII patterns masked inside any logged string
PII_PATTERNS = [
    (re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), '[EMAIL]'),
    (re.compile(r'\+\d{1,3}[-.\s]?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9}'), '[PHONE]'),
    (re.compile(r'\(?\b\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b'), '[PHONE]'),
    (re.compile(r'\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b'), '[IP]'),
]

# Paths polled often enough to drown everything else
SKIP_PATHS = ('/health', '/ready')

WRITE_METHODS = ('POST', 'PUT', 'PATCH')

SLOW_REQUEST_SECONDS = 5.0
MODERATE_REQUEST_SECONDS = 1.5


def is_sensitive_field(field_name: str) -> bool:
    """True if values under `field_name` must be redacted."""
    return any(pattern.search(field_name) for pattern in SENSITIVE_FIELD_PATTERNS)


def mask_pii(text: str) -> str:
    for pattern, replacement in PII_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def mask_sensitive_data(data: Any, depth: int = 0, max_depth: int = 10) -> Any:
    """
    Recursively mask sensitive data in dictionaries and lists.

    Args:
        data: Data structure to mask
        depth: Current recursion depth
        max_depth: Maximum recursion depth

    Returns:
        A masked copy; the input is not modified
    """
    if depth > max_depth:
        return "[MAX_DEPTH_EXCEEDED]"

    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if is_sensitive_field(str(key)):
                if isinstance(value, str) and mask_pii(value) != value:
                    masked[key] = mask_pii(value)
                else:
                    masked[key] = "[REDACTED]"
            else:
                masked[key] = mask_sensitive_data(value, depth + 1, max_depth)
        return masked

    if isinstance(data, list):
        return [mask_sensitive_data(item, depth + 1, max_depth) for item in data]

    if isinstance(data, str):
        return mask_pii(data)

    return data


def mask_headers(headers: dict) -> dict:
    """Redact sensitive headers, keeping the scheme of an Authorization header."""
    masked = {}
    for key, value in headers.items():
        key_lower = key.lower()
        if not is_sensitive_field(key_lower):
            masked[key] = value
        elif key_lower == 'authorization' and isinstance(value, str) and ' ' in value:
            masked[key] = f"{value.split(' ', 1)[0]} [REDACTED]"
        else:
            masked[key] = "[REDACTED]"
    return masked


def should_log_request(path: str) -> bool:
    return not path.startswith(SKIP_PATHS)


def resource_for_path(path: str) -> str:
    """
    Resource a request targets, used to group log lines.

    `/api/candidates/candidate-1/notes` gives `candidates`; paths outside the
    API prefix give their first segment.
    """
    segments = [segment for segment in path.split('/') if segment]
    if segments and segments[0] == 'api':
        segments = segments[1:]
    return segments[0] if segments else 'root'


def performance_band(duration: float) -> str:
    """Simulated latency alone can reach 1.2s, so only slower calls stand out."""
    if duration > SLOW_REQUEST_SECONDS:
        return 'slow'
    if duration > MODERATE_REQUEST_SECONDS:
        return 'moderate'
    return 'fast'


def get_client_ip(request: Request) -> str:
    """Client IPv4 address with the last octet hidden."""
    forwarded_for = request.headers.get('x-forwarded-for')
    if forwarded_for:
        ip = forwarded_for.split(',')[0].strip()
    else:
        ip = request.client.host if request.client else 'unknown'

    parts = ip.split('.')
    if len(parts) == 4:
        return f"{parts[0]}.{parts[1]}.{parts[2]}.xxx"
    return 'unknown'


def parse_body(body: bytes, content_type: str, max_body_size: int) -> Any:
    """Decode a JSON body for logging; other content types are only named."""
    if not body:
        return None
    if len(body) > max_body_size:
        return {'_truncated': True, '_size': len(body)}
    if 'application/json' not in content_type:
        return {'_content_type': content_type}
    try:
        return json.loads(body.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug(f"Could not parse body: {e}")
        return None


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Emits a `request_started` and a `request_completed` JSON line per API
    call, tagged with the request ID and the resource (jobs, candidates,
    assessments). The ID comes from `x-request-id` when the caller sends one
    and is echoed back on every response, including unlogged health checks.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_request_body: bool = False,
        log_response_body: bool = False,
        max_body_size: int = 1024,
    ):
        """
        Args:
            app: The ASGI application
            log_request_body: Log masked bodies of writes (POST, PUT, PATCH)
            log_response_body: Log masked response bodies
            max_body_size: Bodies larger than this are summarized, not logged
        """
        super().__init__(app)
        self.log_request_body = log_request_body
        self.log_response_body = log_response_body
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get('x-request-id') or str(uuid.uuid4())
        request.state.request_id = request_id

        if not should_log_request(request.url.path):
            response = await call_next(request)
            response.headers['x-request-id'] = request_id
            return response

        logger.info(json.dumps(await self._started_event(request, request_id)))

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            event = self._completed_event(request, request_id, time.perf_counter() - started, 500)
            event['error'] = {'type': type(exc).__name__, 'message': mask_pii(str(exc))}
            logger.error(json.dumps(event), exc_info=True, extra={'request_id': request_id})
            raise

        event = self._completed_event(
            request, request_id, time.perf_counter() - started, response.status_code
        )
        if self.log_response_body:
            response = await self._capture_body(response, event)
        self._emit(event)

        response.headers['x-request-id'] = request_id
        return response

    async def _started_event(self, request: Request, request_id: str) -> dict:
        event = {
            'event': 'request_started',
            'request_id': request_id,
            'method': request.method,
            'path': request.url.path,
            'resource': resource_for_path(request.url.path),
            'query_params': mask_sensitive_data(dict(request.query_params)),
            'client_ip': get_client_ip(request),
            'user_agent': request.headers.get('user-agent', 'unknown'),
            'headers': mask_headers(dict(request.headers)),
        }
        if self.log_request_body and request.method in WRITE_METHODS:
            body = parse_body(
                await request.body(),
                request.headers.get('content-type', ''),
                self.max_body_size,
            )
            if body is not None:
                event['body'] = mask_sensitive_data(body)
        return event

    def _completed_event(
        self, request: Request, request_id: str, duration: float, status_code: int
    ) -> dict:
        return {
            'event': 'request_completed',
            'request_id': request_id,
            'method': request.method,
            'path': request.url.path,
            'resource': resource_for_path(request.url.path),
            'status_code': status_code,
            'duration_ms': round(duration * 1000, 2),
            'performance': performance_band(duration),
        }

    @staticmethod
    def _emit(event: dict) -> None:
        # Injected failures and storage errors are 500s; 404 and 400 are caller mistakes
        status_code = event['status_code']
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, json.dumps(event))

    async def _capture_body(self, response: Response, event: dict) -> Response:
        """Drain a streaming response into the log and hand back an equivalent one."""
        body = b''.join([
            chunk if isinstance(chunk, bytes) else chunk.encode('utf-8')
            async for chunk in response.body_iterator
        ])
        parsed = parse_body(body, response.headers.get('content-type', ''), self.max_body_size)
        if parsed is not None:
            event['body'] = mask_sensitive_data(parsed)
        return Response(
            content=body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
        )


class StructuredFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if hasattr(record, 'request_id'):
            log_data['request_id'] = record.request_id

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", json_logs: bool = True):
    """
    Configure application-wide logging on the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to format logs as JSON
    """
    level = getattr(logging, log_level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    if json_logs:
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('aiosqlite').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
