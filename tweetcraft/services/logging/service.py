"""
Structured Logging Service.

Every request, outbound API call (LLM, Twitter), user action and system
event goes through here. Entries always reach Python's logging system;
when PERSIST_LOGS is set they are also buffered into the app_logs table
so they survive deployments.

Architecture:
- DatabaseLogHandler: logging.Handler that forwards records to the buffer
- LoggingService: Central service for structured log operations
- LogBuffer: Thread-safe buffered writes with periodic flush

Every entry carries a request_id (set by RequestLoggingMiddleware) for
correlation, plus the deployment id of the process that wrote it.
"""
import sys
import uuid
import time
import logging
import traceback
import threading
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List
from collections import deque

from tweetcraft.core.config import get_settings

logger = logging.getLogger(__name__)

# Deployment ID - unique per process start
DEPLOYMENT_ID = f"deploy-{datetime.utcnow().strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:8]}"

# Thread-local storage for request context
_request_context = threading.local()

_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}


def get_request_id() -> Optional[str]:
    """Get the current request ID from thread-local storage."""
    return getattr(_request_context, 'request_id', None)


def set_request_id(request_id: str):
    """Set the current request ID in thread-local storage."""
    _request_context.request_id = request_id


def clear_request_id():
    """Clear the current request context from thread-local storage."""
    _request_context.request_id = None
    _request_context.user_id = None


def get_user_id() -> Optional[str]:
    return getattr(_request_context, 'user_id', None)


def set_user_id(user_id: str):
    """Attach the authenticated user to the current request context."""
    _request_context.user_id = user_id


class LogBuffer:
    """Thread-safe buffer for batching log writes to the database."""

    def __init__(self, max_size: int = 50, flush_interval: float = 2.0):
        self.buffer: deque = deque()
        self.max_size = max_size
        self.flush_interval = flush_interval
        self.lock = threading.Lock()
        self.last_flush = time.time()
        self._flush_timer: Optional[threading.Timer] = None
        self._running = True

    def add(self, entry: Dict[str, Any]):
        """Add a log entry to the buffer."""
        with self.lock:
            self.buffer.append(entry)
            if len(self.buffer) >= self.max_size:
                self._do_flush()
            elif not self._flush_timer:
                self._schedule_flush()

    def _schedule_flush(self):
        if self._running:
            self._flush_timer = threading.Timer(self.flush_interval, self._timed_flush)
            self._flush_timer.daemon = True
            self._flush_timer.start()

    def _timed_flush(self):
        with self.lock:
            self._flush_timer = None
            self._do_flush()

    def _do_flush(self):
        """Flush all buffered entries to the database. Must be called with lock held."""
        if not self.buffer:
            return

        entries = list(self.buffer)
        self.buffer.clear()
        self.last_flush = time.time()

        # Write in a separate thread to not block the caller
        thread = threading.Thread(target=self._write_to_db, args=(entries,), daemon=True)
        thread.start()

    def _write_to_db(self, entries: List[Dict[str, Any]]):
        """Write entries to the database."""
        from tweetcraft.db_connection import get_session_factory
        from tweetcraft.models import LogEntry

        try:
            db = get_session_factory()()
        except Exception as e:
            print(f"[LOG-SERVICE] Critical: Cannot connect to DB for logging: {e}", file=sys.stderr, flush=True)
            return

        try:
            for entry_data in entries:
                db.add(LogEntry(**entry_data))
            db.commit()
        except Exception as e:
            db.rollback()
            # stderr so the entries are not lost entirely
            print(f"[LOG-SERVICE] Failed to write {len(entries)} log entries to DB: {e}", file=sys.stderr, flush=True)
        finally:
            db.close()

    def flush_sync(self):
        """Synchronously flush all buffered entries."""
        with self.lock:
            if not self.buffer:
                return
            entries = list(self.buffer)
            self.buffer.clear()

        self._write_to_db(entries)

    def stop(self):
        """Stop the buffer and flush remaining entries."""
        self._running = False
        if self._flush_timer:
            self._flush_timer.cancel()
        self.flush_sync()


# Global buffer instance
_log_buffer = LogBuffer(max_size=30, flush_interval=1.5)


class DatabaseLogHandler(logging.Handler):
    """
    logging.Handler that forwards every application log record to the
    LogBuffer. Only installed when persistence is enabled.
    """

    # Modules to skip to avoid infinite recursion
    SKIP_MODULES = (
        'tweetcraft.services.logging',
        'sqlalchemy.engine',
        'sqlalchemy.pool',
        'sqlalchemy.dialects',
    )

    def __init__(self):
        super().__init__()
        self.setLevel(logging.INFO)

    def emit(self, record: logging.LogRecord):
        if record.name.startswith(self.SKIP_MODULES):
            return
        try:
            entry = {
                'timestamp': datetime.utcnow(),
                'level': record.levelname,
                'category': 'app_log',
                'source': f"{record.name}:{record.funcName}:{record.lineno}",
                'message': record.getMessage(),
                'details': {
                    'logger_name': record.name,
                    'function': record.funcName,
                    'line_number': record.lineno,
                    'thread_name': record.threadName,
                },
                'request_id': get_request_id(),
                'deployment_id': DEPLOYMENT_ID,
            }

            if record.exc_info and record.exc_info[1]:
                entry['category'] = 'error'
                entry['details']['exception_type'] = type(record.exc_info[1]).__name__
                entry['details']['traceback'] = traceback.format_exception(*record.exc_info)

            _log_buffer.add(entry)
        except Exception:
            self.handleError(record)


class LoggingService:
    """
    Central logging service for structured logging.

    Provides methods for logging different event categories with full
    context. Entries go to the `tweetcraft.events` logger and, when
    persistence is on, to the app_logs table.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if LoggingService._initialized:
            return
        LoggingService._initialized = True
        self.deployment_id = DEPLOYMENT_ID
        self.persist = get_settings().persist_logs
        self.events = logging.getLogger('tweetcraft.events')
        self.db_handler = None
        if self.persist:
            self._setup_python_logging()

    def _setup_python_logging(self):
        """Install the database log handler on the root logger."""
        self.db_handler = DatabaseLogHandler()
        logging.getLogger().addHandler(self.db_handler)

    def log(self, level: str, category: str, message: str,
            details: Optional[Dict] = None, source: Optional[str] = None,
            duration_ms: Optional[int] = None, http_method: Optional[str] = None,
            http_path: Optional[str] = None, http_status: Optional[int] = None,
            request_id: Optional[str] = None):
        """Write a structured log entry."""
        level = level.upper()
        request_id = request_id or get_request_id()

        self.events.log(
            _LEVELS.get(level, logging.INFO),
            "[%s] %s", category, message,
            extra={'request_id': request_id, 'user_id': get_user_id(), 'category': category},
        )

        if not self.persist:
            return

        _log_buffer.add({
            'timestamp': datetime.utcnow(),
            'level': level,
            'category': category,
            'source': source or 'app',
            'message': message,
            'details': details if details is None else {'user_id': get_user_id(), **details},
            'request_id': request_id,
            'deployment_id': self.deployment_id,
            'duration_ms': duration_ms,
            'http_method': http_method,
            'http_path': http_path,
            'http_status': http_status,
        })

    def log_http_request(self, method: str, path: str, status_code: int,
                         duration_ms: int, request_headers: Optional[Dict] = None,
                         response_headers: Optional[Dict] = None,
                         client_ip: Optional[str] = None,
                         query_params: Optional[str] = None,
                         request_id: Optional[str] = None):
        """Log an incoming HTTP request."""
        if status_code >= 500:
            level = 'ERROR'
        elif status_code >= 400:
            level = 'WARNING'
        else:
            level = 'INFO'

        self.log(
            level=level,
            category='http_request',
            message=f"{method} {path} → {status_code} ({duration_ms}ms)",
            details={
                'method': method,
                'path': path,
                'status_code': status_code,
                'duration_ms': duration_ms,
                'request_headers': request_headers,
                'response_headers': response_headers,
                'client_ip': client_ip,
                'query_params': query_params,
            },
            source='middleware.http',
            duration_ms=duration_ms,
            http_method=method,
            http_path=path,
            http_status=status_code,
            request_id=request_id,
        )

    def log_outbound_request(self, method: str, url: str, status_code: int,
                             duration_ms: int, service_name: str = 'unknown',
                             request_body: Optional[str] = None,
                             response_body: Optional[str] = None,
                             request_id: Optional[str] = None):
        """Log an outbound HTTP request to an external API (LLM, Twitter)."""
        max_body = 3000
        if request_body and len(request_body) > max_body:
            request_body = request_body[:max_body] + '... [TRUNCATED]'
        if response_body and len(response_body) > max_body:
            response_body = response_body[:max_body] + '... [TRUNCATED]'

        # status_code 0 means the request never got a response
        level = 'ERROR' if status_code >= 400 or status_code == 0 else 'INFO'

        self.log(
            level=level,
            category='http_outbound',
            message=f"[{service_name}] {method} {url} → {status_code} ({duration_ms}ms)",
            details={
                'method': method,
                'url': url,
                'status_code': status_code,
                'duration_ms': duration_ms,
                'service_name': service_name,
                'request_body': request_body,
                'response_body': response_body,
            },
            source=f'outbound.{service_name}',
            duration_ms=duration_ms,
            request_id=request_id,
        )

    def log_user_action(self, action: str, details: Optional[Dict] = None,
                        user_id: Optional[str] = None):
        """Log a user-initiated action (save, approve, schedule, import)."""
        self.log(
            level='INFO',
            category='user_action',
            message=f"User action: {action}",
            details={
                'action': action,
                'user_id': user_id,
                **(details or {}),
            },
            source='user_tracking',
        )

    def log_system_event(self, event_type: str, message: str,
                         details: Optional[Dict] = None, level: str = 'INFO'):
        """Log a system event (startup, shutdown, cleanup)."""
        self.log(
            level=level,
            category='system_event',
            message=f"[{event_type}] {message}",
            details={
                'event_type': event_type,
                **(details or {}),
            },
            source='system',
        )

    def log_error(self, message: str, exception: Optional[Exception] = None,
                  context: Optional[Dict] = None):
        """Log an error with optional exception traceback."""
        details = dict(context or {})
        if exception:
            details['exception_type'] = type(exception).__name__
            details['exception_message'] = str(exception)
            details['traceback'] = ''.join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            )

        self.log(
            level='ERROR',
            category='error',
            message=message,
            details=details,
            source='error_handler',
        )

    def log_ai_generation(self, message: str, details: Optional[Dict] = None,
                          level: str = 'INFO'):
        """Log a draft generation or insight extraction event."""
        self.log(
            level=level,
            category='ai_generation',
            message=message,
            details=details,
            source='ai_generator',
        )

    def flush(self):
        """Flush all buffered log entries to the database."""
        if self.persist:
            _log_buffer.flush_sync()

    def shutdown(self):
        """Shutdown the logging service and flush remaining entries."""
        if self.persist:
            _log_buffer.stop()

    def cleanup_old_logs(self, retention_days: int = 7) -> int:
        """Delete persisted logs older than retention_days."""
        if not self.persist:
            return 0

        from tweetcraft.db_connection import get_db_session
        from tweetcraft.models import LogEntry

        cutoff = datetime.utcnow() - timedelta(days=retention_days)
        try:
            with get_db_session() as db:
                deleted = db.query(LogEntry).filter(LogEntry.timestamp < cutoff).delete()
        except Exception as e:
            logger.warning("Failed to cleanup old logs: %s", e)
            return 0

        self.log_system_event('log_cleanup', f"Deleted {deleted} logs older than {retention_days} days")
        return deleted


# Singleton accessor
def get_logging_service() -> LoggingService:
    """Get or create the singleton LoggingService instance."""
    return LoggingService()
