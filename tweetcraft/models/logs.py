"""
Logging model: LogEntry.
"""
from datetime import datetime
from tweetcraft.models.base import Base, Column, String, DateTime, Text, Integer, JSON, isoformat


class LogEntry(Base):
    """
    Persistent log entry, written only when PERSIST_LOGS is enabled.

    Categories:
    - http_request:  Incoming HTTP request/response (method, path, status, timing, headers)
    - http_outbound: Outgoing calls to the LLM endpoint and the Twitter API
    - app_log:       Application log messages
    - user_action:   User-initiated actions (save, approve, schedule, import)
    - system_event:  Startup, shutdown, log cleanup
    - error:         Exceptions and tracebacks
    - ai_generation: Draft generation and insight extraction events
    """
    __tablename__ = "app_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)

    # DEBUG, INFO, WARNING, ERROR, CRITICAL
    level = Column(String(10), default="INFO", nullable=False, index=True)

    category = Column(String(30), default="app_log", nullable=False, index=True)

    # Module/file that generated the log
    source = Column(String(200), nullable=True, index=True)

    message = Column(Text, nullable=False)

    details = Column(JSON, nullable=True)

    # Links all logs from the same HTTP request
    request_id = Column(String(36), nullable=True, index=True)

    deployment_id = Column(String(100), nullable=True, index=True)

    duration_ms = Column(Integer, nullable=True)

    # HTTP-specific fields (denormalized for fast queries)
    http_method = Column(String(10), nullable=True)
    http_path = Column(String(500), nullable=True, index=True)
    http_status = Column(Integer, nullable=True)

    def to_dict(self):
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "timestamp": isoformat(self.timestamp),
            "level": self.level,
            "category": self.category,
            "source": self.source,
            "message": self.message,
            "details": self.details,
            "request_id": self.request_id,
            "deployment_id": self.deployment_id,
            "duration_ms": self.duration_ms,
            "http_method": self.http_method,
            "http_path": self.http_path,
            "http_status": self.http_status,
        }
