#!/usr/bin/env python3
"""
contmon Security Audit Logger

Structured (JSON line) logging for HTTP authentication attempts.
"""

import json
import logging
import time
from typing import Dict, Any, Optional
from starlette.requests import Request


class AuditLogger:
    """Centralized audit logging for security events."""

    def __init__(self):
        self.logger = logging.getLogger("contmon.audit")

    def _log_event(self, event_type: str, details: Dict[str, Any], request: Optional[Request] = None):
        """Log a structured audit event."""
        audit_record = {
            "timestamp": int(time.time()),
            "event_type": event_type,
            "details": details
        }

        # Add request context if available
        if request is not None:
            client_ip = request.client.host if request.client else "unknown"
            audit_record.update({
                "client_ip": client_ip,
                "user_agent": request.headers.get("user-agent", "unknown"),
                "method": request.method,
                "path": request.url.path
            })

        self.logger.info(json.dumps(audit_record))

    def auth_attempt(self, success: bool, auth_type: str, details: Dict[str, Any], request: Optional[Request] = None):
        """Log authentication attempt."""
        self._log_event(
            event_type="auth_attempt",
            details={
                "success": success,
                "auth_type": auth_type,  # "basic", "digest"
                **details
            },
            request=request
        )


# Global audit logger instance
audit_logger = AuditLogger()
