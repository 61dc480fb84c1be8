"""
Severity escalation for infrastructure-class failures.

A server error whose message mentions one of ESCALATION_KEYWORDS is
upgraded from ERROR to FATAL. Matching is a case-sensitive substring test.
"""

from app.core.severity import ErrorSeverity

ESCALATION_KEYWORDS: tuple[str, ...] = (
    "Mongo",
    "UnhandledPromise",
    "TypeError",
    "ECONNREFUSED",
    "Redis",
    "Connection timeout",
)


def matches_escalation_keyword(message: str) -> bool:
    return any(keyword in message for keyword in ESCALATION_KEYWORDS)


def escalate_severity(status_code: int, message: str, severity: ErrorSeverity) -> ErrorSeverity:
    """Return FATAL for keyword-matching 5xx errors still at ERROR, else `severity` unchanged."""
    if status_code >= 500 and severity == ErrorSeverity.ERROR and matches_escalation_keyword(message):
        return ErrorSeverity.FATAL
    return severity
