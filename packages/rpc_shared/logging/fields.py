"""Canonical logging field names for structured error logs.

Keeping names centralized prevents drift between the formatter, the logging
context and the fields rendered for one error.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EXCEPTION = "exception"

# Error identity fields.
ERROR_CODE = "code"
ERROR_STATUS = "status"
ERROR_REASON = "reason"
EXCEPTION_TYPE = "exception_type"

# Service field bound by configure_logging.
SERVICE = "service"

# Record attributes copied from ``extra=`` into structured output.
RECORD_EXTRA_FIELDS = (ERROR_CODE, ERROR_STATUS, ERROR_REASON, EXCEPTION_TYPE)
