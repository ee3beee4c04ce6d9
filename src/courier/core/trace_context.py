"""Request-scoped trace id used to correlate log lines."""

import contextvars

trace_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "courier_trace_id", default=None
)
