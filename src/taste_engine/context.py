import contextvars

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
subject_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "subject_id", default=None
)
