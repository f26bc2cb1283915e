import contextvars
from contextlib import contextmanager

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)
operation_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("operation", default=None)
entity_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("entity_id", default=None)
category_id_var: contextvars.ContextVar[int | None] = contextvars.ContextVar("category_id", default=None)


def set_request_id(request_id: str) -> contextvars.Token:
    """Store the current request ID in a context variable."""
    return request_id_var.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    """Reset the request ID context variable to a previous state."""
    request_id_var.reset(token)


def get_request_id() -> str | None:
    """Retrieve the current request ID from the context."""
    return request_id_var.get()


def get_operation() -> str | None:
    """Retrieve the manager operation currently running, if any."""
    return operation_var.get()


def get_entity_id() -> str | None:
    return entity_id_var.get()


def get_category_id() -> int | None:
    """Gallery category the current operation touches, if any."""
    return category_id_var.get()


@contextmanager
def log_context(
    operation: str | None = None,
    entity_id: object | None = None,
    category_id: int | None = None,
):
    """Temporarily scope operation/entity/category context for structured logs."""
    tokens: list[tuple[contextvars.ContextVar, contextvars.Token]] = []
    if operation is not None:
        tokens.append((operation_var, operation_var.set(operation)))
    if entity_id is not None:
        tokens.append((entity_id_var, entity_id_var.set(str(entity_id))))
    if category_id is not None:
        tokens.append((category_id_var, category_id_var.set(category_id)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
