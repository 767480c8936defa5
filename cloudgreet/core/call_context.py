"""Per-request context for log correlation."""

from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
call_control_id_var: ContextVar[Optional[str]] = ContextVar("call_control_id", default=None)
business_id_var: ContextVar[Optional[int]] = ContextVar("business_id", default=None)


def set_request_id(request_id: str | None) -> None:
    request_id_var.set(request_id)


def get_request_id() -> str | None:
    return request_id_var.get()


def set_call_context(call_control_id: str | None, business_id: int | None = None) -> None:
    """Set the call being handled by the current request.

    Args:
        call_control_id: Telnyx call control ID
        business_id: Owning business, when already resolved
    """
    call_control_id_var.set(call_control_id)
    if business_id is not None:
        business_id_var.set(business_id)


def set_business_context(business_id: int | None) -> None:
    business_id_var.set(business_id)


def get_call_control_id() -> str | None:
    return call_control_id_var.get()


def get_business_id() -> int | None:
    return business_id_var.get()


def clear_call_context() -> None:
    """Clear all per-request context."""
    request_id_var.set(None)
    call_control_id_var.set(None)
    business_id_var.set(None)
