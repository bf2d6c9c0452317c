import logging

from rest_framework import status
from rest_framework.views import exception_handler as drf_exception_handler

from ledger.api.responses import api_response, domain_error_response
from ledger.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

_STATUS_MESSAGES = {
    status.HTTP_400_BAD_REQUEST: ("Bad request.", "درخواست نامعتبر است."),
    status.HTTP_401_UNAUTHORIZED: ("Unauthorized.", "دسترسی غیرمجاز است."),
    status.HTTP_404_NOT_FOUND: ("Resource not found.", "منبع پیدا نشد."),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("Method not allowed.", "متد مجاز نیست."),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (
        "Unsupported media type.",
        "نوع محتوا پشتیبانی نمی شود.",
    ),
}


def _message_for_status(status_code):
    if status_code >= 500:
        return ("Internal server error.", "خطای داخلی سرور.")
    return _STATUS_MESSAGES.get(
        status_code, ("Request failed.", "درخواست ناموفق بود.")
    )


def _normalize_detail(payload):
    if isinstance(payload, dict) and set(payload.keys()) == {"detail"}:
        return payload["detail"]
    return payload


def custom_exception_handler(exc, context):
    # Ledger rule violations keep their mapped status even when a view lets them escape.
    if isinstance(exc, DomainError):
        return domain_error_response(exc)

    response = drf_exception_handler(exc, context)

    if response is None:
        logger.exception(
            "event=api_unhandled_exception view=%s error=%s",
            context.get("view").__class__.__name__,
            exc.__class__.__name__,
            exc_info=exc,
        )
        return api_response(
            detail=str(exc),
            message_en="Internal server error.",
            message_fa="خطای داخلی سرور.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            data=None,
        )

    message_en, message_fa = _message_for_status(response.status_code)
    return api_response(
        detail=_normalize_detail(response.data),
        message_en=message_en,
        message_fa=message_fa,
        status_code=response.status_code,
        data=None,
    )
