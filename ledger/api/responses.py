from rest_framework import status as http_status
from rest_framework.response import Response

from ledger.domain.exceptions import (
    AlreadyInitialized,
    BalanceOverflow,
    InsufficientForFee,
    InsufficientFunds,
    InvalidAddress,
    InvalidAmount,
    InvalidDenomination,
    MissingFunds,
    NotInitialized,
    TooManyDenominations,
    Unauthorized,
    UnevenSplit,
    UnexpectedFunds,
)


def api_response(*, detail, message_en, message_fa, status_code, data=None):
    return Response(
        {
            "detail": detail,
            "message": {
                "en": message_en,
                "fa": message_fa,
            },
            "status": status_code,
            "data": data,
        },
        status=status_code,
    )


def execution_response(result, *, detail, message_en, message_fa, status_code):
    return api_response(
        detail=detail,
        message_en=message_en,
        message_fa=message_fa,
        status_code=status_code,
        data=result.to_dict(),
    )


_DOMAIN_ERROR_RESPONSES = (
    (
        (MissingFunds, TooManyDenominations, InvalidDenomination, UnexpectedFunds),
        http_status.HTTP_400_BAD_REQUEST,
        "Invalid attached funds.",
        "وجوه ارسالی نامعتبر است.",
    ),
    (
        (InsufficientForFee, UnevenSplit),
        http_status.HTTP_400_BAD_REQUEST,
        "Amount cannot be split after the fee.",
        "مبلغ پس از کسر کارمزد قابل تقسیم نیست.",
    ),
    (
        (InvalidAddress, InvalidAmount),
        http_status.HTTP_400_BAD_REQUEST,
        "Invalid request.",
        "درخواست نامعتبر است.",
    ),
    (
        (Unauthorized,),
        http_status.HTTP_401_UNAUTHORIZED,
        "Account has no ledger entry.",
        "حساب در دفتر کل ثبت نشده است.",
    ),
    (
        (InsufficientFunds, BalanceOverflow),
        http_status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Balance cannot cover this operation.",
        "موجودی برای این عملیات کافی نیست.",
    ),
    (
        (AlreadyInitialized, NotInitialized),
        http_status.HTTP_409_CONFLICT,
        "Ledger state does not allow this operation.",
        "وضعیت دفتر کل اجازه این عملیات را نمی دهد.",
    ),
)


def domain_error_response(exc):
    for error_types, status_code, message_en, message_fa in _DOMAIN_ERROR_RESPONSES:
        if isinstance(exc, error_types):
            return api_response(
                detail=str(exc),
                message_en=message_en,
                message_fa=message_fa,
                status_code=status_code,
                data={"error": exc.__class__.__name__},
            )
    return api_response(
        detail=str(exc),
        message_en="Request failed.",
        message_fa="درخواست ناموفق بود.",
        status_code=http_status.HTTP_400_BAD_REQUEST,
        data={"error": exc.__class__.__name__},
    )


def invalid_body_response(errors):
    return api_response(
        detail=errors,
        message_en="Invalid request body.",
        message_fa="درخواست نامعتبر است.",
        status_code=http_status.HTTP_400_BAD_REQUEST,
        data=None,
    )
