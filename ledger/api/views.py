from rest_framework import status as http_status
from rest_framework.views import APIView

from ledger.api.responses import (
    api_response,
    domain_error_response,
    execution_response,
    invalid_body_response,
)
from ledger.api.serializers import (
    BalanceResponseSerializer,
    InstantiateRequestSerializer,
    OwnerResponseSerializer,
    SendFeeResponseSerializer,
    TransferRequestSerializer,
    WithdrawRequestSerializer,
)
from ledger.domain.exceptions import DomainError
from ledger.domain.services import (
    ContractService,
    QueryService,
    TransferService,
    WithdrawalService,
)


class LedgerInstantiateAPIView(APIView):
    def post(self, request):
        serializer = InstantiateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_body_response(serializer.errors)

        try:
            result = ContractService.instantiate(
                sender=serializer.validated_data["sender"],
                send_fee=serializer.validated_data["send_fee"],
                funds=serializer.validated_data["funds"],
            )
        except DomainError as exc:
            return domain_error_response(exc)

        return execution_response(
            result,
            detail="Ledger instantiated.",
            message_en="Ledger was instantiated successfully.",
            message_fa="دفتر کل با موفقیت ایجاد شد.",
            status_code=http_status.HTTP_201_CREATED,
        )


class LedgerTransferAPIView(APIView):
    def post(self, request):
        serializer = TransferRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_body_response(serializer.errors)

        try:
            result = TransferService.transfer(
                serializer.validated_data["funds"],
                serializer.validated_data["recipient_a"],
                serializer.validated_data["recipient_b"],
                sender=serializer.validated_data["sender"],
            )
        except DomainError as exc:
            return domain_error_response(exc)

        return execution_response(
            result,
            detail="Transfer applied.",
            message_en="Transfer completed successfully.",
            message_fa="انتقال با موفقیت انجام شد.",
            status_code=http_status.HTTP_200_OK,
        )


class LedgerWithdrawAPIView(APIView):
    def post(self, request):
        serializer = WithdrawRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_body_response(serializer.errors)

        try:
            result = WithdrawalService.withdraw(
                sender=serializer.validated_data["sender"],
                amount=serializer.validated_data["amount"],
                funds=serializer.validated_data["funds"],
            )
        except DomainError as exc:
            return domain_error_response(exc)

        return execution_response(
            result,
            detail="Withdrawal applied.",
            message_en="Withdrawal completed successfully.",
            message_fa="برداشت با موفقیت انجام شد.",
            status_code=http_status.HTTP_200_OK,
        )


class LedgerOwnerAPIView(APIView):
    def get(self, request):
        try:
            payload = QueryService.get_owner()
        except DomainError as exc:
            return domain_error_response(exc)

        return api_response(
            detail="Ledger owner fetched.",
            message_en="Owner retrieved successfully.",
            message_fa="مالک با موفقیت دریافت شد.",
            status_code=http_status.HTTP_200_OK,
            data=OwnerResponseSerializer(payload).data,
        )


class LedgerSendFeeAPIView(APIView):
    def get(self, request):
        try:
            payload = QueryService.get_send_fee()
        except DomainError as exc:
            return domain_error_response(exc)

        return api_response(
            detail="Send fee fetched.",
            message_en="Send fee retrieved successfully.",
            message_fa="کارمزد ارسال با موفقیت دریافت شد.",
            status_code=http_status.HTTP_200_OK,
            data=SendFeeResponseSerializer(payload).data,
        )


class LedgerBalanceAPIView(APIView):
    def get(self, request, account):
        try:
            payload = QueryService.get_balance(account)
        except DomainError as exc:
            return domain_error_response(exc)

        return api_response(
            detail=f"Balance for account={account} fetched.",
            message_en="Balance retrieved successfully.",
            message_fa="موجودی با موفقیت دریافت شد.",
            status_code=http_status.HTTP_200_OK,
            data=BalanceResponseSerializer(payload).data,
        )
