"""
ViewSet for the currency API v1.
Exposes the rate table, conversion, display formatting and booking quotes.
"""

from decimal import Decimal, InvalidOperation

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.currency.api.v1.serializers import (
    CurrencySerializer,
    QuoteRequestSerializer,
    QuoteResultSerializer,
)
from apps.currency.application.dto import CurrencyDTO, ConversionResultDTO
from apps.currency.application.quotes import build_quote
from apps.currency.domain.constants import MAX_AMOUNT
from apps.currency.domain.services import get_default_converter


def parse_decimal(value: str) -> Decimal | None:
    try:
        parsed = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not parsed.is_finite() or abs(parsed) > MAX_AMOUNT:
        return None
    return parsed


@extend_schema(tags=['Currencies'])
class CurrencyViewSet(viewsets.ViewSet):

    @extend_schema(
        responses=CurrencySerializer(many=True),
        description="List the currencies of the active rate table"
    )
    def list(self, request):
        converter = get_default_converter()
        rows = [
            CurrencyDTO(
                code=code,
                symbol=converter.symbols.get(code, code),
                rate=converter.rate_table.get_rate(code),
                zero_decimal=code in converter.zero_decimal_currencies,
            )
            for code in converter.rate_table.codes()
        ]
        return Response(CurrencySerializer(rows, many=True).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("source_currency", OpenApiTypes.STR, required=True, description="Source currency code (e.g. USD)"),
            OpenApiParameter("exchanged_currency", OpenApiTypes.STR, required=True, description="Target currency code (e.g. EUR)"),
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, required=True, description="Amount to convert"),
            OpenApiParameter("spread", OpenApiTypes.DECIMAL, description="Spread fraction between 0 and 1 (optional, defaults to the configured spread)"),
        ],
        description="Convert amount from one currency to another, adding the exchange spread"
    )
    @action(detail=False, methods=['get'], url_path='convert')
    def convert(self, request):
        """
        Convert an amount from one currency to another.

        Unknown currencies are not an error: the amount comes back unchanged
        with converted=false.
        """
        source_currency_code = request.query_params.get('source_currency')
        exchanged_currency_code = request.query_params.get('exchanged_currency')
        amount_str = request.query_params.get('amount')
        spread_str = request.query_params.get('spread')

        # Validation
        if not all([source_currency_code, exchanged_currency_code, amount_str]):
            return Response(
                {"error": "source_currency, exchanged_currency, and amount are required"},
                status=status.HTTP_400_BAD_REQUEST
            )

        amount = parse_decimal(amount_str)
        if amount is None:
            return Response(
                {"error": f"Invalid amount. Must be a number no larger than {MAX_AMOUNT}"},
                status=status.HTTP_400_BAD_REQUEST
            )

        if amount < 0:
            return Response(
                {"error": "Amount must not be negative"},
                status=status.HTTP_400_BAD_REQUEST
            )

        spread = None
        if spread_str:
            spread = parse_decimal(spread_str)
            if spread is None or not Decimal("0") <= spread <= Decimal("1"):
                return Response(
                    {"error": "Invalid spread. Must be a number between 0 and 1"},
                    status=status.HTTP_400_BAD_REQUEST
                )

        converter = get_default_converter()
        exchanged_currency_code = exchanged_currency_code.upper()
        result = converter.convert_detailed(
            amount,
            source_currency_code.upper(),
            exchanged_currency_code,
            spread
        )

        dto = ConversionResultDTO(
            source_currency=result.source_currency,
            exchanged_currency=result.exchanged_currency,
            amount=result.amount,
            converted_amount=result.converted_amount,
            spread=result.spread,
            converted=result.converted,
            formatted=converter.format(result.converted_amount, exchanged_currency_code),
        )

        return Response({
            "source_currency": dto.source_currency,
            "exchanged_currency": dto.exchanged_currency,
            "amount": str(dto.amount),
            "converted_amount": str(dto.converted_amount),
            "spread": str(dto.spread),
            "converted": dto.converted,
            "formatted": dto.formatted,
        })

    @extend_schema(
        parameters=[
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, required=True, description="Amount to format"),
            OpenApiParameter("currency", OpenApiTypes.STR, required=True, description="Currency code (e.g. JPY)"),
        ],
        description="Format an amount for display in the given currency"
    )
    @action(detail=False, methods=['get'], url_path='format')
    def format_amount(self, request):
        amount_str = request.query_params.get('amount')
        currency_code = request.query_params.get('currency')

        if not all([amount_str, currency_code]):
            return Response(
                {"error": "amount and currency are required"},
                status=status.HTTP_400_BAD_REQUEST
            )

        amount = parse_decimal(amount_str)
        if amount is None:
            return Response(
                {"error": f"Invalid amount. Must be a number no larger than {MAX_AMOUNT}"},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response({
            "amount": str(amount),
            "currency": currency_code.upper(),
            "formatted": get_default_converter().format(amount, currency_code),
        })

    @extend_schema(
        request=QuoteRequestSerializer,
        responses=QuoteResultSerializer,
        description="Price booking items in the traveller's preferred currency and total them"
    )
    @action(detail=False, methods=['post'], url_path='quote')
    def quote(self, request):
        serializer = QuoteRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Invalid quote request", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        result = build_quote(
            serializer.validated_data["preferred_currency"],
            serializer.get_line_dtos(),
            spread=serializer.validated_data.get("spread"),
        )

        return Response(QuoteResultSerializer(result).data)
