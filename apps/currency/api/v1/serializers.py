"""
Serializers for the currency API.
Handles validation and transformation between the API and the application layer.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.currency.application.dto import QuoteLineDTO
from apps.currency.domain.constants import MAX_AMOUNT

MAX_QUANTITY = 10000


class CurrencySerializer(serializers.Serializer):
    code = serializers.CharField()
    symbol = serializers.CharField()
    rate = serializers.DecimalField(max_digits=18, decimal_places=6)
    zero_decimal = serializers.BooleanField()


class QuoteLineSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=200)
    category = serializers.ChoiceField(
        choices=["flight", "hotel", "transfer", "event", "other"],
        default="other",
    )
    unit_price = serializers.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0"), max_value=MAX_AMOUNT
    )
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, default=1)
    currency = serializers.CharField(min_length=3, max_length=3)

    def validate_currency(self, value: str) -> str:
        return value.upper()


class QuoteRequestSerializer(serializers.Serializer):
    preferred_currency = serializers.CharField(min_length=3, max_length=3)
    spread = serializers.DecimalField(
        max_digits=5,
        decimal_places=4,
        min_value=Decimal("0"),
        max_value=Decimal("1"),
        required=False,
    )
    lines = QuoteLineSerializer(many=True, allow_empty=True)

    def validate_preferred_currency(self, value: str) -> str:
        return value.upper()

    def get_line_dtos(self) -> list[QuoteLineDTO]:
        return [QuoteLineDTO(**line) for line in self.validated_data["lines"]]


class QuoteLineResultSerializer(serializers.Serializer):
    description = serializers.CharField()
    category = serializers.CharField()
    quantity = serializers.IntegerField()
    original_unit_price = serializers.CharField()
    original_currency = serializers.CharField()
    unit_price = serializers.CharField()
    subtotal = serializers.CharField()
    converted = serializers.BooleanField()
    formatted_unit_price = serializers.CharField()
    formatted_subtotal = serializers.CharField()


class QuoteResultSerializer(serializers.Serializer):
    preferred_currency = serializers.CharField()
    spread = serializers.CharField()
    lines = QuoteLineResultSerializer(many=True)
    total = serializers.CharField()
    formatted_total = serializers.CharField()
    unconverted_lines = serializers.ListField(child=serializers.CharField())
