"""Input schemas for mutations.

Serializers validate shape and field rules only; invariants that depend on
stored state are checked inside transactions by the services.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from rest_framework import serializers

from sanctuary.domain import DevotionalStatus, EventStatus, OrderStatus
from sanctuary.domain.errors import ValidationFailedError


def _choices(enum) -> list[str]:
    return [member.value for member in enum]


class EventInputSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=3, max_length=100)
    date = serializers.DateField()
    time = serializers.TimeField()
    location = serializers.CharField(min_length=3, max_length=200)
    image = serializers.URLField(required=False, allow_blank=True, default="")
    category = serializers.CharField(max_length=100)
    description = serializers.CharField(min_length=10)
    registration_open = serializers.BooleanField(default=True)
    featured = serializers.BooleanField(default=False)
    capacity = serializers.IntegerField(min_value=1)
    registrations = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=_choices(EventStatus), default=EventStatus.UPCOMING.value)


class ProductInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=3, max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.01"))
    original_price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.01"),
        required=False,
        allow_null=True,
    )
    image = serializers.URLField(required=False, allow_blank=True, default="")
    category = serializers.CharField(max_length=100)
    description = serializers.CharField(min_length=10)
    sale = serializers.BooleanField(default=False)
    featured = serializers.BooleanField(default=False)
    stock = serializers.IntegerField(min_value=0, default=0)

    def validate(self, attrs):
        if not self.partial and attrs.get("sale") and attrs.get("original_price") is None:
            raise serializers.ValidationError({"original_price": ["Required when the product is on sale."]})
        return attrs


class OrderItemSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    product_name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    quantity = serializers.IntegerField(min_value=1)
    image = serializers.CharField(required=False, allow_blank=True, default="")


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField()
    street = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
    zip = serializers.CharField()
    country = serializers.CharField()


class OrderInputSerializer(serializers.Serializer):
    user_email = serializers.EmailField()
    user_name = serializers.CharField(max_length=200)
    items = OrderItemSerializer(many=True, allow_empty=False)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.CharField(max_length=50)
    payment_id = serializers.CharField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        expected = sum((item["price"] * item["quantity"] for item in attrs["items"]), Decimal("0"))
        if attrs["total"] != expected:
            raise serializers.ValidationError({"total": [f"Total must equal the sum of the items ({expected})."]})
        return attrs


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=_choices(OrderStatus))


class RoleInputSerializer(serializers.Serializer):
    is_admin = serializers.BooleanField()


class PrayerRequestInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    request = serializers.CharField(min_length=3)
    is_anonymous = serializers.BooleanField(default=False)


class DevotionalAuthorSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    image = serializers.CharField(required=False, allow_blank=True, default="")


class DevotionalInputSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=3, max_length=200)
    verse = serializers.CharField(max_length=100)
    verse_text = serializers.CharField()
    content = serializers.CharField(min_length=10)
    author = DevotionalAuthorSerializer()
    category = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(choices=_choices(DevotionalStatus), default=DevotionalStatus.DRAFT.value)


class UserProfileSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    display_name = serializers.CharField(required=False, allow_blank=True, default="")
    photo_url = serializers.URLField(required=False, allow_blank=True, default="")
    phone_number = serializers.CharField(required=False, allow_blank=True, default="")


def validate_input(
    serializer_class: type[serializers.Serializer],
    data: Mapping[str, Any],
    partial: bool = False,
) -> dict[str, Any]:
    """Run a schema over caller input.

    Raises:
        ValidationFailedError: If the input does not match the schema.
    """
    if partial and not data:
        raise ValidationFailedError("No fields to update")
    serializer = serializer_class(data=data, partial=partial)
    if not serializer.is_valid():
        raise ValidationFailedError(errors=serializer.errors)
    return _plain(serializer.validated_data)


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value
