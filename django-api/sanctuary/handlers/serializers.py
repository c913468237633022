"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class MoneyField(serializers.Field):
    """Money as a two-decimal string."""

    def to_representation(self, value):
        return str(value)


class EnumField(serializers.Field):
    def to_representation(self, value):
        return value.value


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField()
    title = serializers.CharField()
    date = serializers.DateField()
    time = serializers.TimeField()
    location = serializers.CharField()
    category = serializers.CharField()
    description = serializers.CharField()
    image = serializers.CharField()
    capacity = serializers.IntegerField(source="capacity.value")
    registrations = serializers.IntegerField()
    remaining = serializers.IntegerField()
    registration_open = serializers.BooleanField()
    featured = serializers.BooleanField()
    status = EnumField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class EventRegistrationSerializer(serializers.Serializer):
    id = serializers.CharField()
    event_id = serializers.CharField()
    user_id = serializers.CharField()
    registered_at = serializers.DateTimeField()


class ProductSerializer(serializers.Serializer):
    """Serializer for Product domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    price = MoneyField()
    original_price = MoneyField(allow_null=True)
    category = serializers.CharField()
    description = serializers.CharField()
    stock = serializers.IntegerField()
    sale = serializers.BooleanField()
    featured = serializers.BooleanField()
    image = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class OrderItemSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    product_name = serializers.CharField()
    price = MoneyField()
    quantity = serializers.IntegerField()
    image = serializers.CharField()


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField()
    street = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
    zip = serializers.CharField()
    country = serializers.CharField()


class OrderSerializer(serializers.Serializer):
    id = serializers.CharField()
    user_id = serializers.CharField()
    user_email = serializers.CharField()
    user_name = serializers.CharField()
    items = OrderItemSerializer(many=True)
    total = MoneyField()
    status = EnumField()
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.CharField()
    payment_id = serializers.CharField(allow_null=True)
    notes = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class PrayerRequestSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.SerializerMethodField()
    request = serializers.CharField()
    is_anonymous = serializers.BooleanField()
    prayer_count = serializers.IntegerField()
    status = EnumField()
    date = serializers.DateTimeField()

    def get_name(self, prayer) -> str:
        return "Anonymous" if prayer.is_anonymous else prayer.name


class DevotionalAuthorSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    image = serializers.CharField()


class DevotionalSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    verse = serializers.CharField()
    verse_text = serializers.CharField()
    content = serializers.CharField()
    author = DevotionalAuthorSerializer()
    category = serializers.CharField()
    status = EnumField()
    likes = serializers.IntegerField()
    comments = serializers.IntegerField()
    date = serializers.DateTimeField()


class UserSerializer(serializers.Serializer):
    id = serializers.CharField()
    email = serializers.CharField()
    display_name = serializers.CharField()
    photo_url = serializers.CharField()
    phone_number = serializers.CharField()
    last_sign_in_at = serializers.DateTimeField()


class UserRoleSerializer(serializers.Serializer):
    id = serializers.CharField()
    is_admin = serializers.BooleanField()
    permissions = serializers.ListField(child=serializers.CharField())
