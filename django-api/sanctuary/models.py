"""Django ORM models (persistence layer).

One table per document collection. Every row carries a ``version`` that the
document store bumps on each write; transactions use it to detect
concurrent modification. Domain logic lives in domain/models.py.
"""

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from sanctuary.stores import collections


class Document(models.Model):
    """Common columns for store-managed documents."""

    id = models.CharField(primary_key=True, max_length=200, editable=False)
    version = models.PositiveBigIntegerField(default=1, editable=False)

    class Meta:
        abstract = True


class Event(Document):
    """Persistence model for events."""

    STATUS_CHOICES = [
        ("upcoming", "Upcoming"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
    ]

    title = models.CharField(max_length=100)
    date = models.DateField()
    time = models.TimeField()
    location = models.CharField(max_length=200)
    category = models.CharField(max_length=100)
    description = models.TextField()
    image = models.URLField(max_length=500, blank=True, default="")
    capacity = models.PositiveIntegerField()
    registrations = models.PositiveIntegerField(default=0)
    registration_open = models.BooleanField(default=True)
    featured = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="upcoming")
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="event_created_idx"),
            models.Index(fields=["status", "date"], name="event_status_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(registrations__lte=models.F("capacity")),
                name="event_registrations_within_capacity",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class EventRegistration(Document):
    """Persistence model for a seat at an event."""

    event_id = models.CharField(max_length=64, db_index=True)
    user_id = models.CharField(max_length=128, db_index=True)
    registered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["registered_at"]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.event_id}"


class Product(Document):
    """Persistence model for shop products."""

    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    original_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    category = models.CharField(max_length=100)
    description = models.TextField()
    stock = models.PositiveIntegerField(default=0)
    sale = models.BooleanField(default=False)
    featured = models.BooleanField(default=False)
    image = models.URLField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"


class Order(Document):
    """Persistence model for shop orders."""

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("processing", "Processing"),
        ("shipped", "Shipped"),
        ("delivered", "Delivered"),
        ("cancelled", "Cancelled"),
    ]

    user_id = models.CharField(max_length=128, db_index=True)
    user_email = models.EmailField()
    user_name = models.CharField(max_length=200)
    items = models.JSONField(encoder=DjangoJSONEncoder, default=list)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    shipping_address = models.JSONField(encoder=DjangoJSONEncoder, default=dict)
    payment_method = models.CharField(max_length=50)
    payment_id = models.CharField(max_length=200, null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Order {self.pk} ({self.status})"


class PrayerRequest(Document):
    STATUS_CHOICES = [("active", "Active"), ("archived", "Archived")]

    name = models.CharField(max_length=200)
    request = models.TextField()
    is_anonymous = models.BooleanField(default=False)
    user_id = models.CharField(max_length=128, null=True, blank=True, db_index=True)
    prayer_count = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-date"]

    def __str__(self) -> str:
        return self.name


class PrayerRecord(Document):
    """Marks that a user prayed for a request. Keyed ``{request_id}:{user_id}``."""

    request_id = models.CharField(max_length=64, db_index=True)
    user_id = models.CharField(max_length=128)
    prayed_at = models.DateTimeField(null=True, blank=True)


class Devotional(Document):
    STATUS_CHOICES = [
        ("draft", "Draft"),
        ("published", "Published"),
        ("scheduled", "Scheduled"),
    ]

    title = models.CharField(max_length=200)
    verse = models.CharField(max_length=100)
    verse_text = models.TextField()
    content = models.TextField()
    author = models.JSONField(default=dict)
    category = models.CharField(max_length=100, blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="draft")
    likes = models.PositiveIntegerField(default=0)
    comments = models.PositiveIntegerField(default=0)
    date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-date"]

    def __str__(self) -> str:
        return self.title


class Bookmark(Document):
    """A devotional saved by a user. Keyed ``{user_id}:{devotional_id}``."""

    user_id = models.CharField(max_length=128, db_index=True)
    devotional_id = models.CharField(max_length=64, db_index=True)
    created_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]


class UserProfile(Document):
    """Profile synced from the identity provider. The id is the uid."""

    email = models.EmailField(blank=True, default="")
    display_name = models.CharField(max_length=200, blank=True, default="")
    photo_url = models.URLField(max_length=500, blank=True, default="")
    phone_number = models.CharField(max_length=50, blank=True, default="")
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)
    last_sign_in_at = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:
        return self.email or self.pk


class UserRole(Document):
    """Authorization record. The id is the uid."""

    is_admin = models.BooleanField(default=False)
    permissions = models.JSONField(default=list)

    def __str__(self) -> str:
        return f"{self.pk} ({'admin' if self.is_admin else 'user'})"


COLLECTION_MODELS: dict[str, type[Document]] = {
    collections.EVENTS: Event,
    collections.EVENT_REGISTRATIONS: EventRegistration,
    collections.PRODUCTS: Product,
    collections.ORDERS: Order,
    collections.PRAYER_REQUESTS: PrayerRequest,
    collections.PRAYER_RECORDS: PrayerRecord,
    collections.DEVOTIONALS: Devotional,
    collections.BOOKMARKS: Bookmark,
    collections.USERS: UserProfile,
    collections.USER_ROLES: UserRole,
}
