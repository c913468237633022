"""Django admin for the document tables.

Admin edits bypass the document store, so they bump ``version`` themselves
(failing any in-flight transaction that read the row) and announce the change
on ``documents_changed`` once committed.
"""

import uuid
from functools import partial

from django.contrib import admin
from django.db import transaction
from django.db.models import F

from sanctuary.models import (
    COLLECTION_MODELS,
    Devotional,
    Event,
    EventRegistration,
    Order,
    PrayerRequest,
    Product,
    UserProfile,
    UserRole,
)
from sanctuary.stores.interfaces import DocumentRef, documents_changed

_COLLECTIONS = {model: collection for collection, model in COLLECTION_MODELS.items()}


class DocumentAdmin(admin.ModelAdmin):
    readonly_fields = ["id", "version"]

    def _announce(self, ids) -> None:
        collection = _COLLECTIONS[self.model]
        refs = frozenset(DocumentRef(collection, str(pk)) for pk in ids)
        transaction.on_commit(partial(documents_changed.send, sender=type(self), store=None, refs=refs))

    def save_model(self, request, obj, form, change):
        if change:
            obj.version = F("version") + 1
        elif not obj.pk:
            obj.pk = uuid.uuid4().hex
        super().save_model(request, obj, form, change)
        self._announce([obj.pk])

    def delete_model(self, request, obj):
        pk = obj.pk
        super().delete_model(request, obj)
        self._announce([pk])

    def delete_queryset(self, request, queryset):
        ids = list(queryset.values_list("pk", flat=True))
        super().delete_queryset(request, queryset)
        self._announce(ids)


@admin.register(Event)
class EventAdmin(DocumentAdmin):
    list_display = ["title", "date", "location", "registrations", "capacity", "status"]
    list_filter = ["status", "category", "featured"]
    search_fields = ["title", "location"]


@admin.register(EventRegistration)
class EventRegistrationAdmin(DocumentAdmin):
    list_display = ["event_id", "user_id", "registered_at"]
    search_fields = ["event_id", "user_id"]


@admin.register(Product)
class ProductAdmin(DocumentAdmin):
    list_display = ["name", "price", "stock", "sale", "featured"]
    list_filter = ["category", "sale", "featured"]
    search_fields = ["name"]


@admin.register(Order)
class OrderAdmin(DocumentAdmin):
    list_display = ["id", "user_email", "total", "status", "created_at"]
    list_filter = ["status"]


@admin.register(PrayerRequest)
class PrayerRequestAdmin(DocumentAdmin):
    list_display = ["name", "prayer_count", "status", "date"]
    list_filter = ["status"]


@admin.register(Devotional)
class DevotionalAdmin(DocumentAdmin):
    list_display = ["title", "verse", "status", "likes", "date"]
    list_filter = ["status", "category"]


@admin.register(UserProfile)
class UserProfileAdmin(DocumentAdmin):
    list_display = ["id", "email", "display_name", "last_sign_in_at"]
    search_fields = ["email", "display_name"]


@admin.register(UserRole)
class UserRoleAdmin(DocumentAdmin):
    list_display = ["id", "is_admin"]
    list_filter = ["is_admin"]
