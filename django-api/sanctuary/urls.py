from django.urls import path

from sanctuary.handlers import (
    BookmarkListView,
    CurrentUserView,
    DevotionalBookmarkView,
    DevotionalDetailView,
    DevotionalLikeView,
    DevotionalListView,
    EventDetailView,
    EventListView,
    EventRegistrationsView,
    OrderDetailView,
    OrderListView,
    PrayerRequestListView,
    PrayView,
    ProductDetailView,
    ProductListView,
    UserRoleView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationsView.as_view(),
        name="event-registrations",
    ),
    path("products", ProductListView.as_view(), name="product-list"),
    path("products/<str:product_id>", ProductDetailView.as_view(), name="product-detail"),
    path("orders", OrderListView.as_view(), name="order-list"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path("prayers", PrayerRequestListView.as_view(), name="prayer-list"),
    path("prayers/<str:request_id>/pray", PrayView.as_view(), name="prayer-pray"),
    path("devotionals", DevotionalListView.as_view(), name="devotional-list"),
    path("devotionals/<str:devotional_id>", DevotionalDetailView.as_view(), name="devotional-detail"),
    path(
        "devotionals/<str:devotional_id>/like",
        DevotionalLikeView.as_view(),
        name="devotional-like",
    ),
    path(
        "devotionals/<str:devotional_id>/bookmark",
        DevotionalBookmarkView.as_view(),
        name="devotional-bookmark",
    ),
    path("users/me", CurrentUserView.as_view(), name="current-user"),
    path("users/me/bookmarks", BookmarkListView.as_view(), name="bookmark-list"),
    path("users/<str:uid>/role", UserRoleView.as_view(), name="user-role"),
]
