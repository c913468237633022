from sanctuary.handlers.views import (
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

__all__ = [
    "EventListView",
    "EventDetailView",
    "EventRegistrationsView",
    "ProductListView",
    "ProductDetailView",
    "OrderListView",
    "OrderDetailView",
    "PrayerRequestListView",
    "PrayView",
    "DevotionalListView",
    "DevotionalDetailView",
    "DevotionalLikeView",
    "DevotionalBookmarkView",
    "BookmarkListView",
    "CurrentUserView",
    "UserRoleView",
]
