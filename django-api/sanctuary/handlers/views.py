"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and resolve the caller's identity
- Call services for business logic
- Leave domain error mapping to handlers.errors.exception_handler
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.views import APIView

from sanctuary.cache import cached, detail_key, list_key
from sanctuary.container import get_services
from sanctuary.handlers.serializers import (
    DevotionalSerializer,
    EventRegistrationSerializer,
    EventSerializer,
    OrderSerializer,
    PrayerRequestSerializer,
    ProductSerializer,
    UserRoleSerializer,
    UserSerializer,
)
from sanctuary.services.authorization import Identity
from sanctuary.services.validation import OrderStatusSerializer, RoleInputSerializer, validate_input
from sanctuary.stores import collections


def identity_of(request: Request) -> Identity | None:
    user = request.user
    return user if isinstance(user, Identity) else None


def client_of(request: Request) -> str:
    """Client address, honouring REST_FRAMEWORK NUM_PROXIES."""
    return BaseThrottle().get_ident(request)


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        category = request.query_params.get("category")
        if category:
            events = get_services().events.list_events(category)
            return Response(EventSerializer(events, many=True).data)
        data = cached(
            list_key(collections.EVENTS),
            lambda: EventSerializer(get_services().events.list_events(), many=True).data,
        )
        return Response(data)

    def post(self, request: Request) -> Response:
        event_id = get_services().events.create_event(identity_of(request), request.data)
        return Response({"id": event_id}, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        data = cached(
            detail_key(collections.EVENTS, event_id),
            lambda: EventSerializer(get_services().events.get_event(event_id)).data,
        )
        return Response(data)

    def patch(self, request: Request, event_id: str) -> Response:
        services = get_services()
        services.events.update_event(identity_of(request), event_id, request.data)
        return Response(EventSerializer(services.events.get_event(event_id)).data)

    def delete(self, request: Request, event_id: str) -> Response:
        get_services().events.delete_event(identity_of(request), event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventRegistrationsView(APIView):
    """Handler for GET/POST /api/events/{event_id}/registrations"""

    def get(self, request: Request, event_id: str) -> Response:
        registrations = get_services().events.list_registrations(identity_of(request), event_id)
        return Response(EventRegistrationSerializer(registrations, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        registration_id = get_services().events.register_for_event(identity_of(request), event_id)
        return Response({"id": registration_id}, status=status.HTTP_201_CREATED)


class ProductListView(APIView):
    """Handler for GET/POST /api/products"""

    def get(self, request: Request) -> Response:
        category = request.query_params.get("category")
        if category:
            products = get_services().products.list_products(category)
            return Response(ProductSerializer(products, many=True).data)
        data = cached(
            list_key(collections.PRODUCTS),
            lambda: ProductSerializer(get_services().products.list_products(), many=True).data,
        )
        return Response(data)

    def post(self, request: Request) -> Response:
        product_id = get_services().products.create_product(identity_of(request), request.data)
        return Response({"id": product_id}, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/products/{product_id}"""

    def get(self, request: Request, product_id: str) -> Response:
        data = cached(
            detail_key(collections.PRODUCTS, product_id),
            lambda: ProductSerializer(get_services().products.get_product(product_id)).data,
        )
        return Response(data)

    def patch(self, request: Request, product_id: str) -> Response:
        services = get_services()
        services.products.update_product(identity_of(request), product_id, request.data)
        return Response(ProductSerializer(services.products.get_product(product_id)).data)

    def delete(self, request: Request, product_id: str) -> Response:
        get_services().products.delete_product(identity_of(request), product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderListView(APIView):
    """Handler for GET/POST /api/orders"""

    def get(self, request: Request) -> Response:
        orders = get_services().orders.list_my_orders(identity_of(request))
        return Response(OrderSerializer(orders, many=True).data)

    def post(self, request: Request) -> Response:
        order_id = get_services().orders.create_order(identity_of(request), request.data)
        return Response({"id": order_id}, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Handler for GET/PATCH /api/orders/{order_id}"""

    def get(self, request: Request, order_id: str) -> Response:
        order = get_services().orders.get_order(identity_of(request), order_id)
        return Response(OrderSerializer(order).data)

    def patch(self, request: Request, order_id: str) -> Response:
        identity = identity_of(request)
        services = get_services()
        fields = validate_input(OrderStatusSerializer, request.data)
        services.orders.update_order_status(identity, order_id, fields["status"])
        return Response(OrderSerializer(services.orders.get_order(identity, order_id)).data)


class PrayerRequestListView(APIView):
    """Handler for GET/POST /api/prayers"""

    def get(self, request: Request) -> Response:
        return Response(PrayerRequestSerializer(get_services().prayers.list_active(), many=True).data)

    def post(self, request: Request) -> Response:
        request_id = get_services().prayers.create_request(
            identity_of(request), request.data, client=client_of(request)
        )
        return Response({"id": request_id}, status=status.HTTP_201_CREATED)


class PrayView(APIView):
    """Handler for POST /api/prayers/{request_id}/pray"""

    def post(self, request: Request, request_id: str) -> Response:
        count = get_services().prayers.pray_for(identity_of(request), request_id)
        return Response({"prayer_count": count})


class DevotionalListView(APIView):
    """Handler for GET/POST /api/devotionals"""

    def get(self, request: Request) -> Response:
        devotionals = get_services().devotionals.list_published(request.query_params.get("category"))
        return Response(DevotionalSerializer(devotionals, many=True).data)

    def post(self, request: Request) -> Response:
        devotional_id = get_services().devotionals.create_devotional(identity_of(request), request.data)
        return Response({"id": devotional_id}, status=status.HTTP_201_CREATED)


class DevotionalDetailView(APIView):
    """Handler for GET /api/devotionals/{devotional_id}"""

    def get(self, request: Request, devotional_id: str) -> Response:
        devotional = get_services().devotionals.get_devotional(devotional_id)
        return Response(DevotionalSerializer(devotional).data)


class DevotionalLikeView(APIView):
    """Handler for POST /api/devotionals/{devotional_id}/like"""

    def post(self, request: Request, devotional_id: str) -> Response:
        likes = get_services().devotionals.like(identity_of(request), devotional_id)
        return Response({"likes": likes})


class DevotionalBookmarkView(APIView):
    """Handler for POST/DELETE /api/devotionals/{devotional_id}/bookmark"""

    def post(self, request: Request, devotional_id: str) -> Response:
        get_services().devotionals.bookmark(identity_of(request), devotional_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def delete(self, request: Request, devotional_id: str) -> Response:
        get_services().devotionals.unbookmark(identity_of(request), devotional_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class BookmarkListView(APIView):
    """Handler for GET /api/users/me/bookmarks"""

    def get(self, request: Request) -> Response:
        return Response({"devotional_ids": get_services().devotionals.list_bookmarks(identity_of(request))})


class CurrentUserView(APIView):
    """Handler for PUT /api/users/me (profile sync on sign-in)"""

    def put(self, request: Request) -> Response:
        user = get_services().gate.sync_user(identity_of(request), request.data)
        return Response(UserSerializer(user).data)


class UserRoleView(APIView):
    """Handler for PUT /api/users/{uid}/role"""

    def put(self, request: Request, uid: str) -> Response:
        fields = validate_input(RoleInputSerializer, request.data)
        role = get_services().gate.set_admin(identity_of(request), uid, fields["is_admin"])
        return Response(UserRoleSerializer(role).data)
