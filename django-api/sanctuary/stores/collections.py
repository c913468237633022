"""Collection names.

Use these constants so collection names stay consistent across
repositories, the ORM table mapping and cache invalidation.
"""

EVENTS = "events"
EVENT_REGISTRATIONS = "event_registrations"
PRODUCTS = "products"
ORDERS = "orders"
PRAYER_REQUESTS = "prayer_requests"
PRAYER_RECORDS = "prayer_records"
DEVOTIONALS = "devotionals"
BOOKMARKS = "bookmarks"
USERS = "users"
USER_ROLES = "user_roles"
