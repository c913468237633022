import django.core.serializers.json
from django.db import migrations, models


def document_fields():
    return [
        ("id", models.CharField(editable=False, max_length=200, primary_key=True, serialize=False)),
        ("version", models.PositiveBigIntegerField(default=1, editable=False)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                *document_fields(),
                ("title", models.CharField(max_length=100)),
                ("date", models.DateField()),
                ("time", models.TimeField()),
                ("location", models.CharField(max_length=200)),
                ("category", models.CharField(max_length=100)),
                ("description", models.TextField()),
                ("image", models.URLField(blank=True, default="", max_length=500)),
                ("capacity", models.PositiveIntegerField()),
                ("registrations", models.PositiveIntegerField(default=0)),
                ("registration_open", models.BooleanField(default=True)),
                ("featured", models.BooleanField(default=False)),
                (
                    "status",
                    models.CharField(
                        choices=[("upcoming", "Upcoming"), ("completed", "Completed"), ("cancelled", "Cancelled")],
                        default="upcoming",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="event_created_idx"),
                    models.Index(fields=["status", "date"], name="event_status_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(registrations__lte=models.F("capacity")),
                        name="event_registrations_within_capacity",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventRegistration",
            fields=[
                *document_fields(),
                ("event_id", models.CharField(db_index=True, max_length=64)),
                ("user_id", models.CharField(db_index=True, max_length=128)),
                ("registered_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={"ordering": ["registered_at"]},
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                *document_fields(),
                ("name", models.CharField(max_length=100)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("original_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("category", models.CharField(max_length=100)),
                ("description", models.TextField()),
                ("stock", models.PositiveIntegerField(default=0)),
                ("sale", models.BooleanField(default=False)),
                ("featured", models.BooleanField(default=False)),
                ("image", models.URLField(blank=True, default="", max_length=500)),
                ("created_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["category"], name="product_category_idx")],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                *document_fields(),
                ("user_id", models.CharField(db_index=True, max_length=128)),
                ("user_email", models.EmailField(max_length=254)),
                ("user_name", models.CharField(max_length=200)),
                (
                    "items",
                    models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder),
                ),
                ("total", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("shipped", "Shipped"),
                            ("delivered", "Delivered"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "shipping_address",
                    models.JSONField(default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder),
                ),
                ("payment_method", models.CharField(max_length=50)),
                ("payment_id", models.CharField(blank=True, max_length=200, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="PrayerRequest",
            fields=[
                *document_fields(),
                ("name", models.CharField(max_length=200)),
                ("request", models.TextField()),
                ("is_anonymous", models.BooleanField(default=False)),
                ("user_id", models.CharField(blank=True, db_index=True, max_length=128, null=True)),
                ("prayer_count", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("archived", "Archived")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("date", models.DateTimeField(blank=True, null=True)),
            ],
            options={"ordering": ["-date"]},
        ),
        migrations.CreateModel(
            name="PrayerRecord",
            fields=[
                *document_fields(),
                ("request_id", models.CharField(db_index=True, max_length=64)),
                ("user_id", models.CharField(max_length=128)),
                ("prayed_at", models.DateTimeField(blank=True, null=True)),
            ],
        ),
        migrations.CreateModel(
            name="Devotional",
            fields=[
                *document_fields(),
                ("title", models.CharField(max_length=200)),
                ("verse", models.CharField(max_length=100)),
                ("verse_text", models.TextField()),
                ("content", models.TextField()),
                ("author", models.JSONField(default=dict)),
                ("category", models.CharField(blank=True, default="", max_length=100)),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("published", "Published"), ("scheduled", "Scheduled")],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("likes", models.PositiveIntegerField(default=0)),
                ("comments", models.PositiveIntegerField(default=0)),
                ("date", models.DateTimeField(blank=True, null=True)),
            ],
            options={"ordering": ["-date"]},
        ),
        migrations.CreateModel(
            name="Bookmark",
            fields=[
                *document_fields(),
                ("user_id", models.CharField(db_index=True, max_length=128)),
                ("devotional_id", models.CharField(db_index=True, max_length=64)),
                ("created_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                *document_fields(),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("display_name", models.CharField(blank=True, default="", max_length=200)),
                ("photo_url", models.URLField(blank=True, default="", max_length=500)),
                ("phone_number", models.CharField(blank=True, default="", max_length=50)),
                ("created_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("last_sign_in_at", models.DateTimeField(blank=True, null=True)),
            ],
        ),
        migrations.CreateModel(
            name="UserRole",
            fields=[
                *document_fields(),
                ("is_admin", models.BooleanField(default=False)),
                ("permissions", models.JSONField(default=list)),
            ],
        ),
    ]
