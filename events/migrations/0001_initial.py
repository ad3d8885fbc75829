import uuid

import django.db.models.expressions
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("date", models.DateTimeField()),
                ("location", models.CharField(max_length=255)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("capacity", models.PositiveIntegerField(blank=True, null=True)),
                ("attendees", models.PositiveIntegerField(default=0)),
                ("organizer_email", models.EmailField(max_length=254)),
                ("category_label", models.CharField(max_length=100)),
                ("category_value", models.CharField(max_length=100)),
                ("image_url", models.URLField(blank=True, max_length=500, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="event_created_idx"),
                    models.Index(fields=["organizer_email"], name="event_organizer_idx"),
                    models.Index(fields=["date"], name="event_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("attendees__gte", 0)),
                        name="event_attendees_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("capacity__isnull", True),
                            ("attendees__lte", django.db.models.expressions.F("capacity")),
                            _connector="OR",
                        ),
                        name="event_attendees_within_capacity",
                    ),
                ],
            },
        ),
    ]
