import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("display_name", models.CharField(blank=True, max_length=255)),
                ("avatar_url", models.URLField(blank=True, max_length=1024)),
                ("score", models.PositiveIntegerField(db_index=True, default=0)),
                ("has_seen_onboarding", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="ReadingLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(db_index=True, max_length=64)),
                ("book_name", models.CharField(max_length=64)),
                ("chapter", models.PositiveSmallIntegerField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "indexes": [models.Index(fields=["user_id", "created_at"], name="idx_user_created")],
            },
        ),
        migrations.AddConstraint(
            model_name="readinglog",
            constraint=models.UniqueConstraint(fields=("user_id", "book_name", "chapter"), name="uq_user_book_chapter"),
        ),
    ]
