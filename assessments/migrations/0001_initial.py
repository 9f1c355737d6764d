from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("materials", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("text", models.TextField()),
                ("kind", models.CharField(choices=[("multiple_choice", "Multiple choice"), ("fill_blank", "Fill in the blank"), ("short_answer", "Short answer")], default="multiple_choice", max_length=20)),
                ("options", models.JSONField(blank=True, default=list)),
                ("correct_answer", models.CharField(max_length=500)),
                ("points", models.FloatField(default=1.0)),
                ("order_index", models.IntegerField(default=0)),
                ("timestamp_seconds", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("material", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="questions", to="materials.material")),
            ],
            options={
                "ordering": ["order_index", "id"],
            },
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("score", models.FloatField(default=0.0)),
                ("total_points", models.FloatField(default=0.0)),
                ("submitted_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("material", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to="materials.material")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-submitted_at", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("score__gte", 0), ("score__lte", models.F("total_points"))),
                        name="submission_score_within_total",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AnswerRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("answer", models.TextField(blank=True)),
                ("is_correct", models.BooleanField(default=False)),
                ("points_earned", models.FloatField(default=0.0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("question", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="answer_records", to="assessments.question")),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="answers", to="assessments.submission")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
