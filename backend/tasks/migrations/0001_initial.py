import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('goals', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, verbose_name='title')),
                ('description', models.TextField(blank=True, verbose_name='description')),
                ('priority', models.CharField(choices=[('high', 'High'), ('mid', 'Mid'), ('low', 'Low')], default='mid', max_length=8, verbose_name='priority')),
                ('status', models.CharField(choices=[('todo', 'To do'), ('in_progress', 'In progress'), ('completed', 'Completed'), ('archived_success', 'Archived (on time)'), ('archived_failed', 'Archived (late)')], default='todo', max_length=20, verbose_name='status')),
                ('scheduled_date', models.DateField(blank=True, null=True, verbose_name='scheduled date')),
                ('scheduled_time', models.TimeField(blank=True, null=True, verbose_name='scheduled time')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='completed at')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('goal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tasks', to='goals.goal', verbose_name='associated goal')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'Task',
                'verbose_name_plural': 'Tasks',
                'ordering': ['scheduled_date', 'scheduled_time', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='DecisionLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('seed_task_a', models.BigIntegerField(verbose_name='first seed task')),
                ('seed_task_b', models.BigIntegerField(verbose_name='second seed task')),
                ('candidate_ids', models.JSONField(default=list, verbose_name='candidate task ids')),
                ('recommended_task', models.BigIntegerField(verbose_name='recommended task')),
                ('scores', models.JSONField(default=list, verbose_name='ranked scores')),
                ('reasons', models.JSONField(default=list, verbose_name='reasons')),
                ('confidence', models.FloatField(validators=[django.core.validators.MinValueValidator(0.0), django.core.validators.MaxValueValidator(1.0)], verbose_name='confidence')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('user_choice', models.BigIntegerField(blank=True, null=True, verbose_name='user choice')),
                ('user_override', models.BooleanField(blank=True, null=True, verbose_name='user override')),
                ('user_feedback', models.TextField(blank=True, null=True, verbose_name='user feedback')),
                ('feedback_at', models.DateTimeField(blank=True, null=True, verbose_name='feedback at')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='decision_logs', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'Decision log',
                'verbose_name_plural': 'Decision logs',
                'ordering': ['-created_at'],
            },
        ),
    ]
