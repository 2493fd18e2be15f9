"""
Feedback dos usuários.

Cria a tabela:
- user_feedback
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    dependencies = [
        ('auditoria', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='FeedbackModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('user_id', models.CharField(db_index=True, max_length=100)),
                ('type', models.CharField(db_index=True, max_length=30)),
                ('message', models.TextField()),
                ('satisfaction_level', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('module', models.CharField(db_index=True, max_length=100)),
                ('feature', models.CharField(blank=True, max_length=100, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('status', models.CharField(db_index=True, default='pending', max_length=20)),
                ('priority', models.CharField(default='low', max_length=10)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Feedback',
                'verbose_name_plural': 'Feedbacks',
                'db_table': 'user_feedback',
                'ordering': ['-created_at'],
            },
        ),
    ]
