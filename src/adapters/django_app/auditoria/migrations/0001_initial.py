"""
Migration inicial de auditoria.

Cria as tabelas:
- domain_events
- transaction_logs
- metricas
- alertas
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(help_text='UUID único do evento', max_length=36, primary_key=True, serialize=False)),
                ('event_type', models.CharField(db_index=True, help_text='Ex: MatriculaCriadaEvent', max_length=100)),
                ('aggregate_type', models.CharField(db_index=True, help_text='Ex: Matricula', max_length=100)),
                ('aggregate_id', models.CharField(db_index=True, max_length=36)),
                ('event_data', models.JSONField(default=dict)),
                ('version', models.IntegerField(default=1, help_text='Versão do schema do evento')),
                ('sequence', models.BigIntegerField(default=0, help_text='Sequência do evento no agregado')),
                ('occurred_at', models.DateTimeField()),
                ('recorded_at', models.DateTimeField(auto_now_add=True)),
                ('correlation_id', models.CharField(blank=True, db_index=True, max_length=36, null=True)),
                ('causation_id', models.CharField(blank=True, max_length=36, null=True)),
                ('user_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
            ],
            options={
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'db_table': 'domain_events',
                'ordering': ['recorded_at'],
                'indexes': [
                    models.Index(fields=['aggregate_id', 'sequence'], name='idx_event_aggregate_seq'),
                    models.Index(fields=['event_type', 'recorded_at'], name='idx_event_type_recorded'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TransactionLogModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('transaction_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('transaction_type', models.CharField(db_index=True, max_length=30)),
                ('status', models.CharField(max_length=20)),
                ('user_id', models.CharField(blank=True, max_length=100, null=True)),
                ('ip_address', models.CharField(blank=True, max_length=45, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=500, null=True)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Log de transação',
                'verbose_name_plural': 'Logs de transação',
                'db_table': 'transaction_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user_id', 'created_at'], name='idx_txlog_user_created'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MetricModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('type', models.CharField(max_length=30)),
                ('value', models.FloatField()),
                ('endpoint', models.CharField(blank=True, max_length=255, null=True)),
                ('user_id', models.CharField(blank=True, max_length=100, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Métrica',
                'verbose_name_plural': 'Métricas',
                'db_table': 'metricas',
                'ordering': ['timestamp'],
                'indexes': [
                    models.Index(fields=['type', 'timestamp'], name='idx_metrica_tipo_ts'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AlertModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('type', models.CharField(max_length=60)),
                ('message', models.TextField()),
                ('severity', models.CharField(db_index=True, max_length=10)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('metric', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='alertas',
                    to='auditoria.metricmodel'
                )),
            ],
            options={
                'verbose_name': 'Alerta',
                'verbose_name_plural': 'Alertas',
                'db_table': 'alertas',
                'ordering': ['-timestamp'],
            },
        ),
    ]
