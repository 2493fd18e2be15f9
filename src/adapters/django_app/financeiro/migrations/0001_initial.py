"""
Migration inicial do domínio Financeiro.

Cria as tabelas:
- pagamentos
- descontos
- negociacoes
- split_pagamentos
- transacoes_financeiras
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

FORMAS_PAGAMENTO = [
    ('cartao_credito', 'Cartão de crédito'),
    ('boleto', 'Boleto'),
    ('pix', 'PIX'),
    ('transferencia', 'Transferência'),
]

STATUS_PAGAMENTO = [
    ('pendente', 'Pendente'),
    ('pago', 'Pago'),
    ('atrasado', 'Atrasado'),
    ('cancelado', 'Cancelado'),
    ('reembolsado', 'Reembolsado'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('matriculas', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PagamentoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('numero_parcela', models.PositiveSmallIntegerField()),
                ('valor', models.DecimalField(decimal_places=2, max_digits=12)),
                ('data_vencimento', models.DateField(db_index=True)),
                ('data_pagamento', models.DateField(blank=True, db_index=True, null=True)),
                ('status', models.CharField(choices=STATUS_PAGAMENTO, default='pendente', max_length=20)),
                ('forma_pagamento', models.CharField(choices=FORMAS_PAGAMENTO, default='boleto', max_length=20)),
                ('gateway_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('gateway_data', models.JSONField(blank=True, default=dict)),
                ('comprovante_url', models.CharField(blank=True, max_length=500, null=True)),
                ('observacoes', models.TextField(blank=True, default='')),
                ('negociacao_id', models.CharField(blank=True, max_length=36, null=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('matricula', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='pagamentos',
                    to='matriculas.matriculamodel'
                )),
            ],
            options={
                'verbose_name': 'Pagamento',
                'verbose_name_plural': 'Pagamentos',
                'db_table': 'pagamentos',
                'ordering': ['data_vencimento', 'numero_parcela'],
                'indexes': [
                    models.Index(fields=['status', 'data_vencimento'], name='idx_pagamento_status_venc'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DescontoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(max_length=200)),
                ('codigo', models.CharField(max_length=50, unique=True)),
                ('descricao', models.TextField(blank=True, default='')),
                ('tipo', models.CharField(
                    choices=[('percentual', 'Percentual'), ('valor_fixo', 'Valor fixo')],
                    max_length=20
                )),
                ('valor', models.DecimalField(decimal_places=2, max_digits=12)),
                ('data_inicio', models.DateField(blank=True, null=True)),
                ('data_fim', models.DateField(blank=True, null=True)),
                ('cursos_aplicaveis', models.JSONField(blank=True, default=list, help_text='IDs de cursos; vazio = todos')),
                ('limite_usos', models.PositiveIntegerField(blank=True, null=True)),
                ('usos', models.PositiveIntegerField(default=0)),
                ('ativo', models.BooleanField(db_index=True, default=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Desconto',
                'verbose_name_plural': 'Descontos',
                'db_table': 'descontos',
                'ordering': ['codigo'],
            },
        ),
        migrations.CreateModel(
            name='NegociacaoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('aluno_id', models.CharField(db_index=True, max_length=36)),
                ('matricula_id', models.CharField(blank=True, default='', max_length=36)),
                ('responsavel_id', models.CharField(blank=True, max_length=100, null=True)),
                ('status', models.CharField(
                    choices=[
                        ('pendente', 'Pendente'),
                        ('aprovada', 'Aprovada'),
                        ('rejeitada', 'Rejeitada'),
                        ('cancelada', 'Cancelada'),
                        ('concluida', 'Concluída'),
                    ],
                    default='pendente',
                    max_length=20
                )),
                ('valor_original', models.DecimalField(decimal_places=2, max_digits=12)),
                ('valor_negociado', models.DecimalField(decimal_places=2, max_digits=12)),
                ('numero_parcelas', models.PositiveSmallIntegerField()),
                ('data_primeira_parcela', models.DateField(blank=True, null=True)),
                ('observacoes', models.TextField(blank=True, default='')),
                ('pagamento_ids', models.JSONField(default=list)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Negociação',
                'verbose_name_plural': 'Negociações',
                'db_table': 'negociacoes',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.CreateModel(
            name='SplitPagamentoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('recipient_id', models.CharField(max_length=100)),
                ('recipient_type', models.CharField(max_length=50)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('percentage', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('status', models.CharField(choices=STATUS_PAGAMENTO, default='pendente', max_length=20)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('payment', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='splits',
                    to='financeiro.pagamentomodel'
                )),
            ],
            options={
                'verbose_name': 'Split de pagamento',
                'verbose_name_plural': 'Splits de pagamento',
                'db_table': 'split_pagamentos',
                'ordering': ['criado_em'],
            },
        ),
        migrations.CreateModel(
            name='TransacaoFinanceiraModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('reference_id', models.CharField(db_index=True, max_length=36)),
                ('reference_type', models.CharField(default='payment', max_length=50)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('type', models.CharField(
                    choices=[('income', 'Receita'), ('expense', 'Despesa'), ('refund', 'Estorno')],
                    max_length=20
                )),
                ('status', models.CharField(default='completed', max_length=20)),
                ('payment_method', models.CharField(blank=True, max_length=20, null=True)),
                ('description', models.CharField(blank=True, default='', max_length=255)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('criado_em', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Transação financeira',
                'verbose_name_plural': 'Transações financeiras',
                'db_table': 'transacoes_financeiras',
                'ordering': ['criado_em'],
            },
        ),
    ]
