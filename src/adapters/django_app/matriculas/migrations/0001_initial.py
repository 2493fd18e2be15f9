"""
Migration inicial do domínio de Matrículas.

Cria as tabelas:
- matriculas
- matricula_documentos
- contratos
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academico', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MatriculaModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('status', models.CharField(
                    choices=[
                        ('pendente', 'Pendente'),
                        ('aprovado', 'Aprovado'),
                        ('rejeitado', 'Rejeitado'),
                        ('ativo', 'Ativo'),
                        ('trancado', 'Trancado'),
                        ('cancelado', 'Cancelado'),
                        ('concluido', 'Concluído'),
                    ],
                    db_index=True,
                    default='pendente',
                    max_length=20
                )),
                ('data_inicio', models.DateField(blank=True, null=True)),
                ('data_termino', models.DateField(blank=True, null=True)),
                ('valor_total', models.DecimalField(decimal_places=2, max_digits=12)),
                ('valor_com_desconto', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('desconto_id', models.CharField(blank=True, max_length=36, null=True)),
                ('forma_pagamento', models.CharField(
                    choices=[
                        ('cartao_credito', 'Cartão de crédito'),
                        ('boleto', 'Boleto'),
                        ('pix', 'PIX'),
                        ('transferencia', 'Transferência'),
                    ],
                    default='boleto',
                    max_length=20
                )),
                ('numero_parcelas', models.PositiveSmallIntegerField(default=1)),
                ('observacoes', models.TextField(blank=True, default='')),
                ('metadata', models.JSONField(blank=True, default=dict, help_text='Inclui status_history')),
                ('criado_em', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('aluno', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='matriculas',
                    to='academico.alunomodel'
                )),
                ('curso', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='matriculas',
                    to='academico.cursomodel'
                )),
            ],
            options={
                'verbose_name': 'Matrícula',
                'verbose_name_plural': 'Matrículas',
                'db_table': 'matriculas',
                'ordering': ['-criado_em'],
                'indexes': [
                    models.Index(fields=['aluno', 'status'], name='idx_matricula_aluno_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DocumentoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('tipo', models.CharField(
                    choices=[
                        ('rg', 'RG'),
                        ('cpf', 'CPF'),
                        ('comprovante_residencia', 'Comprovante de residência'),
                        ('historico_escolar', 'Histórico escolar'),
                        ('diploma', 'Diploma'),
                        ('foto', 'Foto'),
                        ('outro', 'Outro'),
                    ],
                    max_length=30
                )),
                ('nome_arquivo', models.CharField(max_length=255)),
                ('url', models.CharField(max_length=500)),
                ('status', models.CharField(
                    choices=[('pendente', 'Pendente'), ('aprovado', 'Aprovado'), ('rejeitado', 'Rejeitado')],
                    db_index=True,
                    default='pendente',
                    max_length=20
                )),
                ('observacoes', models.TextField(blank=True, default='')),
                ('avaliado_por', models.CharField(blank=True, max_length=100, null=True)),
                ('avaliado_em', models.DateTimeField(blank=True, null=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('matricula', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='documentos',
                    to='matriculas.matriculamodel'
                )),
            ],
            options={
                'verbose_name': 'Documento',
                'verbose_name_plural': 'Documentos',
                'db_table': 'matricula_documentos',
                'ordering': ['criado_em'],
            },
        ),
        migrations.CreateModel(
            name='ContratoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('titulo', models.CharField(max_length=255)),
                ('versao', models.CharField(default='1.0', max_length=10)),
                ('url', models.CharField(max_length=500)),
                ('status', models.CharField(
                    choices=[('pendente', 'Pendente'), ('assinado', 'Assinado'), ('rejeitado', 'Rejeitado')],
                    default='pendente',
                    max_length=20
                )),
                ('data_assinatura', models.DateTimeField(blank=True, null=True)),
                ('assinado_por', models.CharField(blank=True, max_length=100, null=True)),
                ('assinatura_metadata', models.JSONField(blank=True, default=dict)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('matricula', models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='contrato',
                    to='matriculas.matriculamodel'
                )),
            ],
            options={
                'verbose_name': 'Contrato',
                'verbose_name_plural': 'Contratos',
                'db_table': 'contratos',
            },
        ),
    ]
