"""
Migration inicial do domínio Acadêmico.

Cria as tabelas:
- alunos
- cursos
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='AlunoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(db_index=True, max_length=200)),
                ('email', models.CharField(db_index=True, max_length=254)),
                ('cpf', models.CharField(
                    db_index=True,
                    max_length=14,
                    help_text='Apenas dígitos (ou valor anonimizado)'
                )),
                ('telefone', models.CharField(blank=True, default='', max_length=20)),
                ('data_nascimento', models.DateField(blank=True, null=True)),
                ('endereco', models.TextField(blank=True, default='')),
                ('ativo', models.BooleanField(db_index=True, default=True)),
                ('criado_em', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Aluno',
                'verbose_name_plural': 'Alunos',
                'db_table': 'alunos',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='CursoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(max_length=200)),
                ('codigo', models.CharField(max_length=50, unique=True)),
                ('descricao', models.TextField(blank=True, default='')),
                ('carga_horaria', models.PositiveIntegerField(help_text='Horas')),
                ('modalidade', models.CharField(
                    choices=[('presencial', 'Presencial'), ('ead', 'EAD'), ('hibrido', 'Híbrido')],
                    default='presencial',
                    max_length=20
                )),
                ('valor', models.DecimalField(decimal_places=2, max_digits=12)),
                ('vagas', models.PositiveIntegerField(blank=True, null=True)),
                ('ativo', models.BooleanField(db_index=True, default=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Curso',
                'verbose_name_plural': 'Cursos',
                'db_table': 'cursos',
                'ordering': ['nome'],
            },
        ),
    ]
