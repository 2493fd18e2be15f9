"""
Turmas, alocações, disciplinas do curso e grades curriculares.

Cria as tabelas:
- turmas
- alocacoes_turma
- disciplinas_curso
- grades_curriculares
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    dependencies = [
        ('academico', '0001_initial'),
        ('matriculas', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='TurmaModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(max_length=200)),
                ('codigo', models.CharField(max_length=50)),
                ('turno', models.CharField(blank=True, default='', max_length=30)),
                ('data_inicio', models.DateField(blank=True, null=True)),
                ('vagas', models.PositiveIntegerField()),
                ('alunos_alocados', models.PositiveIntegerField(default=0)),
                ('ativo', models.BooleanField(db_index=True, default=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('curso', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='turmas',
                    to='academico.cursomodel'
                )),
            ],
            options={
                'verbose_name': 'Turma',
                'verbose_name_plural': 'Turmas',
                'db_table': 'turmas',
                'ordering': ['codigo'],
            },
        ),
        migrations.AddConstraint(
            model_name='turmamodel',
            constraint=models.UniqueConstraint(fields=('curso', 'codigo'), name='uniq_turma_curso_codigo'),
        ),
        migrations.CreateModel(
            name='AlocacaoTurmaModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('status', models.CharField(default='ativa', max_length=20)),
                ('observacoes', models.TextField(blank=True, default='')),
                ('alocado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('turma', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='alocacoes',
                    to='academico.turmamodel'
                )),
                ('matricula', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='alocacoes',
                    to='matriculas.matriculamodel'
                )),
                ('aluno', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='alocacoes',
                    to='academico.alunomodel'
                )),
            ],
            options={
                'verbose_name': 'Alocação em turma',
                'verbose_name_plural': 'Alocações em turma',
                'db_table': 'alocacoes_turma',
                'ordering': ['-alocado_em'],
            },
        ),
        migrations.AddConstraint(
            model_name='alocacaoturmamodel',
            constraint=models.UniqueConstraint(fields=('aluno', 'turma'), name='uniq_alocacao_aluno_turma'),
        ),
        migrations.CreateModel(
            name='DisciplinaCursoModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('codigo', models.CharField(max_length=50)),
                ('nome', models.CharField(max_length=200)),
                ('semestre', models.PositiveSmallIntegerField()),
                ('carga_horaria', models.PositiveIntegerField(help_text='Horas')),
                ('curso', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='disciplinas',
                    to='academico.cursomodel'
                )),
            ],
            options={
                'verbose_name': 'Disciplina do curso',
                'verbose_name_plural': 'Disciplinas do curso',
                'db_table': 'disciplinas_curso',
                'ordering': ['semestre', 'codigo'],
            },
        ),
        migrations.AddConstraint(
            model_name='disciplinacursomodel',
            constraint=models.UniqueConstraint(fields=('curso', 'codigo'), name='uniq_disciplina_curso_codigo'),
        ),
        migrations.CreateModel(
            name='GradeCurricularModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('status', models.CharField(default='ativa', max_length=20)),
                ('disciplinas', models.JSONField(blank=True, default=list)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('matricula', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='grades',
                    to='matriculas.matriculamodel'
                )),
                ('aluno', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='grades',
                    to='academico.alunomodel'
                )),
                ('curso', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='grades',
                    to='academico.cursomodel'
                )),
            ],
            options={
                'verbose_name': 'Grade curricular',
                'verbose_name_plural': 'Grades curriculares',
                'db_table': 'grades_curriculares',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddConstraint(
            model_name='gradecurricularmodel',
            constraint=models.UniqueConstraint(fields=('aluno', 'curso'), name='uniq_grade_aluno_curso'),
        ),
    ]
