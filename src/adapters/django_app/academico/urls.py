"""
URL patterns do domínio Acadêmico.
"""

from django.urls import path

from . import api_views, views

app_name = 'academico'

urlpatterns = [
    # HTML
    path('alunos/', views.AlunoListView.as_view(), name='alunos'),
    path('alunos/novo/', views.AlunoCreateView.as_view(), name='aluno_create'),
    path('cursos/', views.CursoListView.as_view(), name='cursos'),
    path('cursos/novo/', views.CursoCreateView.as_view(), name='curso_create'),

    # API JSON
    path('api/alunos/', api_views.AlunoAPIListView.as_view(), name='api_alunos'),
    path('api/alunos/<str:pk>/', api_views.AlunoAPIDetailView.as_view(), name='api_aluno_detail'),
    path('api/cursos/', api_views.CursoAPIListView.as_view(), name='api_cursos'),
    path('api/cursos/<str:pk>/', api_views.CursoAPIDetailView.as_view(), name='api_curso_detail'),
    path('api/cursos/<str:pk>/turmas/', api_views.TurmaAPIListView.as_view(), name='api_curso_turmas'),
    path('api/cursos/<str:pk>/disciplinas/', api_views.DisciplinaAPIListView.as_view(), name='api_curso_disciplinas'),
    path('api/matriculas/<str:pk>/turma/', api_views.AlocacaoTurmaAPIView.as_view(), name='api_matricula_turma'),
    path('api/matriculas/<str:pk>/requisitos/', api_views.RequisitosAcademicosAPIView.as_view(), name='api_matricula_requisitos'),
    path('api/matriculas/<str:pk>/grade/', api_views.GradeCurricularAPIView.as_view(), name='api_matricula_grade'),
]
