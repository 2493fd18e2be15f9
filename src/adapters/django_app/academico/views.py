"""
Views HTML do domínio Acadêmico.

- GET /academico/alunos/ - Lista (busca por nome, e-mail ou CPF)
- GET|POST /academico/alunos/novo/ - Cadastro
- GET /academico/cursos/ - Lista
- GET|POST /academico/cursos/novo/ - Cadastro
"""

import logging

from django.core.paginator import Paginator
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views import View

from src.core.academico.dtos import CriarAlunoInputDTO, CriarCursoInputDTO, ListarAlunosQueryDTO
from src.core.shared.exceptions import DomainException

from ..shared.views import ContainerMixin, FlashMessageMixin, erro_no_form
from .forms import AlunoForm, CursoForm

logger = logging.getLogger(__name__)


class AlunoListView(ContainerMixin, View):
    template_name = 'academico/alunos_list.html'
    paginate_by = 20

    def get(self, request: HttpRequest) -> HttpResponse:
        busca = request.GET.get('q') or None
        alunos = self.get_service('listar_alunos_service').execute(
            ListarAlunosQueryDTO(busca=busca)
        )
        page_obj = Paginator(alunos, self.paginate_by).get_page(request.GET.get('page', 1))
        return render(request, self.template_name, {
            'page_obj': page_obj,
            'alunos': page_obj.object_list,
            'busca': busca or '',
        })


class AlunoCreateView(ContainerMixin, FlashMessageMixin, View):
    template_name = 'academico/aluno_form.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        return render(request, self.template_name, {'form': AlunoForm()})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = AlunoForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        try:
            aluno = self.get_service('criar_aluno_service').execute(
                CriarAlunoInputDTO(**form.cleaned_data)
            )
        except DomainException as e:
            logger.warning(f"Cadastro de aluno recusado: {e}")
            erro_no_form(form, e)
            return render(request, self.template_name, {'form': form})

        self.success_message(request, f"Aluno {aluno.nome} cadastrado com sucesso!")
        return redirect('academico:alunos')


class CursoListView(ContainerMixin, View):
    template_name = 'academico/cursos_list.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        apenas_ativos = request.GET.get('ativos') == '1'
        cursos = self.get_service('listar_cursos_service').execute(apenas_ativos=apenas_ativos)
        return render(request, self.template_name, {'cursos': cursos, 'apenas_ativos': apenas_ativos})


class CursoCreateView(ContainerMixin, FlashMessageMixin, View):
    template_name = 'academico/curso_form.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        return render(request, self.template_name, {'form': CursoForm()})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = CursoForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        try:
            curso = self.get_service('criar_curso_service').execute(
                CriarCursoInputDTO(**form.cleaned_data)
            )
        except DomainException as e:
            logger.warning(f"Cadastro de curso recusado: {e}")
            erro_no_form(form, e)
            return render(request, self.template_name, {'form': form})

        self.success_message(request, f"Curso {curso.codigo} cadastrado com sucesso!")
        return redirect('academico:cursos')
