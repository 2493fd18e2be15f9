"""
API JSON do domínio Acadêmico.

Endpoints:
- GET /academico/api/alunos/ - Listar alunos (?q=, ?ativo=, ?page=, ?per_page=)
- POST /academico/api/alunos/ - Cadastrar aluno
- GET /academico/api/alunos/<id>/ - Obter aluno
- PATCH /academico/api/alunos/<id>/ - Atualizar aluno
- GET /academico/api/cursos/ - Listar cursos (?ativos=1)
- POST /academico/api/cursos/ - Criar curso
- GET /academico/api/cursos/<id>/ - Obter curso
- PATCH /academico/api/cursos/<id>/ - Atualizar curso
- GET /academico/api/cursos/<id>/turmas/ - Listar turmas (?ativas=1)
- POST /academico/api/cursos/<id>/turmas/ - Abrir turma
- GET /academico/api/cursos/<id>/disciplinas/ - Matriz curricular
- POST /academico/api/cursos/<id>/disciplinas/ - Incluir disciplina
- POST /academico/api/matriculas/<id>/turma/ - Alocar aluno em turma
- GET /academico/api/matriculas/<id>/requisitos/ - Requisitos acadêmicos
- POST /academico/api/matriculas/<id>/grade/ - Gerar grade curricular
- GET /academico/api/matriculas/<id>/grade/ - Obter grade curricular
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.academico.dtos import (
    AlocarTurmaInputDTO,
    AtualizarAlunoInputDTO,
    AtualizarCursoInputDTO,
    CriarAlunoInputDTO,
    CriarCursoInputDTO,
    CriarDisciplinaInputDTO,
    CriarTurmaInputDTO,
    ListarAlunosQueryDTO,
)
from src.core.shared.exceptions import ValidationError

from ..shared.api import BaseAPIView, json_response, parse_date, parse_int
from ..shared.repository import PaginationParams

logger = logging.getLogger(__name__)


def _paginar(itens: list, request: HttpRequest) -> JsonResponse:
    pagination = PaginationParams.from_query(request.GET)
    total = len(itens)
    pagina = itens[pagination.offset:pagination.offset + pagination.per_page]
    return json_response(
        success=True,
        data=[item.to_dict() for item in pagina],
        meta={
            'total': total,
            'page': pagination.page,
            'per_page': pagination.per_page,
            'total_pages': (total + pagination.per_page - 1) // pagination.per_page,
        },
    )


def _bool(valor) -> bool:
    if isinstance(valor, bool):
        return valor
    return str(valor).lower() in ('1', 'true', 'sim')


class AlunoAPIListView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            ativo = request.GET.get('ativo')
            alunos = self.get_service('listar_alunos_service').execute(
                ListarAlunosQueryDTO(
                    busca=request.GET.get('q') or None,
                    ativo=_bool(ativo) if ativo not in (None, '') else None,
                )
            )
            return _paginar(alunos, request)
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            for campo in ('nome', 'email', 'cpf'):
                if not data.get(campo):
                    raise ValidationError(f"{campo} é obrigatório", field=campo)

            aluno = self.get_service('criar_aluno_service').execute(
                CriarAlunoInputDTO(
                    nome=data['nome'],
                    email=data['email'],
                    cpf=data['cpf'],
                    telefone=data.get('telefone', ''),
                    data_nascimento=parse_date(data.get('data_nascimento'), 'data_nascimento'),
                    endereco=data.get('endereco', ''),
                )
            )
            return json_response(success=True, data=aluno.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class AlunoAPIDetailView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            aluno = self.get_service('obter_aluno_service').execute(pk)
            return json_response(success=True, data=aluno.to_dict())
        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            aluno = self.get_service('atualizar_aluno_service').execute(
                AtualizarAlunoInputDTO(
                    aluno_id=pk,
                    nome=data.get('nome'),
                    email=data.get('email'),
                    cpf=data.get('cpf'),
                    telefone=data.get('telefone'),
                    endereco=data.get('endereco'),
                    ativo=_bool(data['ativo']) if 'ativo' in data else None,
                )
            )
            return json_response(success=True, data=aluno.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class CursoAPIListView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            cursos = self.get_service('listar_cursos_service').execute(
                apenas_ativos=_bool(request.GET.get('ativos', '0'))
            )
            return _paginar(cursos, request)
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            for campo in ('nome', 'codigo', 'carga_horaria', 'valor'):
                if data.get(campo) in (None, ''):
                    raise ValidationError(f"{campo} é obrigatório", field=campo)

            curso = self.get_service('criar_curso_service').execute(
                CriarCursoInputDTO(
                    nome=data['nome'],
                    codigo=data['codigo'],
                    carga_horaria=parse_int(data['carga_horaria'], 'carga_horaria'),
                    valor=data['valor'],
                    modalidade=data.get('modalidade', 'presencial'),
                    descricao=data.get('descricao', ''),
                    vagas=parse_int(data.get('vagas'), 'vagas'),
                )
            )
            return json_response(success=True, data=curso.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class CursoAPIDetailView(BaseAPIView):
    campos_editaveis = ('nome', 'codigo', 'descricao', 'carga_horaria', 'modalidade', 'valor', 'vagas', 'ativo')

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            curso = self.get_service('obter_curso_service').execute(pk)
            return json_response(success=True, data=curso.to_dict())
        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            dados = {k: v for k, v in data.items() if k in self.campos_editaveis}
            curso = self.get_service('atualizar_curso_service').execute(
                AtualizarCursoInputDTO(curso_id=pk, dados=dados)
            )
            return json_response(success=True, data=curso.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class TurmaAPIListView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            turmas = self.get_service('listar_turmas_service').execute(
                pk, apenas_ativas=_bool(request.GET.get('ativas', '0'))
            )
            return json_response(success=True, data=[t.to_dict() for t in turmas], meta={'total': len(turmas)})
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            for campo in ('nome', 'codigo', 'vagas'):
                if data.get(campo) in (None, ''):
                    raise ValidationError(f"{campo} é obrigatório", field=campo)

            turma = self.get_service('criar_turma_service').execute(
                CriarTurmaInputDTO(
                    curso_id=pk,
                    nome=data['nome'],
                    codigo=data['codigo'],
                    vagas=parse_int(data['vagas'], 'vagas'),
                    turno=data.get('turno', ''),
                    data_inicio=parse_date(data.get('data_inicio'), 'data_inicio'),
                )
            )
            return json_response(success=True, data=turma.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class DisciplinaAPIListView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            disciplinas = self.get_service('listar_disciplinas_service').execute(pk)
            return json_response(
                success=True,
                data=[d.to_dict() for d in disciplinas],
                meta={'total': len(disciplinas), 'carga_horaria_total': sum(d.carga_horaria for d in disciplinas)},
            )
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            for campo in ('codigo', 'nome', 'semestre', 'carga_horaria'):
                if data.get(campo) in (None, ''):
                    raise ValidationError(f"{campo} é obrigatório", field=campo)

            disciplina = self.get_service('adicionar_disciplina_service').execute(
                CriarDisciplinaInputDTO(
                    curso_id=pk,
                    codigo=data['codigo'],
                    nome=data['nome'],
                    semestre=parse_int(data['semestre'], 'semestre'),
                    carga_horaria=parse_int(data['carga_horaria'], 'carga_horaria'),
                )
            )
            return json_response(success=True, data=disciplina.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class AlocacaoTurmaAPIView(BaseAPIView):
    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body:
            {"turma_id", "observacoes"?}
        """
        try:
            data = self.parse_body(request)
            if not data.get('turma_id'):
                raise ValidationError("turma_id é obrigatório", field="turma_id")

            alocacao = self.get_service('alocar_turma_service').execute(
                AlocarTurmaInputDTO(
                    matricula_id=pk,
                    turma_id=str(data['turma_id']),
                    observacoes=str(data.get('observacoes') or ''),
                )
            )
            return json_response(success=True, data=alocacao.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class RequisitosAcademicosAPIView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            resultado = self.get_service('verificar_requisitos_academicos_service').execute(pk)
            return json_response(success=True, data=resultado.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class GradeCurricularAPIView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            grade = self.get_service('obter_grade_curricular_service').execute(pk)
            return json_response(success=True, data=grade.to_dict())
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            grade = self.get_service('gerar_grade_curricular_service').execute(pk)
            return json_response(success=True, data=grade.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)
