"""
API JSON do domínio de Matrículas.

Endpoints:
- GET /matriculas/api/ - Listar (?aluno_id=, ?curso_id=, ?status=)
- POST /matriculas/api/ - Criar matrícula (retorna as parcelas geradas)
- GET /matriculas/api/<id>/ - Obter matrícula
- POST /matriculas/api/<id>/status/ - Alterar status
- GET /matriculas/api/<id>/documentos/ - Listar documentos
- POST /matriculas/api/<id>/documentos/ - Enviar documento (multipart)
- POST /matriculas/api/documentos/<id>/avaliar/ - Avaliar documento
- GET /matriculas/api/<id>/contrato/ - Contrato da matrícula
- POST /matriculas/api/<id>/contrato/ - Gerar contrato
- POST /matriculas/api/contratos/<id>/assinar/ - Assinar contrato
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.matriculas.dtos import (
    AssinarContratoInputDTO,
    AtualizarStatusMatriculaInputDTO,
    AvaliarDocumentoInputDTO,
    CriarMatriculaInputDTO,
    EnviarDocumentoInputDTO,
    ListarMatriculasQueryDTO,
)
from src.core.shared.exceptions import EntityNotFoundError, ValidationError

from ..shared.api import (
    BaseAPIView,
    get_request_info,
    get_user_id,
    json_response,
    parse_date,
    parse_int,
)

logger = logging.getLogger(__name__)


def _obrigatorios(data: dict, *campos: str) -> None:
    for campo in campos:
        if data.get(campo) in (None, ''):
            raise ValidationError(f"{campo} é obrigatório", field=campo)


class MatriculaAPIListView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            matriculas = self.get_service('listar_matriculas_service').execute(
                ListarMatriculasQueryDTO(
                    aluno_id=request.GET.get('aluno_id') or None,
                    curso_id=request.GET.get('curso_id') or None,
                    status=request.GET.get('status') or None,
                )
            )
            return json_response(
                success=True,
                data=[m.to_dict() for m in matriculas],
                meta={'total': len(matriculas)},
            )
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body:
            {"aluno_id", "curso_id", "data_inicio", "valor_total",
             "forma_pagamento", "numero_parcelas", "data_termino"?,
             "data_primeiro_vencimento"?, "desconto_id"?, "observacoes"?}
        """
        try:
            data = self.parse_body(request)
            _obrigatorios(
                data, 'aluno_id', 'curso_id', 'data_inicio',
                'valor_total', 'forma_pagamento', 'numero_parcelas',
            )
            resultado = self.get_service('criar_matricula_service').execute(
                CriarMatriculaInputDTO(
                    aluno_id=data['aluno_id'],
                    curso_id=data['curso_id'],
                    data_inicio=parse_date(data['data_inicio'], 'data_inicio', obrigatorio=True),
                    data_termino=parse_date(data.get('data_termino'), 'data_termino'),
                    valor_total=data['valor_total'],
                    forma_pagamento=data['forma_pagamento'],
                    numero_parcelas=parse_int(data['numero_parcelas'], 'numero_parcelas'),
                    data_primeiro_vencimento=parse_date(
                        data.get('data_primeiro_vencimento'), 'data_primeiro_vencimento'
                    ),
                    desconto_id=data.get('desconto_id') or None,
                    observacoes=data.get('observacoes', ''),
                )
            )
            return json_response(success=True, data=resultado.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class MatriculaAPIDetailView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            matricula = self.get_service('obter_matricula_service').execute(pk)
            return json_response(success=True, data=matricula.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class MatriculaAPIStatusView(BaseAPIView):
    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            _obrigatorios(data, 'status')
            matricula = self.get_service('atualizar_status_matricula_service').execute(
                AtualizarStatusMatriculaInputDTO(
                    matricula_id=pk,
                    status=data['status'],
                    observacoes=data.get('observacoes', ''),
                )
            )
            return json_response(success=True, data=matricula.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class DocumentoAPIListView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            documentos = self.get_service('listar_documentos_service').execute(pk)
            return json_response(success=True, data=[d.to_dict() for d in documentos])
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """multipart/form-data: ``tipo`` e ``arquivo``."""
        try:
            arquivo = request.FILES.get('arquivo')
            if arquivo is None:
                raise ValidationError("arquivo é obrigatório", field="arquivo")
            _obrigatorios(request.POST, 'tipo')

            documento = self.get_service('enviar_documento_service').execute(
                EnviarDocumentoInputDTO(
                    matricula_id=pk,
                    tipo=request.POST['tipo'],
                    nome_arquivo=arquivo.name,
                    conteudo=arquivo.read(),
                )
            )
            return json_response(success=True, data=documento.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class DocumentoAPIAvaliarView(BaseAPIView):
    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            _obrigatorios(data, 'status')
            documento = self.get_service('avaliar_documento_service').execute(
                AvaliarDocumentoInputDTO(
                    documento_id=pk,
                    status=data['status'],
                    observacoes=data.get('observacoes', ''),
                    avaliado_por=data.get('avaliado_por') or get_user_id(request),
                )
            )
            return json_response(success=True, data=documento.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class ContratoAPIView(BaseAPIView):
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            contrato = self.get_service('obter_contrato_service').por_matricula(pk)
            if contrato is None:
                raise EntityNotFoundError(
                    "Contrato não encontrado", entity_type="Contrato", entity_id=pk
                )
            return json_response(success=True, data=contrato.to_dict())
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            contrato = self.get_service('gerar_contrato_service').execute(pk)
            return json_response(success=True, data=contrato.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class ContratoAPIAssinarView(BaseAPIView):
    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            assinado_por = data.get('assinado_por') or get_user_id(request)
            if not assinado_por:
                raise ValidationError("assinado_por é obrigatório", field="assinado_por")

            info = get_request_info(request)
            contrato = self.get_service('assinar_contrato_service').execute(
                AssinarContratoInputDTO(
                    contrato_id=pk,
                    assinado_por=assinado_por,
                    ip=info['ip'],
                    user_agent=info['user_agent'],
                )
            )
            return json_response(success=True, data=contrato.to_dict())
        except Exception as e:
            return self.handle_exception(e)
