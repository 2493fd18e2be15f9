"""
Views HTML do domínio de Matrículas.

- GET /matriculas/ - Lista (filtro por status)
- GET|POST /matriculas/nova/ - Nova matrícula (gera as parcelas)
- GET /matriculas/<id>/ - Detalhes: documentos, contrato e parcelas
- POST /matriculas/<id>/status/ - Alterar status
- POST /matriculas/<id>/documentos/ - Enviar documento
- POST /matriculas/documentos/<id>/avaliar/ - Avaliar documento
- POST /matriculas/<id>/contrato/ - Gerar contrato
- POST /matriculas/contratos/<id>/assinar/ - Assinar contrato
- GET /matriculas/contratos/<id>/download/ - Baixar PDF do contrato
"""

import logging

from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views import View

from src.core.academico.dtos import ListarAlunosQueryDTO
from src.core.financeiro.dtos import ValidarDescontoInputDTO
from src.core.matriculas.dtos import (
    AssinarContratoInputDTO,
    AtualizarStatusMatriculaInputDTO,
    AvaliarDocumentoInputDTO,
    CriarMatriculaInputDTO,
    EnviarDocumentoInputDTO,
    ListarMatriculasQueryDTO,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
)

from ..shared.api import get_request_info
from ..shared.views import ContainerMixin, FlashMessageMixin, UserContextMixin, erro_no_form
from .forms import (
    ContratoAssinarForm,
    DocumentoAvaliarForm,
    DocumentoUploadForm,
    MatriculaCreateForm,
    MatriculaStatusForm,
)
from .models import MatriculaStatusChoices

logger = logging.getLogger(__name__)


class MatriculaListView(ContainerMixin, View):
    template_name = 'matriculas/list.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        status = request.GET.get('status') or None
        try:
            matriculas = self.get_service('listar_matriculas_service').execute(
                ListarMatriculasQueryDTO(status=status)
            )
        except DomainException:
            matriculas, status = [], None

        return render(request, self.template_name, {
            'matriculas': matriculas,
            'status_atual': status,
            'status_choices': MatriculaStatusChoices.choices,
        })


class MatriculaCreateView(ContainerMixin, FlashMessageMixin, View):
    """
    Valor total em branco usa o valor do curso; cupom informado é
    validado antes da criação.
    """

    template_name = 'matriculas/create.html'

    def _form(self, data=None):
        alunos = self.get_service('listar_alunos_service').execute(ListarAlunosQueryDTO(ativo=True))
        cursos = self.get_service('listar_cursos_service').execute(apenas_ativos=True)
        return MatriculaCreateForm(data, alunos=alunos, cursos=cursos)

    def get(self, request: HttpRequest) -> HttpResponse:
        return render(request, self.template_name, {'form': self._form()})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = self._form(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        dados = form.cleaned_data
        try:
            valor_total = dados['valor_total']
            if valor_total is None:
                valor_total = self.get_service('obter_curso_service').execute(dados['curso_id']).valor

            desconto_id = None
            if dados['codigo_desconto']:
                aplicado = self.get_service('validar_desconto_service').execute(
                    ValidarDescontoInputDTO(
                        codigo=dados['codigo_desconto'],
                        valor_total=valor_total,
                        curso_id=dados['curso_id'],
                    )
                )
                desconto_id = aplicado.desconto_id

            resultado = self.get_service('criar_matricula_service').execute(
                CriarMatriculaInputDTO(
                    aluno_id=dados['aluno_id'],
                    curso_id=dados['curso_id'],
                    data_inicio=dados['data_inicio'],
                    data_termino=dados['data_termino'],
                    valor_total=valor_total,
                    forma_pagamento=dados['forma_pagamento'],
                    numero_parcelas=dados['numero_parcelas'],
                    data_primeiro_vencimento=dados['data_primeiro_vencimento'],
                    desconto_id=desconto_id,
                    observacoes=dados['observacoes'],
                )
            )
        except DomainException as e:
            logger.warning(f"Matrícula recusada: {e}")
            erro_no_form(form, e)
            return render(request, self.template_name, {'form': form})

        matricula = resultado.matricula
        self.success_message(
            request,
            f"Matrícula criada com {len(resultado.pagamentos)} parcela(s)."
        )
        return redirect('matriculas:detail', pk=matricula.id)


class MatriculaDetailView(ContainerMixin, FlashMessageMixin, View):
    template_name = 'matriculas/detail.html'

    def get(self, request: HttpRequest, pk: str) -> HttpResponse:
        try:
            matricula = self.get_service('obter_matricula_service').execute(pk)
        except EntityNotFoundError:
            raise Http404("Matrícula não encontrada")

        context = {
            'matricula': matricula,
            'documentos': self.get_service('listar_documentos_service').execute(pk),
            'contrato': self.get_service('obter_contrato_service').por_matricula(pk),
            'pagamentos': self.get_service('listar_pagamentos_service').execute(matricula_id=pk),
            'status_form': MatriculaStatusForm(),
            'documento_form': DocumentoUploadForm(),
            'avaliar_form': DocumentoAvaliarForm(),
            'assinar_form': ContratoAssinarForm(),
        }
        return render(request, self.template_name, context)


class MatriculaStatusView(ContainerMixin, FlashMessageMixin, View):
    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        form = MatriculaStatusForm(request.POST)
        if not form.is_valid():
            self.error_message(request, "Status inválido.")
            return redirect('matriculas:detail', pk=pk)

        try:
            matricula = self.get_service('atualizar_status_matricula_service').execute(
                AtualizarStatusMatriculaInputDTO(
                    matricula_id=pk,
                    status=form.cleaned_data['status'],
                    observacoes=form.cleaned_data['observacoes'],
                )
            )
            self.success_message(request, f"Status alterado para {matricula.status}.")
        except EntityNotFoundError:
            raise Http404("Matrícula não encontrada")
        except DomainException as e:
            self.error_message(request, e.message)

        return redirect('matriculas:detail', pk=pk)


class DocumentoUploadView(ContainerMixin, FlashMessageMixin, View):
    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        form = DocumentoUploadForm(request.POST, request.FILES)
        if not form.is_valid():
            for erros in form.errors.values():
                self.error_message(request, erros[0])
            return redirect('matriculas:detail', pk=pk)

        arquivo = form.cleaned_data['arquivo']
        try:
            self.get_service('enviar_documento_service').execute(
                EnviarDocumentoInputDTO(
                    matricula_id=pk,
                    tipo=form.cleaned_data['tipo'],
                    nome_arquivo=arquivo.name,
                    conteudo=arquivo.read(),
                )
            )
            self.success_message(request, "Documento enviado para análise.")
        except DomainException as e:
            logger.warning(f"Envio de documento falhou ({pk}): {e}")
            self.error_message(request, e.message)

        return redirect('matriculas:detail', pk=pk)


class DocumentoAvaliarView(ContainerMixin, FlashMessageMixin, UserContextMixin, View):
    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        form = DocumentoAvaliarForm(request.POST)
        if not form.is_valid():
            self.error_message(request, "Parecer inválido.")
            return redirect(request.POST.get('next') or 'matriculas:list')

        try:
            documento = self.get_service('avaliar_documento_service').execute(
                AvaliarDocumentoInputDTO(
                    documento_id=pk,
                    status=form.cleaned_data['status'],
                    observacoes=form.cleaned_data['observacoes'],
                    avaliado_por=self.get_user_id(request),
                )
            )
        except EntityNotFoundError:
            raise Http404("Documento não encontrado")
        except DomainException as e:
            self.error_message(request, e.message)
            return redirect('matriculas:list')

        self.success_message(request, f"Documento marcado como {documento.status}.")
        return redirect('matriculas:detail', pk=documento.matricula_id)


class ContratoGerarView(ContainerMixin, FlashMessageMixin, View):
    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        try:
            self.get_service('gerar_contrato_service').execute(pk)
            self.success_message(request, "Contrato gerado.")
        except EntityNotFoundError:
            raise Http404("Matrícula não encontrada")
        except DomainException as e:
            logger.error(f"Erro ao gerar contrato da matrícula {pk}: {e}")
            self.error_message(request, e.message)

        return redirect('matriculas:detail', pk=pk)


class ContratoAssinarView(ContainerMixin, FlashMessageMixin, UserContextMixin, View):
    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        form = ContratoAssinarForm(request.POST)
        obter = self.get_service('obter_contrato_service')
        try:
            contrato = obter.execute(pk)
        except EntityNotFoundError:
            raise Http404("Contrato não encontrado")

        if not form.is_valid():
            self.error_message(request, "É necessário aceitar os termos do contrato.")
            return redirect('matriculas:detail', pk=contrato.matricula_id)

        info = get_request_info(request)
        try:
            self.get_service('assinar_contrato_service').execute(
                AssinarContratoInputDTO(
                    contrato_id=pk,
                    assinado_por=self.get_user_id(request) or 'anonimo',
                    ip=info['ip'],
                    user_agent=info['user_agent'],
                )
            )
            self.success_message(request, "Contrato assinado com sucesso!")
        except BusinessRuleViolationError as e:
            self.error_message(request, e.message)

        return redirect('matriculas:detail', pk=contrato.matricula_id)


class ContratoDownloadView(ContainerMixin, View):
    def get(self, request: HttpRequest, pk: str) -> HttpResponse:
        try:
            contrato = self.get_service('obter_contrato_service').execute(pk)
        except EntityNotFoundError:
            raise Http404("Contrato não encontrado")

        storage = self.get_service('file_storage')
        caminho = storage.path_from_url(contrato.url)
        if not storage.exists(caminho):
            logger.error(f"Arquivo do contrato {pk} ausente: {caminho}")
            raise Http404("Arquivo do contrato não encontrado")

        response = HttpResponse(storage.read(caminho), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="contrato_{contrato.matricula_id}.pdf"'
        return response
