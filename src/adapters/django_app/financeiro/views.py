"""
Views HTML do domínio Financeiro.

- GET /financeiro/ - Dashboard financeiro
- GET|POST /financeiro/descontos/ - Cupons de desconto
- POST /financeiro/pagamentos/<id>/registrar/ - Baixa manual de parcela
- POST /financeiro/pagamentos/<id>/cancelar/ - Cancelar parcela
"""

import logging

from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views import View

from src.core.financeiro.dtos import (
    CancelarPagamentoInputDTO,
    CriarDescontoInputDTO,
    RegistrarPagamentoInputDTO,
)
from src.core.shared.exceptions import DomainException, EntityNotFoundError

from ..shared.views import ContainerMixin, FlashMessageMixin, erro_no_form
from .forms import CancelarPagamentoForm, DescontoForm, RegistrarPagamentoForm

logger = logging.getLogger(__name__)


class DashboardFinanceiroView(ContainerMixin, View):
    """Resumo mensal (receitas, pendentes, atrasados) e últimos pagamentos."""

    template_name = 'financeiro/dashboard.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        try:
            meses = int(request.GET.get('meses', 6))
        except ValueError:
            meses = 6
        try:
            resumo = self.get_service('obter_resumo_financeiro_service').execute(meses=meses)
        except DomainException as e:
            logger.warning(f"Resumo financeiro indisponível: {e}")
            resumo = None
        return render(request, self.template_name, {'resumo': resumo, 'meses': meses})


class DescontoListView(ContainerMixin, FlashMessageMixin, View):
    template_name = 'financeiro/descontos.html'

    def _render(self, request, form):
        descontos = self.get_service('listar_descontos_service').execute()
        return render(request, self.template_name, {'descontos': descontos, 'form': form})

    def get(self, request: HttpRequest) -> HttpResponse:
        return self._render(request, DescontoForm())

    def post(self, request: HttpRequest) -> HttpResponse:
        form = DescontoForm(request.POST)
        if not form.is_valid():
            return self._render(request, form)

        dados = form.cleaned_data
        try:
            desconto = self.get_service('criar_desconto_service').execute(
                CriarDescontoInputDTO(
                    nome=dados['nome'],
                    codigo=dados['codigo'],
                    tipo=dados['tipo'],
                    valor=dados['valor'],
                    data_inicio=dados['data_inicio'],
                    data_fim=dados['data_fim'],
                    limite_usos=dados['limite_usos'],
                    descricao=dados['descricao'],
                )
            )
        except DomainException as e:
            erro_no_form(form, e)
            return self._render(request, form)

        self.success_message(request, f"Cupom {desconto.codigo} criado.")
        return redirect('financeiro:descontos')


class PagamentoRegistrarView(ContainerMixin, FlashMessageMixin, View):
    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        form = RegistrarPagamentoForm(request.POST)
        form.is_valid()
        dados = form.cleaned_data
        try:
            pagamento = self.get_service('registrar_pagamento_service').execute(
                RegistrarPagamentoInputDTO(
                    pagamento_id=pk,
                    data_pagamento=dados.get('data_pagamento'),
                    observacoes=dados.get('observacoes') or None,
                )
            )
        except EntityNotFoundError:
            raise Http404("Pagamento não encontrado")
        except DomainException as e:
            self.error_message(request, e.message)
            return redirect(request.META.get('HTTP_REFERER') or 'financeiro:dashboard')

        self.success_message(request, f"Parcela {pagamento.numero_parcela} registrada como paga.")
        return redirect('matriculas:detail', pk=pagamento.matricula_id)


class PagamentoCancelarView(ContainerMixin, FlashMessageMixin, View):
    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        form = CancelarPagamentoForm(request.POST)
        if not form.is_valid():
            self.error_message(request, "Informe o motivo do cancelamento.")
            return redirect(request.META.get('HTTP_REFERER') or 'financeiro:dashboard')

        try:
            pagamento = self.get_service('cancelar_pagamento_service').execute(
                CancelarPagamentoInputDTO(pagamento_id=pk, motivo=form.cleaned_data['motivo'])
            )
        except EntityNotFoundError:
            raise Http404("Pagamento não encontrado")
        except DomainException as e:
            self.error_message(request, e.message)
            return redirect(request.META.get('HTTP_REFERER') or 'financeiro:dashboard')

        self.success_message(request, f"Parcela {pagamento.numero_parcela} cancelada.")
        return redirect('matriculas:detail', pk=pagamento.matricula_id)
