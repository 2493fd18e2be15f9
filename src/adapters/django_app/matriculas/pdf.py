"""
Renderização do contrato de matrícula em PDF (reportlab).

Seções:
1. Partes (instituição e aluno)
2. Objeto (curso, carga horária, modalidade, prazo)
3. Condições financeiras
4. Obrigações e rescisão
5. Assinaturas
"""

from decimal import Decimal
from io import BytesIO
import logging

from django.conf import settings
from django.utils.html import escape
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from src.core.matriculas.ports import DadosContrato

logger = logging.getLogger(__name__)

FORMAS_PAGAMENTO = {
    'cartao_credito': 'Cartão de crédito',
    'boleto': 'Boleto bancário',
    'pix': 'PIX',
    'transferencia': 'Transferência bancária',
}

MODALIDADES = {
    'presencial': 'Presencial',
    'ead': 'Ensino a distância (EAD)',
    'hibrido': 'Híbrido',
}


def formatar_moeda(valor: Decimal) -> str:
    """1234.5 -> 'R$ 1.234,50'"""
    texto = f"{Decimal(valor):,.2f}"
    return "R$ " + texto.replace(",", "_").replace(".", ",").replace("_", ".")


class ReportlabContratoRenderer:
    """Implementação de ContratoPdfRenderer."""

    def __init__(self, instituicao: str = None, cnpj: str = None):
        self.instituicao = instituicao or getattr(settings, 'INSTITUICAO_NOME', 'Instituição de Ensino')
        self.cnpj = cnpj or getattr(settings, 'INSTITUICAO_CNPJ', '')

    def _estilos(self):
        base = getSampleStyleSheet()
        return {
            'titulo': ParagraphStyle('titulo', parent=base['Title'], fontSize=16, alignment=TA_CENTER),
            'secao': ParagraphStyle('secao', parent=base['Heading2'], fontSize=12, spaceBefore=12),
            'texto': ParagraphStyle('texto', parent=base['BodyText'], alignment=TA_JUSTIFY, leading=14),
            'pequeno': ParagraphStyle('pequeno', parent=base['BodyText'], fontSize=8, textColor=colors.grey),
        }

    def _tabela(self, linhas):
        tabela = Table(linhas, colWidths=[6 * cm, 10 * cm])
        tabela.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        return tabela

    def render(self, dados: DadosContrato) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=2 * cm,
            rightMargin=2 * cm,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
            title=f"Contrato de Matrícula - {dados.curso_nome}",
        )
        estilos = self._estilos()
        historia = [
            Paragraph("CONTRATO DE PRESTAÇÃO DE SERVIÇOS EDUCACIONAIS", estilos['titulo']),
            Paragraph(f"Matrícula nº {dados.matricula_id}", estilos['pequeno']),
            Spacer(1, 12),
        ]

        historia.append(Paragraph("1. DAS PARTES", estilos['secao']))
        contratada = self.instituicao + (f", CNPJ {self.cnpj}" if self.cnpj else "")
        historia.append(Paragraph(f"<b>CONTRATADA:</b> {escape(contratada)}.", estilos['texto']))
        historia.append(self._tabela([
            ['Aluno(a)', dados.aluno_nome],
            ['CPF', dados.aluno_cpf],
            ['E-mail', dados.aluno_email],
            ['Endereço', dados.aluno_endereco or '-'],
        ]))

        historia.append(Paragraph("2. DO OBJETO", estilos['secao']))
        historia.append(self._tabela([
            ['Curso', f"{dados.curso_nome} ({dados.curso_codigo})"],
            ['Carga horária', f"{dados.carga_horaria} horas"],
            ['Modalidade', MODALIDADES.get(dados.modalidade, dados.modalidade)],
            ['Duração estimada', f"{dados.prazo_meses} meses"],
            ['Início', dados.data_inicio.strftime('%d/%m/%Y') if dados.data_inicio else 'A definir'],
        ]))

        historia.append(Paragraph("3. DAS CONDIÇÕES FINANCEIRAS", estilos['secao']))
        linhas = [['Valor total', formatar_moeda(dados.valor_total)]]
        if dados.desconto_descricao:
            linhas.append(['Desconto', dados.desconto_descricao])
            linhas.append(['Valor com desconto', formatar_moeda(dados.valor_com_desconto)])
        linhas += [
            ['Parcelamento', f"{dados.numero_parcelas}x de {formatar_moeda(dados.valor_parcela)}"],
            ['Forma de pagamento', FORMAS_PAGAMENTO.get(dados.forma_pagamento, dados.forma_pagamento)],
        ]
        historia.append(self._tabela(linhas))
        historia.append(Spacer(1, 6))
        historia.append(Paragraph(
            "O atraso no pagamento de qualquer parcela sujeita o(a) CONTRATANTE a multa "
            "de 2% e juros de 1% ao mês sobre o valor devido.",
            estilos['texto'],
        ))

        historia.append(Paragraph("4. DAS OBRIGAÇÕES E DA RESCISÃO", estilos['secao']))
        historia.append(Paragraph(
            "A CONTRATADA obriga-se a ministrar o curso conforme o projeto pedagógico. "
            "O(A) CONTRATANTE obriga-se a manter os pagamentos em dia e a cumprir o "
            "regimento da instituição. O cancelamento deve ser solicitado por escrito, "
            "sendo devidas as parcelas vencidas até a data do pedido.",
            estilos['texto'],
        ))
        for chave, valor in dados.extras.items():
            historia.append(Paragraph(f"<b>{escape(chave)}:</b> {escape(valor)}", estilos['texto']))

        historia.append(Paragraph("5. DAS ASSINATURAS", estilos['secao']))
        historia.append(Paragraph(
            f"Emitido em {dados.data_emissao.strftime('%d/%m/%Y')}. A assinatura eletrônica "
            "registra data, hora, IP e navegador do(a) CONTRATANTE.",
            estilos['texto'],
        ))
        historia.append(Spacer(1, 36))
        assinaturas = Table(
            [['_' * 35, '_' * 35], [dados.aluno_nome, self.instituicao]],
            colWidths=[8 * cm, 8 * cm],
        )
        assinaturas.setStyle(TableStyle([('ALIGN', (0, 0), (-1, -1), 'CENTER')]))
        historia.append(assinaturas)

        doc.build(historia)
        conteudo = buffer.getvalue()
        logger.debug(f"Contrato renderizado: {dados.matricula_id} ({len(conteudo)} bytes)")
        return conteudo
