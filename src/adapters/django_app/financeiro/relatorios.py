"""
Renderização de relatórios financeiros (CSV e PDF).

O RelatorioDTO vem do Core já tabulado; aqui apenas se escolhe o
formato de saída. CSV usa ``;`` e BOM UTF-8 para abrir no Excel.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO, StringIO
import csv

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from src.core.financeiro.dtos import RelatorioDTO
from src.core.shared.exceptions import ValidationError


@dataclass
class ArquivoRelatorio:
    nome: str
    conteudo: bytes
    content_type: str


def _celula(valor) -> str:
    if valor is None:
        return ""
    if isinstance(valor, (date, datetime)):
        return valor.strftime("%d/%m/%Y")
    if isinstance(valor, Decimal):
        return f"{valor:.2f}"
    return str(valor)


def renderizar_csv(relatorio: RelatorioDTO) -> bytes:
    buffer = StringIO()
    writer = csv.writer(buffer, delimiter=";")
    writer.writerow(relatorio.colunas)
    for linha in relatorio.linhas:
        writer.writerow([_celula(v) for v in linha])
    return buffer.getvalue().encode("utf-8-sig")


def renderizar_pdf(relatorio: RelatorioDTO) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=1.5 * cm,
        rightMargin=1.5 * cm,
        topMargin=1.5 * cm,
        bottomMargin=1.5 * cm,
        title=relatorio.titulo,
    )
    estilos = getSampleStyleSheet()
    historia = [
        Paragraph(relatorio.titulo, estilos["Title"]),
        Paragraph(f"Gerado em {relatorio.gerado_em.strftime('%d/%m/%Y %H:%M')}", estilos["Normal"]),
        Spacer(1, 12),
    ]

    if relatorio.resumo:
        resumo = Table([[rotulo, _celula(valor)] for rotulo, valor in relatorio.resumo])
        resumo.setStyle(TableStyle([("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold")]))
        historia += [resumo, Spacer(1, 12)]

    dados = [relatorio.colunas] + [[_celula(v) for v in linha] for linha in relatorio.linhas]
    tabela = Table(dados, repeatRows=1)
    tabela.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#343a40")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f2f2f2")]),
    ]))
    historia.append(tabela)

    doc.build(historia)
    return buffer.getvalue()


def renderizar_relatorio(relatorio: RelatorioDTO, formato: str) -> ArquivoRelatorio:
    """
    Raises:
        ValidationError: Formato diferente de csv e pdf
    """
    if formato == "csv":
        return ArquivoRelatorio(
            nome=f"{relatorio.nome_arquivo_base}.csv",
            conteudo=renderizar_csv(relatorio),
            content_type="text/csv; charset=utf-8",
        )
    if formato == "pdf":
        return ArquivoRelatorio(
            nome=f"{relatorio.nome_arquivo_base}.pdf",
            conteudo=renderizar_pdf(relatorio),
            content_type="application/pdf",
        )
    raise ValidationError(f"Formato de relatório inválido: {formato}", field="format")
