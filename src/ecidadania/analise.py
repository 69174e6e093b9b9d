"""
Análises sobre as listagens do e-Cidadania.

As funções de filtro e ordenação são puras: recebem registros já extraídos
e não tocam em rede nem em cache. ``sugerir_tema_enquete`` é a única que
busca dados, uma listagem de consultas e uma de ideias, e depois compõe
as sugestões com ``sugerir_temas``.
"""

import logging
from typing import Any, Iterable, Sequence, TypeVar

from ecidadania.modelos import (
    ConsultaResumo, CriteriosSugestao, IdeiaResumo, StatusConsulta, SugestaoTema,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_SUGESTOES = 10
LIMITE_POLARIZADO = 20   # diferença abaixo disso: dividido demais
LIMITE_CONSENSO = 85     # maior lado acima disso: consenso demais

MOTIVO_MODERADO = "Tema com divisão moderada de opiniões, ideal para debate"
MOTIVO_TENDENCIA = "Tema com tendência clara mas ainda com debate significativo"
MOTIVO_PARTICIPACAO = "Tema com boa participação cidadã"


def diferenca(consulta: ConsultaResumo) -> int:
    return abs(consulta.percentual_sim - consulta.percentual_nao)


def maior_lado(consulta: ConsultaResumo) -> int:
    return max(consulta.percentual_sim, consulta.percentual_nao)


def filtrar_polarizadas(
    consultas: Iterable[ConsultaResumo], margem: int = 15, minimo_votos: int = 1000
) -> list[ConsultaResumo]:
    """Consultas com ``|sim - nao| <= margem``, das mais equilibradas para as menos.

    Empates mantêm a ordem de origem.

    Examples:
        Com margem 15, uma consulta 48/52 entra (diferença 4) e uma 10/90 não (diferença 80).
    """
    selecionadas = [c for c in consultas if c.total_votos >= minimo_votos and diferenca(c) <= margem]
    return sorted(selecionadas, key=diferenca)


def filtrar_consensuais(
    consultas: Iterable[ConsultaResumo], percentual_minimo: int = 85, minimo_votos: int = 1000
) -> list[ConsultaResumo]:
    """Consultas em que o maior lado tem pelo menos ``percentual_minimo``, do maior para o menor."""
    selecionadas = [c for c in consultas if c.total_votos >= minimo_votos and maior_lado(c) >= percentual_minimo]
    return sorted(selecionadas, key=maior_lado, reverse=True)


def ranquear_por(itens: Iterable[T], metrica: str, limite: int) -> list[T]:
    """Os ``limite`` itens com maior valor de ``metrica`` (comentarios, apoios...)."""
    return sorted(itens, key=lambda item: getattr(item, metrica), reverse=True)[:limite]


def motivo_por_diferenca(dif: int) -> str:
    if 20 <= dif <= 40:
        return MOTIVO_MODERADO
    if 40 < dif <= 70:
        return MOTIVO_TENDENCIA
    return MOTIVO_PARTICIPACAO


def _formatar_milhar(n: int) -> str:
    return f"{n:,}".replace(",", ".")


def sugerir_temas(
    consultas: Sequence[ConsultaResumo],
    ideias: Sequence[IdeiaResumo],
    criterios: CriteriosSugestao | None = None,
) -> dict[str, Any]:
    """Compõe sugestões de tema para enquete a partir de consultas e ideias.

    Consultas precisam de participação mínima e, conforme os critérios,
    são descartadas quando muito divididas (diferença < 20 pontos), muito
    consensuais (maior lado > 85%) ou já encerradas. Ideias só precisam da
    participação mínima. As duas listas são juntadas e ordenadas por
    participação, e as 10 primeiras são devolvidas.

    Returns:
        dict: ``criterios_aplicados``, ``total_analisados``, ``count`` e ``sugestoes``.
    """
    criterios = criterios or CriteriosSugestao()
    sugestoes: list[SugestaoTema] = []

    for consulta in consultas:
        if consulta.total_votos < criterios.minimo_participacao:
            continue
        if criterios.apenas_em_tramitacao and consulta.status == StatusConsulta.ENCERRADA:
            continue

        dif = diferenca(consulta)
        if criterios.evitar_polarizacao and dif < LIMITE_POLARIZADO:
            continue
        if criterios.evitar_consenso and maior_lado(consulta) > LIMITE_CONSENSO:
            continue

        sugestoes.append(SugestaoTema(
            tipo="consulta",
            id=consulta.id,
            titulo=consulta.ementa[:200],
            motivo=motivo_por_diferenca(dif),
            participacao=consulta.total_votos,
            url=consulta.url,
            polarizacao=100 - dif,
            materia_relacionada=consulta.materia or None,
        ))

    for ideia in ideias:
        if ideia.apoios < criterios.minimo_participacao:
            continue

        sugestoes.append(SugestaoTema(
            tipo="ideia",
            id=ideia.id,
            titulo=ideia.titulo[:200],
            motivo=f"Ideia popular com {_formatar_milhar(ideia.apoios)} apoios",
            participacao=ideia.apoios,
            url=ideia.url,
        ))

    sugestoes.sort(key=lambda s: s.participacao, reverse=True)
    logger.debug(f"{len(sugestoes)} sugestões de tema de {len(consultas) + len(ideias)} itens analisados")

    return {
        "criterios_aplicados": criterios.to_dict(),
        "total_analisados": len(consultas) + len(ideias),
        "count": len(sugestoes),
        "sugestoes": sugestoes[:MAX_SUGESTOES],
    }


def sugerir_tema_enquete(consultas_scraper, ideias_scraper, criterios: CriteriosSugestao | None = None) -> dict[str, Any]:
    """Busca consultas e ideias abertas e sugere temas com ``sugerir_temas``.

    Args:
        consultas_scraper: Instância de ScraperConsultas.
        ideias_scraper: Instância de ScraperIdeias.
        criterios: Critérios de inclusão. Usa os padrões se None.
    """
    consultas = consultas_scraper.listar_consultas(limite=50)
    ideias = ideias_scraper.listar_ideias(status="aberta", ordenar_por="apoios", ordem="desc", limite=50)
    return sugerir_temas(consultas, ideias, criterios)
