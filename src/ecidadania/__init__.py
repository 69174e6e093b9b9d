"""
ecidadania - Raspadores para o portal e-Cidadania do Senado Federal

Biblioteca Python para coleta de consultas públicas, ideias legislativas e
eventos interativos do e-Cidadania, com rate limit, retry, cache em memória
e análises de polarização, consenso e popularidade.

Exemplo de uso:
    import ecidadania

    consultas = ecidadania.consultas()
    lista = consultas.listar_consultas(limite=10)
    polarizadas = consultas.consultas_polarizadas(margem_polarizacao=10)

    df = ecidadania.para_dataframe(lista)
"""

from importlib.metadata import PackageNotFoundError, version

from .analise import sugerir_tema_enquete as _sugerir_tema_enquete
from .analise import filtrar_consensuais, filtrar_polarizadas, ranquear_por, sugerir_temas
from .cache import ClasseTTL, TTLCache, gerar_chave
from .cliente import ClienteECidadania, RateLimiter
from .exceptions import ScraperError, ScrapingError, TipoErro, ValidationError
from .modelos import CriteriosSugestao
from .respostas import executar
from .scrapers.consultas import ScraperConsultas
from .scrapers.eventos import ScraperEventos
from .scrapers.ideias import ScraperIdeias
from .utils import para_dataframe

try:
    __version__ = version("ecidadania")
except PackageNotFoundError:
    __version__ = "0.0.0"

_cliente: ClienteECidadania | None = None
_cache: TTLCache | None = None


def cliente_padrao() -> ClienteECidadania:
    """Cliente compartilhado pelos raspadores criados com as funções deste módulo."""
    global _cliente
    if _cliente is None:
        _cliente = ClienteECidadania()
    return _cliente


def cache_padrao() -> TTLCache:
    """Cache compartilhado pelos raspadores criados com as funções deste módulo."""
    global _cache
    if _cache is None:
        _cache = TTLCache()
    return _cache


def _compartilhados(kwargs: dict) -> dict:
    kwargs.setdefault("cliente", cliente_padrao())
    kwargs.setdefault("cache", cache_padrao())
    return kwargs


def consultas(**kwargs):
    """
    Cria um raspador para as consultas públicas do e-Cidadania.

    Returns:
        ScraperConsultas: Instância configurada do raspador.
    """
    return ScraperConsultas(**_compartilhados(kwargs))


def ideias(**kwargs):
    """
    Cria um raspador para as ideias legislativas do e-Cidadania.

    Returns:
        ScraperIdeias: Instância configurada do raspador.
    """
    return ScraperIdeias(**_compartilhados(kwargs))


def eventos(**kwargs):
    """
    Cria um raspador para os eventos interativos do e-Cidadania.

    Returns:
        ScraperEventos: Instância configurada do raspador.
    """
    return ScraperEventos(**_compartilhados(kwargs))


def sugerir_tema_enquete(criterios: CriteriosSugestao | None = None, **kwargs) -> dict:
    """
    Sugere temas para enquete a partir das consultas e ideias abertas.

    Args:
        criterios: Critérios de inclusão (participação mínima, evitar
            polarização/consenso, apenas matérias em tramitação).

    Returns:
        dict: Critérios aplicados, total analisado e até 10 sugestões.
    """
    return _sugerir_tema_enquete(consultas(**kwargs), ideias(**kwargs), criterios)


def invalidar_cache(padrao: str | None = None) -> int:
    """Remove entradas do cache compartilhado (todas, se ``padrao`` for None)."""
    return cache_padrao().invalidate(padrao)


__all__ = [
    "consultas",
    "ideias",
    "eventos",
    "sugerir_tema_enquete",
    "invalidar_cache",
    "cliente_padrao",
    "cache_padrao",
    "executar",
    "para_dataframe",
    "filtrar_polarizadas",
    "filtrar_consensuais",
    "ranquear_por",
    "sugerir_temas",
    "gerar_chave",
    "ClasseTTL",
    "TTLCache",
    "ClienteECidadania",
    "RateLimiter",
    "CriteriosSugestao",
    "ScraperConsultas",
    "ScraperIdeias",
    "ScraperEventos",
    "ScraperError",
    "ScrapingError",
    "TipoErro",
    "ValidationError",
]
