"""
Envelopes de resposta para quem consome os extratores.

``executar`` roda uma operação e devolve sempre um dicionário: sucesso com
os dados serializados, ou erro com código, mensagem e sugestão. Falhas de
raspagem viram respostas de erro em vez de exceções, e o resto do sistema
continua disponível.
"""

import logging
from dataclasses import is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from ecidadania import config
from ecidadania.exceptions import ScrapingError, ValidationError

logger = logging.getLogger(__name__)

NOTA_DEGRADADO = "As demais funcionalidades (senadores, matérias, votações) continuam operacionais."


def serializar(valor: Any) -> Any:
    if hasattr(valor, "to_dict") and is_dataclass(valor):
        return valor.to_dict()
    if isinstance(valor, Enum):
        return valor.value
    if isinstance(valor, dict):
        return {k: serializar(v) for k, v in valor.items()}
    if isinstance(valor, (list, tuple)):
        return [serializar(v) for v in valor]
    return valor


def resposta_sucesso(dados: Any, endpoint: str = "") -> dict[str, Any]:
    return {
        "success": True,
        "data": serializar(dados),
        "metadata": {
            "fonte": "Senado Federal - e-Cidadania",
            "dataConsulta": datetime.now(timezone.utc).isoformat(),
            "endpoint": f"{config.BASE_URL}{endpoint}",
        },
    }


def resposta_erro(erro: Exception) -> dict[str, Any]:
    if isinstance(erro, ScrapingError):
        return {
            "success": False,
            "error": {
                "code": f"ECIDADANIA_{erro.tipo.value}",
                "message": erro.mensagem,
                "suggestion": erro.sugestao,
                "url": erro.url,
                "nota": NOTA_DEGRADADO,
            },
        }
    if isinstance(erro, ValidationError):
        return {
            "success": False,
            "error": {"code": "ECIDADANIA_PARAMETRO_INVALIDO", "message": str(erro)},
        }
    return {
        "success": False,
        "error": {
            "code": "ECIDADANIA_SCRAPING_FALHOU",
            "message": str(erro) or "Erro desconhecido ao acessar e-Cidadania",
            "suggestion": f"Acesse diretamente: {config.BASE_URL}",
            "nota": NOTA_DEGRADADO,
        },
    }


def executar(operacao: Callable[..., Any], *args, endpoint: str = "", **kwargs) -> dict[str, Any]:
    """Executa ``operacao(*args, **kwargs)`` e devolve o envelope de sucesso ou de erro.

    Example:
        >>> executar(consultas.obter_consulta, 123, endpoint="/visualizacaomateria?id=123")
        {'success': True, 'data': {...}, 'metadata': {...}}
    """
    nome = getattr(operacao, "__name__", repr(operacao))
    try:
        resultado = operacao(*args, **kwargs)
    except Exception as e:
        logger.error(f"Erro em {nome}: {e}")
        return resposta_erro(e)
    return resposta_sucesso(resultado, endpoint)
