import re
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, TypeVar

import pandas as pd
import requests
from bs4 import Tag

from ecidadania import config
from ecidadania.exceptions import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RE_ID = re.compile(r"[?&]id=(\d+)")
_RE_DATA = re.compile(r"(\d{2})/(\d{2})/(\d{2,4})")
_RE_HORA = re.compile(r"(\d{2}):(\d{2})")
_FORMATOS_DATA = (
    ("%Y-%m-%d", re.compile(r"^\d{4}-\d{2}-\d{2}$")),
    ("%d/%m/%Y", re.compile(r"^\d{2}/\d{2}/\d{4}$")),
)


def start_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Encoding": "gzip, deflate, br",
            "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
            "Connection": "keep-alive",
            "User-Agent": config.USER_AGENT,
        })

    return session


def extract_text(el: Tag | None) -> str:
    """Texto de um elemento com espaços normalizados ('' se o elemento não existir)."""
    if el is None:
        return ""
    return " ".join(el.get_text(" ").split())


def extract_block_text(el: Tag | None) -> str:
    """Texto de um elemento preservando uma linha por nó de texto não vazio."""
    if el is None:
        return ""
    linhas = (" ".join(linha.split()) for linha in el.get_text("\n").splitlines())
    return "\n".join(linha for linha in linhas if linha)


def extract_number(texto: str) -> float:
    """
    Converte um número com vírgula decimal ('1.234,56' -> 1234.56).

    Entradas sem dígitos resultam em 0.
    """
    limpo = str(texto).replace(".", "").replace(",", ".")
    limpo = re.sub(r"[^\d.-]", "", limpo)
    match = re.match(r"-?\d*\.?\d+", limpo)
    if not match:
        return 0
    try:
        return float(match.group())
    except ValueError:
        return 0


def parse_brazilian_number(texto: str) -> int:
    """
    Converte um inteiro no formato brasileiro (separador de milhar '.').

    A parte decimal, se houver, é descartada.

    Examples:
        >>> parse_brazilian_number("1.234.567")
        1234567
        >>> parse_brazilian_number("abc")
        0
    """
    return int(extract_number(texto))


def extract_id(url: str) -> int | None:
    """Valor numérico do parâmetro ``id=`` de uma URL, ou None."""
    match = _RE_ID.search(url or "")
    return int(match.group(1)) if match else None


def extract_date(texto: str) -> str | None:
    """
    Primeira data DD/MM/AA ou DD/MM/AAAA do texto, no formato YYYY-MM-DD.

    Anos com dois dígitos recebem o prefixo '20'.

    Examples:
        >>> extract_date("03/02/26 | 09:00")
        '2026-02-03'
    """
    match = _RE_DATA.search(texto or "")
    if not match:
        return None
    dia, mes, ano = match.groups()
    if len(ano) == 2:
        ano = f"20{ano}"
    elif len(ano) == 3:
        # \d{2,4} casa três dígitos em "01/02/202"; não há ano válido aí
        return None
    return f"{ano}-{mes}-{dia}"


def extract_time(texto: str) -> str | None:
    match = _RE_HORA.search(texto or "")
    return f"{match.group(1)}:{match.group(2)}" if match else None


def safe_extract(fn: Callable[[], T], default: T, context: str) -> T:
    """Executa uma extração de campo sem deixar exceções escaparem.

    Se ``fn`` levantar qualquer exceção, registra um aviso com o rótulo
    ``context`` e devolve ``default``. Um resultado None também vira
    ``default``.

    Args:
        fn: Função sem argumentos que extrai o campo.
        default: Valor usado quando a extração falha.
        context: Rótulo do campo para o log.

    Returns:
        O valor extraído ou ``default``.
    """
    try:
        resultado = fn()
    except Exception as e:
        logger.warning(f"Falha ao extrair '{context}', usando valor padrão: {e}")
        return default
    return default if resultado is None else resultado


def truncar(texto: str, limite: int = config.MAX_TEXTO) -> str:
    return (texto or "")[:limite]


def percentuais(votos_sim: int, votos_nao: int) -> tuple[int, int]:
    """Divide o total de votos em percentuais arredondados de forma independente.

    A soma pode diferir de 100 por causa do arredondamento.
    """
    total = votos_sim + votos_nao
    if total <= 0:
        return 0, 0
    return _arredondar(votos_sim * 100 / total), _arredondar(votos_nao * 100 / total)


def _arredondar(valor: float) -> int:
    # meio para cima; round() do Python arredonda para o par
    return int(valor + 0.5)


def validar_data(data: str | None, nome_param: str = "data") -> str | None:
    """Normaliza um filtro de data (YYYY-MM-DD ou DD/MM/YYYY) para YYYY-MM-DD.

    Raises:
        ValidationError: Se o formato não for reconhecido ou a data não existir.
    """
    if data is None or not str(data).strip():
        return None

    texto = str(data).strip()
    formato = next((f for f, regex in _FORMATOS_DATA if regex.match(texto)), None)
    if formato is None:
        raise ValidationError(f"'{nome_param}' deve estar no formato YYYY-MM-DD ou DD/MM/YYYY, recebido: {texto!r}")

    try:
        return datetime.strptime(texto, formato).date().isoformat()
    except ValueError:
        raise ValidationError(f"'{nome_param}' não é uma data válida: {texto!r}") from None


def validar_id(id_: Any, nome_param: str = "id") -> int:
    if isinstance(id_, bool) or not isinstance(id_, int) or id_ <= 0:
        raise ValidationError(f"'{nome_param}' deve ser um inteiro positivo, recebido: {id_!r}")
    return id_


def validar_limite(limite: Any, maximo: int = 100, nome_param: str = "limite") -> int:
    if isinstance(limite, bool) or not isinstance(limite, int) or not 1 <= limite <= maximo:
        raise ValidationError(f"'{nome_param}' deve estar entre 1 e {maximo}, recebido: {limite!r}")
    return limite


def validar_opcao(valor: str | None, opcoes: Iterable[str], nome_param: str) -> str | None:
    opcoes = tuple(opcoes)
    if valor is not None and valor not in opcoes:
        raise ValidationError(f"'{nome_param}' deve ser um de {', '.join(opcoes)}; recebido: {valor!r}")
    return valor


def para_dataframe(registros: Iterable[Any]) -> pd.DataFrame:
    """Converte uma lista de registros (dataclasses ou dicts) em DataFrame."""
    linhas = [asdict(r) if is_dataclass(r) else dict(r) for r in registros]
    return pd.DataFrame(linhas)
