"""
Padrões de texto reconhecidos nas páginas do e-Cidadania.

Quando um campo pode aparecer em mais de um formato, os formatos ficam
numa tupla ordenada e ``resolver`` devolve o resultado do primeiro que
casar. Resultados de formatos diferentes nunca são combinados.
"""

import re
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from ecidadania.utils import parse_brazilian_number

T = TypeVar("T")

NUMERO_BR = r"(?<![\d.])(\d{1,3}(?:\.\d{3})*)"


@dataclass(frozen=True)
class Formato(Generic[T]):
    nome: str
    regex: re.Pattern
    converter: Callable[[re.Match], T]


def resolver(texto: str, formatos: tuple[Formato[T], ...]) -> tuple[str, T] | None:
    """Aplica os formatos em ordem e devolve ``(nome, valor)`` do primeiro que casar."""
    for formato in formatos:
        match = formato.regex.search(texto)
        if match:
            return formato.nome, formato.converter(match)
    return None


def _par_votos(match: re.Match) -> tuple[int, int]:
    return parse_brazilian_number(match.group(1)), parse_brazilian_number(match.group(2))


# "713.428 1.002.970 SIM NÃO" (listagem) / "713.428 1.002.970 Votos apurados" (detalhe)
VOTOS_LISTA = Formato(
    "lista",
    re.compile(NUMERO_BR + r"\s+" + NUMERO_BR + r"\s*SIM\s*N[ÃA]O", re.IGNORECASE),
    _par_votos,
)
VOTOS_DETALHE = Formato(
    "detalhe",
    re.compile(NUMERO_BR + r"\s+" + NUMERO_BR + r"\s*Votos?\s*apurados?", re.IGNORECASE),
    _par_votos,
)

FORMATOS_VOTOS_LISTAGEM = (VOTOS_LISTA, VOTOS_DETALHE)
FORMATOS_VOTOS_DETALHE = (VOTOS_DETALHE,)

# "PL 1234/2024", "PEC nº 45 de 2024"
MATERIA_SIGLA = re.compile(r"\b(PL|PEC|PLP|PDL|MPV|SUG)\s*n?º?\s*(\d+)\s*(?:de\s*|/\s*)?(\d{4})", re.IGNORECASE)
# "PROJETO DE LEI nº 5064 de 2023", "SUGESTÃO nº 30 de 2017"
MATERIA_EXTENSO = re.compile(
    r"\b(PROJETO DE LEI|PEC|PLP|PDL|MPV|SUGEST[ÃA]O|PL)\s*n?º?\s*(\d+)\s*(?:de\s*|/\s*)?(\d{4})", re.IGNORECASE
)

EMENTA = re.compile(
    r"(?:Concede|Altera|Dispõe|Institui|Estabelece|Autoriza|Revoga|Acrescenta)[^.]+\.", re.IGNORECASE
)

APOIOS = re.compile(NUMERO_BR + r"\s*apoios?\b", re.IGNORECASE)
COMENTARIOS = re.compile(r"(\d+)\s*coment[aá]rios?", re.IGNORECASE)

AUTORIA = re.compile(r"Autoria:\s*([^(\n]+(?:\([^)\n]+\))?)", re.IGNORECASE)
RELATORIA = re.compile(r"Relator(?:a)?:\s*([^(\n]+(?:\([^)\n]+\))?)", re.IGNORECASE)

# "MARIA DA SILVA (SP)"
AUTOR_UF = re.compile(r"([A-ZÁÉÍÓÚÂÊÎÔÛÃÕÇ][A-ZÁÉÍÓÚÂÊÎÔÛÃÕÇ .]+?)\s*\(([A-Z]{2})\)")

COMISSOES_CONHECIDAS = re.compile(r"\b(CPICRIME|CPI[A-Z]*|CCJ|CAE|CRE|CAS|CDH|CI|CE|CMA|CRA|CCT|CDR|CSP|CCDD|CFT)\b")
# "09:00 | CPICRIME"
COMISSAO_APOS_HORA = re.compile(r"\d{2}:\d{2}\s*\|?\s*([A-Z]{2,15})\b")
COMISSAO_EXTENSO = re.compile(r"(Comiss[ãa]o\s+(?:d[eoa]s?\s+)?[^,\n\-–(]{3,120})", re.IGNORECASE)

DATA_ABERTURA = re.compile(r"(?:abert[ao]|abertura|in[íi]cio)[^\d\n]{0,40}(\d{2}/\d{2}/\d{2,4})", re.IGNORECASE)
DATA_ENCERRAMENTO = re.compile(
    r"(?:encerrad[ao]|encerra(?:-se)?|encerramento|t[ée]rmino|prazo)[^\d\n]{0,40}(\d{2}/\d{2}/\d{2,4})", re.IGNORECASE
)

CONVIDADOS = re.compile(r"convidad[oa]s?\s*[:\s]\s*([^.\n]+)", re.IGNORECASE)


def formatar_materia(match: re.Match) -> str:
    """'PROJETO DE LEI nº 5064 de 2023' -> 'PL 5064/2023'."""
    tipo = match.group(1).upper()
    if "PROJETO DE LEI" in tipo:
        tipo = "PL"
    elif "SUGEST" in tipo:
        tipo = "SUG"
    return f"{tipo} {match.group(2)}/{match.group(3)}"


def primeiro_grupo(regex: re.Pattern, texto: str) -> str | None:
    match = regex.search(texto)
    return match.group(1).strip() if match else None
