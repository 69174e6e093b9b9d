import re

from bs4 import BeautifulSoup, Tag

from .. import analise
from ..base_scraper import BaseExtrator
from ..modelos import IdeiaDetalhe, IdeiaResumo, StatusIdeia
from ..padroes import (
    APOIOS, AUTOR_UF, COMENTARIOS, DATA_ENCERRAMENTO, MATERIA_EXTENSO, formatar_materia, primeiro_grupo,
)
from ..utils import (
    extract_date, extract_text, parse_brazilian_number, safe_extract, truncar, validar_limite, validar_opcao,
)

# Código do filtro "situacao" da pesquisa de ideias
SITUACOES = {
    "aberta": "5",
    "encerrada": "6",
    "convertida": "10",
}

_PROBLEMA = re.compile(r"Problema\s*:?\s*\n?([^\n]{20,})", re.IGNORECASE)
_SOLUCAO = re.compile(r"(?:Solu[çc][ãa]o|Exposi[çc][ãa]o da ideia)\s*:?\s*\n?([^\n]{20,})", re.IGNORECASE)


def _apoios(texto: str) -> int:
    match = APOIOS.search(texto)
    return parse_brazilian_number(match.group(1)) if match else 0


def _autor(texto: str) -> str | None:
    match = AUTOR_UF.search(texto)
    return f"{match.group(1).strip()} ({match.group(2)})" if match else None


class ScraperIdeias(BaseExtrator):
    """Ideias legislativas propostas por cidadãos e os apoios recebidos."""

    prefixo_cache = "ideias"
    pagina_detalhe = "visualizacaoideia"
    niveis_container = 2

    def __init__(self, **kwargs):
        super().__init__("IDEIAS", **kwargs)

    def listar_ideias(
        self,
        status: str | None = None,
        ordenar_por: str | None = None,
        ordem: str = "desc",
        pagina: int = 1,
        limite: int = 20,
    ) -> list[IdeiaResumo]:
        """Lista ideias legislativas.

        Sem filtro de status usa a página de ideias em destaque; com filtro,
        a pesquisa de ideias com o código de situação correspondente.

        Args:
            status: 'aberta', 'encerrada', 'convertida' ou 'todas'.
            ordenar_por: 'apoios', 'data' ou 'comentarios'. A listagem não
                mostra comentários, então 'comentarios' mantém a ordem do site.
            ordem: 'asc' ou 'desc'.
            pagina: Página da pesquisa (só vale com filtro de status).
            limite: Número máximo de resultados (1 a 100).
        """
        validar_opcao(status, ("aberta", "encerrada", "convertida", "todas"), "status")
        validar_opcao(ordenar_por, ("apoios", "data", "comentarios"), "ordenar_por")
        validar_opcao(ordem, ("asc", "desc"), "ordem")
        validar_limite(limite)
        params = {"status": status, "ordenar_por": ordenar_por, "ordem": ordem, "pagina": pagina, "limite": limite}

        def calcular() -> list[IdeiaResumo]:
            path = self._path_listagem(status, pagina)
            # a página de destaques não é paginada
            numero = 1 if path == "/principalideia" else pagina
            ideias = self._baixar_listagem([(numero, path)])
            decrescente = ordem != "asc"
            if ordenar_por == "apoios":
                ideias = sorted(ideias, key=lambda i: i.apoios, reverse=decrescente)
            elif ordenar_por == "data":
                ideias = sorted(ideias, key=lambda i: i.data_publicacao or "", reverse=decrescente)
            return ideias[:limite]

        return self._listar_com_cache(params, calcular)

    def obter_ideia(self, id_: int) -> IdeiaDetalhe:
        """Detalhes de uma ideia: descrição, apoios, comentários e proposição gerada."""
        return self._obter(id_)

    def ideias_populares(self, limite: int = 10, apenas_abertas: bool = True) -> list[IdeiaResumo]:
        validar_limite(limite, maximo=50)
        ideias = self.listar_ideias(
            status="aberta" if apenas_abertas else "todas",
            ordenar_por="apoios",
            ordem="desc",
            limite=limite * 2,
        )
        return analise.ranquear_por(ideias, "apoios", limite)

    @staticmethod
    def _path_listagem(status: str | None, pagina: int) -> str:
        if not status or status == "todas":
            return "/principalideia"
        query = f"situacao={SITUACOES[status]}"
        if pagina > 1:
            query += f"&p={pagina}"
        return f"/pesquisaideia?{query}"

    def _seletores_listagem(self, path: str, numero: int) -> list[str]:
        # a pesquisa filtrada pode legitimamente não ter resultados
        if path.startswith("/pesquisaideia"):
            return ["body"]
        return super()._seletores_listagem(path, numero)

    def _montar_resumo(self, id_: int, ancora: Tag, texto: str) -> IdeiaResumo:
        titulo = safe_extract(lambda: extract_text(ancora), "", "titulo")
        baixo = texto.lower()
        if "encerrad" in baixo:
            status = StatusIdeia.ENCERRADA
        elif "transformad" in baixo or "convertid" in baixo:
            status = StatusIdeia.CONVERTIDA
        else:
            status = StatusIdeia.ABERTA

        return IdeiaResumo(
            id=id_,
            titulo=truncar(titulo),
            apoios=safe_extract(lambda: _apoios(texto), 0, "apoios"),
            data_publicacao=safe_extract(lambda: extract_date(texto), None, "data_publicacao"),
            status=status,
            autor=safe_extract(lambda: _autor(texto), None, "autor"),
            url=self.url_detalhe(id_),
        )

    def _montar_detalhe(self, id_: int, soup: BeautifulSoup, texto: str) -> IdeiaDetalhe:
        baixo = texto.lower()
        if "convertida em proposi" in baixo:
            status = StatusIdeia.CONVERTIDA
        elif "encerrad" in baixo:
            status = StatusIdeia.ENCERRADA
        else:
            status = StatusIdeia.ABERTA

        return IdeiaDetalhe(
            id=id_,
            titulo=safe_extract(lambda: self._titulo(soup), "", "titulo"),
            apoios=safe_extract(lambda: _apoios(texto), 0, "apoios"),
            data_publicacao=safe_extract(lambda: extract_date(texto), None, "data_publicacao"),
            status=status,
            autor=safe_extract(lambda: _autor(texto), None, "autor"),
            url=self.url_detalhe(id_),
            descricao=safe_extract(lambda: self._descricao(soup), "", "descricao"),
            problema=safe_extract(lambda: primeiro_grupo(_PROBLEMA, texto), None, "problema"),
            solucao=safe_extract(lambda: primeiro_grupo(_SOLUCAO, texto), None, "solucao"),
            comentarios=safe_extract(lambda: int(primeiro_grupo(COMENTARIOS, texto) or 0), 0, "comentarios"),
            data_encerramento=safe_extract(
                lambda: extract_date(primeiro_grupo(DATA_ENCERRAMENTO, texto)), None, "data_encerramento"
            ),
            pl_convertido=safe_extract(lambda: self._pl_convertido(texto), None, "pl_convertido"),
        )

    @staticmethod
    def _titulo(soup: BeautifulSoup) -> str:
        strong = extract_text(soup.find("strong"))
        if len(strong) > 10:
            return strong
        return extract_text(soup.select_one("h1, h2"))

    @staticmethod
    def _descricao(soup: BeautifulSoup) -> str:
        for p in soup.find_all("p"):
            texto = extract_text(p)
            if len(texto) > 100:
                return texto
        return ""

    @staticmethod
    def _pl_convertido(texto: str) -> str | None:
        match = MATERIA_EXTENSO.search(texto)
        return formatar_materia(match) if match else None
