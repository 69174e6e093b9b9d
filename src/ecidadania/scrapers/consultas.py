from bs4 import BeautifulSoup, Tag

from .. import analise, config
from ..base_scraper import BaseExtrator
from ..modelos import ConsultaDetalhe, ConsultaResumo, StatusConsulta
from ..padroes import (
    AUTORIA, COMENTARIOS, COMISSAO_EXTENSO, DATA_ABERTURA, DATA_ENCERRAMENTO, EMENTA,
    FORMATOS_VOTOS_DETALHE, FORMATOS_VOTOS_LISTAGEM, MATERIA_EXTENSO, MATERIA_SIGLA, RELATORIA,
    formatar_materia, primeiro_grupo, resolver,
)
from ..utils import (
    extract_date, extract_text, percentuais, safe_extract, truncar, validar_limite, validar_opcao,
)


def _status(texto: str) -> StatusConsulta:
    if "encerrad" in texto.lower():
        return StatusConsulta.ENCERRADA
    return StatusConsulta.ABERTA


class ScraperConsultas(BaseExtrator):
    """Consultas públicas: votação cidadã (SIM/NÃO) sobre matérias em tramitação."""

    prefixo_cache = "consultas"
    pagina_detalhe = "visualizacaomateria"
    niveis_container = 1

    def __init__(self, **kwargs):
        super().__init__("CONSULTAS", **kwargs)

    def listar_consultas(
        self,
        status: str | None = None,
        pagina: int = 1,
        limite: int = 20,
        paginas: range | None = None,
    ) -> list[ConsultaResumo]:
        """Lista as consultas públicas da página de pesquisa de matérias.

        Args:
            status: 'aberta', 'encerrada' ou 'todas' (padrão: todas).
            pagina: Página da listagem (ignorada se ``paginas`` for informado).
            limite: Número máximo de resultados (1 a 100).
            paginas: Intervalo de páginas a baixar e juntar.

        Returns:
            list[ConsultaResumo]: Consultas na ordem em que aparecem no site.
        """
        validar_opcao(status, ("aberta", "encerrada", "todas"), "status")
        validar_limite(limite)
        numeros = list(paginas) if paginas is not None else [pagina]
        params = {"status": status, "pagina": pagina, "limite": limite, "paginas": numeros}

        def calcular() -> list[ConsultaResumo]:
            consultas = self._baixar_listagem([(n, f"/pesquisamateria?p={n}") for n in numeros])
            if status in ("aberta", "encerrada"):
                consultas = [c for c in consultas if c.status.value == status]
            return consultas[:limite]

        return self._listar_com_cache(params, calcular)

    def obter_consulta(self, id_: int) -> ConsultaDetalhe:
        """Detalhes de uma consulta: votos, autoria, relatoria e comentários."""
        return self._obter(id_)

    def consultas_polarizadas(
        self, margem_polarizacao: int = 15, minimo_votos: int = 1000, limite: int = 10
    ) -> list[ConsultaResumo]:
        """Consultas com votação equilibrada (diferença SIM/NÃO até ``margem_polarizacao`` pontos)."""
        consultas = self.listar_consultas(limite=100)
        return analise.filtrar_polarizadas(consultas, margem_polarizacao, minimo_votos)[:limite]

    def consultas_consensuais(
        self, percentual_minimo: int = 85, minimo_votos: int = 1000, limite: int = 10
    ) -> list[ConsultaResumo]:
        """Consultas em que um dos lados tem pelo menos ``percentual_minimo``% dos votos."""
        consultas = self.listar_consultas(limite=100)
        return analise.filtrar_consensuais(consultas, percentual_minimo, minimo_votos)[:limite]

    def _montar_resumo(self, id_: int, ancora: Tag, texto: str) -> ConsultaResumo:
        materia = safe_extract(lambda: self._materia_listagem(texto), "", "materia")
        ementa = safe_extract(lambda: extract_text(ancora), "", "ementa")
        votos_sim, votos_nao = safe_extract(lambda: self._votos(texto, FORMATOS_VOTOS_LISTAGEM), (0, 0), "votos")
        percentual_sim, percentual_nao = percentuais(votos_sim, votos_nao)

        return ConsultaResumo(
            id=id_,
            materia=materia,
            ementa=truncar(ementa),
            votos_sim=votos_sim,
            votos_nao=votos_nao,
            total_votos=votos_sim + votos_nao,
            percentual_sim=percentual_sim,
            percentual_nao=percentual_nao,
            status=_status(texto),
            url=self.url_detalhe(id_),
        )

    def _montar_detalhe(self, id_: int, soup: BeautifulSoup, texto: str) -> ConsultaDetalhe:
        materia = safe_extract(lambda: self._materia_detalhe(texto), "", "materia")
        ementa = safe_extract(lambda: self._ementa_detalhe(soup, texto), "", "ementa")
        votos_sim, votos_nao = safe_extract(lambda: self._votos(texto, FORMATOS_VOTOS_DETALHE), (0, 0), "votos")
        percentual_sim, percentual_nao = percentuais(votos_sim, votos_nao)

        return ConsultaDetalhe(
            id=id_,
            materia=materia,
            ementa=ementa,
            votos_sim=votos_sim,
            votos_nao=votos_nao,
            total_votos=votos_sim + votos_nao,
            percentual_sim=percentual_sim,
            percentual_nao=percentual_nao,
            status=_status(texto),
            url=self.url_detalhe(id_),
            autor=safe_extract(lambda: primeiro_grupo(AUTORIA, texto), None, "autor"),
            relator=safe_extract(lambda: primeiro_grupo(RELATORIA, texto), None, "relator"),
            comissao=safe_extract(lambda: primeiro_grupo(COMISSAO_EXTENSO, texto), None, "comissao"),
            data_abertura=safe_extract(lambda: extract_date(primeiro_grupo(DATA_ABERTURA, texto)), None, "data_abertura"),
            data_encerramento=safe_extract(
                lambda: extract_date(primeiro_grupo(DATA_ENCERRAMENTO, texto)), None, "data_encerramento"
            ),
            comentarios=safe_extract(lambda: int(primeiro_grupo(COMENTARIOS, texto) or 0), 0, "comentarios"),
            link_materia=self._link_materia(materia),
        )

    @staticmethod
    def _materia_listagem(texto: str) -> str:
        match = MATERIA_SIGLA.search(texto)
        if not match:
            return ""
        return f"{match.group(1).upper()} {match.group(2)}/{match.group(3)}"

    @staticmethod
    def _materia_detalhe(texto: str) -> str:
        match = MATERIA_EXTENSO.search(texto)
        return formatar_materia(match) if match else ""

    @staticmethod
    def _ementa_detalhe(soup: BeautifulSoup, texto: str) -> str:
        match = EMENTA.search(texto)
        if match:
            return " ".join(match.group(0).split())
        return extract_text(soup.select_one("h1, h2"))

    @staticmethod
    def _votos(texto: str, formatos) -> tuple[int, int]:
        resultado = resolver(texto, formatos)
        return resultado[1] if resultado else (0, 0)

    @staticmethod
    def _link_materia(materia: str) -> str | None:
        if not materia:
            return None
        sigla, resto = materia.split(" ", 1)
        numero, ano = resto.split("/")
        return f"{config.DADOS_ABERTOS_MATERIA_URL}?sigla={sigla}&numero={numero}&ano={ano}"
