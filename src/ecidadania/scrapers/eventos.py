import re
from datetime import date
from typing import Callable

from bs4 import BeautifulSoup, Tag

from .. import analise
from ..base_scraper import BaseExtrator
from ..modelos import EventoDetalhe, EventoResumo, StatusEvento
from ..padroes import (
    COMENTARIOS, COMISSAO_APOS_HORA, COMISSAO_EXTENSO, COMISSOES_CONHECIDAS, CONVIDADOS, primeiro_grupo,
)
from ..utils import (
    extract_date, extract_text, extract_time, safe_extract, truncar, validar_data, validar_limite,
    validar_opcao,
)

_DATA_OU_HORA = re.compile(r"\d{2}/\d{2}/\d{2,4}|\d{2}:\d{2}")
_NUMERO_SOLTO = re.compile(r"(?<![\d/:.])\b(\d{1,4})\b(?!\s*[/:.]\d)")

MAX_PAUTA = 15
MAX_CONVIDADOS = 10


def _comissao_listagem(texto: str) -> str | None:
    return primeiro_grupo(COMISSAO_APOS_HORA, texto) or primeiro_grupo(COMISSOES_CONHECIDAS, texto)


def _comentarios_listagem(texto: str) -> int:
    """Último número solto do card que não faz parte da data ou da hora."""
    sem_data = _DATA_OU_HORA.sub(" ", texto)
    numeros = [int(n) for n in _NUMERO_SOLTO.findall(sem_data) if int(n) < 1000]
    return numeros[-1] if numeros else 0


class ScraperEventos(BaseExtrator):
    """Eventos interativos (audiências públicas) com participação popular."""

    prefixo_cache = "eventos"
    pagina_detalhe = "visualizacaoaudiencia"
    niveis_container = 2

    def __init__(self, hoje: Callable[[], date] = date.today, **kwargs):
        super().__init__("EVENTOS", **kwargs)
        self._hoje = hoje

    def listar_eventos(
        self,
        status: str | None = None,
        comissao: str | None = None,
        data_inicio: str | None = None,
        data_fim: str | None = None,
        pagina: int = 1,
        limite: int = 20,
    ) -> list[EventoResumo]:
        """Lista eventos interativos.

        Args:
            status: 'agendado', 'encerrado' ou 'todos'.
            comissao: Sigla (ou parte dela) da comissão, sem diferenciar maiúsculas.
            data_inicio: Data mínima do evento (YYYY-MM-DD ou DD/MM/YYYY).
            data_fim: Data máxima do evento (YYYY-MM-DD ou DD/MM/YYYY).
            pagina: Página da listagem.
            limite: Número máximo de resultados (1 a 100).

        Raises:
            ValidationError: Se algum parâmetro for inválido.
        """
        validar_opcao(status, ("agendado", "encerrado", "todos"), "status")
        validar_limite(limite)
        data_inicio = validar_data(data_inicio, "data_inicio")
        data_fim = validar_data(data_fim, "data_fim")
        params = {
            "status": status,
            "comissao": comissao,
            "data_inicio": data_inicio,
            "data_fim": data_fim,
            "pagina": pagina,
            "limite": limite,
        }

        def calcular() -> list[EventoResumo]:
            path = "/principalaudiencia" if pagina <= 1 else f"/principalaudiencia?p={pagina}"
            eventos = self._baixar_listagem([(pagina, path)])

            if status and status != "todos":
                eventos = [e for e in eventos if e.status.value == status]
            if comissao:
                sigla = comissao.upper()
                eventos = [e for e in eventos if e.comissao and sigla in e.comissao.upper()]
            if data_inicio:
                eventos = [e for e in eventos if e.data and e.data >= data_inicio]
            if data_fim:
                eventos = [e for e in eventos if e.data and e.data <= data_fim]
            return eventos[:limite]

        return self._listar_com_cache(params, calcular)

    def obter_evento(self, id_: int) -> EventoDetalhe:
        """Detalhes de um evento: descrição, pauta, convidados e vídeo."""
        return self._obter(id_)

    def eventos_populares(self, limite: int = 10, apenas_agendados: bool = False) -> list[EventoResumo]:
        validar_limite(limite, maximo=50)
        eventos = self.listar_eventos(status="agendado" if apenas_agendados else "todos", limite=limite * 2)
        return analise.ranquear_por(eventos, "comentarios", limite)

    def _status(self, texto: str, data: str | None, considerar_andamento: bool) -> StatusEvento:
        baixo = texto.lower()
        if "encerrad" in baixo:
            return StatusEvento.ENCERRADO
        if considerar_andamento and "andamento" in baixo:
            return StatusEvento.EM_ANDAMENTO
        if data and data < self._hoje().isoformat():
            return StatusEvento.ENCERRADO
        return StatusEvento.AGENDADO

    def _montar_resumo(self, id_: int, ancora: Tag, texto: str) -> EventoResumo:
        data = safe_extract(lambda: extract_date(texto), None, "data")

        return EventoResumo(
            id=id_,
            titulo=truncar(safe_extract(lambda: extract_text(ancora), "", "titulo")),
            data=data,
            hora=safe_extract(lambda: extract_time(texto), None, "hora"),
            comissao=safe_extract(lambda: _comissao_listagem(texto), None, "comissao"),
            comentarios=safe_extract(lambda: _comentarios_listagem(texto), 0, "comentarios"),
            status=self._status(texto, data, considerar_andamento=True),
            url=self.url_detalhe(id_),
        )

    def _montar_detalhe(self, id_: int, soup: BeautifulSoup, texto: str) -> EventoDetalhe:
        data = safe_extract(lambda: extract_date(texto), None, "data")

        return EventoDetalhe(
            id=id_,
            titulo=safe_extract(lambda: self._titulo(soup), "", "titulo"),
            data=data,
            hora=safe_extract(lambda: extract_time(texto), None, "hora"),
            comissao=safe_extract(lambda: self._comissao_detalhe(texto), None, "comissao"),
            comentarios=safe_extract(lambda: int(primeiro_grupo(COMENTARIOS, texto) or 0), 0, "comentarios"),
            status=self._status(texto, data, considerar_andamento=False),
            url=self.url_detalhe(id_),
            descricao=safe_extract(lambda: self._descricao(soup), "", "descricao"),
            pauta=safe_extract(lambda: self._pauta(soup), [], "pauta"),
            convidados=safe_extract(lambda: self._convidados(texto), [], "convidados"),
            video_url=safe_extract(lambda: self._video(soup), None, "video_url"),
            documentos=safe_extract(lambda: self._documentos(soup), [], "documentos"),
        )

    @staticmethod
    def _titulo(soup: BeautifulSoup) -> str:
        h1 = extract_text(soup.find("h1"))
        if len(h1) > 10 and "e-cidadania" not in h1.lower():
            return h1
        for strong in soup.find_all("strong"):
            texto = extract_text(strong)
            if 20 < len(texto) < 300:
                return texto
        return h1

    @staticmethod
    def _descricao(soup: BeautifulSoup) -> str:
        for p in soup.find_all("p"):
            texto = extract_text(p)
            if 50 < len(texto) < 2000:
                return texto
        return ""

    @staticmethod
    def _comissao_detalhe(texto: str) -> str | None:
        return primeiro_grupo(COMISSAO_EXTENSO, texto) or primeiro_grupo(COMISSOES_CONHECIDAS, texto)

    @staticmethod
    def _pauta(soup: BeautifulSoup) -> list[str]:
        itens = []
        for li in soup.find_all("li"):
            texto = extract_text(li)
            if 15 < len(texto) < 500 and "http" not in texto:
                itens.append(texto)
        return itens[:MAX_PAUTA]

    @staticmethod
    def _convidados(texto: str) -> list[str]:
        nomes = []
        for trecho in CONVIDADOS.findall(texto):
            for nome in re.split(r"[,;]", trecho):
                nome = nome.strip()
                if 3 < len(nome) < 100:
                    nomes.append(nome)
        return nomes[:MAX_CONVIDADOS]

    @staticmethod
    def _video(soup: BeautifulSoup) -> str | None:
        link = soup.select_one('a[href*="youtube"], a[href*="youtu.be"]')
        if link:
            return link["href"]
        iframe = soup.select_one('iframe[src*="youtube"]')
        return iframe["src"] if iframe else None

    @staticmethod
    def _documentos(soup: BeautifulSoup) -> list[str]:
        return [a["href"] for a in soup.select('a[href$=".pdf"]')][:MAX_PAUTA]
