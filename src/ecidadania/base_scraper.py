"""
Módulo base para os extratores do e-Cidadania.

Este módulo fornece a classe abstrata BaseExtrator, que concentra o que é
comum às consultas públicas, ideias legislativas e eventos interativos:
logger, cache, download das páginas de listagem (com paginação) e o
algoritmo de listagem por âncoras.

Listagem:
    1. Baixa cada página de listagem pelo ClienteECidadania.
    2. Seleciona as âncoras cujo href aponta para a página de detalhe (``?id=N``).
    3. Ignora IDs já vistos na mesma resposta (vale a primeira ocorrência).
    4. Monta o registro a partir do texto do container da âncora.

Exemplo de uso:
    class MeuExtrator(BaseExtrator):
        prefixo_cache = "meu"
        pagina_detalhe = "visualizacaomeu"

        def _montar_resumo(self, id_, ancora, texto):
            ...

        def _montar_detalhe(self, id_, soup, texto):
            ...
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

from bs4 import BeautifulSoup, Tag
from tqdm import tqdm

from ecidadania import config
from ecidadania.cache import ClasseTTL, TTLCache, gerar_chave
from ecidadania.cliente import ClienteECidadania
from ecidadania.exceptions import ScraperError
from ecidadania.html_scraper import HTMLScraper
from ecidadania.utils import extract_block_text, extract_id, validar_id

T = TypeVar("T")


class BaseExtrator(HTMLScraper, ABC):
    """Classe base para os extratores de conteúdo do e-Cidadania.

    Args:
        nome_buscador: Identificador do extrator, usado no nome do logger.
        cliente: Cliente HTTP compartilhado. Se None, cria um novo.
        cache: Cache compartilhado. Se None, cria um novo.
        debug: Se True, ativa logs de depuração.

    Atributos:
        prefixo_cache: Prefixo das chaves de cache ('consultas', 'ideias', ...).
        pagina_detalhe: Nome da página de detalhe (``visualizacaomateria``...).
        niveis_container: Quantos pais acima do ``div`` da âncora formam o container.
    """

    prefixo_cache: str
    pagina_detalhe: str
    niveis_container: int = 1

    def __init__(
        self,
        nome_buscador: str,
        cliente: ClienteECidadania | None = None,
        cache: TTLCache | None = None,
        debug: bool = config.DEBUG,
    ):
        self.nome_buscador = nome_buscador
        self.cliente = cliente or ClienteECidadania()
        self.cache = cache or TTLCache()
        self.debug = debug

        self._start_logger()

    def _start_logger(self) -> None:
        self.logger = logging.getLogger(f"ECIDADANIA.{self.nome_buscador}")
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.logger.propagate = False
        self.logger.setLevel(logging.DEBUG if self.debug else logging.INFO)

    @property
    def seletor_link(self) -> str:
        return f'a[href*="{self.pagina_detalhe}?id="]'

    def url_detalhe(self, id_: int) -> str:
        return f"{self.cliente.base_url}/{self.pagina_detalhe}?id={id_}"

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def _com_cache(self, chave: str, classe: ClasseTTL, calcular: Callable[[], T], contexto: dict[str, Any]) -> T:
        try:
            return self.cache.obter_ou_calcular(chave, calcular, classe)
        except ScraperError as e:
            self.logger.error(f"Erro em {self.prefixo_cache} {contexto}: {e}")
            raise

    def _listar_com_cache(self, params: dict[str, Any], calcular: Callable[[], T]) -> T:
        chave = gerar_chave(f"{self.prefixo_cache}:lista", params)
        return self._com_cache(chave, ClasseTTL.LISTAGEM, calcular, params)

    def _obter(self, id_: int) -> Any:
        validar_id(id_)
        chave = f"{self.prefixo_cache}:detalhe:{id_}"
        return self._com_cache(chave, ClasseTTL.DETALHE, lambda: self._baixar_detalhe(id_), {"id": id_})

    # ------------------------------------------------------------------
    # Listagem
    # ------------------------------------------------------------------

    def _baixar_listagem(self, paginas: list[tuple[int, str]]) -> list:
        """Baixa e interpreta as páginas de listagem, deduplicando entre elas.

        Args:
            paginas: Pares ``(número da página, caminho)``.
        """
        registros: list = []
        vistos: set[int] = set()

        for numero, path in tqdm(paginas, desc=f"Baixando {self.prefixo_cache}", disable=len(paginas) <= 1):
            url = self.cliente.url_para(path)
            self.logger.debug(f"Baixando listagem {url}")
            html = self.cliente.fetch_page(path)
            soup = self.soup_it(html)
            self.validar_estrutura(soup, self._seletores_listagem(path, numero), url)

            for registro in self._extrair_listagem(soup):
                if registro.id in vistos:
                    continue
                vistos.add(registro.id)
                registros.append(registro)

        self.logger.debug(f"{len(registros)} registros de {self.prefixo_cache} extraídos")
        return registros

    def _seletores_listagem(self, path: str, numero: int) -> list[str]:
        # páginas além da primeira podem vir vazias
        if numero <= 1:
            return ["body", self.seletor_link]
        return ["body"]

    def _extrair_listagem(self, soup: BeautifulSoup) -> list:
        registros = []
        vistos: set[int] = set()

        for ancora in soup.select(self.seletor_link):
            id_ = extract_id(ancora.get("href", ""))
            if not id_ or id_ in vistos:
                continue
            vistos.add(id_)

            container = self.container_de(ancora, self.niveis_container)
            texto = extract_block_text(container)
            registros.append(self._montar_resumo(id_, ancora, texto))

        return registros

    # ------------------------------------------------------------------
    # Detalhe
    # ------------------------------------------------------------------

    def _baixar_detalhe(self, id_: int) -> Any:
        path = f"/{self.pagina_detalhe}?id={id_}"
        url = self.cliente.url_para(path)
        html = self.cliente.fetch_page(path)
        soup = self.soup_it(html)
        self.validar_estrutura(soup, ["body"], url)
        texto = extract_block_text(soup.body)
        return self._montar_detalhe(id_, soup, texto)

    @abstractmethod
    def _montar_resumo(self, id_: int, ancora: Tag, texto: str) -> Any:
        """Monta o registro de listagem a partir da âncora e do texto do container."""
        ...

    @abstractmethod
    def _montar_detalhe(self, id_: int, soup: BeautifulSoup, texto: str) -> Any:
        """Monta o registro de detalhe a partir da página inteira."""
        ...
