"""
Mixin com utilidades de parsing HTML para os extratores.

Centraliza a criação do BeautifulSoup e a checagem de estrutura: quando
os seletores esperados somem de uma página, o extrator falha com
ESTRUTURA_ALTERADA em vez de devolver dados vazios ou errados.
"""

import logging

from bs4 import BeautifulSoup, Tag

from ecidadania.exceptions import ScrapingError, TipoErro


class HTMLScraper:
    """Funções de parsing compartilhadas pelos extratores de HTML."""

    logger: logging.Logger

    def soup_it(self, content: str | bytes) -> BeautifulSoup:
        return BeautifulSoup(content, "html.parser")

    def validar_estrutura(self, soup: BeautifulSoup, seletores: list[str], url: str) -> None:
        """Confere se cada seletor CSS encontra ao menos um elemento.

        Raises:
            ScrapingError: ESTRUTURA_ALTERADA com a lista de seletores ausentes.
        """
        ausentes = [sel for sel in seletores if not soup.select(sel)]

        if ausentes:
            self.logger.warning(f"Seletores esperados não encontrados em {url}: {ausentes}")
            raise ScrapingError(
                TipoErro.ESTRUTURA_ALTERADA,
                url,
                f"Estrutura da página alterada. Seletores não encontrados: {', '.join(ausentes)}",
            )

    @staticmethod
    def container_de(el: Tag, niveis: int) -> Tag:
        """Sobe da âncora até o ``div`` mais próximo e depois ``niveis`` pais acima."""
        atual = el if el.name == "div" else (el.find_parent("div") or el)
        for _ in range(niveis):
            if atual.parent is None or atual.parent.name == "[document]":
                break
            atual = atual.parent
        return atual
