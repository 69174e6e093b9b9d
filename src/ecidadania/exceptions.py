"""
Exceções customizadas para o ecidadania.

Este módulo define as exceções levantadas durante a raspagem do portal
e-Cidadania. Falhas de página (HTTP, rede, estrutura) viram ScrapingError
com um tipo fixo e uma sugestão de correção; parâmetros inválidos viram
ValidationError.
"""

from enum import Enum


class TipoErro(str, Enum):
    """Tipos de falha ao acessar uma página do e-Cidadania."""
    PAGINA_NAO_ENCONTRADA = "PAGINA_NAO_ENCONTRADA"
    ESTRUTURA_ALTERADA = "ESTRUTURA_ALTERADA"
    TIMEOUT = "TIMEOUT"
    BLOQUEADO = "BLOQUEADO"
    ERRO_REDE = "ERRO_REDE"


SUGESTOES: dict[TipoErro, str] = {
    TipoErro.PAGINA_NAO_ENCONTRADA: "Verifique se o ID está correto",
    TipoErro.ESTRUTURA_ALTERADA: "O site pode ter sido atualizado. Reporte o problema.",
    TipoErro.TIMEOUT: "O site pode estar lento. Tente novamente.",
    TipoErro.BLOQUEADO: "Aguarde alguns minutos antes de tentar novamente.",
    TipoErro.ERRO_REDE: "Verifique sua conexão ou tente novamente.",
}


class ScraperError(Exception):
    """Exceção base para erros de scraping."""
    pass


class ScrapingError(ScraperError):
    """Falha ao obter ou interpretar uma página do e-Cidadania.

    Levantada quando:
    - a página não existe (HTTP 404)
    - o site limitou as requisições (HTTP 429)
    - os seletores esperados sumiram do HTML
    - as tentativas se esgotaram por timeout ou erro de rede

    Os atributos são somente leitura depois da construção.

    Attributes:
        tipo: Tipo do erro (TipoErro).
        url: URL que originou a falha.
        mensagem: Descrição legível do problema.
        sugestao: Sugestão fixa associada ao tipo.
    """

    def __init__(self, tipo: TipoErro, url: str, mensagem: str):
        super().__init__(mensagem)
        tipo = TipoErro(tipo)
        object.__setattr__(self, "_tipo", tipo)
        object.__setattr__(self, "_url", url)
        object.__setattr__(self, "_mensagem", mensagem)

    _CAMPOS = ("tipo", "url", "mensagem", "sugestao", "_tipo", "_url", "_mensagem")

    def __setattr__(self, name, value):
        if name in self._CAMPOS:
            raise AttributeError(f"ScrapingError é imutável: não é possível alterar '{name}'")
        super().__setattr__(name, value)

    @property
    def tipo(self) -> TipoErro:
        return self._tipo

    @property
    def url(self) -> str:
        return self._url

    @property
    def mensagem(self) -> str:
        return self._mensagem

    @property
    def sugestao(self) -> str:
        return SUGESTOES[self._tipo]

    def to_dict(self) -> dict[str, str]:
        return {
            "tipo": self.tipo.value,
            "url": self.url,
            "mensagem": self.mensagem,
            "sugestao": self.sugestao,
        }

    def __reduce__(self):
        return (self.__class__, (self.tipo, self.url, self.mensagem))

    def __repr__(self) -> str:
        return f"ScrapingError(tipo={self.tipo.value!r}, url={self.url!r}, mensagem={self.mensagem!r})"


class ValidationError(ScraperError):
    """Exceção para erros de validação de parâmetros.

    Levantada quando parâmetros fornecidos pelo usuário são inválidos,
    como IDs não positivos, limites fora do intervalo permitido ou datas
    em formato incorreto.
    """
    pass
