"""
Cliente HTTP para as páginas do portal e-Cidadania.

O cliente só faz I/O: aplica o intervalo mínimo entre requisições, o
timeout por tentativa e o retry com backoff exponencial, e traduz as
falhas para ScrapingError. O cache das respostas fica nos extratores.

Exemplo de uso:
    cliente = ClienteECidadania()
    html = cliente.fetch_page("/visualizacaomateria?id=123")
"""

import logging
import threading
import time
from typing import Callable

import requests

from ecidadania import config
from ecidadania.exceptions import ScrapingError, TipoErro, ValidationError
from ecidadania.utils import start_session

logger = logging.getLogger(__name__)


class RateLimiter:
    """Espaçamento mínimo global entre requisições de um cliente.

    O horário da última requisição é lido e gravado sob um lock, então
    duas threads nunca observam o mesmo valor antigo.

    Args:
        intervalo_minimo: Segundos mínimos entre duas requisições.
        relogio: Função que devolve o tempo atual em segundos.
        dormir: Função usada para esperar.
    """

    def __init__(
        self,
        intervalo_minimo: float = config.MIN_REQUEST_INTERVAL,
        relogio: Callable[[], float] = time.monotonic,
        dormir: Callable[[float], None] = time.sleep,
    ):
        self.intervalo_minimo = intervalo_minimo
        self.ultima_requisicao: float | None = None
        self._relogio = relogio
        self._dormir = dormir
        self._lock = threading.Lock()

    def aguardar(self) -> float:
        """Bloqueia até o intervalo mínimo ter passado e marca a nova requisição.

        Returns:
            float: Instante registrado para a requisição.
        """
        with self._lock:
            if self.ultima_requisicao is not None:
                espera = self.intervalo_minimo - (self._relogio() - self.ultima_requisicao)
                if espera > 0:
                    self._dormir(espera)
            self.ultima_requisicao = self._relogio()
            return self.ultima_requisicao


class ClienteECidadania:
    """Busca páginas HTML do e-Cidadania com rate limit e retry.

    Args:
        base_url: Raiz do portal; caminhos relativos são anexados a ela.
        rate_limiter: Estado de espaçamento entre requisições. Cada cliente
            cria o seu se nenhum for passado.
        session: Sessão requests a ser usada.
        timeout: Timeout padrão de cada tentativa, em segundos.
        retries: Número padrão de tentativas.
        dormir: Função usada para o backoff entre tentativas.
    """

    def __init__(
        self,
        base_url: str = config.BASE_URL,
        rate_limiter: RateLimiter | None = None,
        session: requests.Session | None = None,
        timeout: float = config.DEFAULT_TIMEOUT,
        retries: int = config.DEFAULT_RETRIES,
        dormir: Callable[[float], None] = time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter()
        self.session = session or start_session()
        self.timeout = timeout
        self.retries = retries
        self._dormir = dormir

    def url_para(self, path: str) -> str:
        if path.startswith("http"):
            return path
        return f"{self.base_url}{path}"

    def fetch_page(self, path: str, timeout: float | None = None, retries: int | None = None) -> str:
        """Obtém o HTML de uma página do portal.

        404 e 429 são terminais e levantados na hora. Demais falhas (status
        não-2xx, erros de transporte, timeout) são tentadas de novo até
        ``retries`` vezes, com espera de ``2 ** tentativa`` segundos.

        Args:
            path: Caminho relativo ao portal ou URL absoluta.
            timeout: Timeout de cada tentativa, em segundos.
            retries: Número máximo de tentativas.

        Returns:
            str: HTML da página.

        Raises:
            ScrapingError: PAGINA_NAO_ENCONTRADA, BLOQUEADO, TIMEOUT ou ERRO_REDE.
            ValidationError: Se ``retries`` for menor que 1.
        """
        timeout = self.timeout if timeout is None else timeout
        retries = self.retries if retries is None else retries
        if retries < 1:
            raise ValidationError(f"'retries' deve ser pelo menos 1, recebido: {retries}")

        url = self.url_para(path)
        ultimo_erro: Exception | None = None

        for tentativa in range(1, retries + 1):
            self.rate_limiter.aguardar()
            logger.debug(f"Baixando {url} (tentativa {tentativa}/{retries})")

            try:
                r = self.session.get(url, timeout=timeout)
            except requests.RequestException as e:
                ultimo_erro = e
            else:
                if r.status_code == 404:
                    raise ScrapingError(TipoErro.PAGINA_NAO_ENCONTRADA, url, f"Página não encontrada: {url}")
                if r.status_code == 429:
                    raise ScrapingError(TipoErro.BLOQUEADO, url, "Muitas requisições. Tente novamente mais tarde.")
                if 200 <= r.status_code < 300:
                    logger.debug(f"Página {url} obtida ({len(r.text)} caracteres)")
                    return r.text
                ultimo_erro = requests.HTTPError(f"HTTP {r.status_code}: {r.reason}", response=r)

            logger.warning(f"Falha ao baixar {url} (tentativa {tentativa}/{retries}): {ultimo_erro}")

            if tentativa < retries:
                self._dormir(2 ** tentativa)

        if isinstance(ultimo_erro, requests.Timeout):
            raise ScrapingError(TipoErro.TIMEOUT, url, "Tempo limite excedido ao acessar a página")
        raise ScrapingError(TipoErro.ERRO_REDE, url, f"Erro de rede: {ultimo_erro}")

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()
