"""
Cache em memória com validade por classe de dado.

Cada entrada expira de acordo com a sua ClasseTTL (listagens mudam mais
rápido que detalhes, que mudam mais rápido que relatórios). A expiração é
preguiçosa na leitura; além disso ``set`` varre as vencidas a cada
``config.CACHE_CHECK_PERIOD`` segundos, e ``limpar_expirados()`` força a varredura.
Resultados de erro nunca são guardados: ``obter_ou_calcular`` só grava
depois que a função termina sem exceção.
"""

import json
import logging
import threading
import time
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Callable, TypeVar

from ecidadania import config

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClasseTTL(Enum):
    LISTAGEM = config.TTL_LISTAGEM
    DETALHE = config.TTL_DETALHE
    RELATORIO = config.TTL_RELATORIO

    @property
    def segundos(self) -> int:
        return self.value


def gerar_chave(operacao: str, params: Any = None) -> str:
    """Chave determinística a partir do nome da operação e dos parâmetros.

    Os parâmetros são serializados em JSON com campos ordenados, então
    ``{'a': 1, 'b': 2}`` e ``{'b': 2, 'a': 1}`` geram a mesma chave.

    Examples:
        >>> gerar_chave("consultas:lista", {"pagina": 1, "limite": 20})
        'consultas:lista:{"limite":20,"pagina":1}'
    """
    if params is None:
        return operacao
    if is_dataclass(params):
        params = asdict(params)
    serializado = json.dumps(params, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    return f"{operacao}:{serializado}"


class TTLCache:
    """Mapa chave -> valor com expiração por entrada.

    Além da expiração preguiçosa na leitura, ``set`` varre as entradas
    vencidas quando passou mais de ``intervalo_limpeza`` segundos desde a
    última varredura.

    Args:
        relogio: Função que devolve o tempo atual em segundos.
        intervalo_limpeza: Segundos entre duas varreduras automáticas.
    """

    def __init__(
        self,
        relogio: Callable[[], float] = time.monotonic,
        intervalo_limpeza: float = config.CACHE_CHECK_PERIOD,
    ):
        self._relogio = relogio
        self._dados: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._locks_chave: dict[str, threading.Lock] = {}
        self.intervalo_limpeza = intervalo_limpeza
        self._ultima_limpeza = relogio()
        self.hits = 0
        self.misses = 0

    def _ler(self, chave: str) -> tuple[bool, Any]:
        # chamar com self._lock adquirido
        entrada = self._dados.get(chave)
        if entrada is None:
            return False, None
        valor, expira_em = entrada
        if self._relogio() >= expira_em:
            del self._dados[chave]
            return False, None
        return True, valor

    def _remover_vencidos(self, agora: float) -> int:
        # chamar com self._lock adquirido
        vencidas = [c for c, (_, expira_em) in self._dados.items() if agora >= expira_em]
        for c in vencidas:
            del self._dados[c]
        self._ultima_limpeza = agora
        return len(vencidas)

    def get(self, chave: str) -> Any | None:
        with self._lock:
            encontrado, valor = self._ler(chave)
            if not encontrado:
                self.misses += 1
                return None
            self.hits += 1
        logger.debug(f"Cache hit: {chave}")
        return valor

    def set(self, chave: str, valor: Any, classe: ClasseTTL = ClasseTTL.LISTAGEM) -> None:
        with self._lock:
            agora = self._relogio()
            if agora - self._ultima_limpeza >= self.intervalo_limpeza:
                removidas = self._remover_vencidos(agora)
                logger.debug(f"Varredura do cache: {removidas} entradas vencidas removidas")
            self._dados[chave] = (valor, agora + classe.segundos)
        logger.debug(f"Cache set: {chave} (ttl={classe.segundos}s)")

    def invalidate(self, padrao: str | None = None) -> int:
        """Remove entradas cujo nome contém ``padrao``, ou todas se ``padrao`` for None.

        Returns:
            int: Quantidade de entradas removidas.
        """
        with self._lock:
            if padrao is None:
                removidas = len(self._dados)
                self._dados.clear()
                logger.debug("Cache esvaziado")
                return removidas
            chaves = [c for c in self._dados if padrao in c]
            for c in chaves:
                del self._dados[c]
        logger.debug(f"Cache invalidado por padrão '{padrao}': {len(chaves)} entradas")
        return len(chaves)

    def limpar_expirados(self) -> int:
        with self._lock:
            return self._remover_vencidos(self._relogio())

    def obter_ou_calcular(self, chave: str, calcular: Callable[[], T], classe: ClasseTTL) -> T:
        """Devolve o valor em cache ou calcula, grava e devolve.

        Chamadas concorrentes com a mesma chave esperam a primeira terminar,
        então no máximo uma busca por chave fica em andamento. Exceções de
        ``calcular`` são propagadas e nada é gravado. O lock da chave só
        existe enquanto há uma busca em andamento.
        """
        valor = self.get(chave)
        if valor is not None:
            return valor

        with self._lock:
            lock_chave = self._locks_chave.setdefault(chave, threading.Lock())

        try:
            with lock_chave:
                with self._lock:
                    encontrado, valor = self._ler(chave)
                if encontrado:
                    return valor
                valor = calcular()
                self.set(chave, valor, classe)
                return valor
        finally:
            with self._lock:
                if self._locks_chave.get(chave) is lock_chave:
                    del self._locks_chave[chave]

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"hits": self.hits, "misses": self.misses, "keys": len(self._dados)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._dados)

    def __contains__(self, chave: str) -> bool:
        return self.get(chave) is not None
