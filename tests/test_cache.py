"""TTL cache: per-class expiry, deterministic keys, invalidation and single-flight."""
import threading
import time

import pytest

from ecidadania.cache import ClasseTTL, TTLCache, gerar_chave
from ecidadania.exceptions import ScrapingError, TipoErro


def test_get_returns_stored_value_before_expiry(cache, clock):
    cache.set("consultas:detalhe:1", {"id": 1}, ClasseTTL.DETALHE)
    clock.agora += ClasseTTL.DETALHE.segundos - 1
    assert cache.get("consultas:detalhe:1") == {"id": 1}


def test_entries_expire_by_class(cache, clock):
    cache.set("lista", [1], ClasseTTL.LISTAGEM)
    cache.set("detalhe", {"id": 1}, ClasseTTL.DETALHE)

    clock.agora += 15 * 60
    assert cache.get("lista") is None
    assert cache.get("detalhe") == {"id": 1}

    clock.agora += 45 * 60
    assert cache.get("detalhe") is None
    assert len(cache) == 0


def test_ttl_classes_in_seconds():
    assert ClasseTTL.LISTAGEM.segundos == 900
    assert ClasseTTL.DETALHE.segundos == 3600
    assert ClasseTTL.RELATORIO.segundos == 86400


def test_missing_key_is_none(cache):
    assert cache.get("nada") is None
    assert "nada" not in cache


def test_gerar_chave_is_independent_of_param_order():
    a = gerar_chave("consultas:lista", {"pagina": 1, "limite": 20, "status": None})
    b = gerar_chave("consultas:lista", {"status": None, "limite": 20, "pagina": 1})
    assert a == b
    assert a == 'consultas:lista:{"limite":20,"pagina":1,"status":null}'
    assert gerar_chave("x") == "x"


def test_gerar_chave_distinguishes_params():
    assert gerar_chave("ideias:lista", {"pagina": 1}) != gerar_chave("ideias:lista", {"pagina": 2})


def test_invalidate_by_pattern(cache):
    cache.set("consultas:lista:{}", [1])
    cache.set("consultas:detalhe:1", {"id": 1})
    cache.set("ideias:lista:{}", [2])

    assert cache.invalidate("consultas") == 2
    assert "ideias:lista:{}" in cache
    assert cache.get("consultas:detalhe:1") is None


def test_invalidate_everything(cache):
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.invalidate() == 2
    assert len(cache) == 0


def test_limpar_expirados(cache, clock):
    cache.set("curta", 1, ClasseTTL.LISTAGEM)
    cache.set("longa", 2, ClasseTTL.RELATORIO)
    clock.agora += 3600

    assert cache.limpar_expirados() == 1
    assert len(cache) == 1


def test_obter_ou_calcular_computes_once(cache):
    chamadas = []

    def calcular():
        chamadas.append(1)
        return [1, 2, 3]

    assert cache.obter_ou_calcular("k", calcular, ClasseTTL.LISTAGEM) == [1, 2, 3]
    assert cache.obter_ou_calcular("k", calcular, ClasseTTL.LISTAGEM) == [1, 2, 3]
    assert len(chamadas) == 1


def test_errors_are_never_cached(cache):
    def falha():
        raise ScrapingError(TipoErro.TIMEOUT, "https://x", "demorou")

    with pytest.raises(ScrapingError):
        cache.obter_ou_calcular("k", falha, ClasseTTL.DETALHE)

    assert "k" not in cache
    assert cache.obter_ou_calcular("k", lambda: "ok", ClasseTTL.DETALHE) == "ok"


def test_concurrent_callers_share_one_computation():
    cache = TTLCache()
    chamadas = []
    resultados = []
    lock = threading.Lock()

    def calcular():
        with lock:
            chamadas.append(1)
        time.sleep(0.05)
        return "valor"

    def consultar():
        valor = cache.obter_ou_calcular("mesma", calcular, ClasseTTL.LISTAGEM)
        with lock:
            resultados.append(valor)

    threads = [threading.Thread(target=consultar) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(chamadas) == 1
    assert resultados == ["valor"] * 5


def test_stats_counts_hits_and_misses(cache):
    cache.get("x")
    cache.set("x", 1)
    cache.get("x")
    assert cache.stats() == {"hits": 1, "misses": 1, "keys": 1}


def test_key_locks_are_released_after_computation(cache):
    for i in range(50):
        cache.obter_ou_calcular(f"detalhe:{i}", lambda: i, ClasseTTL.DETALHE)

    def falha():
        raise ScrapingError(TipoErro.ERRO_REDE, "https://x", "falhou")

    with pytest.raises(ScrapingError):
        cache.obter_ou_calcular("erro", falha, ClasseTTL.DETALHE)

    assert cache._locks_chave == {}


def test_set_sweeps_expired_entries_periodically(clock):
    cache = TTLCache(relogio=clock.time, intervalo_limpeza=120)
    for i in range(10):
        cache.set(f"lista:{i}", i, ClasseTTL.LISTAGEM)
    cache.set("relatorio", 1, ClasseTTL.RELATORIO)

    clock.agora += ClasseTTL.LISTAGEM.segundos
    cache.set("nova", 2, ClasseTTL.LISTAGEM)

    # as vencidas saem sem nunca terem sido lidas
    assert len(cache) == 2


def test_no_sweep_before_check_period(clock):
    cache = TTLCache(relogio=clock.time, intervalo_limpeza=10_000)
    cache.set("a", 1, ClasseTTL.LISTAGEM)
    clock.agora += ClasseTTL.LISTAGEM.segundos
    cache.set("b", 2, ClasseTTL.LISTAGEM)
    assert len(cache) == 2


def test_cold_computation_counts_one_miss(cache):
    cache.obter_ou_calcular("k", lambda: "v", ClasseTTL.LISTAGEM)
    cache.obter_ou_calcular("k", lambda: "v", ClasseTTL.LISTAGEM)
    assert cache.stats() == {"hits": 1, "misses": 1, "keys": 1}
