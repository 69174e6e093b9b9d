"""Shared fixtures: fake HTTP session, fake clock and canned e-Cidadania pages.

Run from repo root:

    python -m pytest tests/ -v
"""
import os
import sys

# Allow running the suite from a checkout without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from datetime import date

import pytest
import requests

from ecidadania.cache import TTLCache
from ecidadania.cliente import ClienteECidadania, RateLimiter

BASE = "https://ecidadania.test/ecidadania"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.agora = start
        self.esperas: list[float] = []

    def time(self) -> float:
        return self.agora

    def sleep(self, segundos: float) -> None:
        self.esperas.append(segundos)
        self.agora += segundos


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200, reason: str = "OK"):
        self.text = text
        self.status_code = status_code
        self.reason = reason


class FakeSession:
    """Serves canned responses by URL path (``/pesquisamateria?p=1``) or from a queue.

    A queued item that is an exception instance is raised instead of returned.
    """

    def __init__(self, clock: FakeClock, pages: dict | None = None):
        self.clock = clock
        self.pages = pages or {}
        self.fila: list = []
        self.chamadas: list[tuple[str, float]] = []
        self.headers = {}

    def get(self, url, timeout=None):
        self.chamadas.append((url, self.clock.time()))
        if self.fila:
            item = self.fila.pop(0)
        else:
            path = url[len(BASE):] if url.startswith(BASE) else url
            item = self.pages.get(path, FakeResponse("", 404, "Not Found"))
        if isinstance(item, Exception):
            raise item
        if isinstance(item, str):
            return FakeResponse(item)
        return item

    def close(self):
        pass


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(clock):
    return FakeSession(clock)


@pytest.fixture
def cliente(clock, session):
    limiter = RateLimiter(relogio=clock.time, dormir=clock.sleep)
    return ClienteECidadania(base_url=BASE, rate_limiter=limiter, session=session, dormir=clock.sleep)


@pytest.fixture
def cache(clock):
    return TTLCache(relogio=clock.time)


@pytest.fixture
def hoje():
    return lambda: date(2026, 1, 15)


def timeout_error():
    return requests.Timeout("Read timed out")


CONSULTAS_LISTAGEM = """
<html><body>
<div class="resultados">
  <div class="item">
    <div class="titulo"><a href="visualizacaomateria?id=101">Dispõe sobre hortas comunitárias em áreas urbanas</a></div>
    <div class="votos"><span>PL 1234/2024</span><span>2.400</span><span>2.600</span><span>SIM</span><span>NÃO</span></div>
    <div><a href="visualizacaomateria?id=101">Ver detalhes</a></div>
  </div>
  <div class="item">
    <div class="titulo"><a href="visualizacaomateria?id=102">Institui o dia nacional do ciclista</a></div>
    <div class="votos"><span>PEC nº 45 de 2023</span><span>500</span><span>4.500</span><span>SIM</span><span>NÃO</span></div>
  </div>
  <div class="item">
    <div class="titulo"><a href="visualizacaomateria?id=103">Altera regras de trânsito</a></div>
    <div class="votos"><span>713.428</span><span>1.002.970</span><span>Votos apurados</span><span>Consulta encerrada</span></div>
  </div>
  <div class="item">
    <div class="titulo"><a href="visualizacaomateria?id=104">Autoriza o uso de bicicletas</a></div>
    <div class="votos"><span>100</span><span>200</span><span>Votos apurados</span><span>300</span><span>400</span><span>SIM</span><span>NÃO</span></div>
  </div>
  <div class="item">
    <div class="titulo"><a href="visualizacaomateria?id=105">Sem votos ainda</a></div>
  </div>
</div>
</body></html>
"""

CONSULTAS_LISTAGEM_P2 = """
<html><body>
<div class="resultados">
  <div class="item">
    <div class="titulo"><a href="visualizacaomateria?id=105">Sem votos ainda</a></div>
  </div>
  <div class="item">
    <div class="titulo"><a href="visualizacaomateria?id=106">Estabelece metas de reciclagem</a></div>
    <div class="votos"><span>10</span><span>30</span><span>SIM</span><span>NÃO</span></div>
  </div>
</div>
</body></html>
"""

CONSULTA_DETALHE = """
<html><body>
<h1>e-Cidadania</h1>
<h2>PROJETO DE LEI nº 5064 de 2023</h2>
<p>Dispõe sobre a criação do programa nacional de hortas comunitárias.</p>
<div class="votos"><span>713.428</span> <span>1.002.970</span> <span>Votos apurados</span></div>
<p><strong>Autoria:</strong> Senador Fulano de Tal (PARTIDO/RS)</p>
<p><strong>Relator:</strong> Senadora Beltrana Souza (PARTIDO/SP)</p>
<p>Comissão de Educação</p>
<p>Consulta aberta em 01/03/2024</p>
<p>Encerramento previsto: 31/12/2026</p>
<p>12 comentários</p>
</body></html>
"""

IDEIAS_LISTAGEM = """
<html><body>
<div class="cards">
  <div class="card">
    <div class="row"><div class="col"><a href="/ecidadania/visualizacaoideia?id=201">Criar programa de renda básica para artistas</a></div></div>
    <div class="info">19.324 apoios</div>
    <div class="autor">MARIA DA SILVA (SP)</div>
    <div class="data">05/02/2024</div>
  </div>
  <div class="card">
    <div class="row"><div class="col"><a href="/ecidadania/visualizacaoideia?id=202">Fim da taxa de religação de energia</a></div></div>
    <div class="info">253.804 apoios</div>
    <div class="autor">JOÃO PEREIRA (MG)</div>
    <div class="data">10/01/2024</div>
  </div>
  <div class="card">
    <div class="row"><div class="col"><a href="/ecidadania/visualizacaoideia?id=203">Tarifa zero no transporte público</a></div></div>
    <div class="info">800 apoios</div>
    <div class="status">Ideia encerrada</div>
  </div>
</div>
</body></html>
"""

IDEIA_DETALHE = """
<html><body>
<h1>e-Cidadania</h1>
<strong>Fim da taxa de religação de energia elétrica</strong>
<p>Proposta por JOÃO PEREIRA (MG) em 10/01/2024</p>
<p>A cobrança da taxa de religação penaliza famílias de baixa renda que já enfrentam dificuldades para pagar a conta de luz, e deveria ser extinta em todo o país.</p>
<div>253.804 apoios</div>
<div>37 comentários</div>
<div>Ideia convertida em proposição: SUGESTÃO nº 30 de 2017</div>
</body></html>
"""

EVENTOS_LISTAGEM = """
<html><body>
<div class="eventos">
  <div class="evento">
    <div class="cab"><div class="t"><a href="visualizacaoaudiencia?id=301">Audiência sobre segurança pública nas fronteiras</a></div></div>
    <div>03/02/26 | 09:00</div>
    <div>CPICRIME</div>
    <div>42</div>
  </div>
  <div class="evento">
    <div class="cab"><div class="t"><a href="visualizacaoaudiencia?id=302">Debate sobre o novo ensino médio</a></div></div>
    <div>10/01/25 | 14:00</div>
    <div>CE</div>
    <div>130</div>
  </div>
  <div class="evento">
    <div class="cab"><div class="t"><a href="visualizacaoaudiencia?id=303">Reforma tributária e municípios</a></div></div>
    <div>20/03/26 | 10:00</div>
    <div>CAE</div>
    <div>Em andamento</div>
    <div>7</div>
  </div>
</div>
</body></html>
"""

EVENTO_DETALHE = """
<html><body>
<h1>e-Cidadania</h1>
<strong>Audiência pública sobre segurança pública nas fronteiras</strong>
<p>Data: 03/02/2026 às 09:00</p>
<p>Comissão de Segurança Pública</p>
<p>A audiência discute o combate ao crime organizado nas regiões de fronteira do país e o papel das forças federais.</p>
<p>Convidados: General Fulano, Delegada Beltrana; Professor Ciclano.</p>
<ul>
  <li>Abertura dos trabalhos pelo presidente</li>
  <li>Exposição dos convidados sobre o tema</li>
  <li>curto</li>
</ul>
<a href="https://www.youtube.com/watch?v=abc123">Assista</a>
<a href="/docs/pauta.pdf">Pauta em PDF</a>
<span>58 comentários</span>
</body></html>
"""
