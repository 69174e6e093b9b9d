import os

BASE_URL = os.environ.get("ECIDADANIA_BASE_URL", "https://www12.senado.leg.br/ecidadania").rstrip("/")

# Link para a pesquisa de matérias nos Dados Abertos do Senado
DADOS_ABERTOS_MATERIA_URL = "https://legis.senado.leg.br/dadosabertos/materia/pesquisa/lista"

# Intervalo mínimo entre duas requisições ao portal (segundos)
MIN_REQUEST_INTERVAL = 1.0

DEFAULT_TIMEOUT = float(os.environ.get("ECIDADANIA_TIMEOUT", "30"))
DEFAULT_RETRIES = int(os.environ.get("ECIDADANIA_RETRIES", "3"))

DEBUG = os.environ.get("ECIDADANIA_DEBUG", "").lower() in ("1", "true", "sim", "yes")

# Validade das entradas de cache (segundos)
TTL_LISTAGEM = 15 * 60
TTL_DETALHE = 60 * 60
TTL_RELATORIO = 24 * 60 * 60

# Intervalo entre varreduras automáticas de entradas vencidas (segundos)
CACHE_CHECK_PERIOD = 120

# Tamanho máximo de títulos/ementas nas listagens
MAX_TEXTO = 500

USER_AGENT = "Mozilla/5.0 (compatible; ecidadania-scraper/1.0)"
