"""
Registros estruturados extraídos do e-Cidadania.

Campos numéricos valem 0 e campos de texto valem '' ou None quando não
foram encontrados no HTML, para que a análise possa contar com todos eles.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class StatusConsulta(str, Enum):
    ABERTA = "aberta"
    ENCERRADA = "encerrada"


class StatusIdeia(str, Enum):
    ABERTA = "aberta"
    ENCERRADA = "encerrada"
    CONVERTIDA = "convertida"


class StatusEvento(str, Enum):
    AGENDADO = "agendado"
    EM_ANDAMENTO = "em_andamento"
    ENCERRADO = "encerrado"


class _Registro:
    def to_dict(self) -> dict[str, Any]:
        resultado = {}
        for f in fields(self):
            valor = getattr(self, f.name)
            if isinstance(valor, Enum):
                valor = valor.value
            elif isinstance(valor, list):
                valor = list(valor)
            resultado[f.name] = valor
        return resultado


@dataclass
class ConsultaResumo(_Registro):
    """Consulta pública como aparece na listagem."""
    id: int
    materia: str = ""
    ementa: str = ""
    votos_sim: int = 0
    votos_nao: int = 0
    total_votos: int = 0
    percentual_sim: int = 0
    percentual_nao: int = 0
    status: StatusConsulta = StatusConsulta.ABERTA
    url: str = ""


@dataclass
class ConsultaDetalhe(ConsultaResumo):
    autor: str | None = None
    relator: str | None = None
    comissao: str | None = None
    data_abertura: str | None = None
    data_encerramento: str | None = None
    comentarios: int = 0
    link_materia: str | None = None


@dataclass
class IdeiaResumo(_Registro):
    """Ideia legislativa como aparece na listagem."""
    id: int
    titulo: str = ""
    apoios: int = 0
    data_publicacao: str | None = None
    status: StatusIdeia = StatusIdeia.ABERTA
    autor: str | None = None
    url: str = ""


@dataclass
class IdeiaDetalhe(IdeiaResumo):
    descricao: str = ""
    problema: str | None = None
    solucao: str | None = None
    comentarios: int = 0
    data_encerramento: str | None = None
    pl_convertido: str | None = None


@dataclass
class EventoResumo(_Registro):
    """Evento interativo (audiência pública) como aparece na listagem."""
    id: int
    titulo: str = ""
    data: str | None = None
    hora: str | None = None
    comissao: str | None = None
    comentarios: int = 0
    status: StatusEvento = StatusEvento.AGENDADO
    url: str = ""


@dataclass
class EventoDetalhe(EventoResumo):
    descricao: str = ""
    pauta: list[str] = field(default_factory=list)
    convidados: list[str] = field(default_factory=list)
    video_url: str | None = None
    documentos: list[str] = field(default_factory=list)


@dataclass
class CriteriosSugestao(_Registro):
    evitar_polarizacao: bool = True
    evitar_consenso: bool = True
    minimo_participacao: int = 500
    apenas_em_tramitacao: bool = True


@dataclass
class SugestaoTema(_Registro):
    tipo: str  # 'consulta' ou 'ideia'
    id: int
    titulo: str
    motivo: str
    participacao: int
    url: str
    polarizacao: int | None = None
    materia_relacionada: str | None = None
