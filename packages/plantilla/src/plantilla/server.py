"""FastAPI server exposing classification and roster diagnostics."""

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from plantilla.config import MatchConfig
from plantilla.diagnostics import explain, find_by_surname, ranked_candidates, roster_by_destino
from plantilla.matcher import Matcher
from plantilla.roster import Roster
from plantilla.status import ESTADO_LABELS, FILTRO_TODOS, filter_by_estado, summarize
from plantilla.types import MatchResult, RosterEntry, UserIdentityRecord

log = structlog.get_logger()


class RecordRequest(BaseModel):
    """A submitted identity as sent by the admin UI."""

    nombre: str = Field(min_length=1)
    apellidos: str | None = None
    destino: str | None = None
    categoria: str | None = None
    id: str | None = None

    def to_record(self) -> UserIdentityRecord:
        return UserIdentityRecord(
            nombre=self.nombre,
            apellidos=self.apellidos,
            destino=self.destino,
            categoria=self.categoria,
            id=self.id,
        )


class BatchRequest(BaseModel):
    records: list[RecordRequest]


class EntryResponse(BaseModel):
    nombre: str
    apellidos: str
    categoria: str
    destino: str


class DifferenceResponse(BaseModel):
    campo: str
    valor: str
    valor_oficial: str


class ResultResponse(BaseModel):
    estado: str
    badge: str
    coincidencia: EntryResponse | None = None
    diferencias: list[DifferenceResponse] | None = None
    similitud: float | None = None


class CandidateResponse(BaseModel):
    entry: EntryResponse
    similitud: float


class BatchItem(BaseModel):
    record: RecordRequest
    result: ResultResponse


class BatchResponse(BaseModel):
    total: int
    por_estado: dict[str, int]
    items: list[BatchItem]


class CandidateExplanationResponse(BaseModel):
    entry: EntryResponse
    similitud: float
    pares: list[tuple[str, str]]
    supera_umbral: bool


class ExplainResponse(BaseModel):
    nombre: str
    apellidos: str
    tokens: list[str]
    candidatos: list[CandidateExplanationResponse]
    resultado: ResultResponse


class RosterStatsResponse(BaseModel):
    total: int
    por_destino: dict[str, int]
    fecha_actualizacion: str | None
    version: str | None


def _entry(entry: RosterEntry) -> EntryResponse:
    return EntryResponse(
        nombre=entry.nombre,
        apellidos=entry.apellidos,
        categoria=entry.categoria,
        destino=entry.destino,
    )


def _result(result: MatchResult) -> ResultResponse:
    return ResultResponse(
        estado=result.estado,
        badge=ESTADO_LABELS[result.estado],
        coincidencia=_entry(result.coincidencia) if result.coincidencia else None,
        diferencias=[
            DifferenceResponse(campo=d.campo, valor=d.valor, valor_oficial=d.valor_oficial)
            for d in result.diferencias
        ] if result.diferencias is not None else None,
        similitud=result.similitud,
    )


def create_app(roster: Roster, config: MatchConfig | None = None) -> FastAPI:
    """Create the FastAPI application around an already loaded roster."""
    config = config or MatchConfig()
    matcher = Matcher(roster, config)
    app = FastAPI(title="Plantilla diagnostics")

    log.info("server_ready", roster_size=len(roster), version=roster.version)

    @app.get("/api/roster")
    async def get_roster() -> dict[str, list[EntryResponse]]:
        """Roster grouped by destino."""
        return {
            destino: [_entry(e) for e in entries]
            for destino, entries in roster_by_destino(roster).items()
        }

    @app.get("/api/roster/stats")
    async def get_roster_stats() -> RosterStatsResponse:
        stats = roster.stats()
        return RosterStatsResponse(
            total=stats.total,
            por_destino=stats.por_destino,
            fecha_actualizacion=stats.fecha_actualizacion,
            version=roster.version,
        )

    @app.get("/api/roster/search")
    async def search_roster(apellido: str = "") -> list[EntryResponse]:
        """Surname substring search."""
        if not apellido.strip():
            raise HTTPException(status_code=400, detail="apellido cannot be empty")
        return [_entry(e) for e in find_by_surname(roster, apellido)]

    @app.post("/api/classify")
    async def classify_record(req: RecordRequest) -> ResultResponse:
        return _result(matcher.classify(req.to_record()))

    @app.post("/api/classify/batch")
    async def classify_batch(req: BatchRequest, estado: str = FILTRO_TODOS) -> BatchResponse:
        """Classify many records; the summary always covers the whole batch."""
        results = matcher.classify_all(r.to_record() for r in req.records)
        try:
            visible = filter_by_estado(zip(req.records, results), estado)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        summary = summarize(results)
        return BatchResponse(
            total=summary.total,
            por_estado=summary.por_estado,
            items=[BatchItem(record=rec, result=_result(res)) for rec, res in visible],
        )

    @app.post("/api/candidates")
    async def get_candidates(req: RecordRequest, top: int | None = None) -> list[CandidateResponse]:
        """Ranked candidates, defaulting to the configured top N."""
        top_n = config.diagnostics.top_n if top is None else top
        return [
            CandidateResponse(entry=_entry(c.entry), similitud=c.similitud)
            for c in ranked_candidates(req.to_record(), roster, top_n, config)
        ]

    @app.post("/api/explain")
    async def explain_record(req: RecordRequest) -> ExplainResponse:
        exp = explain(req.to_record(), roster, config)
        return ExplainResponse(
            nombre=exp.nombre,
            apellidos=exp.apellidos,
            tokens=exp.tokens,
            candidatos=[
                CandidateExplanationResponse(
                    entry=_entry(c.entry),
                    similitud=c.similitud,
                    pares=c.pares,
                    supera_umbral=c.supera_umbral,
                )
                for c in exp.candidatos
            ],
            resultado=_result(exp.resultado),
        )

    return app
