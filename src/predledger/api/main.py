"""FastAPI backend over a single PredictionLedger."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from predledger.api.schemas import (
    BalanceResponse,
    ClaimResponse,
    ClaimStatusResponse,
    CreateMarketRequest,
    CreateMarketResponse,
    ErrorResponse,
    EventsResponse,
    HealthResponse,
    HistoryResponse,
    MarketCountResponse,
    MarketsListResponse,
    PlaceBetRequest,
    ResolveRequest,
    StakeResponse,
    TransfersResponse,
    WithdrawResponse,
)
from predledger.config import Settings, get_settings
from predledger.errors import (
    InvalidMarket,
    InvalidOutcome,
    InvalidParameters,
    LedgerError,
    LedgerIntegrityError,
    StakeTooLow,
    TransferFailure,
    Unauthorized,
)
from predledger.ledger.service import PredictionLedger
from predledger.models import Market

log = structlog.get_logger(__name__)

# Set by run_api() so lifespan opens the configured ledger.
_settings: Settings | None = None
_ledger: PredictionLedger | None = None

_ERROR_STATUS: dict[type[LedgerError], int] = {
    InvalidMarket: 404,
    Unauthorized: 403,
    InvalidParameters: 422,
    InvalidOutcome: 422,
    StakeTooLow: 422,
    TransferFailure: 502,
    LedgerIntegrityError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _ledger
    opened = False
    if _ledger is None:
        settings = _settings or get_settings()
        _ledger = PredictionLedger.from_settings(settings)
        opened = True
        log.info("ledger_opened", db_path=settings.db_path, owner=_ledger.owner)
    yield
    if opened and _ledger is not None:
        _ledger.close()
        _ledger = None


app = FastAPI(title="PredLedger API", version="0.1.0", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

_ERRORS = {404: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}


def get_ledger() -> PredictionLedger:
    if _ledger is None:
        raise RuntimeError("Ledger not initialized; start the app through run_api() or its lifespan")
    return _ledger


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    # Anything not mapped is a state conflict (closed, resolved, claimed, ...).
    status_code = next((s for cls, s in _ERROR_STATUS.items() if isinstance(exc, cls)), 409)
    return _error_json(exc.code, exc.message, status_code)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/markets", response_model=MarketsListResponse)
def markets_list(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    ledger: PredictionLedger = Depends(get_ledger),
) -> MarketsListResponse:
    """List markets newest first with limit/offset."""
    return MarketsListResponse(
        markets=ledger.list_markets(limit=limit, offset=offset),
        total=ledger.get_market_count(),
    )


@app.post("/markets", response_model=CreateMarketResponse, status_code=201, responses=_ERRORS)
def markets_create(
    body: CreateMarketRequest,
    x_caller: str = Header(..., description="Creator identity"),
    ledger: PredictionLedger = Depends(get_ledger),
) -> CreateMarketResponse:
    market_id = ledger.create_market(body.question, body.outcomes, body.duration, x_caller)
    return CreateMarketResponse(market_id=market_id, end_time=ledger.get_market(market_id).end_time)


@app.get("/markets/count", response_model=MarketCountResponse)
def markets_count(ledger: PredictionLedger = Depends(get_ledger)) -> MarketCountResponse:
    return MarketCountResponse(count=ledger.get_market_count())


@app.get("/markets/{market_id}", response_model=Market, responses=_ERRORS)
def market_detail(market_id: int, ledger: PredictionLedger = Depends(get_ledger)) -> Market:
    """Question, outcomes, per-outcome totals, pool, end time and resolution state."""
    return ledger.get_market(market_id)


@app.post("/markets/{market_id}/bets", response_model=StakeResponse, responses=_ERRORS)
def market_place_bet(
    market_id: int,
    body: PlaceBetRequest,
    x_caller: str = Header(..., description="Bettor identity"),
    ledger: PredictionLedger = Depends(get_ledger),
) -> StakeResponse:
    """Stake on an outcome. Returns the bettor's cumulative stake on it."""
    record = ledger.place_bet(market_id, body.outcome_index, body.amount, x_caller)
    return StakeResponse(market_id=market_id, user=record.bettor, outcome_index=record.outcome_index, amount=record.amount)


@app.post("/markets/{market_id}/resolve", response_model=Market, responses=_ERRORS)
def market_resolve(
    market_id: int,
    body: ResolveRequest,
    x_caller: str = Header(..., description="Caller identity (market creator)"),
    ledger: PredictionLedger = Depends(get_ledger),
) -> Market:
    return ledger.resolve_market(market_id, body.winning_outcome, x_caller)


@app.post("/markets/{market_id}/claim", response_model=ClaimResponse, responses=_ERRORS)
def market_claim(
    market_id: int,
    x_caller: str = Header(..., description="Claimant identity"),
    ledger: PredictionLedger = Depends(get_ledger),
) -> ClaimResponse:
    winnings = ledger.claim(market_id, x_caller)
    return ClaimResponse(market_id=market_id, claimant=x_caller.strip(), winnings=winnings)


@app.get("/markets/{market_id}/claims/{user}", response_model=ClaimStatusResponse, responses=_ERRORS)
def market_claim_status(market_id: int, user: str, ledger: PredictionLedger = Depends(get_ledger)) -> ClaimStatusResponse:
    return ClaimStatusResponse(market_id=market_id, user=user, claimed=ledger.has_claimed(market_id, user))


@app.get("/markets/{market_id}/stakes/{user}/{outcome_index}", response_model=StakeResponse, responses=_ERRORS)
def market_user_stake(
    market_id: int,
    user: str,
    outcome_index: int,
    ledger: PredictionLedger = Depends(get_ledger),
) -> StakeResponse:
    amount = ledger.get_user_stake(market_id, outcome_index, user)
    return StakeResponse(market_id=market_id, user=user, outcome_index=outcome_index, amount=amount)


@app.get("/users/{user}/history", response_model=HistoryResponse)
def user_history(
    user: str,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    ledger: PredictionLedger = Depends(get_ledger),
) -> HistoryResponse:
    """Paginated bet history, oldest first."""
    entries = ledger.get_user_history(user, limit=limit, offset=offset)
    return HistoryResponse(user=user, entries=entries, limit=limit, offset=offset)


@app.get("/treasury/balance", response_model=BalanceResponse)
def treasury_balance(ledger: PredictionLedger = Depends(get_ledger)) -> BalanceResponse:
    return BalanceResponse(balance=ledger.get_balance())


@app.post("/treasury/withdraw", response_model=WithdrawResponse, responses=_ERRORS)
def treasury_withdraw(
    x_caller: str = Header(..., description="Caller identity (operator)"),
    ledger: PredictionLedger = Depends(get_ledger),
) -> WithdrawResponse:
    amount = ledger.withdraw_fees(x_caller)
    return WithdrawResponse(owner=ledger.owner, amount=amount)


@app.get("/treasury/transfers", response_model=TransfersResponse)
def treasury_transfers(
    counterparty: str | None = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    ledger: PredictionLedger = Depends(get_ledger),
) -> TransfersResponse:
    return TransfersResponse(transfers=ledger.list_transfers(counterparty=counterparty, limit=limit))


@app.get("/events", response_model=EventsResponse)
def events_list(
    market_id: int | None = Query(None),
    event_type: str | None = Query(None, description="e.g. BetPlaced, WinningsClaimed"),
    limit: int = Query(100, ge=1, le=1000),
    ledger: PredictionLedger = Depends(get_ledger),
) -> EventsResponse:
    return EventsResponse(events=ledger.list_events(market_id=market_id, event_type=event_type, limit=limit))


def run_api(settings: Settings | None = None, host: str = "127.0.0.1", port: int = 8000) -> None:
    global _settings
    _settings = settings
    import uvicorn
    uvicorn.run("predledger.api.main:app", host=host, port=port, reload=False)
