"""
Dynasty diplomacy: FastAPI host.

Dev:        uvicorn api.main:app --host 127.0.0.1 --port 8000 --reload

The host owns one DiplomacyCore and serialises every call into it with a
lock, so a day advance never interleaves with a marriage proposal.
"""

from __future__ import annotations

import json
import logging
import shutil
import sys
import threading
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

# ---------------------------------------------------------------------------
#  Path setup (project root importable when run as a script)
# ---------------------------------------------------------------------------

_project_root = Path(__file__).resolve().parent.parent

if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from api.models import (  # noqa: E402
    DailyTickRequest,
    DailyTickResponse,
    GiftRequest,
    InbreedingResponse,
    LineageRequest,
    LineageResponse,
    ProposalRequest,
)
from dynastydip.config_loader import CONFIG_FILENAME, ConfigLoader, DiplomacyConfig  # noqa: E402
from dynastydip.models import Gender, Kingdom, MarriageCandidate, ProposalOutcome, ProposalResult  # noqa: E402
from dynastydip.name_loader import NameLoader  # noqa: E402
from dynastydip.paths import CONFIG_DIR, FALLBACK_CONFIG_DIR, NAME_LISTS_DIR, SAVE_DIR  # noqa: E402
from dynastydip.persistence import JsonFileRepository  # noqa: E402
from dynastydip.simulation import DiplomacyCore  # noqa: E402
from dynastydip.treasury import GoldLedger  # noqa: E402

logger = logging.getLogger(__name__)


def build_default_core() -> DiplomacyCore:
    """Core wired to the on-disk config, name lists and save directory."""
    config = ConfigLoader(CONFIG_DIR).get_config()
    core = DiplomacyCore(
        config=config,
        repository=JsonFileRepository(SAVE_DIR),
        treasury=GoldLedger(),
        name_loader=NameLoader(NAME_LISTS_DIR),
    )
    return core.init()


# ---------------------------------------------------------------------------
#  App setup
# ---------------------------------------------------------------------------


def create_app(core: DiplomacyCore | None = None, config_dir: Path = CONFIG_DIR) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "core", None) is None:
            app.state.core = build_default_core()
        yield

    app = FastAPI(title="Dynasty Diplomacy API", lifespan=lifespan)
    app.state.core = core
    app.state.lock = threading.Lock()
    app.state.config_dir = Path(config_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_routes(app)
    return app


def _core(request: Request) -> DiplomacyCore:
    return request.app.state.core


def _lock(request: Request) -> threading.Lock:
    return request.app.state.lock


# ---------------------------------------------------------------------------
#  Config helpers
# ---------------------------------------------------------------------------


def _read_json(path: Path) -> dict:
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"Config file not found: {path.name}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=4, ensure_ascii=False)


def _register_routes(app: FastAPI) -> None:
    # -----------------------------------------------------------------------
    #  Kingdoms and relations
    # -----------------------------------------------------------------------

    @app.get("/kingdoms")
    def list_kingdoms(request: Request, active_only: bool = False) -> list[Kingdom]:
        core = _core(request)
        with _lock(request):
            return core.active_kingdoms() if active_only else core.kingdoms()

    @app.get("/kingdoms/{kingdom_id}")
    def get_kingdom(request: Request, kingdom_id: str) -> Kingdom:
        with _lock(request):
            kingdom = _core(request).get_kingdom(kingdom_id)
        if kingdom is None:
            raise HTTPException(status_code=404, detail="Kingdom not found")
        return kingdom

    @app.get("/relations")
    def get_relations(request: Request) -> dict[str, float]:
        with _lock(request):
            return _core(request).all_relations()

    # -----------------------------------------------------------------------
    #  Day advance
    # -----------------------------------------------------------------------

    @app.post("/days/advance")
    def advance_days(request: Request, body: DailyTickRequest) -> DailyTickResponse:
        core = _core(request)
        saved = True
        last_day = body.currentDay
        with _lock(request):
            for offset in range(body.days):
                last_day = body.currentDay + offset
                saved = core.process_daily(last_day, threat_level=body.threatLevel, bonuses=body.bonuses) and saved
            active = len(core.active_kingdoms())
        return DailyTickResponse(lastDay=last_day, saved=saved, activeKingdoms=active)

    # -----------------------------------------------------------------------
    #  Marriage and gifts
    # -----------------------------------------------------------------------

    @app.get("/marriage/candidates")
    def marriage_candidates(request: Request, seeker_gender: Gender, seeker_id: str | None = None) -> list[MarriageCandidate]:
        with _lock(request):
            return _core(request).get_marriage_candidates(seeker_gender, seeker_id=seeker_id)

    @app.post("/marriage/proposals")
    def propose_marriage(request: Request, body: ProposalRequest) -> ProposalResult:
        with _lock(request):
            result = _core(request).propose_marriage(body.candidateId, body.seekerId)
        if result.outcome is ProposalOutcome.NOT_FOUND:
            raise HTTPException(status_code=404, detail="Marriage candidate not found")
        return result

    @app.post("/gifts")
    def send_gift(request: Request, body: GiftRequest) -> dict[str, str]:
        core = _core(request)
        with _lock(request):
            if core.get_kingdom(body.kingdomId) is None:
                raise HTTPException(status_code=404, detail="Kingdom not found")
            if not core.send_gift(body.kingdomId, body.gold):
                raise HTTPException(status_code=409, detail="Gift could not be sent")
        return {"status": "sent"}

    # -----------------------------------------------------------------------
    #  Lineage
    # -----------------------------------------------------------------------

    @app.post("/lineage")
    def register_lineage(request: Request, body: LineageRequest) -> LineageResponse:
        with _lock(request):
            ancestors = _core(request).register_lineage(body.personId, body.parentIds)
        return LineageResponse(personId=body.personId, ancestorIds=sorted(ancestors))

    @app.get("/lineage/{person_id}")
    def get_lineage(request: Request, person_id: str) -> LineageResponse:
        with _lock(request):
            ancestors = _core(request).ancestors(person_id)
        return LineageResponse(personId=person_id, ancestorIds=sorted(ancestors))

    @app.get("/lineage/{person_id1}/inbreeding/{person_id2}")
    def check_inbreeding(request: Request, person_id1: str, person_id2: str) -> InbreedingResponse:
        with _lock(request):
            inbred = _core(request).check_inbreeding(person_id1, person_id2)
        return InbreedingResponse(personId1=person_id1, personId2=person_id2, inbred=inbred)

    # -----------------------------------------------------------------------
    #  Diplomacy config endpoints
    # -----------------------------------------------------------------------

    @app.get("/config/diplomacy")
    def get_diplomacy_config(request: Request) -> DiplomacyConfig:
        return DiplomacyConfig.model_validate(_read_json(request.app.state.config_dir / CONFIG_FILENAME))

    @app.put("/config/diplomacy")
    def put_diplomacy_config(request: Request, body: DiplomacyConfig) -> dict[str, str]:
        _write_json(request.app.state.config_dir / CONFIG_FILENAME, body.model_dump(mode="json", by_alias=True))
        with _lock(request):
            _core(request).context.config = body
        return {"status": "saved"}

    @app.post("/config/diplomacy/reset")
    def reset_diplomacy_config(request: Request) -> dict[str, str]:
        config_dir = request.app.state.config_dir
        src = config_dir / FALLBACK_CONFIG_DIR.name / CONFIG_FILENAME
        dst = config_dir / CONFIG_FILENAME
        if not src.exists():
            raise HTTPException(status_code=404, detail="Fallback diplomacy config not found")
        shutil.copy2(src, dst)
        with _lock(request):
            _core(request).context.config = DiplomacyConfig.model_validate(_read_json(dst))
        return {"status": "reset"}


app = create_app()


# ---------------------------------------------------------------------------
#  Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
