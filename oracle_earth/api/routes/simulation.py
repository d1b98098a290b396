"""Time machine, crisis feed and what-if simulator endpoints.

Handlers are ``async`` so they run on the event loop that owns the
simulation timers.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from oracle_earth.api.deps import get_session
from oracle_earth.api.models import (
    EvaluateRequest,
    EvaluateResponse,
    EventListResponse,
    FeedLiveRequest,
    JumpRequest,
    ScenarioListResponse,
    SeekRequest,
    SpeedRequest,
    TimelineResponse,
)
from oracle_earth.simulation.models import CrisisEvent, SimulationSnapshot
from oracle_earth.simulation.session import SimulationSession

router = APIRouter(prefix="/api", tags=["simulation"])


def _timeline(session: SimulationSession) -> TimelineResponse:
    cursor = session.time_cursor
    return TimelineResponse(state=cursor.state(), milestone=cursor.milestone(), progress=cursor.progress)


@router.get("/simulation", response_model=SimulationSnapshot)
async def snapshot(session: SimulationSession = Depends(get_session)):
    return session.snapshot()


# ---------------------------------------------------------------------------
# What-if simulator
# ---------------------------------------------------------------------------

@router.get("/scenarios", response_model=ScenarioListResponse)
async def list_scenarios(session: SimulationSession = Depends(get_session)):
    return ScenarioListResponse(scenarios=session.evaluator.list_scenarios())


@router.post("/scenarios/evaluate", response_model=EvaluateResponse)
async def evaluate(request: EvaluateRequest, session: SimulationSession = Depends(get_session)):
    """Evaluate a scenario. Returns 409 while another evaluation is running."""
    evaluator = session.evaluator
    if evaluator.is_running:
        raise HTTPException(status_code=409, detail="A scenario evaluation is already running.")
    report = await evaluator.evaluate(request.scenario_id, request.parameters)
    run = evaluator.last_run
    if report is None or run is None:
        raise HTTPException(status_code=409, detail="Scenario evaluation was rejected or reset.")
    return EvaluateResponse(
        scenario_id=run.scenario_id,
        run_state=evaluator.state,
        report=report,
        parameter_overrides=run.parameter_overrides,
        effective_parameters=run.effective_parameters,
    )


@router.post("/scenarios/reset", response_model=SimulationSnapshot)
async def reset_scenario(session: SimulationSession = Depends(get_session)):
    session.evaluator.reset()
    return session.snapshot()


# ---------------------------------------------------------------------------
# Time machine
# ---------------------------------------------------------------------------

@router.get("/timeline", response_model=TimelineResponse)
async def timeline(session: SimulationSession = Depends(get_session)):
    return _timeline(session)


@router.post("/timeline/seek", response_model=TimelineResponse)
async def seek(request: SeekRequest, session: SimulationSession = Depends(get_session)):
    session.time_cursor.seek(request.year)
    return _timeline(session)


@router.post("/timeline/play", response_model=TimelineResponse)
async def play(session: SimulationSession = Depends(get_session)):
    session.time_cursor.play()
    return _timeline(session)


@router.post("/timeline/pause", response_model=TimelineResponse)
async def pause(session: SimulationSession = Depends(get_session)):
    session.time_cursor.pause()
    return _timeline(session)


@router.post("/timeline/speed", response_model=TimelineResponse)
async def speed(request: SpeedRequest, session: SimulationSession = Depends(get_session)):
    if request.speed is None:
        session.time_cursor.cycle_speed()
    else:
        session.time_cursor.set_speed(request.speed)
    return _timeline(session)


@router.post("/timeline/reset", response_model=TimelineResponse)
async def reset_timeline(session: SimulationSession = Depends(get_session)):
    session.time_cursor.reset()
    return _timeline(session)


@router.post("/timeline/jump", response_model=TimelineResponse)
async def jump(request: JumpRequest, session: SimulationSession = Depends(get_session)):
    session.time_cursor.jump_to(request.label)
    return _timeline(session)


# ---------------------------------------------------------------------------
# Crisis feed
# ---------------------------------------------------------------------------

@router.get("/events", response_model=EventListResponse)
async def events(
    category: str = Query(default="all", max_length=20),
    session: SimulationSession = Depends(get_session),
):
    feed = session.feed
    return EventListResponse(live=feed.is_live, category=category, events=feed.filter_by(category))


@router.get("/events/{event_id}", response_model=CrisisEvent)
async def event_detail(event_id: str, session: SimulationSession = Depends(get_session)):
    event = session.feed.select(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Event '{event_id}' not found.")
    return event


@router.post("/events/live", response_model=EventListResponse)
async def set_live(request: FeedLiveRequest, session: SimulationSession = Depends(get_session)):
    feed = session.feed
    feed.set_live(request.live)
    return EventListResponse(live=feed.is_live, events=feed.events)
