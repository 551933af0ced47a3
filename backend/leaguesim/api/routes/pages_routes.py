"""
HTML page routes: a single form that asks for a team and a rank.
"""

from html import escape
from typing import Optional
from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas import SimulationRunRequest, SimulationResultsResponse
from ..dependencies import get_snapshot, simulate_with_cache
from ...data import LeagueSnapshot
from ...db import get_db


router = APIRouter(tags=["pages"])


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Are we gonna win the league?</title>
</head>
<body>
<h1>Are we gonna win the league?</h1>
<p>Pick a team and a finishing position. The remaining {n_fixtures} fixtures are simulated
thousands of times to estimate the chance of finishing there or higher.</p>
<form action="/submit" method="post">
<label for="team">Team</label>
<select id="team" name="team">
{options}
</select>
<label for="rank">Rank</label>
<input id="rank" name="rank" type="number" min="1" max="{n_teams}" value="{rank}" required>
<button type="submit">Calculate</button>
</form>
{body}
</body>
</html>
"""


def render_page(
    snapshot: LeagueSnapshot,
    results: Optional[SimulationResultsResponse] = None,
    error: Optional[str] = None,
    selected_team: Optional[str] = None,
    rank: int = 1
) -> str:
    """Render the landing page, with results or an error when given."""
    options = "\n".join(
        '<option value="{0}"{1}>{0}</option>'.format(
            escape(name), " selected" if name == selected_team else ""
        )
        for name in snapshot.table.team_names
    )

    body = ""
    if error is not None:
        body = f'<p class="error">{escape(error)}</p>'
    elif results is not None:
        body = (
            f"<p>{escape(results.team)} has a {results.probability:.2f}% chance of finishing "
            f"at rank {results.target_rank} or better "
            f"({results.n_simulations} simulated seasons).</p>"
        )
        if results.clinched:
            body += f"<p>Rank {results.target_rank} or better is already mathematically secured.</p>"
        elif results.eliminated:
            body += f"<p>Rank {results.target_rank} is mathematically out of reach.</p>"
        elif results.magic_number is not None:
            body += f"<p>{results.magic_number} more points guarantee it.</p>"
        if results.average_wins_at_rank is not None:
            body += (
                f"<p>Average wins when finishing exactly at rank {results.target_rank}: "
                f"{results.average_wins_at_rank:.1f}</p>"
            )

    return PAGE_TEMPLATE.format(
        n_fixtures=len(snapshot.fixtures),
        n_teams=len(snapshot.table),
        options=options,
        rank=rank,
        body=body
    )


def _error_page(snapshot: LeagueSnapshot, message: str, team: str) -> HTMLResponse:
    return HTMLResponse(
        render_page(snapshot, error=message, selected_team=team),
        status_code=status.HTTP_400_BAD_REQUEST
    )


@router.get("/", response_class=HTMLResponse)
async def index(snapshot: LeagueSnapshot = Depends(get_snapshot)) -> HTMLResponse:
    """Landing page before any calculations have been done."""
    return HTMLResponse(render_page(snapshot))


@router.post("/submit", response_class=HTMLResponse)
async def submit(
    team: str = Form(default=""),
    rank: str = Form(default=""),
    snapshot: LeagueSnapshot = Depends(get_snapshot),
    db: AsyncSession = Depends(get_db)
) -> HTMLResponse:
    """Handle the form, run the simulation and render the results."""
    team = team.strip()
    if not team:
        return _error_page(snapshot, "Pick a team", team)

    try:
        target_rank = int(rank)
    except ValueError:
        return _error_page(snapshot, f"Rank must be a whole number, got {rank!r}", team)

    if target_rank < 1:
        return _error_page(snapshot, f"Rank must be between 1 and {len(snapshot.table)}", team)

    try:
        request = SimulationRunRequest(team=team, rank=target_rank)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        return _error_page(snapshot, f"Invalid {field}: {error['msg']}", team)

    try:
        results = await simulate_with_cache(request, snapshot, db)
    except HTTPException as e:
        return _error_page(snapshot, e.detail, team)

    return HTMLResponse(render_page(snapshot, results=results, selected_team=team, rank=target_rank))
