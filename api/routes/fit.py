"""
api/routes/fit.py: Pitch fitting endpoint.

Endpoints:
    POST /fit/pitches: fit pitches to a scale or chord via PitchFitter

Pure computation: no database, no LLM. Invalid pitch names and unknown
scale templates are reported as 422.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from api.schemas.fit import FitPitchesRequest, FitPitchesResponse
from core.music_theory import (
    Chord,
    FitPitchOptions,
    PitchFitter,
    build_scale,
    pitch_class,
    to_pitch,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fit", tags=["fit"])


@router.post("/pitches", response_model=FitPitchesResponse)
def fit_pitches(request: FitPitchesRequest) -> FitPitchesResponse:
    """Fit pitches to a scale or chord without collapsing distinct inputs.

    Args:
        request: FitPitchesRequest with pitches, container and fit options.

    Returns:
        FitPitchesResponse with fitted and naive pitches and the 12-entry map.

    Raises:
        422: Unparseable pitch name or unknown scale template.
    """
    try:
        pitches = [to_pitch(p) for p in request.pitches]
        optimize_for = [to_pitch(p) for p in (request.optimize_for or pitches)]
        options = FitPitchOptions(
            max_movement=request.options.max_movement,
            prefer_root=request.options.prefer_root,
            preferred_direction=request.options.direction,
            seed=request.options.seed,
        )
        if request.chord:
            container = Chord(request.chord, root=request.root)
            label = f"Chord {list(container.pitches)}"
            members = sorted({pitch_class(p) for p in container.pitches})
        else:
            container = build_scale("C" if request.root is None else request.root, request.scale)
            label = container.name
            members = sorted(container.pitches)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    fitter = PitchFitter(optimize_for, container, options)
    fitted = fitter.fit_pitches(pitches)
    naive = [container.fit_pitch(p, options) for p in pitches]
    logger.info(
        "fit/pitches: %d pitches against %s, %d distinct outputs (naive %d)",
        len(pitches),
        label,
        len({pitch_class(p) for p in fitted}),
        len({pitch_class(p) for p in naive}),
    )

    return FitPitchesResponse(
        container=label,
        container_pitch_classes=members,
        pitches=pitches,
        fitted=fitted,
        naive_fitted=naive,
        distinct_outputs=len({pitch_class(p) for p in fitted}),
        naive_distinct_outputs=len({pitch_class(p) for p in naive}),
        pitch_class_map={pc: pitch_class(fitter.fit_pitch(pc)) for pc in range(12)},
    )
