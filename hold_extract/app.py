import logging
from typing import Any, Dict

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from .core import detect_holds, manual_hold, resolve_point
from .errors import NoShapesFoundError, UnprocessableImageError
from .preprocess import decode_image
from .types import NormalizedPoint

logger = logging.getLogger(__name__)

app = FastAPI(title="Hold Extract API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def decode_upload(upload: UploadFile):
    data = await upload.read()
    try:
        return decode_image(data)
    except UnprocessableImageError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/detect")
async def detect(file: UploadFile = File(...)):
    img = await decode_upload(file)
    try:
        # detector runs are CPU bound; keep them off the event loop
        holds = await run_in_threadpool(detect_holds, img)
    except UnprocessableImageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoShapesFoundError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info("Detected %d holds", len(holds))
    return JSONResponse({"holds": [h.to_dict() for h in holds]})


@app.post("/resolve")
async def resolve(
    file: UploadFile = File(...),
    x: float = Query(..., ge=0.0, le=1.0, description="Normalized tap x, origin top-left"),
    y: float = Query(..., ge=0.0, le=1.0, description="Normalized tap y, origin top-left"),
):
    img = await decode_upload(file)
    try:
        hold = await run_in_threadpool(resolve_point, img, NormalizedPoint(x, y))
    except UnprocessableImageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    payload: Dict[str, Any] = {"match": hold.to_dict() if hold is not None else None}
    return JSONResponse(payload)


@app.post("/manual")
def manual(
    x: float = Query(..., ge=0.0, le=1.0),
    y: float = Query(..., ge=0.0, le=1.0),
):
    return JSONResponse({"hold": manual_hold(NormalizedPoint(x, y)).to_dict()})
