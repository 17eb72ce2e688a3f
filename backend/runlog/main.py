import logging
import sys

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from runlog.api.deps import CurrentUser, get_current_user
from runlog.api.runs import router as runs_router
from runlog.api.goals import router as goals_router
from runlog.api.imports import router as imports_router
from runlog.core.config import settings
from runlog.core.errors import PersistenceError
from runlog.db import Base, engine
from runlog.models.run import Run  # noqa: F401  (import ensures table is registered)
from runlog.models.goal import Goal  # noqa: F401


logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (runs, goals) on startup
Base.metadata.create_all(bind=engine)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


app.include_router(runs_router)
app.include_router(goals_router)
app.include_router(imports_router)


@app.get("/")
def root():
    return {"message": "Runlog backend is running"}


@app.get("/me", response_model=CurrentUser)
def read_current_user(user: CurrentUser = Depends(get_current_user)):
    return user
