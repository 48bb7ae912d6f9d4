# file: main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quorumflow.config import CORS_ORIGINS, LOG_LEVEL
from quorumflow.controllers.activities import router as activities_router
from quorumflow.controllers.auth import router as auth_router
from quorumflow.controllers.members import router as members_router
from quorumflow.controllers.ministering import router as ministering_router
from quorumflow.controllers.notification import router as notification_router
from quorumflow.controllers.push import router as push_router
from quorumflow.controllers.report import router as report_router
from quorumflow.database.connection import init_db
from quorumflow.errors import QuorumFlowError

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("QuorumFlow API ready")
    yield


app = FastAPI(title="QuorumFlow API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QuorumFlowError)
async def quorumflow_error_handler(request: Request, exc: QuorumFlowError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(report_router, prefix="/api/reports", tags=["reports"])
app.include_router(activities_router, prefix="/api/activities", tags=["activities"])
app.include_router(ministering_router, prefix="/api/ministering", tags=["ministering"])
app.include_router(members_router, prefix="/api/members", tags=["members"])
app.include_router(notification_router, prefix="/api/notifications", tags=["notifications"])
app.include_router(push_router, prefix="/api/push", tags=["push"])


@app.get("/")
async def root():
    return {"message": "QuorumFlow API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
