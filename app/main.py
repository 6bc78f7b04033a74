import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.config import settings
from app.database import SessionLocal, engine, Base
from app.dashboards.catalog import seed_catalog
from app.invite_links.service import check_and_refresh_links
from app.users.routers import router as user_router
from app.dashboards.router import router as dashboard_router
from app.invite_links.router import router as invite_link_router
from app.invite_links.router import dashboard_router as dashboard_invite_link_router
from app.priorities.router import router as priority_router
from app.categories.router import router as category_router
from app.records.router import router as record_router
from app.budgets.router import router as budget_router
from app.goals.router import router as goal_router
from app.tags.router import router as tag_router


logger.add(settings.LOG_FILE, rotation=settings.LOG_ROTATION, level=settings.LOG_LEVEL)


def refresh_invite_links():
    db = SessionLocal()
    try:
        return check_and_refresh_links(db)
    finally:
        db.close()


async def invite_link_refresh_loop():
    interval = settings.INVITE_LINK_REFRESH_HOURS * 3600
    while True:
        try:
            await run_in_threadpool(refresh_invite_links)
        except Exception:
            logger.exception("Invite link refresh failed")
        await asyncio.sleep(interval)


# Database startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_catalog(db)
    finally:
        db.close()

    refresh_task = None
    if settings.INVITE_LINK_REFRESH_ENABLED:
        refresh_task = asyncio.create_task(invite_link_refresh_loop())

    yield

    if refresh_task:
        refresh_task.cancel()
    logger.info("Application shutdown")


# Create app
app = FastAPI(
    title="BUDGET PLANNER API",
    description="An API for shared budget dashboards including Members, Invite Links, Records and Category Priorities.",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Routers
app.include_router(user_router, prefix="/users", tags=["Users"])
app.include_router(dashboard_router, prefix="/dashboards", tags=["Dashboards"])
app.include_router(
    dashboard_invite_link_router,
    prefix="/dashboards/{dashboard_id}/invite-links",
    tags=["Invite Links"],
)
app.include_router(invite_link_router, prefix="/invite-links", tags=["Invite Links"])
# priority routes share the categories prefix and must match first
app.include_router(
    priority_router,
    prefix="/dashboards/{dashboard_id}/categories",
    tags=["Category Priorities"],
)
app.include_router(category_router, prefix="/dashboards/{dashboard_id}/categories", tags=["Categories"])
app.include_router(record_router, prefix="/dashboards/{dashboard_id}/records", tags=["Records"])
app.include_router(budget_router, prefix="/dashboards/{dashboard_id}/budgets", tags=["Budgets"])
app.include_router(goal_router, prefix="/dashboards/{dashboard_id}/goals", tags=["Goals"])
app.include_router(tag_router, prefix="/dashboards/{dashboard_id}/tags", tags=["Tags"])


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "detail": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="127.0.0.1", port=8000)
