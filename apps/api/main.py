from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from werkzeug.security import generate_password_hash

from .auth import AuthService, current_user
from .backup import BackupManager, BackupScheduler
from .config import AppConfig
from .dashboard import DashboardService
from .db.session import SalesDatabase, seed_defaults
from .errors import NotFound, SalesError
from .export import export_filename
from .rate_limit import RateLimiter
from .schemas import (
    ChangePasswordRequest,
    DashboardStats,
    LoginRequest,
    LoginResponse,
    ProfileOut,
    ProfileRequest,
    SaleOut,
    SaveSalesRequest,
    TargetRequest,
    money,
)
from .stores import UserStore

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    config = config or AppConfig.from_env()

    database = SalesDatabase(config.db_path)
    database.init_db()
    seed_defaults(
        database,
        config.default_username,
        generate_password_hash(config.default_password),
        config.default_monthly_target,
    )

    service = DashboardService(database, default_target=Decimal(config.default_monthly_target))
    backups = BackupManager(database, config.backup_dir, keep=config.backup_keep)
    scheduler = BackupScheduler(backups, hour=config.backup_hour)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.backup_enabled:
            scheduler.start()
        yield
        await scheduler.stop()

    app = FastAPI(title="Storefront Sales API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.service = service
    app.state.auth = AuthService(UserStore(database), config.jwt_secret, config.token_ttl_days)
    app.state.backups = backups
    app.state.scheduler = scheduler
    app.state.rate_limiter = RateLimiter(config.rate_limit_max, config.rate_limit_window)

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if request.url.path.startswith("/api/"):
            client = request.client.host if request.client else "unknown"
            if not app.state.rate_limiter.allow(client):
                logger.warning("api.rate_limited client=%s path=%s", client, request.url.path)
                return JSONResponse(status_code=429, content={"error": "Too many requests"})
        return await call_next(request)

    @app.exception_handler(SalesError)
    async def sales_error_handler(request: Request, exc: SalesError) -> JSONResponse:
        logger.info("api.error path=%s type=%s message=%s", request.url.path, type(exc).__name__, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    authenticated = [Depends(current_user)]

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    # Auth

    @app.post("/api/auth/login", response_model=LoginResponse)
    def login(payload: LoginRequest) -> LoginResponse:
        if not payload.username or not payload.password:
            raise HTTPException(status_code=400, detail="Username and password are required")
        result = app.state.auth.login(payload.username, payload.password)
        if result is None:
            raise HTTPException(status_code=401, detail="Invalid username or password")
        return LoginResponse(**result)

    @app.get("/api/auth/verify")
    def verify(user: dict = Depends(current_user)) -> dict:
        return {"success": True, "user": user}

    @app.post("/api/auth/change-password")
    def change_password(payload: ChangePasswordRequest, user: dict = Depends(current_user)) -> dict:
        changed = app.state.auth.change_password(
            user["username"],
            payload.current_password,
            payload.new_password,
        )
        if not changed:
            raise HTTPException(status_code=401, detail="Current password is incorrect")
        return {"success": True, "message": "Password changed"}

    # Profiles

    @app.get("/api/profiles", dependencies=authenticated)
    def list_profiles(active: bool = False) -> dict:
        profiles = service.profiles.list(active_only=active)
        return {"success": True, "profiles": [ProfileOut.from_profile(p) for p in profiles]}

    @app.get("/api/profiles/{profile_id}", dependencies=authenticated)
    def get_profile(profile_id: int) -> dict:
        profile = service.profiles.get(profile_id)
        if profile is None:
            raise NotFound(f"Profile {profile_id} not found")
        return {"success": True, "profile": ProfileOut.from_profile(profile)}

    @app.post("/api/profiles", dependencies=authenticated)
    def create_profile(payload: ProfileRequest) -> dict:
        profile_id = service.profiles.register(payload.name, payload.color)
        profile = service.profiles.get(profile_id)
        return {"success": True, "message": "Profile created", "profile": ProfileOut.from_profile(profile)}

    @app.put("/api/profiles/{profile_id}", dependencies=authenticated)
    def update_profile(profile_id: int, payload: ProfileRequest) -> dict:
        service.profiles.rename(profile_id, payload.name, payload.color)
        profile = service.profiles.get(profile_id)
        return {"success": True, "message": "Profile updated", "profile": ProfileOut.from_profile(profile)}

    @app.delete("/api/profiles/{profile_id}", dependencies=authenticated)
    def delete_profile(profile_id: int) -> dict:
        service.profiles.deactivate(profile_id)
        return {"success": True, "message": "Profile deactivated"}

    # Sales

    @app.get("/api/sales", dependencies=authenticated)
    def list_sales(
        start_date: str = Query(alias="startDate"),
        end_date: str = Query(alias="endDate"),
        profile_id: Optional[int] = Query(default=None, alias="profileId"),
    ) -> dict:
        entries = service.sales_in_range(start_date, end_date, profile_id)
        return {"success": True, "sales": [SaleOut.from_entry(entry) for entry in entries]}

    @app.get("/api/sales/date/{entry_date}", dependencies=authenticated)
    def sales_for_date(entry_date: str) -> dict:
        entries = service.sales_for_date(entry_date)
        return {"success": True, "sales": [SaleOut.from_entry(entry) for entry in entries]}

    @app.post("/api/sales", dependencies=authenticated)
    def save_sales(payload: SaveSalesRequest) -> dict:
        entry_ids = service.save_day(
            payload.date,
            [{"profile_id": item.profile_id, "amount": item.amount} for item in payload.sales],
            payload.notes,
        )
        return {"success": True, "message": "Sales saved", "ids": entry_ids}

    @app.delete("/api/sales/{entry_id}", dependencies=authenticated)
    def delete_sale(entry_id: int) -> dict:
        service.delete_sale(entry_id)
        return {"success": True, "message": "Sale deleted"}

    # Stats & settings

    @app.get("/api/stats/dashboard", dependencies=authenticated)
    def dashboard_stats(
        start_date: Optional[str] = Query(default=None, alias="startDate"),
        end_date: Optional[str] = Query(default=None, alias="endDate"),
    ) -> dict:
        snapshot = service.dashboard(start_date, end_date)
        return {"success": True, "stats": DashboardStats.from_snapshot(snapshot).model_dump(by_alias=True)}

    @app.get("/api/settings/target", dependencies=authenticated)
    def get_target() -> dict:
        return {"success": True, "target": money(service.monthly_target())}

    @app.post("/api/settings/target", dependencies=authenticated)
    def set_target(payload: TargetRequest) -> dict:
        target = service.set_monthly_target(payload.target)
        return {"success": True, "message": "Target updated", "target": money(target)}

    # Export & backup

    @app.get("/api/export/csv", dependencies=authenticated)
    def export_csv(
        start_date: str = Query(alias="startDate"),
        end_date: str = Query(alias="endDate"),
        profile_id: Optional[int] = Query(default=None, alias="profileId"),
    ) -> Response:
        content = service.export_csv(start_date, end_date, profile_id)
        return Response(
            content=content.encode("utf-8"),
            media_type="text/csv; charset=utf-8",
            headers={
                "Content-Disposition": f"attachment; filename={export_filename(start_date, end_date)}",
            },
        )

    @app.post("/api/backup", dependencies=authenticated)
    def create_backup() -> dict:
        path = backups.create_backup()
        return {"success": True, "message": "Backup created", "file": path.name}

    return app


def run() -> None:
    import uvicorn

    configure_logging()
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "3000"))
    logger.info("api.start host=%s port=%s", host, port)
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    run()
