"""Public configuration endpoint."""
from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings
from schemas.settings import AppDefaults, ConfigResponse
from services import settings_service

router = APIRouter(tags=["config"])


def get_app_version() -> str:
    """Installed package version, or 'unknown' when running from a source checkout."""
    try:
        return version("promptvault")
    except PackageNotFoundError:
        return "unknown"


@router.get("/config", response_model=ConfigResponse)
async def get_config(
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> ConfigResponse:
    """Report version, environment, database backend and entry defaults."""
    app_settings = await settings_service.get_app_settings(db)
    defaults = AppDefaults.model_validate(app_settings) if app_settings else AppDefaults()
    return ConfigResponse(
        app_version=get_app_version(),
        environment=settings.app_env,
        db_type=settings.db_type,
        db_path=settings.db_path,
        defaults=defaults,
    )
