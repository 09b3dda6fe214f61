"""FastAPI web server for the xlist directory."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from xlist import Directory, DirectoryConfig, __version__
from xlist.core.exporter import to_dict
from xlist.exceptions import DuplicateProfileError, NotFoundError, ReadError, WriteError
from xlist.logging import log_context
from xlist.models.category import ALL_CATEGORIES, CATEGORIES, is_valid_category
from xlist.models.profile import ProfileDraft, ProfileUpdate


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    store: str
    timestamp: str


class CreatedResponse(BaseModel):
    """Identifier of a created or changed record."""

    id: str


class ConfigResponse(BaseModel):
    """Current directory configuration with descriptions."""

    store_backend: str = Field(
        ...,
        description="Document store holding profiles and click events. "
        "Options: 'sqlite' (local file), 'redis' (remote server), 'memory' (ephemeral).",
        json_schema_extra={"example": "sqlite", "enum": ["sqlite", "redis", "memory"]},
    )
    store_timeout_seconds: float = Field(
        ...,
        description="Deadline for each store call. A call that exceeds it fails "
        "with a read or write error instead of hanging. 0 disables the deadline.",
        json_schema_extra={"example": 10.0},
    )
    analytics_timezone: str = Field(
        ...,
        description="Timezone used for 'today', 'this month' and the daily histogram.",
        json_schema_extra={"example": "UTC"},
    )
    single_profile_per_owner: bool = Field(
        ...,
        description="Reject a second profile for an account that already has one.",
        json_schema_extra={"example": True},
    )
    log_level: str = Field(
        ...,
        description="Logging verbosity level. Options: 'DEBUG', 'INFO', 'WARNING', 'ERROR'.",
        json_schema_extra={"example": "INFO", "enum": ["DEBUG", "INFO", "WARNING", "ERROR"]},
    )


class ProfileCreateRequest(ProfileDraft):
    """Request body for profile creation."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "xHandle": "@janedoe",
                "username": "Jane Doe",
                "category": "Design",
                "bio": "Type and layout",
                "followersCount": 1200,
                "userId": "user-123",
            }
        }
    )


# Global directory instance
_directory: Optional[Directory] = None


def _get_directory() -> Directory:
    if _directory is None:
        raise HTTPException(status_code=503, detail="Directory is not running")
    return _directory


def _check_category(category: str | None) -> None:
    if category is not None and not is_valid_category(category):
        raise HTTPException(status_code=422, detail=f"Unknown category: {category}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage directory lifecycle."""
    global _directory
    _directory = Directory(DirectoryConfig())
    await _directory.__aenter__()
    yield
    await _directory.__aexit__(None, None, None)
    _directory = None


app = FastAPI(
    title="xlist API",
    description="Directory of X profiles with click analytics",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def _bind_request(request: Request, call_next):
    # Every log line of the request carries method and path
    with log_context(method=request.method, path=request.url.path):
        return await call_next(request)


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(DuplicateProfileError)
async def _duplicate(request: Request, exc: DuplicateProfileError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(WriteError)
async def _write_failed(request: Request, exc: WriteError):
    return JSONResponse(
        status_code=503,
        content={"detail": f"Could not save changes, please try again. {exc}"},
    )


@app.exception_handler(ReadError)
async def _read_failed(request: Request, exc: ReadError):
    return JSONResponse(status_code=503, content={"detail": f"Could not load data. {exc}"})


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health status."""
    directory = _get_directory()
    reachable = await directory.store.ping()
    return HealthResponse(
        status="healthy" if reachable else "degraded",
        version=__version__,
        store=directory.config.store_backend.value,
        timestamp=datetime.now().isoformat(),
    )


@app.get("/api/config", response_model=ConfigResponse, tags=["System"])
async def get_config():
    """
    Get the running configuration.

    **Configuration is set via environment variables** with the `XLIST_` prefix:
    - `XLIST_STORE_BACKEND=redis`
    - `XLIST_STORE_TIMEOUT_SECONDS=5`
    - `XLIST_ANALYTICS_TIMEZONE=Europe/Berlin`
    """
    config = _get_directory().config
    return ConfigResponse(
        store_backend=config.store_backend.value,
        store_timeout_seconds=config.store_timeout_seconds,
        analytics_timezone=config.analytics_timezone,
        single_profile_per_owner=config.single_profile_per_owner,
        log_level=config.log_level,
    )


@app.get("/api/categories", tags=["Directory"])
async def list_categories():
    """Category filter values, "All" first."""
    return {"categories": [ALL_CATEGORIES, *CATEGORIES]}


@app.get("/api/profiles", tags=["Directory"])
async def browse_profiles(
    category: str = Query(ALL_CATEGORIES, description="Category filter, 'All' for every profile"),
    q: str = Query("", description="Free-text search"),
):
    """
    Browse the directory.

    Profiles are ordered by followers (high to low), then newest first.
    Search keeps that order.
    """
    if category != ALL_CATEGORIES:
        _check_category(category)

    profiles = await _get_directory().browse(category, q)
    return {
        "total": len(profiles),
        "profiles": [to_dict(p) for p in profiles],
    }


@app.post("/api/profiles", response_model=CreatedResponse, status_code=201, tags=["Profiles"])
async def create_profile(request: ProfileCreateRequest):
    """Publish a profile. Each account can publish one."""
    _check_category(request.category)
    profile_id = await _get_directory().profiles.create(request)
    return CreatedResponse(id=profile_id)


@app.get("/api/profiles/{profile_id}", tags=["Profiles"])
async def get_profile(profile_id: str):
    """Fetch one profile."""
    profile = await _get_directory().profiles.get(profile_id)
    return to_dict(profile)


@app.patch("/api/profiles/{profile_id}", response_model=CreatedResponse, tags=["Profiles"])
async def update_profile(profile_id: str, request: ProfileUpdate):
    """Change supplied fields; blank optional fields are cleared."""
    _check_category(request.category)
    await _get_directory().profiles.update(profile_id, request)
    return CreatedResponse(id=profile_id)


@app.delete("/api/profiles/{profile_id}", response_model=CreatedResponse, tags=["Profiles"])
async def delete_profile(profile_id: str):
    """Remove a profile. Its click history is kept."""
    await _get_directory().profiles.delete(profile_id)
    return CreatedResponse(id=profile_id)


@app.get("/api/users/{user_id}/profile", tags=["Profiles"])
async def get_own_profile(user_id: str):
    """The account's own profile."""
    profile = await _get_directory().profiles.get_by_owner(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} has no profile")
    return to_dict(profile)


@app.get("/api/profiles/{profile_id}/open", tags=["Directory"])
async def open_profile(profile_id: str, request: Request):
    """
    Follow a directory card to the X profile.

    The click is recorded in the background; the redirect never waits for it.
    """
    directory = _get_directory()
    profile = await directory.profiles.get(profile_id)
    url = directory.open_profile(
        profile,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )
    return RedirectResponse(url, status_code=307)


@app.get("/api/profiles/{profile_id}/analytics", tags=["Analytics"])
async def profile_analytics(profile_id: str):
    """Click totals and the 30-day daily histogram."""
    analytics = await _get_directory().get_analytics(profile_id)
    return to_dict(analytics)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
