"""FastAPI application main module."""

import logging
from contextlib import asynccontextmanager

from fastapi import (
    BackgroundTasks,
    Depends,
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.dependencies import get_orchestrator, get_settings, reset_orchestrator
from app.schemas import (
    GenerateResponse,
    HealthResponse,
    JobListResponse,
    StatusResponse,
    VideoResponse,
)
from app.security import setup_rate_limiter, verify_api_key
from config.settings import Settings
from core.models import JobStatus
from core.orchestrator import VideoAssemblyOrchestrator
from core.selection import ImageSelection
from core.services.image_codec import encode_upload

API_VERSION = "0.1.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    settings = get_settings()
    logger.info("Starting marketing video API")
    logger.info("Execution Profile: %s", settings.execution_profile.value)
    logger.info("Veo Model: %s", settings.veo_model)
    logger.info("Target Duration: %.0fs", settings.target_duration_seconds)
    logger.info("API Key Auth: %s", "enabled" if settings.api_key_enabled else "disabled")

    _ = get_orchestrator()
    logger.info("Orchestrator initialized")

    yield

    logger.info("Shutting down marketing video API")
    reset_orchestrator()


app = FastAPI(
    title="App Marketing Video Generator",
    description="Turn app screenshots and a prompt into a one-minute marketing video",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

_settings = get_settings()
limiter = setup_rate_limiter(app, _settings)

if _settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS enabled for origins: %s", _settings.cors_origins)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint pointing to the docs."""
    return {"message": "App Marketing Video Generator API", "docs": "/docs"}


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Check API health status."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        profile=settings.execution_profile.value,
    )


@app.post("/generate", response_model=GenerateResponse, tags=["Video Generation"])
@limiter.limit(f"{_settings.rate_limit_per_minute}/minute")
async def generate_video(
    request: Request,
    background_tasks: BackgroundTasks,
    prompt: str = Form(..., description="Directions for the marketing video"),
    images: list[UploadFile] = File(..., description="App screenshots"),
    settings: Settings = Depends(get_settings),
    orchestrator: VideoAssemblyOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(verify_api_key),
) -> GenerateResponse:
    """Start a new marketing video job.

    Screenshots beyond the configured maximum are dropped in upload order.
    Returns immediately with a job ID that can be used to track progress.

    Raises:
        HTTPException: 422 for invalid input, 409 if a run is in progress.
    """
    if not prompt.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Please provide a video prompt.",
        )
    if len(prompt) > settings.max_prompt_length:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Prompt exceeds {settings.max_prompt_length} characters.",
        )

    for upload in images:
        if not (upload.content_type or "").startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"File {upload.filename!r} is not an image.",
            )

    # The lease is taken when the background run starts, not here. A request
    # racing past this check gets a job that execute() marks failed.
    if orchestrator.is_running:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A video is already being generated. Try again when it finishes.",
        )

    selection = ImageSelection(max_images=settings.max_uploaded_images)
    for upload in images[: settings.max_uploaded_images]:
        encoded = await encode_upload(upload)
        if encoded.is_available:
            selection.add([encoded])
        else:
            logger.warning("Skipping unreadable image %s", upload.filename)

    if not len(selection):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Please upload at least one readable image.",
        )

    job = orchestrator.create_job(selection.images, prompt)
    background_tasks.add_task(_run_job, orchestrator, job.job_id)

    return GenerateResponse(
        job_id=job.job_id,
        status=job.status,
        message="Video generation started. Use /status/{job_id} to track progress.",
        image_count=job.image_count,
    )


async def _run_job(orchestrator: VideoAssemblyOrchestrator, job_id: str) -> None:
    """Run a job in the background.

    Args:
        orchestrator: The orchestrator instance.
        job_id: The job to execute.
    """
    try:
        await orchestrator.execute(job_id)
    except Exception as e:
        logger.exception("Background generation failed for job %s: %s", job_id, e)


@app.get("/status/{job_id}", response_model=StatusResponse, tags=["Video Generation"])
async def get_job_status(
    job_id: str,
    orchestrator: VideoAssemblyOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(verify_api_key),
) -> StatusResponse:
    """Get the status and latest progress of a job.

    Raises:
        HTTPException: If job is not found.
    """
    job = orchestrator.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail=f"Job not found: {job_id}")
    return StatusResponse.from_job(job)


@app.get("/jobs", response_model=JobListResponse, tags=["Video Generation"])
async def list_jobs(
    orchestrator: VideoAssemblyOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(verify_api_key),
) -> JobListResponse:
    """List all video generation jobs."""
    jobs = orchestrator.list_jobs()
    return JobListResponse(
        jobs=[StatusResponse.from_job(job) for job in jobs],
        total=len(jobs),
    )


@app.get("/video/{job_id}", response_model=VideoResponse, tags=["Video Generation"])
async def get_video(
    job_id: str,
    orchestrator: VideoAssemblyOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(verify_api_key),
) -> VideoResponse:
    """Return the playable URL of a completed job.

    Raises:
        HTTPException: If job is not found or not completed.
    """
    job = orchestrator.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail=f"Job not found: {job_id}")

    if job.status != JobStatus.COMPLETED or not job.video_url:
        raise HTTPException(
            status_code=400,
            detail=f"Job is not completed. Current status: {job.status.value}",
        )

    return VideoResponse(job_id=job.job_id, video_url=job.video_url)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred", "error": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
