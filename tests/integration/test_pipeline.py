"""Integration tests for the HTTP API and the assembly loop."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.dependencies import create_orchestrator, get_orchestrator, get_settings
from app.main import app, limiter
from config.settings import ExecutionProfile, Settings
from core.models import GenerationStatus, JobStatus
from core.orchestrator import VideoAssemblyOrchestrator

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def integration_settings() -> Settings:
    """Provide settings for integration testing."""
    return Settings(
        execution_profile=ExecutionProfile.DEBUG,
        gemini_api_key="test_key",
        poll_interval_seconds=0.0,
        mock_polls_until_done=2,
        mock_segment_seconds=8.0,
        max_uploaded_images=10,
        max_prompt_length=50,
    )


@pytest.fixture
def orchestrator(integration_settings: Settings) -> VideoAssemblyOrchestrator:
    """Create an orchestrator wired with the mock client."""
    return create_orchestrator(integration_settings)


@pytest.fixture
def client(integration_settings: Settings, orchestrator: VideoAssemblyOrchestrator):
    """Provide a test client with overridden dependencies."""
    app.dependency_overrides[get_settings] = lambda: integration_settings
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


def _files(count: int, content_type: str = "image/png") -> list[tuple]:
    return [
        ("images", (f"screen_{i}.png", PNG_BYTES + bytes([i]), content_type))
        for i in range(count)
    ]


class TestGenerateEndpoint:
    """Tests for job submission and tracking."""

    def test_generate_runs_to_completion(self, client: TestClient) -> None:
        """Test a submitted job completes with a playable URL."""
        response = client.post(
            "/generate",
            data={"prompt": "Show off the habit tracker"},
            files=_files(4),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == JobStatus.PENDING.value
        assert body["image_count"] == 4

        status = client.get(f"/status/{body['job_id']}").json()
        assert status["status"] == JobStatus.COMPLETED.value
        assert status["progress"]["status"] == GenerationStatus.COMPLETE.value
        assert status["progress"]["current_segment"] == 8
        assert status["progress"]["total_segments"] == 9

        video = client.get(f"/video/{body['job_id']}").json()
        assert video["video_url"].startswith("mock://veo/")
        assert video["video_url"].endswith("?key=test_key")

    def test_extra_images_are_dropped(
        self, client: TestClient, orchestrator: VideoAssemblyOrchestrator
    ) -> None:
        """Test uploads beyond the maximum are ignored in order."""
        response = client.post("/generate", data={"prompt": "Promo"}, files=_files(12))

        assert response.status_code == 200
        assert response.json()["image_count"] == 10

        first_call = orchestrator._client.calls[0]
        assert len(first_call.reference_images) == 3
        assert [img.filename for img in first_call.reference_images] == [
            "screen_0.png",
            "screen_1.png",
            "screen_2.png",
        ]
        assert "10 app screenshots" in first_call.prompt

    def test_unreadable_images_are_skipped(self, client: TestClient) -> None:
        """Test empty files do not count towards the selection."""
        files = _files(2) + [("images", ("empty.png", b"", "image/png"))]

        response = client.post("/generate", data={"prompt": "Promo"}, files=files)

        assert response.status_code == 200
        assert response.json()["image_count"] == 2

    def test_no_readable_images(self, client: TestClient) -> None:
        """Test a request whose images are all unreadable is rejected."""
        response = client.post(
            "/generate",
            data={"prompt": "Promo"},
            files=[("images", ("empty.png", b"", "image/png"))],
        )
        assert response.status_code == 422

    def test_blank_prompt(self, client: TestClient) -> None:
        """Test a whitespace prompt is rejected."""
        response = client.post("/generate", data={"prompt": "   "}, files=_files(1))
        assert response.status_code == 422

    def test_prompt_too_long(self, client: TestClient) -> None:
        """Test prompts over the configured length are rejected."""
        response = client.post("/generate", data={"prompt": "x" * 51}, files=_files(1))
        assert response.status_code == 422

    def test_non_image_upload(self, client: TestClient) -> None:
        """Test non-image files are rejected."""
        response = client.post(
            "/generate",
            data={"prompt": "Promo"},
            files=[("images", ("notes.txt", b"hello", "text/plain"))],
        )
        assert response.status_code == 422

    def test_conflict_while_running(self, integration_settings: Settings) -> None:
        """Test a second submission is refused while a run holds the lease."""
        busy = MagicMock(spec=VideoAssemblyOrchestrator)
        busy.is_running = True
        app.dependency_overrides[get_settings] = lambda: integration_settings
        app.dependency_overrides[get_orchestrator] = lambda: busy
        limiter.reset()
        try:
            response = TestClient(app).post(
                "/generate", data={"prompt": "Promo"}, files=_files(1)
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 409
        busy.create_job.assert_not_called()

    def test_failed_job(
        self, integration_settings: Settings, scripted_client_factory
    ) -> None:
        """Test a failed run is visible on status and blocks the video endpoint."""
        failing = VideoAssemblyOrchestrator(
            settings=integration_settings,
            client=scripted_client_factory([[]]),
        )
        app.dependency_overrides[get_settings] = lambda: integration_settings
        app.dependency_overrides[get_orchestrator] = lambda: failing
        limiter.reset()
        try:
            client = TestClient(app)
            job_id = client.post(
                "/generate", data={"prompt": "Promo"}, files=_files(2)
            ).json()["job_id"]
            status = client.get(f"/status/{job_id}").json()
            video = client.get(f"/video/{job_id}")
        finally:
            app.dependency_overrides.clear()

        assert status["status"] == JobStatus.FAILED.value
        assert status["progress"]["status"] == GenerationStatus.ERROR.value
        assert "Initial video generation failed" in status["error_message"]
        assert video.status_code == 400


class TestQueryEndpoints:
    """Tests for read-only endpoints."""

    def test_health(self, client: TestClient) -> None:
        """Test the health endpoint."""
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["profile"] == "debug"

    def test_unknown_job(self, client: TestClient) -> None:
        """Test unknown job IDs return 404."""
        assert client.get("/status/nonexistent").status_code == 404
        assert client.get("/video/nonexistent").status_code == 404

    def test_list_jobs(self, client: TestClient) -> None:
        """Test jobs are listed after submission."""
        client.post("/generate", data={"prompt": "One"}, files=_files(1))
        client.post("/generate", data={"prompt": "Two"}, files=_files(1))

        body = client.get("/jobs").json()

        assert body["total"] == 2
        assert {job["status"] for job in body["jobs"]} == {JobStatus.COMPLETED.value}


class TestApiKey:
    """Tests for API key enforcement."""

    @pytest.fixture
    def secured_client(self, integration_settings: Settings, orchestrator):
        settings = integration_settings.model_copy(
            update={"api_key_enabled": True, "api_key": "s3cret"}
        )
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        limiter.reset()
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_missing_key(self, secured_client: TestClient) -> None:
        """Test requests without a key are unauthorized."""
        response = secured_client.post("/generate", data={"prompt": "Promo"}, files=_files(1))
        assert response.status_code == 401

    def test_wrong_key(self, secured_client: TestClient) -> None:
        """Test requests with a bad key are forbidden."""
        response = secured_client.post(
            "/generate",
            data={"prompt": "Promo"},
            files=_files(1),
            headers={"X-API-Key": "wrong"},
        )
        assert response.status_code == 403

    def test_read_endpoints_require_key(self, secured_client: TestClient) -> None:
        """Test job details, which carry the playback credential, need a key."""
        job_id = secured_client.post(
            "/generate",
            data={"prompt": "Promo"},
            files=_files(1),
            headers={"X-API-Key": "s3cret"},
        ).json()["job_id"]

        assert secured_client.get("/jobs").status_code == 401
        assert secured_client.get(f"/status/{job_id}").status_code == 401
        assert secured_client.get(f"/video/{job_id}").status_code == 401

        listed = secured_client.get("/jobs", headers={"X-API-Key": "s3cret"})
        assert listed.status_code == 200
        assert listed.json()["total"] == 1
        video = secured_client.get(f"/video/{job_id}", headers={"X-API-Key": "s3cret"})
        assert video.status_code == 200

    def test_valid_key(self, secured_client: TestClient) -> None:
        """Test requests with the configured key are accepted."""
        response = secured_client.post(
            "/generate",
            data={"prompt": "Promo"},
            files=_files(1),
            headers={"X-API-Key": "s3cret"},
        )
        assert response.status_code == 200
