"""HTTP surface: routes, error mapping, upload cleanup and origin policy."""

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from bill_reader.analysis.model_client import get_text_generator
from bill_reader.api.routes import get_text_extractor
from bill_reader.core.config import get_settings
from bill_reader.core.errors import ExtractionFailed
from bill_reader import main
from bill_reader.main import app, origin_allowed

PDF = ("bill.pdf", b"%PDF-1.4 fake", "application/pdf")


@pytest.fixture
def wire(test_settings, bill_text):
    """Install dependency overrides; returns a setter for the scripted generator."""
    seen_paths = []

    def extractor(path):
        seen_paths.append(path)
        assert path.exists()
        return bill_text

    state = {}
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_text_extractor] = lambda: extractor
    app.dependency_overrides[get_text_generator] = lambda: state["generator"]

    def use(generator):
        state["generator"] = generator
        return generator

    use.seen_paths = seen_paths
    yield use
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def _uploads_left(settings):
    return list(settings.UPLOAD_DIR.glob("*")) if settings.UPLOAD_DIR.exists() else []


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "message": "Server is running"}


class TestSummarize:
    def test_success_returns_camel_case_record(
        self, client, wire, scripted_generator, extraction_payload, research_payload, test_settings
    ):
        wire(scripted_generator("Yes", extraction_payload, research_payload))
        resp = client.post("/api/summarize", files={"file": PDF})
        assert resp.status_code == 200
        body = resp.json()
        assert body["billNumber"] == "HB 1234"
        assert body["financialImplications"] == research_payload["financialImplications"]
        assert body["sections"][0] == {"title": "1", "description": "Program administration."}
        assert len(wire.seen_paths) == 1
        assert _uploads_left(test_settings) == []

    def test_not_legislation_is_400_and_cleans_up(
        self, client, wire, scripted_generator, test_settings
    ):
        gen = wire(scripted_generator("No, this is a memo"))
        resp = client.post("/api/summarize", files={"file": PDF})
        assert resp.status_code == 400
        assert "does not appear to be a legislative bill" in resp.json()["error"]
        assert gen.generate.await_count == 1
        assert _uploads_left(test_settings) == []

    def test_missing_file(self, client, wire, scripted_generator):
        wire(scripted_generator())
        resp = client.post("/api/summarize", files={"other": ("a.txt", b"x", "text/plain")})
        assert resp.status_code == 400
        assert resp.json() == {"error": "No file uploaded"}

    def test_non_pdf_rejected(self, client, wire, scripted_generator):
        wire(scripted_generator())
        resp = client.post("/api/summarize", files={"file": ("memo.txt", b"hello", "text/plain")})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Only PDF files are allowed"}

    def test_oversize_rejected(self, client, wire, scripted_generator, test_settings):
        wire(scripted_generator())
        test_settings.MAX_FILE_MB = 0
        resp = client.post("/api/summarize", files={"file": PDF})
        assert resp.status_code == 400
        assert "too large" in resp.json()["error"]

    def test_upload_read_stops_past_the_cap(
        self, client, wire, scripted_generator, test_settings, monkeypatch
    ):
        wire(scripted_generator())
        test_settings.MAX_FILE_MB = 0.00001
        sizes = []
        read = UploadFile.read

        async def bounded_read(self, size=-1):
            sizes.append(size)
            return await read(self, size)

        monkeypatch.setattr(UploadFile, "read", bounded_read)
        resp = client.post("/api/summarize", files={"file": ("bill.pdf", b"x" * 4096, "application/pdf")})
        assert resp.status_code == 400
        assert "too large" in resp.json()["error"]
        assert sizes == [test_settings.max_upload_bytes + 1]
        assert _uploads_left(test_settings) == []

    def test_extraction_failure_is_500_and_cleans_up(
        self, client, wire, scripted_generator, test_settings
    ):
        wire(scripted_generator())

        def failing(path):
            raise ExtractionFailed("Error processing file: the PDF contains no readable text")

        app.dependency_overrides[get_text_extractor] = lambda: failing
        resp = client.post("/api/summarize", files={"file": PDF})
        assert resp.status_code == 500
        assert "no readable text" in resp.json()["error"]
        assert _uploads_left(test_settings) == []

    def test_unexpected_error_uses_generic_handler(self, wire, scripted_generator, test_settings):
        wire(scripted_generator())

        def exploding(path):
            raise RuntimeError("boom")

        app.dependency_overrides[get_text_extractor] = lambda: exploding
        client = TestClient(app, raise_server_exceptions=False)
        resp = client.post("/api/summarize", files={"file": PDF})
        assert resp.status_code == 500
        assert resp.json() == {
            "error": "An unexpected error occurred on the server",
            "message": "boom",
        }
        assert _uploads_left(test_settings) == []


class TestSearch:
    def test_success(self, client, wire, scripted_generator, search_payload):
        wire(scripted_generator(search_payload))
        resp = client.post("/api/search", json={"billNumber": "HB 1234", "billState": "Utah"})
        assert resp.status_code == 200
        assert resp.json()["billName"] == "Rural Broadband Expansion Act"

    @pytest.mark.parametrize("body,message", [
        ({"billName": "Broadband"}, "State or federal jurisdiction is required"),
        ({"billState": "Utah"}, "Please provide at least one piece of information about the bill"),
    ])
    def test_validation_errors(self, client, wire, scripted_generator, body, message):
        wire(scripted_generator())
        resp = client.post("/api/search", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": message}

    def test_year_mismatch_is_400(self, client, wire, scripted_generator, search_payload):
        search_payload["yearIntroduced"] = 2022
        wire(scripted_generator(search_payload))
        resp = client.post(
            "/api/search", json={"billName": "Broadband", "billState": "Utah", "billYear": "2023"}
        )
        assert resp.status_code == 400
        assert "found a bill from 2022" in resp.json()["error"]

    def test_unparseable_is_500(self, client, wire, scripted_generator):
        wire(scripted_generator("no idea"))
        resp = client.post("/api/search", json={"billName": "Broadband", "billState": "Utah"})
        assert resp.status_code == 500
        assert resp.json()["error"].startswith("Unable to find complete information")


class TestOriginPolicy:
    def test_no_origin_allowed(self, client):
        assert client.get("/api/health").status_code == 200

    def test_listed_and_hosted_origins_allowed(self, client):
        for origin in ("http://localhost:3000", "https://someone.github.io"):
            resp = client.get("/api/health", headers={"Origin": origin})
            assert resp.status_code == 200
            assert resp.headers["access-control-allow-origin"] == origin

    def test_foreign_origin_rejected(self, client):
        resp = client.get("/api/health", headers={"Origin": "https://evil.example.com"})
        assert resp.status_code == 403
        assert "CORS policy" in resp.json()["error"]

    def test_origin_allowed_rules(self, test_settings):
        test_settings.FRONTEND_URL = "https://bills.example.org/"
        assert origin_allowed(None, test_settings)
        assert origin_allowed("https://bills.example.org", test_settings)
        assert not origin_allowed("http://someone.github.io", test_settings)
        assert not origin_allowed("https://github.io.evil.com", test_settings)


def test_run_serves_the_app_on_configured_address(monkeypatch):
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    main.run()
    assert calls == [
        (("bill_reader.main:app",), {"host": main.settings.HOST, "port": main.settings.PORT})
    ]
