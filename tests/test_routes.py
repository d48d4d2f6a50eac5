import json
from io import BytesIO

from docx import Document
from fastapi.testclient import TestClient

from conftest import StubClient
from resume_api.errors import UpstreamFailure
from resume_api.services.docx_builder import DOCX_MEDIA_TYPE

JANE = "Jane Doe, B.Sc. Computer Science, internship at Acme Corp"


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_index_page_is_served(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_generate_end_to_end(client: TestClient, stub: StubClient, resume_json: str) -> None:
    stub.reply = resume_json
    response = client.post("/api/generate", json={"studentData": JANE})

    assert response.status_code == 200
    data = response.json()
    assert data["resumeData"]["name"] == "Jane Doe"
    assert "ABOUT ME" in data["resumeText"]
    assert data["atsScore"] == "91%"
    assert data["suggestions"] == "Add metrics.\nMention leadership."
    assert data["resumeData"]["sections"][-1]["kind"] == "skills"

    prompt, expect_json = stub.calls[0]
    assert expect_json is True
    assert JANE in prompt
    assert "None provided. Generate a strong, general-purpose resume." in prompt


def test_generate_accepts_fenced_model_output(client: TestClient, stub: StubClient, resume_json: str) -> None:
    stub.reply = f"```json\n{resume_json}\n```"
    response = client.post("/api/generate", json={"studentData": JANE, "jobDescription": "Backend role"})
    assert response.status_code == 200
    assert "Backend role" in stub.calls[0][0]


def test_generate_without_student_data_never_calls_model(client: TestClient, stub: StubClient) -> None:
    for body in ({}, {"studentData": ""}, {"studentData": "   "}, {"jobDescription": "x"}):
        response = client.post("/api/generate", json=body)
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"
        assert "studentData" in response.json()["error"]
    assert stub.calls == []


def test_generate_with_non_json_output_is_500(client: TestClient, stub: StubClient) -> None:
    stub.reply = "I'm sorry, here is your resume: Jane Doe, engineer."
    response = client.post("/api/generate", json={"studentData": JANE})

    assert response.status_code == 500
    data = response.json()
    assert data["error"]
    assert data["kind"] == "malformed_schema"
    assert "resumeData" not in data


def test_upstream_failure_is_5xx(client: TestClient, stub: StubClient) -> None:
    stub.reply = UpstreamFailure("Failed to get a response from the AI model.")
    response = client.post("/api/generate-interview-prep", json={"studentData": JANE})
    assert response.status_code == 502
    assert response.json() == {"error": "Failed to get a response from the AI model.", "kind": "upstream_failure"}


def test_blank_model_reply_is_empty_response(client: TestClient, stub: StubClient) -> None:
    stub.reply = "   "
    response = client.post("/api/improve", json={"text": "did things"})
    assert response.status_code == 502
    assert response.json()["kind"] == "empty_response"


def test_improve(client: TestClient, stub: StubClient) -> None:
    stub.reply = "  Led the migration of three services.  "
    response = client.post("/api/improve", json={"text": "moved some services"})
    assert response.status_code == 200
    assert response.json() == {"improvedText": "Led the migration of three services."}
    assert '"moved some services"' in stub.calls[0][0]
    assert stub.calls[0][1] is False


def test_improve_requires_text(client: TestClient, stub: StubClient) -> None:
    assert client.post("/api/improve", json={}).status_code == 400
    assert stub.calls == []


def test_cover_letter(client: TestClient, stub: StubClient, resume_dict: dict) -> None:
    stub.reply = "Dear Hiring Manager,\nI am excited."
    response = client.post(
        "/api/generate-cover-letter",
        json={"studentData": JANE, "jobDescription": "Data analyst", "resumeData": resume_dict},
    )
    assert response.status_code == 200
    assert response.json() == {"coverLetterText": "Dear Hiring Manager,\nI am excited."}
    assert "JANE DOE" in stub.calls[0][0]


def test_cover_letter_requires_all_fields(client: TestClient, stub: StubClient, resume_dict: dict) -> None:
    bodies = [
        {"jobDescription": "x", "resumeData": resume_dict},
        {"studentData": JANE, "resumeData": resume_dict},
        {"studentData": JANE, "jobDescription": "x"},
    ]
    for body in bodies:
        assert client.post("/api/generate-cover-letter", json=body).status_code == 400
    assert stub.calls == []


def test_interview_prep_uses_fallback_role(client: TestClient, stub: StubClient) -> None:
    stub.reply = "Q1: Tell me about a time..."
    response = client.post("/api/generate-interview-prep", json={"studentData": JANE})
    assert response.status_code == 200
    assert response.json() == {"interviewPrepText": "Q1: Tell me about a time..."}
    assert "General role in their field." in stub.calls[0][0]


def test_portfolio(client: TestClient, stub: StubClient, resume_dict: dict) -> None:
    response = client.post("/api/generate-portfolio", json={"resumeData": resume_dict})
    assert response.status_code == 200
    html = response.json()["portfolioHtml"]
    assert html.lstrip().startswith("<!DOCTYPE html>")
    assert "Course Planner" in html
    assert stub.calls == []


def test_portfolio_requires_resume_data(client: TestClient) -> None:
    response = client.post("/api/generate-portfolio", json={})
    assert response.status_code == 400
    assert "resumeData" in response.json()["error"]


def test_download_docx(client: TestClient, resume_dict: dict) -> None:
    response = client.post("/api/download-docx", json={"resumeData": resume_dict})
    assert response.status_code == 200
    assert response.headers["content-type"] == DOCX_MEDIA_TYPE
    assert 'filename="resume.docx"' in response.headers["content-disposition"]
    texts = [p.text for p in Document(BytesIO(response.content)).paragraphs]
    assert texts[0] == "Jane Doe"


def test_download_docx_with_no_sections(client: TestClient, resume_dict: dict) -> None:
    resume_dict["sections"] = []
    response = client.post("/api/download-docx", json={"resumeData": resume_dict})
    assert response.status_code == 200
    texts = [p.text for p in Document(BytesIO(response.content)).paragraphs]
    assert texts == [
        "Jane Doe",
        "Software Engineer",
        "555-0100 | jane@example.com | Springfield, IL",
        "ABOUT ME",
        "Computer science graduate who enjoys building web services.",
    ]


def test_download_docx_accepts_echoed_resume_data(client: TestClient, stub: StubClient, resume_json: str) -> None:
    stub.reply = resume_json
    resume_data = client.post("/api/generate", json={"studentData": JANE}).json()["resumeData"]
    response = client.post("/api/download-docx", json={"resumeData": resume_data})
    assert response.status_code == 200


def test_download_docx_requires_resume_data(client: TestClient) -> None:
    response = client.post("/api/download-docx", json={"resumeData": {"title": "no name"}})
    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"


def test_download_cover_letter_docx(client: TestClient) -> None:
    response = client.post("/api/download-cover-letter-docx", json={"coverLetterText": "Dear team,\n\nHello."})
    assert response.status_code == 200
    assert 'filename="cover-letter.docx"' in response.headers["content-disposition"]
    texts = [p.text for p in Document(BytesIO(response.content)).paragraphs]
    assert texts == ["Dear team,", "Hello."]


def test_download_cover_letter_docx_requires_text(client: TestClient) -> None:
    assert client.post("/api/download-cover-letter-docx", json={"coverLetterText": ""}).status_code == 400


def test_download_pdf(client: TestClient, resume_dict: dict) -> None:
    response = client.post("/api/download-pdf", json={"resumeData": resume_dict})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_render_failure_is_reported(client: TestClient, resume_dict: dict, monkeypatch) -> None:
    from resume_api import routes

    def _explode(doc):
        raise RuntimeError("disk full")

    monkeypatch.setattr(routes, "build_resume_docx", _explode)
    response = client.post("/api/download-docx", json={"resumeData": resume_dict})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create DOCX file.", "kind": "render_failure"}


def test_no_server_side_url_fetch_route(client: TestClient, monkeypatch) -> None:
    import requests

    fetched = []
    monkeypatch.setattr(requests, "get", lambda url, *a, **kw: fetched.append(url))
    response = client.post(
        "/api/extract-job-description", json={"url": "http://169.254.169.254/latest/meta-data/"}
    )
    assert response.status_code == 404
    assert fetched == []


def test_unknown_route_uses_error_body(client: TestClient) -> None:
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert "error" in response.json()


def test_json_body_round_trip_keeps_aliases(client: TestClient, stub: StubClient, resume_json: str) -> None:
    stub.reply = resume_json
    data = client.post("/api/generate", json={"studentData": JANE}).json()
    assert "atsScore" in data["resumeData"]
    assert json.loads(resume_json)["contact"] == data["resumeData"]["contact"]
