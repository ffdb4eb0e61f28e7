from io import BytesIO

import pandas as pd

from app.core.constants import EXPORT_COLUMNS
from conftest import auth, failing, marketing_kit

PAYLOAD = {
    "productName": "Thermos",
    "description": "Keeps drinks hot",
    "tone": "friendly",
    "language": "en",
    "contentType": "product_description",
}


def upload(api, content, filename="products.csv", token="fresh-token", tone="witty"):
    return api.post(
        "/api/v1/bulk/upload",
        headers=auth(token),
        files={"file": (filename, content)},
        data={"tone": tone},
    )


def test_root_reports_online(api):
    resp = api.get("/")

    assert resp.status_code == 200
    assert resp.json()["status"] == "online"
    assert "X-Request-ID" in resp.headers


def test_generate_returns_kit_and_counts_usage(api, session_store):
    resp = api.post("/api/v1/generate", json=PAYLOAD, headers=auth("fresh-token"))

    assert resp.status_code == 200
    assert resp.json()["descriptions"] == ["First copy", "Second copy"]
    assert "socialMediaPosts" not in resp.json()
    assert session_store.profiles["fresh-token"].usage_count == 1
    assert api.get("/api/v1/auth/me", headers=auth("fresh-token")).json()["usage_count"] == 1


def test_generate_requires_login(api, fake_client):
    resp = api.post("/api/v1/generate", json=PAYLOAD)

    assert resp.status_code == 401
    assert resp.json() == {"error": "Please log in to generate content."}
    assert fake_client.calls == []


def test_generate_at_limit_is_refused(api, fake_client, session_store):
    resp = api.post("/api/v1/generate", json=PAYLOAD, headers=auth("spent-token"))

    assert resp.status_code == 403
    assert "free usage limit" in resp.json()["error"]
    assert fake_client.calls == []
    assert session_store.profiles["spent-token"].usage_count == 3


def test_generate_missing_fields_is_a_validation_error(api, fake_client, session_store):
    resp = api.post("/api/v1/generate", json={**PAYLOAD, "description": ""}, headers=auth("fresh-token"))

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required product information."}
    assert fake_client.calls == []
    assert session_store.profiles["fresh-token"].usage_count == 0


def test_generate_remote_failure_does_not_count(api, fake_client, session_store):
    fake_client.responses["Thermos"] = failing("Model overloaded")

    resp = api.post("/api/v1/generate", json=PAYLOAD, headers=auth("fresh-token"))

    assert resp.status_code == 502
    assert resp.json() == {"error": "Model overloaded"}
    assert session_store.profiles["fresh-token"].usage_count == 0


def test_generate_with_uploaded_image(api, fake_client):
    from PIL import Image

    buffer = BytesIO()
    Image.new("RGB", (8, 8), "red").save(buffer, format="PNG")

    resp = api.post(
        "/api/v1/generate/upload",
        headers=auth("fresh-token"),
        data={k: v for k, v in PAYLOAD.items()},
        files={"image": ("thermos.png", buffer.getvalue(), "image/png")},
    )

    assert resp.status_code == 200
    sent = fake_client.calls[0]
    assert sent.imageMimeType == "image/png"
    assert sent.imageData


def test_generate_with_non_image_upload_is_rejected(api, fake_client):
    resp = api.post(
        "/api/v1/generate/upload",
        headers=auth("fresh-token"),
        data=PAYLOAD,
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )

    assert resp.status_code == 400
    assert fake_client.calls == []


def test_inline_image_with_bad_type_is_rejected(api, fake_client, session_store):
    body = {**PAYLOAD, "imageData": "aGVsbG8=", "imageMimeType": "text/plain"}

    resp = api.post("/api/v1/generate", json=body, headers=auth("fresh-token"))

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid image type: text/plain"}
    assert fake_client.calls == []
    assert session_store.profiles["fresh-token"].usage_count == 0


def test_inline_image_that_is_not_an_image_is_rejected(api, fake_client):
    body = {**PAYLOAD, "imageData": "aGVsbG8=", "imageMimeType": "image/png"}

    resp = api.post("/api/v1/generate", json=body, headers=auth("fresh-token"))

    assert resp.status_code == 400
    assert "not a readable image" in resp.json()["error"]
    assert fake_client.calls == []


def test_options_lists_tones_and_languages(api):
    data = api.get("/api/v1/generate/options").json()

    assert len(data["tones"]) == 10
    assert [l["value"] for l in data["languages"]] == ["en", "vi", "es", "jp", "de"]


def test_bulk_run_end_to_end(api, fake_client, session_store):
    fake_client.responses["A"] = marketing_kit(descriptions=["x", "y"])
    fake_client.responses["B"] = failing("timeout")

    resp = upload(api, b"product_name,description\nA,d1\nB,d2\n")
    assert resp.status_code == 200
    job_id = resp.json()["job_id"]
    assert resp.json()["items_count"] == 2

    status = api.get(f"/api/v1/bulk/status/{job_id}").json()
    assert status["status"] == "completed"
    assert status["progress"] == {"current": 2, "total": 2, "current_label": "B"}
    assert status["success_count"] == 1
    assert status["failure_count"] == 1
    assert status["failures"] == [{"product_name": "B", "error": "timeout"}]

    results = api.get(f"/api/v1/bulk/results/{job_id}").json()
    assert results[0]["generated_description_1"] == "x"
    assert results[0]["generated_description_3"] == ""
    assert results[1]["error"] == "timeout"

    assert {r.tone for r in fake_client.calls} == {"witty"}
    assert {r.language for r in fake_client.calls} == {"en"}
    # Flat-rate bulk runs do not consume quota
    assert session_store.profiles["fresh-token"].usage_count == 0


def test_bulk_downloads(api):
    job_id = upload(api, b"product_name,description\nA,d1\n").json()["job_id"]

    csv_resp = api.get(f"/api/v1/bulk/download/{job_id}", params={"format": "csv"})
    assert csv_resp.status_code == 200
    assert csv_resp.headers["content-type"].startswith("text/csv")
    assert pd.read_csv(BytesIO(csv_resp.content)).columns.tolist() == EXPORT_COLUMNS

    xlsx_resp = api.get(f"/api/v1/bulk/download/{job_id}", params={"format": "xlsx"})
    assert xlsx_resp.status_code == 200
    assert pd.read_excel(BytesIO(xlsx_resp.content)).columns.tolist() == EXPORT_COLUMNS

    assert api.get(f"/api/v1/bulk/download/{job_id}", params={"format": "pdf"}).status_code == 400


def test_bulk_rejects_exhausted_quota(api, fake_client):
    resp = upload(api, b"product_name,description\nA,d1\n", token="spent-token")

    assert resp.status_code == 403
    assert fake_client.calls == []


def test_bulk_rejects_missing_file(api):
    resp = api.post("/api/v1/bulk/upload", headers=auth("fresh-token"), data={"tone": "witty"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Please select a file to process."}


def test_bulk_rejects_empty_file(api, fake_client):
    resp = upload(api, b"product_name,description\n ,orphan\n")

    assert resp.status_code == 400
    assert "empty or invalid" in resp.json()["error"]
    assert fake_client.calls == []


def test_bulk_rejects_wrong_columns(api, fake_client):
    resp = upload(api, b"name,desc\nA,d1\n")

    assert resp.status_code == 400
    assert "product_name" in resp.json()["error"]
    assert fake_client.calls == []


def test_bulk_rejects_unsupported_file_type(api):
    resp = upload(api, b"whatever", filename="products.pdf")

    assert resp.status_code == 400
    assert "Invalid file type" in resp.json()["error"]


def test_unknown_job_is_404(api):
    assert api.get("/api/v1/bulk/status/job_missing").status_code == 404


def test_template_download(api):
    resp = api.get("/api/v1/bulk/template")

    assert resp.status_code == 200
    assert resp.text.startswith("product_name,description\n")


def test_auth_me_without_session(api):
    data = api.get("/api/v1/auth/me").json()

    assert data["state"] == "unauthenticated"
    assert data["is_limit_reached"] is True


def test_magic_link(api, session_store):
    resp = api.post("/api/v1/auth/magic-link", json={"email": "new@example.com"})

    assert resp.status_code == 200
    assert session_store.magic_links == ["new@example.com"]
    assert api.post("/api/v1/auth/magic-link", json={"email": "nope"}).status_code == 400


def test_contact_missing_fields(api):
    resp = api.post("/api/v1/contact", json={"name": "Ann"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Missing required fields."}
