from app.services import upload_service
from app.services.upload_service import MAX_IMAGE_BYTES

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_upload_stores_under_uploads_prefix(admin_client, monkeypatch):
    calls = []

    def fake_upload(path, file_bytes, content_type):
        calls.append((path, content_type))
        return f"https://cdn.test/{path}"

    monkeypatch.setattr(upload_service, "upload_to_storage", fake_upload)

    response = admin_client.post(
        "/api/upload",
        files={"image": ("logo.png", PNG, "image/png")},
    )

    assert response.status_code == 200
    path, content_type = calls[0]
    assert path.startswith("uploads/")
    assert path.endswith(".png")
    assert content_type == "image/png"
    assert response.json() == {"url": f"https://cdn.test/{path}"}


def test_upload_rejects_unsupported_type(admin_client):
    response = admin_client.post(
        "/api/upload",
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


def test_upload_rejects_large_file(admin_client):
    big = b"\x00" * (MAX_IMAGE_BYTES + 1)
    response = admin_client.post(
        "/api/upload",
        files={"image": ("big.jpg", big, "image/jpeg")},
    )
    assert response.status_code == 413


def test_upload_without_file(admin_client):
    assert admin_client.post("/api/upload").status_code == 400


def test_storage_failure_is_reported_as_bad_gateway(admin_client, monkeypatch):
    def broken_upload(path, file_bytes, content_type):
        raise RuntimeError("Missing SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY in .env")

    monkeypatch.setattr(upload_service, "upload_to_storage", broken_upload)

    response = admin_client.post(
        "/api/upload",
        files={"image": ("logo.png", PNG, "image/png")},
    )
    assert response.status_code == 502


def test_upload_requires_admin(client):
    response = client.post(
        "/api/upload",
        files={"image": ("logo.png", PNG, "image/png")},
    )
    assert response.status_code == 401
