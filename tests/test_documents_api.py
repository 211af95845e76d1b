from fastapi.testclient import TestClient

from lexscan.main import create_app

from conftest import DOCX, NDA_PARAGRAPHS, PDF, BlockingExtractor, make_docx, make_pdf, wait_for_terminal


def upload(client, path, content_type):
    with open(path, "rb") as f:
        return client.post("/api/upload", files={"document": (path.name, f, content_type)})


def test_upload_returns_immediately_with_file_id(client, tmp_path):
    path = make_docx(tmp_path / "nda.docx", NDA_PARAGRAPHS)

    response = upload(client, path, DOCX)

    assert response.status_code == 202
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "File uploaded successfully. Processing started."
    assert body["file"]["id"] == body["fileId"]
    assert body["file"]["originalName"] == "nda.docx"
    assert body["file"]["mimetype"] == DOCX
    assert body["file"]["status"] == "processing"
    assert "storagePath" not in body["file"]


def test_docx_upload_is_processed_to_completion(client, tmp_path):
    path = make_docx(tmp_path / "nda.docx", NDA_PARAGRAPHS)
    file_id = upload(client, path, DOCX).json()["fileId"]

    status = wait_for_terminal(client, file_id)

    assert status["status"] == "completed"
    assert status["stage"] == "done"
    assert status["progress"] == 100
    assert status["documentType"] == "NDA"
    # liability x2, termination x1
    assert status["riskScore"] == 25
    assert status["wordCount"] == len(status["extractedText"].split())
    assert status["documentMetadata"]["paragraph_count"] == len(NDA_PARAGRAPHS)
    assert status["error"] is None


def test_pdf_upload_is_processed_to_completion(client, tmp_path):
    path = make_pdf(tmp_path / "license.pdf", ["Software License Agreement", "The license is non-exclusive."])
    file_id = upload(client, path, PDF).json()["fileId"]

    status = wait_for_terminal(client, file_id)

    assert status["status"] == "completed"
    assert status["documentType"] == "License Agreement"
    assert status["pageCount"] == 1


def test_corrupt_upload_ends_in_error(client, tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"garbage")
    file_id = upload(client, path, PDF).json()["fileId"]

    status = wait_for_terminal(client, file_id)

    assert status["status"] == "error"
    assert status["stage"] == "error"
    assert status["error"]
    assert status["documentType"] is None
    assert status["extractedText"] is None


def test_get_document_is_202_until_done(client, app, tmp_path):
    extractor = BlockingExtractor("employee employment")
    app.state.document_service.extractor = extractor
    path = make_pdf(tmp_path / "job.pdf", ["x"])
    file_id = upload(client, path, PDF).json()["fileId"]

    pending = client.get(f"/api/document/{file_id}")
    assert pending.status_code == 202
    assert pending.json()["message"] == "File is still processing"
    assert pending.json()["status"] == "processing"
    assert pending.json()["progress"] in (0, 20)

    extractor.release.set()
    wait_for_terminal(client, file_id)

    done = client.get(f"/api/document/{file_id}")
    assert done.status_code == 200
    body = done.json()
    assert body["id"] == file_id
    assert body["originalName"] == "job.pdf"
    assert body["documentType"] == "Employment Agreement"
    assert body["extractedText"] == "employee employment"
    assert body["wordCount"] == 2
    assert body["documentMetadata"] == {}
    assert body["completedAt"] is not None


def test_unknown_file_id_is_404_everywhere(client):
    assert client.get("/api/status/missing").status_code == 404
    assert client.get("/api/document/missing").status_code == 404
    response = client.delete("/api/document/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "File not found"}


def test_list_documents_returns_completed_summaries(client, tmp_path):
    assert client.get("/api/documents").json() == []

    path = make_docx(tmp_path / "nda.docx", NDA_PARAGRAPHS)
    file_id = upload(client, path, DOCX).json()["fileId"]
    wait_for_terminal(client, file_id)

    documents = client.get("/api/documents").json()
    assert len(documents) == 1
    assert documents[0]["id"] == file_id
    assert documents[0]["documentType"] == "NDA"
    assert "extractedText" not in documents[0]


def test_delete_twice(client, settings, tmp_path):
    path = make_docx(tmp_path / "nda.docx", NDA_PARAGRAPHS)
    file_id = upload(client, path, DOCX).json()["fileId"]
    wait_for_terminal(client, file_id)

    first = client.delete(f"/api/document/{file_id}")
    second = client.delete(f"/api/document/{file_id}")

    assert first.status_code == 200
    assert first.json() == {"message": "Document deleted successfully"}
    assert second.status_code == 404
    assert client.get(f"/api/status/{file_id}").status_code == 404
    assert list((tmp_path / "uploads").iterdir()) == []


def test_upload_without_file_is_400(client):
    response = client.post("/api/upload", data={"note": "no file"})

    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_upload_of_disallowed_type_is_415(client, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("confidential")

    response = upload(client, path, "text/plain")

    assert response.status_code == 415
    assert "Only PDF, DOC, DOCX allowed" in response.json()["error"]
    assert not (tmp_path / "uploads").exists()


def test_oversized_upload_is_413(settings, tmp_path):
    settings.MAX_UPLOAD_SIZE_MB = 1
    path = tmp_path / "big.pdf"
    path.write_bytes(b"0" * (1024 * 1024 + 1))

    with TestClient(create_app(settings)) as client:
        response = upload(client, path, PDF)

    assert response.status_code == 413
    assert not (tmp_path / "uploads").exists()


def test_responses_carry_request_id(client):
    response = client.get("/api/documents", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    assert client.get("/api/documents").headers["X-Request-ID"]
