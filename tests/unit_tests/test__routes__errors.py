from unittest.mock import MagicMock

from botocore.exceptions import ClientError
from fastapi import status
from fastapi.testclient import TestClient

from files_gateway.main import create_app
from tests.consts import TEST_BUCKET_NAME


def access_denied(operation_name: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}},
        operation_name,
    )


def test__upload_no_files__bad_request(client: TestClient, mocked_aws, monkeypatch):
    put_object = MagicMock(wraps=mocked_aws.put_object)
    monkeypatch.setattr(mocked_aws, "put_object", put_object)

    response = client.post("/upload")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "No files uploaded"}
    put_object.assert_not_called()


def test__upload_other_field_only__bad_request(client: TestClient):
    response = client.post("/upload", files=[("attachments", ("a.txt", b"a", "text/plain"))])

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "No files uploaded"}


def test__upload_too_many_files__bad_request(client: TestClient, mocked_aws, monkeypatch):
    put_object = MagicMock(wraps=mocked_aws.put_object)
    monkeypatch.setattr(mocked_aws, "put_object", put_object)

    response = client.post(
        "/upload",
        files=[("files", (f"file{i}.txt", b"x", "text/plain")) for i in range(11)],
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "Too many files, at most 10 allowed"}
    put_object.assert_not_called()


def test__upload_one_failure__whole_request_fails(client: TestClient, mocked_aws, monkeypatch):
    real_put_object = mocked_aws.put_object

    def put_object(**kwargs):
        if kwargs["Key"].endswith("_broken.txt"):
            raise access_denied("PutObject")
        return real_put_object(**kwargs)

    monkeypatch.setattr(mocked_aws, "put_object", put_object)

    response = client.post(
        "/upload",
        files=[
            ("files", ("fine.txt", b"fine", "text/plain")),
            ("files", ("broken.txt", b"broken", "text/plain")),
            ("files", ("also-fine.txt", b"also fine", "text/plain")),
        ],
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["message"] == "File upload failed"
    assert "AccessDenied" in data["error"]
    assert "files" not in data


def test__list_files__store_failure(client: TestClient, mocked_aws, monkeypatch):
    monkeypatch.setattr(mocked_aws, "list_objects_v2", MagicMock(side_effect=access_denied("ListObjectsV2")))

    response = client.get("/files")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["message"] == "Failed to fetch files"
    assert "Access Denied" in data["error"]


def test__list_files__missing_bucket(mocked_aws, settings):
    settings.s3_bucket_name = "no-such-bucket"
    with TestClient(create_app(settings=settings, s3_client=mocked_aws)) as client:
        response = client.get("/files")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "NoSuchBucket" in response.json()["error"]


def test__delete_file__store_failure(client: TestClient, mocked_aws, monkeypatch):
    monkeypatch.setattr(mocked_aws, "delete_object", MagicMock(side_effect=access_denied("DeleteObject")))

    response = client.delete("/delete/test.txt")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "File deletion failed"


def test__download_missing_file__server_error(client: TestClient):
    response = client.get("/download/never-uploaded.txt")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.headers["Content-Type"] == "application/json"
    data = response.json()
    assert data["message"] == "File download failed"
    assert "NoSuchKey" in data["error"]


def test__download_file__only_reads_uploads_prefix(client: TestClient, mocked_aws):
    mocked_aws.put_object(Bucket=TEST_BUCKET_NAME, Key="outside.txt", Body=b"not under uploads")

    response = client.get("/download/outside.txt")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


def test__unexpected_error__rendered_as_json(client: TestClient):
    # fails before the storage call is wrapped
    client.app.state.settings = None

    response = client.post("/upload", files=[("files", ("a.txt", b"a", "text/plain"))])

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Internal server error"


def test__upload_empty_file_input__bad_request(client: TestClient, mocked_aws, monkeypatch):
    put_object = MagicMock(wraps=mocked_aws.put_object)
    monkeypatch.setattr(mocked_aws, "put_object", put_object)

    # what a browser sends for an untouched <input type="file">
    response = client.post("/upload", files=[("files", ("", b"", "application/octet-stream"))])

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "No files uploaded"}
    put_object.assert_not_called()


def test__upload_text_value_in_files_field__bad_request(client: TestClient):
    response = client.post("/upload", data={"files": "notafile"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "No files uploaded"}


def test__upload_empty_part_next_to_real_file__only_real_file_stored(client: TestClient):
    response = client.post(
        "/upload",
        files=[
            ("files", ("", b"", "application/octet-stream")),
            ("files", ("kept.txt", b"kept", "text/plain")),
        ],
    )

    assert response.status_code == status.HTTP_200_OK
    descriptors = response.json()["files"]
    assert len(descriptors) == 1
    assert descriptors[0]["name"].endswith("_kept.txt")
