import json
import logging

import pytest
from botocore.exceptions import ClientError

from app.core.exceptions import ConfigurationError, StorageError
from app.core.storage import ObjectStorage


class RecordingS3Client:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"ETag": '"etag"'}


def test_put_object_writes_to_bound_bucket(caplog):
    client = RecordingS3Client()
    storage = ObjectStorage(client, "answers-bucket")

    with caplog.at_level(logging.INFO, logger="app.core.logger"):
        uri = storage.put_object("interview-1/audio/Q0.webm", b"blob", "audio/webm")

    assert uri == "s3://answers-bucket/interview-1/audio/Q0.webm"
    assert client.calls == [{
        "Bucket": "answers-bucket",
        "Key": "interview-1/audio/Q0.webm",
        "Body": b"blob",
        "ContentType": "audio/webm",
    }]
    assert "Finished execution of: put_object" in caplog.text


def test_put_json_serialises_payload():
    client = RecordingS3Client()
    storage = ObjectStorage(client, "answers-bucket")

    storage.put_json("interview-1/setup.json", {"company": "Acme"})

    call = client.calls[0]
    assert call["ContentType"] == "application/json"
    assert json.loads(call["Body"]) == {"company": "Acme"}


def test_client_error_becomes_storage_error():
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
    storage = ObjectStorage(RecordingS3Client(error=error), "answers-bucket")

    with pytest.raises(StorageError) as excinfo:
        storage.put_object("interview-1/audio/Q0.webm", b"blob", "audio/webm")

    assert excinfo.value.details["key"] == "interview-1/audio/Q0.webm"


def test_missing_bucket_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ObjectStorage(RecordingS3Client(), "")
