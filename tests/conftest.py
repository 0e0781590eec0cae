"""
Test configuration for the Vitalens backend.
"""
import os

# Fast password hashing and a fixed signing key for tests
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import json
from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient

from vitalens.ai.client import GenerationResult, GenerativeModelClient, get_generative_client
from vitalens.database import Base, create_db_engine, create_session_factory
from vitalens.main import app
from vitalens.records.dependencies import get_record_store
from vitalens.records.schemas import Credentials
from vitalens.records.store import RecordStore
from vitalens.storage import DatabaseStorage

PNG_DATA_URI = "data:image/png;base64,AAA"
HIGHLIGHTED_DATA_URI = "data:image/png;base64,BBBB"


class FakeModelClient(GenerativeModelClient):
    """
    In-process stand-in for the generative model.

    Structured calls return text_output; calls asking for the IMAGE
    modality return media_url. Every call is recorded.
    """

    def __init__(self, text_output: Any = None, media_url: Optional[str] = None, error: Optional[Exception] = None):
        self.text_output = text_output
        self.media_url = media_url
        self.error = error
        self.calls: List[dict] = []

    async def generate(self, model, parts, output_schema=None, response_modalities=None):
        self.calls.append({
            "model": model,
            "parts": parts,
            "output_schema": output_schema,
            "response_modalities": response_modalities,
        })
        if self.error:
            raise self.error
        if response_modalities and "IMAGE" in response_modalities:
            return GenerationResult(text="Highlighted.", media_url=self.media_url)
        text = json.dumps(self.text_output) if self.text_output is not None else None
        return GenerationResult(text=text, output=self.text_output)


@pytest.fixture(scope="function")
def storage():
    """
    Create a fresh in-memory storage database for each test.
    """
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield DatabaseStorage(create_session_factory(engine))
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def store(storage):
    return RecordStore(storage)


@pytest.fixture(scope="function")
def doctor(store):
    return store.add_user(Credentials(doctor_id="DOC-1", password="secret"))


@pytest.fixture(scope="function")
def other_doctor(store, doctor):
    return store.add_user(Credentials(doctor_id="DOC-2", password="other-secret"))


@pytest.fixture(scope="function")
def patient_fields():
    return {
        "name": "Jane Doe",
        "dateOfBirth": "1994-05-01",
        "gender": "Female",
        "contact": "555-0100",
        "address": "1 Main Street",
        "medicalHistory": ["Asthma", "Penicillin allergy"],
    }


@pytest.fixture(scope="function")
def model_client():
    return FakeModelClient(
        text_output={
            "summary": "Early caries on the lower left molar.",
            "confidenceScore": "Medium",
            "findings": [{"description": "Radiolucency on tooth 36"}],
        },
        media_url=HIGHLIGHTED_DATA_URI,
    )


@pytest.fixture(scope="function")
def client(store, model_client):
    """
    Create a test client backed by the test record store and fake model.
    """
    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_generative_client] = lambda: model_client
    app.state.record_store = store

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}
    app.state.record_store = None


@pytest.fixture(scope="function")
def auth_headers(client, doctor):
    response = client.post("/api/v1/auth/login", json={"doctorId": "DOC-1", "password": "secret"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture(scope="function")
def other_auth_headers(client, other_doctor):
    response = client.post("/api/v1/auth/login", json={"doctorId": "DOC-2", "password": "other-secret"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}
