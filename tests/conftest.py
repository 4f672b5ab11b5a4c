import json
import struct
from collections.abc import AsyncGenerator
from typing import List

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.api.v1 import dependencies
from app.core.config import Settings
from app.schemas.email import RelayDestination
from app.services.email.relay import EmailRelay


TEST_SETTINGS = Settings(
    _env_file=None,
    DISPLAY_TIMEZONE="America/Argentina/Buenos_Aires",
    NOTIFICATION_SUBJECT_PREFIX="aIgrOT",
    RESEND_API_KEY="re_primary",
    RESEND_API_KEY_SECONDARY="re_secondary",
    EMAIL_TO="owner@example.com",
    EMAIL_TO_SECONDARY="family@example.com, vet@example.com",
)

TEST_DESTINATIONS = [
    RelayDestination(name="primary", api_key="re_primary", sender="onboarding@resend.dev",
                     recipients=["owner@example.com"]),
    RelayDestination(name="secondary", api_key="re_secondary", sender="onboarding@resend.dev",
                     recipients=["family@example.com", "vet@example.com"]),
]

# 2024-01-15 12:34:00 UTC, 09:34 in Buenos Aires
RECEIVED_MS = 1705322040000
DEVICE_TIME_S = 1705322040


def info_hex(
    sequence_number=1,
    device_time_s=DEVICE_TIME_S,
    latitude_raw=-346037000,
    longitude_raw=-583816000,
    elevation=25,
    temperature=21,
    battery_voltage=3700,
) -> str:
    return struct.pack(
        "<IIiihbH",
        sequence_number, device_time_s, latitude_raw, longitude_raw,
        elevation, temperature, battery_voltage,
    ).hex()


def alert_hex(sequence_number=2, device_time_s=DEVICE_TIME_S, flag=1) -> str:
    return struct.pack("<IIB", sequence_number, device_time_s, flag).hex()


def make_envelope(value, timestamp=RECEIVED_MS, terminal_id=None, **extra) -> dict:
    packet = {"Timestamp": timestamp, "Value": value, **extra}
    if terminal_id is not None:
        packet["TerminalId"] = terminal_id
    return {"Data": json.dumps({"Packets": [packet]})}


class ResendStub:
    """Records Resend API calls and answers per API key."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.failures = {}

    def fail(self, api_key: str, response_or_exc) -> None:
        self.failures[api_key] = response_or_exc

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        api_key = request.headers["Authorization"].removeprefix("Bearer ")
        failure = self.failures.get(api_key)
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            return failure
        return httpx.Response(200, json={"id": f"email-{api_key}"})

    def payloads(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def resend_stub() -> ResendStub:
    return ResendStub()


@pytest_asyncio.fixture
async def email_relay(resend_stub) -> AsyncGenerator[EmailRelay, None]:
    client = httpx.AsyncClient(base_url="https://api.resend.test", transport=httpx.MockTransport(resend_stub))
    relay = EmailRelay(TEST_DESTINATIONS, client=client)
    yield relay
    await client.aclose()


@pytest.fixture
def override_settings():
    app.dependency_overrides[dependencies.get_settings] = lambda: TEST_SETTINGS
    yield TEST_SETTINGS
    app.dependency_overrides.pop(dependencies.get_settings, None)


@pytest.fixture
def override_relay(email_relay, override_settings):
    app.dependency_overrides[dependencies.get_email_relay] = lambda: email_relay
    yield email_relay
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://testserver", transport=transport) as client:
        yield client
