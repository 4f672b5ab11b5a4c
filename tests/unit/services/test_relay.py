import httpx
import pytest

from app.core.config import Settings
from app.core.exceptions import ConfigurationMissing, RelayError
from app.schemas.email import EmailMessage
from app.services.email.relay import EmailRelay

from conftest import TEST_DESTINATIONS, TEST_SETTINGS

MESSAGE = EmailMessage(subject="aIgrOT info", html="<p>hola</p>")


def test_from_settings_builds_both_destinations():
    relay = EmailRelay.from_settings(TEST_SETTINGS, client=httpx.AsyncClient())

    assert [d.name for d in relay.destinations] == ["primary", "secondary"]
    assert relay.destinations[0].api_key == "re_primary"
    assert relay.destinations[1].recipients == ["family@example.com", "vet@example.com"]
    assert relay.destinations[0].sender == TEST_SETTINGS.EMAIL_FROM


@pytest.mark.parametrize("missing", ["RESEND_API_KEY", "RESEND_API_KEY_SECONDARY"])
def test_from_settings_requires_api_keys(missing):
    config = TEST_SETTINGS.model_copy(update={missing: None})
    with pytest.raises(ConfigurationMissing) as exc_info:
        EmailRelay.from_settings(config)
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Missing Resend API keys"
    assert exc_info.value.details == {"missing": [missing]}


def test_from_settings_requires_recipients():
    config = TEST_SETTINGS.model_copy(update={"EMAIL_TO_SECONDARY": " , "})
    with pytest.raises(ConfigurationMissing) as exc_info:
        EmailRelay.from_settings(config)
    assert exc_info.value.message == "Missing email recipients"
    assert exc_info.value.details == {"missing": ["EMAIL_TO_SECONDARY"]}


def test_relay_needs_a_destination():
    with pytest.raises(ConfigurationMissing):
        EmailRelay([], client=httpx.AsyncClient())


@pytest.mark.asyncio
async def test_send_all_reaches_every_destination(email_relay, resend_stub):
    results = await email_relay.send_all(MESSAGE)

    assert list(results) == ["primary", "secondary"]
    assert results["primary"].ok and results["primary"].id == "email-re_primary"
    assert results["secondary"].ok and results["secondary"].id == "email-re_secondary"

    assert len(resend_stub.requests) == 2
    assert all(r.url.path == "/emails" for r in resend_stub.requests)
    payloads = sorted(resend_stub.payloads(), key=lambda p: p["to"])
    assert payloads[0] == {
        "from": "onboarding@resend.dev",
        "to": ["family@example.com", "vet@example.com"],
        "subject": "aIgrOT info",
        "html": "<p>hola</p>",
    }
    assert payloads[1]["to"] == ["owner@example.com"]


@pytest.mark.asyncio
async def test_provider_error_does_not_hide_other_result(email_relay, resend_stub):
    resend_stub.fail("re_primary", httpx.Response(422, json={"name": "validation_error", "message": "Invalid `to` field"}))

    results = await email_relay.send_all(MESSAGE)

    assert results["primary"].ok is False
    assert results["primary"].error == "Resend returned HTTP 422: Invalid `to` field"
    assert results["secondary"].ok is True


@pytest.mark.asyncio
async def test_transport_error_does_not_hide_other_result(email_relay, resend_stub):
    resend_stub.fail("re_secondary", httpx.ConnectError("connection refused"))

    results = await email_relay.send_all(MESSAGE)

    assert results["primary"].ok is True
    assert results["secondary"].ok is False
    assert "connection refused" in results["secondary"].error


@pytest.mark.asyncio
async def test_both_destinations_failing(email_relay, resend_stub):
    resend_stub.fail("re_primary", httpx.Response(500, text="upstream down"))
    resend_stub.fail("re_secondary", httpx.Response(401, json={"message": "API key is invalid"}))

    results = await email_relay.send_all(MESSAGE)

    assert results["primary"].error == "Resend returned HTTP 500: upstream down"
    assert results["secondary"].error == "Resend returned HTTP 401: API key is invalid"


@pytest.mark.asyncio
async def test_send_raises_relay_error(email_relay, resend_stub):
    resend_stub.fail("re_primary", httpx.Response(403, json={"message": "Forbidden"}))

    with pytest.raises(RelayError) as exc_info:
        await email_relay.send(TEST_DESTINATIONS[0], MESSAGE)
    assert exc_info.value.details == {"status_code": 403}


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open(email_relay):
    await email_relay.aclose()
    assert not email_relay._client.is_closed


@pytest.mark.asyncio
async def test_aclose_closes_owned_client():
    relay = EmailRelay(TEST_DESTINATIONS)
    await relay.aclose()
    assert relay._client.is_closed


def test_settings_split_recipient_lists():
    config = Settings(_env_file=None, EMAIL_TO="a@example.com,, b@example.com ", EMAIL_TO_SECONDARY="")
    assert config.email_to == ["a@example.com", "b@example.com"]
    assert config.email_to_secondary == []


def test_settings_reject_unknown_timezone():
    with pytest.raises(ValueError):
        Settings(_env_file=None, DISPLAY_TIMEZONE="Mars/Olympus_Mons")
