"""Request and payload handling of the external reputation services."""

from __future__ import annotations

import pytest
import requests

from conftest import FakeResponse

from app.schemas.assessments import Reputation
from app.services.phishing.providers import (
    ReputationServiceError,
    check_domain_reputation,
    check_with_safe_browsing,
    check_with_virustotal,
    reputation_for_score,
    virustotal_url_id,
)


class Recorder:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls: list[dict] = []

    def __call__(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        return self.response


def _install(monkeypatch: pytest.MonkeyPatch, method: str, response: FakeResponse) -> Recorder:
    recorder = Recorder(response)
    monkeypatch.setattr(f"app.services.phishing.providers.requests.{method}", recorder)
    return recorder


# ---------------- SAFE BROWSING ----------------

def test_safe_browsing_request_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _install(monkeypatch, "post", FakeResponse(200, payload={}))

    check_with_safe_browsing("example.com/login", "gsb-key")

    call = recorder.calls[0]
    assert call["params"] == {"key": "gsb-key"}
    body = call["json"]
    assert body["client"] == {"clientId": "myspace-security", "clientVersion": "1.0"}
    assert body["threatInfo"]["threatEntries"] == [{"url": "http://example.com/login"}]
    assert set(body["threatInfo"]["threatTypes"]) == {
        "MALWARE",
        "SOCIAL_ENGINEERING",
        "UNWANTED_SOFTWARE",
    }


def test_safe_browsing_no_matches(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, "post", FakeResponse(200, payload={}))

    result = check_with_safe_browsing("https://example.com", "gsb-key")

    assert result["safe"] is True
    assert result["threat_types"] == []


def test_safe_browsing_matches(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {
        "matches": [
            {"threatType": "SOCIAL_ENGINEERING"},
            {"threatType": "MALWARE"},
        ]
    }
    _install(monkeypatch, "post", FakeResponse(200, payload=payload))

    result = check_with_safe_browsing("https://evil.example", "gsb-key")

    assert result["safe"] is False
    assert result["threat_types"] == ["SOCIAL_ENGINEERING", "MALWARE"]
    assert result["details"] == "Google Safe Browsing: SOCIAL_ENGINEERING, MALWARE detected"


@pytest.mark.parametrize(
    "response",
    [FakeResponse(403, payload={"error": "denied"}), FakeResponse(200, text="not json")],
)
def test_safe_browsing_bad_responses_raise(monkeypatch: pytest.MonkeyPatch, response) -> None:
    _install(monkeypatch, "post", response)
    with pytest.raises(ReputationServiceError):
        check_with_safe_browsing("https://example.com", "gsb-key")


def test_safe_browsing_transport_error_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(url, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr("app.services.phishing.providers.requests.post", boom)
    with pytest.raises(ReputationServiceError):
        check_with_safe_browsing("https://example.com", "gsb-key")


# ---------------- IPQUALITYSCORE ----------------

@pytest.mark.parametrize(
    ("score", "expected"),
    [
        (100, Reputation.LOW),
        (76, Reputation.LOW),
        (75, Reputation.MEDIUM),
        (26, Reputation.MEDIUM),
        (25, Reputation.HIGH),
        (0, Reputation.HIGH),
    ],
)
def test_reputation_is_inverse_of_risk(score: int, expected: Reputation) -> None:
    assert reputation_for_score(score) == expected


def test_domain_reputation_request_and_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {"risk_score": 88, "phishing": True, "malicious": False, "message": "Success"}
    recorder = _install(monkeypatch, "get", FakeResponse(200, payload=payload))

    result = check_domain_reputation("evil.example", "ipqs-key")

    assert recorder.calls[0]["url"].endswith("/ipqs-key/evil.example")
    assert result["reputation"] == Reputation.LOW
    assert result["risk_score"] == 88
    assert result["is_phishing"] is True
    assert result["is_malicious"] is False
    assert result["details"] == "Success"


def test_domain_reputation_clamps_score(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, "get", FakeResponse(200, payload={"risk_score": 140}))

    result = check_domain_reputation("example.com", "ipqs-key")

    assert result["risk_score"] == 100
    assert result["details"] == "Risk score: 100/100"


def test_domain_reputation_missing_score_reads_as_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, "get", FakeResponse(200, payload={"success": True}))

    result = check_domain_reputation("example.com", "ipqs-key")

    assert result["risk_score"] == 0
    assert result["reputation"] == Reputation.HIGH


def test_domain_reputation_rejects_garbage_score(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, "get", FakeResponse(200, payload={"risk_score": "high"}))
    with pytest.raises(ReputationServiceError):
        check_domain_reputation("example.com", "ipqs-key")


# ---------------- VIRUSTOTAL ----------------

def test_virustotal_url_id_is_unpadded_urlsafe_base64() -> None:
    assert virustotal_url_id("http://example.com") == "aHR0cDovL2V4YW1wbGUuY29t"
    identifier = virustotal_url_id("http://a.b/?x=~~~")
    assert "=" not in identifier
    assert "+" not in identifier and "/" not in identifier


def test_virustotal_stats(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {
        "data": {
            "attributes": {
                "last_analysis_stats": {
                    "malicious": 3,
                    "suspicious": 1,
                    "undetected": 60,
                    "harmless": 10,
                }
            }
        }
    }
    recorder = _install(monkeypatch, "get", FakeResponse(200, payload=payload))

    result = check_with_virustotal("https://evil.example", "vt-key")

    assert recorder.calls[0]["headers"]["x-apikey"] == "vt-key"
    assert result == {"malicious": 3, "suspicious": 1, "undetected": 60, "total": 74}


def test_virustotal_missing_stats_reads_as_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, "get", FakeResponse(200, payload={"data": {}}))

    result = check_with_virustotal("https://example.com", "vt-key")

    assert result["malicious"] == 0
    assert result["total"] == 0


def test_virustotal_unknown_url_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, "get", FakeResponse(404, payload={"error": {"code": "NotFoundError"}}))
    with pytest.raises(ReputationServiceError):
        check_with_virustotal("https://example.com", "vt-key")


def test_virustotal_bad_stats_shape_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {"data": {"attributes": {"last_analysis_stats": [1, 2, 3]}}}
    _install(monkeypatch, "get", FakeResponse(200, payload=payload))
    with pytest.raises(ReputationServiceError):
        check_with_virustotal("https://example.com", "vt-key")
