"""Stage ordering, short-circuits and failure handling of the URL scan."""

from __future__ import annotations

import pytest

from app.schemas.assessments import Reputation, RiskLevel
from app.services.phishing.pipeline import (
    STAGES,
    ScanKeys,
    Stage,
    scan_url,
)
from app.services.phishing.providers import ReputationServiceError

ALL_KEYS = ScanKeys(
    google_safe_browsing="gsb-key",
    ipqualityscore="ipqs-key",
    virustotal="vt-key",
)

CLEAN_REPUTATION = {
    "reputation": Reputation.HIGH,
    "risk_score": 5,
    "is_malicious": False,
    "is_phishing": False,
    "is_suspicious": False,
    "details": "Success",
}


class Calls:
    def __init__(self) -> None:
        self.names: list[str] = []


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> Calls:
    """Install benign fakes for every external service and record calls."""
    recorded = Calls()

    def safe_browsing(url, key):
        recorded.names.append("safe_browsing")
        return {"safe": True, "threat_types": [], "details": "Google Safe Browsing: No threats found"}

    def reputation(domain, key):
        recorded.names.append("domain_reputation")
        return dict(CLEAN_REPUTATION)

    def virustotal(url, key):
        recorded.names.append("virustotal")
        return {"malicious": 0, "suspicious": 0, "undetected": 70, "total": 70}

    monkeypatch.setattr("app.services.phishing.providers.check_with_safe_browsing", safe_browsing)
    monkeypatch.setattr("app.services.phishing.providers.check_domain_reputation", reputation)
    monkeypatch.setattr("app.services.phishing.providers.check_with_virustotal", virustotal)
    return recorded


def test_no_credentials_uses_local_checks_only(calls: Calls) -> None:
    result = scan_url("https://example.com", keys=ScanKeys())

    assert calls.names == []
    assert result.safe is True
    assert result.risk_level == RiskLevel.LOW
    assert result.threat_types == []
    assert result.google_safe is True
    assert result.domain_reputation == Reputation.HIGH
    assert result.risk_score == 0
    assert result.details == "URL appears safe based on multiple checks"


def test_keys_are_read_from_environment(calls: Calls, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_SAFE_BROWSING_API_KEY", "gsb-key")
    monkeypatch.setenv("IPQUALITYSCORE_API_KEY", "  ")

    scan_url("https://example.com")

    assert calls.names == ["safe_browsing"]


def test_clean_url_with_all_services(calls: Calls) -> None:
    result = scan_url("https://example.com", keys=ALL_KEYS)

    assert calls.names == ["safe_browsing", "domain_reputation"]
    assert result.safe is True
    assert result.risk_score == 5
    assert result.domain_reputation == Reputation.HIGH


def test_safe_browsing_hit_skips_reputation(calls: Calls, monkeypatch: pytest.MonkeyPatch) -> None:
    def flagged(url, key):
        calls.names.append("safe_browsing")
        return {
            "safe": False,
            "threat_types": ["SOCIAL_ENGINEERING"],
            "details": "Google Safe Browsing: SOCIAL_ENGINEERING detected",
        }

    monkeypatch.setattr("app.services.phishing.providers.check_with_safe_browsing", flagged)

    result = scan_url("https://phish.example", keys=ALL_KEYS)

    assert "domain_reputation" not in calls.names
    assert calls.names == ["safe_browsing", "virustotal"]
    assert result.safe is False
    assert result.google_safe is False
    assert result.risk_level == RiskLevel.HIGH
    assert result.threat_types == ["SOCIAL_ENGINEERING"]
    assert result.details == "SOCIAL_ENGINEERING"


def test_threat_match_labels_append_to_local_findings(calls: Calls, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "app.services.phishing.providers.check_with_safe_browsing",
        lambda url, key: {"safe": False, "threat_types": ["MALWARE"], "details": "x"},
    )

    result = scan_url("http://bit.ly/abc", keys=ALL_KEYS)

    assert result.threat_types == ["URL shortener", "Not using HTTPS", "MALWARE"]
    assert result.details == "URL shortener, Not using HTTPS, MALWARE"
    assert result.risk_level == RiskLevel.HIGH


def test_local_findings_skip_reputation_and_virustotal(calls: Calls) -> None:
    result = scan_url("http://bit.ly/abc", keys=ALL_KEYS)

    # Medium risk: reputation is gated on "still safe", VirusTotal on "high".
    assert calls.names == ["safe_browsing"]
    assert result.safe is False
    assert result.risk_level == RiskLevel.MEDIUM


def test_external_failure_fails_open(calls: Calls, monkeypatch: pytest.MonkeyPatch) -> None:
    def unavailable(url, key):
        calls.names.append("safe_browsing")
        raise ReputationServiceError("Safe Browsing unreachable")

    monkeypatch.setattr("app.services.phishing.providers.check_with_safe_browsing", unavailable)

    result = scan_url("https://example.com", keys=ALL_KEYS)

    assert calls.names == ["safe_browsing", "domain_reputation"]
    assert result.safe is True
    assert result.google_safe is True
    assert result.risk_level == RiskLevel.LOW


def test_high_risk_score_without_flags_only_lowers_reputation(
    calls: Calls, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        "app.services.phishing.providers.check_domain_reputation",
        lambda domain, key: {**CLEAN_REPUTATION, "reputation": Reputation.LOW, "risk_score": 90},
    )

    result = scan_url("https://example.com", keys=ALL_KEYS)

    assert result.safe is True
    assert result.risk_level == RiskLevel.LOW
    assert result.domain_reputation == Reputation.LOW
    assert result.risk_score == 90


def test_malicious_domain_escalates_and_runs_virustotal(
    calls: Calls, monkeypatch: pytest.MonkeyPatch
) -> None:
    def malicious(domain, key):
        calls.names.append("domain_reputation")
        assert domain == "evil.example"
        return {
            **CLEAN_REPUTATION,
            "reputation": Reputation.LOW,
            "risk_score": 97,
            "is_malicious": True,
            "is_phishing": True,
        }

    monkeypatch.setattr("app.services.phishing.providers.check_domain_reputation", malicious)

    result = scan_url("https://evil.example/path", keys=ALL_KEYS)

    assert calls.names == ["safe_browsing", "domain_reputation", "virustotal"]
    assert result.safe is False
    assert result.risk_level == RiskLevel.HIGH
    assert result.threat_types == ["Malicious domain", "Phishing domain"]
    assert result.risk_score == 97


def test_virustotal_never_downgrades(calls: Calls, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "app.services.phishing.providers.check_with_safe_browsing",
        lambda url, key: {"safe": False, "threat_types": ["MALWARE"], "details": "x"},
    )
    monkeypatch.setattr(
        "app.services.phishing.providers.check_with_virustotal",
        lambda url, key: {"malicious": 0, "suspicious": 0, "undetected": 0, "total": 0},
    )

    result = scan_url("https://example.com", keys=ALL_KEYS)

    assert result.risk_level == RiskLevel.HIGH
    assert result.safe is False


def test_virustotal_failure_keeps_high_risk(calls: Calls, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "app.services.phishing.providers.check_with_safe_browsing",
        lambda url, key: {"safe": False, "threat_types": ["MALWARE"], "details": "x"},
    )

    def broken(url, key):
        raise ReputationServiceError("VirusTotal unreachable")

    monkeypatch.setattr("app.services.phishing.providers.check_with_virustotal", broken)

    result = scan_url("https://example.com", keys=ALL_KEYS)

    assert result.risk_level == RiskLevel.HIGH
    assert result.threat_types == ["MALWARE"]


def test_unexpected_failure_collapses_to_maximal_risk(monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(url):
        raise RuntimeError("bug")

    monkeypatch.setattr("app.services.phishing.pipeline.basic_url_analysis", explode)

    result = scan_url("https://example.com", keys=ScanKeys())

    assert result.safe is False
    assert result.risk_level == RiskLevel.HIGH
    assert result.threat_types == ["Scan failed"]
    assert result.google_safe is False
    assert result.domain_reputation == Reputation.LOW
    assert result.risk_score == 100
    assert result.details == "Unable to complete security scan"


def test_stage_without_fail_open_propagates_to_fallback() -> None:
    def broken(url, state, key):
        raise ValueError("bad stage")

    stages = STAGES[:1] + (
        Stage(name="broken", run=broken, should_run=lambda state: True),
    )

    result = scan_url("https://example.com", keys=ScanKeys(), stages=stages)

    assert result.threat_types == ["Scan failed"]


def test_timestamp_is_set() -> None:
    result = scan_url("https://example.com", keys=ScanKeys())
    assert result.timestamp.tzinfo is not None
