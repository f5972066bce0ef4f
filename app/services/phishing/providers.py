import base64
from urllib.parse import quote

import requests

from app.core.limits import Limit, get_global_limit
from app.schemas.assessments import Reputation
from app.services.phishing.heuristics import normalize_url

SAFE_BROWSING_API = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
IPQS_URL_API = "https://www.ipqualityscore.com/api/json/url"
VIRUSTOTAL_URL_API = "https://www.virustotal.com/api/v3/urls"

CLIENT_ID = "myspace-security"
CLIENT_VERSION = "1.0"

SAFE_BROWSING_THREAT_TYPES = ["MALWARE", "SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE"]

LOW_REPUTATION_ABOVE = 75
MEDIUM_REPUTATION_ABOVE = 25


class ReputationServiceError(RuntimeError):
    """External reputation signal unavailable."""


def _timeout() -> int:
    return get_global_limit(Limit.EXTERNAL_TIMEOUT_SECONDS)


def _json_or_raise(resp: requests.Response, service: str) -> dict:
    if not resp.ok:
        raise ReputationServiceError(f"{service} returned status {resp.status_code}")
    try:
        data = resp.json()
    except ValueError as exc:
        raise ReputationServiceError(f"{service} returned malformed JSON") from exc
    if not isinstance(data, dict):
        raise ReputationServiceError(f"{service} returned unexpected payload")
    return data


# =========================================================
# GOOGLE SAFE BROWSING (THREAT MATCH)
# =========================================================

def check_with_safe_browsing(url: str, api_key: str) -> dict:
    payload = {
        "client": {"clientId": CLIENT_ID, "clientVersion": CLIENT_VERSION},
        "threatInfo": {
            "threatTypes": SAFE_BROWSING_THREAT_TYPES,
            "platformTypes": ["ANY_PLATFORM"],
            "threatEntryTypes": ["URL"],
            "threatEntries": [{"url": normalize_url(url)}],
        },
    }

    try:
        resp = requests.post(
            SAFE_BROWSING_API,
            params={"key": api_key},
            json=payload,
            timeout=_timeout(),
        )
    except requests.RequestException as exc:
        raise ReputationServiceError("Safe Browsing unreachable") from exc

    data = _json_or_raise(resp, "Safe Browsing")
    matches = data.get("matches") or []

    if matches:
        threats = [m.get("threatType", "UNKNOWN_THREAT") for m in matches]
        return {
            "safe": False,
            "threat_types": threats,
            "details": f"Google Safe Browsing: {', '.join(threats)} detected",
        }

    return {
        "safe": True,
        "threat_types": [],
        "details": "Google Safe Browsing: No threats found",
    }


# =========================================================
# IPQUALITYSCORE (DOMAIN REPUTATION)
# =========================================================

def reputation_for_score(risk_score: int) -> Reputation:
    # Label is trustworthiness: higher risk means lower reputation.
    if risk_score > LOW_REPUTATION_ABOVE:
        return Reputation.LOW
    if risk_score > MEDIUM_REPUTATION_ABOVE:
        return Reputation.MEDIUM
    return Reputation.HIGH


def check_domain_reputation(domain: str, api_key: str) -> dict:
    try:
        resp = requests.get(
            f"{IPQS_URL_API}/{api_key}/{quote(domain, safe='')}",
            timeout=_timeout(),
        )
    except requests.RequestException as exc:
        raise ReputationServiceError("IPQualityScore unreachable") from exc

    data = _json_or_raise(resp, "IPQualityScore")

    try:
        risk_score = int(data.get("risk_score") or 0)
    except (TypeError, ValueError) as exc:
        raise ReputationServiceError("IPQualityScore returned a bad risk score") from exc
    risk_score = max(0, min(100, risk_score))

    return {
        "reputation": reputation_for_score(risk_score),
        "risk_score": risk_score,
        "is_malicious": data.get("malicious") is True,
        "is_phishing": data.get("phishing") is True,
        "is_suspicious": data.get("suspicious") is True,
        "details": data.get("message") or f"Risk score: {risk_score}/100",
    }


# =========================================================
# VIRUSTOTAL (MULTI-ENGINE)
# =========================================================

def virustotal_url_id(url: str) -> str:
    return base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii").rstrip("=")


def check_with_virustotal(url: str, api_key: str) -> dict:
    try:
        resp = requests.get(
            f"{VIRUSTOTAL_URL_API}/{virustotal_url_id(normalize_url(url))}",
            headers={"x-apikey": api_key, "accept": "application/json"},
            timeout=_timeout(),
        )
    except requests.RequestException as exc:
        raise ReputationServiceError("VirusTotal unreachable") from exc

    data = _json_or_raise(resp, "VirusTotal")
    try:
        stats = data["data"]["attributes"]["last_analysis_stats"]
    except (KeyError, TypeError):
        stats = {}
    if not isinstance(stats, dict):
        raise ReputationServiceError("VirusTotal returned unexpected analysis stats")

    try:
        counts = {name: int(value or 0) for name, value in stats.items()}
    except (TypeError, ValueError) as exc:
        raise ReputationServiceError("VirusTotal returned bad analysis stats") from exc

    return {
        "malicious": counts.get("malicious", 0),
        "suspicious": counts.get("suspicious", 0),
        "undetected": counts.get("undetected", 0),
        "total": sum(counts.values()),
    }
