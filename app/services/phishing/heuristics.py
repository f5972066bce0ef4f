import re
from urllib.parse import urlparse

from app.schemas.assessments import LocalScanResult, RiskLevel

# =========================================================
# STATIC DATA
# =========================================================

MAX_URL_LENGTH = 100
HIGH_RISK_MIN_FINDINGS = 3

MATCH_URL = "url"
MATCH_HOST = "host"

# (pattern, threat, target) triples, tested in order. MATCH_URL patterns see
# the whole lower-cased URL, MATCH_HOST patterns only its hostname.
SUSPICIOUS_PATTERNS: tuple[tuple[re.Pattern, str, str], ...] = (
    (
        re.compile(r"(login|signin|account)\.([a-z0-9]+)\.([a-z0-9]+)"),
        "Potential phishing page",
        MATCH_URL,
    ),
    (
        re.compile(r"(paypal|bank|amazon|google|facebook)\.([a-z0-9]+)\.([a-z0-9]+)"),
        "Brand impersonation",
        MATCH_URL,
    ),
    (
        re.compile(r"(?:^|\.)(?:bit\.ly|tinyurl\.com|goo\.gl|t\.co|ow\.ly)$"),
        "URL shortener",
        MATCH_HOST,
    ),
    (
        re.compile(r"@"),
        "Misleading @ symbol",
        MATCH_URL,
    ),
    (
        re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$"),
        "IP address instead of domain",
        MATCH_HOST,
    ),
    (
        re.compile(r"-login-|secure-|verify-|account-"),
        "Suspicious keywords",
        MATCH_URL,
    ),
)

SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


# =========================================================
# HELPERS
# =========================================================

def normalize_url(url: str) -> str:
    url = url.strip()
    if SCHEME_RE.match(url):
        return url
    return f"http://{url}"


def extract_domain(url: str) -> str:
    try:
        hostname = urlparse(normalize_url(url)).hostname
    except ValueError:
        return url
    return hostname or url


def risk_level_for_findings(count: int) -> RiskLevel:
    if count >= HIGH_RISK_MIN_FINDINGS:
        return RiskLevel.HIGH
    if count >= 1:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


# =========================================================
# LOCAL SCAN
# =========================================================

def basic_url_analysis(url: str) -> LocalScanResult:
    threats: list[str] = []
    stripped = url.strip()
    lowered = stripped.lower()
    targets = {
        MATCH_URL: lowered,
        MATCH_HOST: extract_domain(lowered),
    }

    for pattern, threat, target in SUSPICIOUS_PATTERNS:
        if pattern.search(targets[target]):
            threats.append(threat)

    if not lowered.startswith("https://"):
        threats.append("Not using HTTPS")

    if len(stripped) > MAX_URL_LENGTH:
        threats.append("Unusually long URL")

    return LocalScanResult(
        safe=not threats,
        risk_level=risk_level_for_findings(len(threats)),
        threat_types=threats,
        details=". ".join(threats) if threats else "Passes basic checks",
    )
