"""
URL risk aggregation.

A scan is a fixed sequence of named stages. Every stage receives the
assessment accumulated so far and returns a (possibly) updated copy. A stage
is skipped when its credential is missing or when its predicate over the
accumulated assessment says so:

    local_heuristics   always
    safe_browsing      credential configured
    domain_reputation  credential configured and still safe
    virustotal         credential configured and already high risk

External stages fail open: an unavailable service leaves the assessment as
it was. Anything unexpected outside of them collapses the whole scan to the
maximal-risk fallback.
"""
import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

from app.schemas.assessments import (
    Reputation,
    RiskLevel,
    UrlRiskAssessment,
)
from app.services.phishing import providers
from app.services.phishing.heuristics import basic_url_analysis, extract_domain

logger = logging.getLogger(__name__)

RISK_ORDER = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
}

SAFE_DETAILS = "URL appears safe based on multiple checks"
GENERIC_THREAT_DETAILS = "Potential security threat detected"


@dataclass(frozen=True)
class ScanKeys:
    google_safe_browsing: Optional[str] = None
    ipqualityscore: Optional[str] = None
    virustotal: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ScanKeys":
        return cls(
            google_safe_browsing=(os.getenv("GOOGLE_SAFE_BROWSING_API_KEY") or "").strip() or None,
            ipqualityscore=(os.getenv("IPQUALITYSCORE_API_KEY") or "").strip() or None,
            virustotal=(os.getenv("VIRUSTOTAL_API_KEY") or "").strip() or None,
        )


@dataclass(frozen=True)
class Stage:
    name: str
    run: Callable[[str, UrlRiskAssessment, Optional[str]], UrlRiskAssessment]
    should_run: Callable[[UrlRiskAssessment], bool]
    credential: Optional[str] = None
    fail_open: bool = False


def _max_risk(current: RiskLevel, incoming: RiskLevel) -> RiskLevel:
    return incoming if RISK_ORDER[incoming] > RISK_ORDER[current] else current


def _flag(
    state: UrlRiskAssessment,
    risk_level: RiskLevel,
    threats: list[str] | None = None,
    **extra,
) -> UrlRiskAssessment:
    """Mark unsafe. Risk only ever escalates and threats only accumulate."""
    return state.model_copy(update={
        "safe": False,
        "risk_level": _max_risk(state.risk_level, risk_level),
        "threat_types": state.threat_types + list(threats or []),
        **extra,
    })


# =========================================================
# STAGES
# =========================================================

def run_local_heuristics(url: str, state: UrlRiskAssessment, _key: Optional[str]) -> UrlRiskAssessment:
    local = basic_url_analysis(url)
    if local.safe:
        return state
    return _flag(state, local.risk_level, local.threat_types, details=local.details)


def run_safe_browsing(url: str, state: UrlRiskAssessment, key: Optional[str]) -> UrlRiskAssessment:
    result = providers.check_with_safe_browsing(url, key)
    if result["safe"]:
        return state
    return _flag(
        state,
        RiskLevel.HIGH,
        result["threat_types"],
        google_safe=False,
        details=result["details"],
    )


def run_domain_reputation(url: str, state: UrlRiskAssessment, key: Optional[str]) -> UrlRiskAssessment:
    result = providers.check_domain_reputation(extract_domain(url), key)

    state = state.model_copy(update={
        "domain_reputation": Reputation(result["reputation"]),
        "risk_score": result["risk_score"],
    })

    threats = []
    if result["is_malicious"]:
        threats.append("Malicious domain")
    if result["is_phishing"]:
        threats.append("Phishing domain")

    if threats:
        return _flag(state, RiskLevel.HIGH, threats)
    return state


def run_virustotal(url: str, state: UrlRiskAssessment, key: Optional[str]) -> UrlRiskAssessment:
    result = providers.check_with_virustotal(url, key)
    if result["malicious"] > 0:
        return _flag(state, RiskLevel.HIGH)
    return state


STAGES: tuple[Stage, ...] = (
    Stage(
        name="local_heuristics",
        run=run_local_heuristics,
        should_run=lambda state: True,
    ),
    Stage(
        name="safe_browsing",
        run=run_safe_browsing,
        should_run=lambda state: True,
        credential="google_safe_browsing",
        fail_open=True,
    ),
    Stage(
        name="domain_reputation",
        run=run_domain_reputation,
        should_run=lambda state: state.safe,
        credential="ipqualityscore",
        fail_open=True,
    ),
    Stage(
        name="virustotal",
        run=run_virustotal,
        should_run=lambda state: state.risk_level == RiskLevel.HIGH,
        credential="virustotal",
        fail_open=True,
    ),
)


# =========================================================
# DRIVER
# =========================================================

def run_stage(stage: Stage, url: str, state: UrlRiskAssessment, keys: ScanKeys) -> UrlRiskAssessment:
    key = getattr(keys, stage.credential) if stage.credential else None

    if stage.credential and not key:
        logger.debug("url_scan_stage_skipped stage=%s reason=no_credential", stage.name)
        return state

    if not stage.should_run(state):
        logger.debug("url_scan_stage_skipped stage=%s reason=predicate", stage.name)
        return state

    if not stage.fail_open:
        return stage.run(url, state, key)

    try:
        return stage.run(url, state, key)
    except Exception as exc:
        logger.warning("url_scan_stage_failed stage=%s error=%s", stage.name, exc)
        return state


def finalize(state: UrlRiskAssessment) -> UrlRiskAssessment:
    if state.safe:
        details = SAFE_DETAILS
    elif state.threat_types:
        details = ", ".join(state.threat_types)
    else:
        details = GENERIC_THREAT_DETAILS
    return state.model_copy(update={"details": details})


def scan_failed_result() -> UrlRiskAssessment:
    return UrlRiskAssessment(
        safe=False,
        risk_level=RiskLevel.HIGH,
        threat_types=["Scan failed"],
        google_safe=False,
        domain_reputation=Reputation.LOW,
        risk_score=100,
        details="Unable to complete security scan",
    )


def scan_url(
    url: str,
    keys: Optional[ScanKeys] = None,
    stages: tuple[Stage, ...] = STAGES,
) -> UrlRiskAssessment:
    try:
        keys = keys or ScanKeys.from_env()
        state = UrlRiskAssessment()
        for stage in stages:
            state = run_stage(stage, url, state, keys)
        return finalize(state)
    except Exception:
        logger.exception("url_scan_failed")
        return scan_failed_result()
