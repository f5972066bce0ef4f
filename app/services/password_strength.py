import re
import secrets
import string

from app.schemas.assessments import (
    BreachResult,
    PasswordAssessment,
    PasswordStrength,
    Strength,
)

# =========================================================
# STATIC DATA
# =========================================================

COMMON_PASSWORDS = frozenset({
    "password",
    "123456",
    "qwerty",
    "admin",
    "welcome",
    "password123",
})

GENERATOR_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "!@#$%^&*"

STRONG_THRESHOLD = 5
MEDIUM_THRESHOLD = 3

UPPERCASE_RE = re.compile(r"[A-Z]")
LOWERCASE_RE = re.compile(r"[a-z]")
DIGIT_RE = re.compile(r"[0-9]")
SYMBOL_RE = re.compile(r"[^A-Za-z0-9]")

FEEDBACK_TOO_SHORT = "Should be at least 8 characters"
FEEDBACK_UPPERCASE = "Add uppercase letters"
FEEDBACK_LOWERCASE = "Add lowercase letters"
FEEDBACK_NUMBERS = "Add numbers"
FEEDBACK_SYMBOLS = "Add special characters (!@#$%)"
FEEDBACK_COMMON = "Very common password - choose something unique"

SUMMARY_BY_STRENGTH = {
    Strength.STRONG: "Strong password!",
    Strength.MEDIUM: "Medium strength - could be stronger",
    Strength.WEAK: "Weak password - consider improving",
}


# =========================================================
# STRENGTH
# =========================================================

def strength_for_score(score: int) -> Strength:
    if score >= STRONG_THRESHOLD:
        return Strength.STRONG
    if score >= MEDIUM_THRESHOLD:
        return Strength.MEDIUM
    return Strength.WEAK


def is_common_password(password: str) -> bool:
    return password.lower() in COMMON_PASSWORDS


def check_strength(password: str) -> PasswordStrength:
    """
    Additive point system, one point per passing rule (max 6).

    Rules run in a fixed order and feedback keeps that order; the tier
    summary is always the final entry. A case-insensitive hit on
    COMMON_PASSWORDS resets the score to 0.
    """
    score = 0
    feedback: list[str] = []
    length = len(password)

    if length >= 8:
        score += 1
    else:
        feedback.append(FEEDBACK_TOO_SHORT)

    if length >= 12:
        score += 1

    if UPPERCASE_RE.search(password):
        score += 1
    else:
        feedback.append(FEEDBACK_UPPERCASE)

    if LOWERCASE_RE.search(password):
        score += 1
    else:
        feedback.append(FEEDBACK_LOWERCASE)

    if DIGIT_RE.search(password):
        score += 1
    else:
        feedback.append(FEEDBACK_NUMBERS)

    if SYMBOL_RE.search(password):
        score += 1
    else:
        feedback.append(FEEDBACK_SYMBOLS)

    if is_common_password(password):
        score = 0
        feedback.append(FEEDBACK_COMMON)

    strength = strength_for_score(score)
    feedback.append(SUMMARY_BY_STRENGTH[strength])

    return PasswordStrength(score=score, strength=strength, feedback=feedback)


def assess_password(password: str, breach: BreachResult) -> PasswordAssessment:
    local = check_strength(password)
    return PasswordAssessment(
        score=local.score,
        strength=local.strength,
        feedback=local.feedback,
        is_breached=breach.is_breached,
        breach_count=breach.breach_count,
        breach_details=breach.details,
    )


# =========================================================
# GENERATOR
# =========================================================

def generate_password(length: int = 16) -> str:
    if length < 1:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(GENERATOR_ALPHABET) for _ in range(length))
