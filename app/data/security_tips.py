# Static guide content, loaded once at import.

CATEGORIES = [
    {"id": "password", "label": "Passwords"},
    {"id": "network", "label": "Network"},
    {"id": "privacy", "label": "Privacy"},
    {"id": "device", "label": "Device"},
    {"id": "financial", "label": "Financial"},
    {"id": "general", "label": "General"},
]

SECURITY_TIPS = [
    {
        "id": "1",
        "title": "Enable Two-Factor Authentication",
        "description": "Add an extra layer of security to your accounts",
        "steps": [
            "Go to your account security settings",
            "Find \"Two-Factor Authentication\" or \"2FA\" option",
            "Choose SMS, app-based, or hardware key method",
            "Follow the setup instructions",
            "Save backup codes in a secure location",
            "Test the login process to ensure it works",
        ],
        "priority": "high",
        "category": "password",
    },
    {
        "id": "2",
        "title": "Create Strong Passwords",
        "description": "Use unique, complex passwords for every account",
        "steps": [
            "Use at least 12 characters",
            "Include uppercase, lowercase, numbers, and symbols",
            "Avoid dictionary words and personal information",
            "Never reuse passwords across accounts",
            "Consider using a password manager",
            "Update passwords regularly (every 3-6 months)",
        ],
        "priority": "high",
        "category": "password",
    },
    {
        "id": "3",
        "title": "Secure Your Wi-Fi Network",
        "description": "Protect your home network from unauthorized access",
        "steps": [
            "Change default router login credentials",
            "Use WPA3 encryption (or WPA2 if WPA3 unavailable)",
            "Create a strong network password",
            "Hide your network name (SSID) if possible",
            "Enable firewall on your router",
            "Regularly update router firmware",
            "Disable WPS if not needed",
        ],
        "priority": "high",
        "category": "network",
    },
    {
        "id": "4",
        "title": "Recognize Phishing Attempts",
        "description": "Identify and avoid fraudulent emails and websites",
        "steps": [
            "Check sender email addresses carefully",
            "Look for spelling and grammar errors",
            "Hover over links to see actual destination",
            "Be suspicious of urgent or threatening language",
            "Verify requests through official channels",
            "Never provide sensitive info via email",
            "Report suspicious emails to your IT team",
        ],
        "priority": "high",
        "category": "general",
    },
    {
        "id": "5",
        "title": "Keep Software Updated",
        "description": "Install security patches promptly",
        "steps": [
            "Enable automatic updates when possible",
            "Regularly check for OS updates",
            "Update all applications and browsers",
            "Install security patches immediately",
            "Remove unused software",
            "Use official app stores for downloads",
        ],
        "priority": "medium",
        "category": "device",
    },
    {
        "id": "6",
        "title": "Review Privacy Settings",
        "description": "Control what information you share online",
        "steps": [
            "Review social media privacy settings",
            "Limit personal information visibility",
            "Control who can see your posts and photos",
            "Disable location sharing when not needed",
            "Review app permissions regularly",
            "Be selective about friend/connection requests",
            "Consider what you post publicly",
        ],
        "priority": "medium",
        "category": "privacy",
    },
    {
        "id": "7",
        "title": "Secure Online Shopping",
        "description": "Protect your financial information while shopping",
        "steps": [
            "Only shop on secure websites (https://)",
            "Use credit cards instead of debit cards",
            "Avoid public Wi-Fi for financial transactions",
            "Check bank statements regularly",
            "Use secure payment services (PayPal, Apple Pay)",
            "Be cautious of deals that seem too good to be true",
            "Read seller reviews and ratings",
        ],
        "priority": "medium",
        "category": "financial",
    },
    {
        "id": "8",
        "title": "Safe Browsing Habits",
        "description": "Navigate the internet securely",
        "steps": [
            "Use reputable browsers with security features",
            "Install ad blockers and anti-tracking extensions",
            "Be cautious with downloads from unknown sites",
            "Clear browser data regularly",
            "Use private/incognito mode for sensitive browsing",
            "Avoid clicking suspicious links",
            "Verify website authenticity before entering data",
        ],
        "priority": "low",
        "category": "general",
    },
]

TIP_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def get_tips(category: str | None = None) -> list[dict]:
    tips = SECURITY_TIPS
    if category and category != "all":
        tips = [tip for tip in tips if tip["category"] == category]
    return sorted(tips, key=lambda tip: TIP_PRIORITY_ORDER[tip["priority"]])
