"""
Subscription Plans Configuration

Defines the plan feature matrix and limits for Starter, Pro, Enterprise
workspaces, and the rows a freshly provisioned workspace starts with.
"""
from datetime import datetime, timedelta, timezone

from blueprintos.config import settings

PLAN_MATRIX = {
    "starter": {
        "display_name": "Starter",
        "max_clients": 10,
        "ai_generation_credits": 10,
        "features": {
            "custom_domain": False,
            "white_label": False,
            "api_access": False,
            "team_members": False,
        },
    },
    "pro": {
        "display_name": "Pro",
        "max_clients": 100,
        "ai_generation_credits": 100,
        "features": {
            "custom_domain": True,
            "white_label": True,
            "api_access": False,
            "team_members": False,
        },
    },
    "enterprise": {
        "display_name": "Enterprise",
        "max_clients": None,          # Unlimited
        "ai_generation_credits": None,
        "features": {
            "custom_domain": True,
            "white_label": True,
            "api_access": True,
            "team_members": True,
        },
    },
}

DEFAULT_PLAN = "starter"


def get_plan(plan_name: str) -> dict:
    """Get plan config by name. Falls back to 'starter'."""
    return PLAN_MATRIX.get(plan_name, PLAN_MATRIX[DEFAULT_PLAN])


def get_plan_feature(plan_name: str, feature: str) -> bool:
    """Check if a feature is available for a plan."""
    plan = get_plan(plan_name)
    return plan["features"].get(feature, False)


def trial_ends_at(now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(days=settings.TRIAL_DAYS)


def starter_subscription_values(now: datetime | None = None) -> dict:
    """Column values of the subscription row created at signup."""
    return {
        "plan_tier": DEFAULT_PLAN,
        "status": "trialing",
        "trial_ends_at": trial_ends_at(now),
    }


def starter_feature_values() -> dict:
    """Column values of the features row created at signup."""
    plan = get_plan(DEFAULT_PLAN)
    features = plan["features"]
    return {
        "max_clients": plan["max_clients"],
        "ai_generation_credits": plan["ai_generation_credits"],
        "custom_domain_enabled": features["custom_domain"],
        "white_label_enabled": features["white_label"],
        "api_access_enabled": features["api_access"],
        "team_members_enabled": features["team_members"],
    }
