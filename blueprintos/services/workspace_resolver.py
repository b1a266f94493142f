"""
Workspace resolution from an inbound hostname.

Order, first match wins:
  1. active workspace whose custom_domain equals the hostname
  2. active workspace whose subdomain equals the first label of a 3+ label host
Reserved labels (www, app, admin) never resolve.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blueprintos.config import settings
from blueprintos.middleware.metrics import record_resolution
from blueprintos.models.workspace import Workspace

logger = logging.getLogger("blueprintos.resolver")


def normalize_host(host: Optional[str]) -> str:
    """Strip port and trailing dot, lowercase."""
    if not host:
        return ""
    host = host.strip().lower()
    if host.startswith("["):
        # IPv6 literal, never a workspace host
        return ""
    host = host.split(":")[0]
    return host.rstrip(".")


def extract_subdomain(hostname: str, reserved: Optional[Iterable[str]] = None) -> Optional[str]:
    parts = hostname.split(".")
    if len(parts) < 3:
        return None

    candidate = parts[0]
    if reserved is None:
        reserved = settings.RESERVED_SUBDOMAINS
    if not candidate or candidate in reserved:
        return None
    return candidate


def get_by_custom_domain(db: Session, domain: str) -> Optional[Workspace]:
    return db.query(Workspace).filter(
        Workspace.custom_domain == domain,
        Workspace.is_active == True,  # noqa: E712
    ).first()


def get_by_subdomain(db: Session, subdomain: str) -> Optional[Workspace]:
    return db.query(Workspace).filter(
        Workspace.subdomain == subdomain.lower(),
        Workspace.is_active == True,  # noqa: E712
    ).first()


def resolve_workspace(db: Session, hostname: Optional[str]) -> Optional[Workspace]:
    """Resolve a hostname to an active workspace. Lookup errors count as a miss."""
    host = normalize_host(hostname)
    if not host:
        record_resolution("miss")
        return None

    try:
        workspace = get_by_custom_domain(db, host)
        if workspace:
            logger.debug("Resolved custom domain %s -> workspace %s", host, workspace.id)
            record_resolution("custom_domain")
            return workspace

        subdomain = extract_subdomain(host)
        if not subdomain:
            record_resolution("miss")
            return None

        workspace = get_by_subdomain(db, subdomain)
    except SQLAlchemyError as e:
        logger.warning("Workspace resolution failed for %s: %s", host, e)
        db.rollback()
        record_resolution("error")
        return None

    if workspace:
        logger.debug("Resolved subdomain %s -> workspace %s", subdomain, workspace.id)
        record_resolution("subdomain")
    else:
        record_resolution("miss")
    return workspace
