"""Subdomain allocation for new workspaces."""
import re
import secrets
import string

from sqlalchemy.orm import Session

from blueprintos.config import settings
from blueprintos.models.workspace import Workspace

SLUG_MAX_LENGTH = 30
SUFFIX_LENGTH = 4
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_DOMAIN_LABEL = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?$")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_BASE36 = string.digits + string.ascii_lowercase


def slugify(name: str) -> str:
    """Lowercase, collapse every run of non [a-z0-9] chars into '-', trim '-',
    cut to 30 chars. Empty input gives an empty slug."""
    slug = _NON_ALNUM.sub("-", (name or "").lower()).strip("-")
    # a cut can land right after a separator
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


def is_valid_subdomain(slug: str) -> bool:
    return bool(slug) and len(slug) <= 63 and SLUG_PATTERN.match(slug) is not None


def is_valid_custom_domain(domain: str) -> bool:
    """At least two dot-separated labels, each a valid hostname label, TLD not numeric."""
    if not domain or len(domain) > 253:
        return False
    labels = domain.split(".")
    if len(labels) < 2 or labels[-1].isdigit():
        return False
    return all(_DOMAIN_LABEL.match(label) for label in labels)


def is_platform_host(domain: str) -> bool:
    """The root domain itself or any host under it; those resolve by subdomain only."""
    root = settings.ROOT_DOMAIN.lower()
    return domain == root or domain.endswith("." + root)


def is_subdomain_available(db: Session, slug: str) -> bool:
    """Advisory check only. Nothing is reserved; creation can still conflict."""
    return db.query(Workspace.id).filter(Workspace.subdomain == slug).first() is None


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_workspace_subdomain(name: str) -> str:
    """Slug of ``name`` plus a random 4-char base-36 suffix, e.g. ``acme-coaching-7f3a``."""
    base = slugify(name) or "workspace"
    return f"{base}-{random_suffix()}"
