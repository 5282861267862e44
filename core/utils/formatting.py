"""Formatting utilities for slugs, identifiers and masked values."""

import re
import uuid


def slugify(text: str) -> str:
    """
    Convert a job title to its slug.

    Lowercases the text and replaces each run of whitespace with a hyphen.
    Other characters are kept, so two titles can share a slug.

    Args:
        text: Text to convert

    Returns:
        Slug, empty for an empty title
    """
    return re.sub(r"\s+", "-", (text or "").lower())


def generate_id(prefix: str) -> str:
    """
    Build a fresh record id such as `job-3f9c2a61d0b84e7a`.

    Args:
        prefix: Record kind

    Returns:
        Unique id string
    """
    return f"{prefix}-{uuid.uuid4().hex[:16]}"


def mask_email(email: str) -> str:
    """
    Mask email address for privacy.

    Args:
        email: Email address to mask

    Returns:
        Masked email (e.g., "j***@example.com")
    """
    if not email or "@" not in email:
        return email

    local, domain = email.split("@", 1)
    if len(local) <= 1:
        return f"{local}***@{domain}"
    return f"{local[0]}***@{domain}"
