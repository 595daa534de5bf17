"""Signature service: per-user signatures with a single default.

Invariant: among a user's non-deleted signatures exactly one is the default,
unless the user has none. Every mutating function writes, then calls
``reconcile_default`` before committing, so the write and the sibling
adjustments land in one transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import nh3
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from coursemail.core.strings import get_string
from coursemail.core.structured_logging import build_log_context
from coursemail.db.models import Signature

logger = logging.getLogger(__name__)

# Allowed HTML tags for signature rich text (logos, links, simple layout)
ALLOWED_TAGS = {
    "p", "br", "strong", "b", "em", "i", "u", "span", "div",
    "a", "img", "ul", "ol", "li", "blockquote", "hr",
}
ALLOWED_ATTRIBUTES = {
    "a": {"href", "target", "title"},
    "img": {"src", "alt", "width", "height"},
    "span": {"style"},
    "div": {"style"},
    "p": {"style"},
}

SIGNATURE_SEPARATOR = "<br><br>"

# Fragments that identify the active-title unique index in driver errors (Postgres, SQLite)
DUPLICATE_TITLE_MARKERS = (
    "uq_signature_user_title_active",
    "signatures.user_id, signatures.title",
)


# =============================================================================
# Errors
# =============================================================================

class SignatureValidationError(ValueError):
    """User-correctable problem with a signature field."""

    code = "invalid"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def as_dict(self) -> dict[str, str]:
        return {self.field: self.message}


class EmptyTitleError(SignatureValidationError):
    code = "empty_title"

    def __init__(self):
        super().__init__("title", get_string("signature_title_required"))


class EmptyBodyError(SignatureValidationError):
    code = "empty_body"

    def __init__(self):
        super().__init__("body", get_string("signature_signature_required"))


class DuplicateTitleError(SignatureValidationError):
    code = "duplicate_title"

    def __init__(self):
        super().__init__("title", get_string("signature_title_must_be_unique"))


class SignatureStoreError(RuntimeError):
    """Storage failed mid-write; nothing was applied."""


# =============================================================================
# Helpers
# =============================================================================

def sanitize_html(html: str) -> str:
    """Sanitize signature HTML, allowing only safe rich text tags."""
    return nh3.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES)


def _clean_title(title: str | None) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise EmptyTitleError()
    return cleaned


def _clean_body(body: str | None) -> str:
    if not (body or "").strip():
        raise EmptyBodyError()
    cleaned = sanitize_html(body).strip()
    if not cleaned:
        raise EmptyBodyError()
    return cleaned


def _title_taken(
    db: Session,
    user_id: int,
    title: str,
    exclude_id: int | None = None,
) -> bool:
    query = db.query(Signature.id).filter(
        Signature.user_id == user_id,
        Signature.title == title,
        Signature.not_deleted(),
    )
    if exclude_id is not None:
        query = query.filter(Signature.id != exclude_id)
    return query.first() is not None


def _is_duplicate_title(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in DUPLICATE_TITLE_MARKERS)


def _reconcile_and_commit(
    db: Session,
    user_id: int,
    *,
    anchor: Signature | None = None,
    signature_id: int | None = None,
) -> None:
    """Commit the write and its sibling adjustments together, or neither."""
    try:
        reconcile_default(db, user_id, anchor=anchor)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_duplicate_title(exc):
            raise DuplicateTitleError()
        logger.exception(
            "Signature write violated a constraint; rolled back",
            extra=build_log_context(user_id=user_id, signature_id=signature_id),
        )
        raise SignatureStoreError("Signature write failed") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "Signature write failed; rolled back",
            extra=build_log_context(user_id=user_id, signature_id=signature_id),
        )
        raise SignatureStoreError("Signature write failed") from exc


# =============================================================================
# Queries
# =============================================================================

def list_active(db: Session, user_id: int) -> list[Signature]:
    """A user's non-deleted signatures in retrieval (id) order."""
    return (
        db.query(Signature)
        .filter(
            Signature.user_id == user_id,
            Signature.not_deleted(),
        )
        .order_by(Signature.id)
        .all()
    )


def get_signature(db: Session, signature_id: int) -> Signature | None:
    """Get a non-deleted signature by id."""
    return (
        db.query(Signature)
        .filter(
            Signature.id == signature_id,
            Signature.not_deleted(),
        )
        .first()
    )


def find_signature_owned_by_user(
    db: Session,
    signature_id: int,
    user_id: int,
) -> Signature | None:
    """Get a signature by id only if it exists, is active and belongs to user_id."""
    signature = get_signature(db, signature_id)
    if not signature or not signature.is_owned_by(user_id):
        return None
    return signature


def list_for_user(db: Session, user_id: int) -> list[tuple[int, str]]:
    """(id, display title) pairs, the default's title suffixed " (default)"."""
    return [(sig.id, sig.display_title) for sig in list_active(db, user_id)]


def get_default_for_user(db: Session, user_id: int) -> Signature | None:
    for signature in list_active(db, user_id):
        if signature.is_default:
            return signature
    return None


def append_to_message_body(signature: Signature, body: str = "") -> str:
    """Return body with the signature appended after two line breaks."""
    return f"{body or ''}{SIGNATURE_SEPARATOR}{signature.body}"


# =============================================================================
# Invariant maintenance
# =============================================================================

def reconcile_default(
    db: Session,
    user_id: int,
    *,
    anchor: Signature | None = None,
) -> None:
    """
    Restore the single-default invariant for user_id.

    ``anchor`` is the record just written. If it is an active default it wins
    and every sibling is demoted. Otherwise an existing default is kept, and
    when none exists the anchor (or, failing that, the first active record)
    is promoted. Flushes but does not commit.
    """
    db.flush()
    active = list_active(db, user_id)
    if not active:
        return

    if anchor is not None and (anchor.is_deleted or anchor not in active):
        anchor = None

    if anchor is not None and anchor.is_default:
        keeper = anchor
    else:
        defaults = [sig for sig in active if sig.is_default]
        if defaults:
            keeper = defaults[0]
        else:
            keeper = anchor or active[0]

    for signature in active:
        should_be_default = signature is keeper
        if signature.is_default != should_be_default:
            signature.is_default = should_be_default
    db.flush()


# =============================================================================
# Mutations
# =============================================================================

def create_signature(
    db: Session,
    user_id: int,
    title: str,
    body: str,
    is_default: bool = False,
) -> Signature:
    """
    Create a signature.

    A user's first active signature always becomes the default; an explicit
    default demotes every sibling.

    Raises:
        EmptyTitleError, EmptyBodyError, DuplicateTitleError
        SignatureStoreError: storage failed, nothing written
    """
    clean_title = _clean_title(title)
    clean_body = _clean_body(body)
    if _title_taken(db, user_id, clean_title):
        raise DuplicateTitleError()

    signature = Signature(
        user_id=user_id,
        title=clean_title,
        body=clean_body,
        is_default=bool(is_default),
    )
    db.add(signature)
    _reconcile_and_commit(db, user_id, anchor=signature)
    db.refresh(signature)

    logger.info(
        "Signature created",
        extra=build_log_context(user_id=user_id, signature_id=signature.id),
    )
    return signature


def update_signature(
    db: Session,
    signature_id: int,
    *,
    title: str | None = None,
    body: str | None = None,
    is_default: bool | None = None,
) -> Signature | None:
    """
    Update a signature's title, body and/or default flag.

    Returns None when signature_id is not an active signature. A signature
    that ends up non-default is promoted back if no sibling is default.

    Raises:
        EmptyTitleError, EmptyBodyError, DuplicateTitleError
        SignatureStoreError: storage failed, nothing written
    """
    signature = get_signature(db, signature_id)
    if not signature:
        return None

    user_id = signature.user_id
    clean_title = _clean_title(title) if title is not None else None
    clean_body = _clean_body(body) if body is not None else None
    if clean_title is not None and _title_taken(db, user_id, clean_title, exclude_id=signature.id):
        raise DuplicateTitleError()

    if clean_title is not None:
        signature.title = clean_title
    if clean_body is not None:
        signature.body = clean_body
    if is_default is not None:
        signature.is_default = is_default

    _reconcile_and_commit(db, user_id, anchor=signature, signature_id=signature.id)
    db.refresh(signature)

    logger.info(
        "Signature updated",
        extra=build_log_context(user_id=user_id, signature_id=signature.id),
    )
    return signature


def soft_delete_signature(db: Session, signature_id: int) -> bool:
    """
    Soft delete a signature.

    If it was the default, the first remaining active sibling becomes the
    default. Returns False when signature_id is not an active signature.
    """
    signature = get_signature(db, signature_id)
    if not signature:
        return False

    user_id = signature.user_id
    signature.is_default = False
    signature.mark_deleted(datetime.now(timezone.utc))

    _reconcile_and_commit(db, user_id, signature_id=signature_id)

    logger.info(
        "Signature deleted",
        extra=build_log_context(user_id=user_id, signature_id=signature_id),
    )
    return True
