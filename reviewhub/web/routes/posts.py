"""
Product post routes: CRUD plus like/unlike.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from reviewhub.domain.errors import NotFound, ValidationError
from reviewhub.domain.identity import Authenticated, resolve_identity
from reviewhub.domain.products import validate_product_payload
from reviewhub.infrastructure.persistence import Database, parse_object_id, serialize_document

from ..auth import current_user_id, get_db, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/post", tags=["posts"])


# ── Collection ─────────────────────────────────────────────────

@router.get("")
def list_posts(db: Database = Depends(get_db)):
    return [serialize_document(product) for product in db.list_products()]


@router.post("", status_code=201)
def create_post(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
    db: Database = Depends(get_db),
):
    fields = validate_product_payload(payload)
    product = db.create_product(fields)
    logger.info(f"User {user_id} created product {product['_id']}")
    return serialize_document(product)


@router.put("")
def update_post(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
    db: Database = Depends(get_db),
):
    """Full replacement; the body must carry every field plus ``id``."""
    if not payload.get("id"):
        raise ValidationError("Product ID is required")
    product_id = parse_object_id(payload["id"], "Invalid product ID format")

    fields = validate_product_payload(payload)
    product = db.replace_product(product_id, fields)
    if product is None:
        raise NotFound("Product not found")

    logger.info(f"User {user_id} updated product {product_id}")
    return serialize_document(product)


@router.delete("")
def delete_post(
    raw_id: Optional[str] = Query(None, alias="id"),
    user_id: str = Depends(require_user),
    db: Database = Depends(get_db),
):
    if not raw_id:
        raise ValidationError("Product ID is required")
    product_id = parse_object_id(raw_id, "Invalid product ID format")

    logger.info(f"Delete request for product {product_id} by user {user_id}")
    product = db.delete_product(product_id)
    if product is None:
        raise NotFound("Product not found")

    return {
        "message": "Product deleted successfully",
        "deletedProduct": serialize_document(product),
    }


# ── Single post ────────────────────────────────────────────────

@router.get("/{product_id}")
def get_post(product_id: str, db: Database = Depends(get_db)):
    oid = parse_object_id(product_id, "Invalid product ID")
    product = db.get_product(oid)
    if product is None:
        raise NotFound("Product not found")
    return serialize_document(product)


@router.post("/{product_id}/like")
def toggle_like(product_id: str, request: Request, db: Database = Depends(get_db)):
    """Like or unlike; works for both logged-in and anonymous visitors."""
    oid = parse_object_id(product_id, "Invalid product ID")
    identity = resolve_identity(current_user_id(request), request.headers)

    liked, ledger = db.toggle_like(oid, identity)

    return {
        "success": True,
        "liked": liked,
        "likeCount": ledger.total,
        "isAuthenticated": isinstance(identity, Authenticated),
        "message": "Product liked" if liked else "Product unliked",
    }


@router.get("/{product_id}/like")
def like_status(product_id: str, request: Request, db: Database = Depends(get_db)):
    oid = parse_object_id(product_id, "Invalid product ID")
    identity = resolve_identity(current_user_id(request), request.headers)

    ledger = db.get_like_ledger(oid)

    return {
        "likeCount": ledger.total,
        "userHasLiked": ledger.has_liked(identity),
        "isAuthenticated": isinstance(identity, Authenticated),
        "authenticatedLikes": ledger.like_count,
        "anonymousLikes": ledger.anonymous_like_count,
    }
