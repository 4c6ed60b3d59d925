"""
Product Validation
==================

Turns a raw JSON payload into a clean ``ProductFields`` model or raises
``ValidationError`` with a message the client can show as-is.

Used for both create and update. Updates are full replacements, so the same
rules apply to every PUT.
"""

import re
from typing import Any, Dict, List, Literal, Mapping, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError

PRICE_PATTERN = re.compile(r"^\$?\d+(\.\d{2})?$")

REVIEW_TAGS = ("positive", "negative", "neutral")

MAX_PHOTOS = 5
MAX_REDDIT_REVIEWS = 10
DEFAULT_SCORE = 50

TITLE_LENGTH = (3, 100)
DESCRIPTION_LENGTH = (10, 2000)
LINK_TEXT_MAX = 50

REQUIRED_FIELDS = (
    "productTitle",
    "productDescription",
    "productPrice",
    "affiliateLink",
    "affiliateLinkText",
)


class RedditReview(BaseModel):
    comment: str
    tag: Literal["positive", "negative", "neutral"]
    link: str
    author: str
    subreddit: str


class ProductFields(BaseModel):
    """Validated, client-editable product fields (wire names as aliases)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., alias="productTitle")
    description: str = Field(..., alias="productDescription")
    photos: List[str] = Field(default_factory=list, alias="productPhotos")
    price: str = Field(..., alias="productPrice")
    affiliate_link: str = Field(..., alias="affiliateLink")
    affiliate_link_text: str = Field(..., alias="affiliateLinkText")
    pros: List[str]
    cons: List[str]
    reddit_reviews: List[RedditReview] = Field(default_factory=list, alias="redditReviews")
    score: Union[int, float] = Field(DEFAULT_SCORE, alias="productScore")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def is_valid_http_url(raw: Any) -> bool:
    """Absolute http(s) URL with a host."""
    if not isinstance(raw, str) or not raw.strip():
        return False
    try:
        parsed = urlparse(raw.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_price(raw: str) -> bool:
    return bool(PRICE_PATTERN.match(raw.strip()))


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _non_blank(items: Any) -> List[str]:
    if not isinstance(items, list):
        return []
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def _accepted_reviews(items: Any) -> List[RedditReview]:
    """Keep only complete reviews with a known tag; drop the rest."""
    if not isinstance(items, list):
        return []

    accepted = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        values = {name: _text(item.get(name)) for name in ("comment", "link", "author", "subreddit")}
        if not all(values.values()):
            continue
        if item.get("tag") not in REVIEW_TAGS:
            continue
        accepted.append(RedditReview(tag=item["tag"], **values))
    return accepted


def _score(raw: Any) -> Union[int, float]:
    if raw is None:
        return DEFAULT_SCORE
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValidationError("productScore must be a number")
    if not 0 <= raw <= 100:
        raise ValidationError("productScore must be between 0 and 100")
    return raw


def _check_length(name: str, value: str, minimum: Optional[int], maximum: int) -> None:
    if minimum is not None and len(value) < minimum:
        raise ValidationError(f"{name} must be between {minimum} and {maximum} characters")
    if len(value) > maximum:
        if minimum is None:
            raise ValidationError(f"{name} must be at most {maximum} characters")
        raise ValidationError(f"{name} must be between {minimum} and {maximum} characters")


def validate_product_payload(payload: Mapping[str, Any]) -> ProductFields:
    """
    Validate a create/update payload.

    Args:
        payload: Decoded JSON body using the wire field names.

    Returns:
        ProductFields with trimmed strings, filtered lists and a default score.

    Raises:
        ValidationError: naming the first rule the payload breaks.
    """
    fields = {name: _text(payload.get(name)) for name in REQUIRED_FIELDS}
    if not all(fields.values()):
        raise ValidationError("Missing required fields")

    pros = _non_blank(payload.get("pros"))
    if not pros:
        raise ValidationError("At least one pro is required")

    cons = _non_blank(payload.get("cons"))
    if not cons:
        raise ValidationError("At least one con is required")

    reviews = _accepted_reviews(payload.get("redditReviews"))
    for review in reviews:
        if not is_valid_http_url(review.link):
            raise ValidationError("Invalid Reddit review URL format")
    if len(reviews) > MAX_REDDIT_REVIEWS:
        raise ValidationError(f"Maximum {MAX_REDDIT_REVIEWS} Reddit reviews allowed")

    if not is_valid_price(fields["productPrice"]):
        raise ValidationError("Invalid price format")

    if not is_valid_http_url(fields["affiliateLink"]):
        raise ValidationError("Invalid URL format for affiliateLink")

    _check_length("productTitle", fields["productTitle"], *TITLE_LENGTH)
    _check_length("productDescription", fields["productDescription"], *DESCRIPTION_LENGTH)
    _check_length("affiliateLinkText", fields["affiliateLinkText"], None, LINK_TEXT_MAX)

    photos = _non_blank(payload.get("productPhotos"))
    if len(photos) > MAX_PHOTOS:
        raise ValidationError(f"Maximum {MAX_PHOTOS} photos allowed")

    return ProductFields(
        **fields,
        productPhotos=photos,
        pros=pros,
        cons=cons,
        redditReviews=reviews,
        productScore=_score(payload.get("productScore")),
    )
