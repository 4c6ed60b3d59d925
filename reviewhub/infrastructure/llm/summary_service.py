"""
Summary Service - LLM-Based Likes/Dislikes Generation
======================================================

ARCHITECTURAL DECISION:
- Uses the Google Gemini generateContent REST API over plain HTTP
- Asks for JSON only, then strips markdown fences before parsing
- Returns grouped likes and dislikes, each a heading with a few points

FAILURE BEHAVIOR:
- No API key: ConfigurationError (the rest of the app keeps working)
- Transport error: InternalError
- Unusable response: UpstreamParseError
- No automatic retry; the client decides whether to try again
"""

import json
import logging
import re
from typing import Any, List, Mapping, Optional, Sequence

import requests
from pydantic import BaseModel, Field

from reviewhub.domain.errors import (
    ConfigurationError,
    InternalError,
    InvalidArgument,
    UpstreamParseError,
)

from ..config import LLMSettings, get_settings

logger = logging.getLogger(__name__)

CODE_FENCE = re.compile(r"```(?:json)?\n?")


class LikeDislikePoint(BaseModel):
    heading: str
    points: List[str] = Field(default_factory=list)


class LikesDislikes(BaseModel):
    likes: List[LikeDislikePoint]
    dislikes: List[LikeDislikePoint]


class SummaryService:
    """
    Likes/dislikes summarisation of Reddit reviews.

    USAGE:
        service = SummaryService()
        result = service.summarize(reviews, product_title="Acme Kettle")
        print(result.likes[0].heading)
    """

    PROMPT_TEMPLATE = """You are analyzing Reddit reviews for a product{title_clause}. Based on these reviews, generate a comprehensive list of likes and dislikes.

Reddit Reviews:
{reviews_text}

Please analyze these reviews and provide:
1. A list of LIKES (positive aspects) - organized by category with headings
2. A list of DISLIKES (negative aspects) - organized by category with headings

For each category (heading), provide 2-4 specific points based on the reviews.

Return the response in the following JSON format ONLY (no markdown, no code blocks):
{{
  "likes": [
    {{
      "heading": "Category name for positive aspect",
      "points": ["Point 1", "Point 2", "Point 3"]
    }}
  ],
  "dislikes": [
    {{
      "heading": "Category name for negative aspect",
      "points": ["Point 1", "Point 2", "Point 3"]
    }}
  ]
}}

Important:
- Create 3-5 categories for likes and 3-5 categories for dislikes
- Each category should have 2-4 specific points
- Base your analysis strictly on the provided reviews
- Use clear, concise headings
- Make points specific and actionable
- Return ONLY the JSON object, no additional text or formatting"""

    def __init__(self, settings: Optional[LLMSettings] = None):
        """Initialize summary service with settings."""
        settings = settings or get_settings().llm
        self._api_key = settings.api_key
        self._api_url = settings.api_url.format(model=settings.model)
        self._model = settings.model
        self._temperature = settings.temperature
        self._timeout = settings.timeout_seconds
        self._max_reviews = settings.max_reviews
        self._max_comment_chars = settings.max_comment_chars

        if not self._api_key:
            logger.warning(
                "No GOOGLE_API_KEY set. "
                "Likes/dislikes generation will be unavailable."
            )

    def summarize(self, reviews: Any, product_title: Optional[str] = None) -> LikesDislikes:
        """
        Summarise reviews into likes and dislikes.

        Args:
            reviews: List of review dicts with ``comment`` and ``tag``.
            product_title: Optional product name to mention in the prompt.

        Returns:
            LikesDislikes parsed from the model output.
        """
        if not isinstance(reviews, list) or not reviews:
            raise InvalidArgument("Reviews array is required and must not be empty")

        if not self._api_key:
            raise ConfigurationError("GOOGLE_API_KEY environment variable is not configured")

        logger.info(f"Generating likes/dislikes with {self._model} from {min(len(reviews), self._max_reviews)} reviews")
        prompt = self.build_prompt(reviews, product_title)
        text = self._generate(prompt)
        return self.parse_response(text)

    def build_prompt(self, reviews: Sequence[Any], product_title: Optional[str] = None) -> str:
        """Render the prompt for at most ``max_reviews`` truncated reviews."""
        lines = []
        for idx, review in enumerate(reviews[: self._max_reviews], start=1):
            review = review if isinstance(review, Mapping) else {}
            comment = review.get("comment")
            comment = comment[: self._max_comment_chars] if isinstance(comment, str) else ""
            lines.append(f"Review {idx} ({review.get('tag', '')}):\n{comment}\n")

        title_clause = f' called "{product_title}"' if product_title else ""
        return self.PROMPT_TEMPLATE.format(
            title_clause=title_clause,
            reviews_text="\n".join(lines),
        )

    def _generate(self, prompt: str) -> str:
        """Call Gemini and return the text of the first candidate."""
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self._temperature},
        }

        try:
            response = requests.post(
                self._api_url,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self._api_key,
                },
                json=payload,
                timeout=self._timeout,
            )
            response.raise_for_status()

        except requests.Timeout as e:
            logger.warning(f"Gemini API timeout after {self._timeout}s")
            raise InternalError("An error occurred while generating likes and dislikes", details=str(e)) from e

        except requests.RequestException as e:
            logger.warning(f"Gemini API error: {e}")
            raise InternalError("An error occurred while generating likes and dislikes", details=str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamParseError("Invalid response from Google Gemini API (non-textual content)") from e

        text = self._extract_response_content(data)
        if text is None:
            logger.error(f"Invalid response structure from Gemini: {str(data)[:500]}")
            raise UpstreamParseError("Invalid response from Google Gemini API (non-textual content)")
        return text

    def _extract_response_content(self, data: Any) -> Optional[str]:
        """Concatenate the text parts of the first candidate, if any."""
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return None
        if not isinstance(parts, list):
            return None

        texts = [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
        if not texts:
            return None
        return "".join(texts)

    def parse_response(self, text: str) -> LikesDislikes:
        """Strip code fences and parse the likes/dislikes JSON."""
        cleaned = CODE_FENCE.sub("", text).strip()

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse AI JSON response: {cleaned[:200]}")
            raise UpstreamParseError(
                "Failed to parse AI response. Please try again.",
                details=cleaned[:500],
            ) from e

        if not isinstance(data, dict) or data.get("likes") is None or data.get("dislikes") is None:
            raise UpstreamParseError(
                "Invalid response structure from AI (missing likes/dislikes keys)",
                details=data,
            )

        if not isinstance(data["likes"], list) or not isinstance(data["dislikes"], list):
            raise UpstreamParseError("Likes and dislikes must be arrays", details=data)

        try:
            return LikesDislikes.model_validate(data)
        except ValueError as e:
            raise UpstreamParseError("Invalid likes/dislikes entries in AI response", details=data) from e
