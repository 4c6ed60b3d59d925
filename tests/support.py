from __future__ import annotations

import unittest
from typing import Any, Dict, Optional

import mongomock
from fastapi.testclient import TestClient

from reviewhub.infrastructure.config import DatabaseSettings, LLMSettings, SessionSettings, Settings
from reviewhub.infrastructure.llm import SummaryService
from reviewhub.infrastructure.persistence import Database
from reviewhub.web.app import create_app

BROWSER_HEADERS = {
    "user-agent": "UA1",
    "accept-language": "en-US",
    "accept-encoding": "gzip",
}


def make_settings(api_key: str = "test-key") -> Settings:
    return Settings(
        database=DatabaseSettings(url="mongodb://unused", name="reviewhub_test"),
        llm=LLMSettings(api_key=api_key),
        session=SessionSettings(secret_key="test-secret"),
    )


def make_db() -> Database:
    db = Database(client=mongomock.MongoClient(), name="reviewhub_test")
    db.init()
    return db


def product_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "productTitle": "Acme Kettle",
        "productDescription": "A stainless kettle that boils fast.",
        "productPhotos": ["https://img.example.com/kettle.jpg"],
        "productPrice": "49.99",
        "affiliateLink": "https://example.com/x",
        "affiliateLinkText": "Buy on Example",
        "pros": ["Fast", "Quiet"],
        "cons": ["Pricey"],
        "redditReviews": [
            {
                "comment": "Boils in two minutes.",
                "tag": "positive",
                "link": "https://reddit.com/r/tea/comments/abc",
                "author": "teafan",
                "subreddit": "tea",
            }
        ],
        "productScore": 80,
    }
    payload.update(overrides)
    return payload


class ApiTestCase(unittest.TestCase):
    """Fresh in-memory database and client per test."""

    api_key = "test-key"

    def setUp(self) -> None:
        self.db = make_db()
        self.settings = make_settings(api_key=self.api_key)
        self.app = create_app(
            settings=self.settings,
            database=self.db,
            summary_service=SummaryService(self.settings.llm),
        )
        self.client = TestClient(self.app)

    def register(self, email: str = "admin@example.com", password: str = "s3cret!", name: str = "Admin") -> Dict[str, Any]:
        resp = self.client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "Name": name},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["user"]

    def login(self, email: str = "admin@example.com", password: str = "s3cret!") -> None:
        resp = self.client.post("/api/auth/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)

    def register_and_login(self, email: str = "admin@example.com") -> Dict[str, Any]:
        user = self.register(email=email)
        self.login(email=email)
        return user

    def create_product(self, **overrides: Any) -> Dict[str, Any]:
        resp = self.client.post("/api/auth/post", json=product_payload(**overrides))
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def anonymous_client(self, headers: Optional[Dict[str, str]] = None) -> TestClient:
        return TestClient(self.app, headers=headers or BROWSER_HEADERS)
