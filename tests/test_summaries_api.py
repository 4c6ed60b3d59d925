import json
import unittest
from unittest import mock

from .support import ApiTestCase
from .test_summary_service import RESULT, gemini_reply

URL = "/api/generate-likes-dislikes"


class TestGenerateLikesDislikes(ApiTestCase):

    def test_empty_reviews(self):
        resp = self.client.post(URL, json={"reviews": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json(),
            {"success": False, "error": "Reviews array is required and must not be empty"},
        )

    def test_missing_body(self):
        resp = self.client.post(URL)
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])

    def test_malformed_bodies_keep_envelope(self):
        resp = self.client.post(URL, json={"reviews": [], "productTitle": 5})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json(),
            {"success": False, "error": "Reviews array is required and must not be empty"},
        )

        resp = self.client.post(URL, json=["not", "an", "object"])
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])

        resp = self.client.post(URL, content=b"{not json", headers={"content-type": "application/json"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "Invalid request body"})

    @mock.patch("reviewhub.infrastructure.llm.summary_service.requests.post")
    def test_non_string_title_is_used(self, post):
        post.return_value = gemini_reply(json.dumps(RESULT))

        resp = self.client.post(URL, json={"reviews": [{"comment": "ok", "tag": "neutral"}], "productTitle": 5})

        self.assertEqual(resp.status_code, 200)
        prompt = post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
        self.assertIn('called "5"', prompt)

    @mock.patch("reviewhub.infrastructure.llm.summary_service.requests.post")
    def test_success(self, post):
        post.return_value = gemini_reply(json.dumps(RESULT))

        resp = self.client.post(
            URL,
            json={"reviews": [{"comment": "Great", "tag": "positive"}], "productTitle": "Kettle"},
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "success": True,
                "data": RESULT,
                "message": "Likes and dislikes generated successfully",
            },
        )

    @mock.patch("reviewhub.infrastructure.llm.summary_service.requests.post")
    def test_parse_failure(self, post):
        post.return_value = gemini_reply("not json")
        resp = self.client.post(URL, json={"reviews": [{"comment": "Great", "tag": "positive"}]})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {
                "success": False,
                "error": "Failed to parse AI response. Please try again.",
                "details": "not json",
            },
        )


class TestGenerateWithoutKey(ApiTestCase):

    api_key = ""

    def test_missing_key(self):
        resp = self.client.post(URL, json={"reviews": [{"comment": "Great", "tag": "positive"}]})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {"success": False, "error": "GOOGLE_API_KEY environment variable is not configured"},
        )


if __name__ == "__main__":
    unittest.main()
