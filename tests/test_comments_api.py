import unittest

from bson import ObjectId

from .support import ApiTestCase


class TestComments(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.video_id = str(ObjectId())

    def post_comment(self, user_id, review="Nice review"):
        return self.client.post(
            "/api/auth/comment",
            json={"review": review, "videoId": self.video_id, "userId": user_id},
        )

    def test_list_without_comments_is_empty(self):
        resp = self.client.get("/api/auth/comment", params={"videoId": self.video_id})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])

    def test_list_requires_valid_video_id(self):
        resp = self.client.get("/api/auth/comment")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "videoId query parameter is required"})

        resp = self.client.get("/api/auth/comment", params={"videoId": "abc"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid videoId format"})

    def test_create_requires_session(self):
        resp = self.post_comment(str(ObjectId()))
        self.assertEqual(resp.status_code, 401)

    def test_create_and_list_newest_first(self):
        user = self.register_and_login()

        first = self.post_comment(user["id"], "first")
        self.assertEqual(first.status_code, 200)
        body = first.json()
        self.assertEqual(body["review"], "first")
        self.assertEqual(body["videoId"], self.video_id)
        self.assertEqual(body["userId"], user["id"])

        second = self.post_comment(user["id"], "second").json()

        listing = self.client.get("/api/auth/comment", params={"videoId": self.video_id}).json()
        self.assertEqual([c["_id"] for c in listing], [second["_id"], body["_id"]])

    def test_create_validation(self):
        user = self.register_and_login()

        resp = self.post_comment(user["id"], review="   ")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Missing required fields"})

        resp = self.post_comment("nope")
        self.assertEqual(resp.json(), {"error": "Invalid userId format"})

        self.video_id = "nope"
        resp = self.post_comment(user["id"])
        self.assertEqual(resp.json(), {"error": "Invalid videoId format"})


if __name__ == "__main__":
    unittest.main()
