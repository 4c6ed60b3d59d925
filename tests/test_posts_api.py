import unittest

from bson import ObjectId

from .support import ApiTestCase, product_payload


class TestPostsAuth(ApiTestCase):

    def test_writes_require_session(self):
        resp = self.client.post("/api/auth/post", json=product_payload())
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized action"})

        resp = self.client.put("/api/auth/post", json=dict(product_payload(), id=str(ObjectId())))
        self.assertEqual(resp.status_code, 401)

        resp = self.client.delete("/api/auth/post", params={"id": str(ObjectId())})
        self.assertEqual(resp.status_code, 401)

    def test_logout_ends_session(self):
        self.register_and_login()
        self.client.post("/api/auth/logout")
        resp = self.client.post("/api/auth/post", json=product_payload())
        self.assertEqual(resp.status_code, 401)


class TestPostsCrud(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register_and_login()

    def test_create_returns_document(self):
        product = self.create_product()
        self.assertTrue(ObjectId.is_valid(product["_id"]))
        self.assertEqual(product["productTitle"], "Acme Kettle")
        self.assertEqual(product["likeCount"], 0)
        self.assertEqual(product["anonymousLikedBy"], [])

    def test_create_without_pros(self):
        resp = self.client.post("/api/auth/post", json=product_payload(pros=[]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "At least one pro is required"})

    def test_create_with_bad_price(self):
        resp = self.client.post("/api/auth/post", json=product_payload(productPrice="99.999"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid price format"})

    def test_create_with_unparseable_links(self):
        review = dict(product_payload()["redditReviews"][0], link="https://[reddit")
        resp = self.client.post("/api/auth/post", json=product_payload(redditReviews=[review]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid Reddit review URL format"})

        resp = self.client.post("/api/auth/post", json=product_payload(affiliateLink="http://[::1"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid URL format for affiliateLink"})

    def test_list_and_get(self):
        first = self.create_product(productTitle="First")
        second = self.create_product(productTitle="Second")

        listing = self.client.get("/api/auth/post").json()
        self.assertEqual([p["_id"] for p in listing], [second["_id"], first["_id"]])

        resp = self.client.get(f"/api/auth/post/{first['_id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["productTitle"], "First")

    def test_get_invalid_and_missing(self):
        resp = self.client.get("/api/auth/post/not-an-id")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid product ID"})

        resp = self.client.get(f"/api/auth/post/{ObjectId()}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Product not found"})

    def test_update(self):
        product = self.create_product()
        resp = self.client.put(
            "/api/auth/post",
            json=dict(product_payload(productTitle="Renamed"), id=product["_id"]),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["productTitle"], "Renamed")

    def test_update_id_errors(self):
        resp = self.client.put("/api/auth/post", json=product_payload())
        self.assertEqual(resp.json(), {"error": "Product ID is required"})
        self.assertEqual(resp.status_code, 400)

        resp = self.client.put("/api/auth/post", json=dict(product_payload(), id="xyz"))
        self.assertEqual(resp.json(), {"error": "Invalid product ID format"})

        resp = self.client.put("/api/auth/post", json=dict(product_payload(), id=str(ObjectId())))
        self.assertEqual(resp.status_code, 404)

    def test_update_is_validated(self):
        product = self.create_product()
        resp = self.client.put(
            "/api/auth/post",
            json=dict(product_payload(cons=[]), id=product["_id"]),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "At least one con is required"})

    def test_delete(self):
        product = self.create_product()
        resp = self.client.delete("/api/auth/post", params={"id": product["_id"]})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["message"], "Product deleted successfully")
        self.assertEqual(body["deletedProduct"]["_id"], product["_id"])

        resp = self.client.delete("/api/auth/post", params={"id": product["_id"]})
        self.assertEqual(resp.status_code, 404)

    def test_delete_id_errors(self):
        resp = self.client.delete("/api/auth/post")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Product ID is required"})

        resp = self.client.delete("/api/auth/post", params={"id": "xyz"})
        self.assertEqual(resp.json(), {"error": "Invalid product ID format"})

    def test_non_object_body(self):
        resp = self.client.post("/api/auth/post", json=["not", "an", "object"])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Invalid request body")


if __name__ == "__main__":
    unittest.main()
