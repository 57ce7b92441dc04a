import json
import unittest

import httpx

from lokalfinds.core.exceptions import ImageUploadError
from lokalfinds.services.image import ImageHostService, build_transformation, get_optimized_image_url

CLOUD_URL = "https://res.cloudinary.com/x/image/upload/v1/pic.jpg"


class OptimizedImageUrlTests(unittest.TestCase):
    def test_inserts_transformation_after_upload_segment(self):
        url = get_optimized_image_url(CLOUD_URL, 200, 200, "auto", "auto")
        self.assertEqual(
            url,
            "https://res.cloudinary.com/x/image/upload/w_200,h_200,c_fill,q_auto,f_auto/v1/pic.jpg",
        )

    def test_defaults_to_400_square(self):
        url = get_optimized_image_url(CLOUD_URL)
        self.assertIn("/upload/w_400,h_400,c_fill,q_auto,f_auto/v1/", url)

    def test_explicit_quality_and_format(self):
        self.assertEqual(build_transformation(80, 60, 75, "webp"), "w_80,h_60,c_fill,q_75,f_webp")

    def test_non_host_urls_unchanged(self):
        for url in (
            "https://example.com/upload/pic.jpg",
            "file:///tmp/pic.jpg",
            "",
            None,
        ):
            with self.subTest(url=url):
                self.assertEqual(get_optimized_image_url(url, 200, 200), url)

    def test_only_first_upload_segment_rewritten(self):
        url = "https://res.cloudinary.com/x/image/upload/v1/upload/pic.jpg"
        self.assertEqual(
            get_optimized_image_url(url, 10, 10),
            "https://res.cloudinary.com/x/image/upload/w_10,h_10,c_fill,q_auto,f_auto/v1/upload/pic.jpg",
        )


class ImageHostServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_upload_posts_preset_and_returns_secure_url(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(
                200,
                json={
                    "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/products/abc.jpg",
                    "public_id": "products/abc",
                    "width": 640,
                    "height": 480,
                },
            )

        service = ImageHostService(
            cloud_name="demo",
            upload_preset="unsigned_preset",
            folder="products",
            transport=httpx.MockTransport(handler),
        )
        result = await service.upload_image(b"\xff\xd8\xff", filename="abc.jpg")

        self.assertEqual(seen["url"], "https://api.cloudinary.com/v1_1/demo/image/upload")
        self.assertIn(b"unsigned_preset", seen["body"])
        self.assertIn(b"abc.jpg", seen["body"])
        self.assertEqual(result.public_id, "products/abc")
        self.assertEqual(result.width, 640)
        self.assertTrue(result.url.startswith("https://res.cloudinary.com/demo/"))

    async def test_rejected_upload_raises_image_upload_error(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(400, text=json.dumps({"error": {"message": "Invalid preset"}}))
        )
        service = ImageHostService(cloud_name="demo", upload_preset="bad", transport=transport)

        with self.assertRaises(ImageUploadError) as ctx:
            await service.upload_image(b"data")
        self.assertIn("Invalid preset", ctx.exception.message)
        self.assertIsInstance(ctx.exception.cause, httpx.HTTPStatusError)

    async def test_missing_configuration(self):
        service = ImageHostService()
        service.cloud_name = None
        service.upload_preset = None
        with self.assertRaises(ImageUploadError):
            await service.upload_image(b"data")

    async def test_empty_file(self):
        service = ImageHostService(cloud_name="demo", upload_preset="p")
        with self.assertRaises(ImageUploadError) as ctx:
            await service.upload_image(b"")
        self.assertEqual(ctx.exception.message, "File is empty")


if __name__ == "__main__":
    unittest.main()
