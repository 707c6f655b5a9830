"""
Integration tests for the role endpoints.

    GET  /api/accounts/roles/            role-list
    GET  /api/accounts/roles/{id}/       role-detail
    POST /api/accounts/roles/{id}/image/ role-upload-image
"""

from __future__ import annotations

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Actor, RoleImage
from core.constants import ROLE_IMAGE_MAX_BYTES

_PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def _client_for(actor: Actor) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(actor).access_token}")
    return client


def _png(size: int = 64, name: str = "badge.png", content_type: str = "image/png"):
    body = _PNG_HEADER + b"\x00" * max(size - len(_PNG_HEADER), 0)
    return SimpleUploadedFile(name, body, content_type=content_type)


class TestRoleListing(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.citizen = Actor.objects.create_user(
            username="pell", email="pell@bureau.test", password="Vault7key",
        )

    def setUp(self):
        cache.clear()

    def test_lists_all_roles_highest_first(self):
        resp = _client_for(self.citizen).get(reverse("accounts:role-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [role["id"] for role in resp.data],
            ["sentinel", "high_judge", "judge", "legal_authority", "bounty_hunter", "citizen"],
        )
        self.assertIsNone(resp.data[0]["image_url"])

    def test_retrieve_role_lists_permissions(self):
        resp = _client_for(self.citizen).get(reverse("accounts:role-detail", kwargs={"pk": "citizen"}))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["permissions"], ["can_report_incidents"])

    def test_unknown_role_not_found(self):
        resp = _client_for(self.citizen).get(reverse("accounts:role-detail", kwargs={"pk": "emperor"}))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class TestRoleImageUpload(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.sentinel = Actor.objects.create_user(
            username="overseer", email="overseer@bureau.test", password="Vault7key",
            role="sentinel",
        )
        cls.judge = Actor.objects.create_user(
            username="judge", email="judge@bureau.test", password="Vault7key", role="judge",
        )

    def setUp(self):
        cache.clear()
        self.url = reverse("accounts:role-upload-image", kwargs={"pk": "judge"})

    def tearDown(self):
        cache.clear()

    def test_upload_attaches_image_url(self):
        resp = _client_for(self.sentinel).post(self.url, {"image": _png()}, format="multipart")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["image_url"].startswith("/media/role_images/judge"))
        self.assertEqual(RoleImage.objects.get(role="judge").uploaded_by, self.sentinel)

    def test_listing_reflects_upload(self):
        client = _client_for(self.sentinel)
        # Prime the cache before the upload.
        client.get(reverse("accounts:role-list"))

        client.post(self.url, {"image": _png()}, format="multipart")
        resp = client.get(reverse("accounts:role-list"))

        by_id = {role["id"]: role for role in resp.data}
        self.assertIsNotNone(by_id["judge"]["image_url"])
        self.assertIsNone(by_id["citizen"]["image_url"])

    def test_second_upload_replaces_first(self):
        client = _client_for(self.sentinel)
        client.post(self.url, {"image": _png()}, format="multipart")
        client.post(self.url, {"image": _png(name="badge.jpg", content_type="image/jpeg")}, format="multipart")

        self.assertEqual(RoleImage.objects.filter(role="judge").count(), 1)
        self.assertIn(".jpg", RoleImage.objects.get(role="judge").image_url)

    def test_oversized_image_rejected(self):
        resp = _client_for(self.sentinel).post(
            self.url, {"image": _png(size=ROLE_IMAGE_MAX_BYTES + 1)}, format="multipart",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(RoleImage.objects.exists())

    def test_unsupported_type_rejected(self):
        gif = SimpleUploadedFile("badge.gif", b"GIF89a", content_type="image/gif")
        resp = _client_for(self.sentinel).post(self.url, {"image": gif}, format="multipart")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_upload_capability(self):
        resp = _client_for(self.judge).post(self.url, {"image": _png()}, format="multipart")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(RoleImage.objects.exists())
