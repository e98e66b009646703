from rest_framework import status
from rest_framework.test import APITestCase


class HealthCheckTests(APITestCase):
    def test_health_is_public(self):
        resp = self.client.get("/api/health/")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["db"])
        self.assertIn(resp.data["notice_delivery"], ("eager", "broker"))
