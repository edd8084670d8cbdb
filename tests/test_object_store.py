"""Tests for the boto3 object store wrapper using botocore's Stubber.

Copyright (c) Bryn Gwalad 2025
"""

import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import io
import unittest

import boto3
from botocore.response import StreamingBody
from botocore.stub import Stubber

from api.errors import NotFound, ObjectStoreFailure
from utils.object_store import ObjectStore
from utils.settings import Settings


def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="admin",
        aws_secret_access_key="adminadmin",
    )


class ObjectStoreTest(unittest.TestCase):
    def setUp(self):
        self.client = s3_client()
        self.stubber = Stubber(self.client)
        self.stubber.activate()
        self.store = ObjectStore(self.client, region="us-east-1")

    def tearDown(self):
        self.stubber.deactivate()

    def test_put_creates_missing_bucket(self):
        self.stubber.add_client_error(
            "head_bucket", service_error_code="404", http_status_code=404, expected_params={"Bucket": "files"}
        )
        self.stubber.add_response("create_bucket", {}, {"Bucket": "files"})
        self.stubber.add_response(
            "put_object", {}, {"Bucket": "files", "Key": "1-abc", "Body": b"\x01\x02\x03"}
        )

        self.store.put("files", "1-abc", b"\x01\x02\x03")

        self.stubber.assert_no_pending_responses()

    def test_put_into_existing_bucket(self):
        self.stubber.add_response("head_bucket", {}, {"Bucket": "item-1"})
        self.stubber.add_response("put_object", {}, {"Bucket": "item-1", "Key": "abc", "Body": b"data"})

        self.store.put("item-1", "abc", b"data")

        self.stubber.assert_no_pending_responses()

    def test_bucket_created_concurrently_is_not_an_error(self):
        self.stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
        self.stubber.add_client_error(
            "create_bucket", service_error_code="BucketAlreadyOwnedByYou", http_status_code=409
        )

        self.store.ensure_bucket("files")

        self.stubber.assert_no_pending_responses()

    def test_bucket_check_denied(self):
        self.stubber.add_client_error("head_bucket", service_error_code="403", http_status_code=403)

        with self.assertRaises(ObjectStoreFailure):
            self.store.ensure_bucket("files")

    def test_get_returns_body(self):
        self.stubber.add_response(
            "get_object",
            {"Body": StreamingBody(io.BytesIO(b"\x01\x02\x03"), 3)},
            {"Bucket": "files", "Key": "1-abc"},
        )

        self.assertEqual(self.store.get("files", "1-abc"), b"\x01\x02\x03")

    def test_get_missing_key_raises_not_found(self):
        self.stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)

        with self.assertRaises(NotFound):
            self.store.get("files", "1-abc")

    def test_get_other_failure(self):
        self.stubber.add_client_error("get_object", service_error_code="InternalError", http_status_code=500)

        with self.assertRaises(ObjectStoreFailure):
            self.store.get("files", "1-abc")

    def test_delete(self):
        self.stubber.add_response("delete_object", {}, {"Bucket": "files", "Key": "1-abc"})

        self.store.delete("files", "1-abc")

        self.stubber.assert_no_pending_responses()


class RegionalBucketTest(unittest.TestCase):
    def test_create_bucket_outside_us_east_1_sets_location(self):
        client = s3_client()
        store = ObjectStore(client, region="no")
        with Stubber(client) as stubber:
            stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
            stubber.add_response(
                "create_bucket",
                {},
                {"Bucket": "item-5", "CreateBucketConfiguration": {"LocationConstraint": "no"}},
            )

            store.ensure_bucket("item-5")

            stubber.assert_no_pending_responses()

    def test_from_settings_builds_client(self):
        settings = Settings(
            s3_endpoint_url="http://localhost:9000",
            s3_region="us-east-1",
            s3_access_key="admin",
            s3_secret_key="adminadmin",
        )

        store = ObjectStore.from_settings(settings)

        self.assertEqual(store._client.meta.endpoint_url, "http://localhost:9000")
        self.assertEqual(store._client.meta.region_name, "us-east-1")


if __name__ == "__main__":
    unittest.main()
