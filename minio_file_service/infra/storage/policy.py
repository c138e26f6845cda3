"""Bucket policy documents applied during bucket bootstrap."""

from __future__ import annotations

import json
from typing import Any

POLICY_VERSION = "2012-10-17"


def public_read_policy(bucket: str) -> dict[str, Any]:
    """Build a policy granting anonymous ``s3:GetObject`` on every object in ``bucket``."""
    return {
        "Version": POLICY_VERSION,
        "Statement": [
            {
                "Sid": "PublicRead",
                "Effect": "Allow",
                "Principal": "*",
                "Action": ["s3:GetObject"],
                "Resource": [f"arn:aws:s3:::{bucket}/*"],
            }
        ],
    }


def public_read_policy_json(bucket: str) -> str:
    """Serialized form of :func:`public_read_policy`, as expected by ``put_bucket_policy``."""
    return json.dumps(public_read_policy(bucket))
