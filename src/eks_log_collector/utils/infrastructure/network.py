# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
HTTP helpers for the node-local endpoints the collector queries.

This module provides utilities to:
- Fetch plain-text resources with a short timeout
- Look up the EC2 instance identifier from the instance metadata service,
  using an IMDSv2 session token when one can be obtained
"""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

METADATA_TOKEN_HEADER = "X-aws-ec2-metadata-token"
METADATA_TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"


def fetch_text(url: str, timeout: float = 3.0, headers: Optional[dict] = None) -> str:
    """
    GET ``url`` and return the response body as text.

    Args:
        url: Resource to fetch
        timeout: Connect and read timeout in seconds
        headers: Optional request headers

    Returns:
        The response body

    Raises:
        requests.exceptions.RequestException: On connection errors, timeouts and non-2xx responses
    """
    response = requests.get(url, timeout=timeout, headers=headers)
    response.raise_for_status()
    return response.text


def get_metadata_token(token_url: str, timeout: float = 3.0, ttl: int = 60) -> Optional[str]:
    """
    Request an IMDSv2 session token.

    Returns:
        The token, or None when IMDSv2 is unavailable
    """
    try:
        response = requests.put(token_url, timeout=timeout, headers={METADATA_TOKEN_TTL_HEADER: str(ttl)})
        if response.status_code == 200 and response.text:
            return response.text.strip()
        logger.debug(f"Metadata token request returned {response.status_code}")
    except requests.exceptions.RequestException as e:
        logger.debug(f"Metadata token request failed: {e}")
    return None


def get_instance_id(metadata_url: str, token_url: Optional[str] = None, timeout: float = 3.0) -> str:
    """
    Look up the instance identifier from the instance metadata service.

    Any failure (no route, refused connection, timeout, error status) is
    treated as "unknown" and yields an empty string.

    Args:
        metadata_url: Full URL of the instance-id resource
        token_url: IMDSv2 token URL, skipped when None
        timeout: Timeout for each request in seconds

    Returns:
        The instance identifier, or "" when it could not be obtained
    """
    headers = None
    if token_url:
        token = get_metadata_token(token_url, timeout=timeout)
        if token:
            headers = {METADATA_TOKEN_HEADER: token}

    try:
        instance_id = fetch_text(metadata_url, timeout=timeout, headers=headers).strip()
        logger.debug(f"Instance id from metadata service: {instance_id}")
        return instance_id
    except requests.exceptions.RequestException as e:
        logger.warning(f"Unable to query instance metadata: {e}")
        return ""
