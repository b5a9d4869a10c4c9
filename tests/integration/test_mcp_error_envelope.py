"""Wire-level tests for the structured error envelope returned by terradocs tools."""

from __future__ import annotations

import json

import pytest

from tests.integration.test_mcp_wire_contract import _call

# The subprocess environment points both upstreams at a loopback address the
# transport refuses, so every upstream request fails before leaving the host.
AWS_VERSIONS = "http://127.0.0.1:1/v1/providers/hashicorp/aws/versions"


def _error(response: dict) -> dict:
    assert response["result"]["isError"] is True
    text_payload = response["result"]["content"][0]["text"]
    assert "Error executing tool" not in text_payload
    return json.loads(text_payload)["error"]


@pytest.mark.parametrize(
    ("tool", "arguments", "message"),
    [
        ("get_resource_docs", {"name": "not a resource!"}, "Invalid resource name"),
        ("get_resource_docs", {"name": "aws_s3_bucket", "kind": "module"}, "Invalid kind"),
        ("get_resource_example", {"name": "aws_s3_bucket", "index": -1}, "index"),
        ("search_resources", {"query": "bucket", "kind": "provider"}, "Invalid kind"),
    ],
)
def test_invalid_input_envelope(
    subprocess_env: dict[str, str], tool: str, arguments: dict, message: str
) -> None:
    error = _error(_call(subprocess_env, tool, arguments))
    assert error["code"] == "INVALID_INPUT"
    assert error["recoverable"] is False
    assert message in error["message"]
    assert error["suggestion"]
    assert "url" not in error


def test_upstream_failure_envelope_carries_url(subprocess_env: dict[str, str]) -> None:
    error = _error(_call(subprocess_env, "get_resource_docs", {"name": "aws_s3_bucket"}))
    assert error["code"] == "NETWORK_ERROR"
    assert error["recoverable"] is True
    assert error["url"] == AWS_VERSIONS


def test_unclaimed_name_envelope(subprocess_env: dict[str, str]) -> None:
    error = _error(
        _call(subprocess_env, "get_resource_example", {"name": "oci_core_instance"})
    )
    assert error["code"] == "NOT_FOUND"
    assert error["recoverable"] is False
    assert "url" not in error
