"""
Tests for studio/campaign/images.py — base64 payload handling.
"""

import pytest

from studio.campaign.images import guess_mime, inline_part, strip_data_uri, to_data_uri


@pytest.mark.parametrize("payload, expected", [
    ("data:image/png;base64,iVBORw0KGgo=", "iVBORw0KGgo="),
    ("iVBORw0KGgo=", "iVBORw0KGgo="),
    ("data:image/jpeg;base64,", ""),
])
def test_strip_data_uri(payload, expected):
    assert strip_data_uri(payload) == expected


@pytest.mark.parametrize("payload, expected", [
    ("data:image/png;base64,AAAA", "image/png"),
    ("data:image/webp;base64,AAAA", "image/webp"),
    ("AAAA", "image/jpeg"),
    ("data:;base64,AAAA", "image/jpeg"),
])
def test_guess_mime(payload, expected):
    assert guess_mime(payload) == expected


def test_inline_part():
    assert inline_part("data:image/png;base64,QUJD") == {
        "inlineData": {"mimeType": "image/png", "data": "QUJD"}
    }


def test_to_data_uri():
    assert to_data_uri("QUJD", "image/webp") == "data:image/webp;base64,QUJD"
    assert to_data_uri("QUJD") == "data:image/png;base64,QUJD"
