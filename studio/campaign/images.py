"""
Helpers for the base64 image payloads exchanged with the browser and Gemini.

Payloads arrive either as raw base64 or as data URIs
(``data:image/png;base64,....``). Everything sent to Gemini is raw base64.
"""

DEFAULT_MIME = "image/jpeg"


def strip_data_uri(payload: str) -> str:
    """Drop everything up to and including the first comma, if any."""
    if "," in payload:
        return payload.split(",", 1)[1]
    return payload


def guess_mime(payload: str) -> str:
    if payload.startswith("data:") and "," in payload:
        header = payload.split(",", 1)[0]
        mime = header[len("data:"):].split(";")[0]
        if mime:
            return mime
    return DEFAULT_MIME


def inline_part(payload: str) -> dict:
    """Build a Gemini ``inlineData`` part from a browser payload."""
    return {
        "inlineData": {
            "mimeType": guess_mime(payload),
            "data": strip_data_uri(payload),
        }
    }


def to_data_uri(data: str, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{data}"
