"""Formatting utilities for test report generation.

This module renders the last HTTP exchange of a test as plain text
sections for pytest reports.
"""

import json

import httpx


def _format_body(content: bytes, content_type: str) -> str:
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return f"<Binary content: {len(content)} bytes>"

    if "application/json" in content_type:
        try:
            return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
        except json.JSONDecodeError:
            pass
    return text


def format_request(request: httpx.Request) -> str:
    lines = [f"{request.method} {request.url}"]

    for key, value in request.headers.items():
        lines.append(f"{key}: {value}")

    content = request.content
    if content:
        lines.append("")
        lines.append(_format_body(content, request.headers.get("content-type", "")))

    return "\n".join(lines)


def format_response(response: httpx.Response) -> str:
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]

    for key, value in response.headers.items():
        lines.append(f"{key}: {value}")

    lines.append("")

    try:
        content = response.content
    except httpx.ResponseNotRead:
        lines.append("<Body consumed by assertions>" if response.is_stream_consumed else "<Body not read>")
        return "\n".join(lines)

    if content:
        lines.append(_format_body(content, response.headers.get("content-type", "")))

    return "\n".join(lines)
