from __future__ import annotations

import pytest

from setupfordebug.core.rewrite import rewrite_debug_url

REMOTE = "http://debug.example.edu"


def test_rewrite_keeps_port_path_and_query() -> None:
    assert (
        rewrite_debug_url("http://localhost:8080/MyApp/default.aspx?x=1", REMOTE)
        == "http://debug.example.edu:8080/MyApp/default.aspx?x=1"
    )


def test_rewrite_replaces_every_occurrence() -> None:
    value = "http://localhost:8080/a http://localhost:9090/b"

    assert rewrite_debug_url(value, REMOTE) == (
        "http://debug.example.edu:8080/a http://debug.example.edu:9090/b"
    )


def test_rewrite_is_idempotent() -> None:
    once = rewrite_debug_url("http://localhost:8080/MyApp", REMOTE)

    assert rewrite_debug_url(once, REMOTE) == once


@pytest.mark.parametrize(
    "value",
    [
        "http://LOCALHOST:8080/MyApp",
        "https://localhost:44300/",
        "http://127.0.0.1:8080/",
        "",
    ],
)
def test_rewrite_passes_through_values_without_exact_token(value: str) -> None:
    assert rewrite_debug_url(value, REMOTE) == value


def test_rewrite_is_prefix_style_not_host_aware() -> None:
    assert rewrite_debug_url("http://localhostname/", REMOTE) == "http://debug.example.eduname/"


def test_rewrite_custom_loopback_token() -> None:
    assert (
        rewrite_debug_url("http://127.0.0.1:8080/", REMOTE, loopback_host="http://127.0.0.1")
        == "http://debug.example.edu:8080/"
    )


def test_rewrite_rejects_empty_loopback_token() -> None:
    with pytest.raises(ValueError):
        rewrite_debug_url("http://localhost/", REMOTE, loopback_host="")


def test_rewrite_default_remote_host() -> None:
    assert rewrite_debug_url("http://localhost:1/") == "http://debug.example.edu:1/"
