from __future__ import annotations

import logging

import pytest

from setupfordebug.core.extractor import extract_debug_urls, join_debug_urls, read_project_flavors
from setupfordebug.core.types import DescriptorNotFoundError, MalformedDescriptorError
from xml_samples import CSHARP_PROJECT, WAP_FLAVOR, project_xml


def test_extract_resolves_msbuild_default_namespace(write_file) -> None:
    descriptor = write_file("Web.csproj", project_xml("http://localhost:8080/MyApp"))

    assert extract_debug_urls(descriptor) == ("http://localhost:8080/MyApp",)


def test_extract_handles_descriptor_without_namespace(write_file) -> None:
    descriptor = write_file(
        "Web.csproj", project_xml("http://localhost:5000/", namespace=None)
    )

    assert extract_debug_urls(descriptor) == ("http://localhost:5000/",)


def test_extract_ignores_elements_outside_default_namespace(write_file) -> None:
    descriptor = write_file(
        "Web.csproj",
        '<Project xmlns="urn:project" xmlns:x="urn:other">'
        "<x:IISUrl>http://localhost:1/</x:IISUrl>"
        "<IISUrl>http://localhost:2/</IISUrl>"
        "</Project>",
    )

    assert extract_debug_urls(descriptor) == ("http://localhost:2/",)


def test_extract_returns_empty_tuple_when_no_url(write_file) -> None:
    descriptor = write_file("Web.csproj", project_xml())

    assert extract_debug_urls(descriptor) == ()


def test_extract_preserves_document_order(write_file) -> None:
    descriptor = write_file(
        "Web.csproj",
        project_xml("http://localhost:1/first", "http://localhost:2/second", ""),
    )

    assert extract_debug_urls(descriptor) == (
        "http://localhost:1/first",
        "http://localhost:2/second",
        "",
    )


def test_extract_supports_custom_element_name(write_file) -> None:
    descriptor = write_file(
        "Web.csproj", "<Project><DevUrl>http://localhost:9/</DevUrl></Project>"
    )

    assert extract_debug_urls(descriptor, element_name="DevUrl") == ("http://localhost:9/",)


def test_extract_missing_descriptor(tmp_path) -> None:
    with pytest.raises(DescriptorNotFoundError) as exc:
        extract_debug_urls(tmp_path / "Missing.csproj")

    assert exc.value.path.name == "Missing.csproj"


def test_extract_malformed_descriptor(write_file) -> None:
    descriptor = write_file("Web.csproj", "<Project><IISUrl></Project>")

    with pytest.raises(MalformedDescriptorError) as exc:
        extract_debug_urls(descriptor)

    assert "not well-formed" in exc.value.reason


def test_extract_rejects_entity_declarations(write_file) -> None:
    descriptor = write_file(
        "Web.csproj",
        '<!DOCTYPE Project [<!ENTITY host "localhost">]>'
        "<Project><IISUrl>http://&host;/</IISUrl></Project>",
    )

    with pytest.raises(MalformedDescriptorError) as exc:
        extract_debug_urls(descriptor)

    assert "forbidden" in exc.value.reason


def test_join_uses_newline_and_warns_on_multiple(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="setupfordebug.core.extractor"):
        joined = join_debug_urls(["http://localhost:1/", "http://localhost:2/"])

    assert joined == "http://localhost:1/\nhttp://localhost:2/"
    assert "joining" in caplog.text


def test_join_single_value_is_unchanged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert join_debug_urls(["http://localhost:1/"]) == "http://localhost:1/"
        assert join_debug_urls([]) == ""

    assert not caplog.records


def test_read_project_flavors_keeps_order_and_dedupes(write_file) -> None:
    guids = f"{WAP_FLAVOR};{CSHARP_PROJECT}; {WAP_FLAVOR.upper()} ;"
    descriptor = write_file("Web.csproj", project_xml(type_guids=guids))

    assert read_project_flavors(descriptor) == (WAP_FLAVOR, CSHARP_PROJECT)


def test_read_project_flavors_without_property(write_file) -> None:
    descriptor = write_file("Web.csproj", project_xml())

    assert read_project_flavors(descriptor) == ()


def test_extract_reads_text_around_comments(write_file) -> None:
    descriptor = write_file(
        "Web.csproj",
        "<Project><IISUrl><!-- dev -->http://localhost:8080/App</IISUrl></Project>",
    )

    assert extract_debug_urls(descriptor) == ("http://localhost:8080/App",)
