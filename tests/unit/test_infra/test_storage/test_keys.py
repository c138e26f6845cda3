"""Unit tests for object key and URL helpers."""

import re

from minio_file_service.infra.storage.keys import (
    build_public_url,
    generate_file_key,
    generate_unique_key,
)


def test_unique_key_is_32_hex_chars():
    assert re.fullmatch(r"[0-9a-f]{32}", generate_unique_key())


def test_file_key_keeps_stem_and_extension():
    key = generate_file_key("product photo.png")

    assert re.fullmatch(r"product photo-[0-9a-f]{32}\.png", key)


def test_file_key_uses_only_last_extension():
    assert re.fullmatch(r"archive\.tar-[0-9a-f]{32}\.gz", generate_file_key("archive.tar.gz"))


def test_file_key_without_extension():
    assert re.fullmatch(r"README-[0-9a-f]{32}", generate_file_key("README"))


def test_file_key_drops_directories():
    assert generate_file_key("uploads/2024/a.jpg").startswith("a-")
    assert generate_file_key("C:\\Users\\me\\b.jpg").startswith("b-")


def test_public_url_is_path_style():
    assert (
        build_public_url("https://cdn.example.com/", "medusa-media", "a-1.jpg")
        == "https://cdn.example.com/medusa-media/a-1.jpg"
    )
