"""Tests for magic-byte image validation."""

from globetrotter.utils.file_validation import validate_image

MAX = 1024

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 32
GIF = b"GIF89a" + b"\x00" * 32


def test_png_detected():
    assert validate_image(PNG, "a.png", MAX) == (True, "png")


def test_jpeg_detected_regardless_of_name():
    assert validate_image(JPEG, "photo.gif", MAX) == (True, "jpg")


def test_gif_detected():
    assert validate_image(GIF, "anim.gif", MAX) == (True, "gif")


def test_empty_rejected():
    assert validate_image(b"", "a.png", MAX) == (False, "Empty file")


def test_oversize_rejected():
    ok, reason = validate_image(PNG, "a.png", 10)
    assert not ok
    assert "too large" in reason


def test_text_rejected():
    ok, reason = validate_image(b"hello, this is not an image", "a.png", MAX)
    assert not ok
    assert reason == "Unsupported file type: unknown"


def test_pdf_rejected():
    ok, reason = validate_image(b"%PDF-1.7\n" + b"\x00" * 32, "doc.png", MAX)
    assert not ok
    assert reason == "Unsupported file type: application/pdf"
