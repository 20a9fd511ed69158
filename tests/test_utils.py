"""
Tests for utility helpers
"""

import pytest

from utils import (
    format_processing_time,
    load_config,
    sanitize_filename,
    validate_image_file,
)


def test_load_config_section(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("api:\n  max_file_size_mb: 3\n")
    assert load_config(str(config), 'api') == {'max_file_size_mb': 3}
    assert load_config(str(config), 'detection') is None
    assert load_config(str(config)) == {'api': {'max_file_size_mb': 3}}


def test_load_config_missing_file(tmp_path):
    assert load_config(str(tmp_path / "missing.yaml"), 'api') is None


def test_default_config_ships_detection_constants():
    detection = load_config(section='detection')
    assert detection['canny_threshold_pairs'] == [[30, 100], [50, 150], [75, 200]]
    assert detection['approx_epsilons'] == [0.02, 0.03, 0.04]
    assert detection['min_area_ratio'] == 0.05
    assert detection['early_stop_area_ratio'] == 0.20


def test_validate_image_file(tmp_path):
    assert validate_image_file(str(tmp_path / "nope.jpg")) == (False, "File not found")

    empty = tmp_path / "empty.png"
    empty.write_bytes(b"")
    assert validate_image_file(str(empty))[0] is False

    text = tmp_path / "notes.txt"
    text.write_text("x")
    is_valid, msg = validate_image_file(str(text))
    assert is_valid is False
    assert "extension" in msg.lower()

    photo = tmp_path / "photo.JPG"
    photo.write_bytes(b"\xff\xd8\xff")
    assert validate_image_file(str(photo)) == (True, "Valid image file")


def test_sanitize_filename():
    assert sanitize_filename("../../etc/passwd.jpg") == "passwd.jpg"
    assert sanitize_filename("my photo (1).png") == "my_photo__1_.png"
    long_name = sanitize_filename("a" * 150 + ".png")
    assert len(long_name) == 99
    assert long_name.endswith(".png")


def test_format_processing_time():
    assert format_processing_time(456) == "456ms"
    assert format_processing_time(1234) == "1.23s"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
