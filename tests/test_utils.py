import pytest

from trimmove.errors import InvalidTimeFormatError
from trimmove.utils import format_time_code, from_raw_position, parse_time_code, split_filename, uri_to_path


def test_parse_time_code_with_fraction():
    assert parse_time_code("01:02:03.456") == pytest.approx(3723.456)


def test_parse_time_code_accepts_unpadded_fields():
    assert parse_time_code("1:2:3") == 3723
    assert parse_time_code("  00:00:05 ") == 5


@pytest.mark.parametrize("text", ["12:3", "aa:bb:cc", "1:2:3.4.5", "", "01:02", None, "-1:00:00"])
def test_parse_time_code_rejects_bad_input(text):
    with pytest.raises(InvalidTimeFormatError):
        parse_time_code(text)


def test_format_time_code():
    assert format_time_code(3723.456) == "01:02:03.456"
    assert format_time_code(0) == "00:00:00.000"
    assert format_time_code(59.9996) == "00:01:00.000"


@pytest.mark.parametrize("value", [-1, float("nan"), float("inf"), None])
def test_format_time_code_invalid_values_render_zero(value):
    assert format_time_code(value) == "00:00:00.000"


def test_from_raw_position():
    assert from_raw_position(1_500_000) == 1.5
    assert from_raw_position(0) == 0.0
    assert from_raw_position(-10) == 0.0


def test_uri_to_path_posix():
    assert uri_to_path("file:///home/me/My%20Video%20%231.mp4") == "/home/me/My Video #1.mp4"


def test_uri_to_path_windows_drive():
    assert uri_to_path("file:///C:/Videos/a%20b.mp4") == "C:/Videos/a b.mp4"


def test_uri_to_path_localhost_authority():
    assert uri_to_path("file://localhost/home/x.mp4") == "/home/x.mp4"
    assert uri_to_path("file://LOCALHOST/C:/v/a.mp4") == "C:/v/a.mp4"


def test_bare_paths_are_returned_unchanged():
    assert uri_to_path("/home/me/clip%41.mp4") == "/home/me/clip%41.mp4"


def test_uri_to_path_non_file_schemes_have_no_path():
    assert uri_to_path("") == ""
    assert uri_to_path("https://example.com/stream.mp4") == ""


def test_split_filename():
    assert split_filename("trip.part1.mp4") == ("trip.part1", ".mp4")
    assert split_filename("noext") == ("noext", "")
    assert split_filename("/some/dir/clip.MOV") == ("clip", ".MOV")
