import pytest

from trimmove.models import FilenameTimestamp
from trimmove.naming import (build_output_name, compose_filename, fallback_name, parse_timestamp,
                             rewrite_timestamp, unique_output_path)


def test_parse_date_and_time():
    ts = parse_timestamp("dashcam_20241031_143022")
    assert ts == FilenameTimestamp(time_part="143022", date_part="20241031", separator="_", prefix="dashcam_", suffix="")


def test_dashcam_trim_start_moves_timestamp():
    # 14:30:22 + 5m30s
    assert build_output_name("dashcam_20241031_143022.mp4", 330) == "dashcam_20241031_143552.mp4"
    assert build_output_name("dashcam_20241031_143022.mp4", 210) == "dashcam_20241031_143352.mp4"


def test_fractional_offset_uses_whole_seconds():
    assert build_output_name("dashcam_20241031_143022.mp4", 330.9) == "dashcam_20241031_143552.mp4"


def test_leap_day_rollover():
    ts = FilenameTimestamp(time_part="235950", date_part="20240229", separator="_")
    out = rewrite_timestamp(ts, 10)
    assert (out.date_part, out.time_part) == ("20240301", "000000")


def test_non_leap_year_skips_feb_29():
    ts = FilenameTimestamp(time_part="120000", date_part="20230228", separator="_")
    out = rewrite_timestamp(ts, 86400)
    assert (out.date_part, out.time_part) == ("20230301", "120000")


@pytest.mark.parametrize("date,expected", [("19000228", "19000301"), ("20000228", "20000229"), ("20231231", "20240101")])
def test_century_and_year_boundaries(date, expected):
    ts = FilenameTimestamp(time_part="235959", date_part=date)
    assert rewrite_timestamp(ts, 1).date_part == expected


def test_multi_day_offset():
    ts = FilenameTimestamp(time_part="120000", date_part="20240130")
    assert rewrite_timestamp(ts, 3 * 86400 + 60).date_part == "20240202"
    assert rewrite_timestamp(ts, 3 * 86400 + 60).time_part == "120100"


def test_negative_offset_rolls_backward():
    ts = FilenameTimestamp(time_part="000005", date_part="20240301")
    out = rewrite_timestamp(ts, -10)
    assert (out.date_part, out.time_part) == ("20240229", "235955")


@pytest.mark.parametrize("time_part", ["000000", "123456", "235959"])
@pytest.mark.parametrize("offset", [1, 59, 3600, 45296, 86399])
def test_rewrite_is_reversible(time_part, offset):
    ts = FilenameTimestamp(time_part=time_part, date_part="20240229", separator="-", prefix="p", suffix="s")
    assert rewrite_timestamp(rewrite_timestamp(ts, offset), -offset) == ts


def test_time_only_wraps_without_date():
    ts = parse_timestamp("clip_143022_final")
    assert ts.date_part is None
    # more than a day: the day carry has nowhere to go
    assert compose_filename(rewrite_timestamp(ts, 90000), ".mp4") == "clip_153022_final.mp4"


def test_surrounding_text_is_preserved():
    name = "My Trip (part 2)__20240101-235959  [HD]"
    assert build_output_name(name + ".mkv", 1) == "My Trip (part 2)__20240102-000000  [HD].mkv"


def test_missing_separator_gets_joining_character():
    assert build_output_name("VID20241031143022.mp4", 0) == "VID20241031_143022.mp4"


def test_positional_groups():
    pattern = r"(\d{8})(_?)(\d{6})"
    assert build_output_name("cam_20240101_000010.mp4", 5, pattern) == "cam_20240101_000015.mp4"
    ts = parse_timestamp("cam20240101T000010", r"(\d{8})T(\d{6})")
    assert (ts.date_part, ts.separator, ts.time_part) == ("20240101", "T", "000010")


def test_invalid_pattern_degrades_to_time_only():
    assert build_output_name("dashcam_20241031_143022.mp4", 60, pattern="(") == "dashcam_20241031_143122.mp4"


def test_six_digit_runs_that_are_not_times_are_ignored():
    assert parse_timestamp("render_999999") is None
    assert parse_timestamp("seq_1234567") is None


def test_date_followed_by_impossible_time_is_not_a_timestamp():
    assert parse_timestamp("cam_20241031_250000") is None
    assert build_output_name("cam_20241031_250000.mp4", 0) == "cam_20241031_250000_trimmed.mp4"
    # the next match in the name is used instead
    ts = parse_timestamp("x_20241031_996000_20241101_010203")
    assert (ts.date_part, ts.time_part, ts.prefix) == ("20241101", "010203", "x_20241031_996000_")


def test_joiners_around_the_stamp_are_kept():
    ts = FilenameTimestamp(time_part="120000", date_part="20240101", separator="_", prefix="_", suffix="__x")
    assert compose_filename(rewrite_timestamp(ts, 1), ".mp4") == "_20240101_120001__x.mp4"


def test_invalid_calendar_date_is_left_unchanged():
    ts = FilenameTimestamp(time_part="235959", date_part="20241399")
    out = rewrite_timestamp(ts, 1)
    assert (out.date_part, out.time_part) == ("20241399", "000000")


def test_fallback_names():
    assert build_output_name("holiday.mp4", 10) == "holiday_trimmed.mp4"
    assert build_output_name("holiday", 10) == "holiday_trimmed"
    assert build_output_name("dashcam_20241031_143022.mp4", 330, smart_naming=False) == "dashcam_20241031_143022_trimmed.mp4"
    assert fallback_name("a.b.mov") == "a.b_trimmed.mov"


def test_compose_without_extension():
    ts = FilenameTimestamp(time_part="120000", date_part="20240101", separator="_", prefix="a_")
    assert compose_filename(ts) == "a_20240101_120000"


def test_unique_output_path(tmp_path):
    target = tmp_path / "clip.mp4"
    assert unique_output_path(str(target)) == str(target)
    target.write_bytes(b"x")
    (tmp_path / "clip_1.mp4").write_bytes(b"x")
    assert unique_output_path(str(target)) == str(tmp_path / "clip_2.mp4")
