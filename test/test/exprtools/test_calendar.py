"""
Tests for durations, serial day numbers, and the constructors of literal expressions
"""

import datetime
import logging

import numpy as np
import pandas as pd
import pytest

from exprtools.literal import (
    Duration,
    cell,
    concat,
    duration_from,
    evaluate_literal,
    format_duration,
    from_serial_days,
    instant_from,
    literal_namespace,
    parse_duration,
    record_from,
    table_from,
    to_serial_days,
)

log = logging.getLogger(__name__)

# 1 day, 2 hours, 3 minutes, 4.005 seconds
ELAPSED_MS = 93_784_005


def test_duration() -> None:
    duration = Duration([np.timedelta64(1, "s"), np.timedelta64(2, "s")])

    assert duration.format == Duration.DEFAULT_FORMAT == "hh:mm:ss"
    assert duration.shape == (2,)
    assert duration.ndim == 1
    assert duration.size == len(duration) == 2
    assert duration.values.dtype == np.dtype("timedelta64[ns]")

    # indexing preserves the display format
    element = Duration(duration.values, format="mm:ss")[1]
    assert isinstance(element, Duration)
    assert element.shape == ()
    assert element.format == "mm:ss"
    assert str(element) == "00:02"
    assert str(Duration(np.timedelta64(90, "s"))) == "00:01:30"

    # elapsed times are immutable
    with pytest.raises(ValueError):
        duration.values[0] = np.timedelta64(3, "s")

    with pytest.raises(TypeError):
        hash(duration)

    np.testing.assert_array_equal(
        np.asarray(duration), np.array([1, 2], dtype="timedelta64[s]")
    )


def test_duration_equality() -> None:
    duration = Duration([np.timedelta64(1, "s"), np.timedelta64("NaT", "s")])

    assert duration == Duration(duration.values, format="s")
    assert duration == np.array(
        [np.timedelta64(1000, "ms"), np.timedelta64("NaT", "ms")]
    )
    assert duration != Duration([np.timedelta64(1, "s"), np.timedelta64(2, "s")])
    assert duration != Duration(np.timedelta64(1, "s"))
    assert duration != 1

    assert Duration(np.timedelta64(1, "s")) == datetime.timedelta(seconds=1)
    assert Duration(pd.to_timedelta(["1s", "2s"])) == pd.to_timedelta(["1s", "2s"])


def test_duration_validation() -> None:
    for valid_format in [
        "dd:hh:mm:ss",
        "hh:mm:ss.S",
        "mm:ss.SSSSSSSSS",
        "hh:mm",
        "y",
        "d",
        "h",
        "m",
        "s",
    ]:
        assert Duration(np.timedelta64(1, "s"), format=valid_format).format == (
            valid_format
        )

    for invalid_format in ["", "hh", "ss", "hh:mm.SSS", "mm:ss.SSSSSSSSSS", "ms"]:
        with pytest.raises(ValueError, match="is not a valid duration format"):
            Duration(np.timedelta64(1, "s"), format=invalid_format)

    with pytest.raises(TypeError):
        # noinspection PyTypeChecker
        Duration(np.timedelta64(1, "s"), format=1)


def test_format_duration() -> None:
    elapsed = np.timedelta64(ELAPSED_MS, "ms")

    expected = {
        "dd:hh:mm:ss.SSS": "01:02:03:04.005",
        "dd:hh:mm:ss": "01:02:03:04",
        "hh:mm:ss": "26:03:04",
        "hh:mm:ss.S": "26:03:04.0",
        "mm:ss": "1563:04",
        "hh:mm": "26:03",
        "h": "26.051 h",
        "d": "1.0855 d",
        "s": "93784 s",
    }
    for display_format, text in expected.items():
        assert format_duration(elapsed, display_format)[()] == text, display_format

    # negative elapsed times are truncated towards zero
    assert format_duration(-elapsed, "hh:mm:ss")[()] == "-26:03:04"
    assert format_duration(np.timedelta64(-1, "ms"), "hh:mm:ss")[()] == "-00:00:00"

    assert format_duration(np.timedelta64("NaT"), "hh:mm:ss")[()] == "NaN"

    text = format_duration(np.zeros((2, 3), dtype="timedelta64[s]"), "mm:ss")
    assert text.shape == (2, 3)
    assert (text == "00:00").all()

    with pytest.raises(ValueError):
        format_duration(elapsed, "x")


def test_parse_duration() -> None:
    assert parse_duration("01:02:03:04.005")[()] == np.timedelta64(ELAPSED_MS, "ms")
    assert parse_duration("26:03:04.005")[()] == np.timedelta64(ELAPSED_MS, "ms")
    assert parse_duration("-00:00:01.5")[()] == np.timedelta64(-1500, "ms")
    assert parse_duration("+00:00:01")[()] == np.timedelta64(1, "s")
    assert parse_duration("100:00:00.000")[()] == np.timedelta64(100, "h")
    assert parse_duration(" 1:2:3 ")[()] == np.timedelta64(3723, "s")
    assert parse_duration("00:00:00.000000001")[()] == np.timedelta64(1, "ns")
    assert np.isnat(parse_duration("NaN")[()])

    values = parse_duration([["00:00:01", "NaN"]])
    assert values.shape == (1, 2)
    assert values.dtype == np.dtype("timedelta64[ns]")

    for invalid_text in ["", "1:2", "00:00:01.", "1 day", "00:00:01.0000000001"]:
        with pytest.raises(ValueError, match="not a valid elapsed time"):
            parse_duration(invalid_text)

    with pytest.raises(TypeError):
        parse_duration(1)


def test_serial_days() -> None:
    assert to_serial_days(np.datetime64("0001-01-01")) == (1.0, None)
    assert to_serial_days(datetime.datetime(1970, 1, 1)) == (719163.0, None)
    assert to_serial_days(pd.Timestamp("1970-01-01 06:00")) == (719163.25, None)
    assert to_serial_days(
        pd.Timestamp("2020-01-02 13:00", tz="Europe/Berlin")
    ) == (737426.5, "Europe/Berlin")

    serial, tz = to_serial_days(
        pd.DatetimeIndex(["2020-01-02 12:00", "NaT"]).tz_localize("UTC")
    )
    assert tz == "UTC"
    np.testing.assert_array_equal(serial, [737426.5, np.nan])

    with pytest.raises(TypeError):
        to_serial_days("2020-01-01")
    with pytest.raises(TypeError):
        to_serial_days(np.array([1.0, 2.0]))


def test_from_serial_days() -> None:
    assert from_serial_days(719163.5) == pd.Timestamp("1970-01-01 12:00")
    assert from_serial_days(np.nan) is pd.NaT

    # points in time are rounded to whole milliseconds
    assert from_serial_days(719163 + 1.0004 / 86_400) == pd.Timestamp(
        "1970-01-01 00:00:01"
    )

    values = from_serial_days([[719163.5, np.nan]])
    assert isinstance(values, np.ndarray)
    assert values.dtype == np.dtype("datetime64[ns]")
    np.testing.assert_array_equal(
        values, np.array([["1970-01-01T12:00", "NaT"]], dtype="datetime64[ns]")
    )

    assert from_serial_days(737426.5, tz="Europe/Berlin") == pd.Timestamp(
        "2020-01-02 13:00", tz="Europe/Berlin"
    )

    index = from_serial_days([737426.5], tz="UTC")
    assert isinstance(index, pd.DatetimeIndex)
    assert index[0] == pd.Timestamp("2020-01-02 12:00", tz="UTC")

    with pytest.raises(ValueError):
        from_serial_days([[737426.5]], tz="UTC")

    # beyond the range of nanosecond timestamps, points in time have millisecond
    # resolution
    serial_3000 = datetime.date(3000, 1, 1).toordinal() + 0.5
    assert from_serial_days(serial_3000) == datetime.datetime(3000, 1, 1, 12)
    assert from_serial_days(serial_3000, tz="UTC") == datetime.datetime(
        3000, 1, 1, 12, tzinfo=datetime.timezone.utc
    )

    values = from_serial_days([serial_3000, np.nan])
    assert values.dtype == np.dtype("datetime64[ms]")
    np.testing.assert_array_equal(
        values, np.array(["3000-01-01T12:00", "NaT"], dtype="datetime64[ms]")
    )

    serial_1500 = datetime.date(1500, 6, 1).toordinal()
    assert from_serial_days(serial_1500) == datetime.datetime(1500, 6, 1)


def test_concat() -> None:
    stacked = concat(2, np.array([1, 2]), np.array([3, 4]))
    np.testing.assert_array_equal(stacked, np.array([[1, 3], [2, 4]]))

    assert concat(3, shape=(2, 1, 0)).shape == (2, 1, 0)
    assert concat(3, shape=(2, 1, 0), dtype=np.int8).dtype == np.int8

    durations = concat(
        3,
        Duration(np.zeros((1, 1), dtype="timedelta64[s]"), format="mm:ss"),
        Duration(np.full((1, 1), np.timedelta64(1, "s")), format="s"),
    )
    assert isinstance(durations, Duration)
    assert durations.shape == (1, 1, 2)
    assert durations.format == "mm:ss"

    with pytest.raises(ValueError, match="arg shape is required"):
        concat(3)
    with pytest.raises(ValueError, match="must have 3 dimensions"):
        concat(3, shape=(1, 2))
    with pytest.raises(ValueError, match="not supported when slices are given"):
        concat(3, np.zeros((2, 2)), shape=(2, 2, 1))
    with pytest.raises(ValueError, match="slices must have 2 dimensions"):
        concat(3, np.zeros(2))


def test_cell() -> None:
    cells = cell([[1, [2]], ["a", None]])
    assert cells.dtype == object
    assert cells.shape == (2, 2)
    assert cells[0, 1] == [2]
    assert cells[1, 1] is None

    # arrays are kept as elements
    array = np.array([1, 2])
    cells = cell([array], shape=(1,))
    assert cells.shape == (1,)
    assert cells[0] is array

    assert cell([]).shape == (0, 0)
    assert cell([], shape=(0, 3)).shape == (0, 3)
    assert cell("x", shape=())[()] == "x"

    with pytest.raises(ValueError, match="must have the same length"):
        cell([[1, 2], [3]])
    with pytest.raises(ValueError, match="requires 3"):
        cell([1, 2], shape=(3,))
    with pytest.raises(TypeError):
        cell(1, shape=(1,))


def test_record_from() -> None:
    assert record_from([1, "b"], ["x", "y"]) == {"x": 1, "y": "b"}
    assert record_from([], []) == {}

    records = record_from(
        [np.array([1, 2], dtype=np.int32), np.array([[1.0, 2.0], [3.0, 4.0]])],
        ["a", "b"],
        shape=(2,),
    )
    assert records.shape == (2,)
    assert records.dtype.names == ("a", "b")
    assert records["a"].dtype == np.int32
    np.testing.assert_array_equal(records["b"], [[1.0, 2.0], [3.0, 4.0]])

    with pytest.raises(ValueError, match="got 1 field values for 2 field names"):
        record_from([1], ["a", "b"])
    with pytest.raises(ValueError, match="field names must be unique"):
        record_from([1, 2], ["a", "a"])
    with pytest.raises(TypeError):
        record_from([1], [1])


def test_instant_and_duration_from() -> None:
    assert instant_from(719163.5, origin="serial_day") == pd.Timestamp(
        "1970-01-01 12:00"
    )
    with pytest.raises(ValueError, match="must be 'serial_day'"):
        instant_from(719163.5, origin="unix_epoch")

    duration = duration_from("00:01:30.000", format="mm:ss")
    assert isinstance(duration, Duration)
    assert duration.format == "mm:ss"
    assert duration == np.timedelta64(90, "s")

    assert duration_from(np.array(["00:00:01.000", "NaN"])).shape == (2,)


def test_table_from() -> None:
    frame = table_from(
        np.array([1.5, 2.5]),
        Duration([np.timedelta64(1, "s"), np.timedelta64(2, "s")]),
        column_names=["a", "d"],
        row_names=["r1", "r2"],
    )
    assert frame.columns.tolist() == ["a", "d"]
    assert frame.index.tolist() == ["r1", "r2"]
    assert frame["d"].dtype == np.dtype("timedelta64[ns]")

    assert table_from(column_names=[], row_names=[0, 1]).shape == (2, 0)

    with pytest.raises(ValueError, match="got 1 columns for 2 column names"):
        table_from(np.array([1]), column_names=["a", "b"])
    with pytest.raises(ValueError, match="column names must be unique"):
        table_from(np.array([1]), np.array([2]), column_names=["a", "a"])


def test_literal_namespace() -> None:
    namespace = literal_namespace()
    assert set(namespace) == {
        "np",
        "concat",
        "cell",
        "record_from",
        "instant_from",
        "duration_from",
        "table_from",
    }

    # each evaluation uses a fresh namespace
    assert literal_namespace() is not namespace
    evaluate_literal("np.int32(1)")
    assert "__builtins__" not in literal_namespace()

    value = evaluate_literal("np.int32(5)")
    assert value == 5
    assert isinstance(value, np.int32)

    with pytest.raises(NameError):
        evaluate_literal("pd.DataFrame()")
