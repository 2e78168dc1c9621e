"""
Tests that evaluating a literal reconstructs the value it was rendered from
"""

import datetime
import logging
from typing import Any

import numpy as np
import pandas as pd
import pytest

from exprtools.literal import Duration, evaluate_literal, to_literal

log = logging.getLogger(__name__)


def _reconstruct(value: Any, **kwargs: Any) -> Any:
    text = to_literal(value, **kwargs)
    log.debug(f"literal: {text}")
    return evaluate_literal(text)


@pytest.mark.parametrize(
    "value",
    [
        np.zeros((0, 0)),
        np.zeros((2, 0), dtype=np.int16),
        np.array(3.0),
        np.arange(6.0).reshape(2, 3),
        np.arange(6, dtype=np.int32).reshape(2, 3),
        np.arange(8.0).reshape(2, 2, 2),
        np.arange(24, dtype=np.uint8).reshape(2, 3, 2, 2),
        np.zeros((2, 3, 0), dtype=np.complex64),
        np.array([[True, False]]),
        np.array(["a", "bc"]),
        np.array([1.0, np.nan, np.inf, -np.inf]),
    ],
)
def test_arrays(value: np.ndarray) -> None:
    result = _reconstruct(value)
    assert isinstance(result, np.ndarray)
    assert result.dtype == value.dtype
    np.testing.assert_array_equal(result, value)


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        0,
        -17,
        3.0,
        0.1,
        float("inf"),
        1 - 2j,
        "text with 'quotes'",
        b"\x00\xff",
        np.int8(-5),
        np.uint64(2**64 - 1),
        np.float32(0.25),
        np.complex128(1 + 1j),
        np.bool_(False),
    ],
)
def test_scalars(value: Any) -> None:
    result = _reconstruct(value)
    assert type(result) is type(value) or (
        # NumPy booleans are rendered as Python booleans
        isinstance(value, np.bool_)
        and type(result) is bool
    )
    assert result == value


def test_nan() -> None:
    assert np.isnan(_reconstruct(float("nan")))
    assert np.isnan(_reconstruct(complex(np.nan, 1)).real)


def test_collections() -> None:
    value = [1, "a", np.array([[1.0, 2.0], [3.0, 4.0]]), (2, [None])]
    result = _reconstruct(value)

    assert isinstance(result, list)
    assert result[:2] == [1, "a"]
    np.testing.assert_array_equal(result[2], value[2])
    assert result[3] == (2, [None])

    assert _reconstruct([]) == []
    assert _reconstruct(()) == ()
    assert _reconstruct((1,)) == (1,)
    assert _reconstruct({1: "a", (2, 3): {"b": 2}}) == {1: "a", (2, 3): {"b": 2}}


def test_cells() -> None:
    cells = np.empty((2, 2), dtype=object)
    cells[0, 0] = 1
    cells[0, 1] = np.array([1.5, 2.5])
    cells[1, 0] = [1, 2]
    cells[1, 1] = None

    result = _reconstruct(cells)
    assert result.dtype == object
    assert result.shape == (2, 2)
    assert result[0, 0] == 1
    np.testing.assert_array_equal(result[0, 1], cells[0, 1])
    assert result[1, 0] == [1, 2]
    assert result[1, 1] is None

    for shape in [(0,), (3,), (0, 2), (1, 2, 3)]:
        cells = np.empty(shape, dtype=object)
        cells.fill("x")
        result = _reconstruct(cells)
        assert result.dtype == object
        assert result.shape == shape
        assert (result == "x").all()


def test_records() -> None:
    record = {"x": 1.5, "y": "b", "z": {"inner": [1, 2]}}
    assert _reconstruct(record) == record

    records = np.array(
        [(1, 2.0, "a"), (3, 4.0, "b")],
        dtype=[("a", np.int32), ("b", np.float64), ("c", "U1")],
    )
    result = _reconstruct(records)
    assert result.dtype == records.dtype
    np.testing.assert_array_equal(result, records)

    # string fields keep their width
    records_text = np.array(
        [("a", b"x"), ("bc", b"y")], dtype=[("s", "U5"), ("b", "S4")]
    )
    result = _reconstruct(records_text)
    assert result.dtype == records_text.dtype
    np.testing.assert_array_equal(result, records_text)

    records_2d = np.zeros((2, 2), dtype=[("a", np.int16), ("b", np.float64, (3,))])
    records_2d["b"] = np.arange(12.0).reshape(2, 2, 3)
    result = _reconstruct(records_2d)
    assert result.dtype == records_2d.dtype
    np.testing.assert_array_equal(result, records_2d)


def test_instants() -> None:
    timestamp = pd.Timestamp("2021-03-04 05:06:07.890")
    assert _reconstruct(timestamp) == timestamp

    timestamp_tz = pd.Timestamp("2021-03-04 05:06:07.890", tz="Europe/Berlin")
    result = _reconstruct(timestamp_tz)
    assert result == timestamp_tz
    assert str(result.tz) == "Europe/Berlin"

    assert _reconstruct(pd.NaT) is pd.NaT

    instants = np.array(
        ["2021-03-04T05:06:07.890", "NaT", "1999-12-31"], dtype="datetime64[ns]"
    )
    np.testing.assert_array_equal(_reconstruct(instants), instants)

    index = pd.DatetimeIndex(["2021-03-04 05:06", "2021-03-05"], tz="UTC")
    result = _reconstruct(index)
    assert isinstance(result, pd.DatetimeIndex)
    assert str(result.tz) == "UTC"
    assert result.tolist() == index.tolist()

    # points in time are rounded to whole milliseconds
    assert _reconstruct(pd.Timestamp("2021-03-04 05:06:07.8906")) == pd.Timestamp(
        "2021-03-04 05:06:07.891"
    )

    # serial day numbers are never rounded
    assert _reconstruct(timestamp, precision=2) == timestamp

    # points in time outside the range of nanosecond timestamps
    assert _reconstruct(datetime.datetime(3000, 1, 1)) == datetime.datetime(3000, 1, 1)
    distant = np.array(["1500-06-01T08:00", "3000-01-01", "NaT"], dtype="datetime64[s]")
    np.testing.assert_array_equal(_reconstruct(distant), distant)


def test_durations() -> None:
    duration = Duration(np.timedelta64(90_000, "ms"))
    result = _reconstruct(duration)
    assert isinstance(result, Duration)
    assert result == duration
    assert result.format == Duration.DEFAULT_FORMAT

    # the display format is preserved
    for display_format in ["mm:ss", "dd:hh:mm:ss.SSS", "hh:mm", "h", "s"]:
        duration = Duration(np.timedelta64(90_000, "ms"), format=display_format)
        text = to_literal(duration)
        assert f"format={display_format!r}" in text
        assert evaluate_literal(text).format == display_format

    durations = Duration(
        np.array([[1500, -2500], [0, 86_400_000]], dtype="timedelta64[ms]")
    )
    assert _reconstruct(durations) == durations

    durations_3d = Duration(
        np.arange(8, dtype="int64").reshape(2, 2, 2).astype("timedelta64[s]"),
        format="mm:ss",
    )
    result = _reconstruct(durations_3d)
    assert result == durations_3d
    assert result.format == "mm:ss"

    empty = Duration(np.zeros((2, 0), dtype="timedelta64[ns]"))
    assert _reconstruct(empty).shape == (2, 0)

    # elapsed times are truncated to whole milliseconds
    assert _reconstruct(pd.Timedelta(microseconds=1999)) == np.timedelta64(1, "ms")
    assert _reconstruct(pd.Timedelta(microseconds=-1999)) == np.timedelta64(-1, "ms")

    missing = _reconstruct(np.array([np.timedelta64("NaT", "ns")]))
    assert np.isnat(missing.values).all()


def test_tables(frame: pd.DataFrame, frame_indexed: pd.DataFrame) -> None:
    pd.testing.assert_frame_equal(_reconstruct(frame), frame)
    pd.testing.assert_frame_equal(_reconstruct(frame_indexed), frame_indexed)

    frame_mixed = pd.DataFrame(
        {
            "x": np.array(["a", "b", None], dtype=object),
            "n": np.array([1, 2, 3], dtype=np.int64),
            "t": np.array(
                ["2020-01-01", "2020-01-02T12:00", "NaT"], dtype="datetime64[ns]"
            ),
            "d": np.array(
                [
                    np.timedelta64(1, "s"),
                    np.timedelta64(2, "m"),
                    np.timedelta64(3, "h"),
                ],
                dtype="timedelta64[ns]",
            ),
        },
        index=[10, 20, 30],
    )
    pd.testing.assert_frame_equal(_reconstruct(frame_mixed), frame_mixed)

    frame_empty = frame.iloc[:0]
    result = _reconstruct(frame_empty)
    assert result.shape == (0, 2)
    assert result.columns.tolist() == ["a", "b"]
    assert result.dtypes.tolist() == frame.dtypes.tolist()

    frame_no_columns = frame[[]]
    result = _reconstruct(frame_no_columns)
    assert result.shape == (2, 0)
    assert result.index.tolist() == [0, 1]

    # attributes are dropped
    frame_with_attrs = frame.copy()
    frame_with_attrs.attrs["source"] = "test"
    result = _reconstruct(frame_with_attrs)
    assert result.attrs == {}
    pd.testing.assert_frame_equal(result, frame)


def test_precision() -> None:
    value = np.array([np.pi, -np.e, 1 / 3, 12345.678])

    for precision in [1, 3, 7]:
        text = to_literal(value, precision=precision)

        # rendering is deterministic
        assert to_literal(value, precision=precision) == text

        result = evaluate_literal(text)
        np.testing.assert_allclose(result, value, rtol=10 ** (1 - precision))

    # a precision beyond the float64 resolution reconstructs values exactly
    np.testing.assert_array_equal(_reconstruct(value, precision=17), value)


def test_multi_line() -> None:
    value = {"values": np.arange(40.0).reshape(4, 10), "labels": list("abcdefgh")}
    text = to_literal(value, single_line=False, max_width=40)
    assert "\n" in text

    result = evaluate_literal(text)
    np.testing.assert_array_equal(result["values"], value["values"])
    assert result["labels"] == value["labels"]
