"""
Calendar values: the :class:`.Duration` type, and conversions of points in time and
elapsed times to and from their literal encodings.
"""
import datetime
import logging
import re
from typing import Any, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ..api import AllTracker, validate_type
from ..expression import Expression, HasExpressionRepr

log = logging.getLogger(__name__)

__all__ = [
    "Duration",
    "format_duration",
    "parse_duration",
    "to_serial_days",
    "from_serial_days",
]


#
# Constants
#

# serial day number of 1970-01-01, counting 0001-01-01 as day 1
_SERIAL_DAY_UNIX_EPOCH = datetime.date(1970, 1, 1).toordinal()

_NS_PER_SECOND = 10**9
_NS_PER_DAY = 86_400 * _NS_PER_SECOND
_MS_PER_DAY = 86_400_000

# points in time representable with nanosecond resolution, in whole milliseconds
_NS_RANGE_MIN = np.datetime64("1677-09-21T00:12:43.146", "ms")
_NS_RANGE_MAX = np.datetime64("2262-04-11T23:47:16.854", "ms")

_NAT = np.timedelta64("NaT", "ns")

_RE_DIGITAL_FORMAT = re.compile(
    r"(?P<base>(?:dd:)?hh:mm:ss|mm:ss)(?:\.(?P<frac>S{1,9}))?"
)
_RE_UNIT_FORMAT = re.compile(r"[ydhms]")
_RE_DURATION_TEXT = re.compile(
    r"\s*(?P<sign>[-+])?"
    r"(?:(?P<days>\d+):(?=\d+:\d+:))?(?P<hours>\d+):(?P<minutes>\d{1,2}):"
    r"(?P<seconds>\d{1,2})(?:\.(?P<frac>\d{1,9}))?\s*"
)

_UNIT_NS = {
    "y": 365.2425 * _NS_PER_DAY,
    "d": _NS_PER_DAY,
    "h": 3600 * _NS_PER_SECOND,
    "m": 60 * _NS_PER_SECOND,
    "s": _NS_PER_SECOND,
}


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Classes
#


class Duration(HasExpressionRepr):
    """
    An array of elapsed times, with a display format.

    The elapsed times are stored as a NumPy array of type ``timedelta64[ns]``, with
    any number of dimensions (including zero dimensions for scalar durations).

    The display format is one of the digital formats ``"dd:hh:mm:ss"``,
    ``"hh:mm:ss"``, ``"mm:ss"``, or ``"hh:mm"`` (the formats including seconds
    optionally followed by 1 to 9 fractional second digits, e.g.,
    ``"hh:mm:ss.SSS"``), or one of the unit formats ``"y"``, ``"d"``, ``"h"``,
    ``"m"``, or ``"s"``.

    Two durations are equal if they have the same shape and the same elapsed times;
    their display formats are not compared.
    """

    #: the display format used unless a different format is specified
    DEFAULT_FORMAT = "hh:mm:ss"

    def __init__(self, values: Any, format: str = DEFAULT_FORMAT) -> None:
        """
        :param values: the elapsed times, as an array-like of
            :class:`~datetime.timedelta`, :class:`numpy.timedelta64`, or
            :class:`pandas.Timedelta` objects
        :param format: the display format (default: ``"hh:mm:ss"``)
        """
        validate_type(format, expected_type=str, name="arg format")
        if not (_RE_DIGITAL_FORMAT.fullmatch(format) or format == "hh:mm") and not (
            _RE_UNIT_FORMAT.fullmatch(format)
        ):
            raise ValueError(f"arg format={format!r} is not a valid duration format")

        values = np.array(values, dtype="timedelta64[ns]")
        values.flags.writeable = False

        self._values = values
        self._format = format

    @property
    def values(self) -> np.ndarray:
        """
        The elapsed times, as a read-only array of type ``timedelta64[ns]``.
        """
        return self._values

    @property
    def format(self) -> str:
        """
        The display format of this duration.
        """
        return self._format

    @property
    def shape(self) -> Tuple[int, ...]:
        """
        The shape of the array of elapsed times.
        """
        return self._values.shape

    @property
    def ndim(self) -> int:
        """
        The number of dimensions of the array of elapsed times.
        """
        return self._values.ndim

    @property
    def size(self) -> int:
        """
        The number of elapsed times in this duration.
        """
        return self._values.size

    def to_expression(self) -> Expression:
        """
        Render this duration as a literal expression.

        :return: the literal expression
        """
        from ._literal import to_literal_expression

        return to_literal_expression(self)

    def __array__(self, dtype: Any = None, copy: Optional[bool] = None) -> np.ndarray:
        if dtype is None or np.dtype(dtype) == self._values.dtype:
            return self._values.copy() if copy else self._values
        else:
            return self._values.astype(dtype)

    def __getitem__(self, key: Any) -> "Duration":
        return Duration(self._values[key], format=self._format)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Duration):
            other_values = other._values
        elif _is_timedelta_like(other):
            other_values = _to_timedelta_array(other)
        else:
            return NotImplemented

        return self.shape == other_values.shape and bool(
            np.array_equal(self._values, other_values, equal_nan=True)
        )

    __hash__ = None

    def __str__(self) -> str:
        text = format_duration(self._values, self._format)
        if text.ndim == 0:
            return str(text[()])
        else:
            return str(text)


#
# Functions
#


def format_duration(values: Any, format: str = Duration.DEFAULT_FORMAT) -> np.ndarray:
    """
    Format elapsed times as text.

    Digital formats truncate elapsed times towards zero, to the smallest unit shown
    by the format; negative elapsed times are prefixed with a ``-`` sign.
    Unit formats show the elapsed time as a decimal number with 5 significant digits,
    followed by the unit.
    Missing elapsed times (``NaT``) are formatted as ``"NaN"``.

    :param values: the elapsed times, as an array-like of
        :class:`~datetime.timedelta`, :class:`numpy.timedelta64`, or
        :class:`pandas.Timedelta` objects
    :param format: the format to apply (default: ``"hh:mm:ss"``)
    :return: a string array with the same shape as the given elapsed times
    """
    values = _to_timedelta_array(values)

    match = _RE_DIGITAL_FORMAT.fullmatch(format)
    if match or format == "hh:mm":
        base = match["base"] if match else format
        frac_digits = len(match["frac"] or "") if match else 0

        def _format_element(ns: int) -> str:
            return _format_digital(ns, base, frac_digits)

    elif _RE_UNIT_FORMAT.fullmatch(format):

        def _format_element(ns: int) -> str:
            return f"{ns / _UNIT_NS[format]:.5g} {format}"

    else:
        raise ValueError(f"arg format={format!r} is not a valid duration format")

    nat = np.isnat(values)
    ns = values.view("int64")

    text = [
        "NaN" if is_nat else _format_element(int(element))
        for element, is_nat in zip(ns.ravel(), nat.ravel())
    ]

    return np.array(text, dtype=str).reshape(values.shape)


def parse_duration(text: Any) -> np.ndarray:
    """
    Parse elapsed times in digital format.

    Accepts text in formats ``"hh:mm:ss"`` and ``"dd:hh:mm:ss"``, with an optional
    leading sign and up to 9 fractional second digits, or ``"NaN"`` for missing
    elapsed times.

    :param text: a string or an array-like of strings
    :return: an array of type ``timedelta64[ns]`` with the same shape as the given
        text
    :raise ValueError: the text is not a valid elapsed time
    """
    text = np.asarray(text, dtype=object)

    values = pd.to_timedelta(
        [_normalize_duration_text(element) for element in text.flat]
    )

    return values.to_numpy(dtype="timedelta64[ns]").reshape(text.shape)


def to_serial_days(value: Any) -> Tuple[Union[float, np.ndarray], Optional[str]]:
    """
    Convert points in time to serial day numbers.

    The serial day number counts days since the start of the proleptic Gregorian
    calendar, with 1 January of year 1 as day 1; the fraction encodes the time of day.
    Missing points in time (``NaT``) are converted to ``NaN``.

    Time zone aware points in time are converted to UTC before conversion, and the
    name of their time zone is returned alongside the serial day numbers.

    :param value: a :class:`~datetime.datetime`, :class:`pandas.Timestamp`,
        :class:`numpy.datetime64`, an array of type ``datetime64``, or a
        :class:`pandas.DatetimeIndex`
    :return: a tuple of the serial day number(s), as a :class:`float` for scalar
        values or an array of floats otherwise, and the name of the time zone, or
        ``None`` if the point(s) in time are not time zone aware
    """
    tz: Optional[str] = None

    if value is pd.NaT:
        return float("nan"), None
    elif isinstance(value, datetime.datetime):
        timestamp = pd.Timestamp(value)
        if timestamp.tz is not None:
            tz = str(timestamp.tz)
            timestamp = timestamp.tz_convert("UTC").tz_localize(None)
        values = np.asarray(timestamp.to_datetime64())
    elif isinstance(value, pd.DatetimeIndex):
        if value.tz is not None:
            tz = str(value.tz)
            value = value.tz_convert("UTC").tz_localize(None)
        values = value.to_numpy()
    elif isinstance(value, (np.datetime64, np.ndarray)):
        values = np.asarray(value)
        if values.dtype.kind != "M":
            raise TypeError(
                f"expected an array of type datetime64 but got {values.dtype}"
            )
    else:
        raise TypeError(
            f"expected a point in time but got an instance of {type(value).__name__}"
        )

    days = (values - np.datetime64("1970-01-01")) / np.timedelta64(1, "D")
    serial = days + _SERIAL_DAY_UNIX_EPOCH

    if serial.ndim == 0:
        return float(serial), tz
    else:
        return serial, tz


def from_serial_days(serial: Any, tz: Optional[str] = None) -> Any:
    """
    Convert serial day numbers to points in time.

    Points in time are rounded to the nearest millisecond; ``NaN`` is converted to
    ``NaT``.
    Points in time have nanosecond resolution if all of them are in the range of
    nanosecond timestamps (years 1677 to 2262), and millisecond resolution
    otherwise.

    :param serial: a serial day number, or an array-like of serial day numbers
    :param tz: the name of the time zone to convert the points in time to, or
        ``None`` for points in time that are not time zone aware
    :return: a :class:`pandas.Timestamp` for a scalar serial day number; otherwise
        an array of type ``datetime64[ns]`` or ``datetime64[ms]``, or a
        :class:`pandas.DatetimeIndex` if a time zone is given
    """
    validate_type(tz, expected_type=str, optional=True, name="arg tz")

    days = np.asarray(serial, dtype=float) - _SERIAL_DAY_UNIX_EPOCH
    ms = np.round(days * _MS_PER_DAY)
    nan = np.isnan(ms)

    values = np.where(nan, 0, ms).astype("int64").astype("datetime64[ms]")
    values[nan] = np.datetime64("NaT")

    valid = values[~nan]
    if ((valid >= _NS_RANGE_MIN) & (valid <= _NS_RANGE_MAX)).all():
        values = values.astype("datetime64[ns]")

    if values.ndim == 0:
        timestamp = pd.Timestamp(values[()])
        if tz is not None and timestamp is not pd.NaT:
            timestamp = timestamp.tz_localize("UTC").tz_convert(tz)
        return timestamp
    elif tz is not None:
        if values.ndim != 1:
            raise ValueError(
                "time zone aware points in time must be given as a 1d array"
            )
        return pd.DatetimeIndex(values).tz_localize("UTC").tz_convert(tz)
    else:
        return values


__tracker.validate()


#
# Private auxiliary functions
#


def _is_timedelta_like(value: Any) -> bool:
    return (
        isinstance(value, (datetime.timedelta, np.timedelta64, pd.TimedeltaIndex))
        or value is pd.NaT
        or (isinstance(value, np.ndarray) and value.dtype.kind == "m")
    )


def _to_timedelta_array(value: Any) -> np.ndarray:
    if isinstance(value, Duration):
        return value.values
    elif value is pd.NaT:
        return np.asarray(_NAT)
    elif isinstance(value, datetime.timedelta):
        value = pd.Timedelta(value).to_timedelta64()
    return np.asarray(value, dtype="timedelta64[ns]")


def _format_digital(ns: int, base: str, frac_digits: int) -> str:
    sign = "-" if ns < 0 else ""
    ticks = abs(ns) // 10 ** (9 - frac_digits)
    seconds, frac = divmod(ticks, 10**frac_digits)
    minutes, s = divmod(seconds, 60)
    hours, m = divmod(minutes, 60)
    days, h = divmod(hours, 24)

    if base == "dd:hh:mm:ss":
        text = f"{days:02d}:{h:02d}:{m:02d}:{s:02d}"
    elif base == "hh:mm:ss":
        text = f"{hours:02d}:{m:02d}:{s:02d}"
    elif base == "mm:ss":
        text = f"{minutes:02d}:{s:02d}"
    else:
        text = f"{hours:02d}:{m:02d}"

    if frac_digits:
        text = f"{text}.{frac:0{frac_digits}d}"

    return sign + text


def _normalize_duration_text(text: Any) -> str:
    # convert to the "[-]hh:mm:ss[.fff]" format parsed by pandas, with days as hours
    validate_type(text, expected_type=str, name="elapsed time")

    if text.strip() == "NaN":
        return "NaT"

    match = _RE_DURATION_TEXT.fullmatch(text)
    if not match:
        raise ValueError(f"not a valid elapsed time: {text!r}")

    sign = "-" if match["sign"] == "-" else ""
    hours = int(match["days"] or 0) * 24 + int(match["hours"])
    frac = f".{match['frac']}" if match["frac"] else ""

    return (
        f"{sign}{hours:02d}:{int(match['minutes']):02d}:{int(match['seconds']):02d}"
        f"{frac}"
    )
