import logging

import numpy as np
import pandas as pd
import pytest

logging.basicConfig(level=logging.DEBUG)
log = logging.getLogger(__name__)


@pytest.fixture  # type:ignore
def frame() -> pd.DataFrame:
    return pd.DataFrame(
        {"a": np.array([1.5, 2.5]), "b": np.array([3, 4], dtype=np.int32)}
    )


@pytest.fixture  # type:ignore
def frame_indexed(frame: pd.DataFrame) -> pd.DataFrame:
    return frame.set_axis(["r1", "r2"], axis=0)
