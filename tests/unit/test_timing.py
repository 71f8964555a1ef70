# -*- coding: utf-8 -*-
from unittest.mock import patch

import pytest

from placement_deploy.engine.lifecycle.utils import PhaseTimer


def test_measure_accumulates():
    timer = PhaseTimer()
    clock = iter([10.0, 11.5, 20.0, 20.25])

    with patch(
        "placement_deploy.engine.lifecycle.utils.timing.time.monotonic",
        side_effect=lambda: next(clock),
    ):
        with timer.measure("dbsync"):
            pass
        with timer.measure("dbsync"):
            pass

    assert timer.totals() == {"dbsync": 1.75}


def test_measure_records_on_error():
    timer = PhaseTimer()

    with pytest.raises(RuntimeError):
        with timer.measure("wait_for_service"):
            raise RuntimeError("boom")

    assert "wait_for_service" in timer.totals()
