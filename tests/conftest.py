"""Pytest configuration and fixtures for gcomm-conf tests."""

import pytest

from gcomm_conf.source import Descriptor


@pytest.fixture
def sample_options() -> dict[str, str]:
    """Options as a parsed evs/gmcast descriptor would carry them."""
    return {
        "x": "32",
        "evs.suspect_timeout": "PT5S",
        "evs.inactive_check_period": "PT0.05S",
        "evs.keepalive_period": "PT1S",
        "evs.consensus_timeout": "PT1M30S",
        "evs.view_forget_timeout": "P1DT6H",
        "evs.send_window": "64",
        "evs.use_aggregate": "1",
        "evs.debug_log_mask": "0x3",
        "gmcast.group": "my_group",
        "socket.non_blocking": "yes",
    }


@pytest.fixture
def descriptor(sample_options: dict[str, str]) -> Descriptor:
    return Descriptor(sample_options, authority="192.168.3.1:4567")
