import os
import sys
from unittest import mock

from graphedit.platform import platform_bits, running_pids, total_ram_bytes


def test_platform_bits_matches_interpreter():
    expected = 64 if sys.maxsize > 2**32 else 32
    assert platform_bits() == expected


def test_running_pids_contains_current_process():
    assert os.getpid() in running_pids()


def test_running_pids_empty_on_failure():
    with mock.patch("psutil.pids", side_effect=OSError):
        assert running_pids() == set()


def test_total_ram_is_positive():
    assert total_ram_bytes() > 0


def test_total_ram_zero_on_failure():
    with mock.patch("psutil.virtual_memory", side_effect=OSError):
        assert total_ram_bytes() == 0