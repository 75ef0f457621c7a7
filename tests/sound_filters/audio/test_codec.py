"""Tests for the 16-bit PCM sample codec."""

import array
import sys

import numpy as np
import pytest

from sound_filters.audio.codec import get_sample, set_sample, to_samples
from sound_filters.errors import OutOfBoundsError


class TestGetSample:
    def test_little_endian_order(self):
        # 0x03E8 == 1000, low byte first
        assert get_sample(bytearray(b"\xe8\x03"), 0) == 1000

    def test_negative_sample_sign_extends(self):
        assert get_sample(bytearray(b"\x18\xfc"), 0) == -1000
        assert get_sample(bytearray(b"\x00\x80"), 0) == -32768
        assert get_sample(bytearray(b"\xff\xff"), 0) == -1

    def test_reads_at_position(self):
        buf = bytearray(b"\x00\x00\x01\x00\xff\x7f")
        assert get_sample(buf, 2) == 1
        assert get_sample(buf, 4) == 32767

    def test_works_on_readonly_bytes(self):
        assert get_sample(b"\x01\x00", 0) == 1

    @pytest.mark.parametrize("position", [-1, 3, 4, 10])
    def test_out_of_bounds(self, position):
        with pytest.raises(OutOfBoundsError):
            get_sample(bytearray(4), position)


class TestSetSample:
    def test_writes_low_then_high(self):
        buf = bytearray(4)
        set_sample(buf, 2, -2)
        assert buf == bytearray(b"\x00\x00\xfe\xff")

    def test_mutates_exactly_two_bytes(self):
        buf = bytearray(b"\xaa" * 6)
        set_sample(buf, 2, 0)
        assert buf == bytearray(b"\xaa\xaa\x00\x00\xaa\xaa")

    def test_keeps_low_16_bits(self):
        buf = bytearray(2)
        set_sample(buf, 0, 32768)
        assert get_sample(buf, 0) == -32768

    @pytest.mark.parametrize("sample", [-32768, -12345, -1, 0, 1, 255, 256, 32767])
    def test_round_trip(self, sample):
        buf = bytearray(6)
        set_sample(buf, 3, sample)
        assert get_sample(buf, 3) == sample

    def test_round_trip_full_range(self):
        buf = bytearray(2)
        for sample in range(-32768, 32768, 97):
            set_sample(buf, 0, sample)
            assert get_sample(buf, 0) == sample

    def test_out_of_bounds(self):
        with pytest.raises(OutOfBoundsError):
            set_sample(bytearray(2), 1, 5)

    def test_readonly_buffer_rejected(self):
        with pytest.raises(TypeError):
            set_sample(b"\x00\x00", 0, 5)


class TestToSamples:
    def test_view_shares_memory(self):
        buf = bytearray(b"\xe8\x03\x18\xfc")
        samples = to_samples(buf)
        np.testing.assert_array_equal(samples, [1000, -1000])

        samples[0] = 7
        assert get_sample(buf, 0) == 7

    def test_sub_range(self):
        buf = bytearray(b"\x01\x00\x02\x00\x03\x00")
        np.testing.assert_array_equal(to_samples(buf, 2, 2), [2])

    def test_empty_range(self):
        assert len(to_samples(bytearray(4), 4, 0)) == 0

    @pytest.mark.parametrize(
        "offset, length",
        [(0, 3), (-2, 2), (0, -2), (2, 4), (6, 0)],
    )
    def test_invalid_range(self, offset, length):
        with pytest.raises(OutOfBoundsError):
            to_samples(bytearray(4), offset, length)


@pytest.mark.skipif(sys.byteorder != "little", reason="native int16 buffers are little-endian only here")
class TestItemSizedBuffers:
    def test_get_sample_from_array_of_shorts(self):
        buf = array.array("h", [-2, 7])
        assert get_sample(buf, 0) == -2
        assert get_sample(buf, 2) == 7

    def test_set_sample_into_int16_ndarray(self):
        buf = np.zeros(2, dtype=np.int16)
        set_sample(buf, 2, -1234)
        np.testing.assert_array_equal(buf, [0, -1234])

    def test_position_bounds_in_bytes(self):
        buf = array.array("h", [1, 2])
        with pytest.raises(OutOfBoundsError):
            get_sample(buf, 3)

    def test_to_samples_over_array_of_shorts(self):
        buf = array.array("h", [1, 2, 3])
        np.testing.assert_array_equal(to_samples(buf, 2), [2, 3])
