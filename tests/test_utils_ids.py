"""Tests for xiv_emotes.utils.ids."""

from __future__ import annotations

import pytest

from xiv_emotes.utils.ids import MAX_SNOWFLAKE, to_external_id


class TestToExternalId:
    """Tests for to_external_id function."""

    def test_pads_int_to_fixed_width(self) -> None:
        assert to_external_id(1) == "00000000000000000001"

    def test_pads_plain_string(self) -> None:
        assert to_external_id("81384788765712384") == "00081384788765712384"

    def test_padded_string_is_stable(self) -> None:
        assert to_external_id("00000000000000000001") == "00000000000000000001"

    def test_short_padded_string_normalizes(self) -> None:
        assert to_external_id("00000000000000001") == to_external_id(1)

    def test_strips_whitespace(self) -> None:
        assert to_external_id(" 42 ") == "00000000000000000042"

    def test_max_snowflake_fits(self) -> None:
        assert len(to_external_id(MAX_SNOWFLAKE)) == 20

    @pytest.mark.parametrize("value", ["", "abc", "-1", "12a", "1.5"])
    def test_rejects_non_decimal_strings(self, value: str) -> None:
        with pytest.raises(ValueError):
            to_external_id(value)

    def test_rejects_negative_int(self) -> None:
        with pytest.raises(ValueError):
            to_external_id(-5)

    def test_rejects_too_large(self) -> None:
        with pytest.raises(ValueError):
            to_external_id(MAX_SNOWFLAKE + 1)

    def test_rejects_bool(self) -> None:
        with pytest.raises(ValueError):
            to_external_id(True)
