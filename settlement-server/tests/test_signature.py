"""MD5 parameter signing."""

from decimal import Decimal

import pytest

from rise_settlement.core.signature import canonical_string, format_value, sign, verify


class TestCanonicalString:
    def test_sorted_pairs_with_key_appended(self):
        params = {"b": 2, "a": "x", "sign": "ignored", "sign_type": "MD5", "c": None}
        assert canonical_string(params, "k") == "a=x&b=2&key=k"

    def test_known_digest(self):
        assert sign({"b": 2, "a": "x"}, "k") == "b6b55ab19432b1b5f30a463d1ae8ccc1"
        params = {"tradeResult": "1", "mchOrderNo": "WS-1", "amount": "500.00"}
        assert sign(params, "secret") == "be25e22222c3ebf41507b77cf2c4fb8b"

    def test_empty_string_is_kept_but_none_dropped(self):
        assert canonical_string({"a": "", "b": None}, "k") == "a=&key=k"

    def test_locale_order_puts_punctuation_before_letters(self):
        params = {"mchId": "1", "mch_order_no": "2"}
        assert canonical_string(params, "k", "locale") == "mch_order_no=2&mchId=1&key=k"
        assert canonical_string(params, "k", "byte") == "mchId=1&mch_order_no=2&key=k"

    def test_locale_order_ignores_case_before_tiebreak(self):
        params = {"Zeta": "1", "alpha": "2", "Beta": "3"}
        assert canonical_string(params, "k", "locale") == "alpha=2&Beta=3&Zeta=1&key=k"
        assert canonical_string(params, "k", "byte") == "Beta=3&Zeta=1&alpha=2&key=k"

    def test_unknown_key_order(self):
        with pytest.raises(ValueError):
            canonical_string({"a": "1"}, "k", "natural")


class TestFormatValue:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (True, "true"),
            (False, "false"),
            (500, "500"),
            (500.0, "500"),
            (0.1, "0.1"),
            (1e-7, "0.0000001"),
            (Decimal("12.50"), "12.50"),
            ("abc", "abc"),
        ],
    )
    def test_wire_rendering(self, value, expected):
        assert format_value(value) == expected


class TestVerify:
    def test_accepts_matching_signature_in_any_case(self):
        params = {"amount": "500.00", "mchOrderNo": "WS-1"}
        signature = sign(params, "secret")
        assert verify({**params, "sign": signature}, signature, "secret")
        assert verify(params, signature.upper(), "secret")

    def test_rejects_tampered_amount(self):
        params = {"amount": "500.00", "mchOrderNo": "WS-1"}
        signature = sign(params, "secret")
        assert not verify({**params, "amount": "5000.00"}, signature, "secret")

    def test_rejects_wrong_secret_and_missing_signature(self):
        params = {"amount": "500.00"}
        assert not verify(params, sign(params, "secret"), "other-secret")
        assert not verify(params, None, "secret")
        assert not verify(params, "", "secret")
