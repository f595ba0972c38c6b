"""
Unit tests for payload parsers.
"""
import pytest

from gateway_core.core.parsers import (
    ParseError,
    normalize_field,
    parse_delimited,
    parse_json,
    parse_xml,
    underscore,
)


class TestParseJson:
    def test_object(self) -> None:
        assert parse_json('{"id": "pay_1", "approved": true}') == {"id": "pay_1", "approved": True}

    @pytest.mark.parametrize("body", [None, "", "   \n"])
    def test_blank_body_is_empty_payload(self, body: object) -> None:
        assert parse_json(body) == {}  # type: ignore[arg-type]

    def test_scalar_is_wrapped_as_message(self) -> None:
        """Test that a bare JSON string becomes {"message": ...}."""
        assert parse_json('"Unauthorized"') == {"message": "Unauthorized"}

    def test_invalid_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_json("<html>oops</html>")

        assert exc_info.value.body == "<html>oops</html>"


class TestParseXml:
    def test_flattens_nested_leaves(self) -> None:
        """Test that leaves of nested containers land at the top level."""
        body = (
            "<Response>"
            "<TransactionID>T1</TransactionID>"
            "<Card><AVSResult>Y</AVSResult><CVVResult> M </CVVResult></Card>"
            "<Empty/>"
            "</Response>"
        )

        assert parse_xml(body) == {
            "transaction_id": "T1",
            "avs_result": "Y",
            "cvv_result": "M",
            "empty": None,
        }

    def test_strips_namespaces(self) -> None:
        body = '<s:Envelope xmlns:s="urn:x"><s:Body><s:Status>OK</s:Status></s:Body></s:Envelope>'

        assert parse_xml(body) == {"status": "OK"}

    def test_attributes(self) -> None:
        assert parse_xml('<r><code type="decline">05</code></r>') == {
            "code": "05",
            "code_type": "decline",
        }

    def test_single_element_document(self) -> None:
        assert parse_xml("<Status>Approved</Status>") == {"status": "Approved"}

    @pytest.mark.parametrize("body", ["", "<unclosed>", "not xml at all"])
    def test_invalid_xml_raises_parse_error(self, body: str) -> None:
        with pytest.raises(ParseError):
            parse_xml(body)


class TestParseDelimited:
    def test_pairs(self) -> None:
        """Test url-decoding and field normalization."""
        body = "xStatus=Approved&xError=&xRefNum=123&xPartial=false&xName=John+Smith%21"

        assert parse_delimited(body) == {
            "xStatus": "Approved",
            "xError": None,
            "xRefNum": "123",
            "xPartial": False,
            "xName": "John Smith!",
        }

    def test_custom_separators(self) -> None:
        assert parse_delimited("A:1;B:null", pair_separator=";", key_separator=":") == {
            "A": "1",
            "B": None,
        }

    def test_value_may_contain_key_separator(self) -> None:
        assert parse_delimited("token=abc==") == {"token": "abc=="}

    def test_blank_segments_are_skipped(self) -> None:
        assert parse_delimited("a=1&&b=2&") == {"a": "1", "b": "2"}

    def test_malformed_segment_raises(self) -> None:
        with pytest.raises(ParseError):
            parse_delimited("<html>error</html>")

    def test_none_body(self) -> None:
        assert parse_delimited(None) == {}


class TestHelpers:
    @pytest.mark.parametrize(
        "value, expected",
        [("true", True), ("false", False), ("", None), ("null", None), ("05", "05"), (None, None)],
    )
    def test_normalize_field(self, value: object, expected: object) -> None:
        assert normalize_field(value) == expected  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("TransactionID", "transaction_id"),
            ("AVSResult", "avs_result"),
            ("avs-result", "avs_result"),
            ("status", "status"),
            ("RespMSG", "resp_msg"),
        ],
    )
    def test_underscore(self, name: str, expected: str) -> None:
        assert underscore(name) == expected
