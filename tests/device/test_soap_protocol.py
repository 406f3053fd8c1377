from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from src.canteen_attendance.canteen_attendance.core.exceptions import DeviceProtocolError
from src.canteen_attendance.canteen_attendance.device import protocol

SOAP = protocol.SOAP_NS
TNS = protocol.SERVICE_NS


def _response(op: str, result: str | None) -> bytes:
    inner = "" if result is None else f"<{op}Result>{result}</{op}Result>"
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<soap:Envelope xmlns:soap="{SOAP}">'
        f'<soap:Body><{op}Response xmlns="{TNS}">{inner}</{op}Response></soap:Body>'
        "</soap:Envelope>"
    ).encode("utf-8")


def test_operation_url_and_action():
    assert protocol.operation_url("http://essl:85/", "GetDeviceLogs") == "http://essl:85/iclock/webservice.asmx?op=GetDeviceLogs"
    assert protocol.soap_action("GetDeviceLogs") == "http://tempuri.org/GetDeviceLogs"


def test_build_envelope_escapes_field_values():
    payload = protocol.build_envelope("GetDeviceLogs", [("UserName", "a&b"), ("Password", "<p>"), ("LogDate", None)])

    root = ET.fromstring(payload)
    call = root.find(f"{{{SOAP}}}Body/{{{TNS}}}GetDeviceLogs")
    assert call is not None
    assert call.findtext(f"{{{TNS}}}UserName") == "a&b"
    assert call.findtext(f"{{{TNS}}}Password") == "<p>"
    assert call.findtext(f"{{{TNS}}}LogDate") == ""


def test_extract_result_decodes_entities_once():
    body = _response("GetDeviceLogs", "2025-03-2311:34:52,E1001,Canteen &amp; Cafe,Chennai,in")

    result = protocol.extract_result(body, "GetDeviceLogs")

    assert result == "2025-03-2311:34:52,E1001,Canteen & Cafe,Chennai,in"


def test_extract_result_empty_or_missing_result_is_no_activity():
    assert protocol.extract_result(_response("GetDeviceLogs", ""), "GetDeviceLogs") == ""
    assert protocol.extract_result(_response("GetDeviceLogs", None), "GetDeviceLogs") == ""


def test_extract_result_fault_is_protocol_error():
    body = (
        f'<soap:Envelope xmlns:soap="{SOAP}"><soap:Body><soap:Fault>'
        "<faultcode>soap:Server</faultcode><faultstring>Invalid credentials</faultstring>"
        "</soap:Fault></soap:Body></soap:Envelope>"
    )

    with pytest.raises(DeviceProtocolError, match="Invalid credentials"):
        protocol.extract_result(body, "GetDeviceLogs")


@pytest.mark.parametrize(
    "payload",
    [
        b"<html><body>Service Unavailable</body></html>",
        b"<soap:Envelope",
        f'<soap:Envelope xmlns:soap="{SOAP}"><soap:Header/></soap:Envelope>'.encode(),
        _response("GetDeviceList", "x"),
    ],
)
def test_extract_result_rejects_unexpected_payloads(payload):
    with pytest.raises(DeviceProtocolError):
        protocol.extract_result(payload, "GetDeviceLogs")


def test_split_records_skips_blank_and_short_records():
    rows = protocol.split_records("a,b,c; ;lonely;d,e;", min_fields=2)

    assert rows == [["a", "b", "c"], ["d", "e"]]
    assert protocol.field(rows[1], 4) == ""
