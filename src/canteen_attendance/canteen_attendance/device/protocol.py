"""Envelope codec for the access-control server's XML web service.

Requests are SOAP 1.1 envelopes. Responses wrap a single delimited string
(records split by ``;``, fields by ``,``) inside ``<{Operation}Result>``.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterable, List, Sequence, Tuple

from ..core.exceptions import DeviceProtocolError

SOAP_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SERVICE_NS = "http://tempuri.org/"
SERVICE_PATH = "/iclock/webservice.asmx"

RECORD_SEPARATOR = ";"
FIELD_SEPARATOR = ","

OP_DEVICE_LIST = "GetDeviceList"
OP_DEVICE_LOGS = "GetDeviceLogs"
OP_UPDATE_EMPLOYEE = "UpdateEmployee"
OP_RESET_CHECKPOINT = "ResetDeviceCheckpoint"

ET.register_namespace("soap", SOAP_NS)
ET.register_namespace("tns", SERVICE_NS)


def _q(ns: str, tag: str) -> str:
    return f"{{{ns}}}{tag}"


def operation_url(base_url: str, operation: str) -> str:
    return f"{base_url.rstrip('/')}{SERVICE_PATH}?op={operation}"


def soap_action(operation: str) -> str:
    return f"{SERVICE_NS}{operation}"


def build_envelope(operation: str, fields: Iterable[Tuple[str, object]]) -> bytes:
    """Serialize one operation call. Field values are escaped by the XML writer."""
    envelope = ET.Element(_q(SOAP_NS, "Envelope"))
    body = ET.SubElement(envelope, _q(SOAP_NS, "Body"))
    call = ET.SubElement(body, _q(SERVICE_NS, operation))
    for name, value in fields:
        ET.SubElement(call, _q(SERVICE_NS, name)).text = "" if value is None else str(value)
    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def extract_result(payload: bytes | str, operation: str) -> str:
    """Return the text of ``<{operation}Result>``; empty string when absent.

    Raises DeviceProtocolError when the payload is not the expected envelope.
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise DeviceProtocolError(f"{operation}: response is not well-formed XML ({e})") from e

    if root.tag != _q(SOAP_NS, "Envelope"):
        raise DeviceProtocolError(f"{operation}: unexpected root element {root.tag!r}")

    body = root.find(_q(SOAP_NS, "Body"))
    if body is None:
        raise DeviceProtocolError(f"{operation}: envelope has no Body")

    fault = body.find(_q(SOAP_NS, "Fault"))
    if fault is not None:
        reason = (fault.findtext("faultstring") or "").strip() or "unknown fault"
        raise DeviceProtocolError(f"{operation}: server fault: {reason}")

    response = body.find(_q(SERVICE_NS, f"{operation}Response"))
    if response is None:
        raise DeviceProtocolError(f"{operation}: missing {operation}Response element")

    result = response.find(_q(SERVICE_NS, f"{operation}Result"))
    if result is None or result.text is None:
        return ""
    return result.text


def split_records(result: str, min_fields: int) -> List[List[str]]:
    """Split the delimited result string into padded field lists.

    Blank records are ignored; records with fewer than `min_fields` fields are
    dropped, the remaining short ones are padded with empty strings.
    """
    rows: List[List[str]] = []
    for chunk in (result or "").split(RECORD_SEPARATOR):
        if not chunk.strip():
            continue
        fields = chunk.split(FIELD_SEPARATOR)
        if len(fields) < min_fields:
            continue
        rows.append(fields)
    return rows


def field(fields: Sequence[str], index: int) -> str:
    return fields[index].strip() if index < len(fields) else ""
