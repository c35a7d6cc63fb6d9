"""USB descriptors for a composite device with two CDC-ACM serial ports.

The first port carries debug output, the second application messages.
"""

from __future__ import annotations

import struct

# Stack configuration.
CDC_INTERFACE_COUNT = 2
CDC_RX_BUFFER_SIZE = 512
CDC_TX_BUFFER_SIZE = 128
CDC_EP_BUFFER_SIZE = 64
ENDPOINT0_SIZE = 64

# Descriptor types.
DESC_DEVICE = 0x01
DESC_CONFIGURATION = 0x02
DESC_STRING = 0x03
DESC_INTERFACE = 0x04
DESC_ENDPOINT = 0x05
DESC_INTERFACE_ASSOCIATION = 0x0B
DESC_CS_INTERFACE = 0x24

# Class codes.
CLASS_CDC = 0x02
CLASS_CDC_DATA = 0x0A
CLASS_MISC = 0xEF
MISC_SUBCLASS_COMMON = 0x02
MISC_PROTOCOL_IAD = 0x01
CDC_SUBCLASS_ACM = 0x02
CDC_PROTOCOL_NONE = 0x00

CDC_FUNC_HEADER = 0x00
CDC_FUNC_CALL_MANAGEMENT = 0x01
CDC_FUNC_ACM = 0x02
CDC_FUNC_UNION = 0x06

XFER_BULK = 0x02
XFER_INTERRUPT = 0x03

CONFIG_ATT_BASE = 0x80
CONFIG_ATT_SELF_POWERED = 0x40

VENDOR_ID = 0xCAFE
PRODUCT_ID = 0x4000 | CDC_INTERFACE_COUNT
USB_BCD = 0x0200
DEVICE_BCD = 0x0100
MAX_POWER_MA = 100

ITF_NUM_CDC_0 = 0
ITF_NUM_CDC_0_DATA = 1
ITF_NUM_CDC_1 = 2
ITF_NUM_CDC_1_DATA = 3
ITF_NUM_TOTAL = 4

EPNUM_CDC0_NOTIF = 0x81
EPNUM_CDC0_OUT = 0x02
EPNUM_CDC0_IN = 0x82
EPNUM_CDC1_NOTIF = 0x83
EPNUM_CDC1_OUT = 0x04
EPNUM_CDC1_IN = 0x84
NOTIFICATION_EP_SIZE = 8

CONFIG_DESC_LEN = 9
CDC_DESC_LEN = 66
CONFIG_TOTAL_LEN = CONFIG_DESC_LEN + 2 * CDC_DESC_LEN

STRID_LANGID = 0
STRID_MANUFACTURER = 1
STRID_PRODUCT = 2
STRID_SERIAL = 3
STRID_CDC_0 = 4
STRID_CDC_1 = 5

LANGID_EN_US = 0x0409
DEFAULT_SERIAL = "123456"
MAX_STRING_CHARS = 32

STRINGS: tuple[str, ...] = (
    "",
    "University of Oulu",
    "TKJHAT",
    DEFAULT_SERIAL,
    "Stdout CDC",
    "Communication CDC",
)


def device_descriptor() -> bytes:
    """The 18-byte device descriptor."""
    return struct.pack(
        "<BBHBBBBHHHBBBB",
        18,
        DESC_DEVICE,
        USB_BCD,
        CLASS_MISC,
        MISC_SUBCLASS_COMMON,
        MISC_PROTOCOL_IAD,
        ENDPOINT0_SIZE,
        VENDOR_ID,
        PRODUCT_ID,
        DEVICE_BCD,
        STRID_MANUFACTURER,
        STRID_PRODUCT,
        STRID_SERIAL,
        1,
    )


def _endpoint(address: int, transfer: int, size: int, interval: int) -> bytes:
    return struct.pack("<BBBBHB", 7, DESC_ENDPOINT, address, transfer, size, interval)


def _cdc_function(
    itf: int, string_index: int, ep_notif: int, notif_size: int,
    ep_out: int, ep_in: int, ep_size: int,
) -> bytes:
    parts = [
        struct.pack(
            "<8B", 8, DESC_INTERFACE_ASSOCIATION, itf, 2,
            CLASS_CDC, CDC_SUBCLASS_ACM, CDC_PROTOCOL_NONE, 0,
        ),
        struct.pack(
            "<9B", 9, DESC_INTERFACE, itf, 0, 1,
            CLASS_CDC, CDC_SUBCLASS_ACM, CDC_PROTOCOL_NONE, string_index,
        ),
        struct.pack("<BBBH", 5, DESC_CS_INTERFACE, CDC_FUNC_HEADER, 0x0120),
        struct.pack("<5B", 5, DESC_CS_INTERFACE, CDC_FUNC_CALL_MANAGEMENT, 0, itf + 1),
        struct.pack("<4B", 4, DESC_CS_INTERFACE, CDC_FUNC_ACM, 2),
        struct.pack("<5B", 5, DESC_CS_INTERFACE, CDC_FUNC_UNION, itf, itf + 1),
        _endpoint(ep_notif, XFER_INTERRUPT, notif_size, 16),
        struct.pack("<9B", 9, DESC_INTERFACE, itf + 1, 0, 2, CLASS_CDC_DATA, 0, 0, 0),
        _endpoint(ep_out, XFER_BULK, ep_size, 0),
        _endpoint(ep_in, XFER_BULK, ep_size, 0),
    ]
    return b"".join(parts)


def configuration_descriptor() -> bytes:
    """The full configuration descriptor with both CDC functions."""
    header = struct.pack(
        "<BBHBBBBB",
        CONFIG_DESC_LEN,
        DESC_CONFIGURATION,
        CONFIG_TOTAL_LEN,
        ITF_NUM_TOTAL,
        1,
        0,
        CONFIG_ATT_BASE | CONFIG_ATT_SELF_POWERED,
        MAX_POWER_MA // 2,
    )
    cdc0 = _cdc_function(
        ITF_NUM_CDC_0, STRID_CDC_0, EPNUM_CDC0_NOTIF, NOTIFICATION_EP_SIZE,
        EPNUM_CDC0_OUT, EPNUM_CDC0_IN, CDC_EP_BUFFER_SIZE,
    )
    cdc1 = _cdc_function(
        ITF_NUM_CDC_1, STRID_CDC_1, EPNUM_CDC1_NOTIF, NOTIFICATION_EP_SIZE,
        EPNUM_CDC1_OUT, EPNUM_CDC1_IN, CDC_EP_BUFFER_SIZE,
    )
    return header + cdc0 + cdc1


def _string_payload(text: str) -> bytes:
    text = text[:MAX_STRING_CHARS]
    units = []
    for char in text:
        code = ord(char)
        if code > 0xFFFF:
            raise ValueError(f"character {char!r} does not fit in one UTF-16 unit")
        units.append(code)
    return struct.pack(f"<{len(units)}H", *units)


def string_descriptor(index: int, serial: str | None = None) -> bytes | None:
    """The string descriptor at ``index``, or None if there is no such string.

    ``serial`` replaces the placeholder serial number when given.
    """
    if index == STRID_LANGID:
        payload = struct.pack("<H", LANGID_EN_US)
    elif index == STRID_SERIAL:
        payload = _string_payload(serial if serial is not None else DEFAULT_SERIAL)
    elif 0 <= index < len(STRINGS):
        payload = _string_payload(STRINGS[index])
    else:
        return None
    return bytes((len(payload) + 2, DESC_STRING)) + payload