"""
XML parser for interface statistics replies.

Decodes the <data> payload of an ietf-interfaces <get> reply into
InterfaceStat objects. Elements are matched by local name so replies
that qualify (or omit) the ietf-interfaces namespace decode the same way.
"""

from __future__ import annotations

import logging

from lxml import etree

from netconf_ifstats.constants import COUNTER_MAX, ReplyElements
from netconf_ifstats.core.exceptions import DecodeError
from netconf_ifstats.models.metrics import InterfaceStat

logger = logging.getLogger(__name__)


def _local_name(element: etree._Element) -> str | None:
    """Return the element's tag without namespace, or None for comments/PIs."""
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


class InterfaceStatsParser:
    """
    Parser for ietf-interfaces statistics replies.

    The reply root may be the `interfaces` container itself or any element
    (normally NETCONF `<data>`) with `interfaces` as a direct child.
    Missing names and counters decode as empty string and zero.

    Attributes:
        device_address: Address stamped onto every decoded stat
    """

    def __init__(self, device_address: str = ""):
        self.device_address = device_address
        self._xml_parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
        )

    def parse(self, raw: bytes | str) -> list[InterfaceStat]:
        """
        Decode a reply payload.

        Args:
            raw: Reply payload, bytes or str (str is encoded as UTF-8)

        Returns:
            One InterfaceStat per `interface` element, in document order

        Raises:
            DecodeError: If the payload is not well-formed XML, has no
                `interfaces` container, or holds an invalid counter
        """
        root = self._parse_document(raw)
        container = self._find_interfaces(root)

        stats = [
            self._decode_interface(entry)
            for entry in container
            if _local_name(entry) == ReplyElements.INTERFACE
        ]
        logger.debug(f"Decoded {len(stats)} interfaces from {self.device_address or 'reply'}")
        return stats

    def _parse_document(self, raw: bytes | str) -> etree._Element:
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        if not raw or not raw.strip():
            raise DecodeError("empty payload", self.device_address or None)
        try:
            return etree.fromstring(raw, parser=self._xml_parser)
        except etree.XMLSyntaxError as e:
            raise DecodeError(f"malformed XML: {e}", self.device_address or None) from e

    def _find_interfaces(self, root: etree._Element) -> etree._Element:
        if _local_name(root) == ReplyElements.INTERFACES:
            return root
        for child in root:
            if _local_name(child) == ReplyElements.INTERFACES:
                return child
        raise DecodeError(
            f"no '{ReplyElements.INTERFACES}' element under <{_local_name(root)}>",
            self.device_address or None,
        )

    def _decode_interface(self, entry: etree._Element) -> InterfaceStat:
        name = self._child_text(entry, ReplyElements.NAME)
        statistics = self._child(entry, ReplyElements.STATISTICS)

        in_octets = out_octets = 0
        if statistics is not None:
            in_octets = self._counter(statistics, ReplyElements.IN_OCTETS, name)
            out_octets = self._counter(statistics, ReplyElements.OUT_OCTETS, name)

        return InterfaceStat(
            interface_name=name,
            device_address=self.device_address,
            input_octets=in_octets,
            output_octets=out_octets,
        )

    @staticmethod
    def _child(element: etree._Element, name: str) -> etree._Element | None:
        for child in element:
            if _local_name(child) == name:
                return child
        return None

    def _child_text(self, element: etree._Element, name: str) -> str:
        child = self._child(element, name)
        if child is None or child.text is None:
            return ""
        return child.text.strip()

    def _counter(self, statistics: etree._Element, name: str, interface: str) -> int:
        text = self._child_text(statistics, name)
        if not text:
            return 0
        if not (text.isascii() and text.isdigit()):
            raise DecodeError(
                f"invalid {name} value {text!r} for interface {interface!r}",
                self.device_address or None,
            )
        value = int(text)
        if value > COUNTER_MAX:
            raise DecodeError(
                f"{name} value {text} for interface {interface!r} overflows 64 bits",
                self.device_address or None,
            )
        return value


def decode_interface_stats(raw: bytes | str, device_address: str = "") -> list[InterfaceStat]:
    """
    Decode an interface statistics reply.

    Convenience wrapper around InterfaceStatsParser.

    Raises:
        DecodeError: On malformed or structurally invalid replies
    """
    return InterfaceStatsParser(device_address).parse(raw)
