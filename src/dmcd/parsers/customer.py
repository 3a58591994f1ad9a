"""Customer Data: distributor block, then ``<Customer>`` and the end customer."""

from __future__ import annotations

import logging
from enum import Enum

from dmcd.model import Contact, DataManagementCard
from dmcd.parsers.base import SectionParser, bracketed_key, diagnose

logger = logging.getLogger(__name__)

END_CUSTOMER_MARKER = "Customer"
ADDRESS_JOINER = "\n"


class Entity(Enum):
    DISTRIBUTOR = "distributor"
    END_CUSTOMER = "end customer"


class ContactKey(Enum):
    NAME = "Name"
    ADDRESS = "Address"
    PHONE = "Phone"


CONTACT_KEYS = {key.value: key for key in ContactKey}


class CustomerDataParser(SectionParser):
    def __init__(self) -> None:
        self.entity = Entity.DISTRIBUTOR
        self.key_name: str | None = None

    def reset(self) -> None:
        self.entity = Entity.DISTRIBUTOR
        self.key_name = None

    def _contact(self, card: DataManagementCard) -> Contact:
        if self.entity is Entity.DISTRIBUTOR:
            return card.contacts.distributor
        return card.contacts.end_customer

    def feed(self, line: str, card: DataManagementCard) -> None:
        key_name = bracketed_key(line, "<", ">")
        if key_name is not None:
            if key_name == END_CUSTOMER_MARKER:
                # a stray value right after the marker must not leak into either entity
                self.entity = Entity.END_CUSTOMER
                self.key_name = None
            else:
                self.key_name = key_name
            return
        if not line.strip() or self.key_name is None:
            return

        contact = self._contact(card)
        key = CONTACT_KEYS.get(self.key_name)
        if key is ContactKey.NAME:
            contact.name = line
        elif key is ContactKey.ADDRESS:
            if contact.address:
                contact.address = f"{contact.address}{ADDRESS_JOINER}{line}"
            else:
                contact.address = line
        elif key is ContactKey.PHONE:
            contact.phone = line
        else:
            diagnose(
                card,
                logger,
                f"Value '{line}' for unhandled key '<{self.key_name}>' "
                f"in Customer Data ({self.entity.value})",
            )
