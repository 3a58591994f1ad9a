from dmcd.decoder import parse_lines
from dmcd.model import DataManagementCard
from dmcd.parsers.customer import CustomerDataParser


def _feed(lines):
    parser = CustomerDataParser()
    card = DataManagementCard()
    for line in lines:
        parser.feed(line, card)
    return card


def test_distributor_then_end_customer():
    card = _feed(
        [
            "<Name>",
            "Distributor A",
            "<Phone>",
            "555-0100",
            "<Customer>",
            "<Name>",
            "End User B",
            "<Phone>",
            "555-0199",
        ]
    )
    assert card.contacts.distributor.name == "Distributor A"
    assert card.contacts.distributor.phone == "555-0100"
    assert card.contacts.end_customer.name == "End User B"
    assert card.contacts.end_customer.phone == "555-0199"


def test_address_lines_are_joined():
    card = _feed(["<Address>", "100 Main St", "Springfield, IL"])
    assert card.contacts.distributor.address == "100 Main St\nSpringfield, IL"


def test_value_right_after_customer_marker_is_dropped():
    card = _feed(["<Name>", "Distributor A", "<Customer>", "Loose Value"])
    assert card.contacts.distributor.name == "Distributor A"
    assert card.contacts.end_customer.name is None
    assert card.diagnostics == []


def test_unknown_key_is_diagnosed():
    card = _feed(["<Fax>", "555-0101"])
    assert len(card.diagnostics) == 1
    assert "Fax" in card.diagnostics[0]


def test_reentering_section_starts_with_distributor():
    card = parse_lines(
        [
            "=====[ Customer Data ]=====",
            "<Customer>",
            "<Name>",
            "End User B",
            "=====[ Customer Data ]=====",
            "<Name>",
            "Distributor A",
        ]
    )
    assert card.contacts.end_customer.name == "End User B"
    assert card.contacts.distributor.name == "Distributor A"


def test_names_only_card_leaves_other_contact_fields_unset():
    card = parse_lines(
        [
            "=====[ Customer Data ]=====",
            "<Name>",
            "Distributor A",
            "<Customer>",
            "<Name>",
            "End User B",
        ]
    )
    distributor = card.contacts.distributor
    end_customer = card.contacts.end_customer
    assert distributor.name == "Distributor A"
    assert end_customer.name == "End User B"
    for contact in (distributor, end_customer):
        assert contact.address is None
        assert contact.phone is None
    assert card.diagnostics == []
