import pytest

from dmcd.parsers.base import SectionParser, bracketed_key
from dmcd.parsers.keyvalue import SingleValueParser


def test_section_parser_requires_reset_and_feed():
    with pytest.raises(TypeError):
        SectionParser()

    class ResetOnly(SectionParser):
        def reset(self) -> None:
            pass

    with pytest.raises(TypeError):
        ResetOnly()


def test_single_value_parser_requires_target():
    with pytest.raises(TypeError):
        SingleValueParser()


@pytest.mark.parametrize(
    ("line", "key"),
    [("<Name>", "Name"), ("[ LPP ]", "LPP"), ("<>", ""), ("<Name", None), ("Name>", None)],
)
def test_bracketed_key(line, key):
    opening, closing = ("[", "]") if line.startswith("[") else ("<", ">")
    assert bracketed_key(line, opening, closing) == key
