"""Key-line / value-line sections.

A key line is wholly bracketed (``<Key>`` in Machine Data, ``[Key]`` in the
version and composition sections); any other non-blank line is a value for the
most recent key. Values seen before any key are ignored.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from datetime import date, datetime
from enum import Enum

from dmcd.model import CustomSoftwareGroup, DataManagementCard, SoftwarePackage
from dmcd.parsers.base import SectionParser, bracketed_key, diagnose

logger = logging.getLogger(__name__)

PRODUCTION_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


class MachineKey(Enum):
    OSP_TYPE = "Type of OSP"
    MACHINE_TYPE = "Type of Machine"
    SOFT_PRODUCTION_NO = "Soft Production No"
    PROJECT_NO = "Project No"
    PRODUCTION_DATE = "Software Production Date"


MACHINE_KEYS = {key.value: key for key in MachineKey}


def parse_production_date(text: str) -> date | None:
    for fmt in PRODUCTION_DATE_FORMATS:
        try:
            return datetime.strptime(text.strip(), fmt).date()
        except ValueError:
            continue
    return None


class MachineDataParser(SectionParser):
    """``<Key>`` lines followed by values; Type of Machine accumulates."""

    def __init__(self) -> None:
        self.key_name: str | None = None

    def reset(self) -> None:
        self.key_name = None

    def feed(self, line: str, card: DataManagementCard) -> None:
        key_name = bracketed_key(line, "<", ">")
        if key_name is not None:
            self.key_name = key_name
            if MACHINE_KEYS.get(key_name) is MachineKey.MACHINE_TYPE:
                card.machine.machine_types.clear()
            return
        if not line.strip() or self.key_name is None:
            return

        machine = card.machine
        key = MACHINE_KEYS.get(self.key_name)
        if key is MachineKey.OSP_TYPE:
            machine.osp_type = line
        elif key is MachineKey.MACHINE_TYPE:
            machine.machine_types.append(line)
        elif key is MachineKey.SOFT_PRODUCTION_NO:
            machine.soft_production_number = line
        elif key is MachineKey.PROJECT_NO:
            machine.project_number = line
        elif key is MachineKey.PRODUCTION_DATE:
            parsed = parse_production_date(line)
            if parsed is None:
                diagnose(card, logger, f"Could not parse Software Production Date '{line}'")
            else:
                machine.production_date = parsed
        else:
            diagnose(
                card,
                logger,
                f"Value '{line}' for unhandled key '<{self.key_name}>' in Machine Data",
            )


class SingleValueParser(SectionParser):
    """``[Key]`` then exactly one value line, written to a fixed attribute."""

    section_name = ""
    # key text -> attribute name on the section result
    attributes: dict[str, str] = {}

    def __init__(self) -> None:
        self.key_name: str | None = None

    def reset(self) -> None:
        self.key_name = None

    @abstractmethod
    def target(self, card: DataManagementCard) -> object:
        """Result object whose attributes receive the values."""

    def feed(self, line: str, card: DataManagementCard) -> None:
        key_name = bracketed_key(line, "[", "]")
        if key_name is not None:
            self.key_name = key_name
            return
        if not line.strip() or self.key_name is None:
            return

        attribute = self.attributes.get(self.key_name)
        if attribute is None:
            diagnose(
                card,
                logger,
                f"Value '{line}' for unhandled key '[{self.key_name}]' in {self.section_name}",
            )
        else:
            setattr(self.target(card), attribute, line)
        self.key_name = None


class DvdMediaVersionParser(SingleValueParser):
    section_name = "DVD Media Version Data"
    attributes = {
        "Windows System CD Version": "windows_system_cd_version",
        "Windows System CD/DVD Version": "windows_system_cd_version",
        "OSP System CD Version": "osp_system_cd_version",
        "OSP System CD/DVD Version": "osp_system_cd_version",
    }

    def target(self, card: DataManagementCard) -> object:
        return card.dvd_media


class SoftVersionParser(SingleValueParser):
    section_name = "Soft Version Excepted OSP System CD"
    attributes = {
        "Windows System Version": "windows_system_version",
        "Custom API Additional DVD Version": "api_dvd_version",
        "MTconnect Version": "mtconnect_version",
        "MTconnect Version@(Included in App_THINC_API DVD)": "mtconnect_version",
    }

    def target(self, card: DataManagementCard) -> object:
        return card.software_versions


class PackageCompositionParser(SectionParser):
    """``[Package name]`` followed by one identifier line."""

    def __init__(self) -> None:
        self.package_name: str | None = None

    def reset(self) -> None:
        self.package_name = None

    def feed(self, line: str, card: DataManagementCard) -> None:
        name = bracketed_key(line, "[", "]")
        if name is not None:
            self.package_name = name
            return
        if not line.strip():
            return
        if self.package_name is None:
            logger.debug("Ignoring stray package line '%s'", line)
            return
        card.packages.append(SoftwarePackage(package_name=self.package_name, identifier=line))
        self.package_name = None


class CustomSoftCompositionParser(SectionParser):
    """``[Group]`` followed by any number of file path lines."""

    def __init__(self) -> None:
        self.group: CustomSoftwareGroup | None = None

    def reset(self) -> None:
        self.group = None

    def feed(self, line: str, card: DataManagementCard) -> None:
        name = bracketed_key(line, "[", "]")
        if name is not None:
            self.group = CustomSoftwareGroup(group_name=name)
            card.custom_software.append(self.group)
            return
        if line.strip() and self.group is not None:
            self.group.file_paths.append(line)
