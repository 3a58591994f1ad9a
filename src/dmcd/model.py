"""Structured record produced from a Data Management Card.

Every section result is a plain dataclass owned by ``DataManagementCard``.
Fields stay ``None`` until an explicit key/value pair populates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class MachineData:
    osp_type: str | None = None
    machine_types: list[str] = field(default_factory=list)
    soft_production_number: str | None = None
    project_number: str | None = None
    production_date: date | None = None


@dataclass
class Contact:
    name: str | None = None
    address: str | None = None
    phone: str | None = None


@dataclass
class CustomerData:
    distributor: Contact = field(default_factory=Contact)
    end_customer: Contact = field(default_factory=Contact)


@dataclass
class RevisionEntry:
    identifier: str
    raw_line: str
    production_date: date | None = None
    sales_order: str | None = None
    project_number: str | None = None


@dataclass
class DvdMediaVersions:
    windows_system_cd_version: str | None = None
    osp_system_cd_version: str | None = None


@dataclass
class SoftwareVersions:
    windows_system_version: str | None = None
    api_dvd_version: str | None = None
    mtconnect_version: str | None = None


@dataclass
class SoftwarePackage:
    package_name: str
    identifier: str


@dataclass
class CustomSoftwareGroup:
    group_name: str
    file_paths: list[str] = field(default_factory=list)


@dataclass
class SpecFeature:
    name: str
    enabled: bool
    bank_number: int
    bit_index: int


@dataclass
class SpecCodeSection:
    title: str
    features: list[SpecFeature] = field(default_factory=list)
    hex_codes: list[str] = field(default_factory=list)


@dataclass
class DataManagementCard:
    machine: MachineData = field(default_factory=MachineData)
    contacts: CustomerData = field(default_factory=CustomerData)
    revisions: list[RevisionEntry] = field(default_factory=list)
    dvd_media: DvdMediaVersions = field(default_factory=DvdMediaVersions)
    software_versions: SoftwareVersions = field(default_factory=SoftwareVersions)
    packages: list[SoftwarePackage] = field(default_factory=list)
    custom_software: list[CustomSoftwareGroup] = field(default_factory=list)
    nc_spec_codes: list[SpecCodeSection] = field(default_factory=list)
    plc_spec_codes: list[SpecCodeSection] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        """Record an advisory diagnostic; parsing continues."""
        self.diagnostics.append(message)

    def all_spec_sections(self) -> list[tuple[str, SpecCodeSection]]:
        """NC sections first, then PLC, each tagged with its family."""
        return [("NC", s) for s in self.nc_spec_codes] + [("PLC", s) for s in self.plc_spec_codes]
