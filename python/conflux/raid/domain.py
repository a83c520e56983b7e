"""
The in-memory representation of a Conflux project as seen by the RAiD integration.

A :py:class:`ProjectSnapshot` is a fully materialized, read-only copy of a project together with
its titles, descriptions, contributors, organisations and products.  All of the types defined here
are immutable (collections are held as tuples); the mapping and checking code never changes them.
Each type can be built from a JSON-compatible dictionary via its ``from_json_obj()`` class method,
which accepts ISO-8601 dates and enumeration values given either by name or by vocabulary code.
"""
from collections import namedtuple
from collections.abc import Mapping
from datetime import datetime, date
from enum import Enum, IntEnum

__all__ = [ "TitleType", "DescriptionType", "ContributorRoleType", "ContributorPositionType",
            "OrganisationRoleType", "ProductSchema", "ProductType", "ProductCategoryType",
            "IncompatibilityType", "Title", "Description", "Person", "ContributorPosition",
            "Contributor", "Organisation", "OrganisationRole", "ProjectOrganisation", "Product",
            "ProjectSnapshot", "RAiDInfo", "Incompatibility" ]

class TitleType(IntEnum):
    Primary = 5
    Short = 157
    Acronym = 156
    Alternative = 4

class DescriptionType(IntEnum):
    Primary = 318
    Alternative = 319
    Brief = 3
    Significance = 9
    Methods = 8
    Objectives = 7
    Acknowledgements = 392
    Other = 6

class ContributorRoleType(Enum):
    """
    the Contributor Role Taxonomy (CRediT) roles; see https://credit.niso.org/
    """
    Conceptualization = "Conceptualization"
    DataCuration = "DataCuration"
    FormalAnalysis = "FormalAnalysis"
    FundingAcquisition = "FundingAcquisition"
    Investigation = "Investigation"
    Methodology = "Methodology"
    ProjectAdministration = "ProjectAdministration"
    Resources = "Resources"
    Software = "Software"
    Supervision = "Supervision"
    Validation = "Validation"
    Visualization = "Visualization"
    WritingOriginalDraft = "WritingOriginalDraft"
    WritingReviewEditing = "WritingReviewEditing"

class ContributorPositionType(IntEnum):
    PrincipalInvestigator = 307
    CoInvestigator = 308
    Partner = 309
    Consultant = 310
    Other = 311

class OrganisationRoleType(IntEnum):
    LeadResearchOrganization = 182
    OtherResearchOrganization = 183
    PartnerOrganization = 184
    Contractor = 185
    Funder = 186
    Facility = 187
    OtherOrganization = 188

class ProductSchema(Enum):
    """
    the identifier schemes a product (RAiD "related object") can be identified with
    """
    Ark = "Ark"
    Doi = "Doi"          # all DOIs, including IGSNs, CrossRef and DataCite DOIs
    Handle = "Handle"    # all non-DOI handles
    Isbn = "Isbn"
    Rrid = "Rrid"
    Archive = "Archive"  # an archive.org snapshot of a web page with no other identifier

class ProductType(IntEnum):
    """
    the RAiD related-object type vocabulary
    """
    Audiovisual = 273
    Book = 258
    BookChapter = 271
    ComputationalNotebook = 256
    ConferencePaper = 264
    ConferencePoster = 248
    ConferenceProceeding = 262
    DataPaper = 255
    Dataset = 269
    Dissertation = 253
    Event = 260
    Funding = 272
    Image = 257
    Instrument = 266
    JournalArticle = 250
    LearningObject = 267
    Model = 263
    OutputManagementPlan = 247
    PhysicalObject = 270
    Preprint = 254
    Prize = 268
    Report = 252
    Service = 274
    Software = 259
    Sound = 261
    Standard = 251
    Text = 265
    Workflow = 249

class ProductCategoryType(IntEnum):
    Output = 190
    Input = 191
    Internal = 192

class IncompatibilityType(Enum):
    """
    the reasons a project may fail to satisfy the RAiD rules
    """
    NoActivePrimaryTitle = "NoActivePrimaryTitle"
    MultipleActivePrimaryTitle = "MultipleActivePrimaryTitle"
    ProjectTitleTooLong = "ProjectTitleTooLong"
    NoPrimaryDescription = "NoPrimaryDescription"
    MultiplePrimaryDescriptions = "MultiplePrimaryDescriptions"
    ProjectDescriptionTooLong = "ProjectDescriptionTooLong"
    NoContributors = "NoContributors"
    ContributorWithoutOrcid = "ContributorWithoutOrcid"
    OverlappingContributorPositions = "OverlappingContributorPositions"
    NoProjectLeader = "NoProjectLeader"
    NoProjectContact = "NoProjectContact"
    OrganisationWithoutRor = "OrganisationWithoutRor"
    OverlappingOrganisationRoles = "OverlappingOrganisationRoles"
    NoLeadResearchOrganisation = "NoLeadResearchOrganisation"
    MultipleLeadResearchOrganisation = "MultipleLeadResearchOrganisation"
    NoProductCategory = "NoProductCategory"
    InvalidTitleLanguage = "InvalidTitleLanguage"
    InvalidDescriptionLanguage = "InvalidDescriptionLanguage"

def _to_enum(enumcls, value):
    # accept a member, a member name, or a member value (e.g. a vocabulary code)
    if value is None or isinstance(value, enumcls):
        return value
    if isinstance(value, str) and value in enumcls.__members__:
        return enumcls[value]
    try:
        return enumcls(value)
    except ValueError as ex:
        raise ValueError("Not a recognized %s value: %r" % (enumcls.__name__, value)) from ex

def _to_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        if value.endswith('Z'):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    raise ValueError("Not a recognized date value: %r" % value)

def _from_datetime(value):
    return value.isoformat() if value is not None else None

class Title(namedtuple("Title", "id text type start_date end_date language",
                       defaults=(None, None))):
    """
    a title given to a project.  A title with no end date is (from its start date on) current.
    """
    __slots__ = ()

    def is_active(self, when: datetime) -> bool:
        """
        return True if this title is in effect at the given time
        """
        return self.start_date <= when and (self.end_date is None or self.end_date >= when)

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(data.get('id'), data['text'], _to_enum(TitleType, data['type']),
                   _to_datetime(data['start_date']), _to_datetime(data.get('end_date')),
                   data.get('language'))

class Description(namedtuple("Description", "id text type language", defaults=(None,))):
    """
    a description of a project (e.g. an abstract or a statement of methods)
    """
    __slots__ = ()

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(data.get('id'), data['text'], _to_enum(DescriptionType, data['type']),
                   data.get('language'))

class Person(namedtuple("Person", "id name orcid email", defaults=(None, None))):
    """
    a person that can contribute to a project.  ``orcid``, when set, is the full ORCID URI.
    """
    __slots__ = ()

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(data.get('id'), data.get('name'), data.get('orcid') or None,
                   data.get('email') or None)

class ContributorPosition(namedtuple("ContributorPosition", "position start_date end_date",
                                     defaults=(None,))):
    """
    a position held by a contributor over a period of time
    """
    __slots__ = ()

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(_to_enum(ContributorPositionType, data['position']),
                   _to_datetime(data['start_date']), _to_datetime(data.get('end_date')))

class Contributor(namedtuple("Contributor", "person leader contact roles positions",
                             defaults=(False, False, (), ()))):
    """
    a person's participation in a project
    """
    __slots__ = ()

    @property
    def id(self):
        """
        the identifier of the contributing person (or None if the person is not linked)
        """
        return self.person.id if self.person is not None else None

    @classmethod
    def from_json_obj(cls, data: Mapping):
        person = data.get('person')
        if person is not None:
            person = Person.from_json_obj(person)
        return cls(person, bool(data.get('leader', False)), bool(data.get('contact', False)),
                   tuple(_to_enum(ContributorRoleType, r) for r in data.get('roles', [])),
                   tuple(ContributorPosition.from_json_obj(p) for p in data.get('positions', [])))

class Organisation(namedtuple("Organisation", "id name ror_id", defaults=(None,))):
    """
    an organisation; ``ror_id``, when set, is the full ROR URI.
    """
    __slots__ = ()

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(data.get('id'), data.get('name'), data.get('ror_id') or None)

class OrganisationRole(namedtuple("OrganisationRole", "role start_date end_date", defaults=(None,))):
    """
    a role played by an organisation in a project over a period of time
    """
    __slots__ = ()

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(_to_enum(OrganisationRoleType, data['role']),
                   _to_datetime(data['start_date']), _to_datetime(data.get('end_date')))

class ProjectOrganisation(namedtuple("ProjectOrganisation", "organisation roles", defaults=((),))):
    """
    an organisation's participation in a project
    """
    __slots__ = ()

    @property
    def id(self):
        return self.organisation.id if self.organisation is not None else None

    @classmethod
    def from_json_obj(cls, data: Mapping):
        org = data.get('organisation')
        if org is not None:
            org = Organisation.from_json_obj(org)
        return cls(org, tuple(OrganisationRole.from_json_obj(r) for r in data.get('roles', [])))

class Product(namedtuple("Product", "id title url schema type categories", defaults=((),))):
    """
    a product (publication, dataset, software, ...) used or produced by a project
    """
    __slots__ = ()

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(data.get('id'), data.get('title'), data.get('url'),
                   _to_enum(ProductSchema, data['schema']), _to_enum(ProductType, data['type']),
                   tuple(_to_enum(ProductCategoryType, c) for c in data.get('categories', [])))

class ProjectSnapshot(namedtuple("ProjectSnapshot",
                                 "id start_date end_date titles descriptions contributors "
                                 "organisations products",
                                 defaults=(None, (), (), (), (), ()))):
    """
    a read-only copy of a project and everything attached to it that matters to RAiD
    """
    __slots__ = ()

    @classmethod
    def from_json_obj(cls, data: Mapping):
        """
        create a snapshot from its JSON representation
        """
        return cls(data.get('id'), _to_datetime(data['start_date']),
                   _to_datetime(data.get('end_date')),
                   tuple(Title.from_json_obj(t) for t in data.get('titles', [])),
                   tuple(Description.from_json_obj(d) for d in data.get('descriptions', [])),
                   tuple(Contributor.from_json_obj(c) for c in data.get('contributors', [])),
                   tuple(ProjectOrganisation.from_json_obj(o) for o in data.get('organisations', [])),
                   tuple(Product.from_json_obj(p) for p in data.get('products', [])))

RAID_SCHEMA_URI = "https://raid.org/"
ROR_SCHEMA_URI = "https://ror.org/"
RAID_LICENSE = "Creative Commons CC-0"

class RAiDInfo(namedtuple("RAiDInfo",
                          "raid_id registration_agency_id owner_id owner_service_point version "
                          "checksum dirty latest_sync project_id",
                          defaults=(None, 1, None, False, None, None))):
    """
    the record linking a project to its RAiD in the registry.  ``version`` is owned by the
    registry; ``checksum`` is the hash of the update request last confirmed to be in sync.
    """
    __slots__ = ()

    schema_uri = RAID_SCHEMA_URI
    registration_agency_schema_uri = ROR_SCHEMA_URI
    owner_schema_uri = ROR_SCHEMA_URI
    license = RAID_LICENSE

    @classmethod
    def from_json_obj(cls, data: Mapping):
        return cls(data['raid_id'], data['registration_agency_id'], data['owner_id'],
                   data.get('owner_service_point'), data.get('version', 1), data.get('checksum'),
                   bool(data.get('dirty', False)), _to_datetime(data.get('latest_sync')),
                   data.get('project_id'))

    def to_json_obj(self):
        out = self._asdict()
        out['latest_sync'] = _from_datetime(self.latest_sync)
        return out

class Incompatibility(namedtuple("Incompatibility", "type object_id", defaults=(None,))):
    """
    a reason a project cannot (yet) be registered as, or synced with, a RAiD.  ``object_id``
    identifies the title, description, person, organisation, or product responsible, when the
    problem can be pinned on one.
    """
    __slots__ = ()

    def to_json_obj(self):
        return { "type": self.type.value, "object_id": self.object_id }

    def __str__(self):
        if self.object_id is None:
            return self.type.value
        return "%s: %s" % (self.type.value, self.object_id)
