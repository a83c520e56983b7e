"""
Mapping of Conflux project snapshots into RAiD registry requests.

The requests produced here are JSON-ready dictionaries that follow the RAiD metadata schema
(see https://metadata.raid.org/).  Collections appear in the same order as in the input snapshot;
this order matters as it feeds into the checksum computed by :py:mod:`conflux.raid.checksum`.
"""
from collections import OrderedDict
from collections.abc import Mapping
from datetime import datetime

from . import MappingError, system
from . import vocab
from .domain import (ProjectSnapshot, Title, Description, Contributor, ContributorPosition,
                     ProjectOrganisation, OrganisationRole, Product, RAiDInfo)

CONFLUX_ID_TYPE = "conflux-id"

log = system.getSysLogger().getChild("mapper")

def format_date(when: datetime) -> str:
    """
    render a date the way RAiD expects it (YYYY-MM-DD); None is passed through
    """
    if when is None:
        return None
    return when.strftime("%Y-%m-%d")

def _term(term: vocab.VocabTerm) -> Mapping:
    return OrderedDict([("id", term.id), ("schemaUri", term.schema_uri)])

class ProjectMapper:
    """
    a converter of :py:class:`~conflux.raid.domain.ProjectSnapshot` instances into RAiD creation and
    update requests.

    If a :py:class:`~conflux.raid.language.LanguageService` is provided, a title or description
    language is only included when it is a valid ISO 639-3 code; otherwise, any given language is
    included as is.
    """

    def __init__(self, language_service=None):
        self.langsvc = language_service

    def map_creation_request(self, project: ProjectSnapshot) -> Mapping:
        """
        return the request for minting a new RAiD for the given project
        :raises MappingError:  if the project is missing data the registry requires and that the
                               Conflux data model should have guaranteed
        """
        out = OrderedDict()
        out['title'] = [self.map_title(t) for t in project.titles]
        out['date'] = OrderedDict([("startDate", format_date(project.start_date)),
                                   ("endDate", format_date(project.end_date))])
        out['description'] = [self.map_description(d) for d in project.descriptions]
        out['access'] = OrderedDict([("type", _term(vocab.OPEN_ACCESS))])
        out['contributor'] = [self.map_contributor(c) for c in project.contributors]
        out['organisation'] = [self.map_organisation(o, project.id, i)
                                for i, o in enumerate(project.organisations)]
        out['relatedObject'] = [self.map_product(p) for p in project.products]
        out['alternateIdentifier'] = [ OrderedDict([("id", str(project.id)),
                                                    ("type", CONFLUX_ID_TYPE)]) ]
        return out

    def map_update_request(self, project: ProjectSnapshot, raidinfo: RAiDInfo) -> Mapping:
        """
        return the request for updating the given project's RAiD.  The ``identifier`` block is
        taken from ``raidinfo``; the remainder is identical to the creation request.
        :raises MappingError:  if ``raidinfo`` is not provided or the project is missing required data
        """
        if raidinfo is None:
            raise MappingError("Project %s has no RAiD info to build an update request from" %
                               project.id, project.id)
        out = OrderedDict([("identifier", self.map_raid_info(raidinfo))])
        out.update(self.map_creation_request(project))
        return out

    def map_raid_info(self, info: RAiDInfo) -> Mapping:
        return OrderedDict([
            ("id", info.raid_id),
            ("schemaUri", info.schema_uri),
            ("registrationAgency", OrderedDict([("id", info.registration_agency_id),
                                                ("schemaUri", info.registration_agency_schema_uri)])),
            ("owner", OrderedDict([("id", info.owner_id),
                                   ("schemaUri", info.owner_schema_uri),
                                   ("servicePoint", info.owner_service_point)])),
            ("raidAgencyUrl", info.registration_agency_id),
            ("license", info.license),
            ("version", info.version)
        ])

    def map_title(self, title: Title) -> Mapping:
        out = OrderedDict([("text", title.text),
                           ("type", _term(vocab.title_type_uri(title.type))),
                           ("startDate", format_date(title.start_date)),
                           ("endDate", format_date(title.end_date))])
        lang = self._map_language(title.language, "title", title.id)
        if lang:
            out['language'] = lang
        return out

    def map_description(self, desc: Description) -> Mapping:
        out = OrderedDict([("text", desc.text),
                           ("type", _term(vocab.description_type_uri(desc.type)))])
        lang = self._map_language(desc.language, "description", desc.id)
        if lang:
            out['language'] = lang
        return out

    def _map_language(self, code, what, objid):
        if not code:
            return None
        if self.langsvc and not self.langsvc.is_valid_language_code(code):
            log.warning("Dropping invalid language code, %r, from %s %s", code, what, objid)
            return None
        return _term(vocab.language_uri(code))

    def map_contributor(self, contributor: Contributor) -> Mapping:
        person = contributor.person
        if person is None:
            raise MappingError("Contributor has no linked person", contributor.id)

        return OrderedDict([
            ("id", person.orcid),
            ("schemaUri", vocab.ORCID_SCHEMA),
            ("email", person.email),
            ("position", [self.map_position(p) for p in contributor.positions]),
            ("role", [_term(vocab.contributor_role_uri(r)) for r in contributor.roles]),
            ("leader", contributor.leader),
            ("contact", contributor.contact)
        ])

    def map_position(self, position: ContributorPosition) -> Mapping:
        out = _term(vocab.contributor_position_uri(position.position))
        out['startDate'] = format_date(position.start_date)
        out['endDate'] = format_date(position.end_date)
        return out

    def map_organisation(self, projorg: ProjectOrganisation, project_id: str=None,
                         index: int=None) -> Mapping:
        org = projorg.organisation
        if org is None:
            raise MappingError("Organisation entry %s of project %s has no linked organisation" %
                               (index, project_id), project_id)
        if not org.ror_id:
            raise MappingError("Organisation %s (%s) has no ROR ID, which RAiD requires" %
                               (org.id, org.name), org.id)

        return OrderedDict([
            ("id", org.ror_id),
            ("schemaUri", vocab.ROR_SCHEMA),
            ("role", [self.map_organisation_role(r) for r in projorg.roles])
        ])

    def map_organisation_role(self, role: OrganisationRole) -> Mapping:
        out = _term(vocab.organisation_role_uri(role.role))
        out['startDate'] = format_date(role.start_date)
        out['endDate'] = format_date(role.end_date)
        return out

    def map_product(self, product: Product) -> Mapping:
        return OrderedDict([
            ("id", product.url),
            ("schemaUri", vocab.product_schema_uri(product.schema)),
            ("type", _term(vocab.product_type_uri(product.type))),
            ("category", [_term(vocab.product_category_uri(c)) for c in product.categories])
        ])
