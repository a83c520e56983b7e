"""
The controlled vocabularies used to express Conflux enumerations in RAiD metadata.

Each function here maps a single enumeration value to a :py:class:`VocabTerm`--the URI of the
term and the URI of the vocabulary (scheme) it belongs to.  The mappings are held in lookup
tables built when this module is loaded; a value missing from its table raises
:py:class:`~conflux.raid.UnmappedVocabularyValue`.
"""
from collections import namedtuple

from . import UnmappedVocabularyValue
from .domain import (TitleType, DescriptionType, ContributorRoleType, ContributorPositionType,
                     OrganisationRoleType, ProductSchema, ProductType, ProductCategoryType)

VocabTerm = namedtuple("VocabTerm", "id schema_uri")

RAID_VOCAB_BASE = "https://vocabulary.raid.org/"
TITLE_TYPE_SCHEMA = RAID_VOCAB_BASE + "title.type.schema/376"
DESCRIPTION_TYPE_SCHEMA = RAID_VOCAB_BASE + "description.type.schema/320"
CONTRIBUTOR_POSITION_SCHEMA = RAID_VOCAB_BASE + "contributor.position.schema/305"
ORGANISATION_ROLE_SCHEMA = RAID_VOCAB_BASE + "organisation.role.schema/359"
PRODUCT_TYPE_SCHEMA = RAID_VOCAB_BASE + "relatedObject.type.schema/329"
PRODUCT_CATEGORY_SCHEMA = RAID_VOCAB_BASE + "relatedObject.category.schema/386"
CREDIT_SCHEMA = "https://credit.niso.org/"
LANGUAGE_SCHEMA = "https://www.iso.org/standard/74575.html"
ORCID_SCHEMA = "https://orcid.org/"
ROR_SCHEMA = "https://ror.org/"

OPEN_ACCESS = VocabTerm("https://vocabularies.coar-repositories.org/access_rights/c_abf2/",
                        "https://vocabularies.coar-repositories.org/access_rights/")

def _coded_table(enumcls, idbase, schema):
    # terms whose URI ends in the member's numeric vocabulary code
    return dict((m, VocabTerm("%s%d" % (idbase, m.value), schema)) for m in enumcls)

_title_types = _coded_table(TitleType, RAID_VOCAB_BASE+"title.type.schema/", TITLE_TYPE_SCHEMA)
_description_types = _coded_table(DescriptionType, RAID_VOCAB_BASE+"description.type.schema/",
                                  DESCRIPTION_TYPE_SCHEMA)
_contributor_positions = _coded_table(ContributorPositionType,
                                      RAID_VOCAB_BASE+"contributor.position.schema/",
                                      CONTRIBUTOR_POSITION_SCHEMA)
_organisation_roles = _coded_table(OrganisationRoleType, RAID_VOCAB_BASE+"organisation.role.schema/",
                                   ORGANISATION_ROLE_SCHEMA)
_product_types = _coded_table(ProductType, RAID_VOCAB_BASE+"relatedObject.type.schema/",
                              PRODUCT_TYPE_SCHEMA)
_product_categories = _coded_table(ProductCategoryType, RAID_VOCAB_BASE+"relatedObject.category.schema/",
                                   PRODUCT_CATEGORY_SCHEMA)

_credit_slugs = {
    ContributorRoleType.Conceptualization:      "conceptualization",
    ContributorRoleType.DataCuration:           "data-curation",
    ContributorRoleType.FormalAnalysis:         "formal-analysis",
    ContributorRoleType.FundingAcquisition:     "funding-acquisition",
    ContributorRoleType.Investigation:          "investigation",
    ContributorRoleType.Methodology:            "methodology",
    ContributorRoleType.ProjectAdministration:  "project-administration",
    ContributorRoleType.Resources:              "resources",
    ContributorRoleType.Software:               "software",
    ContributorRoleType.Supervision:            "supervision",
    ContributorRoleType.Validation:             "validation",
    ContributorRoleType.Visualization:          "visualization",
    ContributorRoleType.WritingOriginalDraft:   "writing-original-draft",
    ContributorRoleType.WritingReviewEditing:   "writing-review-editing",
}
_contributor_roles = dict((r, VocabTerm("%scontributor-roles/%s/" % (CREDIT_SCHEMA, s), CREDIT_SCHEMA))
                          for r, s in _credit_slugs.items())

_product_schemas = {
    ProductSchema.Ark:      "https://arks.org/",
    ProductSchema.Doi:      "https://doi.org/",
    ProductSchema.Handle:   "http://hdl.handle.net/",
    ProductSchema.Isbn:     "https://www.isbn-international.org/",
    ProductSchema.Rrid:     "https://scicrunch.org/resolver/",
    ProductSchema.Archive:  "https://archive.org/",
}

def _lookup(table, vocab, value):
    try:
        return table[value]
    except (KeyError, TypeError):
        raise UnmappedVocabularyValue(vocab, value)

def title_type_uri(ttype: TitleType) -> VocabTerm:
    return _lookup(_title_types, "title type", ttype)

def description_type_uri(dtype: DescriptionType) -> VocabTerm:
    return _lookup(_description_types, "description type", dtype)

def contributor_role_uri(role: ContributorRoleType) -> VocabTerm:
    return _lookup(_contributor_roles, "contributor role", role)

def contributor_position_uri(position: ContributorPositionType) -> VocabTerm:
    return _lookup(_contributor_positions, "contributor position", position)

def organisation_role_uri(role: OrganisationRoleType) -> VocabTerm:
    return _lookup(_organisation_roles, "organisation role", role)

def product_type_uri(ptype: ProductType) -> VocabTerm:
    return _lookup(_product_types, "related object type", ptype)

def product_category_uri(category: ProductCategoryType) -> VocabTerm:
    return _lookup(_product_categories, "related object category", category)

def product_schema_uri(schema: ProductSchema) -> str:
    """
    return the URI of the identifier scheme that a product identifier is drawn from
    """
    return _lookup(_product_schemas, "related object schema", schema)

def language_uri(code: str) -> VocabTerm:
    """
    return the term for an ISO 639-3 language code.  The code is not checked for validity (see
    :py:class:`~conflux.raid.language.LanguageService`).
    """
    if not code:
        raise UnmappedVocabularyValue("language", code)
    return VocabTerm(code, LANGUAGE_SCHEMA)
