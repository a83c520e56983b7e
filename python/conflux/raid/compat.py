"""
Checks of whether a project satisfies the structural rules imposed by the RAiD registry.

The registry rejects projects that, for instance, lack a current primary title or whose lead
research organisation does not cover the whole of the project's lifetime.  The
:py:class:`CompatibilityChecker` runs a fixed battery of checks over a project snapshot and
returns the problems found as a list of :py:class:`~conflux.raid.domain.Incompatibility`
instances.  Problems are reported as data rather than raised, so that a user interface can
explain why a project cannot be minted without having to handle errors.

The checks always run in the same order, and each check reports its findings in the order of the
items in the snapshot, so the result for a given snapshot (and time) is always the same.  The
rules are described at https://metadata.raid.org/en/latest/core/.
"""
from collections.abc import Mapping
from datetime import datetime
from typing import List

from . import system
from .domain import (ProjectSnapshot, Incompatibility, IncompatibilityType as IT,
                     TitleType, DescriptionType, OrganisationRoleType)

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000

log = system.getSysLogger().getChild("compat")

def has_overlap(intervals) -> bool:
    """
    return True if any of the given time intervals overlap.  Each interval must have
    ``start_date`` and ``end_date`` attributes, where an ``end_date`` of None means the interval
    is open-ended.  Intervals that merely touch (one ends when the next starts) do not overlap;
    an open-ended interval overlaps with any interval that starts after it.
    """
    if not intervals:
        return False

    ordered = sorted(intervals, key=lambda i: i.start_date)
    last = ordered[0].start_date
    for item in ordered:
        # previous had no end and was not the last
        if last is None:
            return True
        # previous ended after this one started
        if last > item.start_date:
            return True
        # previous ended after this one ended
        if item.end_date is not None and last > item.end_date:
            return True
        last = item.end_date

    return False

def _current_time(reference: datetime=None) -> datetime:
    # match the timezone convention (aware vs. naive) of the project's dates
    if reference is not None and reference.tzinfo is not None:
        return datetime.now(reference.tzinfo)
    return datetime.now()

class CompatibilityChecker:
    """
    a checker of the RAiD compatibility of project snapshots.

    This checker accepts the following configuration parameters:

    ``skip_checks``
        a list of names of check methods (e.g. ``check_orcids``) that should not be applied
    ``include_checks``
        a list of names of the only check methods that should be applied (ignored if
        ``skip_checks`` is given)

    If a :py:class:`~conflux.raid.language.LanguageService` is provided, title and description
    languages are checked as well.
    """

    def __init__(self, config: Mapping=None, language_service=None):
        if config is None:
            config = {}
        self.cfg = config
        self.langsvc = language_service

    def all_checks(self) -> List[str]:
        """
        return the names of all the check methods in the order they are applied
        """
        out = [ "check_primary_title", "check_title_lengths", "check_description_lengths",
                "check_primary_description", "check_has_contributors", "check_orcids",
                "check_contributor_positions", "check_has_leader", "check_has_contact",
                "check_rors", "check_organisation_roles", "check_lead_organisation",
                "check_product_categories" ]
        if self.langsvc:
            out.append("check_languages")
        return out

    def the_checks(self) -> List[str]:
        """
        return the names of the check methods that will actually be applied, taking into account
        the ``skip_checks`` and ``include_checks`` configuration parameters.
        """
        checks = self.all_checks()
        if "skip_checks" in self.cfg:
            skip = set(self.cfg['skip_checks'])
            checks = [c for c in checks if c not in skip]
        elif "include_checks" in self.cfg:
            incl = set(self.cfg['include_checks'])
            checks = [c for c in checks if c in incl]
        return checks

    def check_compatibility(self, project: ProjectSnapshot, now: datetime=None) -> List[Incompatibility]:
        """
        apply all of the checks to the given project and return the problems found.  An empty list
        means that the project can be minted (or synced).

        :param ProjectSnapshot project:  the project to check
        :param datetime now:  the time at which to evaluate which titles are current; if not given,
                              the current time is used.
        """
        if now is None:
            now = _current_time(project.start_date)

        out = []
        for check in self.the_checks():
            getattr(self, check)(project, now, out)
        log.debug("Project %s: %d RAiD incompatibilit%s found", project.id, len(out),
                  "y" if len(out) == 1 else "ies")
        return out

    def check_primary_title(self, project, now, out):
        # one (and only one) current primary title is required
        active = [t for t in project.titles if t.type == TitleType.Primary and t.is_active(now)]
        if len(active) == 0:
            out.append(Incompatibility(IT.NoActivePrimaryTitle))
        elif len(active) > 1:
            out.append(Incompatibility(IT.MultipleActivePrimaryTitle))

    def check_title_lengths(self, project, now, out):
        out.extend(Incompatibility(IT.ProjectTitleTooLong, t.id)
                   for t in project.titles if len(t.text) > MAX_TITLE_LENGTH)

    def check_description_lengths(self, project, now, out):
        out.extend(Incompatibility(IT.ProjectDescriptionTooLong, d.id)
                   for d in project.descriptions if len(d.text) > MAX_DESCRIPTION_LENGTH)

    def check_primary_description(self, project, now, out):
        # descriptions are optional, but if given, exactly one must be primary
        if not project.descriptions:
            return
        nprimary = len([d for d in project.descriptions if d.type == DescriptionType.Primary])
        if nprimary == 0:
            out.append(Incompatibility(IT.NoPrimaryDescription))
        elif nprimary > 1:
            out.append(Incompatibility(IT.MultiplePrimaryDescriptions))

    def check_has_contributors(self, project, now, out):
        if not project.contributors:
            out.append(Incompatibility(IT.NoContributors))

    def check_orcids(self, project, now, out):
        out.extend(Incompatibility(IT.ContributorWithoutOrcid, c.id)
                   for c in project.contributors if not (c.person and c.person.orcid))

    def check_contributor_positions(self, project, now, out):
        # a contributor may hold only one position at a time
        out.extend(Incompatibility(IT.OverlappingContributorPositions, c.id)
                   for c in project.contributors if has_overlap(c.positions))

    def check_has_leader(self, project, now, out):
        if not any(c.leader for c in project.contributors):
            out.append(Incompatibility(IT.NoProjectLeader))

    def check_has_contact(self, project, now, out):
        if not any(c.contact for c in project.contributors):
            out.append(Incompatibility(IT.NoProjectContact))

    def check_rors(self, project, now, out):
        out.extend(Incompatibility(IT.OrganisationWithoutRor, o.id)
                   for o in project.organisations
                   if not (o.organisation and o.organisation.ror_id))

    def check_organisation_roles(self, project, now, out):
        # an organisation may have only one role at a time
        out.extend(Incompatibility(IT.OverlappingOrganisationRoles, o.id)
                   for o in project.organisations if has_overlap(o.roles))

    def check_lead_organisation(self, project, now, out):
        """
        require that, at every moment of the project, exactly one organisation is the lead
        research organisation.
        """
        leads = sorted([r for o in project.organisations for r in o.roles
                        if r.role == OrganisationRoleType.LeadResearchOrganization],
                       key=lambda r: r.start_date)
        if not leads:
            out.append(Incompatibility(IT.NoLeadResearchOrganisation))
            return

        found = []
        def report(itype):
            if itype not in found:
                found.append(itype)

        if leads[0].start_date > project.start_date:
            report(IT.NoLeadResearchOrganisation)

        last = leads[0].end_date
        for role in leads[1:]:
            if last is None or role.start_date < last:
                report(IT.MultipleLeadResearchOrganisation)
            elif role.start_date > last:
                report(IT.NoLeadResearchOrganisation)
            last = role.end_date

        if last is not None and (project.end_date is None or last < project.end_date):
            report(IT.NoLeadResearchOrganisation)

        out.extend(Incompatibility(t) for t in found)

    def check_product_categories(self, project, now, out):
        out.extend(Incompatibility(IT.NoProductCategory, p.id)
                   for p in project.products if not p.categories)

    def check_languages(self, project, now, out):
        if not self.langsvc:
            return
        out.extend(Incompatibility(IT.InvalidTitleLanguage, t.id) for t in project.titles
                   if t.language and not self.langsvc.is_valid_language_code(t.language))
        out.extend(Incompatibility(IT.InvalidDescriptionLanguage, d.id) for d in project.descriptions
                   if d.language and not self.langsvc.is_valid_language_code(d.language))
