"""
a module providing the service that registers Conflux projects as RAiDs and keeps the registry
up to date with changes to them.

The :py:class:`RAiDInfoService` ties together the other parts of this package:  it refuses to
mint or sync a project that fails the RAiD compatibility checks, maps the project into the
appropriate registry request, sends it via a :py:class:`~conflux.raid.client.RAiDClient`, and
turns the registry's response into a new :py:class:`~conflux.raid.domain.RAiDInfo` record
(complete with the checksum used to detect later changes).  The service itself stores nothing;
persisting the returned record is up to the caller.
"""
from logging import Logger
from collections.abc import Mapping
from datetime import datetime
from typing import List

from . import (RAiDSystem, RAiDDisabled, RAiDStateException, ProjectNotRAiDCompatible,
               ProjectAlreadyMinted, ProjectNotMinted)
from .domain import ProjectSnapshot, RAiDInfo, Incompatibility
from .compat import CompatibilityChecker
from .mapper import ProjectMapper
from .language import load_language_service
from .client import RAiDClient
from .checksum import compute_hash, is_dirty
from .ids import raid_id_parts
from conflux.base.config import ConfigurationException

class RAiDInfoService(RAiDSystem):
    """
    A service for minting and syncing RAiDs for Conflux projects.

    This service supports the following configuration parameters:

    ``enabled``
        if False, all operations will raise a :py:class:`~conflux.raid.RAiDDisabled` exception
        (default: True)
    ``raid_service``
        the configuration for the registry client, with sub-parameters ``service_endpoint`` (the
        base URL of the service; required unless a client is provided), ``auth`` (the credentials
        to use; see :py:class:`~conflux.raid.client.RAiDClient`), and ``timeout`` (in seconds)
    ``checks``
        the configuration for the :py:class:`~conflux.raid.compat.CompatibilityChecker`
    ``language_table_file``, ``language_table_url``, ``language_timeout``
        where to load the ISO 639-3 code table from (see
        :py:func:`~conflux.raid.language.load_language_service`); if neither the file nor the URL
        is set, languages are not validated.  Ignored when a mapper is provided.
    """

    def __init__(self, config: Mapping, client: RAiDClient=None, mapper: ProjectMapper=None,
                 checker: CompatibilityChecker=None, log: Logger=None):
        """
        create the service
        :param dict     config:  the service configuration
        :param RAiDClient client:  the registry client to use; if not provided, one will be created
                                 from the ``raid_service`` configuration when first needed
        :param ProjectMapper mapper:  the mapper to use to build registry requests
        :param CompatibilityChecker checker:  the checker that gates minting and syncing
        :param Logger      log:  the logger to use for log messages
        """
        super(RAiDInfoService, self).__init__()
        if config is None:
            config = {}
        self.cfg = config
        if not isinstance(self.cfg.get('raid_service', {}), Mapping):
            raise ConfigurationException("raid_service: value is not an object as required: %s" %
                                         type(self.cfg.get('raid_service')))

        if not log:
            log = self.getSysLogger().getChild("service")
        self.log = log

        if not mapper:
            langsvc = None
            if self.cfg.get('language_table_file') or self.cfg.get('language_table_url'):
                langsvc = load_language_service(self.cfg)
            mapper = ProjectMapper(langsvc)
        self.mapper = mapper
        if not checker:
            checker = CompatibilityChecker(self.cfg.get('checks', {}), mapper.langsvc)
        self.checker = checker
        self._cli = client

    @property
    def enabled(self) -> bool:
        """
        True if the RAiD integration is switched on
        """
        return bool(self.cfg.get('enabled', True))

    @property
    def client(self) -> RAiDClient:
        """
        the client used to talk to the RAiD registry
        """
        if not self._cli:
            svccfg = self.cfg.get('raid_service', {})
            if not svccfg.get('service_endpoint'):
                raise ConfigurationException("Missing required config parameter: "+
                                             "raid_service.service_endpoint",
                                             param="raid_service.service_endpoint")
            self._cli = RAiDClient(svccfg['service_endpoint'], svccfg.get('auth'),
                                   svccfg.get('timeout'))
        return self._cli

    def _check_enabled(self):
        if not self.enabled:
            raise RAiDDisabled()

    def get_incompatibilities(self, project: ProjectSnapshot, now: datetime=None) -> List[Incompatibility]:
        """
        return the reasons the given project cannot currently be minted or synced.  An empty list
        means the project is RAiD-compatible.
        """
        self._check_enabled()
        return self.checker.check_compatibility(project, now)

    def _assert_compatible(self, project, now):
        issues = self.checker.check_compatibility(project, now)
        if issues:
            self.log.info("Project %s is not RAiD compatible: %s", project.id,
                          ", ".join(str(i) for i in issues))
            raise ProjectNotRAiDCompatible(project.id, issues)

    def mint(self, project: ProjectSnapshot, raidinfo: RAiDInfo=None, now: datetime=None) -> RAiDInfo:
        """
        register a new RAiD for the given project.
        :param ProjectSnapshot project:  the project to register
        :param RAiDInfo raidinfo:  the project's current RAiD record, if it has one
        :param datetime     now:  the time of the request (default: the current time)
        :return:  the new RAiD record for the project
        :raises ProjectAlreadyMinted:  if ``raidinfo`` is given
        :raises ProjectNotRAiDCompatible:  if the project fails the compatibility checks
        :raises RAiDServiceException:  if the registry request fails
        """
        self._check_enabled()
        if raidinfo is not None:
            raise ProjectAlreadyMinted(project.id, raidinfo.raid_id)
        self._assert_compatible(project, now)

        self.log.info("Minting RAiD for project %s", project.id)
        resp = self.client.mint(self.mapper.map_creation_request(project))
        out = self._raid_info_from_response(resp, project, now)
        self.log.info("Minted RAiD %s for project %s", out.raid_id, project.id)
        return out

    def sync(self, project: ProjectSnapshot, raidinfo: RAiDInfo, now: datetime=None) -> RAiDInfo:
        """
        send the current state of the given project to the registry as an update of its RAiD.
        :param ProjectSnapshot project:  the project to sync
        :param RAiDInfo raidinfo:  the project's current RAiD record
        :param datetime     now:  the time of the request (default: the current time)
        :return:  the replacement RAiD record for the project
        :raises ProjectNotMinted:  if ``raidinfo`` is not given
        :raises ProjectNotRAiDCompatible:  if the project fails the compatibility checks
        :raises RAiDServiceException:  if the registry request fails
        """
        self._check_enabled()
        if raidinfo is None:
            raise ProjectNotMinted(project.id)
        self._assert_compatible(project, now)

        try:
            prefix, suffix = raid_id_parts(raidinfo.raid_id)
        except ValueError as ex:
            raise RAiDStateException("Project %s has an unusable RAiD identifier: %s" %
                                     (project.id, raidinfo.raid_id), cause=ex)

        self.log.info("Syncing project %s with RAiD %s", project.id, raidinfo.raid_id)
        resp = self.client.update(prefix, suffix, self.mapper.map_update_request(project, raidinfo))
        out = self._raid_info_from_response(resp, project, now)
        self.log.info("Synced project %s with RAiD %s (version %s)", project.id, out.raid_id,
                      out.version)
        return out

    def refresh_dirty(self, project: ProjectSnapshot, raidinfo: RAiDInfo) -> RAiDInfo:
        """
        return a copy of the given RAiD record with its ``dirty`` flag set according to whether the
        project has changed since it was last synced.
        """
        self._check_enabled()
        dirty = is_dirty(self.mapper.map_update_request(project, raidinfo), raidinfo)
        if dirty != raidinfo.dirty:
            self.log.debug("Project %s is %s", project.id, "dirty" if dirty else "in sync")
        return raidinfo._replace(dirty=dirty)

    def _raid_info_from_response(self, resp, project, now):
        ident = resp.get('identifier') if isinstance(resp, Mapping) else None
        if not isinstance(ident, Mapping):
            raise RAiDStateException("RAiD service response for project %s is missing its "
                                     "identifier" % project.id)
        try:
            info = RAiDInfo(ident['id'], ident['registrationAgency']['id'], ident['owner']['id'],
                            ident['owner'].get('servicePoint'), ident.get('version', 1),
                            project_id=project.id)
        except (KeyError, TypeError, AttributeError) as ex:
            raise RAiDStateException("RAiD service response for project %s has an incomplete "
                                     "identifier: %s" % (project.id, str(ex)), cause=ex)

        if now is None:
            now = datetime.now()
        checksum = compute_hash(self.mapper.map_update_request(project, info))
        return info._replace(checksum=checksum, dirty=False, latest_sync=now)
