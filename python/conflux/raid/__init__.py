"""
raid:  support for registering Conflux projects as Research Activity Identifiers (RAiDs).

This package maps the Conflux representation of a research project into the metadata model of the
RAiD registry, checks whether a project currently satisfies the rules the registry imposes (so that
a user can be told why a project cannot yet be minted), and detects when a minted project has
drifted from what was last sent to the registry.  The main entry points are:

  * :py:class:`~conflux.raid.compat.CompatibilityChecker` -- reports why a project cannot be
    minted or synced
  * :py:class:`~conflux.raid.mapper.ProjectMapper` -- builds RAiD creation and update requests
  * :py:func:`~conflux.raid.checksum.compute_hash` -- fingerprints an update request
  * :py:class:`~conflux.raid.service.RAiDInfoService` -- mints and syncs projects with the registry
"""
from conflux.base import ConfluxException, SystemInfoMixin, config

try:
    from .version import __version__
except ImportError:
    __version__ = "(unset)"

_CONFLUXSYSNAME = "Conflux"
_CONFLUXSYSABBREV = "conflux"
_RAIDSUBSYSNAME = "RAiD Integration"
_RAIDSUBSYSABBREV = "raid"

class RAiDSystem(SystemInfoMixin):
    """
    A SystemInfoMixin representing the RAiD integration of the Conflux system.
    """
    def __init__(self, subsysname=_RAIDSUBSYSNAME, subsysabbrev=_RAIDSUBSYSABBREV):
        super(RAiDSystem, self).__init__(_CONFLUXSYSNAME, _CONFLUXSYSABBREV,
                                         subsysname, subsysabbrev, __version__)

system = RAiDSystem()

class RAiDException(ConfluxException):
    """
    A general base class for exceptions that occur while preparing projects for, or exchanging them
    with, the RAiD registry.
    """
    pass

class MappingError(RAiDException):
    """
    An exception indicating that a project could not be mapped into the RAiD metadata model because
    it is in a state that should not be possible (e.g. a required link is missing).  This reflects
    an inconsistency in the stored project rather than a user-correctable condition.
    """

    def __init__(self, message=None, object_id=None, cause=None):
        if not message:
            message = "Unable to map project data to RAiD metadata"
            if object_id:
                message += " (offending object: %s)" % object_id
        super(MappingError, self).__init__(message, cause)
        self.object_id = object_id

class UnmappedVocabularyValue(MappingError):
    """
    An exception indicating that a value has no entry in the controlled vocabulary it is supposed
    to be drawn from.  This is a programming error.
    """

    def __init__(self, vocabulary, value, message=None):
        if not message:
            message = "No %s vocabulary entry for value: %r" % (vocabulary, value)
        super(UnmappedVocabularyValue, self).__init__(message)
        self.vocabulary = vocabulary
        self.value = value

class ChecksumError(RAiDException):
    """
    An exception indicating that an update request could not be serialized for checksumming
    """
    pass

class RAiDStateException(RAiDException):
    """
    An exception indicating that the registry or the local project is in a state that prevents
    the requested operation from completing.
    """
    pass

class RAiDServiceException(RAiDException):
    """
    an exception indicating a problem using the RAiD registry service.
    """

    def __init__(self, resource=None, http_code=None, http_reason=None, message=None, cause=None):
        if not message:
            if resource:
                message = f"Trouble accessing {resource} from the RAiD service"
            else:
                message = f"Problem accessing the RAiD service"
            if http_code or http_reason:
                message += ":"
                if http_code:
                    message += " "+str(http_code)
                if http_reason:
                    message += " "+str(http_reason)
            elif cause:
                message += ": "+str(cause)

        super(RAiDServiceException, self).__init__(message, cause)
        self.resource = resource
        self.code = http_code
        self.status = http_reason

class RAiDServerError(RAiDServiceException):
    """
    an exception indicating an error occurred on the server-side while trying to access the RAiD
    service.  The ``code``, ``status``, and ``resource`` properties capture the HTTP response
    status code, the associated HTTP response message, and (optionally) the requested resource.
    """

    def __init__(self, resource=None, http_code=None, http_reason=None, message=None, cause=None):
        super(RAiDServerError, self).__init__(resource, http_code, http_reason, message, cause)

class RAiDClientError(RAiDServiceException):
    """
    an exception indicating that the RAiD service rejected a request as erroneous (e.g. invalid
    metadata or bad credentials).
    """

    def __init__(self, resource, http_code, http_reason, message=None, cause=None):
        if not message:
            message = "client-side RAiD error occurred"
            if resource:
                message += " while processing " + resource
            message += ": {0} {1}".format(http_code, http_reason)

        super(RAiDClientError, self).__init__(resource, http_code, http_reason, message, cause)

class RAiDResourceNotFound(RAiDClientError):
    """
    An error indicating that a requested RAiD is not known to the registry.
    """
    def __init__(self, resource, http_reason=None, message=None, cause=None):
        if not message:
            message = "Requested RAiD not found"
            if resource:
                message += ": "+resource

        super(RAiDResourceNotFound, self).__init__(resource, 404, http_reason, message, cause)

class RAiDDisabled(RAiDException):
    """
    An exception indicating that a registry operation was requested while the RAiD integration is
    switched off by configuration.
    """
    def __init__(self, message=None):
        if not message:
            message = "This function is disabled when RAiD is disabled"
        super(RAiDDisabled, self).__init__(message)

class ProjectNotRAiDCompatible(RAiDException):
    """
    An exception indicating that a project cannot be minted or synced because it does not satisfy
    the RAiD rules.  The ``incompatibilities`` property lists the reasons.
    """
    def __init__(self, project_id, incompatibilities, message=None):
        if not message:
            message = "Project with id %s is not RAiD compatible (%d issue%s)" % \
                      (project_id, len(incompatibilities), "" if len(incompatibilities) == 1 else "s")
        super(ProjectNotRAiDCompatible, self).__init__(message)
        self.project_id = project_id
        self.incompatibilities = list(incompatibilities)

class ProjectAlreadyMinted(RAiDException):
    """
    An exception indicating an attempt to mint a RAiD for a project that already has one
    """
    def __init__(self, project_id, raid_id=None):
        message = "Project with id %s already has a RAiD" % project_id
        if raid_id:
            message += ": " + raid_id
        super(ProjectAlreadyMinted, self).__init__(message)
        self.project_id = project_id

class ProjectNotMinted(RAiDException):
    """
    An exception indicating a request to sync a project that has not yet been minted
    """
    def __init__(self, project_id):
        super(ProjectNotMinted, self).__init__("Project with id %s has not been minted" % project_id)
        self.project_id = project_id
