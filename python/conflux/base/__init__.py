"""
Base classes and utilities shared by the Conflux python packages.
"""
import logging

__all__ = [ "ConfluxException", "SystemInfoMixin", "config" ]

class ConfluxException(Exception):
    """
    A base class for all exceptions raised by the Conflux python packages.
    """

    def __init__(self, message=None, cause=None):
        """
        create the exception.
        :param str     message:  the description of the error; if not provided, one will be drawn from
                                 ``cause``
        :param Exception cause:  an exception that represents the underlying cause of this one
        """
        if not message:
            if cause:
                message = str(cause)
            else:
                message = "Unknown Conflux error"
        super(ConfluxException, self).__init__(message)
        self.cause = cause

class SystemInfoMixin(object):
    """
    a mixin class that provides identifying information about the system and subsystem that a
    class belongs to.  This information is primarily used to name loggers.
    """

    def __init__(self, sysname, sysabbrev, subsysname, subsysabbrev, version):
        self._sysname = sysname
        self._sysabbrev = sysabbrev
        self._subsysname = subsysname
        self._subsysabbrev = subsysabbrev
        self._sysver = version

    @property
    def system_name(self):
        return self._sysname

    @property
    def system_abbrev(self):
        return self._sysabbrev

    @property
    def subsystem_name(self):
        return self._subsysname

    @property
    def subsystem_abbrev(self):
        return self._subsysabbrev

    @property
    def system_version(self):
        return self._sysver

    def getSysLogger(self):
        """
        return the logger for this system and subsystem.  The logger is a child of the root logger
        named after the system abbreviation, and (if set) a grandchild named after the subsystem
        abbreviation.
        """
        out = logging.getLogger().getChild(self.system_abbrev)
        if self.subsystem_abbrev:
            out = out.getChild(self.subsystem_abbrev)
        return out

# imported last: config depends on ConfluxException
from . import config
