"""
Utilities for loading configuration data and setting up logging.

Configuration data is handled as a nested dictionary.  It is normally read from a YAML or JSON
file via :py:func:`load_from_file`; default values are layered in with :py:func:`merge_config`.
"""
import os, json, logging
from collections.abc import Mapping
from copy import deepcopy

import yaml

from . import ConfluxException

__all__ = [ "ConfigurationException", "load_from_file", "merge_config", "configure_log",
            "NORMAL", "global_logfile" ]

NORMAL = (logging.INFO + logging.DEBUG) // 2
logging.addLevelName(NORMAL, "NORMAL")

DEF_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

global_logfile = None
_log_handler = None

class ConfigurationException(ConfluxException):
    """
    an exception indicating a problem with the configuration data provided to a class or function
    """

    def __init__(self, message=None, cause=None, param=None):
        if not message and param:
            message = "Bad or missing configuration parameter: " + param
        super(ConfigurationException, self).__init__(message, cause)
        self.param = param

def load_from_file(configfile: str) -> Mapping:
    """
    read the configuration from the given file and return it as a dictionary.  The file format is
    determined by its extension: ``.json`` files are read as JSON, and all others as YAML.

    :param str configfile:  the path to the configuration file
    :raises ConfigurationException:  if the file cannot be read or parsed
    """
    try:
        with open(configfile) as fd:
            if configfile.endswith('.json'):
                data = json.load(fd)
            else:
                data = yaml.safe_load(fd)
    except OSError as ex:
        raise ConfigurationException("Unable to read config file, %s: %s" % (configfile, str(ex)),
                                     cause=ex)
    except (ValueError, yaml.YAMLError) as ex:
        raise ConfigurationException("Config file syntax error (%s): %s" % (configfile, str(ex)),
                                     cause=ex)

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationException("%s: config data is not a dictionary" % configfile)
    return data

def merge_config(primary: Mapping, defconf: Mapping) -> Mapping:
    """
    merge the configuration data in ``primary`` into ``defconf``, returning a new dictionary.
    Sub-dictionaries are merged recursively; all other values in ``primary`` replace those in
    ``defconf``.  Neither input is changed.
    """
    out = deepcopy(defconf)
    for key in primary:
        if isinstance(primary[key], Mapping) and isinstance(out.get(key), Mapping):
            out[key] = merge_config(primary[key], out[key])
        else:
            out[key] = deepcopy(primary[key])
    return out

def configure_log(logfile: str=None, level: int=None, format: str=None, config: Mapping=None,
                  addstderr=False):
    """
    configure the root logger to send messages to a file.

    :param str logfile:  the path of the log file to write to; a relative path is taken to be
                         relative to the ``logdir`` config parameter (or the current directory).
                         If not provided, the ``logfile`` config parameter is used.
    :param int   level:  the logging level to filter messages by; if not provided, the ``loglevel``
                         config parameter is used (default: DEBUG)
    :param str  format:  the message format to use
    :param dict config:  the configuration to pull defaults from
    :param bool addstderr:  if True, also send messages to standard error
    """
    global global_logfile, _log_handler
    if config is None:
        config = {}

    if not logfile:
        logfile = config.get('logfile', "conflux.log")
    if not os.path.isabs(logfile):
        logfile = os.path.join(config.get('logdir', os.getcwd()), logfile)
    if level is None:
        level = config.get('loglevel', logging.DEBUG)
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                raise ConfigurationException(param='loglevel')
    if not format:
        format = config.get('logformat', DEF_FORMAT)

    rootlog = logging.getLogger()
    if _log_handler:
        # replace the file handler set up by an earlier call
        rootlog.removeHandler(_log_handler)
        _log_handler.close()
    frmtr = logging.Formatter(format)
    hdlr = logging.FileHandler(logfile)
    hdlr.setLevel(level)
    hdlr.setFormatter(frmtr)
    rootlog.addHandler(hdlr)
    _log_handler = hdlr
    if addstderr:
        hdlr = logging.StreamHandler()
        hdlr.setLevel(level)
        hdlr.setFormatter(frmtr)
        rootlog.addHandler(hdlr)
    if rootlog.level == logging.NOTSET or rootlog.level > level:
        rootlog.setLevel(level)

    global_logfile = logfile
    rootlog.info("FYI: Writing log messages to %s", logfile)
