"""
Validation of ISO 639-3 language codes.

RAiD requires that the language of a title or description be given as an ISO 639-3 code.  The
:py:class:`LanguageService` holds the set of known codes, loaded once from the code table
published by the ISO 639-3 registration authority (SIL).  Loading happens only through the
explicit factory methods (:py:meth:`LanguageService.from_url`, :py:meth:`LanguageService.from_file`,
and :py:meth:`LanguageService.from_lines`) or :py:func:`load_language_service`; if the table cannot
be obtained, a :py:class:`LanguageTableUnavailable` exception is raised rather than producing a
service that knows no languages.
"""
from collections.abc import Mapping, Iterable

import requests

from conflux.base.config import ConfigurationException
from . import system

DEF_LANGUAGE_TABLE_URL = "https://iso639-3.sil.org/sites/iso639-3/files/downloads/iso-639-3.tab"
DEF_TIMEOUT = 30
CODE_COL = 0
NAME_COL = 6

log = system.getSysLogger().getChild("language")

class LanguageTableUnavailable(ConfigurationException):
    """
    An exception indicating that the ISO 639-3 code table could not be retrieved or parsed
    """
    def __init__(self, source, message=None, cause=None):
        if not message:
            message = "Failed to load language data from " + str(source)
            if cause:
                message += ": " + str(cause)
        super(LanguageTableUnavailable, self).__init__(message, cause)
        self.source = source

def parse_language_table(lines: Iterable) -> Mapping:
    """
    parse the lines of an ISO 639-3 code table (tab-separated, with a header line) into a
    dictionary mapping lower-cased codes to their reference names.  Lines without a reference-name
    column, or with a blank code or name, are skipped.
    """
    out = {}
    lines = iter(lines)
    next(lines, None)   # the header
    for line in lines:
        cols = line.rstrip("\r\n").split('\t')
        if len(cols) <= NAME_COL:
            continue
        code = cols[CODE_COL].strip()
        name = cols[NAME_COL].strip()
        if code and name:
            out[code.lower()] = name
    return out

class LanguageService:
    """
    a read-only registry of ISO 639-3 language codes.  Once created, an instance can be shared
    freely between threads.
    """

    def __init__(self, codes: Mapping):
        """
        wrap a prepared table of codes.  Use one of the ``from_*`` factory methods to load the
        standard table.

        :param dict codes:  a mapping of ISO 639-3 codes to reference names
        """
        self._codes = dict((c.lower(), n) for c, n in codes.items())

    @classmethod
    def from_lines(cls, lines: Iterable, source: str="(lines)"):
        """
        create a service from the lines of an ISO 639-3 code table
        :raises LanguageTableUnavailable:  if the table contains no usable entries
        """
        codes = parse_language_table(lines)
        if not codes:
            raise LanguageTableUnavailable(source, "No language codes found in " + source)
        log.info("Loaded %d language codes from %s", len(codes), source)
        return cls(codes)

    @classmethod
    def from_file(cls, path: str):
        """
        create a service from a code table saved on local disk
        :raises LanguageTableUnavailable:  if the file cannot be read as UTF-8 text or contains
                                           no usable entries
        """
        try:
            with open(path, encoding='utf-8') as fd:
                return cls.from_lines(fd, str(path))
        except (OSError, UnicodeDecodeError) as ex:
            raise LanguageTableUnavailable(path, cause=ex)

    @classmethod
    def from_url(cls, url: str=DEF_LANGUAGE_TABLE_URL, timeout: float=DEF_TIMEOUT):
        """
        create a service by downloading the code table.  This blocks until the table is retrieved.
        :raises LanguageTableUnavailable:  if the download fails or yields no usable entries
        """
        try:
            resp = requests.get(url, timeout=timeout)
            if resp.status_code != 200:
                raise LanguageTableUnavailable(url, "Failed to download language data from %s: %s %s" %
                                               (url, resp.status_code, resp.reason))
            resp.encoding = 'utf-8'
            return cls.from_lines(resp.text.splitlines(), url)
        except requests.RequestException as ex:
            raise LanguageTableUnavailable(url, cause=ex)

    def get_all_languages(self) -> Mapping:
        """
        return a dictionary of all the known codes mapped to their reference names
        """
        return dict(self._codes)

    def is_valid_language_code(self, code: str) -> bool:
        """
        return True if the given value is a known ISO 639-3 code (compared case-insensitively)
        """
        return isinstance(code, str) and len(code) == 3 and code.lower() in self._codes

    def __len__(self):
        return len(self._codes)

def load_language_service(config: Mapping=None) -> LanguageService:
    """
    create a :py:class:`LanguageService` as directed by configuration.  The following
    parameters are consulted:

    ``language_table_file``
        a local copy of the code table; if set, it is used instead of downloading the table
    ``language_table_url``
        the URL to download the table from (default: the SIL download URL)
    ``language_timeout``
        the number of seconds to wait for the download (default: 30)
    """
    if config is None:
        config = {}
    if config.get('language_table_file'):
        return LanguageService.from_file(config['language_table_file'])
    return LanguageService.from_url(config.get('language_table_url', DEF_LANGUAGE_TABLE_URL),
                                    config.get('language_timeout', DEF_TIMEOUT))
