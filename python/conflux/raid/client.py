"""
A client library for the RAiD registry service (see https://raid.org/).

Only the three operations needed for registering Conflux projects are supported:  minting a new
RAiD, updating an existing one, and retrieving the current description of one.
"""
from collections.abc import Mapping

import requests

from . import RAiDServerError, RAiDClientError, RAiDResourceNotFound, system
from conflux.base.config import ConfigurationException

log = system.getSysLogger().getChild("client")

class RAiDClient:
    """
    a client class for minting and updating RAiDs via the RAiD registry service
    """
    RAID_EP = "/raid/"

    def __init__(self, baseurl: str, authconfig: Mapping=None, timeout: float=None):
        """
        initialize the client
        :param str     baseurl:  the base URL for the service (e.g. "https://api.prod.raid.org.au");
                                 the ``/raid/`` endpoint is appended to it.
        :param dict authconfig:  a dictionary providing credentials for connecting to the service; if
                                 not provided, it will be assumed that authentication is not required.
        :param float   timeout:  the number of seconds to wait for a response; if not provided, wait
                                 indefinitely.
        """
        if not baseurl:
            raise ConfigurationException("RAiDClient: missing base URL for the RAiD service")
        self.baseurl = baseurl.rstrip('/')
        self.timeout = timeout

        self._authkw = {}
        self._authhdr = {}
        self._setup_auth(authconfig)

    def _setup_auth(self, config: Mapping=None):
        # erase any previously set-up authentication
        self._authkw = {}
        self._authhdr = {}

        if not config or config.get('type', '') is None:
            return      # no authentication required

        authtype = config.get('type', 'bearer')
        if isinstance(authtype, str):
            authtype = authtype.lower()

        if authtype == "none":
            pass      # no authentication required

        elif authtype == "userpass":
            self._authkw = { "auth": (config.get('user'), config.get('pass')) }
            if not all(self._authkw["auth"]):
                raise ConfigurationException("RAiDClient: authentication type userpass requires both "+
                                             "'user' and 'pass' config parameters")

        elif authtype == "bearer":
            token = config.get("token")
            if not token:
                raise ConfigurationException("RAiDClient: authentication type bearer requires "+
                                             "'token' config parameter")
            self._authhdr = { "Authorization": f"Bearer {token}" }

        else:
            raise ConfigurationException("RAiDClient: authentication 'type' param value not supported: "+
                                         str(authtype))

    def _request(self, method, relurl, body=None):
        hdrs = { "Accept": "application/json" }
        if body is not None:
            hdrs["Content-type"] = "application/json"
        hdrs.update(self._authhdr)

        resp = None
        try:
            resp = requests.request(method, self.baseurl+relurl, headers=hdrs, json=body,
                                    timeout=self.timeout, **self._authkw)

            if resp.status_code >= 500:
                raise RAiDServerError(relurl, resp.status_code, resp.reason)
            elif resp.status_code == 404:
                raise RAiDResourceNotFound(relurl, resp.reason)
            elif resp.status_code >= 400:
                raise RAiDClientError(relurl, resp.status_code, resp.reason)
            elif resp.status_code < 200 or resp.status_code >= 300:
                raise RAiDServerError(relurl, resp.status_code, resp.reason,
                                      message="Unexpected response from server: {0} {1}"
                                      .format(resp.status_code, resp.reason))

            return resp.json()

        except TypeError as ex:
            raise RAiDClientError(relurl, None, None, message="Unable to encode request: "+str(ex),
                                  cause=ex)
        except ValueError as ex:
            if resp is not None and resp.text and \
               ("<body" in resp.text or "<BODY" in resp.text):
                raise RAiDServerError(relurl,
                                      message="HTML returned where JSON "+
                                      "expected (is service URL correct?)", cause=ex)
            else:
                raise RAiDServerError(relurl,
                                      message="Unable to parse response as "+
                                      "JSON (is service URL correct?)", cause=ex)
        except requests.RequestException as ex:
            raise RAiDServerError(relurl, cause=ex)

    def mint(self, create_request: Mapping) -> Mapping:
        """
        register a new RAiD with the given metadata
        :param dict create_request:  the RAiD creation request (see
                                     :py:meth:`~conflux.raid.mapper.ProjectMapper.map_creation_request`)
        :return:  the full description of the new RAiD, including its ``identifier`` block
        """
        log.debug("Requesting a new RAiD")
        return self._request("POST", self.RAID_EP, create_request)

    def update(self, prefix: str, suffix: str, update_request: Mapping) -> Mapping:
        """
        replace the metadata of an existing RAiD
        :param str prefix:  the handle prefix of the RAiD (see :py:func:`~conflux.raid.ids.raid_id_parts`)
        :param str suffix:  the handle suffix of the RAiD
        :param dict update_request:  the RAiD update request
        :return:  the updated description of the RAiD
        """
        log.debug("Updating RAiD %s/%s", prefix, suffix)
        return self._request("PUT", f"{self.RAID_EP}{prefix}/{suffix}", update_request)

    def describe(self, prefix: str, suffix: str) -> Mapping:
        """
        return the current description of an existing RAiD
        :raises RAiDResourceNotFound:  if the registry does not know the requested RAiD
        """
        return self._request("GET", f"{self.RAID_EP}{prefix}/{suffix}")
