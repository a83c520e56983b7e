import json
import unittest as test
from unittest import mock

import requests

from conflux.raid import client as rcli
from conflux.raid import (RAiDServerError, RAiDClientError, RAiDResourceNotFound,
                          RAiDServiceException)
from conflux.base.config import ConfigurationException

baseurl = "https://api.raid.example.com/"
ident = {
    "id": "https://raid.org/10.0.0.0/375234214",
    "schemaUri": "https://raid.org/",
    "registrationAgency": { "id": "https://ror.org/009vhk114", "schemaUri": "https://ror.org/" },
    "owner": { "id": "https://ror.org/04pp8hn57", "schemaUri": "https://ror.org/", "servicePoint": 3 },
    "version": 1
}

class MockResponse:
    def __init__(self, json_data, status_code, reason, text=None):
        self.json_data = json_data
        self.status_code = status_code
        self.reason = reason
        self.text = text if text is not None else json.dumps(json_data)

    def json(self):
        if self.json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self.json_data

def mocked_requests_request(method, url, **kwargs):
    if url == baseurl+"raid/" and method == "POST":
        out = dict(kwargs['json'])
        out['identifier'] = ident
        return MockResponse(out, 201, "Created")
    if url == baseurl+"raid/10.0.0.0/375234214":
        if method == "GET":
            return MockResponse({ "identifier": ident }, 200, "OK")
        if method == "PUT":
            out = dict(kwargs['json'])
            out['identifier'] = dict(ident, version=ident['version']+1)
            return MockResponse(out, 200, "OK")
    if url == baseurl+"raid/10.0.0.0/forbidden":
        return MockResponse({ "error": "forbidden" }, 403, "Forbidden")
    if url == baseurl+"raid/10.0.0.0/broken":
        return MockResponse(None, 500, "Internal Server Error", "")
    if url == baseurl+"raid/10.0.0.0/html":
        return MockResponse(None, 200, "OK", "<html><body>Hello</body></html>")
    if url == baseurl+"raid/10.0.0.0/garbage":
        return MockResponse(None, 200, "OK", "goober")
    if url == baseurl+"raid/10.0.0.0/moved":
        return MockResponse(None, 304, "Not Modified", "")
    if url.startswith("https://down.example.com"):
        raise requests.ConnectionError("Connection refused")
    return MockResponse(None, 404, "Not Found", "")

class TestRAiDClient(test.TestCase):

    def setUp(self):
        self.cli = rcli.RAiDClient(baseurl, { "type": "bearer", "token": "pass1234" }, 10)

    def test_ctor(self):
        self.assertEqual(self.cli.baseurl, baseurl.rstrip('/'))
        self.assertEqual(self.cli.timeout, 10)
        self.assertEqual(self.cli._authkw, {})
        self.assertEqual(self.cli._authhdr, { 'Authorization': "Bearer pass1234" })

        cli = rcli.RAiDClient(baseurl)
        self.assertEqual(cli._authkw, {})
        self.assertEqual(cli._authhdr, {})
        self.assertIsNone(cli.timeout)

        with self.assertRaises(ConfigurationException):
            rcli.RAiDClient("")

    def test_setup_auth(self):
        self.cli._setup_auth({})
        self.assertEqual(self.cli._authkw, {})
        self.assertEqual(self.cli._authhdr, {})

        self.cli._setup_auth({ 'type': 'userpass', 'user': "gurn", 'pass': "pass1234" })
        self.assertEqual(self.cli._authkw, { 'auth': ("gurn", "pass1234") })
        self.assertEqual(self.cli._authhdr, {})

        self.cli._setup_auth({ 'token': "pass1234" })
        self.assertEqual(self.cli._authkw, {})
        self.assertEqual(self.cli._authhdr, { 'Authorization': "Bearer pass1234" })

        self.cli._setup_auth({ 'type': 'noNe' })
        self.assertEqual(self.cli._authkw, {})
        self.assertEqual(self.cli._authhdr, {})

        self.cli._setup_auth({ 'type': None })
        self.assertEqual(self.cli._authhdr, {})

        with self.assertRaises(ConfigurationException):
            self.cli._setup_auth({ 'type': 'userpass', 'user': "gurn" })
        with self.assertRaises(ConfigurationException):
            self.cli._setup_auth({ 'type': 'bearer' })
        with self.assertRaises(ConfigurationException):
            self.cli._setup_auth({ 'type': 'cert' })

    @mock.patch('conflux.raid.client.requests.request', side_effect=mocked_requests_request)
    def test_mint(self, mock_req):
        resp = self.cli.mint({ "title": [] })
        self.assertEqual(resp['identifier']['id'], "https://raid.org/10.0.0.0/375234214")
        self.assertEqual(resp['title'], [])

        args, kwargs = mock_req.call_args
        self.assertEqual(args, ("POST", baseurl+"raid/"))
        self.assertEqual(kwargs['json'], { "title": [] })
        self.assertEqual(kwargs['timeout'], 10)
        self.assertEqual(kwargs['headers']['Authorization'], "Bearer pass1234")
        self.assertEqual(kwargs['headers']['Content-type'], "application/json")

    @mock.patch('conflux.raid.client.requests.request', side_effect=mocked_requests_request)
    def test_update(self, mock_req):
        resp = self.cli.update("10.0.0.0", "375234214", { "identifier": ident, "title": [] })
        self.assertEqual(resp['identifier']['version'], 2)
        args, kwargs = mock_req.call_args
        self.assertEqual(args, ("PUT", baseurl+"raid/10.0.0.0/375234214"))

    @mock.patch('conflux.raid.client.requests.request', side_effect=mocked_requests_request)
    def test_describe(self, mock_req):
        resp = self.cli.describe("10.0.0.0", "375234214")
        self.assertEqual(resp['identifier']['owner']['servicePoint'], 3)
        args, kwargs = mock_req.call_args
        self.assertEqual(args, ("GET", baseurl+"raid/10.0.0.0/375234214"))
        self.assertIsNone(kwargs['json'])
        self.assertNotIn('Content-type', kwargs['headers'])

    @mock.patch('conflux.raid.client.requests.request', side_effect=mocked_requests_request)
    def test_errors(self, mock_req):
        with self.assertRaises(RAiDResourceNotFound) as ctx:
            self.cli.describe("10.0.0.0", "goober")
        self.assertEqual(ctx.exception.code, 404)
        self.assertEqual(ctx.exception.resource, "/raid/10.0.0.0/goober")

        with self.assertRaises(RAiDClientError) as ctx:
            self.cli.update("10.0.0.0", "forbidden", {})
        self.assertEqual(ctx.exception.code, 403)
        self.assertEqual(ctx.exception.status, "Forbidden")
        self.assertNotIsInstance(ctx.exception, RAiDResourceNotFound)

        with self.assertRaises(RAiDServerError) as ctx:
            self.cli.describe("10.0.0.0", "broken")
        self.assertEqual(ctx.exception.code, 500)

        with self.assertRaises(RAiDServerError) as ctx:
            self.cli.describe("10.0.0.0", "moved")
        self.assertEqual(ctx.exception.code, 304)

        with self.assertRaises(RAiDServerError) as ctx:
            self.cli.describe("10.0.0.0", "html")
        self.assertIn("HTML", str(ctx.exception))

        with self.assertRaises(RAiDServerError) as ctx:
            self.cli.describe("10.0.0.0", "garbage")
        self.assertIn("parse", str(ctx.exception))

    @mock.patch('conflux.raid.client.requests.request', side_effect=mocked_requests_request)
    def test_unreachable(self, mock_req):
        cli = rcli.RAiDClient("https://down.example.com")
        with self.assertRaises(RAiDServerError) as ctx:
            cli.mint({})
        self.assertIsInstance(ctx.exception.cause, requests.ConnectionError)
        self.assertIsInstance(ctx.exception, RAiDServiceException)


if __name__ == '__main__':
    test.main()
