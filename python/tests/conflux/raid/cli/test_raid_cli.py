import os, json, logging, tempfile, shutil
from io import StringIO
from pathlib import Path
import unittest as test
from unittest import mock

from conflux.raid import cli
from conflux.raid.cli import check, map as mapcmd
from conflux.raid.checksum import compute_hash
from conflux.base import config as cfgmod
from conflux.base.cli import CommandFailure

datadir = Path(__file__).parents[1] / "data"
tmpdir = tempfile.TemporaryDirectory(prefix="_test_raidcli.")

def tearDownModule():
    tmpdir.cleanup()

class TestConfluxRAiDCLI(test.TestCase):

    def setUp(self):
        self.workdir = os.path.join(tmpdir.name, "work")
        os.mkdir(self.workdir)
        for f in "project.json bad_project.json raidinfo.json iso-639-3.tab".split():
            shutil.copy(datadir/f, self.workdir)

    def tearDown(self):
        rootlog = logging.getLogger()
        if cfgmod._log_handler:
            rootlog.removeHandler(cfgmod._log_handler)
            cfgmod._log_handler.close()
            cfgmod._log_handler = None
        shutil.rmtree(self.workdir)

    def run_cli(self, *args):
        with mock.patch('sys.stdout', new_callable=StringIO) as out, \
             mock.patch('sys.stderr', new_callable=StringIO) as err:
            cli.run("conflux-raid", ["-q", "-w", self.workdir] + list(args))
        return out.getvalue(), err.getvalue()

    def test_check_ok(self):
        out, err = self.run_cli("check", "project.json")
        self.assertEqual(out, "")
        self.assertTrue(os.path.isfile(os.path.join(self.workdir, "conflux-raid.log")))

    def test_check_with_languages(self):
        out, err = self.run_cli("check", "-L", "iso-639-3.tab", "project.json")
        self.assertEqual(out, "")

        with open(os.path.join(self.workdir, "project.json")) as fd:
            data = json.load(fd)
        data['titles'][0]['language'] = "xx"
        with open(os.path.join(self.workdir, "project.json"), 'w') as fd:
            json.dump(data, fd)

        with self.assertRaises(CommandFailure) as ctx:
            self.run_cli("check", "-L", "iso-639-3.tab", "project.json")
        self.assertEqual(ctx.exception.stat, 1)

    def test_check_incompatible(self):
        with mock.patch('sys.stdout', new_callable=StringIO) as out:
            with self.assertRaises(CommandFailure) as ctx:
                cli.run("conflux-raid", ["-q", "-w", self.workdir, "check", "bad_project.json"])
        self.assertEqual(ctx.exception.stat, 1)
        self.assertEqual(ctx.exception.cmd, "check")
        self.assertIn("5 issues", str(ctx.exception))
        self.assertEqual(out.getvalue().splitlines(),
                         ["NoActivePrimaryTitle", "NoContributors", "NoProjectLeader",
                          "NoProjectContact", "NoLeadResearchOrganisation"])

    def test_check_bad_input(self):
        with self.assertRaises(CommandFailure) as ctx:
            self.run_cli("check", "goober.json")
        self.assertEqual(ctx.exception.stat, 3)

        with open(os.path.join(self.workdir, "notjson.json"), 'w') as fd:
            fd.write("{ goober")
        with self.assertRaises(CommandFailure) as ctx:
            self.run_cli("check", "notjson.json")
        self.assertEqual(ctx.exception.stat, 3)

        with self.assertRaises(CommandFailure) as ctx:
            self.run_cli("check", "raidinfo.json")
        self.assertEqual(ctx.exception.stat, 3)

    def test_check_bad_language_table(self):
        with self.assertRaises(CommandFailure) as ctx:
            self.run_cli("check", "-L", "goober.tab", "project.json")
        self.assertEqual(ctx.exception.stat, 6)

    def test_map_create(self):
        out, err = self.run_cli("map", "project.json")
        req = json.loads(out)
        self.assertNotIn("identifier", req)
        self.assertEqual(req['contributor'][0]['id'], "https://orcid.org/0000-0002-1825-0097")
        self.assertEqual(req['organisation'][0]['id'], "https://ror.org/04pp8hn57")
        self.assertEqual(err, "")

    def test_map_update(self):
        out, err = self.run_cli("map", "-u", "raidinfo.json", "project.json")
        req = json.loads(out)
        self.assertEqual(req['identifier']['id'], "https://raid.org/10.0.0.0/375234214")
        self.assertEqual(err.strip(), compute_hash(req))

    def test_map_update_to_file(self):
        out, err = self.run_cli("map", "-u", "raidinfo.json", "-o", "req.json", "project.json")
        with open(os.path.join(self.workdir, "req.json")) as fd:
            req = json.load(fd)
        self.assertEqual(out.strip(), compute_hash(req))
        self.assertEqual(req['identifier']['owner']['servicePoint'], 3)

    def test_map_unmappable(self):
        with open(os.path.join(self.workdir, "project.json")) as fd:
            data = json.load(fd)
        del data['organisations'][0]['organisation']['ror_id']
        with open(os.path.join(self.workdir, "project.json"), 'w') as fd:
            json.dump(data, fd)

        with self.assertRaises(CommandFailure) as ctx:
            self.run_cli("map", "project.json")
        self.assertEqual(ctx.exception.stat, 1)

    def test_map_write_failure(self):
        with self.assertRaises(CommandFailure) as ctx:
            self.run_cli("map", "-o", os.path.join(self.workdir, "nodir", "req.json"), "project.json")
        self.assertEqual(ctx.exception.stat, 4)

    def test_main(self):
        with mock.patch('sys.stdout', new_callable=StringIO), \
             mock.patch('sys.stderr', new_callable=StringIO):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["-q", "-w", self.workdir, "check", "project.json"])
            self.assertEqual(ctx.exception.code, 0)

            with self.assertRaises(SystemExit) as ctx:
                cli.main(["-q", "-w", self.workdir, "check", "bad_project.json"])
            self.assertEqual(ctx.exception.code, 1)

            with self.assertRaises(SystemExit) as ctx:
                cli.main(["-q", "-w", self.workdir, "map", "goober.json"])
            self.assertEqual(ctx.exception.code, 3)

            with self.assertRaises(SystemExit) as ctx:
                cli.main(["-q", "-w", self.workdir, "frob"])
            self.assertEqual(ctx.exception.code, 2)

    def test_commands(self):
        self.assertEqual(check.default_name, "check")
        self.assertEqual(mapcmd.default_name, "map")


if __name__ == '__main__':
    test.main()
