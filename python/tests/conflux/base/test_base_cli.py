import os, sys, logging, argparse, tempfile
import unittest as test

from conflux.base import cli
from conflux.base import config as cfgmod
from conflux.base.config import ConfigurationException

tmpdir = tempfile.TemporaryDirectory(prefix="_test_cli.")

def tearDownModule():
    tmpdir.cleanup()

class TestModFunctions(test.TestCase):

    def test_define_prog_opts(self):
        p = cli.define_prog_opts("admin", "exert superpowers")
        self.assertEqual(p.prog, "admin")
        self.assertIn("superpowers", p.description)
        self.assertIn("help specifically on CMD", p.epilog)

        args = p.parse_args([])
        self.assertEqual(args.workdir, "")
        self.assertIsNone(args.conf)
        self.assertIsNone(args.logfile)
        self.assertFalse(args.quiet)
        self.assertFalse(args.verbose)
        self.assertFalse(args.debug)

        parser = argparse.ArgumentParser("fred", None, "go to work", "good work")
        p = cli.define_prog_opts("goob", parser=parser)
        self.assertTrue(p is parser)
        self.assertEqual(p.prog, "fred")
        self.assertIn("good work", p.epilog)
        args = p.parse_args("-q -v -D -c conf.yml".split())
        self.assertTrue(args.quiet)
        self.assertTrue(args.verbose)
        self.assertTrue(args.debug)
        self.assertEqual(args.conf, "conf.yml")

    def test_CommandFailure(self):
        ex = cli.CommandFailure("goob", "hey, don't do that!", 3)
        self.assertEqual(ex.cmd, "goob")
        self.assertEqual(ex.stat, 3)
        self.assertIsNone(ex.cause)
        self.assertEqual(str(ex), "hey, don't do that!")

        cause = OSError("disk full")
        ex = cli.CommandFailure("goob", None, 4, cause)
        self.assertEqual(str(ex), "disk full")
        self.assertIs(ex.cause, cause)


class TestCLISuite(test.TestCase):

    class TestCmdMod(object):
        def __init__(self):
            self.default_name = "mock"
            self.help = "mighty helpful"
            self.last_exec = None
        def load_into(self, sp):
            sp.add_argument("uid", metavar="ID", type=str, help="the ID to use")
        def execute(self, args, config, log):
            self.last_exec = { 'args': args, 'config': config, 'log': log }
            if args.uid == "fail":
                raise cli.CommandFailure("mock", "failed as requested", 5)
            if args.uid == "misconfigured":
                raise ConfigurationException("missing param")

    def resetLogfile(self):
        rootlog = logging.getLogger()
        if cfgmod._log_handler:
            rootlog.removeHandler(cfgmod._log_handler)
            cfgmod._log_handler.close()
            cfgmod._log_handler = None

    def setUp(self):
        self.resetLogfile()

    def tearDown(self):
        self.resetLogfile()

    def test_ctor(self):
        cmd = cli.CLISuite("conflux-raid")
        self.assertEqual(cmd.suitename, "conflux-raid")
        self.assertIsNotNone(cmd.parser)
        self.assertEqual(cmd.parser.prog, "conflux-raid")
        self.assertIsNotNone(cmd._subparser_src)
        self.assertEqual(cmd._cmds, {})

    def test_configure_log_viaconfig(self):
        p = cli.define_prog_opts("conflux-raid")
        args = p.parse_args("-q".split())
        cfg = { "logdir": tmpdir.name }

        cmd = cli.CLISuite("conflux-raid")
        log = cmd.configure_log(args, cfg)
        self.assertEqual(log.name, "cli.conflux-raid")
        self.assertEqual(cfgmod.global_logfile, os.path.join(tmpdir.name, "conflux-raid.log"))

    def test_configure_log_viaargs(self):
        p = cli.define_prog_opts("conflux-raid")
        args = p.parse_args("-q -l goober.log".split())
        cfg = { "working_dir": tmpdir.name }

        cmd = cli.CLISuite("conflux-raid")
        log = cmd.configure_log(args, cfg)
        self.assertEqual(cfgmod.global_logfile, os.path.join(tmpdir.name, "goober.log"))

    def test_load_and_execute(self):
        cmd = cli.CLISuite("conflux-raid")
        tstmod = self.TestCmdMod()

        cmd.load_subcommand(tstmod)
        cmd.load_subcommand(tstmod, "gurn")
        self.assertIn("mock", cmd._cmds)
        self.assertIn("gurn", cmd._cmds)
        self.assertTrue(cmd._cmds["gurn"] is tstmod)

        cmd.execute(["-q", "-w", tmpdir.name, "gurn", "cranston"])
        self.assertEqual(tstmod.last_exec['args'].cmd, "gurn")
        self.assertEqual(tstmod.last_exec['args'].uid, "cranston")
        self.assertTrue(tstmod.last_exec['args'].quiet)
        self.assertEqual(tstmod.last_exec['config'],
                         {'working_dir': tmpdir.name, 'logdir': tmpdir.name,
                          'logfile': "conflux-raid.log"})
        self.assertIsNotNone(tstmod.last_exec['log'])

    def test_execute_failures(self):
        cmd = cli.CLISuite("conflux-raid")
        cmd.load_subcommand(self.TestCmdMod())

        with self.assertRaises(cli.CommandFailure) as ctx:
            cmd.execute(["-q", "-w", tmpdir.name, "mock", "fail"])
        self.assertEqual(ctx.exception.stat, 5)
        self.assertEqual(ctx.exception.cmd, "mock")

        with self.assertRaises(cli.CommandFailure) as ctx:
            cmd.execute(["-q", "-w", tmpdir.name, "mock", "misconfigured"])
        self.assertEqual(ctx.exception.stat, 6)

        with self.assertRaises(cli.CommandFailure) as ctx:
            cmd.execute(["-q", "-w", os.path.join(tmpdir.name, "notthere"), "mock", "cranston"])
        self.assertEqual(ctx.exception.stat, 2)

        with self.assertRaises(cli.CommandFailure) as ctx:
            cmd.execute(["-q", "-c", os.path.join(tmpdir.name, "notthere.yml"), "mock", "cranston"])
        self.assertEqual(ctx.exception.stat, 6)

    def test_extract_config_for_cmd(self):
        cmd = cli.CLISuite("conflux-raid")
        tstmod = self.TestCmdMod()

        config = {
            "foo": "bar",
            "fred": "felon",
            "cmd": {
                "check" : {
                    "fred": "cranston",
                    "goober": "cleveland"
                },
                "mock": {
                    "goober": "pittsburgh"
                }
            }
        }

        cfg = cmd.extract_config_for_cmd(config, 'check', tstmod)
        self.assertEqual(cfg.get('goober'), "cleveland")
        self.assertEqual(cfg.get('fred'), "cranston")
        self.assertNotIn('cmd', cfg)
        cfg = cmd.extract_config_for_cmd(config, 'map', tstmod)
        self.assertEqual(cfg.get('goober'), "pittsburgh")
        self.assertEqual(cfg.get('fred'), "felon")


if __name__ == '__main__':
    test.main()
