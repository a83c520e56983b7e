"""
CLI command that checks whether a project can be registered as a RAiD
"""
import logging

from conflux.base.cli import CommandFailure, explain
from ..compat import CompatibilityChecker
from ._args import define_comm_opts, read_snapshot, get_language_service

default_name = "check"
help = "report the reasons a project cannot be registered as a RAiD"
description = """
  Check a project snapshot (given as a JSON file) against the rules imposed by the RAiD registry.
  Each problem found is printed on its own line, giving the type of problem and, where applicable,
  the identifier of the offending title, description, person, organisation, or product.  The command
  exits with status 1 if any problems are found.
"""

def load_into(subparser):
    """
    load this command into a CLI by defining the command's arguments and options
    :param argparser.ArgumentParser subparser:  the argument parser instance to define this command's
                                                interface into it
    :rtype: None
    """
    p = subparser
    p.description = description
    define_comm_opts(p)
    return None

def execute(args, config=None, log=None):
    """
    execute this command: print the incompatibilities found in the given project
    """
    cmd = default_name
    if not log:
        log = logging.getLogger(cmd)
    if not config:
        config = {}

    project = read_snapshot(args.snapshot, config, cmd)
    checker = CompatibilityChecker(config.get('checks', {}), get_language_service(args, config))
    issues = checker.check_compatibility(project)

    for issue in issues:
        print(str(issue))
    if issues:
        raise CommandFailure(cmd, "Project %s is not RAiD compatible (%d issue%s)" %
                             (project.id, len(issues), "" if len(issues) == 1 else "s"), 1)
    explain(log, "Project %s is RAiD compatible", project.id)
