"""
CLI command that converts a project into a RAiD registry request
"""
import logging, sys, json

from conflux.base.cli import CommandFailure, explain
from .. import MappingError
from ..mapper import ProjectMapper
from ..checksum import compute_hash
from ._args import define_comm_opts, read_snapshot, read_raid_info, resolve_path, get_language_service

default_name = "map"
help = "convert a project into a RAiD creation or update request"
description = """
  Convert a project snapshot (given as a JSON file) into the request that would be sent to the RAiD
  registry to mint a RAiD for it.  With the -u option, the project's current RAiD record is read
  from the given file and an update request is created instead; in this case, the checksum of the
  request (used to detect when a project has changed since its last sync) is printed as well.

  By default, the request is written to standard out, but with the -o option, it can be written
  to a specific file.  When the request goes to standard out, the checksum is printed to standard
  error.
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
    p.add_argument("-u", "--update", metavar="RAIDINFO", type=str, dest="raidinfo",
                   help="create an update request using the RAiD record in the JSON file, RAIDINFO")
    p.add_argument("-o", "--output-file", metavar="FILE", type=str, dest="outfile",
                   help="write the output to the named file instead of standard out")
    return None

def execute(args, config=None, log=None):
    """
    execute this command: write out the RAiD request for the given project
    """
    cmd = default_name
    if not log:
        log = logging.getLogger(cmd)
    if not config:
        config = {}

    project = read_snapshot(args.snapshot, config, cmd)
    raidinfo = None
    if args.raidinfo:
        raidinfo = read_raid_info(args.raidinfo, config, cmd)

    mapper = ProjectMapper(get_language_service(args, config))
    checksum = None
    try:
        if raidinfo:
            req = mapper.map_update_request(project, raidinfo)
            checksum = compute_hash(req)
        else:
            req = mapper.map_creation_request(project)
    except MappingError as ex:
        raise CommandFailure(cmd, "Unable to map project %s: %s" % (project.id, str(ex)), 1, ex)

    # write the output
    fp = None   # file object for file output
    op = None   # file object for output (may be equal to fp)
    try:
        if args.outfile and args.outfile != '-':
            fp = open(resolve_path(args.outfile, config), 'w')
            op = fp
        else:
            op = sys.stdout

        json.dump(req, op, indent=4, separators=(',', ': '))
        op.write("\n")

    except OSError as ex:
        raise CommandFailure(cmd, "Failed to write data to %s: %s" %
                             ((fp and args.outfile) or "standard out", str(ex)), 4, ex)
    finally:
        if fp: fp.close()

    if checksum:
        print(checksum, file=(sys.stderr if fp is None else sys.stdout))
        explain(log, "Update request for project %s has checksum %s", project.id, checksum)
