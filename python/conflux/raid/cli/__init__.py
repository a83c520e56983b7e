"""
module supporting the ``conflux-raid`` command-line program for checking projects against the RAiD
rules and previewing the requests that would be sent to the RAiD registry.

EXIT STATUS

  0 - normal successful completion
  1 - the project is not RAiD compatible (or could not be mapped)
  2 - an error was found in the option or argument values, preventing proper parsing or interpretation
  3 - syntax or other read error while reading provided input data
  4 - error occured while writing output data
  6 - if a configuration error was detected
 10 - an unrecognized command was requested

The value 200 is returned if any unexpected, uncaught exception bubbles to the top of the execution
stack.
"""
import os, sys, logging

from conflux.base import cli
from conflux.base.config import ConfigurationException
from . import check, map

description = "check and map Conflux projects for registration as RAiDs"
epilog = None
default_prog_name = "conflux-raid"

def run(cmdname, args):
    """
    a function that executes the ``conflux-raid`` command-line tool.
    """
    if not cmdname:
        cmdname = default_prog_name

    # set up the commands
    argparser = cli.define_prog_opts(cmdname, description, epilog)
    suite = cli.CLISuite(cmdname, os.environ.get("CONFLUX_RAID_CONFIG"), argparser)
    suite.load_subcommand(check)
    suite.load_subcommand(map)

    # execute the commands
    suite.execute(args)
    return args

def main(args=None):
    """
    the entry point for the ``conflux-raid`` script; this exits the interpreter with the
    appropriate status.
    """
    prog = default_prog_name
    if args is None:
        prog = os.path.splitext(os.path.basename(sys.argv[0]))[0] or prog
        args = sys.argv[1:]
    try:
        run(prog, args)
        sys.exit(0)
    except cli.CommandFailure as ex:
        logging.getLogger(f"{prog} {ex.cmd}").critical(str(ex))
        sys.exit(ex.stat)
    except ConfigurationException as ex:
        logging.getLogger(prog).critical("Config error: "+str(ex))
        sys.exit(6)
    except Exception as ex:
        logging.getLogger(prog).exception(ex)
        sys.exit(200)

if __name__ == "__main__":
    main()
