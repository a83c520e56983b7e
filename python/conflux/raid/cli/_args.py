"""
This module defines some reusable functions shared by the conflux-raid subcommand modules.
"""
import os, json

from conflux.base.cli import CommandFailure
from ..domain import ProjectSnapshot, RAiDInfo
from ..language import load_language_service

def define_comm_opts(subparser):
    """
    define some arguments that apply to all conflux-raid subcommands.  These are:
     - snapshot            - the JSON file containing the project snapshot
     - --language-table    - a local copy of the ISO 639-3 code table to validate languages against
    """
    p = subparser
    p.add_argument("snapshot", metavar="SNAPSHOT", type=str,
                   help="a JSON file containing the project to process")
    p.add_argument("-L", "--language-table", metavar="FILE", type=str, dest="langtable",
                   help="check title and description languages against the ISO 639-3 code table in "+
                        "FILE (this overrides the language_table_file config parameter)")
    return None

def resolve_path(path, config):
    """
    return the given path, taken to be relative to the working directory if not absolute
    """
    if not os.path.isabs(path):
        path = os.path.join(config.get('working_dir', os.getcwd()), path)
    return path

def read_json(path, config, cmd, what="input"):
    """
    read a JSON document from the given file
    :raises CommandFailure:  (with status 3) if the file cannot be read or parsed
    """
    try:
        with open(resolve_path(path, config)) as fd:
            return json.load(fd)
    except OSError as ex:
        raise CommandFailure(cmd, "Unable to read %s file, %s: %s" % (what, path, str(ex)), 3, ex)
    except ValueError as ex:
        raise CommandFailure(cmd, "%s: %s file is not legal JSON: %s" % (path, what, str(ex)), 3, ex)

def read_snapshot(path, config, cmd) -> ProjectSnapshot:
    """
    read a project snapshot from the given JSON file
    """
    data = read_json(path, config, cmd, "snapshot")
    try:
        return ProjectSnapshot.from_json_obj(data)
    except (KeyError, TypeError, ValueError, AttributeError) as ex:
        raise CommandFailure(cmd, "%s: not a valid project snapshot: %s" % (path, str(ex)), 3, ex)

def read_raid_info(path, config, cmd) -> RAiDInfo:
    """
    read a RAiD record from the given JSON file
    """
    data = read_json(path, config, cmd, "RAiD info")
    try:
        return RAiDInfo.from_json_obj(data)
    except (KeyError, TypeError, ValueError, AttributeError) as ex:
        raise CommandFailure(cmd, "%s: not a valid RAiD info record: %s" % (path, str(ex)), 3, ex)

def get_language_service(args, config):
    """
    return the language service requested by the arguments or configuration, or None if language
    checking was not requested.
    :raises LanguageTableUnavailable:  if the requested code table cannot be loaded
    """
    if args.langtable:
        config = dict(config)
        config['language_table_file'] = resolve_path(args.langtable, config)
    if not config.get('language_table_file') and not config.get('language_table_url'):
        return None
    return load_language_service(config)
