import argparse
import json
import traceback
from typing import Any, Callable, Dict, List, Optional

import yaml

from buildfarm.backplane import init_logger
from buildfarm.backplane.config import BackplaneConfig, BuildfarmConfig, SYSTEMWIDE_CONFIG

SUPPORTED_OUT_FORMATS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "json": lambda info: json.dumps(info, indent=2),
    "yaml": lambda info: yaml.safe_dump(info, sort_keys=False)
}


def output_config(
        backplane: BackplaneConfig,
        out_format: str,
        out_file: Optional[str] = None
):
    """
    Outputs the backplane configuration, with its secrets hidden.

    :param backplane: the backplane configuration to output
    :param out_format: the output format (json, yaml)
    :param out_file: the file to write the configuration to instead of printing it to stdout
    """
    if out_format not in SUPPORTED_OUT_FORMATS:
        raise ValueError(
            f"Unhandled output format: {out_format}\n"
            f"Must be one of: {SUPPORTED_OUT_FORMATS.keys()}"
        )

    config_str = SUPPORTED_OUT_FORMATS[out_format]({"backplane": backplane.to_display_dict()})

    if out_file is None:
        print(config_str)
    else:
        with open(out_file, "w") as of:
            of.write(config_str)


def main(args: Optional[List[str]] = None):
    """
    Outputs the effective backplane configuration.
    Use -h to see all options.

    :param args: the command-line arguments to use, uses sys.argv if None
    :type args: list
    """
    parser = argparse.ArgumentParser(
        description='Outputs the effective buildfarm backplane configuration, with secrets hidden.',
        prog="buildfarm-backplane-config",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("-C", "--config", dest="config", metavar="FILE", required=False, help="The configuration to use if not the system wide one (%s)." % SYSTEMWIDE_CONFIG)
    parser.add_argument("--redis_uri", dest="redis_uri", metavar="URI", default=None, help="Overrides the configured Redis URI (and the REDIS_URI environment variable).")
    parser.add_argument("-F", "--format", dest="format", metavar="FORMAT", default="yaml", choices=["yaml", "json"], help="The format to use for the output of the configuration.")
    parser.add_argument("-O", "--output", dest="output", metavar="FILE", default=None, help="The file to store the configuration in, otherwise stdout is used.")
    parser.add_argument("--debug", action="store_true", help="Whether to output debugging information.")
    parsed = parser.parse_args(args=args)
    init_logger(parsed.debug)
    config = BuildfarmConfig(parsed.config, redis_uri=parsed.redis_uri)
    output_config(config.backplane, parsed.format, out_file=parsed.output)


def sys_main() -> int:
    """
    Runs the main function using the system cli arguments, and
    returns a system error code.

    :return: 0 for success, 1 for failure.
    :rtype: int
    """
    try:
        main()
        return 0
    except Exception:
        print(traceback.format_exc())
        return 1


if __name__ == "__main__":
    try:
        main()
    except Exception:
        print(traceback.format_exc())
