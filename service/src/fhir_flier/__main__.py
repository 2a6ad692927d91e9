import argparse
import json
import logging
import sys
from pathlib import Path

from .builder.operations import load_operations
from .config import FlierConfig
from .drivers.http import FHIRHttpDriver
from .errors import FlierError
from .flier import Flier

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fhir_flier", description="Build, patch and search FHIR resources"
    )
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_apply = subparsers.add_parser(
        "apply", help="apply an operations file to a resource and print the result"
    )
    parser_apply.add_argument("--resource", type=Path, required=True, help="resource JSON file")
    parser_apply.add_argument("--operations", type=Path, help="operations file (JSON or YAML)")

    parser_patch = subparsers.add_parser(
        "patch", help="print the FHIRPath Patch for an operations file"
    )
    parser_patch.add_argument("--resource-type", required=True)
    parser_patch.add_argument(
        "--operations", type=Path, required=True, help="operations file (JSON or YAML)"
    )

    parser_search = subparsers.add_parser("search", help="print a FHIR search URL")
    parser_search.add_argument("--resource-type", required=True)
    parser_search.add_argument("--base-url", default=None)
    parser_search.add_argument(
        "params", nargs="*", metavar="code[:modifier]=value", help="search parameters"
    )

    parser_send = subparsers.add_parser("send", help="send a resource to a FHIR server")
    parser_send.add_argument(
        "action", choices=["create", "update", "put", "delete"], help="terminal call to run"
    )
    parser_send.add_argument("--config", type=Path, required=True, help="config file (JSON or YAML)")
    parser_send.add_argument("--resource", type=Path, required=True, help="resource JSON file")
    parser_send.add_argument("--operations", type=Path, help="operations file (JSON or YAML)")

    return parser


def read_resource(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_apply(args) -> int:
    builder = Flier.from_resource(read_resource(args.resource))
    for op in load_operations(args.operations) if args.operations else []:
        builder.add_operation(op)

    print_json(builder.to_dict())
    return 0


def cmd_patch(args) -> int:
    builder = Flier.resource(args.resource_type)
    for op in load_operations(args.operations):
        builder.add_operation(op)

    print_json(builder.as_fhir_patch())
    return 0


def cmd_search(args) -> int:
    builder = Flier.search(args.resource_type)

    for param in args.params:
        key, sep, value = param.partition("=")
        if not sep:
            log.error(f"Search parameter without '=': {param}")
            return 2
        code, _, modifier = key.partition(":")
        if modifier:
            builder.call(code, value, modifier)
        else:
            builder.call(code, value)

    print(builder.as_url(args.base_url))
    return 0


def cmd_send(args) -> int:
    config = FlierConfig.from_file(args.config)
    logging.getLogger().setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    builder = Flier.from_resource(read_resource(args.resource))
    for op in load_operations(args.operations) if args.operations else []:
        builder.add_operation(op)

    builder.use_driver(FHIRHttpDriver.from_config(config))
    result = getattr(builder, args.action)()

    print_json(result)
    return 0


COMMANDS = {
    "apply": cmd_apply,
    "patch": cmd_patch,
    "search": cmd_search,
    "send": cmd_send,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s")

    try:
        return COMMANDS[args.cmd](args)
    except FlierError as e:
        log.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
