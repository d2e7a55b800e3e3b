from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from .errors import JsonToolsError
from .logging import configure_logging
from .patch import Patch
from .pointer import Pointer
from .predicates import evaluate


def _load_json(source: str) -> Any:
    text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    return json.loads(text)


def _dump(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False) + "\n"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="jsontools")
    parser.add_argument("--log-level", default=None, help="Logging level (defaults to $JSONTOOLS_LOG_LEVEL)")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_apply = sub.add_parser("apply", help="Apply a patch document to a JSON document")
    p_apply.add_argument("patch", help="Patch file ('-' for stdin)")
    p_apply.add_argument("document", help="Document file ('-' for stdin)")
    p_apply.add_argument("--predicates", action="store_true", help="Allow predicate operations in the patch")
    p_apply.add_argument("--output", default=None, help="Write the result here instead of stdout")

    p_pointer = sub.add_parser("pointer", help="Print the value a JSON Pointer refers to")
    p_pointer.add_argument("path")
    p_pointer.add_argument("document", help="Document file ('-' for stdin)")

    p_check = sub.add_parser("check", help="Evaluate a predicate; exit status 0 when true")
    p_check.add_argument("predicate", help="Predicate descriptor as a JSON object")
    p_check.add_argument("document", help="Document file ('-' for stdin)")

    args = parser.parse_args(argv)
    try:
        configure_logging("jsontools", level=args.log_level)

        if args.cmd == "apply":
            patch = Patch(_load_json(args.patch), True if args.predicates else None)
            result = patch.apply(_load_json(args.document))
            if args.output:
                Path(args.output).write_text(_dump(result), encoding="utf-8")
            else:
                sys.stdout.write(_dump(result))
            return 0

        if args.cmd == "pointer":
            sys.stdout.write(_dump(Pointer.parse(args.path).value_with_fail(_load_json(args.document))))
            return 0

        if args.cmd == "check":
            descriptor = json.loads(args.predicate)
            ok = evaluate(descriptor, _load_json(args.document))
            print("true" if ok else "false")
            return 0 if ok else 1
    except (JsonToolsError, ValueError, OSError) as exc:
        print(f"jsontools: {exc}", file=sys.stderr)
        return 1

    raise AssertionError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
