#! /bin/env python3

from ZCalc import ZCalc, ZCalcDebug
from FoldVis import FoldVis
from Tokenizer import LineReader

import argparse
import sys


def getArgs(argv=None):
    parser = argparse.ArgumentParser(
        description="Line-oriented arithmetic calculator")
    parser.add_argument("-i", dest="src", type=str,
                        help="read expressions from this file instead of "
                        "stdin")
    parser.add_argument("-d", dest="debug", type=str,
                        help="write the parser trace to this file")
    parser.add_argument("-g", dest="graph", type=str,
                        help="render the folds of every line to this dot "
                        "file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    # Get args
    args = getArgs(argv)

    debug = ZCalcDebug(file=args.debug) if args.debug else None
    vis = FoldVis(filename=args.graph) if args.graph else None

    # Diagnostics may quote characters the terminal cannot encode
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(errors="backslashreplace")

    # Run calculator
    if args.src:
        reader = LineReader.open(args.src)
        if reader is None:
            return 1
        with reader:
            ZCalc(reader, debug=debug, vis=vis).run()
    else:
        ZCalc(LineReader(sys.stdin), debug=debug, vis=vis).run()

    if debug:
        debug.dump()
    if vis:
        vis.render()
    return 0


if __name__ == "__main__":
    sys.exit(main())
