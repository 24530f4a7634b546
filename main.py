from rich.pretty import pprint

from pincer import *

__prog__ = "app"

HELP = """\
App

USAGE:
  app [OPTIONS] --number NUMBER [INPUT]

FLAGS:
  -h, --help            Prints help information

OPTIONS:
  --number NUMBER       Sets a number
  --opt-number NUMBER   Sets an optional number
  --width WIDTH         Sets width [default: 10]

ARGS:
  <INPUT>
"""


def width(text):
    if (value := int(text)) <= 0:
        raise ValueError("width must be positive")
    return value


def parse(arguments):
    return {
        "number": arguments.value_from_fn("--number", int),
        "opt_number": arguments.opt_value_from_fn("--opt-number", int),
        "width": arguments.opt_value_from_fn("--width", width, 10),
        "input": arguments.free_from_str(),
    }


if __name__ == '__main__':
    arguments = Arguments.from_env()

    if arguments.contains(("-h", "--help")):
        print(HELP, end="")
        raise SystemExit(0)

    try:
        options = parse(arguments)
        arguments.finish()
    except ArgumentsError as fault:
        trigger(fault, shell=True, fancy=True)
    else:
        pprint(options)
