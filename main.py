from rich.pretty import pprint

from inparse import *

__prog__ = "inparse-demo"


def build():
    return (
        Parser(shell=True, fancy=True, colorful=True)
        .add_help_option()
        .add_option(lambda: FlagOption("-v", "--verbose").add_description("Print every step.").add_default_value(False))
        .add_option(lambda: SingleOption("-o", "--output").add_description("Destination file."))
        .add_option(
            lambda: SingleOption("-t", "--threads")
            .add_description("Worker threads (1 to 64).")
            .to_int()
            .transform_before_check()
            .add_constraint(between(1, 64))
            .add_default_value(1)
        )
        .add_option(lambda: CompoundOption("-i", "--inputs").add_description("Files to process."))
    )


if __name__ == '__main__':
    import sys

    parser = build().parse(sys.argv)
    pprint({
        "verbose": parser.get_value("-v", bool),
        "output": parser.get_value("-o", str),
        "threads": parser.get_value("-t", int),
        "inputs": parser.get_value("-i", list[str]),
    })
