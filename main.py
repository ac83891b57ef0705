from rich.pretty import pprint

from argot import *

__prog__ = "argot-demo"


def main():
    file, debug, verbosity = Slot("default.file"), Slot(False), Slot(0)
    package, release, commands, libs, files = Slot("main"), Slot(False), [], [], []

    parser = (
        Parser.from_args(shell=True)
        .app_name("argot-demo")
        .app_version("0.0.0")
        .app_desc("declarative token matching demo")
        .flag("D", "debug", "enter debug mode", debug)
        .count("v", "verbose", "increase verbosity (can be given multiple times)", verbosity)
        .arg("f", "file", "file to cat to stdout", file, label="FILE")
        .subcommand("build", "build a target", commands)
            .group("package", "package options")
                .arg("p", "package", "rename the package", package, label="PKG")
                .list("l", "lib", "libraries to link", libs, label="LIB")
                .done()
            .long_flag("release", "do a release build", release)
            .positional_list("files", "additional files to build", files)
            .done()
    )

    if parser.wants_help():
        parser.print_help()
        return

    parser.report_unused()
    pprint({
        "file": file.value,
        "debug": debug.value,
        "verbosity": verbosity.value,
        "commands": commands,
        "package": package.value,
        "release": release.value,
        "libs": libs,
        "files": files,
    })


if __name__ == '__main__':
    main()
