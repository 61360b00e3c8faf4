#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""


import argparse
import importlib
import os
import re
import shutil
import subprocess
import sys
from importlib import util
from pathlib import Path

from . import log
from .bioformats import ExternalToolError


def elapsed_time(total_seconds):
    """
    Return minutes, hours, or days if task took more than 60 seconds
    """
    if total_seconds <= 60:
        return f"{total_seconds:.3f}s"
    days, seconds = divmod(total_seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    time_str = ""
    for value, symbol in zip([days, hours, minutes, seconds], ["d", "h", "m", "s"]):
        if value == 0 and time_str == "":
            continue
        if symbol == "s":
            time_str += f"{value:.1f}{symbol} ({total_seconds:.3f}s)"
        else:
            time_str += f"{value:.0f}{symbol} "
    return time_str


def make_output_dir(out_dir):
    """
    Creates the output directory, if it doesn't already exist. The directory can be provided as a
    str or as a Path. Returns the created directory as a Path and a status message.
    """
    out_dir = Path(out_dir)
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True)
        except OSError:
            quit_with_error(f"ksplot was unable to make the output directory {out_dir}")
        message = "Output directory successfully created"
    elif list(out_dir.glob("*")):
        message = "Output directory already exists and files may be overwritten"
    else:
        message = "Output directory already exists"
    return out_dir.resolve(), message


def file_is_empty(file_path):
    """
    Check if file has no contents
    """
    return Path(file_path).stat().st_size == 0


def output_exists(file_path):
    """
    A step output counts as present only when the file exists and is not empty
    """
    file_path = Path(file_path)
    return file_path.is_file() and not file_is_empty(file_path)


def has_valid_ext(file_path, valid_extensions_list):
    """
    Checks if a filename has an extension within a list of valid extension. The argument 'file_path'
    can be a str or a Path
    """
    for ext in valid_extensions_list:
        if f"{file_path}".lower().endswith(ext.lower()):
            return True
    return False


def run_logged_command(command, log_path, tool_name, cwd=None):
    """
    Runs `command` writing the command line followed by its stdout and stderr to `log_path`,
    raises `ExternalToolError` when the program cannot be started or exits with an error
    """
    command = [f"{part}" for part in command]
    with open(log_path, "wt") as tool_log:
        tool_log.write(f"ksplot's {tool_name} command:\n  {' '.join(command)}\n\n")
        tool_log.flush()
        try:
            process = subprocess.run(command, stdout=tool_log, stderr=tool_log, cwd=cwd)
        except OSError as e:
            raise ExternalToolError(f"{tool_name} could not be executed: {e}") from e
        tool_log.write("\n\n")
    if process.returncode != 0:
        raise ExternalToolError(
            f"{tool_name} finished with exit status {process.returncode}, see '{log_path}'"
        )
    return log_path


def quit_with_error(message):
    """
    Displays the given message and ends the program's execution.
    """
    log.log(red(f"\nERROR: {message}\n"), 0, stderr=True)
    sys.exit(os.EX_SOFTWARE)


def successful_exit(message):
    """
    Exit the program showing a message with a successful status for UNIX
    """
    log.log_section_header(message)
    log.log("")
    sys.exit(os.EX_OK)


####################################################################################################
################################################################ FUNCTIONS TO VERIFY SOFTWARE STATUS
def format_dep_msg(dep_text, dep_version, dep_status):
    if dep_status == "not used":
        return f"{dep_text}{dim(dep_status)}"
    elif dep_status == "OK":
        version = f"v{dep_version}" if dep_version else "version unknown"
        return f"{dep_text}{bold(version)} {bold_green(dep_status)}"
    else:
        return f"{dep_text}{bold_red(dep_status)}"


def program_output(command):
    """
    Returns the combined stdout and stderr of `command` as text, programs that only print their
    version inside the usage message exit with a non-zero status so it is not checked
    """
    process = subprocess.Popen(command, stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
    return process.communicate()[0].decode(errors="replace")


def transdecoder_path_version(transdecoder_path):
    found_transdecoder_path = shutil.which(transdecoder_path)
    if found_transdecoder_path is None:
        return transdecoder_path, "", "not found"
    output = program_output([found_transdecoder_path, "--version"])
    version = re.search(r"(\d+\.\d+(?:\.\d+)?)", output)
    return found_transdecoder_path, version.group(1) if version else "", "OK"


def blat_path_version(blat_path):
    found_blat_path = shutil.which(blat_path)
    if found_blat_path is None:
        return blat_path, "", "not found"
    # First line of the usage looks like 'blat - Standalone BLAT v. 39x1 fast sequence search...'
    output = program_output([found_blat_path]).splitlines()
    version = re.search(r"v\.\s*(\S+)", output[0]) if output else None
    return found_blat_path, version.group(1) if version else "", "OK"


def kaks_calculator_path_version(kaks_calculator_path):
    found_kaks_calculator_path = shutil.which(kaks_calculator_path)
    if found_kaks_calculator_path is None:
        return kaks_calculator_path, "", "not found"
    output = program_output([found_kaks_calculator_path, "-h"])
    version = re.search(r"[Vv]ersion:?\s*(\d+(?:\.\d+)*)", output)
    return found_kaks_calculator_path, version.group(1) if version else "", "OK"


def python_library_check(library_name):
    library_found = bool(util.find_spec(library_name))
    library_version = ""
    library_status = "not found"
    if library_found:
        library = importlib.import_module(library_name)
        library_version = library.__version__
        library_status = "OK"
    return library_found, library_version, library_status


####################################################################################################
## FUNCTIONS TAKEN FROM UNICYCLER FOR HELP AND TEXT FORMATTING (https://github.com/rrwick/Unicycler)

END_FORMATTING = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
DIM = "\033[2m"


class MyHelpFormatter(argparse.HelpFormatter):
    """
    Custom formatter for argparse: adds the default values to the help texts, bolds the section
    headers and dims the help descriptions. Help texts starting with 'B|' keep their line breaks
    and indent the lines after the first one.
    """
    def __init__(self, prog):
        terminal_width = shutil.get_terminal_size().columns
        os.environ["COLUMNS"] = str(terminal_width)
        max_help_position = min(max(24, terminal_width // 3), 40)
        try:
            self.colours = int(subprocess.check_output(["tput", "colors"],
                                                       stderr=subprocess.DEVNULL).decode().strip())
        except (ValueError, subprocess.CalledProcessError, FileNotFoundError, AttributeError):
            self.colours = 1
        super().__init__(prog, max_help_position=max_help_position)

    def _get_help_string(self, action):
        help_text = action.help
        if (action.default != argparse.SUPPRESS and "default" not in help_text.lower()
                and action.default is not None and action.default is not False):
            help_text += f" (default: {action.default})"
        return help_text

    def start_section(self, heading):
        if self.colours > 1:
            heading = f"{BOLD}{heading}{END_FORMATTING}"
        super().start_section(heading)

    def _split_lines(self, text, width):
        if not text.startswith("B|"):
            return argparse.HelpFormatter._split_lines(self, text, width)
        wrapped_text_lines = []
        for i, line in enumerate(text[2:].splitlines()):
            indent = "" if i == 0 else "  "
            wrapped_text_lines += [
                f"{indent}{part}" for part in argparse.HelpFormatter._split_lines(
                    self, line, width - len(indent)
                )
            ]
        return wrapped_text_lines

    def _fill_text(self, text, width, indent):
        if text.startswith("R|"):
            return "".join(indent + line for line in text[2:].splitlines(keepends=True))
        else:
            return argparse.HelpFormatter._fill_text(self, text, width, indent)

    def _format_action(self, action):
        """
        Dims the help text of every option, the option strings keep the default style
        """
        formatted = super()._format_action(action)
        if self.colours <= 8 or not action.help:
            return formatted
        invocation = self._format_action_invocation(action)
        lines = []
        for line in formatted.splitlines(keepends=True):
            if invocation in line:
                head, sep, tail = line.partition(invocation)
            else:
                head, sep, tail = "", "", line
            help_text = tail.strip()
            if help_text:
                padding = tail[: len(tail) - len(tail.lstrip())]
                tail = f"{padding}{DIM}{help_text}{END_FORMATTING}\n"
            lines.append(f"{head}{sep}{tail}")
        return "".join(lines)


def red(text):
    return f"{RED}{text}{END_FORMATTING}"


def bold(text):
    return f"{BOLD}{text}{END_FORMATTING}"


def bold_green(text):
    return f"{GREEN}{BOLD}{text}{END_FORMATTING}"


def bold_red(text):
    return f"{RED}{BOLD}{text}{END_FORMATTING}"


def dim(text):
    return f"{DIM}{text}{END_FORMATTING}"
