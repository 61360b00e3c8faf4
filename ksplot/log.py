#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This module contains the class used for writing output to both stdout and a log file, based on
Unicycler's logging (https://github.com/rrwick/Unicycler)

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""


import datetime
import re
import shutil
import subprocess
import sys
import textwrap
from pathlib import Path


class Log(object):

    def __init__(self, log_filename=None, stdout_verbosity_level=1):
        """
        'log_filename' can be a str or a Path, when None nothing is written to disk
        """
        self.log_filename = Path(log_filename) if log_filename else None

        try:
            self.colours = int(subprocess.check_output(["tput", "colors"],
                                                       stderr=subprocess.DEVNULL).decode().strip())
        except (ValueError, subprocess.CalledProcessError, FileNotFoundError, AttributeError):
            self.colours = 1

        # The log file is never silent, even when stdout is
        self.stdout_verbosity_level = stdout_verbosity_level
        self.log_file_verbosity_level = max(1, stdout_verbosity_level)

        if self.log_filename:
            log_file_exists = self.log_filename.is_file()
            self.log_file = open(self.log_filename, "at", 1, encoding="utf8")  # line buffering
            if log_file_exists:
                self.log_file.write("\n\n\n")
        else:
            self.log_file = None

    def close(self):
        if self.log_file and not self.log_file.closed:
            self.log_file.close()

    def __del__(self):
        self.close()


# Replaced by the pipeline once the output directory exists
logger = Log()


def log(text, verbosity=1, stderr=False, end="\n", print_to_screen=True, write_to_log_file=True):
    text = f"{text}"
    text_no_formatting = remove_formatting(text)

    # With 8 colours or fewer the 'dim' format is not rendered, so it is removed
    if stderr or (verbosity <= logger.stdout_verbosity_level and print_to_screen):
        if logger.colours <= 1:
            text = text_no_formatting
        elif logger.colours <= 8:
            text = remove_dim_formatting(text)
        if stderr:
            print(text, file=sys.stderr, end=end, flush=True)
        else:
            print(text, end=end, flush=True)

    if logger.log_file and verbosity <= logger.log_file_verbosity_level and write_to_log_file:
        logger.log_file.write(text_no_formatting)
        logger.log_file.write("\n")


def log_section_header(message, verbosity=1, single_newline=False):
    """
    Logs a section header with a timestamp. In the log file the header is underlined with dashes
    since it has no ANSI formatting.
    """
    if single_newline:
        log("", verbosity)
    else:
        log("\n", verbosity)

    time = get_timestamp()
    time_str = f"({time})"
    if logger.colours > 8:
        time_str = dim(time_str)
    log(f"{bold_yellow_underline(message)} {time_str}", verbosity)
    log("-" * (len(message) + 3 + len(time)), verbosity, print_to_screen=False)


def log_explanation(text, verbosity=1, extra_empty_lines_after=1, indent_size=4):
    """
    Explanatory text is wrapped to the terminal width on stdout but kept in a single line in the
    log file.
    """
    text = f'{" " * indent_size}{text}'
    terminal_width = shutil.get_terminal_size().columns
    for line in textwrap.wrap(text, width=terminal_width - 1):
        formatted_text = dim(line) if logger.colours > 8 else line
        log(formatted_text, verbosity=verbosity, write_to_log_file=False)
    log(text, verbosity=verbosity, print_to_screen=False)

    for _ in range(extra_empty_lines_after):
        log("", verbosity=verbosity)


def log_parameter(name, value, margin, note=""):
    """
    Logs a 'name: value' line with the names right-aligned to `margin`, `note` is dimmed
    """
    line = f"{name:>{margin}}: {bold(value)}"
    if note:
        line += f" {dim(note)}"
    log(line)


def int_to_str(num, max_num=0):
    if num is None:
        num_str = "n/a"
    else:
        num_str = f"{num:,}"
    max_str = f"{int(max_num):,}"
    return num_str.rjust(len(max_str))


def get_timestamp():
    return f"{datetime.datetime.now():%Y-%m-%d %H:%M:%S}"


END_FORMATTING = "\033[0m"
BOLD = "\033[1m"
UNDERLINE = "\033[4m"
YELLOW = "\033[93m"
DIM = "\033[2m"


def bold(text):
    return f"{BOLD}{text}{END_FORMATTING}"


def bold_yellow_underline(text):
    return f"{YELLOW}{BOLD}{UNDERLINE}{text}{END_FORMATTING}"


def dim(text):
    return f"{DIM}{text}{END_FORMATTING}"


def remove_formatting(text):
    return re.sub(r"\033.*?m", r"", text)


def remove_dim_formatting(text):
    return re.sub(r"\033\[2m", r"", text)
