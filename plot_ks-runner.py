#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This file is a convenience wrapper for running ksplot directly from the source tree. By executing
`plot_ks-runner.py`, users can run ksplot without installing it.

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""

from ksplot.plot_ks import main

if __name__ == "__main__":
    main()
