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


import time
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from . import settings
from .kaks import ks_bin_edges
from .misc import dim, elapsed_time, red


def build_ks_report(ks_csv, html_path, title, ks_min, ks_max, bin_size, version="", command=""):
    start = time.time()

    df = pd.read_csv(ks_csv)
    ks = df.loc[df[settings.KS_CSV_HEADER] < ks_max, settings.KS_CSV_HEADER].to_numpy()
    edges = ks_bin_edges(ks_min, ks_max, bin_size)
    counts, _ = np.histogram(ks, bins=edges)
    # Only the values within the bin edges are drawn
    ks_plotted = int(counts.sum())

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=(edges[:-1] + edges[1:]) / 2,
            y=counts,
            width=bin_size,
            customdata=np.stack([edges[:-1], edges[1:]], axis=-1),
            hovertemplate="<br>".join([
                "Bin: <b>%{customdata[0]:.3f} - %{customdata[1]:.3f}</b>",
                "Count: <b>%{y}</b>",
                "<extra></extra>",
            ]),
            marker=dict(
                color="#56B4E9",
                line=dict(
                    color="rgb(8,8,8)",
                    width=1,
                ),
            ),
        )
    )
    fig.update_layout(
        font_family="Arial",
        title_text=(
            f"<b>K<sub>s</sub> Plot for {title}</b><br>"
            f"<sup>({ks_plotted:,} pairs with K<sub>s</sub> in [{edges[0]:g}, {edges[-1]:g}],"
            f" bin size = {bin_size})</sup>"
        ),
        bargap=0,
        plot_bgcolor="rgb(255,255,255)",
    )
    fig.update_xaxes(
        title="Pairwise K<sub>s</sub>",
        range=[ks_min, ks_max],
        ticks="outside",
        showline=True,
        linecolor="rgb(8,8,8)",
    )
    fig.update_yaxes(
        title="Frequency",
        ticks="outside",
        showline=True,
        linecolor="rgb(8,8,8)",
        rangemode="tozero",
    )

    config = dict(
        toImageButtonOptions=dict(
            format="svg",
        ),
    )
    html_header = f"""
        <head>
            <meta charset="UTF-8">
            <meta name="viewport" content="width=device-width, initial-scale=1">
            <style>
                body {{
                    font-family: Arial, sans-serif;
                    margin: 50px;
                }}
                pre {{
                    background-color: #292929;
                    padding: 20px;
                    border-radius: 10px;
                    overflow-x: auto;
                }}
                code {{
                    font-family: Menlo, Courier, monospace;
                    font-size: 10pt;
                    color: #FFF;
                }}
            </style>
        </head>
        <body>
            <h2>ksplot: K<sub>s</sub> distribution of paralogs</h2>
            <pre><code>Version: {version}\nCommand: {command}</code></pre>
        </body>
    """
    html_path = Path(html_path)
    with open(html_path, "w") as f:
        f.write(html_header)
        f.write(fig.to_html(full_html=False, include_plotlyjs="cdn", config=config))

    if html_path.exists() and html_path.is_file():
        html_msg = dim(f"Report generated in {elapsed_time(time.time() - start)}")
    else:
        html_msg = red("Report not generated, verify your Python environment")

    return html_path, html_msg
