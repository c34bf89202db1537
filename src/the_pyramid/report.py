# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
report.py — Plotly charts of a finished run.

Reads the per-day CSV written by MetricsLogger and renders a self-contained
HTML page: the player's climb (money, recruits, level) and the shape of the
pyramid (node count, gini of node money).  Used by `sim.py --report`.
"""

import csv

import plotly.graph_objects as go

_PALETTE = ['#f5c542', '#44ff88', '#4fa3ff', '#ff6b6b']


def load_metrics(path) -> list:
    """Rows of a metrics_seed_*.csv, numbers converted back to numbers."""
    rows = []
    with open(path, newline='', encoding='utf-8') as f:
        for raw in csv.DictReader(f):
            row = {}
            for key, value in raw.items():
                try:
                    row[key] = float(value) if '.' in value else int(value)
                except ValueError:
                    row[key] = value
            rows.append(row)
    return rows


def _layout(fig: go.Figure, title: str, y_title: str) -> go.Figure:
    fig.update_layout(
        title=dict(text=title, font=dict(color='#dddddd', size=13), x=0.0),
        paper_bgcolor='#0e1117',
        plot_bgcolor='#111827',
        font=dict(color='white'),
        xaxis=dict(title='Day', gridcolor='#1e2233', zeroline=False),
        yaxis=dict(title=y_title, gridcolor='#1e2233'),
        legend=dict(bgcolor='rgba(0,0,0,0)', font=dict(color='white', size=11)),
        margin=dict(l=50, r=60, t=40, b=50),
        height=320,
    )
    return fig


def build_player_chart(rows: list) -> go.Figure:
    """Player money on the left axis, recruits and level on the right."""
    days = [r['day'] for r in rows]
    fig  = go.Figure()
    fig.add_trace(go.Scatter(
        x=days, y=[r['player_money'] for r in rows],
        mode='lines', name='Money',
        line=dict(color=_PALETTE[0], width=2),
        hovertemplate='$%{y:,.0f}<br>Day %{x}<extra></extra>',
    ))
    for idx, (key, label) in enumerate([('player_recruits', 'Recruits'),
                                        ('player_level', 'Level')], start=1):
        fig.add_trace(go.Scatter(
            x=days, y=[r[key] for r in rows],
            mode='lines', name=label, yaxis='y2',
            line=dict(color=_PALETTE[idx], width=1.5, dash='dot'),
        ))
    _layout(fig, 'Your Climb', 'Money')
    # Level 0 is the top, so the right axis runs upside down
    fig.update_layout(yaxis2=dict(title='Recruits / Level', overlaying='y',
                                  side='right', autorange='reversed',
                                  showgrid=False))
    return fig


def build_pyramid_chart(rows: list) -> go.Figure:
    days = [r['day'] for r in rows]
    fig  = go.Figure()
    fig.add_trace(go.Scatter(
        x=days, y=[r['nodes'] for r in rows],
        mode='lines', name='Nodes',
        line=dict(color=_PALETTE[2], width=2),
    ))
    fig.add_trace(go.Scatter(
        x=days, y=[r['gini'] for r in rows],
        mode='lines', name='Gini', yaxis='y2',
        line=dict(color=_PALETTE[3], width=2),
    ))
    _layout(fig, 'Pyramid Size & Inequality', 'Nodes')
    fig.update_layout(yaxis2=dict(title='Gini', overlaying='y', side='right',
                                  range=[0, 1], showgrid=False))
    return fig


def write_report(metrics_path, html_path) -> str:
    """Render both charts from *metrics_path* into one HTML file."""
    rows = load_metrics(metrics_path)
    figs = [build_player_chart(rows), build_pyramid_chart(rows)]
    with open(html_path, 'w', encoding='utf-8') as f:
        f.write('<html><head><meta charset="utf-8"><title>Pyramid run</title></head>'
                '<body style="background:#0e1117">\n')
        for i, fig in enumerate(figs):
            f.write(fig.to_html(full_html=False,
                                include_plotlyjs='cdn' if i == 0 else False))
        f.write('\n</body></html>\n')
    return str(html_path)
