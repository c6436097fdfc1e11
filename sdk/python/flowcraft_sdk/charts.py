"""
Vesting charts

Samples evaluate_stream over a time window and renders the vested,
withdrawn and deposited lines. Amounts stay integers until they are
handed to matplotlib.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .models import Stream
from .utils import Utils
from .vesting import evaluate_stream, fully_vested_at

logger = logging.getLogger(__name__)

COLORS = {
    'primary': '#00D4AA',      # vested
    'secondary': '#FF6B6B',    # withdrawn
    'accent': '#4ECDC4',       # deposited
    'dark': '#1a1a2e',
    'panel': '#16213e',
    'light': '#eaeaea'
}

STYLE = {
    'figure.facecolor': COLORS['dark'],
    'axes.facecolor': COLORS['panel'],
    'axes.edgecolor': COLORS['light'],
    'text.color': COLORS['light'],
    'axes.labelcolor': COLORS['light'],
    'xtick.color': COLORS['light'],
    'ytick.color': COLORS['light'],
    'font.size': 12,
    'axes.titlesize': 16,
    'axes.labelsize': 14,
}


def vesting_curve(
    stream: Stream, start: int, end: int, points: int = 200
) -> Tuple[np.ndarray, List[int]]:
    """
    Sample total vested amount between start and end (inclusive).

    Returns:
        Tuple of (integer timestamps, vested amounts as Python ints)
    """
    if end < start:
        raise ValueError(f"end ({end}) is before start ({start})")
    if points < 2:
        raise ValueError(f"need at least 2 points, got {points}")

    times = np.unique(np.linspace(start, end, points).astype(np.int64))
    vested = [evaluate_stream(stream, int(t)).total_vested for t in times]
    return times, vested


def default_window(stream: Stream) -> Tuple[int, int]:
    """From the last checkpoint to a tenth past full vesting."""
    start = stream.last_update_time
    span = max(fully_vested_at(stream) - start, 1)
    return start, start + span + max(span // 10, 1)


def plot_vesting_curve(
    stream: Stream,
    output: Path,
    start: Optional[int] = None,
    end: Optional[int] = None,
    points: int = 200,
    decimals: int = 0,
    title: Optional[str] = None,
) -> Path:
    """Line chart: vested amount over time, with deposited and withdrawn levels"""
    if start is None or end is None:
        default_start, default_end = default_window(stream)
        start = default_start if start is None else start
        end = default_end if end is None else end

    times, vested = vesting_curve(stream, start, end, points)
    final = evaluate_stream(stream, int(times[-1]))
    scale = 10 ** decimals
    elapsed = times - start

    with plt.rc_context(STYLE):
        fig, ax = plt.subplots(figsize=(10, 6))

        vested_tokens = np.array(vested, dtype=float) / scale
        ax.plot(elapsed, vested_tokens, '-', color=COLORS['primary'], linewidth=3, label='Vested')
        ax.fill_between(elapsed, vested_tokens, alpha=0.2, color=COLORS['primary'])
        ax.axhline(y=final.total_deposited / scale, color=COLORS['accent'],
                   linestyle='--', alpha=0.7, label='Deposited')
        ax.axhline(y=stream.total_withdrawn / scale, color=COLORS['secondary'],
                   linestyle=':', alpha=0.7, label='Withdrawn')

        ax.set_xlabel(f'Seconds since {start}')
        ax.set_ylabel('Amount (tokens)' if decimals else 'Amount (base units)')
        ax.set_title(title or f'Stream {Utils.format_address(stream.subscriber)}',
                     fontweight='bold')
        ax.legend(loc='lower right')
        ax.grid(alpha=0.3)

        ax.text(0.02, 0.98, f'Claimable: {Utils.format_token_amount(final.claimable, decimals)}',
                transform=ax.transAxes, fontsize=12, verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor=COLORS['primary'], alpha=0.3))

        fig.tight_layout()
        output = Path(output)
        fig.savefig(output, dpi=150, bbox_inches='tight')
        plt.close(fig)

    logger.info(f"Saved vesting chart to {output}")
    return output


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='flowcraft-plot',
        description='Plot the vesting curve of a stream snapshot (JSON).',
    )
    parser.add_argument('snapshot', type=Path, help='stream snapshot JSON file')
    parser.add_argument('-o', '--output', type=Path, default=Path('vesting.png'))
    parser.add_argument('--start', type=int, help='window start (Unix seconds)')
    parser.add_argument('--end', type=int, help='window end (Unix seconds)')
    parser.add_argument('--points', type=int, default=200)
    parser.add_argument('--decimals', type=int, default=0, help='mint decimals for labels')
    args = parser.parse_args(argv)

    with open(args.snapshot, 'r') as f:
        stream = Stream.from_dict(json.load(f))

    output = plot_vesting_curve(
        stream, args.output, args.start, args.end, args.points, args.decimals
    )
    print(f'✓ {output}')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
