"""Run command: apply, compute and write over a range of time steps."""
import sys

import click

from tempograph.constants import OUTPUT_DIR, WRITE_EVERY
from tempograph.core.receipt import StopRule

from .output import error_box, success_box


@click.command()
@click.argument('input_dir', type=click.Path(file_okay=False))
@click.argument('start_step', type=int)
@click.argument('end_step', type=int)
@click.argument('source', type=int)
@click.option('--output-dir', '-o', default=OUTPUT_DIR, show_default=True,
              help='Directory for vertices-<N>.csv files')
@click.option('--write-every', default=WRITE_EVERY, show_default=True,
              help='Write arrivals every N time steps (0 disables)')
@click.option('--strict', is_flag=True,
              help='Abort on unreadable shards instead of dropping them')
@click.option('--allow-overwrite', is_flag=True,
              help='Re-adding a vertex replaces it instead of failing')
@click.option('--max-settled', type=int, default=None,
              help='Stop each search after settling N vertices')
@click.option('--workers', type=int, default=None,
              help='Shards read concurrently per time step')
def run(input_dir: str, start_step: int, end_step: int, source: int,
        output_dir: str, write_every: int, strict: bool, allow_overwrite: bool,
        max_settled: int, workers: int):
    """Compute earliest arrival times for steps [START_STEP, END_STEP)."""
    try:
        from tempograph.loop import run as run_loop

        summary = run_loop(
            input_dir,
            start_step,
            end_step,
            source,
            output_dir=output_dir,
            write_every=write_every,
            allow_overwrite=allow_overwrite or None,
            strict=strict or None,
            workers=workers,
            max_settled=max_settled,
        )

        last = summary.steps[-1] if summary.steps else None
        reachable = len(summary.last_result.reachable()) if summary.last_result else 0

        success_box("Run Complete", [
            ("Steps", f"{start_step}..{end_step - 1}" if summary.steps else "none"),
            ("Source", str(source)),
            ("Vertices", str(last.vertices if last else 0)),
            ("Edges", str(last.edges if last else 0)),
            ("Reachable", str(reachable)),
            ("Skipped Steps", str(len(summary.skipped_steps))),
            ("Files Written", str(len(summary.written))),
        ], f"tempo graph status {input_dir} {end_step}")

    except StopRule as e:
        error_box("Run: STOPRULE", str(e))
        sys.exit(2)
    except Exception as e:
        error_box("Run: ERROR", str(e))
        sys.exit(2)
