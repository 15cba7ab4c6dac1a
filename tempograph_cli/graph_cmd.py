"""Graph commands: status, dump."""
import sys

import click

from tempograph.core.receipt import StopRule

from .output import error_box, success_box


@click.group()
def graph():
    """Inspect the temporal graph after applying mutations."""
    pass


@graph.command()
@click.argument('input_dir', type=click.Path(file_okay=False))
@click.argument('end_step', type=int)
@click.option('--start', 'start_step', default=0, help='First time step to apply')
@click.option('--strict', is_flag=True,
              help='Abort on unreadable shards instead of dropping them')
@click.option('--allow-overwrite', is_flag=True,
              help='Re-adding a vertex replaces it instead of failing')
def status(input_dir: str, end_step: int, start_step: int, strict: bool, allow_overwrite: bool):
    """Show vertex/edge counts after applying steps [--start, END_STEP)."""
    try:
        from tempograph.loop import build_graph

        g = build_graph(input_dir, end_step, start_step=start_step,
                        allow_overwrite=allow_overwrite or None, strict=strict or None)
        closed_vertices = sum(1 for v in g.vertices.values() if v.is_closed)
        closed_edges = sum(
            1 for nbrs in g.adjacency().values() for e in nbrs.values() if e.is_closed
        )

        success_box("Graph Status", [
            ("Steps Applied", str(max(end_step - start_step, 0))),
            ("Vertices", str(g.vertex_count())),
            ("Closed Vertices", str(closed_vertices)),
            ("Edges", str(g.edge_count())),
            ("Closed Edges", str(closed_edges)),
        ], f"tempo graph dump {input_dir} {end_step}")

    except StopRule as e:
        error_box("Graph Status: STOPRULE", str(e))
        sys.exit(2)
    except Exception as e:
        error_box("Graph Status: ERROR", str(e))
        sys.exit(2)


@graph.command()
@click.argument('input_dir', type=click.Path(file_okay=False))
@click.argument('end_step', type=int)
@click.option('--start', 'start_step', default=0, help='First time step to apply')
@click.option('--format', 'output_format', default='text',
              type=click.Choice(['text', 'json']),
              help='Output format')
@click.option('--output', '-o', help='Output file path')
@click.option('--strict', is_flag=True,
              help='Abort on unreadable shards instead of dropping them')
@click.option('--allow-overwrite', is_flag=True,
              help='Re-adding a vertex replaces it instead of failing')
def dump(input_dir: str, end_step: int, start_step: int, output_format: str, output: str,
         strict: bool, allow_overwrite: bool):
    """Export the graph after applying steps [--start, END_STEP)."""
    try:
        from tempograph.loop import build_graph

        g = build_graph(input_dir, end_step, start_step=start_step,
                        allow_overwrite=allow_overwrite or None, strict=strict or None)
        content = g.to_json() if output_format == 'json' else g.dump()

        if output:
            with open(output, 'w') as f:
                f.write(content)
            click.echo(f"Written to {output}")
        else:
            click.echo(content)

    except StopRule as e:
        error_box("Dump: STOPRULE", str(e))
        sys.exit(2)
    except Exception as e:
        error_box("Dump: ERROR", str(e))
        sys.exit(2)
