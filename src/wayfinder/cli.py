from __future__ import annotations

import argparse
import sys

from rich.console import Console
from rich.table import Table

from wayfinder.config import settings
from wayfinder.core.display import format_distance, format_duration
from wayfinder.core.engine import Navigator
from wayfinder.core.errors import DestinationNotFound, GeocodingUnavailable, LocationError
from wayfinder.core.models import Coordinate, TransportMode
from wayfinder.logs import MemorySink, configure_logging
from wayfinder.providers.location import StaticLocationSource, TermuxLocationSource
from wayfinder.providers.registry import build_providers


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Turn-by-turn route from here to a destination")
    ap.add_argument("--to", required=True, help="Destination text, e.g. 'Marina Bay Sands'")
    where = ap.add_mutually_exclusive_group(required=True)
    where.add_argument("--from", dest="origin", help="Start as 'lat,lon'")
    where.add_argument("--gps", action="store_true", help="Start from a fresh termux-location fix")
    ap.add_argument("--accuracy", type=float, default=None, help="Accuracy (m) of --from, if known")
    ap.add_argument("--mode", choices=[m.value for m in TransportMode], default="car")
    ap.add_argument("--provider", default=settings.providers, help="e.g. nominatim+ors, nominatim+fallback, mock")
    ap.add_argument("--debug", action="store_true", help="Print captured engine log after the run")
    args = ap.parse_args(argv)

    sink = MemorySink()
    configure_logging("DEBUG" if args.debug else settings.log_level, sinks=[sink], console=False)
    console = Console()

    if args.gps:
        source = TermuxLocationSource()
    else:
        try:
            source = StaticLocationSource(Coordinate.parse(args.origin), args.accuracy)
        except ValueError as e:
            ap.error(f"--from must be 'lat,lon' within range: {e}")

    geocoder, router = build_providers(args.provider)
    nav = Navigator(geocoder, router, source=source)

    try:
        obs = nav.locate()
        address = nav.describe()
        result = nav.navigate(args.to, TransportMode(args.mode))
    except LocationError as e:
        console.print(f"[red]Location unavailable:[/red] {e}")
        return 2
    except DestinationNotFound as e:
        console.print(f"[red]{e}[/red]")
        return 3
    except GeocodingUnavailable as e:
        console.print(f"[red]Geocoding service unavailable:[/red] {e}")
        return 4
    finally:
        if args.debug and sink.records:
            console.rule("engine log")
            console.print(sink.dump(), markup=False, highlight=False)

    acc = f" (±{obs.accuracy_m:.0f}m)" if obs.accuracy_m is not None else ""
    console.print(f"[green]From:[/green] {address.formatted_address}{acc}")
    console.print(f"[green]To:[/green] {args.to} ({result.destination.as_text()})")

    route = result.route
    note = " [yellow](straight-line estimate, routing service unavailable)[/yellow]" if route.source == "fallback" else ""
    console.print(
        f"[bold]{format_distance(route.total_distance_m)}[/bold] · "
        f"[bold]{format_duration(route.total_duration_s)}[/bold] by {args.mode}{note}"
    )

    table = Table(title=f"Directions to {args.to}")
    table.add_column("#", justify="right")
    table.add_column("Instruction")
    table.add_column("Distance", justify="right")
    table.add_column("Time", justify="right")

    for i, step in enumerate(route.steps, start=1):
        table.add_row(
            str(i),
            step.instruction,
            format_distance(step.distance_m),
            format_duration(step.duration_s),
        )

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
