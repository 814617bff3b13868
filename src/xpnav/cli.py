"""Command line front end for the navigation data context.

Typical usage:
    xpnav --xplane-path "/opt/X-Plane 12" status
    xpnav nearby 40.64 -73.78 --radius 25 --kind vor
    xpnav procedures KJFK
    xpnav airport KJFK --raw
"""

import argparse
import asyncio
import sys
from pathlib import Path

from xpnav.core.config import ConfigError, ConfigLoader, NavSettings
from xpnav.core.logging_system import LoggingError, get_logger, initialize_logging
from xpnav.data.manager import NavDataContext
from xpnav.errors import XPNavError
from xpnav.navigation.spatial import NavaidFamily

logger = get_logger(__name__)

CONFIG_DIR = Path(__file__).parent / "config"

NEARBY_KINDS = ("all", "waypoints", "airports", "airspaces", "airways") + tuple(f.name.lower() for f in NavaidFamily)


def get_config_path(name: str) -> Path:
    """Path of a configuration file shipped inside the package.

    Args:
        name: Config filename (e.g., "logging.yaml")

    Returns:
        Absolute path to the config file, valid from a source checkout
        and from an installed wheel.
    """
    return CONFIG_DIR / name


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="xpnav - X-Plane navigation data tools")

    parser.add_argument(
        "--config",
        type=Path,
        default=get_config_path("settings.yaml"),
        help="Settings file (YAML)",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=get_config_path("logging.yaml"),
        help="Logging configuration file (YAML)",
    )
    parser.add_argument(
        "--xplane-path",
        type=Path,
        help="Simulator installation root (overrides the settings file)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Rescan every apt.dat even when the airport cache is current",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Load everything and print dataset counts")

    nearby = subparsers.add_parser("nearby", help="List navigation data around a point")
    nearby.add_argument("lat", type=float, help="Latitude in decimal degrees")
    nearby.add_argument("lon", type=float, help="Longitude in decimal degrees")
    nearby.add_argument("--radius", type=float, default=25.0, help="Radius in nautical miles")
    nearby.add_argument("--kind", choices=NEARBY_KINDS, default="all", help="What to list")

    procedures = subparsers.add_parser("procedures", help="Show resolved procedures of an airport")
    procedures.add_argument("icao", type=str, help="Airport ICAO code (e.g., KJFK)")

    airport = subparsers.add_parser("airport", help="Show one airport")
    airport.add_argument("icao", type=str, help="Airport ICAO code (e.g., KJFK)")
    airport.add_argument("--raw", action="store_true", help="Print the verbatim apt.dat block")

    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> NavSettings:
    if args.config.exists():
        settings = NavSettings.from_config(ConfigLoader.load(args.config))
    else:
        settings = NavSettings()

    if args.xplane_path is not None:
        settings.xplane_path = args.xplane_path
    return settings


def print_status(context: NavDataContext) -> None:
    status = context.get_status()
    print(f"Installation: {status.xplane_path}")
    for name, count in status.counts.items():
        flag = "" if status.loaded.get(name, True) else " (not loaded)"
        print(f"  {name:<14}{count:>8}{flag}")

    breakdown = status.airport_breakdown
    print(
        f"  airports from global: {breakdown.global_airports}, "
        f"custom scenery: {breakdown.custom_scenery} ({breakdown.custom_scenery_packs} packs)"
    )

    sources = context.data_sources()
    if sources is not None:
        print(f"  navigation data: {sources.global_source.display()}")


def print_nearby(context: NavDataContext, lat: float, lon: float, radius: float, kind: str) -> None:
    if kind in ("all", "waypoints"):
        for wp in context.waypoints_in_radius(lat, lon, radius):
            print(f"FIX  {wp.id:<6} {wp.region:<3} {wp.latitude:10.5f} {wp.longitude:11.5f}")

    if kind == "all" or kind.upper() in NavaidFamily.__members__:
        family = None if kind == "all" else NavaidFamily[kind.upper()]
        for nav in context.navaids_in_radius(lat, lon, radius, family):
            print(f"NAV  {nav.id:<6} {nav.type.value:<8} {nav.frequency:>8} {nav.name}")

    if kind in ("all", "airports"):
        for apt in context.airports_in_radius(lat, lon, radius):
            print(f"APT  {apt.icao:<6} {apt.name}")

    if kind in ("all", "airspaces"):
        for space in context.airspaces_near_point(lat, lon, radius):
            print(f"ASP  {space.airspace_class:<5} {space.name} ({space.lower_limit} - {space.upper_limit})")

    if kind in ("all", "airways"):
        for seg in context.airways_in_radius(lat, lon, radius):
            print(f"AWY  {seg.name:<6} {seg.from_fix} -> {seg.to_fix} FL{seg.base_fl}-FL{seg.top_fl}")


async def print_procedures(context: NavDataContext, icao: str) -> int:
    procedures = await context.get_airport_procedures(icao)
    if procedures is None:
        print(f"No procedures for {icao.upper()}")
        return 1

    for proc in procedures.all():
        legs = " ".join(wp.fix_id if wp.resolved else f"({wp.fix_id})" for wp in proc.waypoints)
        runway = proc.runway or "ALL"
        transition = f" {proc.transition}" if proc.transition else ""
        print(f"{proc.type.value:<9} {proc.name:<8} {runway:<6}{transition}: {legs}")
    return 0


def print_airport(context: NavDataContext, icao: str, raw: bool) -> int:
    record = context.get_airport(icao)
    if record is None:
        print(f"Unknown airport {icao.upper()}")
        return 1

    source = record.pack_name if record.is_custom else "Global Scenery"
    print(f"{record.icao} {record.name}")
    print(f"  position: {record.latitude:.6f} {record.longitude:.6f}, elevation {record.elevation:.0f} ft")
    print(f"  type: {record.field_type.value}, source: {source}")
    print(f"  transition: {context.get_transition_altitude(icao)} ft / {context.get_transition_level(icao)}")
    if raw:
        print(record.data)
    return 0


async def run(args: argparse.Namespace) -> int:
    context = NavDataContext(load_settings(args))
    try:
        await context.reload(force=args.force)

        if args.command == "status":
            print_status(context)
        elif args.command == "nearby":
            print_nearby(context, args.lat, args.lon, args.radius, args.kind)
        elif args.command == "procedures":
            return await print_procedures(context, args.icao)
        elif args.command == "airport":
            return print_airport(context, args.icao, args.raw)
        return 0
    finally:
        context.store.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)

    try:
        if args.logging_config.exists():
            initialize_logging(args.logging_config, use_platform_dir=True)
        else:
            initialize_logging(use_platform_dir=True)
    except LoggingError as e:
        print(f"Logging disabled: {e}", file=sys.stderr)

    try:
        return asyncio.run(run(args))
    except (ConfigError, XPNavError) as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
