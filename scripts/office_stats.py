#!/usr/bin/env python3
"""
Query BLS labor statistics for a Wage and Hour office

Reference tables are read from the configured paths (COUNTY_REFERENCE_PATH,
MSA_REFERENCE_PATH); BLS extracts are downloaded on first use and kept in
memory for the rest of the run.

Usage:
    # List regional and district offices
    python scripts/office_stats.py list

    # Check a name (prints the closest match on a miss)
    python scripts/office_stats.py resolve "Chicago District Office"

    # List MSAs and the offices serving them
    python scripts/office_stats.py msas

    # Aggregated LAUS for a region
    python scripts/office_stats.py query laus "Midwest Region"

    # County-level QCEW rows, saved to CSV
    python scripts/office_stats.py query qcew "Chicago District Office" --no-aggregate --out chicago_qcew.csv

Datasets:
    laus = Local Area Unemployment Statistics (county, last 14 months)
    qcew = Quarterly Census of Employment and Wages (county)
    oews = Occupational Employment and Wage Statistics (MSA series)
    ces  = Current Employment Statistics, state and metro (MSA series)
"""
import sys
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pandas as pd

from geowhd.exceptions import GeoWHDError
from geowhd.geography.models import OfficeKind
from geowhd.logging_config import configure_logging
from geowhd.service import GeoWHDService


def cmd_list(service: GeoWHDService, args) -> None:
    names = service.list_offices()
    print(f"Regional offices ({len(names.regional_offices)}):")
    for name in names.regional_offices:
        print(f"  {name}")
    print(f"\nDistrict offices ({len(names.district_offices)}):")
    for name in names.district_offices:
        print(f"  {name}")


def cmd_resolve(service: GeoWHDService, args) -> None:
    office = service.resolve_office(args.name)
    print(f"{office.name} ({office.kind.value})")
    print(f"  Counties: {len(office.county_fips_codes())}")
    print(f"  MSAs:     {len(office.metro_area_codes())}")
    if office.kind == OfficeKind.DISTRICT:
        print(f"  Region:   {office.region_name}")
    else:
        print(f"  District offices: {', '.join(office.district_office_names())}")


def cmd_msas(service: GeoWHDService, args) -> None:
    for msa in service.get_msas():
        offices = ", ".join(sorted(msa.district_office_names)) or "-"
        print(f"{msa.area_code}  {msa.name or '':<50}  {offices}")


def cmd_query(service: GeoWHDService, args) -> None:
    print("=" * 80)
    print(f"{args.dataset.upper()} FOR {args.office}")
    print("=" * 80)

    df = service.query(args.dataset, args.office, args.aggregate)
    print(f"Rows: {len(df)}")

    if args.out:
        df.to_csv(args.out, index=False)
        print(f"Saved to {args.out}")
    else:
        with pd.option_context("display.max_columns", None, "display.width", 200):
            print(df.head(args.limit).to_string(index=False))
        if len(df) > args.limit:
            print(f"... {len(df) - args.limit} more rows (use --out to save all)")


def main():
    parser = argparse.ArgumentParser(
        description="Query BLS statistics for Wage and Hour offices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--log-level',
        help='Override LOG_LEVEL from settings'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('list', help='List office names')

    resolve_parser = subparsers.add_parser('resolve', help='Resolve an office name')
    resolve_parser.add_argument('name')

    subparsers.add_parser('msas', help='List MSAs and their district offices')

    query_parser = subparsers.add_parser('query', help='Query a dataset for an office')
    query_parser.add_argument('dataset', choices=['laus', 'qcew', 'oews', 'ces'])
    query_parser.add_argument('office')
    query_parser.add_argument(
        '--aggregate',
        dest='aggregate',
        action='store_true',
        default=None,
        help='Sum across the office\'s counties (laus, qcew)'
    )
    query_parser.add_argument(
        '--no-aggregate',
        dest='aggregate',
        action='store_false',
        help='Return per-county or per-series rows'
    )
    query_parser.add_argument(
        '--out',
        help='Write all rows to this CSV file'
    )
    query_parser.add_argument(
        '--limit',
        type=int,
        default=20,
        help='Rows to print when --out is not given (default: 20)'
    )

    args = parser.parse_args()
    configure_logging(level=args.log_level)

    commands = {
        'list': cmd_list,
        'resolve': cmd_resolve,
        'msas': cmd_msas,
        'query': cmd_query,
    }

    try:
        service = GeoWHDService.from_reference_files()
        commands[args.command](service, args)
    except (GeoWHDError, ValueError) as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
