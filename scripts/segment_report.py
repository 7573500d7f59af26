from __future__ import annotations

import argparse
from datetime import timedelta
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
BACKEND_ROOT = ROOT / 'backend'
sys.path.insert(0, str(BACKEND_ROOT))

from journeyscope.core.config import get_settings
from journeyscope.core.logging import configure_logging
from journeyscope.db.session import SessionLocal
from journeyscope.schemas.common import SegmentType
from journeyscope.services.analytics.segments import segment_records
from journeyscope.services.analytics.service import build_segment_comparison, segment_out
from journeyscope.services.errors import RowSourceError
from journeyscope.services.row_source import AnalysisScope, load_records
from journeyscope.utils.timezone import utc_now


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Print time segments and segment-over-segment metric changes for a company.',
    )
    parser.add_argument('company_id', type=int)
    parser.add_argument('account_id')
    parser.add_argument(
        '--mode',
        choices=[mode.value.lower() for mode in SegmentType],
        default='batch',
        help='Segment by analysis batch, calendar week (Monday start) or calendar month.',
    )
    parser.add_argument(
        '--compare',
        action='store_true',
        help='Also print metrics for each segment against the one before it.',
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging()

    account_id = args.account_id.strip()
    if not account_id:
        print('account_id must not be blank', file=sys.stderr)
        return 2
    end = utc_now()
    scope = AnalysisScope(
        company_id=args.company_id,
        account_id=account_id,
        is_super_admin=settings.is_super_admin(account_id),
        start=end - timedelta(days=settings.segment_lookback_days),
        end=end,
    )
    mode = SegmentType(args.mode.upper())

    with SessionLocal() as session:
        try:
            segments = segment_records(load_records(session, scope), mode)
        except RowSourceError as exc:
            print(f'Failed to load segments: {exc}', file=sys.stderr)
            return 1

        if not segments:
            print(f'No responses for company {args.company_id} in the last {settings.segment_lookback_days} days.')
            return 0

        for segment in segments:
            if not args.compare:
                print(segment_out(segment).model_dump_json())
                continue
            try:
                comparison = build_segment_comparison(
                    session,
                    scope=scope,
                    segments=segments,
                    segment_id=segment.id,
                    positive_values=settings.feature_positive_values,
                )
            except RowSourceError as exc:
                print(f'Failed to load metrics for {segment.id}: {exc}', file=sys.stderr)
                return 1
            print(json.dumps(comparison.model_dump(mode='json'), indent=2))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
