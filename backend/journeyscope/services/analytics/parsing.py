from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import json
from typing import Any

from journeyscope.services.errors import MalformedFieldError


@dataclass(frozen=True, slots=True)
class ParsedFeatures:
    features: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParsedRankings:
    rankings: dict[str, int] = field(default_factory=dict)
    source_format: str = 'empty'


@dataclass(frozen=True, slots=True)
class ParseFailure:
    field: str
    reason: str
    raw: str


SolutionAnalysisResult = ParsedFeatures | ParseFailure
RankListResult = ParsedRankings | ParseFailure


def parse_solution_analysis(raw: Any) -> SolutionAnalysisResult:
    """Read a solution analysis stored either as a JSON object or as a JSON-encoded string."""
    try:
        features = _decode_json_object('solution_analysis', raw)
    except MalformedFieldError as exc:
        return ParseFailure(field=exc.field, reason=exc.reason, raw=_raw_text(raw))
    return ParsedFeatures(features={str(key): value for key, value in features.items()})


def parse_rank_list(raw: str | None) -> RankListResult:
    """Parse per-platform rankings.

    Tries a JSON object ``{"Perplexity": 3}`` first and falls back to comma-separated
    ``platform:position`` pairs. A blank value yields empty rankings.
    """
    if raw is None or not str(raw).strip():
        return ParsedRankings()

    text = str(raw).strip()
    try:
        decoded = json.loads(text)
    except ValueError:
        decoded = None
    else:
        if not isinstance(decoded, Mapping):
            return ParseFailure(field='rank_list', reason='expected a JSON object', raw=text)
        try:
            return ParsedRankings(
                rankings={str(platform).strip(): _to_position(value) for platform, value in decoded.items()},
                source_format='json',
            )
        except MalformedFieldError as exc:
            return ParseFailure(field=exc.field, reason=exc.reason, raw=text)

    rankings: dict[str, int] = {}
    for pair in text.split(','):
        if not pair.strip():
            continue
        platform, sep, position = pair.partition(':')
        if not sep or not platform.strip() or not position.strip():
            return ParseFailure(field='rank_list', reason=f'invalid pair {pair.strip()!r}', raw=text)
        try:
            rankings[platform.strip()] = _to_position(position.strip())
        except MalformedFieldError as exc:
            return ParseFailure(field=exc.field, reason=exc.reason, raw=text)
    return ParsedRankings(rankings=rankings, source_format='csv')


def _decode_json_object(field_name: str, raw: Any) -> Mapping[str, Any]:
    if raw is None:
        raise MalformedFieldError(field_name, 'value is missing')
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8', errors='replace')
    if not isinstance(raw, str):
        raise MalformedFieldError(field_name, f'unsupported type {type(raw).__name__}')
    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        raise MalformedFieldError(field_name, f'invalid JSON ({exc.msg})') from exc
    if not isinstance(decoded, Mapping):
        raise MalformedFieldError(field_name, 'expected a JSON object')
    return decoded


def _to_position(value: Any) -> int:
    if isinstance(value, bool):
        raise MalformedFieldError('rank_list', f'invalid position {value!r}')
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise MalformedFieldError('rank_list', f'invalid position {value!r}') from exc


def _raw_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return json.dumps(raw)
    except (TypeError, ValueError):
        return repr(raw)
