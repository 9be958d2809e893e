"""
Result builder for JSON output.
"""

from typing import Any, Dict, List

from ..core.types import UNKNOWN_BUCKET, AggregationResult


def aggregation_to_dict(aggregation: AggregationResult) -> Dict[str, Any]:
    """Convert a bucket to the external output format."""
    return {
        'total': aggregation['total'],
        'self': aggregation['self'],
        'attributed': aggregation['attributed'],
        'functionName': aggregation['function_name'],
        'moduleName': aggregation['module_name'],
        'callframes': [
            {
                'self': info['self'],
                'stack': [frame.to_dict() for frame in info['stack']],
            }
            for info in aggregation['callframes']
        ],
    }


def prepare_results(analyzer) -> Dict[str, Any]:
    """
    Convert analyzer results to a structured format for JSON output.

    Args:
        analyzer: ProfileAnalyzer instance with completed analysis

    Returns:
        Dictionary with summary, aggregations and categories
    """
    profile = analyzer.profile

    # Section 1: Raw buckets in output format
    aggregations = {
        key: aggregation_to_dict(aggregation)
        for key, aggregation in analyzer.aggregations.items()
    }

    # Section 2: Buckets ranked by self time
    ranked = sorted(
        (aggregation for key, aggregation in analyzer.aggregations.items() if key != UNKNOWN_BUCKET),
        key=lambda a: -a['self']
    )
    buckets_summary = [
        {
            'function_name': a['function_name'],
            'module_name': a['module_name'],
            'self_time': a['self'],
            'self_time_formatted': analyzer.format_time(a['self']),
            'total_time': a['total'],
            'total_time_formatted': analyzer.format_time(a['total']),
            'attributed_time': a['attributed'],
            'attributed_time_formatted': analyzer.format_time(a['attributed']),
            'stack_count': len(a['callframes']),
        }
        for a in ranked
    ]

    # Section 3: Category roll-ups
    categories: List[Dict[str, Any]] = []
    for category, members in analyzer.categorized.items():
        self_time = sum(a['self'] for a in members)
        categories.append({
            'name': category,
            'self_time': self_time,
            'self_time_formatted': analyzer.format_time(self_time),
            'buckets': [f"{a['module_name']}@{a['function_name']}" for a in members],
        })
    categories.sort(key=lambda c: -c['self_time'])

    unknown = analyzer.aggregations[UNKNOWN_BUCKET]
    attributed_self = sum(a['self'] for a in ranked)

    final_results = {
        'summary': {
            'node_count': len(profile.nodes),
            'sample_count': len(profile.samples),
            'hit_count': profile.hit_count,
            'start_time': profile.start,
            'end_time': profile.end,
            'duration': profile.duration,
            'duration_formatted': analyzer.format_time(profile.duration),
            'root_total_time': profile.root.total_time,
            'root_total_time_formatted': analyzer.format_time(profile.root.total_time),
            'attributed_time': attributed_self,
            'attributed_time_formatted': analyzer.format_time(attributed_self),
            'unknown_time': unknown['self'],
            'unknown_time_formatted': analyzer.format_time(unknown['self']),
        },
        'buckets': buckets_summary,
        'categories': categories,
        'aggregations': aggregations,
    }
    return final_results
